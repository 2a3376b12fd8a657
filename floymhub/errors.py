"""Mini README: Exception and warning types raised by the ledger core.

Structure:
    * LedgerError - base class for ledger failures.
    * ValidationError - required input missing or out of range; nothing mutated.
    * NotFoundError - strict lookups on identifiers that do not exist.
    * PersistenceWarning - a snapshot could not be written to the key-value store.
"""

from __future__ import annotations


class LedgerError(Exception):
    """Base class for every error raised by the ledger core."""


class ValidationError(LedgerError, ValueError):
    """Raised when a draft is missing required fields or carries invalid values."""


class NotFoundError(LedgerError, KeyError):
    """Raised by strict lookups when an identifier is not registered."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message for API responses.
        return str(self.args[0]) if self.args else ""


class PersistenceWarning(UserWarning):
    """Emitted when the in-memory ledger could not be mirrored to storage."""
