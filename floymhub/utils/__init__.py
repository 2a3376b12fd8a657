"""Mini README: Injected collaborator helpers for the FLOYM ledger.

Exports the identifier generator and the clock used to stamp invoices,
payments and exam comparisons. Tests replace both with deterministic
callables when constructing a ``LedgerStore``.
"""

from .clock import today
from .identifiers import generate_id

__all__ = ["generate_id", "today"]
