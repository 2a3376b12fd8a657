"""Mini README: Core package initializer for the FLOYM Learning Hub ledger.

The package models a small training institute's back office: students, a
priced service catalog, invoices with partial payments, exam bookings and
expenses, plus the financial reporting derived from them. Submodules are kept
import-light so the ledger can be embedded without the web adapter.
"""

from .logging_utils import get_logger

__all__ = ["get_logger"]
