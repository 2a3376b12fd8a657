"""Mini README: Billing ledger for the FLOYM Learning Hub.

This package holds the entity definitions (students, services, invoices with
nested payments, exam bookings, expenses) and the ``LedgerStore`` that owns
them. Reporting lives in ``floymhub.reporting`` and only reads from here.
"""

from .models import (
    ExamBooking,
    ExamStatus,
    Expense,
    ExpenseCategory,
    Invoice,
    InvoiceStatus,
    PaymentMode,
    PaymentRecord,
    Service,
    ServiceCategory,
    Student,
    StudentStatus,
)
from .store import COLLECTION_NAMES, LedgerStore, default_service_catalog

__all__ = [
    "COLLECTION_NAMES",
    "ExamBooking",
    "ExamStatus",
    "Expense",
    "ExpenseCategory",
    "Invoice",
    "InvoiceStatus",
    "LedgerStore",
    "PaymentMode",
    "PaymentRecord",
    "Service",
    "ServiceCategory",
    "Student",
    "StudentStatus",
    "default_service_catalog",
]
