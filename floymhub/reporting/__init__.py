"""Mini README: Reporting helpers for the institute dashboard.

``ReportingEngine`` derives the headline financial figures from a ledger,
``build_invoice_document`` prepares invoices for printing and
``format_currency`` applies the single display format used across the app.
"""

from .documents import InvoiceDocument, InvoiceLine, build_invoice_document
from .engine import DashboardStats, ReportingEngine
from .formatting import format_currency

__all__ = [
    "DashboardStats",
    "InvoiceDocument",
    "InvoiceLine",
    "ReportingEngine",
    "build_invoice_document",
    "format_currency",
]
