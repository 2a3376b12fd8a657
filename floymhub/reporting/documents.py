"""Mini README: Printable invoice snapshots.

Structure:
    * InvoiceLine - one billed service with its resolved name and category.
    * InvoiceDocument - everything the print/export collaborator needs.
    * build_invoice_document - resolve an invoice's references against a ledger.

Student and service references are resolved leniently: a missing student
leaves the particulars blank and a missing service is listed as
``Unknown service`` at zero. Line prices show the current catalog price while
the totals use the amount captured on the invoice.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Optional

from ..ledger import Invoice, LedgerStore, PaymentRecord
from ..logging_utils import get_logger
from .formatting import format_currency

LOGGER = get_logger(__name__)

UNKNOWN_SERVICE = "Unknown service"
UNKNOWN_STUDENT = "Unknown student"
INSTITUTE_NAME = "FLOYM Learning Hub"


@dataclass(slots=True)
class InvoiceLine:
    """One billed service as printed, priced from the current catalog."""

    service_id: str
    name: str
    category: str
    price: float


@dataclass(slots=True)
class InvoiceDocument:
    """Resolved view of an invoice ready for rendering."""

    invoice_number: str
    issued_on: date
    student_name: Optional[str]
    student_phone: Optional[str]
    student_email: Optional[str]
    student_course: Optional[str]
    student_batch: Optional[str]
    lines: List[InvoiceLine]
    payments: List[PaymentRecord]
    total_amount: float
    collected: float
    balance: float
    status: str
    notes: List[str] = field(default_factory=list)

    def as_dict(self) -> Dict[str, object]:
        return {
            "invoice_number": self.invoice_number,
            "issued_on": self.issued_on.isoformat(),
            "student": {
                "name": self.student_name,
                "phone": self.student_phone,
                "email": self.student_email,
                "course": self.student_course,
                "batch": self.student_batch,
            },
            "lines": [
                {
                    "service_id": line.service_id,
                    "name": line.name,
                    "category": line.category,
                    "price": line.price,
                }
                for line in self.lines
            ],
            "payments": [payment.as_dict() for payment in self.payments],
            "total_amount": self.total_amount,
            "collected": self.collected,
            "balance": self.balance,
            "status": self.status,
            "notes": list(self.notes),
        }

    def render_text(self) -> str:
        """Plain-text rendering used for quick exports and logs."""

        rows = [
            f"{INSTITUTE_NAME} - Internal Billing Record",
            f"{self.invoice_number}    Issued: {self.issued_on.isoformat()}",
            "",
            f"Student: {self.student_name or UNKNOWN_STUDENT}",
        ]
        if self.student_name:
            rows.append(f"  {self.student_phone} | {self.student_email}")
            rows.append(f"  {self.student_course} - {self.student_batch}")
        rows.append("")
        rows.append("Billable items:")
        for line in self.lines:
            rows.append(f"  {line.name:<24} {line.category:<10} {format_currency(line.price):>14}")
        if self.payments:
            rows.append("")
            rows.append("Transaction history:")
            for payment in self.payments:
                rows.append(
                    f"  {payment.date.isoformat()}  {payment.mode.value:<14} {format_currency(payment.amount):>14}"
                )
        rows.extend(
            [
                "",
                f"Total fees:  {format_currency(self.total_amount)}",
                f"Collected:   {format_currency(self.collected)}",
                f"Balance due: {format_currency(self.balance)}",
                f"Status:      {self.status}",
            ]
        )
        return "\n".join(rows)


def build_invoice_document(invoice: Invoice, store: LedgerStore) -> InvoiceDocument:
    """Resolve ``invoice`` references against ``store`` for printing."""

    student = store.resolve_student(invoice.student_id)
    notes: List[str] = []
    if student is None:
        notes.append(f"Student {invoice.student_id} is no longer on record")

    lines: List[InvoiceLine] = []
    for service_id in invoice.service_ids:
        service = store.resolve_service(service_id)
        if service is None:
            notes.append(f"Service {service_id} is no longer in the catalog")
            lines.append(InvoiceLine(service_id, UNKNOWN_SERVICE, "", 0.0))
            continue
        lines.append(InvoiceLine(service_id, service.name, service.category.value, service.price))

    LOGGER.debug("Built document for %s with %s lines", invoice.invoice_number, len(lines))
    return InvoiceDocument(
        invoice_number=invoice.invoice_number,
        issued_on=invoice.created_at,
        student_name=student.name if student else None,
        student_phone=student.phone if student else None,
        student_email=student.email if student else None,
        student_course=student.course if student else None,
        student_batch=student.batch if student else None,
        lines=lines,
        payments=list(invoice.payments),
        total_amount=invoice.total_amount,
        collected=invoice.paid_amount,
        balance=invoice.balance,
        status=invoice.status.value,
        notes=notes,
    )
