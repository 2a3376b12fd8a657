"""Mini README: Owned ledger state with load/flush persistence.

Structure:
    * COLLECTION_NAMES - the five collections mirrored to storage.
    * default_service_catalog - seed price list used when none is stored.
    * LedgerStore - holds students, services, invoices, exam bookings and
      expenses, validates drafts and mirrors every change to a key-value
      backend.

Collections keep insertion order, except invoices which are prepended so the
newest bill is listed first. References between entities (``student_id``,
``service_ids``) are plain strings; the ``resolve_*`` helpers return ``None``
for dangling references instead of failing. Mutations that target an unknown
identifier are logged and ignored.
"""

from __future__ import annotations

import json
import warnings
from datetime import date
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence

from ..errors import LedgerError, NotFoundError, PersistenceWarning, ValidationError
from ..logging_utils import get_logger
from ..storage import KeyValueStore
from ..utils import generate_id, today
from .models import (
    ExamBooking,
    Expense,
    Invoice,
    PaymentMode,
    PaymentRecord,
    Service,
    ServiceCategory,
    Student,
    build_exam_booking,
    build_expense,
    build_service,
    build_student,
    parse_amount,
    resolve_by_id,
)

LOGGER = get_logger(__name__)

COLLECTION_NAMES = ("students", "services", "invoices", "exams", "expenses")
DEFAULT_KEY_PREFIX = "floym_"
DEFAULT_INVOICE_NUMBER_BASE = 1000


def default_service_catalog() -> List[Service]:
    """Return the institute's standard price list."""

    return [
        Service("g1", ServiceCategory.GERMAN, "A1", 15000.0),
        Service("g2", ServiceCategory.GERMAN, "A2", 15000.0),
        Service("g3", ServiceCategory.GERMAN, "B1", 18000.0),
        Service("g4", ServiceCategory.GERMAN, "B2", 20000.0),
        Service("p1", ServiceCategory.PROMETRIC, "15 Day Online", 5000.0),
        Service("p2", ServiceCategory.PROMETRIC, "Unlimited Class", 12000.0),
        Service("p3", ServiceCategory.PROMETRIC, "Offline Crash", 8000.0),
    ]


class LedgerStore:
    """Canonical in-memory ledger for a single institute."""

    def __init__(
        self,
        *,
        students: Optional[Iterable[Student]] = None,
        services: Optional[Iterable[Service]] = None,
        invoices: Optional[Iterable[Invoice]] = None,
        exam_bookings: Optional[Iterable[ExamBooking]] = None,
        expenses: Optional[Iterable[Expense]] = None,
        backend: Optional[KeyValueStore] = None,
        id_factory: Callable[[], str] = generate_id,
        clock: Callable[[], date] = today,
        key_prefix: str = DEFAULT_KEY_PREFIX,
        invoice_number_base: int = DEFAULT_INVOICE_NUMBER_BASE,
    ) -> None:
        self._students: List[Student] = list(students or [])
        self._services: List[Service] = (
            list(services) if services is not None else default_service_catalog()
        )
        self._invoices: List[Invoice] = list(invoices or [])
        self._exam_bookings: List[ExamBooking] = list(exam_bookings or [])
        self._expenses: List[Expense] = list(expenses or [])
        self._backend = backend
        self._id_factory = id_factory
        self._clock = clock
        self.key_prefix = key_prefix
        self.invoice_number_base = invoice_number_base
        LOGGER.debug(
            "Ledger initialised with %s students, %s services, %s invoices, %s exams, %s expenses",
            len(self._students),
            len(self._services),
            len(self._invoices),
            len(self._exam_bookings),
            len(self._expenses),
        )

    # ------------------------------------------------------------------
    # Loading and persistence
    # ------------------------------------------------------------------
    @classmethod
    def load(
        cls,
        backend: KeyValueStore,
        *,
        id_factory: Callable[[], str] = generate_id,
        clock: Callable[[], date] = today,
        key_prefix: str = DEFAULT_KEY_PREFIX,
        invoice_number_base: int = DEFAULT_INVOICE_NUMBER_BASE,
    ) -> "LedgerStore":
        """Rebuild a ledger from ``backend``.

        Services fall back to ``default_service_catalog`` when nothing usable is
        stored; every other collection falls back to an empty list. A document
        that is not valid JSON raises ``LedgerError`` rather than silently
        discarding data.
        """

        documents = {
            name: _decode_collection(backend.load(f"{key_prefix}{name}"), f"{key_prefix}{name}")
            for name in COLLECTION_NAMES
        }
        services_document = documents["services"]
        store = cls(
            students=[Student.from_dict(item) for item in documents["students"] or []],
            services=(
                [Service.from_dict(item) for item in services_document]
                if services_document is not None
                else None
            ),
            invoices=[Invoice.from_dict(item) for item in documents["invoices"] or []],
            exam_bookings=[ExamBooking.from_dict(item) for item in documents["exams"] or []],
            expenses=[Expense.from_dict(item) for item in documents["expenses"] or []],
            backend=backend,
            id_factory=id_factory,
            clock=clock,
            key_prefix=key_prefix,
            invoice_number_base=invoice_number_base,
        )
        LOGGER.info("Ledger loaded from storage using prefix '%s'", key_prefix)
        return store

    def snapshot(self) -> Dict[str, List[Dict[str, object]]]:
        """Export every collection as JSON-ready lists keyed by collection name."""

        return {
            "students": [student.as_dict() for student in self._students],
            "services": [service.as_dict() for service in self._services],
            "invoices": [invoice.as_dict() for invoice in self._invoices],
            "exams": [exam.as_dict() for exam in self._exam_bookings],
            "expenses": [expense.as_dict() for expense in self._expenses],
        }

    def flush(self) -> bool:
        """Write the full state to the backend.

        Returns ``False`` and emits ``PersistenceWarning`` when the backend
        rejects a write; the in-memory ledger is left untouched either way.
        """

        if self._backend is None:
            return True
        try:
            for name, items in self.snapshot().items():
                self._backend.save(f"{self.key_prefix}{name}", json.dumps(items))
        except Exception as error:
            LOGGER.exception("Ledger changes are only held in memory: %s", error)
            warnings.warn(
                f"Ledger snapshot could not be saved: {error}",
                PersistenceWarning,
                stacklevel=3,
            )
            return False
        return True

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------
    @property
    def students(self) -> List[Student]:
        return list(self._students)

    @property
    def services(self) -> List[Service]:
        return list(self._services)

    @property
    def invoices(self) -> List[Invoice]:
        """Invoices ordered newest first."""

        return list(self._invoices)

    @property
    def exam_bookings(self) -> List[ExamBooking]:
        return list(self._exam_bookings)

    @property
    def expenses(self) -> List[Expense]:
        return list(self._expenses)

    def current_date(self) -> date:
        """Current date according to the injected clock."""

        return self._clock()

    def resolve_student(self, student_id: Optional[str]) -> Optional[Student]:
        return resolve_by_id(self._students, "student_id", student_id)

    def resolve_service(self, service_id: Optional[str]) -> Optional[Service]:
        return resolve_by_id(self._services, "service_id", service_id)

    def resolve_invoice(self, invoice_id: Optional[str]) -> Optional[Invoice]:
        return resolve_by_id(self._invoices, "invoice_id", invoice_id)

    def get_invoice(self, invoice_id: str) -> Invoice:
        """Retrieve an invoice, raising informative errors when missing."""

        invoice = self.resolve_invoice(invoice_id)
        if invoice is None:
            raise NotFoundError(f"Invoice {invoice_id} not found")
        return invoice

    def services_by_category(self) -> Dict[ServiceCategory, List[Service]]:
        """Group the catalog for display, listing every category even when empty."""

        grouped: Dict[ServiceCategory, List[Service]] = {category: [] for category in ServiceCategory}
        for service in self._services:
            grouped[service.category].append(service)
        return grouped

    def search_students(self, term: str) -> List[Student]:
        """Match students whose name contains ``term`` (any case) or whose phone contains it."""

        needle = (term or "").strip()
        if not needle:
            return self.students
        lowered = needle.lower()
        return [
            student
            for student in self._students
            if lowered in student.name.lower() or needle in student.phone
        ]

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    def add_student(self, draft: Mapping[str, Any]) -> Student:
        """Register a student; name, phone and email must be non-empty."""

        student = build_student(draft, student_id=self._id_factory(), today=self._clock())
        self._students.append(student)
        LOGGER.info("Added student %s (%s)", student.student_id, student.name)
        self.flush()
        return student

    def add_service(self, draft: Mapping[str, Any]) -> Service:
        """Append a catalog entry; duplicate names are allowed."""

        service = build_service(draft, service_id=self._id_factory())
        self._services.append(service)
        LOGGER.info("Added service %s %s at %.2f", service.category.value, service.name, service.price)
        self.flush()
        return service

    def update_service_price(self, service_id: str, new_price: object) -> Optional[Service]:
        """Change a service price in place.

        Existing invoices keep their captured totals. Unknown identifiers are a
        no-op returning ``None``; negative prices raise ``ValidationError``.
        """

        price = parse_amount(new_price, label="price")
        if price < 0:
            raise ValidationError("Service price cannot be negative")
        service = self.resolve_service(service_id)
        if service is None:
            LOGGER.warning("Ignoring price update for unknown service %s", service_id)
            return None
        previous = service.price
        service.price = price
        LOGGER.info("Service %s price changed %.2f -> %.2f", service_id, previous, price)
        self.flush()
        return service

    def create_invoice(
        self,
        student_id: str,
        service_ids: Sequence[str],
        initial_payment: object = 0,
        mode: object = PaymentMode.UPI,
    ) -> Invoice:
        """Bill ``student_id`` for ``service_ids`` at today's catalog prices.

        Unknown service identifiers contribute nothing to the total. A positive
        ``initial_payment`` is recorded as the first payment. The invoice is
        placed at the front of the collection.
        """

        if not student_id or not str(student_id).strip():
            raise ValidationError("Invoice student_id is required")
        payment_amount = parse_amount(initial_payment or 0, label="initial payment")
        payment_mode = PaymentMode.from_str(mode)
        selected = [str(service_id) for service_id in service_ids]

        total = 0.0
        for service_id in selected:
            service = self.resolve_service(service_id)
            if service is None:
                LOGGER.warning("Service %s not found while invoicing; counted as 0", service_id)
                continue
            total += service.price

        issued_on = self._clock()
        invoice = Invoice(
            invoice_id=self._id_factory(),
            invoice_number=self._next_invoice_number(),
            student_id=str(student_id),
            service_ids=selected,
            total_amount=round(total, 2),
            created_at=issued_on,
        )
        if payment_amount > 0:
            invoice.payments.append(
                PaymentRecord(
                    payment_id=self._id_factory(),
                    date=issued_on,
                    amount=payment_amount,
                    mode=payment_mode,
                )
            )
        self._invoices.insert(0, invoice)
        LOGGER.info(
            "Created invoice %s for student %s total=%.2f initial_payment=%.2f",
            invoice.invoice_number,
            invoice.student_id,
            invoice.total_amount,
            payment_amount,
        )
        self.flush()
        return invoice

    def _next_invoice_number(self) -> str:
        """Derive ``INV-<base + count + 1>``, skipping labels already issued."""

        issued = {invoice.invoice_number for invoice in self._invoices}
        number = self.invoice_number_base + len(self._invoices) + 1
        while f"INV-{number}" in issued:
            number += 1
        return f"INV-{number}"

    def add_payment(self, invoice_id: str, amount: object, mode: object) -> Optional[PaymentRecord]:
        """Record a payment against an invoice without clamping to the balance.

        Unknown invoices are a no-op returning ``None``.
        """

        value = parse_amount(amount)
        if value <= 0:
            raise ValidationError("Payment amount must be positive")
        payment_mode = PaymentMode.from_str(mode)
        invoice = self.resolve_invoice(invoice_id)
        if invoice is None:
            LOGGER.warning("Ignoring payment for unknown invoice %s", invoice_id)
            return None
        payment = PaymentRecord(
            payment_id=self._id_factory(),
            date=self._clock(),
            amount=value,
            mode=payment_mode,
        )
        invoice.payments.append(payment)
        LOGGER.info(
            "Payment %.2f via %s recorded on %s; balance now %.2f",
            value,
            payment_mode.value,
            invoice.invoice_number,
            invoice.balance,
        )
        self.flush()
        return payment

    def add_exam_booking(self, draft: Mapping[str, Any]) -> ExamBooking:
        """Book an exam; ``student_id`` is mandatory but not checked for existence."""

        booking = build_exam_booking(draft, exam_id=self._id_factory(), today=self._clock())
        self._exam_bookings.append(booking)
        LOGGER.info("Booked %s exam for student %s on %s", booking.level, booking.student_id, booking.date)
        self.flush()
        return booking

    def add_expense(self, draft: Mapping[str, Any]) -> Expense:
        expense = build_expense(draft, expense_id=self._id_factory(), today=self._clock())
        self._expenses.append(expense)
        LOGGER.info("Logged %s expense of %.2f", expense.category.value, expense.amount)
        self.flush()
        return expense


def _decode_collection(raw: Optional[str], key: str) -> Optional[List[Dict[str, Any]]]:
    """Parse a stored JSON list, returning ``None`` when nothing is stored."""

    if raw is None or not raw.strip():
        return None
    try:
        decoded = json.loads(raw)
    except json.JSONDecodeError as error:
        raise LedgerError(f"Stored collection '{key}' is not valid JSON") from error
    if not isinstance(decoded, list):
        raise LedgerError(f"Stored collection '{key}' must be a JSON list")
    return decoded
