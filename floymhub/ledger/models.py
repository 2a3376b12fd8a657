"""Mini README: Entities held by the institute ledger.

Structure:
    * ServiceCategory, StudentStatus, PaymentMode, ExamStatus,
      ExpenseCategory, InvoiceStatus - string enums with tolerant parsing.
    * Service, Student, PaymentRecord, Invoice, ExamBooking, Expense -
      dataclasses with ``as_dict``/``from_dict`` helpers producing the
      camelCase JSON documents kept in the key-value store.
    * build_* helpers - turn loosely typed drafts into entities, raising
      ``ValidationError`` before anything is stored.

Invoices never store their paid amount, balance or status. Those values are
derived from the payment list on every read so the figures shown anywhere in
the application come from one place.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Type, TypeVar

from ..errors import ValidationError

_E = TypeVar("_E", bound="_LabelledEnum")

DEFAULT_QVP_STATUS = "In Progress"


class _LabelledEnum(str, Enum):
    """Enum whose values are the human readable labels used on screen."""

    @classmethod
    def from_str(cls: Type[_E], value: object) -> _E:
        """Match ``value`` against the labels ignoring case and outer spaces."""

        if isinstance(value, cls):
            return value
        try:
            normalised = str(value).strip().lower()
        except (TypeError, ValueError) as error:
            raise ValidationError(f"Unsupported {cls.__name__}: {value!r}") from error
        for member in cls:
            if member.value.lower() == normalised:
                return member
        raise ValidationError(f"Unsupported {cls.__name__}: {value!r}")


class ServiceCategory(_LabelledEnum):
    GERMAN = "German"
    PROMETRIC = "Prometric"
    OTHER = "Other"


class StudentStatus(_LabelledEnum):
    ACTIVE = "Active"
    COMPLETED = "Completed"
    DROPPED = "Dropped"


class PaymentMode(_LabelledEnum):
    UPI = "UPI"
    CASH = "Cash"
    BANK_TRANSFER = "Bank Transfer"


class ExamStatus(_LabelledEnum):
    BOOKED = "Booked"
    PENDING = "Pending"
    PASSED = "Passed"
    FAILED = "Failed"


class ExpenseCategory(_LabelledEnum):
    RENT = "Rent"
    SALARY = "Salary"
    MARKETING = "Marketing"
    UTILITIES = "Utilities"
    OTHERS = "Others"


class InvoiceStatus(_LabelledEnum):
    FULLY_PAID = "Fully Paid"
    PAYMENT_PENDING = "Payment Pending"
    PARTIALLY_PAID = "Partially Paid"


def parse_date(value: object) -> date:
    """Parse ISO formatted strings or date objects safely."""

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip()[:10])
        except ValueError as error:
            raise ValidationError(f"Invalid date: {value!r}") from error
    raise ValidationError("Dates must be provided as ISO strings or date/datetime instances.")


def parse_amount(value: object, *, label: str = "amount") -> float:
    """Coerce user supplied numbers into floats."""

    if isinstance(value, bool):
        raise ValidationError(f"{label} must be a number")
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as error:
        raise ValidationError(f"{label} must be a number, got {value!r}") from error
    if not math.isfinite(number):
        raise ValidationError(f"{label} must be a finite number, got {value!r}")
    return number


def round_money(value: float) -> float:
    return round(value, 2)


@dataclass(slots=True)
class Service:
    """A billable course or exam plan."""

    service_id: str
    category: ServiceCategory
    name: str
    price: float

    def as_dict(self) -> Dict[str, object]:
        return {
            "id": self.service_id,
            "category": self.category.value,
            "name": self.name,
            "price": self.price,
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Service":
        return cls(
            service_id=str(payload["id"]),
            category=ServiceCategory.from_str(payload["category"]),
            name=str(payload["name"]),
            price=parse_amount(payload["price"], label="price"),
        )


@dataclass(slots=True)
class Student:
    """An enrolled learner."""

    student_id: str
    name: str
    phone: str
    email: str
    course: str
    batch: str
    start_date: date
    status: StudentStatus = StudentStatus.ACTIVE

    def as_dict(self) -> Dict[str, object]:
        return {
            "id": self.student_id,
            "name": self.name,
            "phone": self.phone,
            "email": self.email,
            "course": self.course,
            "batch": self.batch,
            "startDate": self.start_date.isoformat(),
            "status": self.status.value,
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Student":
        return cls(
            student_id=str(payload["id"]),
            name=str(payload.get("name", "")),
            phone=str(payload.get("phone", "")),
            email=str(payload.get("email", "")),
            course=str(payload.get("course", "")),
            batch=str(payload.get("batch", "")),
            start_date=parse_date(payload["startDate"]),
            status=StudentStatus.from_str(payload.get("status", StudentStatus.ACTIVE)),
        )


@dataclass(slots=True)
class PaymentRecord:
    """A single instalment received against an invoice."""

    payment_id: str
    date: date
    amount: float
    mode: PaymentMode

    def as_dict(self) -> Dict[str, object]:
        return {
            "id": self.payment_id,
            "date": self.date.isoformat(),
            "amount": self.amount,
            "mode": self.mode.value,
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "PaymentRecord":
        return cls(
            payment_id=str(payload["id"]),
            date=parse_date(payload["date"]),
            amount=parse_amount(payload["amount"]),
            mode=PaymentMode.from_str(payload["mode"]),
        )


@dataclass(slots=True)
class Invoice:
    """Bill raised for a student over one or more services.

    ``total_amount`` is captured when the invoice is created and is never
    recomputed from the current catalog prices.
    """

    invoice_id: str
    invoice_number: str
    student_id: str
    service_ids: List[str]
    total_amount: float
    created_at: date
    payments: List[PaymentRecord] = field(default_factory=list)

    @property
    def paid_amount(self) -> float:
        """Sum of every recorded payment, overpayments included."""

        return round_money(sum(payment.amount for payment in self.payments))

    @property
    def balance(self) -> float:
        """Outstanding amount; negative when the invoice was overpaid."""

        return round_money(self.total_amount - self.paid_amount)

    @property
    def status(self) -> InvoiceStatus:
        balance = self.balance
        if balance == 0:
            return InvoiceStatus.FULLY_PAID
        if balance == round_money(self.total_amount):
            return InvoiceStatus.PAYMENT_PENDING
        return InvoiceStatus.PARTIALLY_PAID

    def as_dict(self) -> Dict[str, object]:
        return {
            "id": self.invoice_id,
            "invoiceNumber": self.invoice_number,
            "studentId": self.student_id,
            "serviceIds": list(self.service_ids),
            "totalAmount": self.total_amount,
            "payments": [payment.as_dict() for payment in self.payments],
            "createdAt": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Invoice":
        return cls(
            invoice_id=str(payload["id"]),
            invoice_number=str(payload["invoiceNumber"]),
            student_id=str(payload.get("studentId", "")),
            service_ids=[str(service_id) for service_id in payload.get("serviceIds", [])],
            total_amount=parse_amount(payload["totalAmount"], label="totalAmount"),
            created_at=parse_date(payload["createdAt"]),
            payments=[PaymentRecord.from_dict(item) for item in payload.get("payments", [])],
        )


@dataclass(slots=True)
class ExamBooking:
    """A scheduled language or Prometric exam for a student."""

    exam_id: str
    student_id: str
    level: str
    date: date
    status: ExamStatus = ExamStatus.BOOKED
    qvp_status: str = DEFAULT_QVP_STATUS
    notes: str = ""

    def as_dict(self) -> Dict[str, object]:
        return {
            "id": self.exam_id,
            "studentId": self.student_id,
            "level": self.level,
            "date": self.date.isoformat(),
            "status": self.status.value,
            "qvpStatus": self.qvp_status,
            "notes": self.notes,
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "ExamBooking":
        return cls(
            exam_id=str(payload["id"]),
            student_id=str(payload.get("studentId", "")),
            level=str(payload.get("level", "")),
            date=parse_date(payload["date"]),
            status=ExamStatus.from_str(payload.get("status", ExamStatus.BOOKED)),
            qvp_status=str(payload.get("qvpStatus", DEFAULT_QVP_STATUS)),
            notes=str(payload.get("notes", "")),
        )


@dataclass(slots=True)
class Expense:
    """An operational outflow such as rent or salaries."""

    expense_id: str
    category: ExpenseCategory
    date: date
    amount: float
    description: str = ""

    def as_dict(self) -> Dict[str, object]:
        return {
            "id": self.expense_id,
            "category": self.category.value,
            "date": self.date.isoformat(),
            "amount": self.amount,
            "description": self.description,
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Expense":
        return cls(
            expense_id=str(payload["id"]),
            category=ExpenseCategory.from_str(payload["category"]),
            date=parse_date(payload["date"]),
            amount=parse_amount(payload["amount"]),
            description=str(payload.get("description", "")),
        )


def _required_text(draft: Mapping[str, Any], key: str, entity: str) -> str:
    value = draft.get(key)
    text = "" if value is None else str(value).strip()
    if not text:
        raise ValidationError(f"{entity} {key} is required")
    return text


def _optional_text(draft: Mapping[str, Any], key: str, default: str = "") -> str:
    value = draft.get(key)
    return default if value is None else str(value)


def build_student(draft: Mapping[str, Any], *, student_id: str, today: date) -> Student:
    """Validate a student draft; name, phone and email are mandatory."""

    return Student(
        student_id=student_id,
        name=_required_text(draft, "name", "Student"),
        phone=_required_text(draft, "phone", "Student"),
        email=_required_text(draft, "email", "Student"),
        course=_optional_text(draft, "course", "German A1"),
        batch=_optional_text(draft, "batch"),
        start_date=parse_date(draft.get("start_date") or today),
        status=StudentStatus.from_str(draft.get("status") or StudentStatus.ACTIVE),
    )


def build_service(draft: Mapping[str, Any], *, service_id: str) -> Service:
    """Validate a catalog entry draft."""

    price = parse_amount(draft.get("price", 0), label="price")
    if price < 0:
        raise ValidationError("Service price cannot be negative")
    return Service(
        service_id=service_id,
        category=ServiceCategory.from_str(draft.get("category") or ServiceCategory.GERMAN),
        name=_required_text(draft, "name", "Service"),
        price=price,
    )


def build_exam_booking(draft: Mapping[str, Any], *, exam_id: str, today: date) -> ExamBooking:
    """Validate an exam booking draft; a student reference is mandatory."""

    return ExamBooking(
        exam_id=exam_id,
        student_id=_required_text(draft, "student_id", "Exam booking"),
        level=_optional_text(draft, "level", "B1"),
        date=parse_date(draft.get("date") or today),
        status=ExamStatus.from_str(draft.get("status") or ExamStatus.BOOKED),
        qvp_status=_optional_text(draft, "qvp_status", DEFAULT_QVP_STATUS),
        notes=_optional_text(draft, "notes"),
    )


def build_expense(draft: Mapping[str, Any], *, expense_id: str, today: date) -> Expense:
    """Validate an expense draft."""

    return Expense(
        expense_id=expense_id,
        category=ExpenseCategory.from_str(draft.get("category") or ExpenseCategory.RENT),
        date=parse_date(draft.get("date") or today),
        amount=parse_amount(draft.get("amount", 0)),
        description=_optional_text(draft, "description"),
    )


def resolve_by_id(items: List[Any], attribute: str, identifier: Optional[str]) -> Optional[Any]:
    """Return the first item whose ``attribute`` equals ``identifier``."""

    if not identifier:
        return None
    for item in items:
        if getattr(item, attribute) == identifier:
            return item
    return None
