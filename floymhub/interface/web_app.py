"""Mini README: FastAPI JSON adapter over the institute ledger.

Structure:
    * Request models - pydantic bodies for each create/update call.
    * create_application - application factory wiring routes to a
      ``LedgerStore`` and a ``ReportingEngine``.

The adapter only translates HTTP to ledger calls: validation failures become
400 responses, unknown identifiers 404. Persistence warnings raised while a
mutation is flushed are returned in a ``warnings`` list next to the result.
Payments posted here are clamped to the outstanding balance, matching the
billing screen; the ledger itself accepts overpayment.
"""

from __future__ import annotations

import datetime as dt
import warnings
from typing import Any, Callable, List, Optional, Tuple

from fastapi import FastAPI, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from ..configuration import get_settings
from ..errors import NotFoundError, PersistenceWarning, ValidationError
from ..ledger import (
    ExamStatus,
    ExpenseCategory,
    LedgerStore,
    PaymentMode,
    ServiceCategory,
    StudentStatus,
)
from ..logging_utils import get_logger
from ..reporting import ReportingEngine, build_invoice_document
from ..storage import JsonFileKeyValueStore

LOGGER = get_logger(__name__)


class StudentDraft(BaseModel):
    name: str
    phone: str
    email: str
    course: str = "German A1"
    batch: str = ""
    start_date: Optional[dt.date] = None
    status: StudentStatus = StudentStatus.ACTIVE


class ServiceDraft(BaseModel):
    category: ServiceCategory = ServiceCategory.GERMAN
    name: str
    price: float = Field(0.0, allow_inf_nan=False)


class PriceUpdate(BaseModel):
    price: float = Field(allow_inf_nan=False)


class InvoiceDraft(BaseModel):
    student_id: str
    service_ids: List[str] = Field(default_factory=list)
    initial_payment: float = Field(0.0, allow_inf_nan=False)
    mode: PaymentMode = PaymentMode.UPI


class PaymentDraft(BaseModel):
    amount: float = Field(allow_inf_nan=False)
    mode: PaymentMode = PaymentMode.UPI


class ExamDraft(BaseModel):
    student_id: str
    level: str = "B1"
    date: Optional[dt.date] = None
    status: ExamStatus = ExamStatus.BOOKED
    qvp_status: str = "In Progress"
    notes: str = ""


class ExpenseDraft(BaseModel):
    category: ExpenseCategory = ExpenseCategory.RENT
    date: Optional[dt.date] = None
    amount: float = Field(0.0, allow_inf_nan=False)
    description: str = ""


def _load_default_store() -> LedgerStore:
    settings = get_settings()
    backend = JsonFileKeyValueStore(settings.data_directory)
    return LedgerStore.load(
        backend,
        key_prefix=settings.storage_key_prefix,
        invoice_number_base=settings.invoice_number_base,
    )


def _mutate(operation: Callable[[], Any]) -> Tuple[Any, List[str]]:
    """Run a ledger mutation, translating errors and collecting persistence warnings."""

    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always", PersistenceWarning)
        try:
            result = operation()
        except ValidationError as error:
            raise HTTPException(status_code=400, detail=str(error)) from error
    messages = [str(item.message) for item in caught if issubclass(item.category, PersistenceWarning)]
    return result, messages


def create_application(store: Optional[LedgerStore] = None) -> FastAPI:
    """Create the FastAPI application bound to ``store`` (file-backed by default)."""

    app = FastAPI(title="FLOYM Learning Hub", version="0.1.0")
    settings = get_settings()
    ledger = store if store is not None else _load_default_store()
    reporting = ReportingEngine(ledger)

    def student_name(student_id: str) -> str:
        student = ledger.resolve_student(student_id)
        return student.name if student else "Unknown"

    @app.get("/dashboard")
    async def dashboard() -> JSONResponse:
        """Headline figures plus the next few exams."""

        stats = reporting.dashboard_stats()
        upcoming = [
            dict(booking.as_dict(), studentName=student_name(booking.student_id))
            for booking in reporting.upcoming_exams(settings.upcoming_exam_limit)
        ]
        return JSONResponse({"stats": stats.as_dict(), "upcoming_exams": upcoming})

    @app.get("/students")
    async def list_students(search: str = "") -> JSONResponse:
        students = ledger.search_students(search)
        return JSONResponse({"students": [student.as_dict() for student in students]})

    @app.post("/students", status_code=201)
    async def add_student(draft: StudentDraft) -> JSONResponse:
        student, messages = _mutate(lambda: ledger.add_student(draft.model_dump()))
        return JSONResponse({"student": student.as_dict(), "warnings": messages}, status_code=201)

    @app.get("/services")
    async def list_services() -> JSONResponse:
        grouped = {
            category.value: [service.as_dict() for service in services]
            for category, services in ledger.services_by_category().items()
        }
        return JSONResponse({"services": grouped})

    @app.post("/services", status_code=201)
    async def add_service(draft: ServiceDraft) -> JSONResponse:
        service, messages = _mutate(lambda: ledger.add_service(draft.model_dump()))
        return JSONResponse({"service": service.as_dict(), "warnings": messages}, status_code=201)

    @app.put("/services/{service_id}/price")
    async def update_price(service_id: str, update: PriceUpdate) -> JSONResponse:
        service, messages = _mutate(lambda: ledger.update_service_price(service_id, update.price))
        if service is None:
            raise HTTPException(status_code=404, detail=f"Service {service_id} not found")
        return JSONResponse({"service": service.as_dict(), "warnings": messages})

    @app.get("/invoices")
    async def list_invoices() -> JSONResponse:
        payload = [
            dict(
                invoice.as_dict(),
                studentName=student_name(invoice.student_id),
                summary=reporting.invoice_summary(invoice),
            )
            for invoice in ledger.invoices
        ]
        return JSONResponse({"invoices": payload})

    @app.post("/invoices", status_code=201)
    async def create_invoice(draft: InvoiceDraft) -> JSONResponse:
        invoice, messages = _mutate(
            lambda: ledger.create_invoice(
                draft.student_id,
                draft.service_ids,
                initial_payment=draft.initial_payment,
                mode=draft.mode,
            )
        )
        return JSONResponse(
            {
                "invoice": invoice.as_dict(),
                "summary": reporting.invoice_summary(invoice),
                "warnings": messages,
            },
            status_code=201,
        )

    @app.post("/invoices/{invoice_id}/payments", status_code=201)
    async def add_payment(invoice_id: str, draft: PaymentDraft) -> JSONResponse:
        try:
            invoice = ledger.get_invoice(invoice_id)
        except NotFoundError as error:
            raise HTTPException(status_code=404, detail=str(error)) from error
        amount = min(invoice.balance, draft.amount)
        if amount <= 0:
            raise HTTPException(status_code=400, detail="Nothing left to collect on this invoice")
        if amount < draft.amount:
            LOGGER.info(
                "Clamped payment on %s from %.2f to %.2f", invoice.invoice_number, draft.amount, amount
            )
        payment, messages = _mutate(lambda: ledger.add_payment(invoice_id, amount, draft.mode))
        return JSONResponse(
            {
                "payment": payment.as_dict(),
                "summary": reporting.invoice_summary(invoice),
                "warnings": messages,
            },
            status_code=201,
        )

    @app.get("/invoices/{invoice_id}/document")
    async def invoice_document(invoice_id: str) -> JSONResponse:
        try:
            invoice = ledger.get_invoice(invoice_id)
        except NotFoundError as error:
            raise HTTPException(status_code=404, detail=str(error)) from error
        document = build_invoice_document(invoice, ledger)
        return JSONResponse(dict(document.as_dict(), text=document.render_text()))

    @app.get("/exams")
    async def list_exams() -> JSONResponse:
        payload = [
            dict(booking.as_dict(), studentName=student_name(booking.student_id))
            for booking in ledger.exam_bookings
        ]
        return JSONResponse({"exams": payload})

    @app.post("/exams", status_code=201)
    async def add_exam(draft: ExamDraft) -> JSONResponse:
        booking, messages = _mutate(lambda: ledger.add_exam_booking(draft.model_dump()))
        return JSONResponse({"exam": booking.as_dict(), "warnings": messages}, status_code=201)

    @app.get("/expenses")
    async def list_expenses() -> JSONResponse:
        return JSONResponse(
            {
                "expenses": [expense.as_dict() for expense in ledger.expenses],
                "by_category": reporting.expenses_by_category(),
            }
        )

    @app.post("/expenses", status_code=201)
    async def add_expense(draft: ExpenseDraft) -> JSONResponse:
        expense, messages = _mutate(lambda: ledger.add_expense(draft.model_dump()))
        return JSONResponse({"expense": expense.as_dict(), "warnings": messages}, status_code=201)

    @app.get("/reports/payment-modes")
    async def payment_modes() -> JSONResponse:
        return JSONResponse({"payment_modes": reporting.payment_modes_breakdown()})

    LOGGER.debug("JSON API created over ledger with %s invoices", len(ledger.invoices))
    return app
