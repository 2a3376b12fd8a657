"""Mini README: Read-only financial reporting over a ``LedgerStore``.

Structure:
    * DashboardStats - immutable bundle of the headline figures.
    * ReportingEngine - derives income, expenses, outstanding balances, net
      profit and the upcoming exam schedule from the ledger's current state.

Nothing here is cached. Every call walks the ledger again, so figures always
reflect the latest mutation, and repeated calls without changes return equal
results.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import date
from typing import Callable, Dict, List, Optional

from ..ledger import (
    ExamBooking,
    ExpenseCategory,
    Invoice,
    LedgerStore,
    PaymentMode,
)
from ..logging_utils import get_logger

LOGGER = get_logger(__name__)

DEFAULT_UPCOMING_LIMIT = 5


@dataclass(frozen=True, slots=True)
class DashboardStats:
    """Headline numbers shown on the dashboard."""

    total_students: int
    total_income: float
    total_expenses: float
    pending_payments: float
    net_profit: float
    upcoming_exams_count: int

    def as_dict(self) -> Dict[str, object]:
        return asdict(self)


class ReportingEngine:
    """Compute aggregates from a ledger without mutating it."""

    def __init__(self, store: LedgerStore, *, clock: Optional[Callable[[], date]] = None) -> None:
        self.store = store
        self._clock = clock or store.current_date

    def total_income(self) -> float:
        """Every payment received across all invoices."""

        return round(sum(invoice.paid_amount for invoice in self.store.invoices), 2)

    def total_expenses(self) -> float:
        return round(sum(expense.amount for expense in self.store.expenses), 2)

    def pending_payments(self) -> float:
        """Sum of invoice balances; overpaid invoices reduce the figure and it may go negative."""

        return round(sum(invoice.balance for invoice in self.store.invoices), 2)

    def net_profit(self) -> float:
        return round(self.total_income() - self.total_expenses(), 2)

    def _is_upcoming(self, booking: ExamBooking, reference: date) -> bool:
        return booking.date >= reference

    def upcoming_exams_count(self) -> int:
        """Bookings dated today or later."""

        reference = self._clock()
        return sum(1 for booking in self.store.exam_bookings if self._is_upcoming(booking, reference))

    def upcoming_exams(self, limit: int = DEFAULT_UPCOMING_LIMIT) -> List[ExamBooking]:
        """Earliest upcoming bookings first; equal dates keep booking order."""

        reference = self._clock()
        upcoming = [booking for booking in self.store.exam_bookings if self._is_upcoming(booking, reference)]
        upcoming.sort(key=lambda booking: booking.date)
        return upcoming[: max(limit, 0)]

    def dashboard_stats(self) -> DashboardStats:
        total_income = self.total_income()
        total_expenses = self.total_expenses()
        stats = DashboardStats(
            total_students=len(self.store.students),
            total_income=total_income,
            total_expenses=total_expenses,
            pending_payments=self.pending_payments(),
            net_profit=round(total_income - total_expenses, 2),
            upcoming_exams_count=self.upcoming_exams_count(),
        )
        LOGGER.debug(
            "Dashboard stats -> income: %.2f expenses: %.2f pending: %.2f exams: %s",
            stats.total_income,
            stats.total_expenses,
            stats.pending_payments,
            stats.upcoming_exams_count,
        )
        return stats

    @staticmethod
    def invoice_summary(invoice: Invoice) -> Dict[str, object]:
        """Paid amount, balance and status tag for one invoice."""

        return {
            "invoice_id": invoice.invoice_id,
            "invoice_number": invoice.invoice_number,
            "total_amount": invoice.total_amount,
            "paid_amount": invoice.paid_amount,
            "balance": invoice.balance,
            "status": invoice.status.value,
        }

    def payment_modes_breakdown(self) -> Dict[str, float]:
        """Money received per payment mode, every mode listed."""

        totals: Dict[str, float] = {mode.value: 0.0 for mode in PaymentMode}
        for invoice in self.store.invoices:
            for payment in invoice.payments:
                totals[payment.mode.value] += payment.amount
        return {mode: round(amount, 2) for mode, amount in totals.items()}

    def expenses_by_category(self) -> Dict[str, float]:
        """Outflows per expense category, every category listed."""

        totals: Dict[str, float] = {category.value: 0.0 for category in ExpenseCategory}
        for expense in self.store.expenses:
            totals[expense.category.value] += expense.amount
        return {category: round(amount, 2) for category, amount in totals.items()}
