"""Mini README: Tests for the reporting engine.

These tests confirm that income, expenses, outstanding balances and net profit
are derived from the ledger exactly, that the upcoming exam window includes
today, and that repeated reporting calls are side-effect free.
"""

from __future__ import annotations

import itertools
from datetime import date, timedelta

import pytest

from floymhub.ledger import LedgerStore, Service, ServiceCategory
from floymhub.reporting import ReportingEngine

TODAY = date(2024, 6, 10)


def _ledger() -> LedgerStore:
    counter = itertools.count(1)
    return LedgerStore(
        services=[
            Service("a1", ServiceCategory.GERMAN, "A1", 15000.0),
            Service("b1", ServiceCategory.GERMAN, "B1", 18000.0),
            Service("p1", ServiceCategory.PROMETRIC, "15 Day Online", 5000.0),
        ],
        id_factory=lambda: f"id{next(counter)}",
        clock=lambda: TODAY,
    )


def test_total_income_matches_manual_sum() -> None:
    """Income is every payment across three partially paid invoices."""

    ledger = _ledger()
    first = ledger.create_invoice("s1", ["a1"], initial_payment=4000, mode="Cash")
    second = ledger.create_invoice("s2", ["b1", "p1"], initial_payment=2500, mode="UPI")
    third = ledger.create_invoice("s3", ["p1"])
    ledger.add_payment(first.invoice_id, 1000, "UPI")
    ledger.add_payment(third.invoice_id, 1250.5, "Bank Transfer")

    manual = sum(payment.amount for invoice in (first, second, third) for payment in invoice.payments)
    engine = ReportingEngine(ledger)

    assert manual == pytest.approx(8750.5)
    assert engine.total_income() == pytest.approx(manual)


def test_pending_payments_includes_overpaid_invoices() -> None:
    """An overpaid invoice lowers the pending total instead of being floored."""

    ledger = _ledger()
    overpaid = ledger.create_invoice("s1", ["p1"], initial_payment=7000, mode="Cash")
    underpaid = ledger.create_invoice("s2", ["a1"], initial_payment=5000, mode="Cash")
    engine = ReportingEngine(ledger)

    assert overpaid.balance == pytest.approx(-2000.0)
    assert underpaid.balance == pytest.approx(10000.0)
    assert engine.pending_payments() == pytest.approx(8000.0)


def test_pending_payments_may_be_negative() -> None:
    ledger = _ledger()
    ledger.create_invoice("s1", ["p1"], initial_payment=9000, mode="Cash")

    assert ReportingEngine(ledger).pending_payments() == pytest.approx(-4000.0)


def test_net_profit_subtracts_expenses() -> None:
    ledger = _ledger()
    ledger.create_invoice("s1", ["a1"], initial_payment=15000, mode="UPI")
    ledger.add_expense({"category": "Rent", "amount": 12000, "description": "June rent"})
    ledger.add_expense({"category": "Salary", "amount": 8000})
    engine = ReportingEngine(ledger)

    assert engine.total_expenses() == pytest.approx(20000.0)
    assert engine.net_profit() == pytest.approx(-5000.0)
    assert engine.expenses_by_category()["Rent"] == pytest.approx(12000.0)
    assert engine.expenses_by_category()["Marketing"] == 0.0


def test_upcoming_exams_count_includes_today() -> None:
    """Exams yesterday, today and tomorrow count as two upcoming."""

    ledger = _ledger()
    for offset in (-1, 0, 1):
        ledger.add_exam_booking({"student_id": "s1", "date": TODAY + timedelta(days=offset)})

    assert ReportingEngine(ledger).upcoming_exams_count() == 2


def test_upcoming_exams_sorted_stable_and_truncated() -> None:
    """The dashboard list is date ascending, keeps booking order for ties and stops at five."""

    ledger = _ledger()
    plan = [("x", 9), ("y", 3), ("z", 3), ("old", -2), ("w", 1), ("v", 4), ("u", 12), ("t", 0)]
    for level, offset in plan:
        ledger.add_exam_booking({"student_id": "s1", "level": level, "date": TODAY + timedelta(days=offset)})

    upcoming = ReportingEngine(ledger).upcoming_exams()

    assert [booking.level for booking in upcoming] == ["t", "w", "y", "z", "v"]


def test_reporting_is_idempotent() -> None:
    """Two calls with no mutation in between return equal snapshots."""

    ledger = _ledger()
    invoice = ledger.create_invoice("s1", ["a1", "b1"], initial_payment=3000, mode="UPI")
    ledger.add_payment(invoice.invoice_id, 2000, "Cash")
    ledger.add_expense({"category": "Utilities", "amount": 1500})
    ledger.add_exam_booking({"student_id": "s1", "date": TODAY})
    ledger.add_student({"name": "Asha", "phone": "1", "email": "a@example.com"})
    engine = ReportingEngine(ledger)

    first = engine.dashboard_stats()
    second = engine.dashboard_stats()

    assert first == second
    assert first.as_dict() == {
        "total_students": 1,
        "total_income": 5000.0,
        "total_expenses": 1500.0,
        "pending_payments": 28000.0,
        "net_profit": 3500.0,
        "upcoming_exams_count": 1,
    }
    assert engine.payment_modes_breakdown() == {"UPI": 3000.0, "Cash": 2000.0, "Bank Transfer": 0.0}


def test_invoice_summary_reports_status_tags() -> None:
    ledger = _ledger()
    pending = ledger.create_invoice("s1", ["a1"])
    partial = ledger.create_invoice("s1", ["a1"], initial_payment=1, mode="UPI")
    settled = ledger.create_invoice("s1", ["p1"], initial_payment=5000, mode="UPI")

    statuses = [ReportingEngine.invoice_summary(invoice)["status"] for invoice in (pending, partial, settled)]

    assert statuses == ["Payment Pending", "Partially Paid", "Fully Paid"]


def test_engine_clock_override() -> None:
    """A reporting clock can differ from the ledger clock."""

    ledger = _ledger()
    ledger.add_exam_booking({"student_id": "s1", "date": TODAY})

    later = ReportingEngine(ledger, clock=lambda: TODAY + timedelta(days=1))

    assert later.upcoming_exams_count() == 0
