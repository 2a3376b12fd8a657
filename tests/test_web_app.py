"""Mini README: Tests for the FastAPI JSON adapter.

Exercises the HTTP surface against an in-memory ledger: dashboard figures,
invoice creation with payment clamping, validation errors and 404 handling.
"""

from __future__ import annotations

import itertools
from datetime import date, timedelta
from typing import Optional

from fastapi.testclient import TestClient

from floymhub.interface import create_application
from floymhub.ledger import LedgerStore
from floymhub.storage import KeyValueStore, MemoryKeyValueStore

TODAY = date.today()


class _ReadOnlyStore(KeyValueStore):
    def load(self, key: str) -> Optional[str]:
        return None

    def save(self, key: str, value: str) -> None:
        raise OSError("read-only storage")


class _OfflineStore(KeyValueStore):
    def load(self, key: str) -> Optional[str]:
        return None

    def save(self, key: str, value: str) -> None:
        raise RuntimeError("backend offline")


def _client(backend: Optional[KeyValueStore] = None) -> TestClient:
    counter = itertools.count(1)
    ledger = LedgerStore(
        backend=backend or MemoryKeyValueStore(),
        id_factory=lambda: f"id{next(counter)}",
        clock=lambda: TODAY,
    )
    return TestClient(create_application(ledger))


def test_invoice_flow_and_dashboard() -> None:
    """Create a student, bill them, collect payments and read the dashboard."""

    client = _client()
    student = client.post(
        "/students", json={"name": "Asha", "phone": "98450", "email": "asha@example.com"}
    ).json()["student"]

    response = client.post(
        "/invoices",
        json={"student_id": student["id"], "service_ids": ["g1"], "initial_payment": 5000, "mode": "Cash"},
    )
    assert response.status_code == 201
    body = response.json()
    assert body["invoice"]["invoiceNumber"] == "INV-1001"
    assert body["summary"]["status"] == "Partially Paid"
    invoice_id = body["invoice"]["id"]

    payment = client.post(f"/invoices/{invoice_id}/payments", json={"amount": 20000, "mode": "UPI"})
    assert payment.status_code == 201
    assert payment.json()["payment"]["amount"] == 10000.0
    assert payment.json()["summary"]["status"] == "Fully Paid"

    settled = client.post(f"/invoices/{invoice_id}/payments", json={"amount": 10, "mode": "UPI"})
    assert settled.status_code == 400

    client.post("/exams", json={"student_id": student["id"], "level": "A1", "date": (TODAY + timedelta(days=3)).isoformat()})
    client.post("/expenses", json={"category": "Rent", "amount": 4000})

    dashboard = client.get("/dashboard").json()
    assert dashboard["stats"] == {
        "total_students": 1,
        "total_income": 15000.0,
        "total_expenses": 4000.0,
        "pending_payments": 0.0,
        "net_profit": 11000.0,
        "upcoming_exams_count": 1,
    }
    assert dashboard["upcoming_exams"][0]["studentName"] == "Asha"

    document = client.get(f"/invoices/{invoice_id}/document").json()
    assert document["student"]["name"] == "Asha"
    assert document["balance"] == 0.0


def test_validation_and_missing_resources() -> None:
    client = _client()

    assert client.post("/students", json={"name": "", "phone": "1", "email": "x@example.com"}).status_code == 400
    assert client.post("/invoices/nope/payments", json={"amount": 10}).status_code == 404
    assert client.get("/invoices/nope/document").status_code == 404
    assert client.put("/services/nope/price", json={"price": 10}).status_code == 404
    assert client.put("/services/g1/price", json={"price": -5}).status_code == 400


def test_services_grouped_and_price_update() -> None:
    client = _client()

    updated = client.put("/services/g1/price", json={"price": 16000})
    services = client.get("/services").json()["services"]

    assert updated.json()["service"]["price"] == 16000.0
    assert set(services) == {"German", "Prometric", "Other"}
    assert len(services["German"]) == 4
    assert services["Other"] == []


def test_persistence_failures_are_reported_as_warnings() -> None:
    client = _client(backend=_ReadOnlyStore())

    response = client.post("/expenses", json={"category": "Utilities", "amount": 900})

    assert response.status_code == 201
    assert response.json()["warnings"]
    assert client.get("/expenses").json()["by_category"]["Utilities"] == 900.0


def test_student_search() -> None:
    client = _client()
    client.post("/students", json={"name": "Asha Menon", "phone": "98450", "email": "a@example.com"})
    client.post("/students", json={"name": "Ravi", "phone": "77001", "email": "r@example.com"})

    names = [student["name"] for student in client.get("/students", params={"search": "ravi"}).json()["students"]]

    assert names == ["Ravi"]


def test_non_finite_amounts_are_rejected_before_clamping() -> None:
    """A NaN payment must not settle the invoice through the balance clamp."""

    client = _client()
    invoice_id = client.post("/invoices", json={"student_id": "stu", "service_ids": ["g1"]}).json()["invoice"]["id"]
    headers = {"content-type": "application/json"}

    for literal in ("NaN", "Infinity"):
        response = client.post(f"/invoices/{invoice_id}/payments", content=f'{{"amount": {literal}}}', headers=headers)
        assert response.status_code == 422
    price = client.put("/services/g1/price", content='{"price": Infinity}', headers=headers)

    document = client.get(f"/invoices/{invoice_id}/document").json()
    assert price.status_code == 422
    assert document["payments"] == []
    assert document["status"] == "Payment Pending"


def test_unexpected_backend_errors_are_reported_as_warnings() -> None:
    client = _client(backend=_OfflineStore())

    response = client.post("/students", json={"name": "Asha", "phone": "1", "email": "a@example.com"})

    assert response.status_code == 201
    assert response.json()["warnings"]
    assert [student["name"] for student in client.get("/students").json()["students"]] == ["Asha"]
