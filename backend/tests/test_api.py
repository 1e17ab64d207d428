"""Tests for the application shell: root, health, users and error rendering."""

from datetime import UTC, datetime

import pytest
from fastapi.testclient import TestClient

from app.core.config import settings
from app.core.exceptions import (
    ConflictError,
    InvalidInputError,
    NotFoundError,
    PermissionDeniedError,
)
from app.main import app
from app.services.ledger_service import InvoiceLedger
from tests.conftest import PROVIDER_HEADERS, PURCHASER_HEADERS, make_invoice_data


@pytest.fixture
def client():
    return TestClient(app)


class TestRoot:
    def test_root(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert response.json() == {
            "app": settings.APP_NAME,
            "version": settings.version,
            "status": "running",
        }

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}


class TestUsers:
    def test_known_provider(self, client):
        response = client.get("/v1/users/me", headers=PROVIDER_HEADERS)

        assert response.status_code == 200
        assert response.json()["name"] == "TechSolutions Ltd"
        assert response.json()["role"] == "provider"

    def test_known_purchaser(self, client):
        response = client.get("/v1/users/me", headers=PURCHASER_HEADERS)

        assert response.json()["company"] == "Acme Corporation"

    def test_unknown_actor_gets_bare_profile(self, client):
        response = client.get(
            "/v1/users/me", headers={"X-Actor-Id": "someone", "X-Actor-Role": "purchaser"}
        )

        assert response.json() == {
            "id": "someone",
            "role": "purchaser",
            "name": None,
            "email": None,
            "company": None,
        }

    def test_role_mismatch_gets_bare_profile(self, client):
        response = client.get(
            "/v1/users/me", headers={"X-Actor-Id": "provider-1", "X-Actor-Role": "purchaser"}
        )

        assert response.json()["name"] is None

    def test_missing_headers(self, client):
        assert client.get("/v1/users/me").status_code == 401


class TestLifespan:
    def test_startup_seeds_fixtures(self):
        with TestClient(app) as client:
            response = client.get("/v1/invoices/", headers=PROVIDER_HEADERS)

        assert response.status_code == 200
        assert response.headers["X-Total-Count"] == "4"

    def test_startup_marks_past_due_invoices_overdue(self, db_session):
        ledger = InvoiceLedger(db_session, clock=lambda: datetime(2024, 5, 2, tzinfo=UTC))
        invoice = ledger.create_invoice(make_invoice_data())
        assert invoice.status == "pending"

        with TestClient(app) as client:
            response = client.get(f"/v1/invoices/{invoice.id}", headers=PROVIDER_HEADERS)

        assert response.status_code == 200
        assert response.json()["status"] == "overdue"

    def test_refresh_loop_is_stopped_on_shutdown(self, monkeypatch):
        monkeypatch.setattr(settings, "STATUS_REFRESH_INTERVAL_SECONDS", 3600.0)

        with TestClient(app) as client:
            assert client.get("/health").status_code == 200
        # Leaving the block would hang if the loop task were not cancelled


class TestLedgerErrors:
    @pytest.mark.parametrize(
        ("error", "status_code", "error_code"),
        [
            (NotFoundError("Invoice", "INV-2024-001"), 404, "NOT_FOUND"),
            (InvalidInputError("Payment amount must be greater than zero"), 422, "INVALID_INPUT"),
            (ConflictError("Invoice is already paid"), 409, "CONFLICT"),
            (PermissionDeniedError("Only providers can create invoices"), 403, "PERMISSION_DENIED"),
        ],
    )
    def test_status_and_code(self, error, status_code, error_code):
        assert error.status_code == status_code
        assert error.error_code == error_code

    def test_invalid_payment_is_rendered_as_422(self, client, db_session):
        ledger = InvoiceLedger(db_session)
        invoice = ledger.create_invoice(make_invoice_data())

        response = client.post(
            "/v1/payments/",
            json={"invoice_id": str(invoice.id), "amount": "0.00001", "currency": "USD"},
            headers=PURCHASER_HEADERS,
        )

        assert response.status_code == 422
        assert response.json()["error"]["code"] == "INVALID_INPUT"
