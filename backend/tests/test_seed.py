"""Tests for the demo fixtures loaded at startup."""

from datetime import UTC, datetime
from decimal import Decimal

import pytest

from app.models.invoice import Invoice
from app.models.payment import Payment
from app.models.shared import fixture_uuid
from app.services.seed import FIXTURE_USERS, get_fixture_user, seed_fixtures

# After every issue date, before the 2024-05-25 due date of INV-2024-003
EARLY_MAY = datetime(2024, 5, 21, tzinfo=UTC)
LATE_2026 = datetime(2026, 10, 1, tzinfo=UTC)


def _by_number(db_session) -> dict[str, Invoice]:
    return {i.invoice_number: i for i in db_session.query(Invoice).all()}


class TestSeedFixtures:
    def test_loads_invoices_and_payments(self, db_session):
        assert seed_fixtures(db_session, clock=lambda: LATE_2026) == 7

        assert db_session.query(Invoice).count() == 7
        assert db_session.query(Payment).count() == 3

    def test_second_run_is_a_no_op(self, db_session):
        seed_fixtures(db_session)

        assert seed_fixtures(db_session) == 0
        assert db_session.query(Invoice).count() == 7

    def test_totals(self, db_session):
        seed_fixtures(db_session, clock=lambda: LATE_2026)
        invoices = _by_number(db_session)

        expected = {
            "INV-2024-001": ("4400", "USD"),
            "INV-2024-002": ("5500", "USD"),
            "INV-2024-003": ("2200", "USD"),
            "INV-2024-004": ("9900", "USD"),
            "INV-2024-005": ("4950", "USD"),
            "INV-2024-006": ("3300", "UGX"),
            "INV-2024-007": ("27500", "LYD"),
        }
        for number, (total, currency) in expected.items():
            assert invoices[number].total == Decimal(total), number
            assert invoices[number].currency == currency, number
            assert invoices[number].balance == invoices[number].total - invoices[number].amount_paid

    def test_statuses_are_derived_against_the_clock(self, db_session):
        seed_fixtures(db_session, clock=lambda: LATE_2026)
        invoices = _by_number(db_session)

        assert {n: i.status for n, i in invoices.items()} == {
            "INV-2024-001": "paid",
            "INV-2024-002": "partial",
            "INV-2024-003": "overdue",
            "INV-2024-004": "overdue",
            "INV-2024-005": "overdue",
            "INV-2024-006": "overdue",
            "INV-2024-007": "partial",
        }

    def test_statuses_before_any_due_date(self, db_session):
        seed_fixtures(db_session, clock=lambda: EARLY_MAY)
        invoices = _by_number(db_session)

        assert invoices["INV-2024-003"].status == "pending"
        assert invoices["INV-2024-004"].status == "pending"
        assert invoices["INV-2024-002"].status == "partial"

    def test_deterministic_ids(self, db_session):
        seed_fixtures(db_session)

        invoice = db_session.get(Invoice, fixture_uuid("inv-1"))
        payment = db_session.get(Payment, fixture_uuid("payment-3"))
        assert invoice.invoice_number == "INV-2024-001"
        assert payment.invoice_id == fixture_uuid("inv-7")
        assert payment.amount == Decimal("10000")

    def test_party_names_come_from_users(self, db_session):
        seed_fixtures(db_session)

        invoice = _by_number(db_session)["INV-2024-003"]
        assert invoice.provider_name == "Global Suppliers Co."
        assert invoice.purchaser_name == "Acme Corporation"


class TestFixtureUsers:
    def test_two_of_each_role(self):
        roles = [u.role.value for u in FIXTURE_USERS]
        assert sorted(roles) == ["provider", "provider", "purchaser", "purchaser"]

    @pytest.mark.parametrize(
        ("user_id", "name"),
        [("provider-2", "Global Suppliers Co."), ("purchaser-2", "Starlight Enterprises")],
    )
    def test_lookup(self, user_id, name):
        assert get_fixture_user(user_id).name == name

    def test_unknown(self):
        assert get_fixture_user("nobody") is None
