"""Tests for derived invoice fields: item amounts, totals, balance and status."""

from datetime import UTC, datetime, timedelta
from decimal import Decimal

import pytest

from app.models.invoice import InvoiceStatus
from app.schemas.invoice import InvoiceLineItem
from app.services.invoice_status import (
    compute_balance,
    compute_line_item_amount,
    compute_totals,
    derive_status,
)

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=UTC)
YESTERDAY = NOW - timedelta(days=1)
TOMORROW = NOW + timedelta(days=1)


def _item(description: str, quantity: str, unit_price: str, **kwargs) -> InvoiceLineItem:
    return InvoiceLineItem(
        description=description,
        quantity=Decimal(quantity),
        unit_price=Decimal(unit_price),
        **kwargs,
    )


class TestComputeTotals:
    def test_two_items_with_ten_percent_tax(self):
        totals = compute_totals(
            [_item("Web Development Services", "1", "2500"), _item("UI/UX Design", "1", "1500")],
            Decimal("0.10"),
        )

        assert totals.subtotal == Decimal("4000")
        assert totals.tax == Decimal("400")
        assert totals.total == Decimal("4400")

    def test_item_amount_is_quantity_times_unit_price(self):
        totals = compute_totals([_item("Hosting", "3", "19.99")], Decimal("0.10"))

        assert totals.line_items[0]["amount"] == "59.9700"
        assert totals.subtotal == Decimal("59.97")
        assert totals.tax == Decimal("5.997")
        assert totals.total == Decimal("65.967")

    def test_supplied_amount_is_ignored(self):
        totals = compute_totals(
            [_item("Consulting", "2", "100", amount=Decimal("999"))], Decimal("0.10")
        )

        assert Decimal(totals.line_items[0]["amount"]) == Decimal("200")
        assert totals.subtotal == Decimal("200")

    def test_missing_item_ids_are_generated_by_position(self):
        totals = compute_totals(
            [_item("A", "1", "1", id="keep-me"), _item("B", "1", "1")],
            Decimal("0.10"),
        )

        assert [i["id"] for i in totals.line_items] == ["keep-me", "item-2"]

    def test_empty_items_yield_zero_totals(self):
        totals = compute_totals([], Decimal("0.10"))

        assert totals.line_items == []
        assert totals.subtotal == Decimal(0)
        assert totals.tax == Decimal(0)
        assert totals.total == Decimal(0)

    def test_total_is_subtotal_plus_tax(self):
        totals = compute_totals(
            [_item("A", "7", "13.33"), _item("B", "0.5", "8")], Decimal("0.10")
        )

        assert totals.total == totals.subtotal + totals.tax

    def test_line_item_amount_is_quantized(self):
        assert compute_line_item_amount(Decimal("1.33333"), Decimal("3")) == Decimal("4.0000")


class TestComputeBalance:
    def test_balance_is_total_minus_paid(self):
        assert compute_balance(Decimal("4400"), Decimal("2750")) == Decimal("1650")

    def test_accepts_floats_via_string_conversion(self):
        assert compute_balance(4400.0, 0.1) == Decimal("4399.9")  # type: ignore[arg-type]


class TestDeriveStatus:
    @pytest.mark.parametrize(
        ("amount_paid", "total", "due_date", "expected"),
        [
            ("0", "4400", TOMORROW, InvoiceStatus.PENDING),
            ("0", "4400", YESTERDAY, InvoiceStatus.OVERDUE),
            ("100", "4400", TOMORROW, InvoiceStatus.PARTIAL),
            ("100", "4400", YESTERDAY, InvoiceStatus.PARTIAL),
            ("4400", "4400", TOMORROW, InvoiceStatus.PAID),
            ("4400", "4400", YESTERDAY, InvoiceStatus.PAID),
        ],
    )
    def test_status_table(self, amount_paid, total, due_date, expected):
        assert derive_status(Decimal(amount_paid), Decimal(total), due_date, NOW) == expected

    def test_zero_total_is_paid(self):
        assert derive_status(Decimal(0), Decimal(0), YESTERDAY, NOW) == InvoiceStatus.PAID

    def test_due_exactly_now_is_not_overdue(self):
        assert derive_status(Decimal(0), Decimal("10"), NOW, NOW) == InvoiceStatus.PENDING

    def test_naive_dates_are_treated_as_utc(self):
        naive_due = datetime(2024, 5, 31, 12, 0)
        assert derive_status(Decimal(0), Decimal("10"), naive_due, NOW) == InvoiceStatus.OVERDUE
