"""Derived invoice fields: line-item amounts, totals and status.

Every ledger mutation goes through these functions; nothing else computes
``subtotal``, ``tax``, ``total``, ``balance`` or ``status``.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any

from app.models.invoice import InvoiceStatus
from app.models.shared import as_utc
from app.schemas.invoice import InvoiceLineItem

# Matches the Numeric(12, 4) columns
AMOUNT_QUANTUM = Decimal("0.0001")


@dataclass
class InvoiceTotals:
    """Totals computed from an invoice's line items."""

    line_items: list[dict[str, Any]] = field(default_factory=list)
    subtotal: Decimal = Decimal(0)
    tax: Decimal = Decimal(0)
    total: Decimal = Decimal(0)


def compute_line_item_amount(quantity: Decimal, unit_price: Decimal) -> Decimal:
    return (quantity * unit_price).quantize(AMOUNT_QUANTUM)


def compute_totals(
    items: Iterable[InvoiceLineItem],
    tax_rate: Decimal,
    id_prefix: str = "item",
) -> InvoiceTotals:
    """Recompute every item amount and the invoice totals.

    Items without an id get ``{id_prefix}-{position}``. An empty item list
    yields zero totals.
    """
    totals = InvoiceTotals()
    for position, item in enumerate(items, start=1):
        amount = compute_line_item_amount(item.quantity, item.unit_price)
        totals.line_items.append(
            {
                "id": item.id or f"{id_prefix}-{position}",
                "description": item.description,
                "quantity": str(item.quantity),
                "unit_price": str(item.unit_price),
                "amount": str(amount),
            }
        )
        totals.subtotal += amount

    totals.tax = (totals.subtotal * tax_rate).quantize(AMOUNT_QUANTUM)
    totals.total = totals.subtotal + totals.tax
    return totals


def compute_balance(total: Decimal, amount_paid: Decimal) -> Decimal:
    return Decimal(str(total)) - Decimal(str(amount_paid))


def derive_status(
    amount_paid: Decimal,
    total: Decimal,
    due_date: datetime,
    now: datetime,
) -> InvoiceStatus:
    """Status as a pure function of what was paid, what is owed and the date.

    A settled invoice is never overdue, and a partly paid one is reported
    ``partial`` even after its due date.
    """
    amount_paid = Decimal(str(amount_paid))
    balance = compute_balance(total, amount_paid)

    if balance <= 0:
        return InvoiceStatus.PAID
    if amount_paid > 0:
        return InvoiceStatus.PARTIAL
    if as_utc(now) > as_utc(due_date):
        return InvoiceStatus.OVERDUE
    return InvoiceStatus.PENDING
