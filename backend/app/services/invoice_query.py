"""Read-only views over an already-loaded invoice list.

Nothing here touches the database; callers pass the invoices the actor is
allowed to see (see ``InvoiceLedger.get_invoices_for_actor``).
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, Generic, TypeVar

from app.core.exceptions import InvalidInputError
from app.models.invoice import Invoice, InvoiceStatus
from app.schemas.dashboard import InvoiceStats
from app.schemas.invoice import InvoiceListOptions
from app.schemas.user import ActorRole

T = TypeVar("T")

SORTABLE_FIELDS = frozenset(
    {
        "invoice_number",
        "provider_name",
        "purchaser_name",
        "issue_date",
        "due_date",
        "subtotal",
        "tax",
        "total",
        "amount_paid",
        "balance",
        "currency",
        "status",
        "created_at",
        "updated_at",
    }
)
FALLBACK_SORT_FIELD = "issue_date"


@dataclass
class Page(Generic[T]):
    items: list[T] = field(default_factory=list)
    page: int = 1
    page_size: int = 10
    total_items: int = 0
    total_pages: int = 0


def compute_stats(invoices: Sequence[Invoice]) -> InvoiceStats:
    """Counts per status and money totals, in one pass."""
    stats = InvoiceStats()
    for invoice in invoices:
        status = str(invoice.status)
        if status in InvoiceStatus._value2member_map_:
            setattr(stats, status, getattr(stats, status) + 1)
        stats.total_invoices += 1

        balance = Decimal(str(invoice.balance))
        stats.total_amount += Decimal(str(invoice.total))
        stats.paid_amount += Decimal(str(invoice.amount_paid))
        if status == InvoiceStatus.PENDING.value:
            stats.pending_amount += balance
        elif status == InvoiceStatus.OVERDUE.value:
            stats.overdue_amount += balance
    return stats


def counterparty_name(invoice: Invoice, viewer_role: ActorRole | str) -> str:
    """The other party's name from the viewer's point of view."""
    if ActorRole(viewer_role) == ActorRole.PROVIDER:
        return str(invoice.purchaser_name)
    return str(invoice.provider_name)


def _matches_search(invoice: Invoice, needle: str, viewer_role: ActorRole | str) -> bool:
    if not needle:
        return True
    return (
        needle in str(invoice.invoice_number).casefold()
        or needle in counterparty_name(invoice, viewer_role).casefold()
    )


def _sort_kind(value: Any) -> str | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        return "str"
    if isinstance(value, int | float | Decimal):
        return "number"
    if isinstance(value, datetime):
        return "datetime"
    return None


def _sort_key(value: Any) -> Any:
    if isinstance(value, str):
        return value.casefold()
    return value


def filter_and_sort(
    invoices: Sequence[Invoice],
    options: InvoiceListOptions,
    viewer_role: ActorRole | str,
) -> list[Invoice]:
    """Search, filter by status and stable-sort an invoice list.

    Search is a case-insensitive substring match on the invoice number and
    the counterparty name. Sorting falls back to ``issue_date`` when the
    field is unknown or its values are not all of one comparable kind.
    """
    needle = options.search_text.strip().casefold()
    status_filter = (
        options.status_filter.value
        if isinstance(options.status_filter, InvoiceStatus)
        else options.status_filter
    )

    selected = [
        invoice
        for invoice in invoices
        if _matches_search(invoice, needle, viewer_role)
        and (status_filter == "all" or invoice.status == status_filter)
    ]

    sort_field = options.sort_field
    if sort_field not in SORTABLE_FIELDS:
        sort_field = FALLBACK_SORT_FIELD
    else:
        kinds = {_sort_kind(getattr(invoice, sort_field)) for invoice in selected}
        if None in kinds or len(kinds) > 1:
            sort_field = FALLBACK_SORT_FIELD

    # sorted() keeps equal elements in input order, with or without reverse
    return sorted(
        selected,
        key=lambda invoice: _sort_key(getattr(invoice, sort_field)),
        reverse=options.sort_direction == "desc",
    )


def paginate(items: Sequence[T], page: int, page_size: int) -> Page[T]:
    """Return one window of ``items``; ``page`` is clamped to the valid range."""
    if page_size < 1:
        raise InvalidInputError("page_size must be at least 1")

    total_items = len(items)
    total_pages = math.ceil(total_items / page_size)
    current = min(max(page, 1), max(total_pages, 1))
    start = (current - 1) * page_size

    return Page(
        items=list(items[start : start + page_size]),
        page=current,
        page_size=page_size,
        total_items=total_items,
        total_pages=total_pages,
    )


def recent_invoices(invoices: Sequence[Invoice], limit: int = 5) -> list[Invoice]:
    """The ``limit`` most recently issued invoices, newest first."""
    return sorted(invoices, key=lambda invoice: invoice.issue_date, reverse=True)[:limit]
