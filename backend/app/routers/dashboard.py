from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.auth import get_current_actor
from app.core.database import get_db
from app.models.currency import CurrencyCode
from app.schemas.dashboard import DashboardStatsResponse, RecentInvoiceItem
from app.schemas.user import Actor
from app.services.invoice_query import compute_stats, counterparty_name, recent_invoices
from app.services.ledger_service import InvoiceLedger
from app.services.money import calculate_percentage, format_currency

router = APIRouter()


@router.get(
    "/stats",
    response_model=DashboardStatsResponse,
    summary="Get dashboard statistics",
    responses={401: {"description": "Missing actor headers"}},
)
async def get_stats(
    currency: CurrencyCode = Query(
        default=CurrencyCode.USD, description="Currency used to display the totals"
    ),
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
) -> DashboardStatsResponse:
    """Invoice counts per status and money totals for the actor's invoices."""
    ledger = InvoiceLedger(db)
    stats = compute_stats(ledger.get_invoices_for_actor(actor.id, actor.role))
    code = currency.value
    return DashboardStatsResponse(
        **stats.model_dump(),
        currency=code,
        formatted_total_amount=format_currency(stats.total_amount, code),
        formatted_paid_amount=format_currency(stats.paid_amount, code),
        formatted_pending_amount=format_currency(stats.pending_amount, code),
        formatted_overdue_amount=format_currency(stats.overdue_amount, code),
        paid_percent=calculate_percentage(stats.paid_amount, stats.total_amount),
    )


@router.get(
    "/recent_invoices",
    response_model=list[RecentInvoiceItem],
    summary="Get recently issued invoices",
    responses={401: {"description": "Missing actor headers"}},
)
async def get_recent_invoices(
    limit: int = Query(default=5, ge=1, le=50),
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
) -> list[RecentInvoiceItem]:
    """Most recently issued invoices, newest first."""
    ledger = InvoiceLedger(db)
    invoices = recent_invoices(ledger.get_invoices_for_actor(actor.id, actor.role), limit)
    return [
        RecentInvoiceItem(
            id=str(inv.id),
            invoice_number=str(inv.invoice_number),
            counterparty_name=counterparty_name(inv, actor.role),
            status=str(inv.status),
            total=inv.total,  # type: ignore[arg-type]
            formatted_total=format_currency(inv.total, str(inv.currency)),  # type: ignore[arg-type]
            currency=str(inv.currency),
            issue_date=inv.issue_date.isoformat(),
        )
        for inv in invoices
    ]
