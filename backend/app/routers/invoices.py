from typing import Literal
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from app.core.auth import can_view_invoice, get_current_actor, require_provider
from app.core.config import settings
from app.core.database import get_db
from app.core.exceptions import NotFoundError
from app.models.invoice import Invoice, InvoiceStatus
from app.models.payment import Payment
from app.schemas.invoice import (
    InvoiceCreate,
    InvoiceDraft,
    InvoiceListOptions,
    InvoiceResponse,
    InvoiceUpdate,
)
from app.schemas.payment import PaymentResponse
from app.schemas.user import Actor
from app.services.invoice_query import filter_and_sort, paginate
from app.services.ledger_service import InvoiceLedger
from app.services.seed import get_fixture_user

router = APIRouter()

STATUS_FILTER_PATTERN = "^(all|" + "|".join(s.value for s in InvoiceStatus) + ")$"


def get_visible_invoice(ledger: InvoiceLedger, invoice_id: UUID, actor: Actor) -> Invoice:
    """Look up an invoice, reporting invoices outside the actor's view as missing."""
    invoice = ledger.get_invoice_by_id(invoice_id)
    if not can_view_invoice(actor, str(invoice.provider_id), str(invoice.purchaser_id)):
        raise NotFoundError("Invoice", invoice_id)
    return invoice


@router.get(
    "/",
    response_model=list[InvoiceResponse],
    summary="List invoices",
    responses={401: {"description": "Missing actor headers"}},
)
async def list_invoices(
    response: Response,
    search: str = Query(default="", description="Matches invoice number or counterparty"),
    status: str = Query(default="all", pattern=STATUS_FILTER_PATTERN),
    sort_field: str = Query(default="issue_date"),
    sort_direction: Literal["asc", "desc"] = Query(default="desc"),
    page: int = Query(default=1),
    page_size: int = Query(default=settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
) -> list[Invoice]:
    """List the actor's invoices, filtered, sorted and paginated."""
    ledger = InvoiceLedger(db)
    invoices = ledger.get_invoices_for_actor(actor.id, actor.role)
    options = InvoiceListOptions(
        search_text=search,
        status_filter=status,
        sort_field=sort_field,
        sort_direction=sort_direction,
    )
    result = paginate(filter_and_sort(invoices, options, actor.role), page, page_size)
    response.headers["X-Total-Count"] = str(result.total_items)
    response.headers["X-Total-Pages"] = str(result.total_pages)
    response.headers["X-Page"] = str(result.page)
    return result.items


@router.post(
    "/",
    response_model=InvoiceResponse,
    status_code=201,
    summary="Create invoice",
    responses={
        401: {"description": "Missing actor headers"},
        403: {"description": "Only providers can issue invoices"},
        422: {"description": "Validation error"},
    },
)
async def create_invoice(
    data: InvoiceDraft,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_provider),
) -> Invoice:
    """Issue an invoice from the calling provider."""
    profile = get_fixture_user(actor.id)
    provider_name = profile.name if profile and profile.name else actor.id
    ledger = InvoiceLedger(db)
    return ledger.create_invoice(
        InvoiceCreate(
            provider_id=actor.id,
            provider_name=provider_name,
            **data.model_dump(),
        )
    )


@router.get(
    "/{invoice_id}",
    response_model=InvoiceResponse,
    summary="Get invoice",
    responses={
        401: {"description": "Missing actor headers"},
        404: {"description": "Invoice not found"},
    },
)
async def get_invoice(
    invoice_id: UUID,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
) -> Invoice:
    """Get an invoice by ID."""
    return get_visible_invoice(InvoiceLedger(db), invoice_id, actor)


@router.patch(
    "/{invoice_id}",
    response_model=InvoiceResponse,
    summary="Update invoice",
    responses={
        401: {"description": "Missing actor headers"},
        403: {"description": "Not the issuing provider"},
        404: {"description": "Invoice not found"},
        422: {"description": "Validation error"},
    },
)
async def update_invoice(
    invoice_id: UUID,
    data: InvoiceUpdate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_provider),
) -> Invoice:
    """Update notes, dates or party names of an invoice."""
    ledger = InvoiceLedger(db)
    get_visible_invoice(ledger, invoice_id, actor)
    return ledger.update_invoice(invoice_id, data)


@router.delete(
    "/{invoice_id}",
    status_code=204,
    summary="Delete invoice",
    responses={
        401: {"description": "Missing actor headers"},
        403: {"description": "Not the issuing provider"},
        404: {"description": "Invoice not found"},
        409: {"description": "Invoice has payments"},
    },
)
async def delete_invoice(
    invoice_id: UUID,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_provider),
) -> Response:
    """Delete an invoice that has no payments."""
    ledger = InvoiceLedger(db)
    get_visible_invoice(ledger, invoice_id, actor)
    ledger.delete_invoice(invoice_id)
    return Response(status_code=204)


@router.get(
    "/{invoice_id}/payments",
    response_model=list[PaymentResponse],
    summary="List invoice payments",
    responses={
        401: {"description": "Missing actor headers"},
        404: {"description": "Invoice not found"},
    },
)
async def list_invoice_payments(
    invoice_id: UUID,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
) -> list[Payment]:
    """Payments recorded against an invoice, oldest first."""
    ledger = InvoiceLedger(db)
    get_visible_invoice(ledger, invoice_id, actor)
    return ledger.get_invoice_payments(invoice_id)
