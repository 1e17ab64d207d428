"""Payment API endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.auth import get_current_actor
from app.core.database import get_db
from app.models.payment import Payment
from app.routers.invoices import get_visible_invoice
from app.schemas.payment import PaymentCreate, PaymentResponse
from app.schemas.user import Actor
from app.services.ledger_service import InvoiceLedger

router = APIRouter()


@router.post(
    "/",
    response_model=PaymentResponse,
    status_code=201,
    summary="Record payment",
    responses={
        401: {"description": "Missing actor headers"},
        404: {"description": "Invoice not found"},
        409: {"description": "Invoice already paid or amount exceeds balance"},
        422: {"description": "Non-positive amount or currency mismatch"},
    },
)
async def record_payment(
    data: PaymentCreate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
) -> Payment:
    """Record a payment against an invoice visible to the actor."""
    ledger = InvoiceLedger(db)
    get_visible_invoice(ledger, data.invoice_id, actor)
    return ledger.record_payment(data)


@router.get(
    "/{payment_id}",
    response_model=PaymentResponse,
    summary="Get payment",
    responses={
        401: {"description": "Missing actor headers"},
        404: {"description": "Payment not found"},
    },
)
async def get_payment(
    payment_id: UUID,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
) -> Payment:
    """Get a payment by ID."""
    ledger = InvoiceLedger(db)
    payment = ledger.get_payment_by_id(payment_id)
    get_visible_invoice(ledger, payment.invoice_id, actor)  # type: ignore[arg-type]
    return payment
