"""Payment schemas."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from app.models.currency import CurrencyCode
from app.models.payment import PaymentMethod
from app.models.shared import utc_now


class PaymentCreate(BaseModel):
    """Schema for recording a payment against an invoice.

    ``amount`` is checked by the ledger (it must be positive and fit the
    remaining balance) so that the rejection carries a ledger error code.
    """

    invoice_id: UUID
    amount: Decimal
    currency: CurrencyCode
    payment_date: datetime = Field(default_factory=utc_now)
    payment_method: PaymentMethod = PaymentMethod.BANK_TRANSFER
    reference: str | None = None
    notes: str | None = None


class PaymentResponse(BaseModel):
    """Schema for payment response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    invoice_id: UUID
    amount: Decimal
    currency: str
    payment_date: datetime
    payment_method: str
    reference: str | None = None
    notes: str | None = None
    created_at: datetime
