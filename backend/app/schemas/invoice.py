from datetime import datetime
from decimal import Decimal
from typing import Any, Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from app.models.currency import CurrencyCode
from app.models.invoice import InvoiceStatus
from app.models.shared import utc_now


class InvoiceLineItem(BaseModel):
    id: str | None = None
    description: str = Field(min_length=1)
    quantity: Decimal = Field(ge=0)
    unit_price: Decimal = Field(ge=0)
    # Recomputed as quantity * unit_price by the ledger; any supplied value is ignored
    amount: Decimal | None = None


class InvoiceCreate(BaseModel):
    provider_id: str = Field(min_length=1)
    provider_name: str = Field(min_length=1)
    purchaser_id: str = Field(min_length=1)
    purchaser_name: str = Field(min_length=1)
    issue_date: datetime = Field(default_factory=utc_now)
    due_date: datetime
    currency: CurrencyCode = CurrencyCode.USD
    line_items: list[InvoiceLineItem] = Field(default_factory=list)
    notes: str | None = None


class InvoiceDraft(BaseModel):
    """Invoice creation payload as sent by a provider; the issuer comes from the actor."""

    purchaser_id: str = Field(min_length=1)
    purchaser_name: str = Field(min_length=1)
    issue_date: datetime = Field(default_factory=utc_now)
    due_date: datetime
    currency: CurrencyCode = CurrencyCode.USD
    line_items: list[InvoiceLineItem] = Field(default_factory=list)
    notes: str | None = None


class InvoiceUpdate(BaseModel):
    """Patch for non-derived invoice fields.

    Amounts, balance and status are derived by the ledger and are rejected here.
    """

    model_config = ConfigDict(extra="forbid")

    notes: str | None = None
    issue_date: datetime | None = None
    due_date: datetime | None = None
    provider_name: str | None = Field(default=None, min_length=1)
    purchaser_name: str | None = Field(default=None, min_length=1)


class InvoiceListOptions(BaseModel):
    search_text: str = ""
    status_filter: InvoiceStatus | Literal["all"] = "all"
    sort_field: str = "issue_date"
    sort_direction: Literal["asc", "desc"] = "desc"


class InvoiceResponse(BaseModel):
    id: UUID
    invoice_number: str
    provider_id: str
    provider_name: str
    purchaser_id: str
    purchaser_name: str
    issue_date: datetime
    due_date: datetime
    line_items: list[dict[str, Any]]
    subtotal: Decimal
    tax: Decimal
    total: Decimal
    amount_paid: Decimal
    balance: Decimal
    currency: str
    status: str
    notes: str | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
