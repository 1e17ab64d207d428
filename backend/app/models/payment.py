"""Payment model for tracking invoice payments."""

from enum import Enum

from sqlalchemy import Column, ForeignKey, Numeric, String, Text

from app.core.database import Base
from app.models.currency import CurrencyCode
from app.models.shared import UTCDateTime, UUIDType, generate_uuid, utc_now


class PaymentMethod(str, Enum):
    """How a purchaser settled (part of) an invoice."""

    BANK_TRANSFER = "bank_transfer"
    CASH = "cash"
    CHECK = "check"
    CREDIT_CARD = "credit_card"
    OTHER = "other"


class Payment(Base):
    """Payment model - immutable record of money received against an invoice."""

    __tablename__ = "payments"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    invoice_id = Column(
        UUIDType, ForeignKey("invoices.id", ondelete="RESTRICT"), nullable=False, index=True
    )

    amount = Column(Numeric(12, 4), nullable=False)
    currency = Column(String(3), nullable=False, default=CurrencyCode.USD.value)
    payment_date = Column(UTCDateTime, nullable=False, default=utc_now)
    payment_method = Column(
        String(20), nullable=False, default=PaymentMethod.BANK_TRANSFER.value
    )
    reference = Column(String(255), nullable=True)
    notes = Column(Text, nullable=True)

    created_at = Column(UTCDateTime, nullable=False, default=utc_now)
