from enum import Enum

from sqlalchemy import JSON, Column, Numeric, String, Text

from app.core.database import Base
from app.models.currency import CurrencyCode
from app.models.shared import UTCDateTime, UUIDType, generate_uuid, utc_now


class InvoiceStatus(str, Enum):
    DRAFT = "draft"  # never produced by the ledger; kept for manual editing
    PENDING = "pending"
    PARTIAL = "partial"
    PAID = "paid"
    OVERDUE = "overdue"


class Invoice(Base):
    __tablename__ = "invoices"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    invoice_number = Column(String(50), unique=True, index=True, nullable=False)

    # Parties (names are snapshots taken at creation time)
    provider_id = Column(String(100), nullable=False, index=True)
    provider_name = Column(String(255), nullable=False)
    purchaser_id = Column(String(100), nullable=False, index=True)
    purchaser_name = Column(String(255), nullable=False)

    issue_date = Column(UTCDateTime, nullable=False)
    due_date = Column(UTCDateTime, nullable=False)

    # Line items stored as JSON array of {id, description, quantity, unit_price, amount}
    line_items = Column(JSON, nullable=False, default=list)

    # Amounts (stored as Decimal with 4 decimal places for precision)
    subtotal = Column(Numeric(12, 4), nullable=False, default=0)
    tax = Column(Numeric(12, 4), nullable=False, default=0)
    total = Column(Numeric(12, 4), nullable=False, default=0)
    amount_paid = Column(Numeric(12, 4), nullable=False, default=0)
    balance = Column(Numeric(12, 4), nullable=False, default=0)

    currency = Column(String(3), nullable=False, default=CurrencyCode.USD.value)
    status = Column(String(20), nullable=False, default=InvoiceStatus.PENDING.value)
    notes = Column(Text, nullable=True)

    created_at = Column(UTCDateTime, nullable=False, default=utc_now)
    updated_at = Column(UTCDateTime, nullable=False, default=utc_now)
