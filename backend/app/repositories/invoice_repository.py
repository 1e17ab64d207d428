"""Invoice data access.

Writes are flushed, not committed: the ledger owns the transaction so that a
payment and the invoice fields it affects land in a single commit.
"""

from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy.orm import Session

from app.models.invoice import Invoice, InvoiceStatus


class InvoiceRepository:
    def __init__(self, db: Session):
        self.db = db

    def generate_invoice_number(self, today: datetime) -> str:
        """Generate the next INV-YYYYMMDD-NNNN number for ``today``."""
        prefix = f"INV-{today.strftime('%Y%m%d')}-"

        # Get the highest invoice number for today
        result = (
            self.db.query(Invoice.invoice_number)
            .filter(Invoice.invoice_number.like(f"{prefix}%"))
            .order_by(Invoice.invoice_number.desc())
            .first()
        )

        if result:
            try:
                new_num = int(result[0].split("-")[-1]) + 1
            except (ValueError, IndexError):
                new_num = 1
        else:
            new_num = 1

        return f"{prefix}{new_num:04d}"

    def get_by_provider(self, provider_id: str) -> list[Invoice]:
        return (
            self.db.query(Invoice)
            .filter(Invoice.provider_id == provider_id)
            .order_by(Invoice.created_at.asc())
            .all()
        )

    def get_by_purchaser(self, purchaser_id: str) -> list[Invoice]:
        return (
            self.db.query(Invoice)
            .filter(Invoice.purchaser_id == purchaser_id)
            .order_by(Invoice.created_at.asc())
            .all()
        )

    def get_open(self) -> list[Invoice]:
        """Invoices whose status can still change on its own (not yet paid)."""
        return (
            self.db.query(Invoice)
            .filter(Invoice.status != InvoiceStatus.PAID.value)
            .all()
        )

    def get_by_id(self, invoice_id: UUID) -> Invoice | None:
        return self.db.query(Invoice).filter(Invoice.id == invoice_id).first()

    def count(self) -> int:
        return self.db.query(Invoice).count()

    def add(self, **fields: Any) -> Invoice:
        invoice = Invoice(**fields)
        self.db.add(invoice)
        self.db.flush()
        return invoice

    def delete(self, invoice: Invoice) -> None:
        self.db.delete(invoice)
        self.db.flush()
