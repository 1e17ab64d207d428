"""Payment repository for data access."""

from typing import Any
from uuid import UUID

from sqlalchemy.orm import Session

from app.models.payment import Payment
from app.schemas.payment import PaymentCreate


class PaymentRepository:
    """Repository for Payment model."""

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, payment_id: UUID) -> Payment | None:
        """Get a payment by ID."""
        return self.db.query(Payment).filter(Payment.id == payment_id).first()

    def get_by_invoice_id(self, invoice_id: UUID) -> list[Payment]:
        """Get an invoice's payments, oldest first."""
        return (
            self.db.query(Payment)
            .filter(Payment.invoice_id == invoice_id)
            .order_by(Payment.payment_date.asc(), Payment.created_at.asc())
            .all()
        )

    def count_for_invoice(self, invoice_id: UUID) -> int:
        return self.db.query(Payment).filter(Payment.invoice_id == invoice_id).count()

    def add(self, data: PaymentCreate, **extra: Any) -> Payment:
        """Stage a new payment in the current transaction.

        ``extra`` sets columns the schema does not carry (fixture ids, created_at).
        """
        payment = Payment(
            invoice_id=data.invoice_id,
            amount=data.amount,
            currency=data.currency.value,
            payment_date=data.payment_date,
            payment_method=data.payment_method.value,
            reference=data.reference,
            notes=data.notes,
            **extra,
        )
        self.db.add(payment)
        self.db.flush()
        return payment
