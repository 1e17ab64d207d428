"""Service for creating in-app notifications from ledger events."""

from __future__ import annotations

from decimal import Decimal
from uuid import UUID

from sqlalchemy.orm import Session

from app.models.invoice import Invoice
from app.models.notification import Notification
from app.repositories.notification_repository import NotificationRepository
from app.services.money import format_currency

# Notification categories
CATEGORY_INVOICE = "invoice"
CATEGORY_PAYMENT = "payment"


class NotificationService:
    """Creates notifications inside the caller's transaction (flush only)."""

    def __init__(self, db: Session):
        self.db = db
        self.repo = NotificationRepository(db)

    def notify(
        self,
        *,
        user_id: str,
        category: str,
        title: str,
        message: str,
        resource_type: str | None = None,
        resource_id: UUID | None = None,
    ) -> Notification:
        """Create a notification."""
        return self.repo.add(
            user_id=user_id,
            category=category,
            title=title,
            message=message,
            resource_type=resource_type,
            resource_id=resource_id,
        )

    def notify_invoice_issued(self, invoice: Invoice) -> Notification:
        """Tell the purchaser a new invoice was addressed to them."""
        amount = format_currency(Decimal(str(invoice.total)), str(invoice.currency))
        return self.notify(
            user_id=str(invoice.purchaser_id),
            category=CATEGORY_INVOICE,
            title="New Invoice Received",
            message=(
                f"You have received a new invoice {invoice.invoice_number} "
                f"from {invoice.provider_name} for {amount}"
            ),
            resource_type="invoice",
            resource_id=invoice.id,  # type: ignore[arg-type]
        )

    def notify_payment_received(
        self,
        invoice: Invoice,
        amount: Decimal,
        fully_paid: bool,
    ) -> Notification:
        """Tell the provider money came in against one of their invoices."""
        formatted = format_currency(amount, str(invoice.currency))
        kind = "payment" if fully_paid else "partial payment"
        return self.notify(
            user_id=str(invoice.provider_id),
            category=CATEGORY_PAYMENT,
            title="Payment Received" if fully_paid else "Partial Payment Received",
            message=(
                f"You have received a {kind} of {formatted} "
                f"for invoice {invoice.invoice_number}"
            ),
            resource_type="invoice",
            resource_id=invoice.id,  # type: ignore[arg-type]
        )

    def notify_invoice_overdue(self, invoice: Invoice) -> Notification:
        """Remind the purchaser that an unpaid invoice is past its due date."""
        return self.notify(
            user_id=str(invoice.purchaser_id),
            category=CATEGORY_INVOICE,
            title="Invoice Overdue",
            message=(
                f"Invoice {invoice.invoice_number} is now overdue. "
                "Please make a payment as soon as possible."
            ),
            resource_type="invoice",
            resource_id=invoice.id,  # type: ignore[arg-type]
        )
