from app.repositories.invoice_repository import InvoiceRepository
from app.repositories.notification_repository import NotificationRepository
from app.repositories.payment_repository import PaymentRepository

__all__ = [
    "InvoiceRepository",
    "NotificationRepository",
    "PaymentRepository",
]
