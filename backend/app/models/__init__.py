from app.models.currency import CurrencyCode
from app.models.invoice import Invoice, InvoiceStatus
from app.models.notification import Notification
from app.models.payment import Payment, PaymentMethod

__all__ = [
    "CurrencyCode",
    "Invoice",
    "InvoiceStatus",
    "Notification",
    "Payment",
    "PaymentMethod",
]
