from app.schemas.dashboard import DashboardStatsResponse, InvoiceStats, RecentInvoiceItem
from app.schemas.invoice import (
    InvoiceCreate,
    InvoiceDraft,
    InvoiceLineItem,
    InvoiceListOptions,
    InvoiceResponse,
    InvoiceUpdate,
)
from app.schemas.notification import NotificationCountResponse, NotificationResponse
from app.schemas.payment import PaymentCreate, PaymentResponse
from app.schemas.user import Actor, ActorRole, UserProfile

__all__ = [
    "Actor",
    "ActorRole",
    "DashboardStatsResponse",
    "InvoiceCreate",
    "InvoiceDraft",
    "InvoiceLineItem",
    "InvoiceListOptions",
    "InvoiceResponse",
    "InvoiceStats",
    "InvoiceUpdate",
    "NotificationCountResponse",
    "NotificationResponse",
    "PaymentCreate",
    "PaymentResponse",
    "RecentInvoiceItem",
    "UserProfile",
]
