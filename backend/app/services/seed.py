"""Demo fixtures: two providers, two purchasers, seven invoices, three payments.

Fixture rows get deterministic UUIDs (``fixture_uuid("inv-1")``) so they can
be referenced across runs. Amounts and statuses are derived with the same
functions the ledger uses, against the current clock.
"""

import logging
from collections.abc import Callable
from datetime import datetime
from decimal import Decimal
from typing import Any

from sqlalchemy.orm import Session

from app.core.config import settings
from app.models.currency import CurrencyCode
from app.models.payment import PaymentMethod
from app.models.shared import as_utc, fixture_uuid, utc_now
from app.repositories.invoice_repository import InvoiceRepository
from app.repositories.payment_repository import PaymentRepository
from app.schemas.invoice import InvoiceLineItem
from app.schemas.payment import PaymentCreate
from app.schemas.user import ActorRole, UserProfile
from app.services.invoice_status import compute_balance, compute_totals, derive_status

logger = logging.getLogger(__name__)


FIXTURE_USERS: list[UserProfile] = [
    UserProfile(
        id="provider-1",
        role=ActorRole.PROVIDER,
        name="TechSolutions Ltd",
        email="provider@example.com",
        company="TechSolutions Ltd",
    ),
    UserProfile(
        id="provider-2",
        role=ActorRole.PROVIDER,
        name="Global Suppliers Co.",
        email="supplier@example.com",
        company="Global Suppliers Co.",
    ),
    UserProfile(
        id="purchaser-1",
        role=ActorRole.PURCHASER,
        name="Acme Corporation",
        email="purchaser@example.com",
        company="Acme Corporation",
    ),
    UserProfile(
        id="purchaser-2",
        role=ActorRole.PURCHASER,
        name="Starlight Enterprises",
        email="client@example.com",
        company="Starlight Enterprises",
    ),
]


def _dt(value: str) -> datetime:
    return as_utc(datetime.fromisoformat(value.replace("Z", "+00:00")))


def _item(item_id: str, description: str, quantity: int, unit_price: int) -> InvoiceLineItem:
    return InvoiceLineItem(
        id=item_id,
        description=description,
        quantity=Decimal(quantity),
        unit_price=Decimal(unit_price),
    )


FIXTURE_INVOICES: list[dict[str, Any]] = [
    {
        "key": "inv-1",
        "invoice_number": "INV-2024-001",
        "provider_id": "provider-1",
        "purchaser_id": "purchaser-1",
        "issue_date": "2024-05-01T10:00:00Z",
        "due_date": "2024-05-31T10:00:00Z",
        "currency": CurrencyCode.USD,
        "items": [
            _item("item-1", "Web Development Services", 1, 2500),
            _item("item-2", "UI/UX Design", 1, 1500),
        ],
        "notes": "Thank you for your business!",
    },
    {
        "key": "inv-2",
        "invoice_number": "INV-2024-002",
        "provider_id": "provider-1",
        "purchaser_id": "purchaser-2",
        "issue_date": "2024-05-05T14:00:00Z",
        "due_date": "2024-06-05T14:00:00Z",
        "currency": CurrencyCode.USD,
        "items": [_item("item-3", "Mobile App Development", 1, 5000)],
    },
    {
        "key": "inv-3",
        "invoice_number": "INV-2024-003",
        "provider_id": "provider-2",
        "purchaser_id": "purchaser-1",
        "issue_date": "2024-05-10T09:00:00Z",
        "due_date": "2024-05-25T09:00:00Z",
        "currency": CurrencyCode.USD,
        "items": [
            _item("item-4", "Office Supplies", 1, 800),
            _item("item-5", "Furniture", 1, 1200),
        ],
    },
    {
        "key": "inv-4",
        "invoice_number": "INV-2024-004",
        "provider_id": "provider-2",
        "purchaser_id": "purchaser-2",
        "issue_date": "2024-05-15T11:00:00Z",
        "due_date": "2024-06-15T11:00:00Z",
        "currency": CurrencyCode.USD,
        "items": [
            _item("item-6", "Computer Hardware", 5, 1200),
            _item("item-7", "Software Licenses", 10, 300),
        ],
    },
    {
        "key": "inv-5",
        "invoice_number": "INV-2024-005",
        "provider_id": "provider-1",
        "purchaser_id": "purchaser-1",
        "issue_date": "2024-05-20T13:00:00Z",
        "due_date": "2024-06-20T13:00:00Z",
        "currency": CurrencyCode.USD,
        "items": [
            _item("item-8", "Cloud Hosting Services (1 year)", 1, 3000),
            _item("item-9", "Technical Support (1 year)", 1, 1500),
        ],
    },
    {
        "key": "inv-6",
        "invoice_number": "INV-2024-006",
        "provider_id": "provider-1",
        "purchaser_id": "purchaser-2",
        "issue_date": "2024-05-01T10:00:00Z",
        "due_date": "2024-05-15T10:00:00Z",
        "currency": CurrencyCode.UGX,
        "items": [_item("item-10", "IT Consulting Services", 20, 150)],
    },
    {
        "key": "inv-7",
        "invoice_number": "INV-2024-007",
        "provider_id": "provider-2",
        "purchaser_id": "purchaser-1",
        "issue_date": "2024-05-12T10:00:00Z",
        "due_date": "2024-06-12T10:00:00Z",
        "currency": CurrencyCode.LYD,
        "items": [_item("item-11", "Construction Materials", 1, 25000)],
    },
]

FIXTURE_PAYMENTS: list[dict[str, Any]] = [
    {
        "key": "payment-1",
        "invoice": "inv-1",
        "amount": Decimal(4400),
        "currency": CurrencyCode.USD,
        "payment_date": "2024-05-10T15:30:00Z",
        "payment_method": PaymentMethod.BANK_TRANSFER,
        "reference": "REF-001",
    },
    {
        "key": "payment-2",
        "invoice": "inv-2",
        "amount": Decimal(2750),
        "currency": CurrencyCode.USD,
        "payment_date": "2024-05-15T11:20:00Z",
        "payment_method": PaymentMethod.CREDIT_CARD,
        "reference": "REF-002",
    },
    {
        "key": "payment-3",
        "invoice": "inv-7",
        "amount": Decimal(10000),
        "currency": CurrencyCode.LYD,
        "payment_date": "2024-05-20T15:45:00Z",
        "payment_method": PaymentMethod.BANK_TRANSFER,
        "reference": "REF-003",
    },
]


def get_fixture_user(user_id: str) -> UserProfile | None:
    return next((user for user in FIXTURE_USERS if user.id == user_id), None)


def _user_name(user_id: str) -> str:
    user = get_fixture_user(user_id)
    return user.name if user and user.name else user_id


def seed_fixtures(db: Session, clock: Callable[[], datetime] = utc_now) -> int:
    """Load the demo invoices and payments into an empty ledger.

    Returns the number of invoices created (0 if the ledger already has data).
    """
    invoice_repo = InvoiceRepository(db)
    if invoice_repo.count() > 0:
        logger.info("Ledger already holds invoices, skipping fixtures")
        return 0

    payment_repo = PaymentRepository(db)
    now = as_utc(clock())
    paid_by_invoice: dict[str, Decimal] = {}
    for payment in FIXTURE_PAYMENTS:
        paid_by_invoice[payment["invoice"]] = (
            paid_by_invoice.get(payment["invoice"], Decimal(0)) + payment["amount"]
        )

    try:
        for fixture in FIXTURE_INVOICES:
            totals = compute_totals(fixture["items"], settings.TAX_RATE)
            amount_paid = paid_by_invoice.get(fixture["key"], Decimal(0))
            issue_date = _dt(fixture["issue_date"])
            due_date = _dt(fixture["due_date"])
            last_payment = max(
                (
                    _dt(p["payment_date"])
                    for p in FIXTURE_PAYMENTS
                    if p["invoice"] == fixture["key"]
                ),
                default=issue_date,
            )
            invoice_repo.add(
                id=fixture_uuid(fixture["key"]),
                invoice_number=fixture["invoice_number"],
                provider_id=fixture["provider_id"],
                provider_name=_user_name(fixture["provider_id"]),
                purchaser_id=fixture["purchaser_id"],
                purchaser_name=_user_name(fixture["purchaser_id"]),
                issue_date=issue_date,
                due_date=due_date,
                line_items=totals.line_items,
                subtotal=totals.subtotal,
                tax=totals.tax,
                total=totals.total,
                amount_paid=amount_paid,
                balance=compute_balance(totals.total, amount_paid),
                currency=fixture["currency"].value,
                status=derive_status(amount_paid, totals.total, due_date, now).value,
                notes=fixture.get("notes"),
                created_at=issue_date,
                updated_at=last_payment,
            )

        for fixture in FIXTURE_PAYMENTS:
            payment_repo.add(
                PaymentCreate(
                    invoice_id=fixture_uuid(fixture["invoice"]),
                    amount=fixture["amount"],
                    currency=fixture["currency"],
                    payment_date=_dt(fixture["payment_date"]),
                    payment_method=fixture["payment_method"],
                    reference=fixture["reference"],
                ),
                id=fixture_uuid(fixture["key"]),
                created_at=_dt(fixture["payment_date"]),
            )

        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(
        "Seeded %d invoices and %d payments",
        len(FIXTURE_INVOICES),
        len(FIXTURE_PAYMENTS),
    )
    return len(FIXTURE_INVOICES)
