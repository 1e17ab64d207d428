"""Shared test fixtures for all test modules."""

import contextlib
from datetime import UTC, datetime, timedelta
from decimal import Decimal

import pytest
from sqlalchemy import create_engine, text
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import app.models  # noqa: F401
from app.core import database as db_module
from app.core.database import Base, get_db
from app.models.currency import CurrencyCode
from app.schemas.invoice import InvoiceCreate, InvoiceLineItem

# Create an in-memory SQLite engine with StaticPool so all connections
# share the same database state and there are no file-locking issues.
_test_engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
_TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=_test_engine)

PROVIDER_HEADERS = {"X-Actor-Id": "provider-1", "X-Actor-Role": "provider"}
PURCHASER_HEADERS = {"X-Actor-Id": "purchaser-1", "X-Actor-Role": "purchaser"}
OTHER_PROVIDER_HEADERS = {"X-Actor-Id": "provider-2", "X-Actor-Role": "provider"}
OTHER_PURCHASER_HEADERS = {"X-Actor-Id": "purchaser-2", "X-Actor-Role": "purchaser"}


@pytest.fixture(autouse=True)
def setup_database():
    """Create tables before each test and truncate all data after.

    Patches the module-level engine and SessionLocal so all application code
    uses the in-memory test database. Clears data after each test.
    """
    original_engine = db_module.engine
    original_session = db_module.SessionLocal
    db_module.engine = _test_engine
    db_module.SessionLocal = _TestSessionLocal

    Base.metadata.create_all(bind=_test_engine)

    yield
    with _test_engine.connect() as conn:
        conn.execute(text("PRAGMA foreign_keys = OFF"))
        for table in reversed(Base.metadata.sorted_tables):
            with contextlib.suppress(OperationalError):
                conn.execute(table.delete())
        conn.execute(text("PRAGMA foreign_keys = ON"))
        conn.commit()

    db_module.engine = original_engine
    db_module.SessionLocal = original_session


@pytest.fixture
def db_session():
    """Create a database session for direct service testing."""
    gen = get_db()
    db = next(gen)
    try:
        yield db
    finally:
        for _ in gen:
            pass


def make_invoice_data(
    *,
    items: list[tuple[str, int, int]] | None = None,
    provider_id: str = "provider-1",
    purchaser_id: str = "purchaser-1",
    issue_date: datetime | None = None,
    due_date: datetime | None = None,
    currency: CurrencyCode = CurrencyCode.USD,
    notes: str | None = None,
) -> InvoiceCreate:
    """InvoiceCreate with sensible defaults; items are (description, qty, unit price)."""
    if items is None:
        items = [("Web Development Services", 1, 2500), ("UI/UX Design", 1, 1500)]
    issue = issue_date or datetime(2024, 5, 1, 10, 0, tzinfo=UTC)
    return InvoiceCreate(
        provider_id=provider_id,
        provider_name="TechSolutions Ltd",
        purchaser_id=purchaser_id,
        purchaser_name="Acme Corporation",
        issue_date=issue,
        due_date=due_date or issue + timedelta(days=30),
        currency=currency,
        line_items=[
            InvoiceLineItem(
                description=description,
                quantity=Decimal(quantity),
                unit_price=Decimal(price),
            )
            for description, quantity, price in items
        ],
        notes=notes,
    )
