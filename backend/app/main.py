import asyncio
import contextlib
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core import database
from app.core.config import settings
from app.core.exceptions import LedgerError, ledger_exception_handler
from app.routers import dashboard, invoices, notifications, payments, users
from app.services.seed import seed_fixtures
from app.worker import refresh_invoice_statuses, status_refresh_loop

logger = logging.getLogger(__name__)

OPENAPI_TAGS = [
    {"name": "Dashboard", "description": "Invoice statistics for the current actor."},
    {"name": "Invoices", "description": "Issue, query, update and delete invoices."},
    {"name": "Payments", "description": "Record payments against invoices."},
    {"name": "Notifications", "description": "In-app notifications for the current actor."},
    {"name": "Users", "description": "The current actor."},
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    logging.basicConfig(level=settings.LOG_LEVEL)
    database.init_db()
    if settings.SEED_FIXTURES:
        db = database.SessionLocal()
        try:
            seed_fixtures(db)
        finally:
            db.close()
    refresh_invoice_statuses()

    refresher = None
    if settings.STATUS_REFRESH_INTERVAL_SECONDS > 0:
        refresher = asyncio.create_task(
            status_refresh_loop(settings.STATUS_REFRESH_INTERVAL_SECONDS)
        )
    logger.info("%s %s started", settings.APP_NAME, settings.version)
    yield

    if refresher is not None:
        refresher.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await refresher


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.version,
    description=(
        "In-memory invoicing ledger. Providers issue invoices to purchasers, "
        "purchasers pay them; balances and statuses are derived by the ledger."
    ),
    openapi_tags=OPENAPI_TAGS,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        o.strip() for o in settings.CORS_ORIGINS.split(",") if o.strip()
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Total-Count", "X-Total-Pages", "X-Page"],
)

app.add_exception_handler(LedgerError, ledger_exception_handler)  # type: ignore[arg-type]

app.include_router(dashboard.router, prefix="/v1/dashboard", tags=["Dashboard"])
app.include_router(invoices.router, prefix="/v1/invoices", tags=["Invoices"])
app.include_router(payments.router, prefix="/v1/payments", tags=["Payments"])
app.include_router(
    notifications.router,
    prefix="/v1/notifications",
    tags=["Notifications"],
)
app.include_router(users.router, prefix="/v1/users", tags=["Users"])


@app.get("/")
async def root() -> dict[str, str]:
    return {
        "app": settings.APP_NAME,
        "version": settings.version,
        "status": "running",
    }


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}
