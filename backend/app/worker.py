"""Overdue sweep: re-derives the status of unpaid invoices.

The API process runs the sweep itself (``status_refresh_loop``, started from
the app lifespan), so pending invoices turn overdue even with the default
in-memory database. ``WorkerSettings`` runs the same sweep as an arq cron job
for deployments where the API and a separate worker share a file or server
database through ``APP_DATABASE_DSN``.
"""

import asyncio
import logging
from typing import Any

from arq import cron
from arq.connections import RedisSettings

from app.core import database
from app.core.config import settings
from app.services.ledger_service import InvoiceLedger

logger = logging.getLogger(__name__)


def refresh_invoice_statuses() -> int:
    """Run one sweep in its own session; returns how many invoices changed."""
    db = database.SessionLocal()
    try:
        count = InvoiceLedger(db).refresh_statuses()
        if count > 0:
            logger.info("Refreshed status of %d invoices", count)
        return count
    finally:
        db.close()


async def status_refresh_loop(interval_seconds: float) -> None:
    """Sweep every ``interval_seconds`` until cancelled."""
    while True:
        await asyncio.sleep(interval_seconds)
        try:
            refresh_invoice_statuses()
        except Exception:
            logger.exception("Invoice status refresh failed")


async def refresh_invoice_statuses_task(ctx: dict[str, Any]) -> int:
    """Background task: move pending invoices past their due date to overdue."""
    return refresh_invoice_statuses()


async def startup(ctx: dict[str, Any]) -> None:
    # A worker process may be the first to open the database
    database.init_db()


class WorkerSettings:
    functions = [refresh_invoice_statuses_task]
    cron_jobs = [
        cron(refresh_invoice_statuses_task, minute={0, 15, 30, 45}),
    ]
    on_startup = startup
    redis_settings = RedisSettings.from_dsn(settings.REDIS_URL)
