"""Tests for the overdue sweep: worker task, in-process loop and arq settings."""

import asyncio
from datetime import UTC, datetime
from unittest.mock import MagicMock, patch

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core import database as db_module
from app.models.invoice import InvoiceStatus
from app.services.ledger_service import InvoiceLedger
from app.worker import (
    WorkerSettings,
    refresh_invoice_statuses,
    refresh_invoice_statuses_task,
    startup,
    status_refresh_loop,
)
from tests.conftest import make_invoice_data


class TestRefreshInvoiceStatusesTask:
    @pytest.mark.asyncio
    async def test_marks_past_due_invoices_overdue(self, db_session):
        ledger = InvoiceLedger(db_session, clock=lambda: datetime(2024, 5, 2, tzinfo=UTC))
        invoice = ledger.create_invoice(make_invoice_data())

        result = await refresh_invoice_statuses_task({})

        assert result == 1
        db_session.expire_all()
        assert ledger.get_invoice_by_id(invoice.id).status == InvoiceStatus.OVERDUE.value

    @pytest.mark.asyncio
    async def test_returns_zero_when_nothing_changes(self, db_session):
        result = await refresh_invoice_statuses_task({})

        assert result == 0

    @pytest.mark.asyncio
    async def test_delegates_to_ledger(self):
        mock_ledger = MagicMock()
        mock_ledger.refresh_statuses.return_value = 3

        with patch("app.worker.InvoiceLedger", return_value=mock_ledger):
            result = await refresh_invoice_statuses_task({})

        assert result == 3
        mock_ledger.refresh_statuses.assert_called_once()

    @pytest.mark.asyncio
    async def test_worker_startup_creates_tables_in_a_fresh_database(self, monkeypatch):
        """A worker process opening its own in-memory database can still sweep."""
        fresh_engine = create_engine(
            "sqlite://",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        monkeypatch.setattr(db_module, "engine", fresh_engine)
        monkeypatch.setattr(
            db_module, "SessionLocal", sessionmaker(autoflush=False, bind=fresh_engine)
        )

        await startup({})
        result = await refresh_invoice_statuses_task({})

        assert result == 0


class TestStatusRefreshLoop:
    @pytest.mark.asyncio
    async def test_sweeps_repeatedly_until_cancelled(self):
        with patch("app.worker.refresh_invoice_statuses", return_value=0) as mock_refresh:
            task = asyncio.create_task(status_refresh_loop(0.01))
            await asyncio.sleep(0.1)
            task.cancel()
            with pytest.raises(asyncio.CancelledError):
                await task

        assert mock_refresh.call_count >= 2

    @pytest.mark.asyncio
    async def test_keeps_running_after_a_failed_sweep(self):
        with patch(
            "app.worker.refresh_invoice_statuses",
            side_effect=[RuntimeError("database locked")] + [0] * 100,
        ) as mock_refresh:
            task = asyncio.create_task(status_refresh_loop(0.01))
            await asyncio.sleep(0.1)
            task.cancel()
            with pytest.raises(asyncio.CancelledError):
                await task

        assert mock_refresh.call_count >= 2

    def test_refresh_uses_a_fresh_session(self, db_session):
        InvoiceLedger(db_session, clock=lambda: datetime(2024, 5, 2, tzinfo=UTC)).create_invoice(
            make_invoice_data()
        )

        assert refresh_invoice_statuses() == 1
        assert refresh_invoice_statuses() == 0


class TestWorkerSettings:
    def test_registers_refresh_task(self):
        assert refresh_invoice_statuses_task in WorkerSettings.functions

    def test_refresh_runs_every_fifteen_minutes(self):
        [job] = WorkerSettings.cron_jobs
        assert job.coroutine is refresh_invoice_statuses_task
        assert job.minute == {0, 15, 30, 45}

    def test_startup_initializes_database(self):
        assert WorkerSettings.on_startup is startup
