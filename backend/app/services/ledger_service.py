"""Invoice ledger: the only place invoices and payments are mutated.

Each mutator runs inside a process-wide critical section and commits exactly
once, so a recorded payment and the invoice fields it changes become visible
together or not at all.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import ConflictError, InvalidInputError, NotFoundError
from app.models.invoice import Invoice, InvoiceStatus
from app.models.payment import Payment
from app.models.shared import as_utc, utc_now
from app.repositories.invoice_repository import InvoiceRepository
from app.repositories.payment_repository import PaymentRepository
from app.schemas.invoice import InvoiceCreate, InvoiceUpdate
from app.schemas.payment import PaymentCreate
from app.schemas.user import ActorRole
from app.services.invoice_status import (
    AMOUNT_QUANTUM,
    compute_balance,
    compute_totals,
    derive_status,
)
from app.services.notification_service import NotificationService

logger = logging.getLogger(__name__)

# Guards every ledger mutation in this process
_ledger_lock = threading.RLock()


class InvoiceLedger:
    """Authoritative store of invoices and payments."""

    def __init__(self, db: Session, clock: Callable[[], datetime] = utc_now):
        self.db = db
        self.clock = clock
        self.invoice_repo = InvoiceRepository(db)
        self.payment_repo = PaymentRepository(db)
        self.notifications = NotificationService(db)

    @contextmanager
    def _mutation(self) -> Iterator[None]:
        with _ledger_lock:
            try:
                yield
                if settings.SIMULATED_LATENCY_SECONDS > 0:
                    time.sleep(settings.SIMULATED_LATENCY_SECONDS)
                self.db.commit()
            except Exception:
                self.db.rollback()
                raise

    def _now(self) -> datetime:
        return as_utc(self.clock())

    def _rederive(self, invoice: Invoice, now: datetime) -> None:
        """Recompute balance and status from the invoice's totals and payments."""
        total = Decimal(str(invoice.total))
        amount_paid = Decimal(str(invoice.amount_paid))
        invoice.balance = compute_balance(total, amount_paid)  # type: ignore[assignment]
        invoice.status = derive_status(  # type: ignore[assignment]
            amount_paid, total, invoice.due_date, now  # type: ignore[arg-type]
        ).value
        invoice.updated_at = now  # type: ignore[assignment]

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_invoice_by_id(self, invoice_id: UUID) -> Invoice:
        invoice = self.invoice_repo.get_by_id(invoice_id)
        if invoice is None:
            raise NotFoundError("Invoice", invoice_id)
        return invoice

    def get_invoices_for_actor(self, actor_id: str, role: ActorRole | str) -> list[Invoice]:
        """Invoices the actor issued (provider) or was billed on (purchaser)."""
        if ActorRole(role) == ActorRole.PROVIDER:
            return self.invoice_repo.get_by_provider(actor_id)
        return self.invoice_repo.get_by_purchaser(actor_id)

    def get_invoice_payments(self, invoice_id: UUID) -> list[Payment]:
        self.get_invoice_by_id(invoice_id)
        return self.payment_repo.get_by_invoice_id(invoice_id)

    def get_payment_by_id(self, payment_id: UUID) -> Payment:
        payment = self.payment_repo.get_by_id(payment_id)
        if payment is None:
            raise NotFoundError("Payment", payment_id)
        return payment

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def create_invoice(self, data: InvoiceCreate) -> Invoice:
        """Issue a new invoice.

        Item amounts and totals are recomputed from quantities and unit
        prices; tax is ``settings.TAX_RATE`` of the subtotal. The invoice
        starts ``pending`` with nothing paid.
        """
        if as_utc(data.due_date) < as_utc(data.issue_date):
            raise InvalidInputError("due_date must not be earlier than issue_date")

        with self._mutation():
            now = self._now()
            totals = compute_totals(data.line_items, settings.TAX_RATE)
            invoice = self.invoice_repo.add(
                invoice_number=self.invoice_repo.generate_invoice_number(now),
                provider_id=data.provider_id,
                provider_name=data.provider_name,
                purchaser_id=data.purchaser_id,
                purchaser_name=data.purchaser_name,
                issue_date=data.issue_date,
                due_date=data.due_date,
                line_items=totals.line_items,
                subtotal=totals.subtotal,
                tax=totals.tax,
                total=totals.total,
                amount_paid=Decimal(0),
                balance=totals.total,
                currency=data.currency.value,
                status=InvoiceStatus.PENDING.value,
                notes=data.notes,
                created_at=now,
                updated_at=now,
            )
            self.notifications.notify_invoice_issued(invoice)

        self.db.refresh(invoice)
        logger.info(
            "Created invoice %s (%s %s) from %s to %s",
            invoice.invoice_number,
            invoice.total,
            invoice.currency,
            invoice.provider_id,
            invoice.purchaser_id,
        )
        return invoice

    def record_payment(self, data: PaymentCreate) -> Payment:
        """Record a payment and settle it against its invoice.

        Raises:
            NotFoundError: the invoice does not exist.
            InvalidInputError: the amount is not positive or the currency
                differs from the invoice's.
            ConflictError: the invoice is already paid or the amount exceeds
                the remaining balance.
        """
        with self._mutation():
            invoice = self.get_invoice_by_id(data.invoice_id)
            # Stored at the precision of the amount columns
            amount = Decimal(str(data.amount)).quantize(AMOUNT_QUANTUM)
            balance = Decimal(str(invoice.balance))

            if amount <= 0:
                raise InvalidInputError("Payment amount must be greater than zero")
            if data.currency.value != invoice.currency:
                raise InvalidInputError(
                    f"Payment currency {data.currency.value} does not match "
                    f"invoice currency {invoice.currency}"
                )
            if balance <= 0:
                logger.warning(
                    "Rejected payment of %s on settled invoice %s",
                    amount,
                    invoice.invoice_number,
                )
                raise ConflictError(f"Invoice {invoice.invoice_number} is already paid")
            if amount > balance:
                logger.warning(
                    "Rejected payment of %s exceeding balance %s on invoice %s",
                    amount,
                    balance,
                    invoice.invoice_number,
                )
                raise ConflictError(
                    f"Payment of {amount} exceeds the remaining balance of {balance}"
                )

            payment = self.payment_repo.add(data.model_copy(update={"amount": amount}))
            invoice.amount_paid = Decimal(str(invoice.amount_paid)) + amount  # type: ignore[assignment]
            self._rederive(invoice, self._now())
            self.notifications.notify_payment_received(
                invoice, amount, fully_paid=invoice.status == InvoiceStatus.PAID.value
            )

        self.db.refresh(payment)
        logger.info(
            "Recorded payment %s of %s %s on invoice %s",
            payment.id,
            payment.amount,
            payment.currency,
            data.invoice_id,
        )
        return payment

    def update_invoice(self, invoice_id: UUID, patch: InvoiceUpdate) -> Invoice:
        """Patch non-derived fields, then re-derive status (due date may have moved)."""
        update_data = patch.model_dump(exclude_unset=True)
        for key in ("issue_date", "due_date", "provider_name", "purchaser_name"):
            if key in update_data and update_data[key] is None:
                raise InvalidInputError(f"{key} cannot be cleared")

        with self._mutation():
            invoice = self.get_invoice_by_id(invoice_id)
            issue_date = update_data.get("issue_date", invoice.issue_date)
            due_date = update_data.get("due_date", invoice.due_date)
            if as_utc(due_date) < as_utc(issue_date):
                raise InvalidInputError("due_date must not be earlier than issue_date")

            for key, value in update_data.items():
                setattr(invoice, key, value)
            self._rederive(invoice, self._now())

        self.db.refresh(invoice)
        logger.info("Updated invoice %s: %s", invoice.invoice_number, sorted(update_data))
        return invoice

    def delete_invoice(self, invoice_id: UUID) -> None:
        """Delete an invoice that has no payments recorded against it."""
        with self._mutation():
            invoice = self.get_invoice_by_id(invoice_id)
            if self.payment_repo.count_for_invoice(invoice_id) > 0:
                raise ConflictError(
                    f"Invoice {invoice.invoice_number} has payments and cannot be deleted"
                )
            invoice_number = invoice.invoice_number
            self.invoice_repo.delete(invoice)

        logger.info("Deleted invoice %s", invoice_number)

    def refresh_statuses(self, now: datetime | None = None) -> int:
        """Re-derive the status of every unpaid invoice.

        Moves ``pending`` invoices past their due date to ``overdue`` (and
        back, if a due date was pushed out). Returns how many changed.
        """
        changed = 0
        with self._mutation():
            current = as_utc(now) if now is not None else self._now()
            for invoice in self.invoice_repo.get_open():
                status = derive_status(
                    invoice.amount_paid,  # type: ignore[arg-type]
                    invoice.total,  # type: ignore[arg-type]
                    invoice.due_date,  # type: ignore[arg-type]
                    current,
                ).value
                if status == invoice.status:
                    continue
                invoice.status = status  # type: ignore[assignment]
                invoice.updated_at = current  # type: ignore[assignment]
                if status == InvoiceStatus.OVERDUE.value:
                    self.notifications.notify_invoice_overdue(invoice)
                changed += 1

        return changed
