from decimal import Decimal

from pydantic import BaseModel


class InvoiceStats(BaseModel):
    total_invoices: int = 0
    draft: int = 0
    pending: int = 0
    partial: int = 0
    paid: int = 0
    overdue: int = 0
    total_amount: Decimal = Decimal(0)
    paid_amount: Decimal = Decimal(0)
    pending_amount: Decimal = Decimal(0)
    overdue_amount: Decimal = Decimal(0)


class DashboardStatsResponse(InvoiceStats):
    # Amounts are summed across currencies; this is the display currency
    currency: str
    formatted_total_amount: str
    formatted_paid_amount: str
    formatted_pending_amount: str
    formatted_overdue_amount: str
    paid_percent: int


class RecentInvoiceItem(BaseModel):
    id: str
    invoice_number: str
    counterparty_name: str
    status: str
    total: Decimal
    formatted_total: str
    currency: str
    issue_date: str
