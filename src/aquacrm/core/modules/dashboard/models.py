from datetime import date, timedelta

from pydantic import BaseModel, Field

from aquacrm.core.modules.amc.models import AMC, VisitStatus
from aquacrm.core.modules.invoice.models import Invoice
from aquacrm.utils import round_money

RECENT_OVERDUE_LIMIT = 5


class DashboardSummary(BaseModel):
    """Headline business figures."""

    total_clients: int = Field(..., ge=0)
    pending_quotations: int = Field(..., ge=0, description="Quotations sent and awaiting an answer")
    overdue_invoices: int = Field(..., ge=0)
    upcoming_services: int = Field(..., ge=0, description="Scheduled visits within the look-ahead window")
    outstanding_balance: float = Field(..., description="Sum of balances due on unsettled invoices")
    recent_overdue: list[Invoice] = Field(default_factory=list)


def count_upcoming_visits(amcs: list[AMC], today: date, days: int) -> int:
    """Scheduled visits falling within [today, today + days]."""
    horizon = today + timedelta(days=days)
    return sum(
        1
        for amc in amcs
        for visit in amc.service_visits
        if visit.status == VisitStatus.SCHEDULED and today <= visit.scheduled_date <= horizon
    )


def summarize(
    total_clients: int,
    pending_quotations: int,
    unsettled_invoices: list[Invoice],
    active_amcs: list[AMC],
    today: date,
    upcoming_days: int,
) -> DashboardSummary:
    overdue = [invoice for invoice in unsettled_invoices if invoice.is_overdue(today)]
    return DashboardSummary(
        total_clients=total_clients,
        pending_quotations=pending_quotations,
        overdue_invoices=len(overdue),
        upcoming_services=count_upcoming_visits(active_amcs, today, upcoming_days),
        outstanding_balance=round_money(sum(invoice.balance_due for invoice in unsettled_invoices)),
        recent_overdue=overdue[:RECENT_OVERDUE_LIMIT],
    )
