"""Tests for dashboard aggregation."""

from datetime import date
from uuid import UUID

from aquacrm.core.modules.amc.models import ServiceVisit, VisitStatus
from aquacrm.core.modules.client.models import ClientInfo
from aquacrm.core.modules.dashboard.models import count_upcoming_visits, summarize
from aquacrm.core.modules.invoice.models import Invoice, InvoiceStatus

TODAY = date(2025, 6, 15)


def make_invoice(number: int, due_date: date | None, total: float = 1000, paid: float = 0) -> Invoice:
    return Invoice(
        invoice_id=f"INV-2025-{number:03d}",
        client_id=UUID("12345678-1234-5678-1234-567812345678"),
        client_info=ClientInfo(name="Ravi Kumar"),
        status=InvoiceStatus.SENT,
        due_date=due_date,
        total_amount=total,
        amount_paid=paid,
    )


class TestCountUpcomingVisits:
    def test_counts_scheduled_visits_in_window(self, make_amc):
        amc = make_amc(
            date(2025, 1, 1),
            date(2025, 12, 31),
            4,
            [
                ServiceVisit(scheduled_date=date(2025, 6, 14)),  # yesterday
                ServiceVisit(scheduled_date=TODAY),
                ServiceVisit(scheduled_date=date(2025, 7, 15)),  # last day of window
                ServiceVisit(scheduled_date=date(2025, 7, 16)),  # beyond window
            ],
        )
        assert count_upcoming_visits([amc], TODAY, 30) == 2

    def test_ignores_completed_and_cancelled(self, make_amc):
        amc = make_amc(
            date(2025, 1, 1),
            date(2025, 12, 31),
            2,
            [
                ServiceVisit(scheduled_date=date(2025, 6, 20), status=VisitStatus.COMPLETED, completed_date=TODAY),
                ServiceVisit(scheduled_date=date(2025, 6, 21), status=VisitStatus.CANCELLED),
            ],
        )
        assert count_upcoming_visits([amc], TODAY, 30) == 0


class TestSummarize:
    def test_summary_figures(self, make_amc):
        invoices = [
            make_invoice(1, date(2025, 5, 1), total=5000, paid=1000),
            make_invoice(2, date(2025, 7, 1), total=2000),
            make_invoice(3, None, total=300),
        ]
        amc = make_amc(date(2025, 1, 1), date(2025, 12, 31), 1, [ServiceVisit(scheduled_date=date(2025, 6, 30))])

        summary = summarize(12, 3, invoices, [amc], TODAY, 30)

        assert summary.total_clients == 12
        assert summary.pending_quotations == 3
        assert summary.overdue_invoices == 1
        assert summary.upcoming_services == 1
        assert summary.outstanding_balance == 6300
        assert [invoice.invoice_id for invoice in summary.recent_overdue] == ["INV-2025-001"]

    def test_recent_overdue_is_capped(self):
        invoices = [make_invoice(i, date(2025, 1, i)) for i in range(1, 9)]
        summary = summarize(0, 0, invoices, [], TODAY, 30)

        assert summary.overdue_invoices == 8
        assert len(summary.recent_overdue) == 5
