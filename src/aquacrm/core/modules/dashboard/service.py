import structlog

from aquacrm.core.core import Service
from aquacrm.core.modules.dashboard.models import DashboardSummary, summarize
from aquacrm.core.modules.quotation.models import QuotationStatus
from aquacrm.utils import today

logger = structlog.get_logger(__name__)


class DashboardService(Service):
    """Aggregates activity across clients, quotations, invoices and contracts."""

    async def get_summary(self) -> DashboardSummary:
        services = self.core.services
        summary = summarize(
            total_clients=await services.client.count_clients(),
            pending_quotations=await services.quotation.count_by_status(QuotationStatus.SENT),
            unsettled_invoices=await services.invoice.get_unsettled_invoices(),
            active_amcs=await services.amc.get_active_amcs(),
            today=today(),
            upcoming_days=self.core.config.upcoming_visit_days,
        )
        logger.debug("dashboard_summary", overdue=summary.overdue_invoices, upcoming=summary.upcoming_services)
        return summary
