from fastapi import APIRouter

from aquacrm.core.modules.dashboard.models import DashboardSummary
from aquacrm.web.deps import AppDep

router = APIRouter(tags=["dashboard"])


@router.get(
    "/dashboard",
    summary="Get dashboard summary",
    description=(
        "Total clients, quotations awaiting an answer, overdue invoices, scheduled service visits in the coming "
        "days, outstanding balance and the most urgent overdue invoices."
    ),
    operation_id="getDashboard",
    responses={200: {"description": "Dashboard summary"}},
)
async def get_dashboard(app: AppDep) -> DashboardSummary:
    return await app.get_dashboard()
