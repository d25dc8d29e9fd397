from aquacrm.web.routers.amcs import router as amcs_router
from aquacrm.web.routers.clients import router as clients_router
from aquacrm.web.routers.dashboard import router as dashboard_router
from aquacrm.web.routers.invoices import router as invoices_router
from aquacrm.web.routers.metadata import router as metadata_router
from aquacrm.web.routers.products import router as products_router
from aquacrm.web.routers.quotations import router as quotations_router

__all__ = [
    "amcs_router",
    "clients_router",
    "dashboard_router",
    "invoices_router",
    "metadata_router",
    "products_router",
    "quotations_router",
]
