from __future__ import annotations

import importlib
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any, cast
from urllib.parse import urlparse

import structlog
from pymongo import AsyncMongoClient
from pymongo.asynchronous.database import AsyncDatabase

from aquacrm.config import Config
from aquacrm.core.db import TYPE_REGISTRY

if TYPE_CHECKING:
    from aquacrm.core.modules.amc.service import AMCService
    from aquacrm.core.modules.client.service import ClientService
    from aquacrm.core.modules.counter.service import CounterService
    from aquacrm.core.modules.dashboard.service import DashboardService
    from aquacrm.core.modules.invoice.service import InvoiceService
    from aquacrm.core.modules.product.service import ProductService
    from aquacrm.core.modules.quotation.service import QuotationService


logger = structlog.get_logger(__name__)


def database_name(database_url: str) -> str:
    """Database name from the URL path, e.g. mongodb://localhost:27017/aquacrm -> aquacrm."""
    name = urlparse(database_url).path.lstrip("/")
    if not name:
        raise ValueError(f"Database name missing from database_url: {database_url}")
    return name


class Service:
    """Base class for services with direct database access."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        self.database = database
        self._core: Core | None = None

    async def on_start(self) -> None:
        """Initialize service on application startup."""

    async def on_stop(self) -> None:
        """Cleanup service on application shutdown."""

    @property
    def core(self) -> Core:
        """Get the core application context."""
        if self._core is None:
            raise RuntimeError("Core not set for service")
        return self._core

    def set_core(self, core: Core) -> None:
        """Set the core application context."""
        self._core = core


SERVICE_MODULES = (
    ("counter", "aquacrm.core.modules.counter.service", "CounterService"),
    ("client", "aquacrm.core.modules.client.service", "ClientService"),
    ("product", "aquacrm.core.modules.product.service", "ProductService"),
    ("quotation", "aquacrm.core.modules.quotation.service", "QuotationService"),
    ("invoice", "aquacrm.core.modules.invoice.service", "InvoiceService"),
    ("amc", "aquacrm.core.modules.amc.service", "AMCService"),
    ("dashboard", "aquacrm.core.modules.dashboard.service", "DashboardService"),
)


class Services:
    """Registry of one instance per business module, in SERVICE_MODULES order."""

    counter: CounterService
    client: ClientService
    product: ProductService
    quotation: QuotationService
    invoice: InvoiceService
    amc: AMCService
    dashboard: DashboardService

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        self._services: list[Service] = []
        for attr_name, module_path, class_name in SERVICE_MODULES:
            service_class = cast(type[Service], getattr(importlib.import_module(module_path), class_name))
            service = service_class(database)
            setattr(self, attr_name, service)
            self._services.append(service)

    def set_core(self, core: Core) -> None:
        for service in self._services:
            service.set_core(core)

    async def start_all(self) -> None:
        """Run on_start hooks (index creation) in registration order."""
        for service in self._services:
            await service.on_start()

    async def stop_all(self) -> None:
        for service in reversed(self._services):
            await service.on_stop()


class Core:
    """Holds the config, the MongoDB connection and the service registry."""

    config: Config
    mongo_client: AsyncMongoClient[dict[str, Any]]
    database: AsyncDatabase[dict[str, Any]]
    services: Services

    def __init__(self, config: Config) -> None:
        self.config = config
        self.mongo_client = AsyncMongoClient(config.database_url, uuidRepresentation="standard", type_registry=TYPE_REGISTRY)
        self.database = self.mongo_client.get_database(database_name(config.database_url))
        self.services = Services(self.database)
        self.services.set_core(self)

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        await self.on_start()
        try:
            yield
        finally:
            await self.on_stop()

    async def on_start(self) -> None:
        await self.services.start_all()
        logger.info("core_started", database=self.database.name)

    async def on_stop(self) -> None:
        await self.services.stop_all()
        await self.mongo_client.aclose()
        logger.info("core_stopped")
