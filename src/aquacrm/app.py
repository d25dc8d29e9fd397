from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from importlib.metadata import version
from uuid import UUID

from pydantic import BaseModel, Field

from aquacrm.config import Config
from aquacrm.core.core import Core
from aquacrm.core.modules.amc.models import AMC, AMCCreate, AMCUpdate, VisitStatusUpdate
from aquacrm.core.modules.client.models import Client, ClientCreate, ClientUpdate
from aquacrm.core.modules.dashboard.models import DashboardSummary
from aquacrm.core.modules.invoice.models import Invoice, InvoiceFromAMC, InvoiceFromQuotation, InvoiceStatus, PaymentCreate
from aquacrm.core.modules.product.models import Product, ProductCreate, ProductType, ProductUpdate
from aquacrm.core.modules.quotation.models import Quotation, QuotationCreate, QuotationStatus, QuotationUpdate
from aquacrm.core.pagination import PaginationResult


class ClientDocuments(BaseModel):
    """Everything issued for a client, newest first."""

    client: Client
    quotations: list[Quotation] = Field(default_factory=list)
    invoices: list[Invoice] = Field(default_factory=list)
    amcs: list[AMC] = Field(default_factory=list)


class App:
    """Facade for all application operations, delegating to Core services."""

    def __init__(self, config: Config) -> None:
        self._core = Core(config)

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        """Application lifespan management - delegates to Core."""
        async with self._core.lifespan():
            yield

    # === Clients ===
    async def get_clients(self, limit: int = 50, offset: int = 0) -> PaginationResult[Client]:
        return await self._core.services.client.list_clients(limit, offset)

    async def search_clients(self, term: str) -> list[Client]:
        return await self._core.services.client.search_clients(term)

    async def get_client(self, client_id: UUID) -> Client:
        return await self._core.services.client.get_client(client_id)

    async def get_client_documents(self, client_id: UUID) -> ClientDocuments:
        """Get a client with its quotations, invoices and contracts."""
        client = await self._core.services.client.get_client(client_id)
        return ClientDocuments(
            client=client,
            quotations=await self._core.services.quotation.get_client_quotations(client.id),
            invoices=await self._core.services.invoice.get_client_invoices(client.id),
            amcs=await self._core.services.amc.get_client_amcs(client.id),
        )

    async def create_client(self, data: ClientCreate) -> Client:
        return await self._core.services.client.create_client(data)

    async def update_client(self, client_id: UUID, data: ClientUpdate) -> Client:
        return await self._core.services.client.update_client(client_id, data)

    async def delete_client(self, client_id: UUID) -> Client:
        return await self._core.services.client.delete_client(client_id)

    # === Products ===
    async def get_products(self, product_type: ProductType | None = None) -> list[Product]:
        return await self._core.services.product.list_products(product_type)

    async def get_product(self, product_id: UUID) -> Product:
        return await self._core.services.product.get_product(product_id)

    async def create_product(self, data: ProductCreate) -> Product:
        return await self._core.services.product.create_product(data)

    async def update_product(self, product_id: UUID, data: ProductUpdate) -> Product:
        return await self._core.services.product.update_product(product_id, data)

    async def delete_product(self, product_id: UUID) -> Product:
        return await self._core.services.product.delete_product(product_id)

    # === Quotations ===
    async def get_quotations(
        self, limit: int = 50, offset: int = 0, status: QuotationStatus | None = None
    ) -> PaginationResult[Quotation]:
        return await self._core.services.quotation.list_quotations(limit, offset, status)

    async def get_quotation(self, quotation_id: UUID) -> Quotation:
        return await self._core.services.quotation.get_quotation(quotation_id)

    async def create_quotation(self, data: QuotationCreate) -> Quotation:
        """Create a draft quotation (allocates the next quotation number)."""
        return await self._core.services.quotation.create_quotation(data)

    async def update_quotation(self, quotation_id: UUID, data: QuotationUpdate) -> Quotation:
        """Revise a quotation, keeping its previous content in the edit history."""
        return await self._core.services.quotation.update_quotation(quotation_id, data)

    async def update_quotation_status(self, quotation_id: UUID, status: QuotationStatus) -> Quotation:
        if status == QuotationStatus.APPROVED:
            return await self._core.services.quotation.approve_quotation(quotation_id)
        return await self._core.services.quotation.update_status(quotation_id, status)

    async def approve_quotation(self, quotation_id: UUID) -> Quotation:
        """Approve a quotation, registering its lead as a client when needed."""
        return await self._core.services.quotation.approve_quotation(quotation_id)

    # === Invoices ===
    async def get_invoices(
        self, limit: int = 50, offset: int = 0, status: InvoiceStatus | None = None
    ) -> PaginationResult[Invoice]:
        return await self._core.services.invoice.list_invoices(limit, offset, status)

    async def get_invoice(self, invoice_id: UUID) -> Invoice:
        return await self._core.services.invoice.get_invoice(invoice_id)

    async def create_invoice_from_quotation(self, data: InvoiceFromQuotation) -> Invoice:
        return await self._core.services.invoice.create_from_quotation(data)

    async def create_invoice_from_amc(self, data: InvoiceFromAMC) -> Invoice:
        return await self._core.services.invoice.create_from_amc(data)

    async def record_payment(self, invoice_id: UUID, payment: PaymentCreate) -> Invoice:
        return await self._core.services.invoice.record_payment(invoice_id, payment)

    async def update_invoice_status(self, invoice_id: UUID, status: InvoiceStatus) -> Invoice:
        return await self._core.services.invoice.update_status(invoice_id, status)

    # === Maintenance contracts ===
    async def get_amcs(self, limit: int = 50, offset: int = 0, client_id: UUID | None = None) -> PaginationResult[AMC]:
        return await self._core.services.amc.list_amcs(limit, offset, client_id)

    async def get_amc(self, amc_id: UUID) -> AMC:
        return await self._core.services.amc.get_amc(amc_id)

    async def create_amc(self, data: AMCCreate) -> AMC:
        """Create a contract and generate its service visit schedule."""
        return await self._core.services.amc.create_amc(data)

    async def update_amc(self, amc_id: UUID, data: AMCUpdate) -> AMC:
        """Update a contract; schedule changes regenerate all visits."""
        return await self._core.services.amc.update_amc(amc_id, data)

    async def update_amc_visit_status(self, amc_id: UUID, visit_index: int, data: VisitStatusUpdate) -> AMC:
        return await self._core.services.amc.update_visit_status(amc_id, visit_index, data)

    async def delete_amc(self, amc_id: UUID) -> AMC:
        return await self._core.services.amc.delete_amc(amc_id)

    # === Dashboard ===
    async def get_dashboard(self) -> DashboardSummary:
        return await self._core.services.dashboard.get_summary()

    # === Metadata ===
    async def get_version(self) -> dict[str, str]:
        """Get package version and build information."""
        config = self._core.config
        return {
            "version": version("aquacrm"),
            "git_commit_hash": config.git_commit_hash,
            "git_commit_date": config.git_commit_date,
            "build_time": config.build_time,
        }
