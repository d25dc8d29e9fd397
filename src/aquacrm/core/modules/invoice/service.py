from typing import Any
from uuid import UUID

import structlog
from pymongo.asynchronous.database import AsyncDatabase

from aquacrm.core.core import Service
from aquacrm.core.modules.counter import document_ids
from aquacrm.core.modules.counter.models import CounterType
from aquacrm.core.modules.invoice.models import (
    Invoice,
    InvoiceFromAMC,
    InvoiceFromQuotation,
    InvoiceStatus,
    PaymentCreate,
    apply_payment,
    terms_of_service,
)
from aquacrm.core.modules.quotation.models import LineItem, QuotationStatus
from aquacrm.core.pagination import PaginationResult
from aquacrm.errors import NotFoundError, ValidationError
from aquacrm.utils import now, today

logger = structlog.get_logger(__name__)


class InvoiceService(Service):
    """Manages invoices and payments."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("invoices")

    async def on_start(self) -> None:
        """Create indexes on startup."""
        await self._collection.create_index([("invoice_id", 1)], unique=True)
        await self._collection.create_index([("client_id", 1)])
        await self._collection.create_index([("issue_date", -1)])

    async def list_invoices(
        self, limit: int = 50, offset: int = 0, status: InvoiceStatus | None = None
    ) -> PaginationResult[Invoice]:
        """Get paginated invoices, latest issue date first."""
        query = {"status": status} if status else {}
        return await PaginationResult[Invoice].fetch(self._collection, Invoice, query, "issue_date", limit, offset)

    async def get_client_invoices(self, client_id: UUID) -> list[Invoice]:
        cursor = self._collection.find({"client_id": client_id}).sort("issue_date", -1)
        return await Invoice.list_cursor(cursor)

    async def get_unsettled_invoices(self) -> list[Invoice]:
        """Invoices that are neither paid nor cancelled, earliest due first."""
        query = {"status": {"$nin": [InvoiceStatus.PAID, InvoiceStatus.CANCELLED]}}
        cursor = self._collection.find(query).sort("due_date", 1)
        return await Invoice.list_cursor(cursor)

    async def get_invoice(self, invoice_id: UUID) -> Invoice:
        doc = await self._collection.find_one({"_id": invoice_id})
        if not doc:
            raise NotFoundError(f"Invoice not found: {invoice_id}")
        return Invoice.model_validate(doc)

    async def _next_invoice_id(self) -> str:
        sequence = await self.core.services.counter.allocate(CounterType.INVOICE)
        return document_ids.invoice_id(sequence, now())

    async def create_from_quotation(self, data: InvoiceFromQuotation) -> Invoice:
        """Invoice the content of an approved quotation."""
        quotation = await self.core.services.quotation.get_quotation(data.quotation_id)
        if quotation.status != QuotationStatus.APPROVED:
            raise ValidationError("Invoice can only be created from an approved quotation")
        if quotation.client_id is None:
            raise ValidationError("Quotation must be linked to a client before invoicing")

        invoice = Invoice(
            invoice_id=await self._next_invoice_id(),
            client_id=quotation.client_id,
            client_info=quotation.client_info,
            quotation_id=quotation.id,
            line_items=quotation.line_items,
            total_amount=quotation.grand_total,
            terms_of_service=terms_of_service(quotation.commercial_terms),
            due_date=data.due_date,
            installation_date=data.installation_date,
        )
        await self._collection.insert_one(invoice.to_mongo())
        logger.info("invoice_created", invoice_id=invoice.invoice_id, quotation_id=quotation.quotation_id)
        return invoice

    async def create_from_amc(self, data: InvoiceFromAMC) -> Invoice:
        """Invoice a maintenance contract as a single line item."""
        amc = await self.core.services.amc.get_amc(data.amc_id)
        product_names = ", ".join(item.product_name or str(item.product_id) for item in amc.product_instances)

        invoice = Invoice(
            invoice_id=await self._next_invoice_id(),
            client_id=amc.client_id,
            client_info=amc.client_info,
            amc_id=amc.id,
            line_items=[
                LineItem(
                    description=f"Annual Maintenance Contract for: {product_names}",
                    quantity=1,
                    price=amc.contract_amount,
                )
            ],
            total_amount=amc.contract_amount,
            due_date=data.due_date,
        )
        await self._collection.insert_one(invoice.to_mongo())
        logger.info("invoice_created", invoice_id=invoice.invoice_id, amc_id=amc.amc_id)
        return invoice

    async def record_payment(self, invoice_id: UUID, payment: PaymentCreate) -> Invoice:
        invoice = await self.get_invoice(invoice_id)
        changes = apply_payment(invoice, payment, today())
        changes["updated_at"] = now()
        await self._collection.update_one({"_id": invoice_id}, {"$set": changes})
        logger.info("invoice_payment_recorded", invoice_id=invoice.invoice_id, amount=payment.amount)
        return await self.get_invoice(invoice_id)

    async def update_status(self, invoice_id: UUID, status: InvoiceStatus) -> Invoice:
        await self.get_invoice(invoice_id)
        await self._collection.update_one({"_id": invoice_id}, {"$set": {"status": status, "updated_at": now()}})
        return await self.get_invoice(invoice_id)
