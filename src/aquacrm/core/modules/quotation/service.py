from typing import Any
from uuid import UUID

import structlog
from pymongo.asynchronous.database import AsyncDatabase

from aquacrm.core.core import Service
from aquacrm.core.modules.client.models import Address, ClientCreate, ClientInfo
from aquacrm.core.modules.counter import document_ids
from aquacrm.core.modules.counter.models import CounterType
from aquacrm.core.modules.quotation.models import (
    LineItem,
    LineItemInput,
    Quotation,
    QuotationCreate,
    QuotationStatus,
    QuotationUpdate,
    calculate_totals,
)
from aquacrm.core.pagination import PaginationResult
from aquacrm.errors import NotFoundError, ValidationError
from aquacrm.utils import now

logger = structlog.get_logger(__name__)


class QuotationService(Service):
    """Manages quotations, their revisions and approval."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("quotations")

    async def on_start(self) -> None:
        """Create indexes on startup."""
        await self._collection.create_index([("quotation_id", 1)], unique=True)
        await self._collection.create_index([("client_id", 1)])
        await self._collection.create_index([("created_at", -1)])

    async def list_quotations(
        self, limit: int = 50, offset: int = 0, status: QuotationStatus | None = None
    ) -> PaginationResult[Quotation]:
        """Get paginated quotations, newest first."""
        query = {"status": status} if status else {}
        return await PaginationResult[Quotation].fetch(self._collection, Quotation, query, "created_at", limit, offset)

    async def get_client_quotations(self, client_id: UUID) -> list[Quotation]:
        cursor = self._collection.find({"client_id": client_id}).sort("created_at", -1)
        return await Quotation.list_cursor(cursor)

    async def count_by_status(self, status: QuotationStatus) -> int:
        return await self._collection.count_documents({"status": status})

    async def get_quotation(self, quotation_id: UUID) -> Quotation:
        doc = await self._collection.find_one({"_id": quotation_id})
        if not doc:
            raise NotFoundError(f"Quotation not found: {quotation_id}")
        return Quotation.model_validate(doc)

    async def build_line_items(self, inputs: list[LineItemInput]) -> list[LineItem]:
        """Resolve catalog products, applying per-line price and description overrides."""
        line_items = []
        for item in inputs:
            product = await self.core.services.product.get_product(item.product_id)
            line_items.append(
                LineItem(
                    product_id=product.id,
                    product_name=product.name,
                    description=item.description if item.description is not None else product.description,
                    quantity=item.quantity,
                    price=item.price if item.price is not None else product.price,
                )
            )
        return line_items

    async def create_quotation(self, data: QuotationCreate) -> Quotation:
        """Create a draft quotation for an existing client or an inline lead."""
        if data.client_id is not None:
            client = await self.core.services.client.get_client(data.client_id)
            client_info = ClientInfo.from_client(client)
        elif data.client_info is not None:
            client_info = data.client_info
        else:
            raise ValidationError("Either client_id or client_info must be provided")

        line_items = await self.build_line_items(data.line_items)
        total_amount, grand_total = calculate_totals(line_items, data.tax_percentage)

        # Allocate only after every input is validated so failures don't burn numbers
        sequence = await self.core.services.counter.allocate(CounterType.QUOTATION)
        quotation = Quotation(
            quotation_id=document_ids.quotation_id(sequence, now()),
            client_id=data.client_id,
            client_info=client_info,
            line_items=line_items,
            image_urls=data.image_urls,
            total_amount=total_amount,
            tax_percentage=data.tax_percentage,
            grand_total=grand_total,
            valid_until=data.valid_until,
            commercial_terms=data.commercial_terms,
        )
        await self._collection.insert_one(quotation.to_mongo())
        logger.info("quotation_created", quotation_id=quotation.quotation_id, total=grand_total)
        return quotation

    async def update_quotation(self, quotation_id: UUID, data: QuotationUpdate) -> Quotation:
        """Revise quotation content, archiving the previous content in edit_history."""
        quotation = await self.get_quotation(quotation_id)
        if quotation.status == QuotationStatus.APPROVED:
            raise ValidationError("Approved quotations cannot be edited")

        version = quotation.snapshot(data.reason)
        line_items = await self.build_line_items(data.line_items)
        tax_percentage = data.tax_percentage if data.tax_percentage is not None else quotation.tax_percentage
        total_amount, grand_total = calculate_totals(line_items, tax_percentage)

        changes: dict[str, Any] = {
            "line_items": [item.model_dump() for item in line_items],
            "tax_percentage": tax_percentage,
            "total_amount": total_amount,
            "grand_total": grand_total,
            "valid_until": data.valid_until,
            "commercial_terms": [term.model_dump() for term in data.commercial_terms],
            "updated_at": now(),
        }
        if data.image_urls is not None:
            changes["image_urls"] = data.image_urls

        await self._collection.update_one(
            {"_id": quotation_id}, {"$set": changes, "$push": {"edit_history": version.model_dump()}}
        )
        logger.info("quotation_revised", quotation_id=quotation.quotation_id, version=version.version)
        return await self.get_quotation(quotation_id)

    async def update_status(self, quotation_id: UUID, status: QuotationStatus) -> Quotation:
        await self.get_quotation(quotation_id)
        await self._collection.update_one({"_id": quotation_id}, {"$set": {"status": status, "updated_at": now()}})
        return await self.get_quotation(quotation_id)

    async def approve_quotation(self, quotation_id: UUID) -> Quotation:
        """Approve quotation, linking it to an existing client or registering the lead as a new client."""
        quotation = await self.get_quotation(quotation_id)
        client_id = quotation.client_id

        if client_id is None:
            info = quotation.client_info
            existing = await self.core.services.client.find_by_contact(info.phone, info.email)
            if existing is not None:
                client_id = existing.id
            else:
                client = await self.core.services.client.create_client(
                    ClientCreate(
                        name=info.name,
                        contact_person=info.contact_person,
                        phone=info.phone,
                        email=info.email,
                        addresses=_lead_addresses(info),
                    )
                )
                client_id = client.id

        await self._collection.update_one(
            {"_id": quotation_id},
            {"$set": {"client_id": client_id, "status": QuotationStatus.APPROVED, "updated_at": now()}},
        )
        logger.info("quotation_approved", quotation_id=quotation.quotation_id, client_id=client_id)
        return await self.get_quotation(quotation_id)


def _lead_addresses(info: ClientInfo) -> list[Address]:
    addresses = []
    if info.billing_address:
        addresses.append(Address(tag="Billing", address=info.billing_address))
    if info.installation_address:
        addresses.append(Address(tag="Installation", address=info.installation_address))
    return addresses
