from typing import Any
from uuid import UUID

import structlog
from pymongo.asynchronous.database import AsyncDatabase

from aquacrm.core.core import Service
from aquacrm.core.modules.amc.models import (
    AMC,
    AMCCreate,
    AMCStatus,
    AMCUpdate,
    ProductInstance,
    ProductInstanceInput,
    VisitStatusUpdate,
)
from aquacrm.core.modules.amc.schedule import generate_service_visits, reschedule_visits
from aquacrm.core.modules.client.models import ClientInfo
from aquacrm.core.modules.counter import document_ids
from aquacrm.core.modules.counter.models import CounterType
from aquacrm.core.pagination import PaginationResult
from aquacrm.errors import NotFoundError, ValidationError
from aquacrm.utils import now, today

logger = structlog.get_logger(__name__)


class AMCService(Service):
    """Manages annual maintenance contracts and their service visits."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("amcs")

    async def on_start(self) -> None:
        """Create indexes on startup."""
        await self._collection.create_index([("amc_id", 1)], unique=True)
        await self._collection.create_index([("client_id", 1)])
        await self._collection.create_index([("start_date", -1)])

    async def list_amcs(self, limit: int = 50, offset: int = 0, client_id: UUID | None = None) -> PaginationResult[AMC]:
        """Get paginated contracts, latest start date first."""
        query = {"client_id": client_id} if client_id else {}
        return await PaginationResult[AMC].fetch(self._collection, AMC, query, "start_date", limit, offset)

    async def get_client_amcs(self, client_id: UUID) -> list[AMC]:
        cursor = self._collection.find({"client_id": client_id}).sort("start_date", -1)
        return await AMC.list_cursor(cursor)

    async def get_active_amcs(self) -> list[AMC]:
        return await AMC.list_cursor(self._collection.find({"status": AMCStatus.ACTIVE}))

    async def get_amc(self, amc_id: UUID) -> AMC:
        doc = await self._collection.find_one({"_id": amc_id})
        if not doc:
            raise NotFoundError(f"AMC not found: {amc_id}")
        return AMC.model_validate(doc)

    async def _product_instances(self, inputs: list[ProductInstanceInput]) -> list[ProductInstance]:
        instances = []
        for item in inputs:
            product = await self.core.services.product.get_product(item.product_id)
            instances.append(
                ProductInstance(
                    product_id=product.id,
                    product_name=product.name,
                    serial_number=item.serial_number,
                    purchase_date=item.purchase_date,
                )
            )
        return instances

    async def create_amc(self, data: AMCCreate) -> AMC:
        """Create contract with a freshly generated visit schedule."""
        client = await self.core.services.client.get_client(data.client_id)
        product_instances = await self._product_instances(data.product_instances)
        if data.originating_invoice_id is not None:
            await self.core.services.invoice.get_invoice(data.originating_invoice_id)

        sequence = await self.core.services.counter.allocate(CounterType.AMC)
        amc = AMC(
            amc_id=document_ids.amc_id(sequence, now()),
            client_id=client.id,
            client_info=ClientInfo.from_client(client, data.billing_address, data.installation_address),
            product_instances=product_instances,
            start_date=data.start_date,
            end_date=data.end_date,
            contract_amount=data.contract_amount,
            frequency_per_year=data.frequency_per_year,
            service_visits=generate_service_visits(data.start_date, data.end_date, data.frequency_per_year),
            originating_invoice_id=data.originating_invoice_id,
        )
        await self._collection.insert_one(amc.to_mongo())
        logger.info("amc_created", amc_id=amc.amc_id, visits=len(amc.service_visits))
        return amc

    async def update_amc(self, amc_id: UUID, data: AMCUpdate) -> AMC:
        """Partially update contract; a changed period or frequency replaces the whole schedule."""
        amc = await self.get_amc(amc_id)
        start_date = data.start_date or amc.start_date
        end_date = data.end_date or amc.end_date
        if end_date < start_date:
            raise ValidationError("end_date must not be before start_date")

        # null means "unchanged"; required contract fields must never be written as null
        changes: dict[str, Any] = data.model_dump(exclude_unset=True, exclude_none=True, exclude={"product_instances"})
        if data.product_instances is not None:
            instances = await self._product_instances(data.product_instances)
            changes["product_instances"] = [item.model_dump() for item in instances]

        visits = reschedule_visits(amc, data.start_date, data.end_date, data.frequency_per_year)
        if visits is not None:
            changes["service_visits"] = [visit.model_dump() for visit in visits]
            logger.info("amc_rescheduled", amc_id=amc.amc_id, visits=len(visits))

        changes["updated_at"] = now()
        await self._collection.update_one({"_id": amc_id}, {"$set": changes})
        return await self.get_amc(amc_id)

    async def update_visit_status(self, amc_id: UUID, visit_index: int, data: VisitStatusUpdate) -> AMC:
        """Mark a single visit completed, cancelled or back to scheduled."""
        amc = await self.get_amc(amc_id)
        if not 0 <= visit_index < len(amc.service_visits):
            raise NotFoundError(f"Service visit not found: {visit_index}")

        visit = amc.service_visits[visit_index].with_status(data.status, data.completed_date, today())
        if data.notes is not None:
            visit = visit.model_copy(update={"notes": data.notes})

        await self._collection.update_one(
            {"_id": amc_id},
            {"$set": {f"service_visits.{visit_index}": visit.model_dump(), "updated_at": now()}},
        )
        logger.info("amc_visit_updated", amc_id=amc.amc_id, visit_index=visit_index, status=data.status)
        return await self.get_amc(amc_id)

    async def delete_amc(self, amc_id: UUID) -> AMC:
        amc = await self.get_amc(amc_id)
        await self._collection.delete_one({"_id": amc_id})
        logger.info("amc_deleted", amc_id=amc.amc_id)
        return amc
