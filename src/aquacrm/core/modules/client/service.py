import re
from typing import Any
from uuid import UUID

import structlog
from pymongo.asynchronous.database import AsyncDatabase

from aquacrm.core.core import Service
from aquacrm.core.modules.client.models import Client, ClientCreate, ClientUpdate, contact_conditions
from aquacrm.core.pagination import PaginationResult
from aquacrm.errors import NotFoundError, ValidationError
from aquacrm.utils import now

logger = structlog.get_logger(__name__)

SEARCH_LIMIT = 10


class ClientService(Service):
    """Manages client records."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("clients")

    async def on_start(self) -> None:
        """Create indexes for contact lookups and sorting."""
        await self._collection.create_index([("phone", 1)])
        await self._collection.create_index([("email", 1)])
        await self._collection.create_index([("created_at", -1)])

    async def list_clients(self, limit: int = 50, offset: int = 0) -> PaginationResult[Client]:
        """Get paginated clients, newest first."""
        return await PaginationResult[Client].fetch(self._collection, Client, {}, "created_at", limit, offset)

    async def count_clients(self) -> int:
        return await self._collection.count_documents({})

    async def get_client(self, client_id: UUID) -> Client:
        """Get client by ID."""
        doc = await self._collection.find_one({"_id": client_id})
        if not doc:
            raise NotFoundError(f"Client not found: {client_id}")
        return Client.model_validate(doc)

    async def search_clients(self, term: str) -> list[Client]:
        """Case-insensitive search over name, email and phone."""
        pattern = {"$regex": re.escape(term), "$options": "i"}
        cursor = self._collection.find({"$or": [{"name": pattern}, {"email": pattern}, {"phone": pattern}]}).limit(
            SEARCH_LIMIT
        )
        return await Client.list_cursor(cursor)

    async def find_by_contact(self, phone: str | None, email: str | None, exclude_id: UUID | None = None) -> Client | None:
        """Find a client sharing the given phone or email (blank values are ignored)."""
        conditions = contact_conditions(phone, email)
        if not conditions:
            return None
        query: dict[str, Any] = {"$or": conditions}
        if exclude_id is not None:
            query["_id"] = {"$ne": exclude_id}
        doc = await self._collection.find_one(query)
        return Client.model_validate(doc) if doc else None

    async def create_client(self, data: ClientCreate) -> Client:
        """Create client, rejecting duplicates by phone or email."""
        if await self.find_by_contact(data.phone, data.email):
            raise ValidationError("A client with this phone or email already exists")

        client = Client(**data.model_dump())
        await self._collection.insert_one(client.to_mongo())
        logger.info("client_created", client_id=client.id, name=client.name)
        return client

    async def update_client(self, client_id: UUID, data: ClientUpdate) -> Client:
        """Partially update client, rejecting phone/email already used by another client."""
        await self.get_client(client_id)
        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        if await self.find_by_contact(changes.get("phone"), changes.get("email"), exclude_id=client_id):
            raise ValidationError("Another client with this phone or email already exists")

        changes["updated_at"] = now()
        await self._collection.update_one({"_id": client_id}, {"$set": changes})
        return await self.get_client(client_id)

    async def delete_client(self, client_id: UUID) -> Client:
        """Delete client and return the removed record."""
        client = await self.get_client(client_id)
        await self._collection.delete_one({"_id": client_id})
        logger.info("client_deleted", client_id=client_id)
        return client
