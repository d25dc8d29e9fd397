from typing import Any

import structlog
from pymongo import ReturnDocument
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import PyMongoError

from aquacrm.core.core import Service
from aquacrm.core.modules.counter.models import Counter, CounterType, format_sequence
from aquacrm.errors import StoreUnavailableError

logger = structlog.get_logger(__name__)


class CounterService(Service):
    """Service for managing auto-incrementing counters per document type."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("counters")

    async def get_next_sequence(self, counter_type: CounterType | str) -> int:
        """Atomically increment and return the next sequence number for a document type.

        The read-increment-write is a single find_one_and_update, so concurrent
        callers always receive distinct values. A missing counter is created by
        the upsert and starts at 1.

        Raises:
            StoreUnavailableError: If the database operation fails
        """
        try:
            result = await self._collection.find_one_and_update(
                {"_id": str(counter_type)},
                {"$inc": {"seq": 1}},
                upsert=True,
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as e:
            logger.warning("sequence_allocation_failed", counter_type=str(counter_type), error=str(e))
            raise StoreUnavailableError(f"Could not allocate '{counter_type}' sequence") from e

        seq = Counter.model_validate(result).seq
        logger.debug("sequence_allocated", counter_type=str(counter_type), seq=seq)
        return seq

    async def allocate(self, counter_type: CounterType | str) -> str:
        """Allocate the next sequence number and return it zero-padded to three digits."""
        return format_sequence(await self.get_next_sequence(counter_type))

    async def get_current_sequence(self, counter_type: CounterType | str) -> int:
        """Get the current sequence number without incrementing."""
        doc = await self._collection.find_one({"_id": str(counter_type)})
        if doc:
            return Counter.model_validate(doc).seq
        return 0
