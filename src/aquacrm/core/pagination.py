from typing import Any, Self

from pydantic import BaseModel, Field
from pymongo.asynchronous.collection import AsyncCollection

from aquacrm.core.db import MongoModel


class PaginationResult[T](BaseModel):
    """One page of a list endpoint."""

    items: list[T] = Field(..., description="Records on this page")
    total: int = Field(..., description="Number of matching records across all pages", ge=0)
    limit: int = Field(..., description="Maximum records per page", ge=1)
    offset: int = Field(..., description="Number of records skipped", ge=0)

    @property
    def has_more(self) -> bool:
        return self.offset + len(self.items) < self.total

    @classmethod
    async def fetch[M: MongoModel](
        cls,
        collection: AsyncCollection[dict[str, Any]],
        model: type[M],
        query: dict[str, Any],
        sort_field: str,
        limit: int,
        offset: int,
    ) -> Self:
        """Load one page of `model` records matching `query`, newest `sort_field` first."""
        total = await collection.count_documents(query)
        cursor = collection.find(query).sort(sort_field, -1).skip(offset).limit(limit)
        return cls(items=await model.list_cursor(cursor), total=total, limit=limit, offset=offset)
