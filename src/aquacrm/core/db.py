from datetime import UTC, date, datetime, time
from typing import Any, Self
from uuid import UUID, uuid4

from bson.codec_options import TypeEncoder, TypeRegistry
from pydantic import BaseModel, ConfigDict, Field
from pymongo.asynchronous.cursor import AsyncCursor


class DateEncoder(TypeEncoder):
    """Store calendar dates as UTC-midnight datetimes (BSON has no date-only type)."""

    @property
    def python_type(self) -> type:
        return date

    def transform_python(self, value: date) -> datetime:
        return datetime.combine(value, time.min, tzinfo=UTC)


TYPE_REGISTRY = TypeRegistry([DateEncoder()])


class MongoModel(BaseModel):
    id: UUID = Field(alias="_id", serialization_alias="id", default_factory=uuid4)

    model_config = ConfigDict(
        populate_by_name=True,
        arbitrary_types_allowed=True,
        json_schema_serialization_defaults_required=True,
    )

    def to_mongo(self) -> dict[str, Any]:
        """Convert the model to a dictionary for MongoDB storage with _id field."""
        data = self.model_dump(exclude=set(type(self).model_computed_fields))  # Derived values are not stored
        if "id" in data:
            data["_id"] = data.pop("id")  # Rename id → _id for MongoDB
        return data

    @classmethod
    async def list_cursor(cls, cursor: AsyncCursor[dict[str, Any]]) -> list[Self]:
        """Iterate over an AsyncCursor and return a list of model instances."""
        return [cls.model_validate(item) async for item in cursor]
