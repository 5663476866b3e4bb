"""Base model for documents stored in MongoDB collections."""

from collections.abc import Mapping
from typing import Any, Self
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field
from pymongo.asynchronous.cursor import AsyncCursor


class MongoModel(BaseModel):
    """Document with a UUID primary key, stored as ``_id`` and exposed as ``id``."""

    id: UUID = Field(alias="_id", serialization_alias="id", default_factory=uuid4)

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_serialization_defaults_required=True,
    )

    def to_mongo(self) -> dict[str, Any]:
        """Dump for insertion; UUIDs and datetimes keep their BSON-native Python types."""
        data = self.model_dump()
        data["_id"] = data.pop("id")
        return data

    @classmethod
    def from_mongo(cls, doc: Mapping[str, Any] | None) -> Self | None:
        """Validate a ``find_one`` result, passing a miss through as None."""
        return cls.model_validate(doc) if doc is not None else None

    @classmethod
    async def list_cursor(cls, cursor: AsyncCursor[dict[str, Any]]) -> list[Self]:
        """Drain a find cursor into models, keeping cursor order."""
        return [cls.model_validate(doc) async for doc in cursor]
