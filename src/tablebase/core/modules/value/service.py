from collections.abc import Iterable
from typing import Any
from uuid import UUID, uuid4

import structlog
from pymongo import ReturnDocument
from pymongo.asynchronous.database import AsyncDatabase

from tablebase.core.core import Service
from tablebase.core.modules.field.validators import is_writable_type, validate_value
from tablebase.core.modules.value.models import Value
from tablebase.errors import NotFoundError, UnsupportedTypeError
from tablebase.utils import now

logger = structlog.get_logger(__name__)


class ValueService(Service):
    """Sparse attribute storage: one document per (record, field) slot."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("values")

    async def on_start(self) -> None:
        """Create indexes; the unique slot index is the guard against duplicate values."""
        await self._collection.create_index([("record_id", 1), ("field_id", 1)], unique=True)
        await self._collection.create_index([("field_id", 1)])

    async def upsert_value(self, record_id: UUID, field_id: UUID, value: Any, actor_id: UUID) -> Value:
        """Create or update the value of a record's field.

        Concurrent writers to the same slot race on the unique index; the last write wins.

        Raises:
            NotFoundError: If the record or field is missing, or they belong to different bases
            UnsupportedTypeError: If the field type accepts no client values, null included
            ValidationError: If the value does not fit the field type
        """
        record = await self.core.services.record.get_record_doc(record_id)
        field = await self.core.services.field.get_field(field_id)
        if field.base_id != record.base_id:
            raise NotFoundError(f"Field '{field_id}' not found in base '{record.base_id}'")

        # validate_value accepts null for any type; clearing a system-managed value is still a write
        if not is_writable_type(field.type):
            raise UnsupportedTypeError(f"Unsupported field type: {field.type}")
        validate_value(value, field.type)

        timestamp = now()
        doc = await self._collection.find_one_and_update(
            {"record_id": record_id, "field_id": field_id},
            {
                "$set": {"value": value, "updated_by": actor_id, "updated_at": timestamp},
                "$setOnInsert": {"_id": uuid4(), "created_by": actor_id, "created_at": timestamp},
            },
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )
        logger.debug("value_upserted", record_id=record_id, field_id=field_id, actor_id=actor_id)
        return Value.model_validate(doc)

    async def list_values(self, record_ids: Iterable[UUID]) -> list[Value]:
        """Get all stored values of the given records."""
        return await Value.list_cursor(self._collection.find({"record_id": {"$in": list(record_ids)}}))
