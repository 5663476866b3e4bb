from collections.abc import Iterable
from typing import Any
from uuid import UUID

import structlog
from pymongo.asynchronous.client_session import AsyncClientSession
from pymongo.asynchronous.database import AsyncDatabase

from tablebase.core.core import Service
from tablebase.core.modules.field.models import SYSTEM_FIELD_TYPES, Field, FieldType
from tablebase.errors import NotFoundError, ValidationError
from tablebase.utils import now

logger = structlog.get_logger(__name__)


class FieldService(Service):
    """Service for field definitions within bases."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("fields")

    async def on_start(self) -> None:
        await self._collection.create_index([("base_id", 1), ("created_at", 1)])

    async def create_field(
        self, base_id: UUID, name: str, field_type: FieldType, actor_id: UUID, config: dict[str, Any] | None = None
    ) -> Field:
        """Add a field to a base owned by the actor.

        Raises:
            NotFoundError: If the base does not exist or the actor did not create it
            ValidationError: If the name is blank or the type is a system type
        """
        if not name.strip():
            raise ValidationError("Field name cannot be empty")
        if field_type in SYSTEM_FIELD_TYPES:
            raise ValidationError(f"Field type '{field_type}' is managed by the system and cannot be added")

        field = Field(base_id=base_id, name=name, type=field_type, config=config or {})
        async with self.transaction() as session:
            await self.core.services.base.touch_owned_base(base_id, actor_id, session)
            await self._collection.insert_one(field.to_mongo(), session=session)
        logger.info("field_created", field_id=field.id, base_id=base_id, type=field_type)
        return field

    async def get_field(self, field_id: UUID) -> Field:
        """Get field by ID."""
        doc = await self._collection.find_one({"_id": field_id})
        if doc is None:
            raise NotFoundError(f"Field '{field_id}' not found")
        return Field.model_validate(doc)

    async def list_fields(self, base_id: UUID, session: AsyncClientSession | None = None) -> list[Field]:
        """Get all fields of a base in creation order, optionally inside a transaction."""
        cursor = self._collection.find({"base_id": base_id}, session=session).sort("created_at", 1)
        return await Field.list_cursor(cursor)

    async def get_fields_by_ids(self, field_ids: Iterable[UUID]) -> dict[UUID, Field]:
        """Get existing fields by ID; deleted fields are simply absent from the result."""
        fields = await Field.list_cursor(self._collection.find({"_id": {"$in": list(set(field_ids))}}))
        return {field.id: field for field in fields}

    async def touch_field(self, field_id: UUID, session: AsyncClientSession | None) -> None:
        """Mark a change to a field's options inside the caller's transaction.

        The write makes the caller's transaction conflict with a concurrent
        deletion of the field or its base.
        """
        result = await self._collection.update_one({"_id": field_id}, {"$set": {"updated_at": now()}}, session=session)
        if result.matched_count == 0:
            raise NotFoundError(f"Field '{field_id}' not found")

    async def delete_field(self, field_id: UUID) -> None:
        """Delete a field and its options.

        Values stored for the field are left orphaned; reads skip them.

        Raises:
            NotFoundError: If the field does not exist
            ValidationError: If the field is one of the base's system fields
        """
        field = await self.get_field(field_id)
        if field.is_system:
            raise ValidationError(f"Field '{field_id}' is a system field and cannot be deleted")

        async with self.transaction() as session:
            await self.database.get_collection("options").delete_many({"field_id": field_id}, session=session)
            await self._collection.delete_one({"_id": field_id}, session=session)

        logger.info("field_deleted", field_id=field_id, base_id=field.base_id)
