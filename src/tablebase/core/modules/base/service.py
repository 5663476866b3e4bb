from typing import Any
from uuid import UUID

import structlog
from pymongo.asynchronous.client_session import AsyncClientSession
from pymongo.asynchronous.database import AsyncDatabase

from tablebase.core.core import Service
from tablebase.core.modules.base.models import Base, BaseDetails, build_system_fields
from tablebase.errors import ConflictError, NotFoundError
from tablebase.utils import now

logger = structlog.get_logger(__name__)


class BaseService(Service):
    """Schema registry for bases; owns atomic creation of a base with its system fields."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("bases")

    async def on_start(self) -> None:
        await self._collection.create_index([("created_by", 1)])
        await self._collection.create_index([("created_at", 1)])

    async def create_base(self, name: str, actor_id: UUID) -> Base:
        """Create a base and its three system fields in one transaction."""
        base = Base(name=name, created_by=actor_id)
        system_fields = build_system_fields(base.id)

        async with self.transaction() as session:
            await self._collection.insert_one(base.to_mongo(), session=session)
            await self.database.get_collection("fields").insert_many(
                [field.to_mongo() for field in system_fields], session=session
            )

        logger.info("base_created", base_id=base.id, created_by=actor_id)
        return base

    async def get_base(self, base_id: UUID) -> Base:
        """Get base by ID."""
        doc = await self._collection.find_one({"_id": base_id})
        if doc is None:
            raise NotFoundError(f"Base '{base_id}' not found")
        return Base.model_validate(doc)

    async def get_base_details(self, base_id: UUID) -> BaseDetails:
        """Get base with its field definitions."""
        base = await self.get_base(base_id)
        fields = await self.core.services.field.list_fields(base_id)
        return BaseDetails(**base.model_dump(), fields=fields)

    async def list_bases(self) -> list[Base]:
        """Get all bases, oldest first."""
        return await Base.list_cursor(self._collection.find().sort("created_at", 1))

    async def touch_owned_base(self, base_id: UUID, actor_id: UUID, session: AsyncClientSession | None) -> None:
        """Mark a schema change on a base the actor created, inside the caller's transaction.

        The write makes the caller's transaction conflict with a concurrent delete_base.

        Raises:
            NotFoundError: If the base does not exist or the actor did not create it
        """
        result = await self._collection.update_one(
            {"_id": base_id, "created_by": actor_id}, {"$set": {"updated_at": now()}}, session=session
        )
        if result.matched_count == 0:
            raise NotFoundError(f"Base '{base_id}' not found or access denied")

    async def adjust_record_count(self, base_id: UUID, delta: int, session: AsyncClientSession | None) -> None:
        """Move the record counter of a base inside the caller's transaction.

        Raises:
            NotFoundError: If the base does not exist
        """
        result = await self._collection.update_one({"_id": base_id}, {"$inc": {"record_count": delta}}, session=session)
        if result.matched_count == 0:
            raise NotFoundError(f"Base '{base_id}' not found")

    async def delete_base(self, base_id: UUID) -> None:
        """Delete an empty base together with its fields and their options.

        Every read runs inside the transaction, and the base is only deleted
        while its record counter is zero, so a record or field created
        concurrently either commits first and blocks the delete, or conflicts.

        Raises:
            NotFoundError: If the base does not exist
            ConflictError: If the base still has records
        """
        fields_collection = self.database.get_collection("fields")

        async with self.transaction() as session:
            base = Base.from_mongo(await self._collection.find_one({"_id": base_id}, session=session))
            if base is None:
                raise NotFoundError(f"Base '{base_id}' not found")
            if base.record_count > 0:
                raise ConflictError(f"Cannot delete base '{base_id}' - it has {base.record_count} record(s)")

            result = await self._collection.delete_one({"_id": base_id, "record_count": 0}, session=session)
            if result.deleted_count == 0:
                raise ConflictError(f"Base '{base_id}' was modified while deleting, retry")

            field_ids = [
                doc["_id"] async for doc in fields_collection.find({"base_id": base_id}, {"_id": 1}, session=session)
            ]
            await self.database.get_collection("options").delete_many({"field_id": {"$in": field_ids}}, session=session)
            await fields_collection.delete_many({"base_id": base_id}, session=session)

        logger.info("base_deleted", base_id=base_id, field_count=len(field_ids))
