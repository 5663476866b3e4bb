from typing import Any
from uuid import UUID

import structlog
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import DuplicateKeyError

from tablebase.core.core import Service
from tablebase.core.modules.field.models import SELECT_FIELD_TYPES
from tablebase.core.modules.option.models import Option
from tablebase.errors import ConflictError, NotFoundError, ValidationError
from tablebase.utils import parse_uuid

logger = structlog.get_logger(__name__)


class OptionService(Service):
    """Manages the choices of single/multi select fields."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("options")

    async def on_start(self) -> None:
        """Create the unique index that backs option name uniqueness."""
        await self._collection.create_index([("field_id", 1), ("name", 1)], unique=True)

    async def create_option(self, field_id: UUID, name: str, color: str | None = None) -> Option:
        """Add an option to a select field.

        Raises:
            NotFoundError: If the field does not exist
            ValidationError: If the field is not a select field or the name is blank
            ConflictError: If the field already has an option with this name
        """
        field = await self.core.services.field.get_field(field_id)
        if field.type not in SELECT_FIELD_TYPES:
            raise ValidationError(f"Field '{field_id}' of type '{field.type}' does not support options")
        if not name.strip():
            raise ValidationError("Option name cannot be empty")

        await self._ensure_name_available(field_id, name)

        option = Option(field_id=field_id, name=name, color=color)
        try:
            async with self.transaction() as session:
                await self.core.services.field.touch_field(field_id, session)
                await self._collection.insert_one(option.to_mongo(), session=session)
        except DuplicateKeyError as e:
            raise ConflictError(f"Option '{name}' already exists in field '{field_id}'") from e

        logger.debug("option_created", option_id=option.id, field_id=field_id, name=name)
        return option

    async def get_option(self, option_id: UUID) -> Option:
        """Get option by ID."""
        doc = await self._collection.find_one({"_id": option_id})
        if doc is None:
            raise NotFoundError(f"Option '{option_id}' not found")
        return Option.model_validate(doc)

    async def list_options(self, field_id: UUID) -> list[Option]:
        """Get all options of a field, sorted by name."""
        return await Option.list_cursor(self._collection.find({"field_id": field_id}).sort("name", 1))

    async def find_option(self, field_id: UUID, ref: str) -> Option | None:
        """Find an option of a field by its ID or, failing that, by its name."""
        option_id = parse_uuid(ref)
        if option_id is not None:
            doc = await self._collection.find_one({"_id": option_id, "field_id": field_id})
            if doc is not None:
                return Option.model_validate(doc)

        return Option.from_mongo(await self._collection.find_one({"field_id": field_id, "name": ref}))

    async def update_option(self, option_id: UUID, name: str | None = None, color: str | None = None) -> Option:
        """Rename and/or recolor an option. None values are left unchanged.

        Raises:
            NotFoundError: If the option does not exist
            ConflictError: If another option of the same field already has the new name
        """
        option = await self.get_option(option_id)

        update_doc: dict[str, Any] = {}
        if name is not None:
            if not name.strip():
                raise ValidationError("Option name cannot be empty")
            await self._ensure_name_available(option.field_id, name, exclude_id=option_id)
            update_doc["name"] = name
        if color is not None:
            update_doc["color"] = color

        if update_doc:
            try:
                await self._collection.update_one({"_id": option_id}, {"$set": update_doc})
            except DuplicateKeyError as e:
                raise ConflictError(f"Option '{name}' already exists in field '{option.field_id}'") from e

        return await self.get_option(option_id)

    async def delete_option(self, option_id: UUID) -> None:
        """Delete an option. Values referencing it keep their raw string."""
        result = await self._collection.delete_one({"_id": option_id})
        if result.deleted_count == 0:
            raise NotFoundError(f"Option '{option_id}' not found")

    async def _ensure_name_available(self, field_id: UUID, name: str, exclude_id: UUID | None = None) -> None:
        query: dict[str, Any] = {"field_id": field_id, "name": name}
        if exclude_id is not None:
            query["_id"] = {"$ne": exclude_id}
        if await self._collection.find_one(query) is not None:
            raise ConflictError(f"Option '{name}' already exists in field '{field_id}'")
