from typing import Any
from uuid import UUID

import structlog
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import DuplicateKeyError

from tablebase.core.core import Service
from tablebase.core.modules.position.models import Position
from tablebase.errors import ConflictError, NotFoundError, ValidationError

logger = structlog.get_logger(__name__)


class PositionService(Service):
    """Catalog of job positions referenced by users."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("positions")

    async def on_start(self) -> None:
        """Create the unique index that backs position name uniqueness."""
        await self._collection.create_index([("name", 1)], unique=True)

    async def list_positions(self) -> list[Position]:
        """Get all positions, sorted by name."""
        return await Position.list_cursor(self._collection.find().sort("name", 1))

    async def find_position(self, position_id: UUID) -> Position | None:
        return Position.from_mongo(await self._collection.find_one({"_id": position_id}))

    async def get_position(self, position_id: UUID) -> Position:
        """Get position by ID."""
        position = await self.find_position(position_id)
        if position is None:
            raise NotFoundError(f"Position '{position_id}' not found")
        return position

    async def create_position(self, name: str) -> Position:
        """Add a position.

        Raises:
            ValidationError: If the name is blank
            ConflictError: If a position with this name already exists
        """
        if not name.strip():
            raise ValidationError("Position name cannot be empty")
        if await self._collection.find_one({"name": name}) is not None:
            raise ConflictError(f"Position '{name}' already exists")

        position = Position(name=name)
        try:
            await self._collection.insert_one(position.to_mongo())
        except DuplicateKeyError as e:
            raise ConflictError(f"Position '{name}' already exists") from e

        logger.info("position_created", position_id=position.id, name=name)
        return position

    async def delete_position(self, position_id: UUID) -> None:
        """Delete a position.

        Users still pointing at it are shown without a position.

        Raises:
            NotFoundError: If the position does not exist
        """
        await self.get_position(position_id)
        await self._collection.delete_one({"_id": position_id})
        logger.info("position_deleted", position_id=position_id)
