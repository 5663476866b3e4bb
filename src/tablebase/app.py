from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any
from uuid import UUID

import structlog

from tablebase.config import Config
from tablebase.core.core import Core
from tablebase.core.modules.base.models import Base, BaseDetails
from tablebase.core.modules.field.models import Field, FieldType
from tablebase.core.modules.filter.models import SortOrder
from tablebase.core.modules.option.models import Option
from tablebase.core.modules.position.models import Position
from tablebase.core.modules.record.models import EnrichedRecord
from tablebase.core.modules.value.models import Value
from tablebase.core.pagination import Page

logger = structlog.get_logger(__name__)


class App:
    """Facade for all core operations; every call receives the authenticated actor ID."""

    def __init__(self, config: Config) -> None:
        self._core = Core(config)

    @property
    def config(self) -> Config:
        return self._core.config

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        """Application lifespan management - delegates to Core."""
        async with self._core.lifespan():
            yield

    # === Schema registry ===
    async def create_base(self, actor_id: UUID, name: str) -> Base:
        """Create a base with its NAME, CREATED_BY and CREATED_AT fields."""
        return await self._core.services.base.create_base(name, actor_id)

    async def list_bases(self, actor_id: UUID) -> list[Base]:
        """Get all bases."""
        logger.debug("list_bases", actor_id=actor_id)
        return await self._core.services.base.list_bases()

    async def get_base(self, actor_id: UUID, base_id: UUID) -> BaseDetails:
        """Get a base with its fields."""
        logger.debug("get_base", actor_id=actor_id, base_id=base_id)
        return await self._core.services.base.get_base_details(base_id)

    async def delete_base(self, actor_id: UUID, base_id: UUID) -> None:
        """Delete a base that has no records."""
        logger.debug("delete_base", actor_id=actor_id, base_id=base_id)
        await self._core.services.base.delete_base(base_id)

    async def create_field(
        self, actor_id: UUID, base_id: UUID, name: str, field_type: FieldType, config: dict[str, Any] | None = None
    ) -> Field:
        """Add a field to a base created by the actor."""
        return await self._core.services.field.create_field(base_id, name, field_type, actor_id, config)

    async def delete_field(self, actor_id: UUID, field_id: UUID) -> None:
        """Delete a non-system field; its values become unreachable."""
        logger.debug("delete_field", actor_id=actor_id, field_id=field_id)
        await self._core.services.field.delete_field(field_id)

    async def list_options(self, actor_id: UUID, field_id: UUID) -> list[Option]:
        """Get the options of a select field."""
        await self._core.services.field.get_field(field_id)
        logger.debug("list_options", actor_id=actor_id, field_id=field_id)
        return await self._core.services.option.list_options(field_id)

    async def create_option(self, actor_id: UUID, field_id: UUID, name: str, color: str | None = None) -> Option:
        """Add an option to a select field."""
        logger.debug("create_option", actor_id=actor_id, field_id=field_id)
        return await self._core.services.option.create_option(field_id, name, color)

    async def update_option(
        self, actor_id: UUID, option_id: UUID, name: str | None = None, color: str | None = None
    ) -> Option:
        """Rename and/or recolor an option.

        Parameters are optional (None) to support partial updates - only values
        provided will be updated, while None values are ignored."""
        logger.debug("update_option", actor_id=actor_id, option_id=option_id)
        return await self._core.services.option.update_option(option_id, name, color)

    async def delete_option(self, actor_id: UUID, option_id: UUID) -> None:
        """Delete an option."""
        logger.debug("delete_option", actor_id=actor_id, option_id=option_id)
        await self._core.services.option.delete_option(option_id)

    # === Positions ===
    async def list_positions(self, actor_id: UUID) -> list[Position]:
        """Get all positions."""
        logger.debug("list_positions", actor_id=actor_id)
        return await self._core.services.position.list_positions()

    async def get_position(self, actor_id: UUID, position_id: UUID) -> Position:
        """Get a position."""
        logger.debug("get_position", actor_id=actor_id, position_id=position_id)
        return await self._core.services.position.get_position(position_id)

    async def create_position(self, actor_id: UUID, name: str) -> Position:
        """Add a position with a unique name."""
        logger.debug("create_position", actor_id=actor_id)
        return await self._core.services.position.create_position(name)

    async def delete_position(self, actor_id: UUID, position_id: UUID) -> None:
        """Delete a position."""
        logger.debug("delete_position", actor_id=actor_id, position_id=position_id)
        await self._core.services.position.delete_position(position_id)

    # === Records and values ===
    async def create_record(self, actor_id: UUID, base_id: UUID, name: str) -> EnrichedRecord:
        """Create a record with its system values."""
        return await self._core.services.record.create_record(base_id, name, actor_id)

    async def get_record(self, actor_id: UUID, record_id: UUID) -> EnrichedRecord:
        """Get an enriched record."""
        logger.debug("get_record", actor_id=actor_id, record_id=record_id)
        return await self._core.services.record.get_record(record_id)

    async def list_records(
        self,
        actor_id: UUID,
        base_id: UUID,
        filter: dict[str, Any] | None = None,
        sort: SortOrder = SortOrder.DESC,
        page: int = 1,
        limit: int | None = None,
    ) -> Page[EnrichedRecord]:
        """Get a filtered, sorted page of enriched records of a base."""
        logger.debug("list_records_requested", actor_id=actor_id, base_id=base_id)
        return await self._core.services.record.list_records(
            base_id, filter, sort, page, limit or self.config.default_page_limit
        )

    async def delete_record(self, actor_id: UUID, record_id: UUID) -> None:
        """Delete a record and its values."""
        logger.debug("delete_record", actor_id=actor_id, record_id=record_id)
        await self._core.services.record.delete_record(record_id)

    async def upsert_value(self, actor_id: UUID, record_id: UUID, field_id: UUID, value: Any) -> Value:
        """Create or update the value of a record's field."""
        return await self._core.services.value.upsert_value(record_id, field_id, value, actor_id)
