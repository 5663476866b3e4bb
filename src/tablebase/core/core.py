from __future__ import annotations

import importlib
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any, cast
from urllib.parse import urlparse

from pymongo import AsyncMongoClient
from pymongo.errors import PyMongoError
from pymongo.asynchronous.client_session import AsyncClientSession
from pymongo.asynchronous.database import AsyncDatabase

from tablebase.config import Config
from tablebase.errors import ConflictError

if TYPE_CHECKING:
    from tablebase.core.modules.base.service import BaseService
    from tablebase.core.modules.enrichment.service import EnrichmentService
    from tablebase.core.modules.field.service import FieldService
    from tablebase.core.modules.option.service import OptionService
    from tablebase.core.modules.position.service import PositionService
    from tablebase.core.modules.record.service import RecordService
    from tablebase.core.modules.user.service import UserService
    from tablebase.core.modules.value.service import ValueService


class Service:
    """Base class for services with direct database access."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        self.database = database
        self._core: Core | None = None

    async def on_start(self) -> None:
        """Initialize service on application startup."""

    async def on_stop(self) -> None:
        """Cleanup service on application shutdown."""

    @property
    def core(self) -> Core:
        """Get the core application context."""
        if self._core is None:
            raise RuntimeError("Core not set for service")
        return self._core

    def set_core(self, core: Core) -> None:
        """Set the core application context."""
        self._core = core

    @asynccontextmanager
    async def transaction(self) -> AsyncGenerator[AsyncClientSession]:
        """Run the enclosed writes in one multi-document transaction.

        Commits when the block exits normally, aborts when it raises.
        Two transactions writing the same document conflict; the loser is
        aborted and reported as ConflictError so the client can retry.
        Requires MongoDB running as a replica set.
        """
        try:
            async with self.database.client.start_session() as session:
                async with await session.start_transaction():
                    yield session
        except PyMongoError as e:
            if e.has_error_label("TransientTransactionError"):
                raise ConflictError("Data was modified by a concurrent request, retry") from e
            raise


class Services:
    """Service registry that automatically discovers and initializes services."""

    position: PositionService
    user: UserService
    base: BaseService
    field: FieldService
    option: OptionService
    record: RecordService
    value: ValueService
    enrichment: EnrichmentService

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        """Initialize all services automatically using service configuration."""
        self._services: list[Service] = []
        self._database = database

        # Service configuration: (attribute_name, module_path, class_name)
        service_configs = [
            ("position", "tablebase.core.modules.position.service", "PositionService"),
            ("user", "tablebase.core.modules.user.service", "UserService"),
            ("base", "tablebase.core.modules.base.service", "BaseService"),
            ("field", "tablebase.core.modules.field.service", "FieldService"),
            ("option", "tablebase.core.modules.option.service", "OptionService"),
            ("record", "tablebase.core.modules.record.service", "RecordService"),
            ("value", "tablebase.core.modules.value.service", "ValueService"),
            ("enrichment", "tablebase.core.modules.enrichment.service", "EnrichmentService"),
        ]

        for attr_name, module_path, class_name in service_configs:
            module = importlib.import_module(module_path)
            service_class = cast(type[Service], getattr(module, class_name))
            service_instance = service_class(database)
            setattr(self, attr_name, service_instance)
            self._services.append(service_instance)

    def set_core(self, core: Core) -> None:
        """Set core reference for all services."""
        for service in self._services:
            service.set_core(core)

    async def start_all(self) -> None:
        """Start all services that have startup logic."""
        for service in self._services:
            await service.on_start()

    async def stop_all(self) -> None:
        """Stop all services that have cleanup logic."""
        for service in self._services:
            await service.on_stop()


class Core:
    """Container providing config, database, and all service instances."""

    config: Config
    mongo_client: AsyncMongoClient[dict[str, Any]]
    database: AsyncDatabase[dict[str, Any]]
    services: Services

    def __init__(self, config: Config) -> None:
        """Initialize core with config, MongoDB, and auto-register services."""
        self.config = config
        self.mongo_client = AsyncMongoClient(config.database_url, uuidRepresentation="standard", tz_aware=True)
        self.database = self.mongo_client.get_database(urlparse(config.database_url).path[1:])
        self.services = Services(self.database)
        self.services.set_core(self)

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        """Manage application lifecycle - startup and shutdown."""
        await self.on_start()
        try:
            yield
        finally:
            await self.on_stop()

    async def on_start(self) -> None:
        """Start all services on application startup."""
        await self.services.start_all()

    async def on_stop(self) -> None:
        """Stop services and close MongoDB connection on shutdown."""
        await self.services.stop_all()
        await self.mongo_client.aclose()
