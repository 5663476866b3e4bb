"""Shared pytest fixtures."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any
from unittest.mock import AsyncMock, MagicMock
from uuid import UUID

import pytest

from tablebase.core.core import Service
from tablebase.core.modules.base.models import Base, build_system_fields
from tablebase.core.modules.field.models import Field, FieldType
from tablebase.core.modules.record.models import LoadedRecord, LoadedValue, Record
from tablebase.core.modules.value.models import Value


@pytest.fixture
def actor_id():
    """ID of the authenticated user performing operations."""
    return UUID("87654321-4321-8765-4321-876543218765")


@pytest.fixture
def mock_base(actor_id):
    """Create a mock base for testing."""
    return Base(id=UUID("12345678-1234-5678-1234-567812345678"), name="Customers", created_by=actor_id)


@pytest.fixture
def system_fields(mock_base):
    """The NAME, CREATED_BY and CREATED_AT fields of the mock base."""
    return build_system_fields(mock_base.id)


@pytest.fixture
def mock_record(mock_base):
    """Create a mock record in the mock base."""
    return Record(base_id=mock_base.id)


@pytest.fixture
def make_field(mock_base):
    """Factory for fields of the mock base."""

    def _make_field(field_type: FieldType, name: str | None = None, base_id: UUID | None = None) -> Field:
        return Field(base_id=base_id or mock_base.id, name=name or str(field_type), type=field_type)

    return _make_field


@pytest.fixture
def make_loaded(mock_base, actor_id):
    """Factory for records joined with their values: ``make_loaded([(field, raw_value), ...])``."""

    def _make_loaded(values: list[tuple[Field, Any]], record: Record | None = None) -> LoadedRecord:
        record = record or Record(base_id=mock_base.id)
        return LoadedRecord(
            record=record,
            values=[
                LoadedValue(
                    field=field,
                    value=Value(record_id=record.id, field_id=field.id, value=raw, created_by=actor_id, updated_by=actor_id),
                )
                for field, raw in values
            ],
        )

    return _make_loaded


class FakeCursor:
    """Async cursor over fixed documents that records the chained modifiers."""

    def __init__(self, docs: list[dict[str, Any]]) -> None:
        self.docs = docs
        self.sort_spec: Any = None
        self.skipped: int | None = None
        self.limited: int | None = None

    def sort(self, spec: Any, direction: int | None = None) -> "FakeCursor":
        self.sort_spec = spec if direction is None else [(spec, direction)]
        return self

    def skip(self, count: int) -> "FakeCursor":
        self.skipped = count
        return self

    def limit(self, count: int) -> "FakeCursor":
        self.limited = count
        return self

    async def __aiter__(self) -> AsyncGenerator[dict[str, Any]]:
        for doc in self.docs:
            yield doc


@pytest.fixture
def make_cursor():
    """Factory for async cursors: ``make_cursor([doc, ...])``."""
    return FakeCursor


@pytest.fixture
def collection():
    """Mock pymongo async collection; every collection of the database is this one."""
    return AsyncMock()


@pytest.fixture
def database(collection):
    """Mock pymongo async database."""
    database = MagicMock()
    database.get_collection.return_value = collection
    return database


@pytest.fixture
def mock_core():
    """Mock core; tests stub the sibling service calls they need on ``mock_core.services``."""
    return MagicMock()


@pytest.fixture
def no_transaction(monkeypatch):
    """Run transactional blocks without a MongoDB session."""

    @asynccontextmanager
    async def transaction(self) -> AsyncGenerator[None]:
        yield None

    monkeypatch.setattr(Service, "transaction", transaction)
