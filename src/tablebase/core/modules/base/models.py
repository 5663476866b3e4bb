"""Base models: user-defined collections of records sharing one schema."""

from datetime import datetime
from uuid import UUID

from pydantic import Field as PydanticField

from tablebase.core.db import MongoModel
from tablebase.core.modules.field.models import SYSTEM_FIELDS, Field
from tablebase.utils import now


class Base(MongoModel):
    """Container for records with a dynamic schema."""

    name: str
    created_by: UUID
    created_at: datetime = PydanticField(default_factory=now)
    updated_at: datetime = PydanticField(default_factory=now, description="Last schema change: a field was added")
    record_count: int = PydanticField(0, description="Number of records, kept in step by record writes")


class BaseDetails(Base):
    """Base together with its field definitions."""

    fields: list[Field] = PydanticField(default_factory=list)


def build_system_fields(base_id: UUID) -> list[Field]:
    """Create the NAME, CREATED_BY and CREATED_AT field definitions for a new base."""
    return [
        Field(base_id=base_id, name=name, type=field_type, config=dict(config)) for field_type, name, config in SYSTEM_FIELDS
    ]
