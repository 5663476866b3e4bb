from datetime import datetime
from uuid import UUID

from pydantic import Field, JsonValue

from tablebase.core.db import MongoModel
from tablebase.utils import now


class Value(MongoModel):
    """Stored datum for one (record, field) pair. At most one exists per pair."""

    record_id: UUID
    field_id: UUID
    value: JsonValue = None
    created_by: UUID
    updated_by: UUID
    created_at: datetime = Field(default_factory=now)
    updated_at: datetime = Field(default_factory=now)
