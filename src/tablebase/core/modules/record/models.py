"""Record models. A record has no typed columns; its data lives in Values."""

from datetime import datetime
from typing import Annotated, Any
from uuid import UUID

from pydantic import AfterValidator, BaseModel
from pydantic import Field as PydanticField

from tablebase.core.db import MongoModel
from tablebase.core.modules.field.models import Field, FieldType
from tablebase.core.modules.value.models import Value
from tablebase.errors import InternalError
from tablebase.utils import now, truncate_to_millis


class Record(MongoModel):
    """Row of a base."""

    base_id: UUID
    created_at: Annotated[datetime, AfterValidator(truncate_to_millis)] = PydanticField(default_factory=now)


class LoadedValue(BaseModel):
    """Stored value joined with its field definition."""

    field: Field
    value: Value


class LoadedRecord(BaseModel):
    """Record with its values joined to their fields, ready for enrichment."""

    record: Record
    values: list[LoadedValue] = PydanticField(default_factory=list)


class EnrichedValue(BaseModel):
    """Value of one field in the external record representation."""

    field_id: UUID
    field_type: FieldType
    value: Any = PydanticField(None, description="Raw JSON value, or the resolved user/option/record for reference fields")


class EnrichedRecord(BaseModel):
    """External representation of a record, values keyed by field id."""

    id: UUID
    base_id: UUID
    created_at: datetime
    values: dict[str, EnrichedValue] = PydanticField(default_factory=dict)


def build_system_values(record: Record, fields: list[Field], actor_id: UUID, name: str) -> list[Value]:
    """Create the NAME, CREATED_BY and CREATED_AT values for a new record.

    Raises:
        InternalError: If the base lacks one of its system fields
    """
    system_values: dict[FieldType, Any] = {
        FieldType.CREATED_BY: str(actor_id),
        FieldType.NAME: name,
        FieldType.CREATED_AT: record.created_at.isoformat(),
    }

    values = []
    for field_type, raw_value in system_values.items():
        field = next((f for f in fields if f.type == field_type), None)
        if field is None:
            raise InternalError(f"Base '{record.base_id}' is missing its '{field_type}' system field")
        values.append(
            Value(
                record_id=record.id,
                field_id=field.id,
                value=raw_value,
                created_by=actor_id,
                updated_by=actor_id,
                created_at=record.created_at,
                updated_at=record.created_at,
            )
        )
    return values
