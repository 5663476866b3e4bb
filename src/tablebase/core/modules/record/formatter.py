"""Projection of loaded records into the external field-id keyed shape.

Creation, single-record reads and listings all return the same shape:
``values[field_id] = {"field_id", "field_type", "value"}``.
"""

from collections.abc import Mapping
from typing import Any
from uuid import UUID

from tablebase.core.modules.record.models import EnrichedRecord, EnrichedValue, LoadedRecord


def format_record(loaded: LoadedRecord, resolved: Mapping[UUID, Any] | None = None) -> EnrichedRecord:
    """Build the external representation of a record.

    Args:
        loaded: Record with values joined to their fields
        resolved: Resolved values by field ID; fields missing here keep their raw value

    Returns:
        The record with one entry per stored value
    """
    resolved = resolved or {}
    values: dict[str, EnrichedValue] = {}
    for item in loaded.values:
        field_id = item.field.id
        values[str(field_id)] = EnrichedValue(
            field_id=field_id,
            field_type=item.field.type,
            value=resolved[field_id] if field_id in resolved else item.value.value,
        )

    return EnrichedRecord(
        id=loaded.record.id,
        base_id=loaded.record.base_id,
        created_at=loaded.record.created_at,
        values=values,
    )
