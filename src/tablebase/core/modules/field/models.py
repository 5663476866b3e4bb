"""Field system for user-defined base schemas."""

from datetime import datetime
from enum import StrEnum
from typing import Any
from uuid import UUID

from pydantic import Field as PydanticField

from tablebase.core.db import MongoModel
from tablebase.utils import now


class FieldType(StrEnum):
    """Closed catalog of field types a base schema can use."""

    NAME = "name"  # System: record title
    SINGLE_LINE_TEXT = "single_line_text"
    LONG_TEXT = "long_text"
    NUMBER = "number"
    CHECKBOX = "checkbox"
    SINGLE_SELECT = "single_select"  # Option id or name
    MULTI_SELECT = "multi_select"
    SINGLE_USER = "single_user"  # User id
    MULTI_USER = "multi_user"
    SINGLE_LINK = "single_link"  # Record id
    MULTI_LINK = "multi_link"
    AUTHOR = "author"
    CREATED_BY = "created_by"  # System: actor who created the record
    CREATED_AT = "created_at"  # System: record creation time


READONLY = "readonly"  # Config key: values of this field are never client-written


# Fields every base gets on creation, in creation order: (type, name, config)
SYSTEM_FIELDS: tuple[tuple[FieldType, str, dict[str, Any]], ...] = (
    (FieldType.NAME, "Name", {}),
    (FieldType.CREATED_BY, "Created by", {READONLY: True}),
    (FieldType.CREATED_AT, "Created at", {READONLY: True}),
)

SYSTEM_FIELD_TYPES: frozenset[FieldType] = frozenset(field_type for field_type, _, _ in SYSTEM_FIELDS)

USER_FIELD_TYPES: frozenset[FieldType] = frozenset(
    {FieldType.SINGLE_USER, FieldType.MULTI_USER, FieldType.AUTHOR, FieldType.CREATED_BY}
)
SELECT_FIELD_TYPES: frozenset[FieldType] = frozenset({FieldType.SINGLE_SELECT, FieldType.MULTI_SELECT})
LINK_FIELD_TYPES: frozenset[FieldType] = frozenset({FieldType.SINGLE_LINK, FieldType.MULTI_LINK})
MULTI_FIELD_TYPES: frozenset[FieldType] = frozenset({FieldType.MULTI_USER, FieldType.MULTI_SELECT, FieldType.MULTI_LINK})


class Field(MongoModel):
    """Typed column definition within a base."""

    base_id: UUID
    name: str = PydanticField(..., description="Display name, also the key used by record filters")
    type: FieldType
    config: dict[str, Any] = PydanticField(default_factory=dict, description="Opaque per-type configuration")
    created_at: datetime = PydanticField(default_factory=now)
    updated_at: datetime = PydanticField(default_factory=now, description="Last change to the field or its options")

    @property
    def is_system(self) -> bool:
        return self.type in SYSTEM_FIELD_TYPES
