"""Record filter models: name-keyed equality constraints over stored values."""

from enum import StrEnum
from uuid import UUID

from pydantic import BaseModel, Field, JsonValue


class SortOrder(StrEnum):
    """Record listing order by creation time."""

    ASC = "asc"
    DESC = "desc"


class FilterCondition(BaseModel):
    """Equality constraint on one field, resolved from a field name."""

    field_id: UUID = Field(..., description="Resolved field ID")
    field_name: str = Field(..., description="Field name as given in the filter")
    value: JsonValue = Field(..., description="Literal the stored value must equal exactly")
