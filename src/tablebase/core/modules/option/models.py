from uuid import UUID

from pydantic import BaseModel, Field

from tablebase.core.db import MongoModel


class Option(MongoModel):
    """Choice of a select field. Name is unique within its field."""

    field_id: UUID
    name: str
    color: str | None = None


class OptionView(BaseModel):
    """Option as embedded into enriched select values."""

    id: UUID = Field(..., description="Option ID")
    name: str = Field(..., description="Option name")
    color: str | None = Field(None, description="Display color")

    @classmethod
    def from_domain(cls, option: Option) -> "OptionView":
        """Create view model from domain model."""
        return cls(id=option.id, name=option.name, color=option.color)
