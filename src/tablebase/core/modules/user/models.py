"""User directory models. Users are written by the external auth service; this core only reads them."""

from uuid import UUID

from pydantic import BaseModel, Field

from tablebase.core.db import MongoModel
from tablebase.core.modules.position.models import Position


class User(MongoModel):
    """User domain model with credentials."""

    password_hash: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    middle_name: str | None = None
    age: int | None = None
    position_id: UUID | None = None


class PositionView(BaseModel):
    id: UUID
    name: str


class UserView(BaseModel):
    """User as embedded into enriched user values; never carries credentials."""

    id: UUID = Field(..., description="User ID")
    first_name: str | None = Field(None, description="First name")
    last_name: str | None = Field(None, description="Last name")
    middle_name: str | None = Field(None, description="Middle name")
    age: int | None = Field(None, description="Age in years")
    position: PositionView | None = Field(None, description="Current position")

    @classmethod
    def from_domain(cls, user: User, position: Position | None = None) -> "UserView":
        """Create view model from domain model."""
        return cls(
            id=user.id,
            first_name=user.first_name,
            last_name=user.last_name,
            middle_name=user.middle_name,
            age=user.age,
            position=PositionView(id=position.id, name=position.name) if position is not None else None,
        )
