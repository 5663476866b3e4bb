"""Job positions users of the directory can hold."""

from pydantic import Field

from tablebase.core.db import MongoModel


class Position(MongoModel):
    """Job position, unique by name."""

    name: str = Field(..., description="Position name, unique across the directory")
