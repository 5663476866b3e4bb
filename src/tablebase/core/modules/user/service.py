from typing import Any
from uuid import UUID

from pymongo.asynchronous.database import AsyncDatabase

from tablebase.core.core import Service
from tablebase.core.modules.user.models import User, UserView


class UserService(Service):
    """Read-only access to the user directory shared with the auth service."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("users")

    async def find_user(self, user_id: UUID) -> User | None:
        doc = await self._collection.find_one({"_id": user_id})
        return User.from_mongo(doc)

    async def find_user_view(self, user_id: UUID) -> UserView | None:
        """Get the public projection of a user with its position, None if the user is unknown."""
        user = await self.find_user(user_id)
        if user is None:
            return None

        position = None
        if user.position_id is not None:
            position = await self.core.services.position.find_position(user.position_id)
        return UserView.from_domain(user, position)
