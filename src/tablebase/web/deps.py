from typing import Annotated, cast
from uuid import UUID

from fastapi import Depends, Request
from fastapi.security import APIKeyHeader

from tablebase.app import App
from tablebase.errors import AuthenticationError
from tablebase.utils import parse_uuid

# The auth gateway in front of this service puts the authenticated user's ID here
actor_scheme = APIKeyHeader(name="X-User-Id", auto_error=False)


async def get_app(request: Request) -> App:
    return cast(App, request.app.state.app)


async def get_actor_id(raw_actor_id: Annotated[str | None, Depends(actor_scheme)] = None) -> UUID:
    """Get the authenticated actor ID set by the auth gateway."""
    actor_id = parse_uuid(raw_actor_id)
    if actor_id is None:
        raise AuthenticationError
    return actor_id


# Type aliases for dependencies
AppDep = Annotated[App, Depends(get_app)]
ActorDep = Annotated[UUID, Depends(get_actor_id)]
