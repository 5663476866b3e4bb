from uuid import UUID

from fastapi import APIRouter
from pydantic import BaseModel, Field

from tablebase.core.modules.position.models import Position
from tablebase.web.deps import ActorDep, AppDep
from tablebase.web.openapi import ErrorResponse

router = APIRouter(tags=["positions"])


class CreatePositionRequest(BaseModel):
    """Request to add a position."""

    name: str = Field(..., description="Position name, unique across the directory")

    model_config = {"json_schema_extra": {"examples": [{"name": "Engineer"}]}}


@router.get(
    "/positions",
    summary="List positions",
    description="Get all positions, sorted by name.",
    operation_id="listPositions",
    responses={
        200: {"description": "List of positions"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def list_positions(app: AppDep, actor_id: ActorDep) -> list[Position]:
    return await app.list_positions(actor_id)


@router.get(
    "/positions/{position_id}",
    summary="Get position",
    operation_id="getPosition",
    responses={
        200: {"description": "Position details"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        404: {"model": ErrorResponse, "description": "Position not found"},
    },
)
async def get_position(position_id: UUID, app: AppDep, actor_id: ActorDep) -> Position:
    return await app.get_position(actor_id, position_id)


@router.post(
    "/positions",
    summary="Create position",
    operation_id="createPosition",
    status_code=201,
    responses={
        201: {"description": "Position created successfully"},
        400: {"model": ErrorResponse, "description": "Blank name"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        409: {"model": ErrorResponse, "description": "Position name already exists"},
    },
)
async def create_position(request: CreatePositionRequest, app: AppDep, actor_id: ActorDep) -> Position:
    return await app.create_position(actor_id, request.name)


@router.delete(
    "/positions/{position_id}",
    summary="Delete position",
    description="Delete a position. Users that held it are returned without a position.",
    operation_id="deletePosition",
    status_code=204,
    responses={
        204: {"description": "Position deleted successfully"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        404: {"model": ErrorResponse, "description": "Position not found"},
    },
)
async def delete_position(position_id: UUID, app: AppDep, actor_id: ActorDep) -> None:
    await app.delete_position(actor_id, position_id)
