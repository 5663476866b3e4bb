from uuid import UUID

from fastapi import APIRouter
from pydantic import BaseModel, Field

from tablebase.core.modules.base.models import Base, BaseDetails
from tablebase.web.deps import ActorDep, AppDep
from tablebase.web.openapi import ErrorResponse

router = APIRouter(tags=["bases"])


class CreateBaseRequest(BaseModel):
    """Request to create a new base."""

    name: str = Field(..., description="Human-readable base name", min_length=1)

    model_config = {"json_schema_extra": {"examples": [{"name": "Customers"}]}}


@router.post(
    "/bases",
    summary="Create base",
    description="Create a new base. The base starts with the Name, Created by and Created at system fields.",
    operation_id="createBase",
    status_code=201,
    responses={
        201: {"description": "Base created successfully"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def create_base(request: CreateBaseRequest, app: AppDep, actor_id: ActorDep) -> Base:
    return await app.create_base(actor_id, request.name)


@router.get(
    "/bases",
    summary="List bases",
    description="Get all bases.",
    operation_id="listBases",
    responses={
        200: {"description": "List of bases"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def list_bases(app: AppDep, actor_id: ActorDep) -> list[Base]:
    return await app.list_bases(actor_id)


@router.get(
    "/bases/{base_id}",
    summary="Get base",
    description="Get a base together with its field definitions.",
    operation_id="getBase",
    responses={
        200: {"description": "Base details"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        404: {"model": ErrorResponse, "description": "Base not found"},
    },
)
async def get_base(base_id: UUID, app: AppDep, actor_id: ActorDep) -> BaseDetails:
    return await app.get_base(actor_id, base_id)


@router.delete(
    "/bases/{base_id}",
    summary="Delete base",
    description="Delete a base with its fields and options. Bases that still have records cannot be deleted.",
    operation_id="deleteBase",
    status_code=204,
    responses={
        204: {"description": "Base deleted successfully"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        404: {"model": ErrorResponse, "description": "Base not found"},
        409: {"model": ErrorResponse, "description": "Base still has records"},
    },
)
async def delete_base(base_id: UUID, app: AppDep, actor_id: ActorDep) -> None:
    await app.delete_base(actor_id, base_id)
