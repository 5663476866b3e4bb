from uuid import UUID

from fastapi import APIRouter
from pydantic import BaseModel, Field

from tablebase.core.modules.option.models import Option
from tablebase.web.deps import ActorDep, AppDep
from tablebase.web.openapi import ErrorResponse

router = APIRouter(tags=["options"])


class CreateOptionRequest(BaseModel):
    """Request to add an option to a select field."""

    field_id: UUID = Field(..., description="Select field to add the option to")
    name: str = Field(..., description="Option name, unique within the field")
    color: str | None = Field(None, description="Display color")

    model_config = {
        "json_schema_extra": {
            "examples": [{"field_id": "5d0c3f55-8a2b-4f5e-b7a4-2b1f3c9e6a70", "name": "In progress", "color": "#f59e0b"}]
        }
    }


class UpdateOptionRequest(BaseModel):
    """Request to update an option (partial update)."""

    name: str | None = Field(None, description="New option name")
    color: str | None = Field(None, description="New display color")

    model_config = {"json_schema_extra": {"examples": [{"name": "Done"}, {"color": "#10b981"}]}}


@router.post(
    "/options",
    summary="Create option",
    description="Add an option to a single or multi select field.",
    operation_id="createOption",
    status_code=201,
    responses={
        201: {"description": "Option created successfully"},
        400: {"model": ErrorResponse, "description": "Invalid name or field is not a select field"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        404: {"model": ErrorResponse, "description": "Field not found"},
        409: {"model": ErrorResponse, "description": "Option name already exists in this field"},
    },
)
async def create_option(request: CreateOptionRequest, app: AppDep, actor_id: ActorDep) -> Option:
    return await app.create_option(actor_id, request.field_id, request.name, request.color)


@router.patch(
    "/options/{option_id}",
    summary="Update option",
    description="Rename and/or recolor an option. Only provided values are updated.",
    operation_id="updateOption",
    responses={
        200: {"description": "Option updated successfully"},
        400: {"model": ErrorResponse, "description": "Invalid name"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        404: {"model": ErrorResponse, "description": "Option not found"},
        409: {"model": ErrorResponse, "description": "Option name already exists in this field"},
    },
)
async def update_option(option_id: UUID, request: UpdateOptionRequest, app: AppDep, actor_id: ActorDep) -> Option:
    return await app.update_option(actor_id, option_id, request.name, request.color)


@router.delete(
    "/options/{option_id}",
    summary="Delete option",
    description="Delete an option. Stored select values that reference it are returned as raw strings.",
    operation_id="deleteOption",
    status_code=204,
    responses={
        204: {"description": "Option deleted successfully"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        404: {"model": ErrorResponse, "description": "Option not found"},
    },
)
async def delete_option(option_id: UUID, app: AppDep, actor_id: ActorDep) -> None:
    await app.delete_option(actor_id, option_id)
