from typing import Any
from uuid import UUID

from fastapi import APIRouter
from pydantic import BaseModel, Field as PydanticField

from tablebase.core.modules.field.models import Field, FieldType
from tablebase.core.modules.option.models import Option
from tablebase.web.deps import ActorDep, AppDep
from tablebase.web.openapi import ErrorResponse

router = APIRouter(tags=["fields"])


class CreateFieldRequest(BaseModel):
    """Request to add a field to a base."""

    base_id: UUID = PydanticField(..., description="Base to add the field to")
    name: str = PydanticField(..., description="Field name, used as the key in record filters")
    type: FieldType = PydanticField(..., description="Field type; system types cannot be added")
    config: dict[str, Any] | None = PydanticField(None, description="Opaque per-type configuration")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"base_id": "0b8e5c2a-3c47-4a7e-9f0f-4f6d2f3a9d11", "name": "Status", "type": "single_select"},
                {"base_id": "0b8e5c2a-3c47-4a7e-9f0f-4f6d2f3a9d11", "name": "Company", "type": "single_link"},
            ]
        }
    }


@router.post(
    "/fields",
    summary="Add field to base",
    description="Add a new field definition to a base. Only the creator of the base can add fields.",
    operation_id="createField",
    status_code=201,
    responses={
        201: {"description": "Field added successfully"},
        400: {"model": ErrorResponse, "description": "Invalid field data or system field type"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        404: {"model": ErrorResponse, "description": "Base not found or access denied"},
        409: {"model": ErrorResponse, "description": "Base was modified concurrently, retry"},
    },
)
async def create_field(request: CreateFieldRequest, app: AppDep, actor_id: ActorDep) -> Field:
    return await app.create_field(actor_id, request.base_id, request.name, request.type, request.config)


@router.delete(
    "/fields/{field_id}",
    summary="Delete field",
    description=(
        "Delete a field definition and its options. System fields cannot be deleted. "
        "Stored values of the field are no longer returned with records."
    ),
    operation_id="deleteField",
    status_code=204,
    responses={
        204: {"description": "Field deleted successfully"},
        400: {"model": ErrorResponse, "description": "System fields cannot be deleted"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        404: {"model": ErrorResponse, "description": "Field not found"},
    },
)
async def delete_field(field_id: UUID, app: AppDep, actor_id: ActorDep) -> None:
    await app.delete_field(actor_id, field_id)


@router.get(
    "/fields/{field_id}/options",
    summary="List field options",
    description="Get the options of a select field.",
    operation_id="listOptions",
    responses={
        200: {"description": "List of options"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        404: {"model": ErrorResponse, "description": "Field not found"},
    },
)
async def list_options(field_id: UUID, app: AppDep, actor_id: ActorDep) -> list[Option]:
    return await app.list_options(actor_id, field_id)
