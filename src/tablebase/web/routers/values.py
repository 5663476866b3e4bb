from uuid import UUID

from fastapi import APIRouter
from pydantic import BaseModel, Field, JsonValue

from tablebase.core.modules.value.models import Value
from tablebase.web.deps import ActorDep, AppDep
from tablebase.web.openapi import ErrorResponse

router = APIRouter(tags=["values"])


class UpsertValueRequest(BaseModel):
    """Request to set the value of a record's field."""

    record_id: UUID = Field(..., description="Record to write to")
    field_id: UUID = Field(..., description="Field of the record's base")
    value: JsonValue = Field(
        ...,
        description=(
            "New value, validated against the field type. `null` clears the value.\n\n"
            "- Text fields: string (Name and single line text up to 255 characters)\n"
            "- Number: number\n"
            "- Checkbox: boolean\n"
            "- Single select/user/link: option id or name, user id, record id\n"
            "- Multi select/user/link: array of the above"
        ),
    )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "record_id": "9a4f7c1e-2d3b-4c5a-8e6f-7a8b9c0d1e2f",
                    "field_id": "5d0c3f55-8a2b-4f5e-b7a4-2b1f3c9e6a70",
                    "value": "In progress",
                },
                {
                    "record_id": "9a4f7c1e-2d3b-4c5a-8e6f-7a8b9c0d1e2f",
                    "field_id": "1c2d3e4f-5a6b-4c7d-8e9f-0a1b2c3d4e5f",
                    "value": 42,
                },
            ]
        }
    }


@router.patch(
    "/values",
    summary="Upsert value",
    description="Create or replace the value of a record's field. Author and creation fields cannot be written.",
    operation_id="upsertValue",
    responses={
        200: {"description": "Value stored successfully"},
        400: {"model": ErrorResponse, "description": "Value does not match the field type"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        404: {"model": ErrorResponse, "description": "Record or field not found"},
    },
)
async def upsert_value(request: UpsertValueRequest, app: AppDep, actor_id: ActorDep) -> Value:
    return await app.upsert_value(actor_id, request.record_id, request.field_id, request.value)
