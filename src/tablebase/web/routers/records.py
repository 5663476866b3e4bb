from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query
from pydantic import BaseModel, Field

from tablebase.core.modules.filter.models import SortOrder
from tablebase.core.modules.filter.params import parse_filter_param
from tablebase.core.modules.record.models import EnrichedRecord
from tablebase.core.pagination import Page
from tablebase.errors import ValidationError
from tablebase.web.deps import ActorDep, AppDep
from tablebase.web.openapi import ErrorResponse

router: APIRouter = APIRouter(tags=["records"])


class CreateRecordRequest(BaseModel):
    """Request to create a new record."""

    base_id: UUID = Field(..., description="Base to create the record in")
    name: str = Field(..., description="Value of the record's Name field")

    model_config = {
        "json_schema_extra": {"examples": [{"base_id": "0b8e5c2a-3c47-4a7e-9f0f-4f6d2f3a9d11", "name": "Acme Corp"}]}
    }


@router.post(
    "/records",
    summary="Create record",
    description="Create a record with its Name, Created by and Created at values.",
    operation_id="createRecord",
    status_code=201,
    responses={
        201: {"description": "Record created successfully"},
        400: {"model": ErrorResponse, "description": "Invalid name"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        404: {"model": ErrorResponse, "description": "Base not found"},
        409: {"model": ErrorResponse, "description": "Base was deleted concurrently, retry"},
        500: {"model": ErrorResponse, "description": "Base is missing a system field"},
    },
)
async def create_record(request: CreateRecordRequest, app: AppDep, actor_id: ActorDep) -> EnrichedRecord:
    return await app.create_record(actor_id, request.base_id, request.name)


@router.get(
    "/records",
    summary="List base records",
    description="""Get a page of enriched records of a base.

**Filtering:**
`filter` is a URL-encoded JSON object mapping field names to exact values, e.g. `{"Status": "Open"}`.
All conditions must match. Values are compared as stored, so select fields match their stored option id or name.
A filter that is not a valid JSON object is ignored.

**Sorting:** by creation time, `desc` (default) or `asc`.

**Pagination:** `page` is 1-indexed.""",
    operation_id="listRecords",
    responses={
        200: {"description": "Paginated list of records"},
        400: {"model": ErrorResponse, "description": "Unknown field name in filter or invalid limit"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        404: {"model": ErrorResponse, "description": "Base not found"},
    },
)
async def list_records(
    app: AppDep,
    actor_id: ActorDep,
    base_id: Annotated[UUID, Query(description="Base to list records of")],
    sort: Annotated[SortOrder, Query(description="Creation time order")] = SortOrder.DESC,
    page: Annotated[int, Query(ge=1, description="Page number, 1-indexed")] = 1,
    limit: Annotated[int | None, Query(ge=1, description="Maximum items per page")] = None,
    filter: Annotated[str | None, Query(description='JSON object of field name to value, e.g. {"Name": "John"}')] = None,
) -> Page[EnrichedRecord]:
    if limit is not None and limit > app.config.max_page_limit:
        raise ValidationError(f"Limit must not exceed {app.config.max_page_limit}")
    return await app.list_records(actor_id, base_id, parse_filter_param(filter), sort, page, limit)


@router.get(
    "/records/{record_id}",
    summary="Get record",
    description="Get a single enriched record.",
    operation_id="getRecord",
    responses={
        200: {"description": "Record details"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        404: {"model": ErrorResponse, "description": "Record not found"},
    },
)
async def get_record(record_id: UUID, app: AppDep, actor_id: ActorDep) -> EnrichedRecord:
    return await app.get_record(actor_id, record_id)


@router.delete(
    "/records/{record_id}",
    summary="Delete record",
    description="Delete a record and all of its values. Links to it from other records resolve to null.",
    operation_id="deleteRecord",
    status_code=204,
    responses={
        204: {"description": "Record deleted successfully"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        404: {"model": ErrorResponse, "description": "Record not found"},
    },
)
async def delete_record(record_id: UUID, app: AppDep, actor_id: ActorDep) -> None:
    await app.delete_record(actor_id, record_id)
