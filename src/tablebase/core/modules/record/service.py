from collections import defaultdict
from typing import Any
from uuid import UUID

import structlog
from pymongo.asynchronous.database import AsyncDatabase

from tablebase.core.core import Service
from tablebase.core.modules.field.models import FieldType
from tablebase.core.modules.field.validators import validate_value
from tablebase.core.modules.filter.models import SortOrder
from tablebase.core.modules.filter.query_builder import (
    build_records_query,
    build_records_sort,
    build_values_pipeline,
    resolve_filter,
)
from tablebase.core.modules.record.models import (
    EnrichedRecord,
    LoadedRecord,
    LoadedValue,
    Record,
    build_system_values,
)
from tablebase.core.pagination import Page, PageMeta, page_offset
from tablebase.errors import NotFoundError

logger = structlog.get_logger(__name__)


class RecordService(Service):
    """Manages records of a base and their system values."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("records")

    async def on_start(self) -> None:
        """Create index for base lookup and creation-time sorting."""
        await self._collection.create_index([("base_id", 1), ("created_at", 1)])

    async def create_record(self, base_id: UUID, name: str, actor_id: UUID) -> EnrichedRecord:
        """Create a record with its NAME, CREATED_BY and CREATED_AT values in one transaction.

        Raises:
            NotFoundError: If the base does not exist
            ValidationError: If the name is not a valid NAME value
            InternalError: If the base lacks a system field
        """
        validate_value(name, FieldType.NAME)
        record = Record(base_id=base_id)

        async with self.transaction() as session:
            # Counting the record writes the base document, so a concurrent delete_base conflicts
            await self.core.services.base.adjust_record_count(base_id, 1, session)
            fields = await self.core.services.field.list_fields(base_id, session=session)
            values = build_system_values(record, fields, actor_id, name)

            await self._collection.insert_one(record.to_mongo(), session=session)
            await self.database.get_collection("values").insert_many([value.to_mongo() for value in values], session=session)

        logger.info("record_created", record_id=record.id, base_id=base_id, created_by=actor_id)

        fields_by_id = {field.id: field for field in fields}
        loaded = LoadedRecord(
            record=record,
            values=[LoadedValue(field=fields_by_id[value.field_id], value=value) for value in values],
        )
        return await self.core.services.enrichment.enrich(loaded)

    async def get_record_doc(self, record_id: UUID) -> Record:
        """Get the bare record by ID."""
        doc = await self._collection.find_one({"_id": record_id})
        if doc is None:
            raise NotFoundError(f"Record '{record_id}' not found")
        return Record.model_validate(doc)

    async def get_record(self, record_id: UUID) -> EnrichedRecord:
        """Get an enriched record by ID."""
        record = await self.get_record_doc(record_id)
        [loaded] = await self.load_records([record])
        return await self.core.services.enrichment.enrich(loaded)

    async def find_loaded_record(self, record_id: UUID) -> LoadedRecord | None:
        """Get a record joined with its values, None if it does not exist."""
        record = Record.from_mongo(await self._collection.find_one({"_id": record_id}))
        if record is None:
            return None
        [loaded] = await self.load_records([record])
        return loaded

    async def load_records(self, records: list[Record]) -> list[LoadedRecord]:
        """Join records with their values and fields. Values of deleted fields are dropped."""
        values = await self.core.services.value.list_values(record.id for record in records)
        fields = await self.core.services.field.get_fields_by_ids(value.field_id for value in values)

        by_record: defaultdict[UUID, list[LoadedValue]] = defaultdict(list)
        for value in values:
            field = fields.get(value.field_id)
            if field is not None:
                by_record[value.record_id].append(LoadedValue(field=field, value=value))

        return [LoadedRecord(record=record, values=by_record[record.id]) for record in records]

    async def list_records(
        self,
        base_id: UUID,
        filter: dict[str, Any] | None = None,
        sort: SortOrder = SortOrder.DESC,
        page: int = 1,
        limit: int = 10,
    ) -> Page[EnrichedRecord]:
        """Get a page of enriched records of a base matching a name-keyed equality filter.

        Args:
            base_id: The base to list records from
            filter: Mapping of field name to the literal its value must equal (all ANDed)
            sort: Order by record creation time
            page: 1-indexed page number
            limit: Page size

        Returns:
            The page and its pagination metadata

        Raises:
            NotFoundError: If the base does not exist
            BadRequestError: If a filter key does not name a field of the base
        """
        await self.core.services.base.get_base(base_id)
        fields = await self.core.services.field.list_fields(base_id)
        conditions = resolve_filter(filter, fields)

        record_ids: list[UUID] | None = None
        if conditions:
            cursor = await self.database.get_collection("values").aggregate(build_values_pipeline(conditions))
            record_ids = [doc["_id"] async for doc in cursor]

        query = build_records_query(base_id, record_ids)
        sort_spec = build_records_sort(sort)
        offset = page_offset(page, limit)

        total = await self._collection.count_documents(query)
        records = await Record.list_cursor(self._collection.find(query).sort(sort_spec).skip(offset).limit(limit))

        loaded = await self.load_records(records)
        items = await self.core.services.enrichment.enrich_many(loaded)

        logger.debug(
            "list_records",
            base_id=base_id,
            filter=filter,
            sort=sort,
            total=total,
            page=page,
            limit=limit,
            returned=len(items),
        )
        return Page(data=items, meta=PageMeta.build(total=total, page=page, limit=limit))

    async def delete_record(self, record_id: UUID) -> None:
        """Delete a record and all its values."""
        record = await self.get_record_doc(record_id)

        async with self.transaction() as session:
            await self.database.get_collection("values").delete_many({"record_id": record_id}, session=session)
            result = await self._collection.delete_one({"_id": record_id}, session=session)
            if result.deleted_count == 0:
                raise NotFoundError(f"Record '{record_id}' not found")
            await self.core.services.base.adjust_record_count(record.base_id, -1, session)

        logger.info("record_deleted", record_id=record_id)
