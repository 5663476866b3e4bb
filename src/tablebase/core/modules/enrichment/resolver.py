"""Resolution of reference-typed values into nested objects.

User ids become user projections, select references become options and link
ids become fully enriched target records. Link traversal is bounded by depth
only: a record reached past ``max_depth`` link hops is returned with its raw
values, which is what stops cycles such as A -> B -> A. Repeated references are
fetched again on every path; there is no cross-record cache.
"""

import asyncio
from collections.abc import Awaitable, Callable
from functools import partial
from typing import Any, Protocol
from uuid import UUID

import structlog

from tablebase.core.modules.field.models import (
    LINK_FIELD_TYPES,
    MULTI_FIELD_TYPES,
    SELECT_FIELD_TYPES,
    USER_FIELD_TYPES,
)
from tablebase.core.modules.option.models import OptionView
from tablebase.core.modules.record.formatter import format_record
from tablebase.core.modules.record.models import EnrichedRecord, LoadedRecord, LoadedValue
from tablebase.core.modules.user.models import UserView
from tablebase.utils import parse_uuid

logger = structlog.get_logger(__name__)

DEFAULT_MAX_DEPTH = 2


class ReferenceLoader(Protocol):
    """Read-only lookups the resolver needs. Implementations must not mutate state."""

    async def load_user(self, user_id: UUID) -> UserView | None: ...

    async def load_option(self, field_id: UUID, ref: str) -> OptionView | None: ...

    async def load_record(self, record_id: UUID) -> LoadedRecord | None: ...


class EnrichmentResolver:
    """Replaces raw reference values of records with resolved objects."""

    def __init__(self, loader: ReferenceLoader, max_depth: int = DEFAULT_MAX_DEPTH) -> None:
        self.loader = loader
        self.max_depth = max_depth

    async def enrich(self, loaded: LoadedRecord, depth: int = 0) -> EnrichedRecord:
        """Resolve all reference values of a record concurrently.

        Args:
            loaded: Record with values joined to their fields
            depth: Number of link hops taken to reach this record

        Returns:
            The formatted record; unresolved when depth exceeds max_depth
        """
        if depth > self.max_depth:
            logger.debug("enrichment_depth_exceeded", record_id=loaded.record.id, depth=depth)
            return format_record(loaded)

        results = await asyncio.gather(*(self._resolve_value(item, depth) for item in loaded.values))
        resolved = {item.field.id: result for item, result in zip(loaded.values, results, strict=True)}
        return format_record(loaded, resolved)

    async def enrich_many(self, records: list[LoadedRecord]) -> list[EnrichedRecord]:
        """Enrich a batch of top-level records, preserving order."""
        return list(await asyncio.gather(*(self.enrich(loaded) for loaded in records)))

    async def _resolve_value(self, item: LoadedValue, depth: int) -> Any:
        field_type = item.field.type
        raw = item.value.value
        if raw is None:
            return None

        resolve: Callable[[Any], Awaitable[Any]]
        if field_type in USER_FIELD_TYPES:
            resolve = self._resolve_user
        elif field_type in SELECT_FIELD_TYPES:
            resolve = partial(self._resolve_option, item.field.id)
        elif field_type in LINK_FIELD_TYPES:
            resolve = partial(self._resolve_link, depth=depth)
        else:
            return raw

        if field_type in MULTI_FIELD_TYPES:
            return await self._resolve_each(raw, resolve)
        return await resolve(raw)

    async def _resolve_each(self, raw: Any, resolve: Callable[[Any], Awaitable[Any]]) -> Any:
        """Resolve array elements concurrently, keeping order. Non-arrays pass through."""
        if not isinstance(raw, list):
            return raw
        return list(await asyncio.gather(*(resolve(element) for element in raw)))

    async def _resolve_user(self, ref: Any) -> UserView | None:
        user_id = parse_uuid(ref)
        if user_id is None:
            return None
        return await self.loader.load_user(user_id)

    async def _resolve_option(self, field_id: UUID, ref: Any) -> OptionView | Any:
        # Unmatched references keep the raw string so they stay distinguishable from cleared values
        if not isinstance(ref, str):
            return ref
        option = await self.loader.load_option(field_id, ref)
        return option if option is not None else ref

    async def _resolve_link(self, ref: Any, depth: int) -> EnrichedRecord | None:
        record_id = parse_uuid(ref)
        if record_id is None:
            return None
        target = await self.loader.load_record(record_id)
        if target is None:
            return None
        return await self.enrich(target, depth + 1)
