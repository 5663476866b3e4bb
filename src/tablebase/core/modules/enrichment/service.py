from uuid import UUID

from tablebase.core.core import Service
from tablebase.core.modules.enrichment.resolver import EnrichmentResolver
from tablebase.core.modules.option.models import OptionView
from tablebase.core.modules.record.models import EnrichedRecord, LoadedRecord
from tablebase.core.modules.user.models import UserView


class EnrichmentService(Service):
    """Database-backed reference loader feeding the enrichment resolver."""

    async def load_user(self, user_id: UUID) -> UserView | None:
        return await self.core.services.user.find_user_view(user_id)

    async def load_option(self, field_id: UUID, ref: str) -> OptionView | None:
        option = await self.core.services.option.find_option(field_id, ref)
        return OptionView.from_domain(option) if option is not None else None

    async def load_record(self, record_id: UUID) -> LoadedRecord | None:
        return await self.core.services.record.find_loaded_record(record_id)

    def resolver(self) -> EnrichmentResolver:
        return EnrichmentResolver(self, max_depth=self.core.config.enrichment_max_depth)

    async def enrich(self, loaded: LoadedRecord) -> EnrichedRecord:
        """Enrich a single top-level record."""
        return await self.resolver().enrich(loaded)

    async def enrich_many(self, records: list[LoadedRecord]) -> list[EnrichedRecord]:
        """Enrich a page of records concurrently, preserving order."""
        return await self.resolver().enrich_many(records)
