"""Tests for reference resolution with an in-memory loader."""

from uuid import UUID, uuid4

import pytest

from tablebase.core.modules.enrichment.resolver import EnrichmentResolver
from tablebase.core.modules.field.models import FieldType
from tablebase.core.modules.option.models import OptionView
from tablebase.core.modules.record.models import EnrichedRecord, LoadedRecord, Record
from tablebase.core.modules.user.models import PositionView, UserView


class FakeLoader:
    """In-memory reference loader that records which records were fetched."""

    def __init__(self) -> None:
        self.users: dict[UUID, UserView] = {}
        self.options: dict[tuple[UUID, str], OptionView] = {}
        self.records: dict[UUID, LoadedRecord] = {}
        self.record_loads: list[UUID] = []

    async def load_user(self, user_id: UUID) -> UserView | None:
        return self.users.get(user_id)

    async def load_option(self, field_id: UUID, ref: str) -> OptionView | None:
        return self.options.get((field_id, ref))

    async def load_record(self, record_id: UUID) -> LoadedRecord | None:
        self.record_loads.append(record_id)
        return self.records.get(record_id)


@pytest.fixture
def loader():
    return FakeLoader()


@pytest.fixture
def resolver(loader):
    return EnrichmentResolver(loader)


class TestUserResolution:
    """Tests for user-typed values."""

    @pytest.fixture(autouse=True)
    def setup(self, loader):
        """Register two users in the directory."""
        self.alice = UserView(id=uuid4(), first_name="Alice", position=PositionView(id=uuid4(), name="CTO"))
        self.bob = UserView(id=uuid4(), first_name="Bob")
        loader.users = {self.alice.id: self.alice, self.bob.id: self.bob}

    @pytest.mark.asyncio
    async def test_single_user_and_created_by(self, resolver, make_field, make_loaded):
        """Test that user IDs become user projections."""
        owner = make_field(FieldType.SINGLE_USER, "Owner")
        created_by = make_field(FieldType.CREATED_BY, "Created by")
        loaded = make_loaded([(owner, str(self.alice.id)), (created_by, str(self.bob.id))])

        result = await resolver.enrich(loaded)

        assert result.values[str(owner.id)].value == self.alice
        assert result.values[str(created_by.id)].value == self.bob

    @pytest.mark.asyncio
    async def test_multi_user_keeps_order_and_nulls_missing(self, resolver, make_field, make_loaded):
        """Test that arrays resolve element-wise in order, unknown or malformed IDs becoming null."""
        members = make_field(FieldType.MULTI_USER, "Members")
        loaded = make_loaded([(members, [str(self.bob.id), str(uuid4()), "not-a-uuid", str(self.alice.id)])])

        result = await resolver.enrich(loaded)

        assert result.values[str(members.id)].value == [self.bob, None, None, self.alice]

    @pytest.mark.asyncio
    async def test_non_array_multi_value_passes_through(self, resolver, make_field, make_loaded):
        """Test that a malformed stored multi value is returned unchanged."""
        members = make_field(FieldType.MULTI_USER, "Members")
        loaded = make_loaded([(members, str(self.alice.id))])

        result = await resolver.enrich(loaded)

        assert result.values[str(members.id)].value == str(self.alice.id)


class TestSelectResolution:
    """Tests for select-typed values."""

    @pytest.mark.asyncio
    async def test_option_by_name_and_fallback(self, resolver, loader, make_field, make_loaded):
        """Test that matched references become options and unmatched ones keep the raw string."""
        status = make_field(FieldType.SINGLE_SELECT, "Status")
        tags = make_field(FieldType.MULTI_SELECT, "Tags")
        open_option = OptionView(id=uuid4(), name="Open", color="#00ff00")
        urgent = OptionView(id=uuid4(), name="Urgent")
        loader.options = {(status.id, "Open"): open_option, (tags.id, str(urgent.id)): urgent}
        loaded = make_loaded([(status, "Open"), (tags, [str(urgent.id), "Deleted"])])

        result = await resolver.enrich(loaded)

        assert result.values[str(status.id)].value == open_option
        assert result.values[str(tags.id)].value == [urgent, "Deleted"]

    @pytest.mark.asyncio
    async def test_options_scoped_to_field(self, resolver, loader, make_field, make_loaded):
        """Test that an option of another field does not match."""
        status = make_field(FieldType.SINGLE_SELECT, "Status")
        other = make_field(FieldType.SINGLE_SELECT, "Other")
        loader.options = {(other.id, "Open"): OptionView(id=uuid4(), name="Open")}

        result = await resolver.enrich(make_loaded([(status, "Open")]))

        assert result.values[str(status.id)].value == "Open"


class TestLinkResolution:
    """Tests for link-typed values and depth bounding."""

    @pytest.mark.asyncio
    async def test_single_link_embeds_enriched_target(self, resolver, loader, make_field, make_loaded):
        """Test that a link becomes the fully enriched target record."""
        name = make_field(FieldType.NAME, "Name")
        company = make_field(FieldType.SINGLE_LINK, "Company")
        target = make_loaded([(name, "Acme")])
        loader.records[target.record.id] = target

        result = await resolver.enrich(make_loaded([(company, str(target.record.id))]))

        embedded = result.values[str(company.id)].value
        assert isinstance(embedded, EnrichedRecord)
        assert embedded.id == target.record.id
        assert embedded.values[str(name.id)].value == "Acme"

    @pytest.mark.asyncio
    async def test_missing_target_becomes_null(self, resolver, make_field, make_loaded):
        """Test that links to deleted records resolve to null."""
        company = make_field(FieldType.SINGLE_LINK, "Company")

        result = await resolver.enrich(make_loaded([(company, str(uuid4()))]))

        assert result.values[str(company.id)].value is None

    @pytest.mark.asyncio
    async def test_cycle_terminates_at_depth_limit(self, resolver, loader, mock_base, make_field, make_loaded):
        """Test that A -> B -> A stops resolving after two hops and keeps raw values beyond."""
        link = make_field(FieldType.SINGLE_LINK, "Related")
        created_by = make_field(FieldType.CREATED_BY, "Created by")
        record_a, record_b = Record(base_id=mock_base.id), Record(base_id=mock_base.id)
        author_id = str(uuid4())
        loaded_a = make_loaded([(link, str(record_b.id))], record=record_a)
        loaded_b = make_loaded([(link, str(record_a.id)), (created_by, author_id)], record=record_b)
        loader.records = {record_a.id: loaded_a, record_b.id: loaded_b}

        result = await resolver.enrich(loaded_a)

        b_depth1 = result.values[str(link.id)].value
        a_depth2 = b_depth1.values[str(link.id)].value
        b_depth3 = a_depth2.values[str(link.id)].value
        assert (b_depth1.id, a_depth2.id, b_depth3.id) == (record_b.id, record_a.id, record_b.id)
        assert b_depth3.values[str(link.id)].value == str(record_a.id)
        assert b_depth3.values[str(created_by.id)].value == author_id
        assert b_depth1.values[str(created_by.id)].value is None  # unknown user at resolved depth
        assert loader.record_loads == [record_b.id, record_a.id, record_b.id]

    @pytest.mark.asyncio
    async def test_repeated_targets_fetched_each_time(self, resolver, loader, make_field, make_loaded):
        """Test that the same target is loaded once per reference, in order."""
        links = make_field(FieldType.MULTI_LINK, "Links")
        name = make_field(FieldType.NAME, "Name")
        first, second = make_loaded([(name, "First")]), make_loaded([(name, "Second")])
        loader.records = {first.record.id: first, second.record.id: second}
        refs = [str(second.record.id), str(first.record.id), str(second.record.id)]

        result = await resolver.enrich(make_loaded([(links, refs)]))

        assert [record.id for record in result.values[str(links.id)].value] == [
            second.record.id,
            first.record.id,
            second.record.id,
        ]
        assert loader.record_loads.count(second.record.id) == 2

    @pytest.mark.asyncio
    async def test_custom_max_depth(self, loader, make_field, make_loaded):
        """Test that max_depth=0 embeds direct targets without resolving their references."""
        company = make_field(FieldType.SINGLE_LINK, "Company")
        owner = make_field(FieldType.SINGLE_USER, "Owner")
        user = UserView(id=uuid4(), first_name="Alice")
        loader.users = {user.id: user}
        target = make_loaded([(owner, str(user.id))])
        loader.records[target.record.id] = target

        result = await EnrichmentResolver(loader, max_depth=0).enrich(make_loaded([(company, str(target.record.id))]))

        embedded = result.values[str(company.id)].value
        assert embedded.values[str(owner.id)].value == str(user.id)


class TestPlainValues:
    """Tests for values that need no resolution."""

    @pytest.mark.asyncio
    async def test_scalars_and_nulls_unchanged(self, resolver, make_field, make_loaded):
        """Test that text, numbers, checkboxes and nulls are returned as stored."""
        text = make_field(FieldType.SINGLE_LINE_TEXT, "Title")
        number = make_field(FieldType.NUMBER, "Price")
        checkbox = make_field(FieldType.CHECKBOX, "Done")
        owner = make_field(FieldType.SINGLE_USER, "Owner")
        loaded = make_loaded([(text, "Hello"), (number, 3), (checkbox, False), (owner, None)])

        result = await resolver.enrich(loaded)

        assert [value.value for value in result.values.values()] == ["Hello", 3, False, None]

    @pytest.mark.asyncio
    async def test_enrich_many_preserves_order(self, resolver, make_field, make_loaded):
        """Test that a batch comes back in input order."""
        name = make_field(FieldType.NAME, "Name")
        batch = [make_loaded([(name, f"Record {i}")]) for i in range(5)]

        results = await resolver.enrich_many(batch)

        assert [result.id for result in results] == [loaded.record.id for loaded in batch]
