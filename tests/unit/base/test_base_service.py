"""Tests for BaseService."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from tablebase.core.modules.base.service import BaseService
from tablebase.core.modules.field.models import FieldType
from tablebase.errors import ConflictError, NotFoundError


class TestCreateBase:
    """Tests for base creation."""

    @pytest.mark.asyncio
    async def test_inserts_base_with_system_fields(self, database, collection, mock_core, actor_id, no_transaction):
        """Test that the base and its three system fields are written together."""
        service = BaseService(database)
        service.set_core(mock_core)

        base = await service.create_base("Customers", actor_id)

        assert base.name == "Customers"
        assert base.created_by == actor_id
        assert base.record_count == 0
        collection.insert_one.assert_awaited_once_with(base.to_mongo(), session=None)

        [field_docs] = collection.insert_many.await_args.args
        assert [doc["type"] for doc in field_docs] == [FieldType.NAME, FieldType.CREATED_BY, FieldType.CREATED_AT]
        assert all(doc["base_id"] == base.id for doc in field_docs)


class TestGetBase:
    """Tests for base lookups."""

    @pytest.fixture(autouse=True)
    def setup(self, database, collection, mock_core):
        """Set up service."""
        self.collection = collection
        self.service = BaseService(database)
        self.service.set_core(mock_core)

    @pytest.mark.asyncio
    async def test_missing_base_raises_not_found(self, mock_base):
        """Test that an unknown ID raises NotFoundError naming the ID."""
        self.collection.find_one.return_value = None

        with pytest.raises(NotFoundError, match=str(mock_base.id)):
            await self.service.get_base(mock_base.id)

    @pytest.mark.asyncio
    async def test_details_include_fields(self, mock_base, system_fields, mock_core):
        """Test that base details carry the field definitions."""
        self.collection.find_one.return_value = mock_base.to_mongo()
        mock_core.services.field.list_fields = AsyncMock(return_value=system_fields)

        details = await self.service.get_base_details(mock_base.id)

        assert details.id == mock_base.id
        assert details.fields == system_fields


class TestBaseWritesInTransactions:
    """Tests for the base document writes other services make inside their transactions."""

    @pytest.fixture(autouse=True)
    def setup(self, database, collection, mock_core):
        """Set up service."""
        self.collection = collection
        self.service = BaseService(database)
        self.service.set_core(mock_core)

    @pytest.mark.asyncio
    async def test_touch_filters_by_owner(self, mock_base, actor_id):
        """Test that a schema change is recorded only on a base the actor created."""
        self.collection.update_one.return_value = MagicMock(matched_count=1)
        session = MagicMock()

        await self.service.touch_owned_base(mock_base.id, actor_id, session)

        query, update = self.collection.update_one.await_args.args
        assert query == {"_id": mock_base.id, "created_by": actor_id}
        assert "updated_at" in update["$set"]
        assert self.collection.update_one.await_args.kwargs == {"session": session}

    @pytest.mark.asyncio
    async def test_touch_other_actor_not_found(self, mock_base, actor_id):
        """Test that other actors see the base as missing."""
        self.collection.update_one.return_value = MagicMock(matched_count=0)

        with pytest.raises(NotFoundError, match="not found or access denied"):
            await self.service.touch_owned_base(mock_base.id, actor_id, None)

    @pytest.mark.asyncio
    async def test_adjust_record_count_increments(self, mock_base):
        """Test that the counter is moved with $inc in the given session."""
        self.collection.update_one.return_value = MagicMock(matched_count=1)

        await self.service.adjust_record_count(mock_base.id, 1, None)

        self.collection.update_one.assert_awaited_once_with(
            {"_id": mock_base.id}, {"$inc": {"record_count": 1}}, session=None
        )

    @pytest.mark.asyncio
    async def test_adjust_record_count_missing_base(self, mock_base):
        """Test that counting a record into a deleted base raises NotFoundError."""
        self.collection.update_one.return_value = MagicMock(matched_count=0)

        with pytest.raises(NotFoundError, match=str(mock_base.id)):
            await self.service.adjust_record_count(mock_base.id, 1, None)


class TestDeleteBase:
    """Tests for base deletion."""

    @pytest.fixture(autouse=True)
    def setup(self, database, collection, mock_core, no_transaction):
        """Set up service; every read and write runs in the (sessionless) transaction."""
        self.collection = collection
        self.service = BaseService(database)
        self.service.set_core(mock_core)

    @pytest.mark.asyncio
    async def test_deletes_options_fields_and_base(self, mock_base, system_fields, make_cursor):
        """Test that an empty base is removed together with its fields and their options."""
        field_ids = [field.id for field in system_fields]
        self.collection.find_one.return_value = mock_base.to_mongo()
        self.collection.delete_one.return_value = MagicMock(deleted_count=1)
        self.collection.find = MagicMock(return_value=make_cursor([{"_id": field_id} for field_id in field_ids]))

        await self.service.delete_base(mock_base.id)

        self.collection.find_one.assert_awaited_once_with({"_id": mock_base.id}, session=None)
        self.collection.find.assert_called_once_with({"base_id": mock_base.id}, {"_id": 1}, session=None)
        self.collection.delete_one.assert_awaited_once_with({"_id": mock_base.id, "record_count": 0}, session=None)
        assert self.collection.delete_many.await_args_list[0].args == ({"field_id": {"$in": field_ids}},)
        assert self.collection.delete_many.await_args_list[1].args == ({"base_id": mock_base.id},)
        assert all(call.kwargs == {"session": None} for call in self.collection.delete_many.await_args_list)

    @pytest.mark.asyncio
    async def test_missing_base_not_found(self, mock_base):
        """Test that deleting an unknown base raises NotFoundError and deletes nothing."""
        self.collection.find_one.return_value = None

        with pytest.raises(NotFoundError, match=str(mock_base.id)):
            await self.service.delete_base(mock_base.id)
        self.collection.delete_one.assert_not_awaited()
        self.collection.delete_many.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_base_with_records_conflicts(self, mock_base):
        """Test that a base that still has records cannot be deleted."""
        self.collection.find_one.return_value = mock_base.model_copy(update={"record_count": 2}).to_mongo()

        with pytest.raises(ConflictError, match="it has 2 record"):
            await self.service.delete_base(mock_base.id)
        self.collection.delete_one.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_record_added_concurrently_conflicts(self, mock_base):
        """Test that the delete is refused when the counter moved after the base was read."""
        self.collection.find_one.return_value = mock_base.to_mongo()
        self.collection.delete_one.return_value = MagicMock(deleted_count=0)

        with pytest.raises(ConflictError, match="modified while deleting"):
            await self.service.delete_base(mock_base.id)
        self.collection.delete_many.assert_not_awaited()
