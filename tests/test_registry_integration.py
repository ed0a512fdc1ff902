"""
Integration tests for HandleRegistry against PostgreSQL

Tests cover minting, round trips between handles and items, prefix
enumeration with LIKE metacharacters, and concurrent minting.
"""

import asyncio
import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from org.repository.handle.model.items import Item
from org.repository.handle.model.resource_types import ResourceType
from org.repository.handle.resolve.errors import CorruptRecord, UnsupportedResourceType
from org.repository.handle.resolve.registry import HandleRegistry
from tests.test_helpers import create_item, create_items, insert_handle_record


class TestMintAndResolve:
    """Test suite for minting handles and resolving them back."""

    async def test_create_and_resolve(self, session: AsyncSession, registry: HandleRegistry):
        item = await create_item(session)

        handle = await registry.create_handle(session, item)
        await session.commit()

        assert handle.startswith("123456789/")
        assert await registry.resolve_to_object(session, handle) is item
        assert registry.get_canonical_form(handle) == f"hdl:{handle}"

    async def test_suffix_comes_from_sequence(
        self, session: AsyncSession, registry: HandleRegistry
    ):
        """The first handle minted in a fresh database gets suffix 1."""
        item = await create_item(session)

        assert await registry.create_handle(session, item) == "123456789/1"
        assert await registry.create_handle(session, item) == "123456789/2"

    async def test_resolve_to_url(self, session: AsyncSession, registry: HandleRegistry):
        item = await create_item(session)
        handle = await registry.create_handle(session, item)

        url = await registry.resolve_to_url(session, handle)

        assert url == f"http://example.org/handle/{handle}"

    async def test_resolve_never_minted(self, session: AsyncSession, registry: HandleRegistry):
        assert await registry.resolve_to_url(session, "000000000/1") is None
        assert await registry.resolve_to_object(session, "000000000/1") is None

    async def test_reverse_lookup_round_trip(
        self, session: AsyncSession, registry: HandleRegistry
    ):
        item = await create_item(session)
        handle = await registry.create_handle(session, item)

        resolved = await registry.resolve_to_object(session, handle)

        assert await registry.find_handle(session, resolved) == handle

    async def test_find_handle_without_handle(
        self, session: AsyncSession, registry: HandleRegistry
    ):
        item = await create_item(session)
        assert await registry.find_handle(session, item) is None

    async def test_find_handle_prefers_earliest(
        self, session: AsyncSession, registry: HandleRegistry
    ):
        item = await create_item(session)
        first = await registry.create_handle(session, item)
        await registry.create_handle(session, item)

        assert await registry.find_handle(session, item) == first

    async def test_dangling_handle(self, session: AsyncSession, registry: HandleRegistry):
        item = await create_item(session)
        handle = await registry.create_handle(session, item)
        await session.commit()

        await session.delete(item)
        await session.commit()

        assert await registry.resolve_to_object(session, handle) is None

    async def test_changes_roll_back_with_caller_transaction(
        self, session: AsyncSession, registry: HandleRegistry
    ):
        """The registry never commits; the caller's rollback discards the handle."""
        item = await create_item(session)
        await session.commit()

        handle = await registry.create_handle(session, item)
        await session.rollback()

        assert await registry.resolve_to_url(session, handle) is None


class TestStoredRecordIntegrity:
    """Test suite for records minting never produces."""

    async def test_unsupported_type(self, session: AsyncSession, registry: HandleRegistry):
        await insert_handle_record(
            session, 900001, "123456789/900001", int(ResourceType.COLLECTION), 5
        )

        with pytest.raises(UnsupportedResourceType):
            await registry.resolve_to_url(session, "123456789/900001")
        with pytest.raises(UnsupportedResourceType):
            await registry.resolve_to_object(session, "123456789/900001")

    async def test_missing_resource_id(self, session: AsyncSession, registry: HandleRegistry):
        await insert_handle_record(
            session, 900002, "123456789/900002", int(ResourceType.ITEM), None
        )

        with pytest.raises(CorruptRecord):
            await registry.resolve_to_object(session, "123456789/900002")


class TestHandlesForPrefix:
    """Test suite for prefix enumeration."""

    async def test_handles_for_prefix(self, session: AsyncSession, registry: HandleRegistry):
        items = await create_items(session, 2)
        minted = {await registry.create_handle(session, item) for item in items}

        handles = await registry.get_handles_for_prefix(session, "123456789")

        assert set(handles) == minted
        assert len(handles) == 2

    async def test_no_matches(self, session: AsyncSession, registry: HandleRegistry):
        assert await registry.get_handles_for_prefix(session, "987654321") == []

    @pytest.mark.parametrize("prefix", ["%", "_", "1234_6789", "123%", "%/1"])
    async def test_metacharacters_match_literally(
        self, session: AsyncSession, registry: HandleRegistry, prefix
    ):
        item = await create_item(session)
        await registry.create_handle(session, item)

        assert await registry.get_handles_for_prefix(session, prefix) == []

    async def test_literal_metacharacters_in_handles(
        self, session: AsyncSession, registry: HandleRegistry
    ):
        await insert_handle_record(
            session, 900010, "10.50%/1", int(ResourceType.ITEM), 1
        )
        await insert_handle_record(
            session, 900011, "10.50x/1", int(ResourceType.ITEM), 2
        )
        await insert_handle_record(
            session, 900012, "a_b/1", int(ResourceType.ITEM), 3
        )
        await insert_handle_record(
            session, 900013, "axb/1", int(ResourceType.ITEM), 4
        )

        assert await registry.get_handles_for_prefix(session, "10.50%") == ["10.50%/1"]
        assert await registry.get_handles_for_prefix(session, "a_b") == ["a_b/1"]

    async def test_injection_payload_is_literal(
        self, session: AsyncSession, registry: HandleRegistry
    ):
        item = await create_item(session)
        await registry.create_handle(session, item)

        handles = await registry.get_handles_for_prefix(
            session, "' OR '1'='1"
        )

        assert handles == []


class TestConcurrentMinting:
    """Concurrent minting never hands out the same handle twice."""

    async def test_concurrent_create_handle(self, session_maker, registry: HandleRegistry):
        count = 10
        async with session_maker() as setup_session:
            items = await create_items(setup_session, count)
            await setup_session.commit()

        async def mint(item_id: int) -> str:
            async with session_maker() as mint_session:
                async with mint_session.begin():
                    item = await mint_session.get(Item, item_id)
                    return await registry.create_handle(mint_session, item)

        handles = await asyncio.gather(*(mint(item.item_id) for item in items))

        assert len(set(handles)) == count

        async with session_maker() as check_session:
            stored = await registry.get_handles_for_prefix(check_session, "123456789/")
        assert set(stored) == set(handles)
