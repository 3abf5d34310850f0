"""Tests for ConversationStore."""

from datetime import timedelta

import pytest
from sqlalchemy import select

from chat_auth_store.constants.stores import MessageRole
from chat_auth_store.exceptions import StorageFaultError
from chat_auth_store.models.message import Message
from chat_auth_store.services.conversation_store import ConversationStore


@pytest.mark.asyncio
async def test_ensure_creates_conversation(conversation_store, clock):
    conversation = await conversation_store.ensure("conv-1")
    assert conversation.id == "conv-1"
    assert conversation.created_at == clock.now
    assert conversation.updated_at == clock.now


@pytest.mark.asyncio
async def test_ensure_touches_existing(conversation_store, clock):
    """Every ensure bumps updated_at and keeps created_at."""
    first = await conversation_store.ensure("conv-1")
    clock.advance(timedelta(seconds=30))
    second = await conversation_store.ensure("conv-1")

    assert second.created_at == first.created_at
    assert second.updated_at > first.updated_at
    assert second.updated_at == clock.now


@pytest.mark.asyncio
async def test_ensure_without_clock_movement_is_not_older(db):
    store = ConversationStore(db)
    first = await store.ensure("conv-real-clock")
    second = await store.ensure("conv-real-clock")
    assert second.created_at == first.created_at
    assert second.updated_at >= first.updated_at


@pytest.mark.asyncio
async def test_get_does_not_touch(conversation_store, clock):
    created = await conversation_store.ensure("conv-1")
    clock.advance(timedelta(minutes=1))
    fetched = await conversation_store.get("conv-1")
    assert fetched.updated_at == created.updated_at
    assert await conversation_store.get("missing") is None


@pytest.mark.asyncio
async def test_append_message_creates_conversation(conversation_store, clock):
    message = await conversation_store.append_message("new-conv", MessageRole.USER, "hi")
    assert message.id.startswith("msg_")
    assert message.conversation_id == "new-conv"
    assert message.role == "user"
    assert message.content == "hi"
    assert message.created_at == clock.now
    assert await conversation_store.get("new-conv") is not None


@pytest.mark.asyncio
async def test_append_message_bumps_conversation(conversation_store, clock):
    created = await conversation_store.ensure("conv-1")
    clock.advance(timedelta(seconds=5))
    await conversation_store.append_message("conv-1", "assistant", "hello")
    conversation = await conversation_store.get("conv-1")
    assert conversation.updated_at > created.updated_at


@pytest.mark.asyncio
async def test_history_preserves_insertion_order(conversation_store, clock):
    await conversation_store.append_message("conv-1", "user", "m1")
    clock.advance(timedelta(seconds=1))
    await conversation_store.append_message("conv-1", "assistant", "m2")
    clock.advance(timedelta(seconds=1))
    await conversation_store.append_message("conv-1", "user", "m3")

    history = await conversation_store.history("conv-1")
    assert [m.content for m in history] == ["m1", "m2", "m3"]
    assert [m.role for m in history] == ["user", "assistant", "user"]


@pytest.mark.asyncio
async def test_history_orders_messages_with_equal_timestamps(conversation_store):
    """The fake clock does not move: insertion order still wins."""
    for i in range(5):
        await conversation_store.append_message("conv-1", "user", f"m{i}")
    history = await conversation_store.history("conv-1")
    assert [m.content for m in history] == [f"m{i}" for i in range(5)]


@pytest.mark.asyncio
async def test_history_of_unknown_conversation_is_empty(conversation_store):
    assert await conversation_store.history("unknown") == []


@pytest.mark.asyncio
async def test_history_is_scoped_to_conversation(conversation_store):
    await conversation_store.append_message("a", "user", "for a")
    await conversation_store.append_message("b", "user", "for b")
    history = await conversation_store.history("a")
    assert [m.content for m in history] == ["for a"]


@pytest.mark.asyncio
async def test_account_url_upsert(conversation_store, clock):
    assert await conversation_store.get_account_url("conv-1") is None

    first = await conversation_store.set_account_url("conv-1", "https://a.example/api")
    assert first.url == "https://a.example/api"
    assert first.updated_at == clock.now

    clock.advance(timedelta(minutes=1))
    second = await conversation_store.set_account_url("conv-1", "https://b.example/api")
    assert second.updated_at == clock.now
    assert await conversation_store.get_account_url("conv-1") == "https://b.example/api"


@pytest.mark.asyncio
async def test_set_account_url_creates_conversation(conversation_store):
    await conversation_store.set_account_url("fresh", "https://x.example")
    assert await conversation_store.get("fresh") is not None


@pytest.mark.asyncio
async def test_delete_cascades_messages(db, conversation_store):
    await conversation_store.append_message("conv-1", "user", "m1")
    await conversation_store.append_message("conv-1", "assistant", "m2")
    await conversation_store.set_account_url("conv-1", "https://a.example")
    await conversation_store.append_message("other", "user", "keep me")

    assert await conversation_store.delete("conv-1") is True

    assert await conversation_store.get("conv-1") is None
    assert await conversation_store.history("conv-1") == []
    assert await conversation_store.get_account_url("conv-1") is None
    rows = await db.query_all(select(Message).where(Message.conversation_id == "conv-1"))
    assert rows == []
    assert len(await conversation_store.history("other")) == 1


@pytest.mark.asyncio
async def test_delete_unknown_conversation(conversation_store):
    assert await conversation_store.delete("missing") is False


@pytest.mark.asyncio
async def test_storage_fault_propagates(unmigrated_db):
    store = ConversationStore(unmigrated_db)
    with pytest.raises(StorageFaultError):
        await store.ensure("conv")
    with pytest.raises(StorageFaultError):
        await store.history("conv")
    with pytest.raises(StorageFaultError):
        await store.get_account_url("conv")
