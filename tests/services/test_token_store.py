"""Tests for TokenStore."""

from datetime import timedelta

import pytest
from sqlalchemy import select

from chat_auth_store.exceptions import StorageFaultError
from chat_auth_store.models.customer_token import CustomerToken
from chat_auth_store.services.token_store import TokenStore


@pytest.mark.asyncio
async def test_upsert_creates_token(token_store, clock):
    expires_at = clock.now + timedelta(hours=1)
    token = await token_store.upsert("conv-1", "tok-1", expires_at)
    assert token.id.startswith("ct_")
    assert token.conversation_id == "conv-1"
    assert token.access_token == "tok-1"
    assert token.expires_at == expires_at
    assert token.created_at == clock.now
    assert token.updated_at == clock.now


@pytest.mark.asyncio
async def test_upsert_replaces_in_place(db, token_store, clock):
    """Second upsert keeps id/created_at and leaves a single row."""
    first = await token_store.upsert("conv-1", "tok-1", clock.now + timedelta(hours=1))
    clock.advance(timedelta(minutes=5))
    exp2 = clock.now + timedelta(hours=2)
    second = await token_store.upsert("conv-1", "tok-2", exp2)

    assert second.id == first.id
    assert second.created_at == first.created_at
    assert second.updated_at == clock.now
    assert second.access_token == "tok-2"
    assert second.expires_at == exp2

    rows = await db.query_all(
        select(CustomerToken).where(CustomerToken.conversation_id == "conv-1")
    )
    assert len(rows) == 1


@pytest.mark.asyncio
async def test_get_returns_live_token(token_store, clock):
    await token_store.upsert("conv-2", "live", clock.now + timedelta(minutes=30))
    token = await token_store.get("conv-2")
    assert token is not None
    assert token.access_token == "live"


@pytest.mark.asyncio
async def test_get_unknown_conversation_returns_none(token_store):
    assert await token_store.get("nope") is None


@pytest.mark.asyncio
async def test_expired_token_is_hidden_but_not_deleted(db, token_store, clock):
    await token_store.upsert("conv-3", "old", clock.now + timedelta(minutes=30))
    clock.advance(timedelta(minutes=30))
    assert await token_store.get("conv-3") is None

    rows = await db.query_all(
        select(CustomerToken).where(CustomerToken.conversation_id == "conv-3")
    )
    assert len(rows) == 1

    new_expiry = clock.now + timedelta(hours=1)
    await token_store.upsert("conv-3", "refreshed", new_expiry)
    token = await token_store.get("conv-3")
    assert token is not None
    assert token.access_token == "refreshed"
    assert token.expires_at == new_expiry


@pytest.mark.asyncio
async def test_upsert_creates_and_touches_conversation(token_store, conversation_store, clock):
    await token_store.upsert("conv-4", "tok", clock.now + timedelta(hours=1))
    conversation = await conversation_store.get("conv-4")
    assert conversation is not None
    first_touch = conversation.updated_at

    clock.advance(timedelta(seconds=10))
    await token_store.upsert("conv-4", "tok-2", clock.now + timedelta(hours=1))
    conversation = await conversation_store.get("conv-4")
    assert conversation.updated_at > first_touch


@pytest.mark.asyncio
async def test_tokens_are_isolated_per_conversation(token_store, clock):
    await token_store.upsert("a", "tok-a", clock.now + timedelta(hours=1))
    await token_store.upsert("b", "tok-b", clock.now + timedelta(hours=1))
    assert (await token_store.get("a")).access_token == "tok-a"
    assert (await token_store.get("b")).access_token == "tok-b"


@pytest.mark.asyncio
async def test_delete_revokes_token(token_store, clock):
    await token_store.upsert("conv-5", "tok", clock.now + timedelta(hours=1))
    assert await token_store.delete("conv-5") is True
    assert await token_store.get("conv-5") is None
    assert await token_store.delete("conv-5") is False


@pytest.mark.asyncio
async def test_purge_expired(token_store, clock):
    await token_store.upsert("expired", "tok", clock.now + timedelta(minutes=1))
    await token_store.upsert("live", "tok", clock.now + timedelta(hours=1))
    clock.advance(timedelta(minutes=2))
    assert await token_store.purge_expired() == 1
    assert await token_store.get("live") is not None


@pytest.mark.asyncio
async def test_encrypted_token_round_trip(db, cipher, clock):
    store = TokenStore(db, cipher=cipher, clock=clock)
    await store.upsert("secret-conv", "plain-token", clock.now + timedelta(hours=1))

    row = await db.query_one(
        select(CustomerToken).where(CustomerToken.conversation_id == "secret-conv")
    )
    assert row.access_token != "plain-token"

    token = await store.get("secret-conv")
    assert token.access_token == "plain-token"


@pytest.mark.asyncio
async def test_storage_fault_propagates(unmigrated_db, clock):
    store = TokenStore(unmigrated_db, clock=clock)
    with pytest.raises(StorageFaultError):
        await store.get("conv")
    with pytest.raises(StorageFaultError):
        await store.upsert("conv", "tok", clock.now + timedelta(hours=1))
