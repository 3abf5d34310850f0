"""Conversations, their append-only message history and account URL binding."""

from __future__ import annotations

from datetime import datetime
from typing import Callable, List, Optional

from sqlalchemy import delete, insert, select

from chat_auth_store.constants.stores import MESSAGE_ID_PREFIX
from chat_auth_store.db import Database
from chat_auth_store.infra.logging_config import get_logger
from chat_auth_store.models.conversation import Conversation
from chat_auth_store.models.customer_account_url import CustomerAccountUrl
from chat_auth_store.models.message import Message
from chat_auth_store.models.types import utcnow
from chat_auth_store.schemas.conversation import (
    ConversationInDB,
    CustomerAccountUrlInDB,
    MessageInDB,
)
from chat_auth_store.utils.db.upsert import build_upsert
from chat_auth_store.utils.ids import new_sortable_id

logger = get_logger("conversation_store")


class ConversationStore:
    """Manages conversations and everything they own."""

    def __init__(
        self,
        db: Database,
        *,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self.db = db
        self._clock = clock or utcnow

    async def ensure(self, conversation_id: str) -> ConversationInDB:
        """
        Get or create a conversation, touching updated_at either way.

        created_at is kept from the first insert.
        """
        now = self._clock()
        stmt = build_upsert(
            self.db.dialect_name,
            Conversation,
            {"id": conversation_id, "created_at": now, "updated_at": now},
            index_elements=["id"],
            update_columns=["updated_at"],
        )
        row = await self.db.query_one(stmt, operation="ensure_conversation")
        return ConversationInDB.model_validate(row)

    async def get(self, conversation_id: str) -> Optional[ConversationInDB]:
        """Fetch a conversation without touching it."""
        row = await self.db.query_one(
            select(Conversation).where(Conversation.id == conversation_id),
            operation="get_conversation",
        )
        if row is None:
            return None
        return ConversationInDB.model_validate(row)

    async def append_message(
        self, conversation_id: str, role: str, content: str
    ) -> MessageInDB:
        """Append a message, creating the conversation first if needed."""
        await self.ensure(conversation_id)
        values = {
            "id": new_sortable_id(MESSAGE_ID_PREFIX),
            "conversation_id": conversation_id,
            "role": str(role),
            "content": content,
            "created_at": self._clock(),
        }
        row = await self.db.query_one(
            insert(Message).values(**values).returning(Message),
            operation="append_message",
        )
        return MessageInDB.model_validate(row)

    async def history(self, conversation_id: str) -> List[MessageInDB]:
        """All messages of a conversation, oldest first. Empty if none."""
        rows = await self.db.query_all(
            select(Message)
            .where(Message.conversation_id == conversation_id)
            .order_by(Message.created_at, Message.id),
            operation="conversation_history",
        )
        return [MessageInDB.model_validate(r) for r in rows]

    async def set_account_url(
        self, conversation_id: str, url: str
    ) -> CustomerAccountUrlInDB:
        """Bind (or rebind) the customer account URL of a conversation."""
        await self.ensure(conversation_id)
        now = self._clock()
        stmt = build_upsert(
            self.db.dialect_name,
            CustomerAccountUrl,
            {
                "conversation_id": conversation_id,
                "url": url,
                "created_at": now,
                "updated_at": now,
            },
            index_elements=["conversation_id"],
            update_columns=["url", "updated_at"],
        )
        row = await self.db.query_one(stmt, operation="set_account_url")
        return CustomerAccountUrlInDB.model_validate(row)

    async def get_account_url(self, conversation_id: str) -> Optional[str]:
        row = await self.db.query_one(
            select(CustomerAccountUrl).where(
                CustomerAccountUrl.conversation_id == conversation_id
            ),
            operation="get_account_url",
        )
        return row.url if row is not None else None

    async def delete(self, conversation_id: str) -> bool:
        """
        Delete a conversation with its messages and account URL.
        Returns True if the conversation existed.
        """
        await self.db.execute(
            delete(CustomerAccountUrl)
            .where(CustomerAccountUrl.conversation_id == conversation_id)
            .execution_options(synchronize_session=False),
            operation="delete_account_url",
        )
        # Messages go with the conversation through ON DELETE CASCADE
        removed = await self.db.execute(
            delete(Conversation)
            .where(Conversation.id == conversation_id)
            .execution_options(synchronize_session=False),
            operation="delete_conversation",
        )
        if removed:
            logger.info("Deleted conversation %s", conversation_id)
        return removed > 0
