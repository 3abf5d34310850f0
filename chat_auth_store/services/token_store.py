"""Customer access tokens, one per conversation."""

from __future__ import annotations

from datetime import datetime
from typing import Callable, Optional

from sqlalchemy import delete, select

from chat_auth_store.constants.stores import CUSTOMER_TOKEN_ID_PREFIX
from chat_auth_store.core.secrets import SecretCipher
from chat_auth_store.db import Database
from chat_auth_store.infra.logging_config import get_logger
from chat_auth_store.models.customer_token import CustomerToken
from chat_auth_store.models.types import utcnow
from chat_auth_store.schemas.customer_token import CustomerTokenInDB
from chat_auth_store.services.conversation_store import ConversationStore
from chat_auth_store.utils.db.upsert import build_upsert
from chat_auth_store.utils.ids import new_id

logger = get_logger("token_store")


class TokenStore:
    """Replace-on-write, expire-on-read token cache keyed by conversation."""

    def __init__(
        self,
        db: Database,
        *,
        conversations: Optional[ConversationStore] = None,
        cipher: Optional[SecretCipher] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self.db = db
        self._conversations = conversations
        self._cipher = cipher
        self._clock = clock or utcnow

    def _to_schema(self, row: CustomerToken) -> CustomerTokenInDB:
        token = CustomerTokenInDB.model_validate(row)
        if self._cipher is not None:
            token.access_token = self._cipher.decrypt(token.access_token)
        return token

    async def upsert(
        self, conversation_id: str, access_token: str, expires_at: datetime
    ) -> CustomerTokenInDB:
        """
        Store the token for a conversation.

        An existing row is updated in place (token, expiry, updated_at) and
        keeps its id and created_at.
        """
        if self._conversations is not None:
            await self._conversations.ensure(conversation_id)

        now = self._clock()
        stored_token = (
            self._cipher.encrypt(access_token) if self._cipher else access_token
        )
        stmt = build_upsert(
            self.db.dialect_name,
            CustomerToken,
            {
                "id": new_id(CUSTOMER_TOKEN_ID_PREFIX),
                "conversation_id": conversation_id,
                "access_token": stored_token,
                "expires_at": expires_at,
                "created_at": now,
                "updated_at": now,
            },
            index_elements=["conversation_id"],
            update_columns=["access_token", "expires_at", "updated_at"],
        )
        row = await self.db.query_one(stmt, operation="upsert_customer_token")
        logger.debug("Stored customer token %s for %s", row.id, conversation_id)
        return self._to_schema(row)

    async def get(self, conversation_id: str) -> Optional[CustomerTokenInDB]:
        """Return the token if it has not expired. Expired rows are left in place."""
        row = await self.db.query_one(
            select(CustomerToken).where(
                CustomerToken.conversation_id == conversation_id,
                CustomerToken.expires_at > self._clock(),
            ),
            operation="get_customer_token",
        )
        if row is None:
            return None
        return self._to_schema(row)

    async def delete(self, conversation_id: str) -> bool:
        """Revoke the token of a conversation. Returns True if one was removed."""
        removed = await self.db.execute(
            delete(CustomerToken)
            .where(CustomerToken.conversation_id == conversation_id)
            .execution_options(synchronize_session=False),
            operation="delete_customer_token",
        )
        return removed > 0

    async def purge_expired(self) -> int:
        """Delete expired tokens. Returns the number removed."""
        removed = await self.db.execute(
            delete(CustomerToken)
            .where(CustomerToken.expires_at <= self._clock())
            .execution_options(synchronize_session=False),
            operation="purge_customer_tokens",
        )
        if removed:
            logger.info("Purged %d expired customer tokens", removed)
        return removed
