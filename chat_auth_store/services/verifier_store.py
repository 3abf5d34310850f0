"""Single-use PKCE code verifiers keyed by OAuth state."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Callable, Optional

from sqlalchemy import delete, insert

from chat_auth_store.constants.stores import (
    CODE_VERIFIER_ID_PREFIX,
    DEFAULT_CODE_VERIFIER_TTL,
)
from chat_auth_store.db import Database
from chat_auth_store.infra.logging_config import get_logger
from chat_auth_store.models.code_verifier import CodeVerifier
from chat_auth_store.models.types import utcnow
from chat_auth_store.schemas.code_verifier import CodeVerifierInDB
from chat_auth_store.utils.ids import new_id

logger = get_logger("verifier_store")


class VerifierStore:
    """Stores PKCE verifiers between the authorize redirect and the callback."""

    def __init__(
        self,
        db: Database,
        *,
        ttl: timedelta = DEFAULT_CODE_VERIFIER_TTL,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self.db = db
        self.ttl = ttl
        self._clock = clock or utcnow

    async def store(self, state: str, verifier: str) -> CodeVerifierInDB:
        """
        Insert a verifier for ``state`` that expires after the TTL.
        Raises ConflictError if ``state`` is already stored.
        """
        now = self._clock()
        values = {
            "id": new_id(CODE_VERIFIER_ID_PREFIX),
            "state": state,
            "verifier": verifier,
            "expires_at": now + self.ttl,
            "created_at": now,
        }
        row = await self.db.query_one(
            insert(CodeVerifier).values(**values).returning(CodeVerifier),
            operation="store_code_verifier",
        )
        logger.debug("Stored code verifier %s", row.id)
        return CodeVerifierInDB.model_validate(row)

    async def consume(self, state: str) -> Optional[CodeVerifierInDB]:
        """
        Atomically fetch and delete the live verifier for ``state``.

        Returns None when the state was never stored, was already consumed or
        has expired. Concurrent callers on one state get at most one value.
        """
        stmt = (
            delete(CodeVerifier)
            .where(
                CodeVerifier.state == state,
                CodeVerifier.expires_at > self._clock(),
            )
            .returning(CodeVerifier)
            .execution_options(synchronize_session=False)
        )
        row = await self.db.query_one(stmt, operation="consume_code_verifier")
        if row is None:
            return None
        logger.debug("Consumed code verifier %s", row.id)
        return CodeVerifierInDB.model_validate(row)

    async def purge_expired(self) -> int:
        """Delete verifiers whose TTL has passed. Returns the number removed."""
        stmt = (
            delete(CodeVerifier)
            .where(CodeVerifier.expires_at <= self._clock())
            .execution_options(synchronize_session=False)
        )
        removed = await self.db.execute(stmt, operation="purge_code_verifiers")
        if removed:
            logger.info("Purged %d expired code verifiers", removed)
        return removed
