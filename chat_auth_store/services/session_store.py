"""Session storage for the auth framework: one row per session id, indexed by shop."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from pydantic import ValidationError
from sqlalchemy import delete, select

from chat_auth_store.core.secrets import SecretCipher
from chat_auth_store.db import Database
from chat_auth_store.exceptions import StorageFaultError
from chat_auth_store.infra.logging_config import get_logger
from chat_auth_store.models.shop_session import ShopSession
from chat_auth_store.schemas.session import AuthSession, OnlineAccessInfo
from chat_auth_store.utils.db.upsert import build_upsert

logger = get_logger("session_store")

_SESSION_COLUMNS = (
    "shop",
    "state",
    "is_online",
    "scope",
    "access_token",
    "expires",
    "online_access_info",
)


def _to_epoch_ms(value: Optional[datetime]) -> Optional[int]:
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return int(value.timestamp() * 1000)


def _from_epoch_ms(value: Optional[int]) -> Optional[datetime]:
    # 0 is treated like NULL: no expiry
    if not value:
        return None
    return datetime.fromtimestamp(value / 1000, tz=timezone.utc)


class SessionStore:
    """Insert-or-replace session storage.

    Storage faults are raised as StorageFaultError; a missing session is None.
    """

    def __init__(
        self,
        db: Database,
        *,
        cipher: Optional[SecretCipher] = None,
    ) -> None:
        self.db = db
        self._cipher = cipher

    def serialize(self, session: AuthSession) -> Dict[str, Any]:
        """Flatten a session into column values."""
        access_token = session.access_token or None
        if access_token and self._cipher is not None:
            access_token = self._cipher.encrypt(access_token)
        online_access_info = None
        if session.online_access_info is not None:
            online_access_info = session.online_access_info.model_dump_json(
                exclude_none=True
            )
        return {
            "id": session.id,
            "shop": session.shop,
            "state": session.state or None,
            "is_online": bool(session.is_online),
            "scope": session.scope or None,
            "access_token": access_token,
            "expires": _to_epoch_ms(session.expires),
            "online_access_info": online_access_info,
        }

    def deserialize(self, row: ShopSession) -> AuthSession:
        """Rebuild the structured session from a stored row."""
        access_token = row.access_token
        if access_token and self._cipher is not None:
            access_token = self._cipher.decrypt(access_token)

        online_access_info = None
        if row.online_access_info:
            try:
                online_access_info = OnlineAccessInfo.model_validate(
                    json.loads(row.online_access_info)
                )
            except (ValueError, ValidationError) as e:
                raise StorageFaultError(
                    f"Corrupt online access info for session {row.id}",
                    operation="load_session",
                ) from e

        return AuthSession(
            id=row.id,
            shop=row.shop,
            state=row.state,
            is_online=bool(row.is_online),
            scope=row.scope,
            access_token=access_token,
            expires=_from_epoch_ms(row.expires),
            online_access_info=online_access_info,
        )

    async def store(self, session: AuthSession) -> bool:
        """Insert or fully replace the session with the same id."""
        stmt = build_upsert(
            self.db.dialect_name,
            ShopSession,
            self.serialize(session),
            index_elements=["id"],
            update_columns=_SESSION_COLUMNS,
        )
        await self.db.query_one(stmt, operation="store_session")
        logger.debug("Stored session %s for shop %s", session.id, session.shop)
        return True

    async def load(self, session_id: str) -> Optional[AuthSession]:
        row = await self.db.query_one(
            select(ShopSession).where(ShopSession.id == session_id),
            operation="load_session",
        )
        if row is None:
            return None
        return self.deserialize(row)

    async def delete(self, session_id: str) -> bool:
        """Delete a session. Deleting an unknown id also succeeds."""
        await self.db.execute(
            delete(ShopSession)
            .where(ShopSession.id == session_id)
            .execution_options(synchronize_session=False),
            operation="delete_session",
        )
        return True

    async def delete_many(self, session_ids: Iterable[str]) -> bool:
        """
        Delete sessions one by one.

        Not atomic: every id is attempted, sessions already deleted stay
        deleted, and a StorageFaultError listing the failed ids is raised if
        any delete failed.
        """
        failed: List[str] = []
        for session_id in session_ids:
            try:
                await self.delete(session_id)
            except StorageFaultError:
                failed.append(session_id)
        if failed:
            raise StorageFaultError(
                f"Failed to delete {len(failed)} session(s)",
                operation="delete_sessions",
                failed_ids=failed,
            )
        return True

    async def find_by_shop(self, shop: str) -> List[AuthSession]:
        rows = await self.db.query_all(
            select(ShopSession).where(ShopSession.shop == shop),
            operation="find_sessions_by_shop",
        )
        return [self.deserialize(r) for r in rows]
