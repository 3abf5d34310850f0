"""Pydantic schemas for authenticated shop sessions."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Iterable, Optional, Union

from pydantic import BaseModel

# Sessions this close to expiry are treated as expired
EXPIRY_BUFFER = timedelta(milliseconds=500)

# -----------------------------------------------------------------------------
# Online access metadata (stored as JSON text)
# -----------------------------------------------------------------------------


class AssociatedUser(BaseModel):
    """Staff member an online session was issued for."""

    id: int
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    email_verified: Optional[bool] = None
    account_owner: Optional[bool] = None
    locale: Optional[str] = None
    collaborator: Optional[bool] = None

    model_config = {"extra": "allow"}


class OnlineAccessInfo(BaseModel):
    expires_in: int
    associated_user_scope: str
    associated_user: AssociatedUser
    session: Optional[str] = None

    model_config = {"extra": "allow"}


# -----------------------------------------------------------------------------
# Session
# -----------------------------------------------------------------------------


def _scope_set(scopes: Union[str, Iterable[str], None]) -> set[str]:
    """Normalize a scope string/list, adding the read scopes implied by write scopes."""
    if scopes is None:
        return set()
    if isinstance(scopes, str):
        scopes = scopes.split(",")
    result = {s.strip() for s in scopes if s and s.strip()}
    for scope in list(result):
        if scope.startswith("write_"):
            result.add("read_" + scope[len("write_"):])
        elif scope.startswith("unauthenticated_write_"):
            result.add("unauthenticated_read_" + scope[len("unauthenticated_write_"):])
    return result


class AuthSession(BaseModel):
    """Structured session handed over by the auth framework."""

    id: str
    shop: str
    state: Optional[str] = None
    is_online: bool = False
    scope: Optional[str] = None
    access_token: Optional[str] = None
    expires: Optional[datetime] = None
    online_access_info: Optional[OnlineAccessInfo] = None

    def is_expired(self, within: timedelta = timedelta(0)) -> bool:
        """True if the session expires within ``within`` from now."""
        if self.expires is None:
            return False
        expires = self.expires
        if expires.tzinfo is None:
            expires = expires.replace(tzinfo=timezone.utc)
        return expires - within < datetime.now(timezone.utc)

    def is_scope_changed(self, scopes: Union[str, Iterable[str]]) -> bool:
        return _scope_set(scopes) != _scope_set(self.scope)

    def is_active(self, scopes: Union[str, Iterable[str]]) -> bool:
        """Usable for a request needing ``scopes``: same scopes, has a token, not about to expire."""
        return (
            not self.is_scope_changed(scopes)
            and bool(self.access_token)
            and not self.is_expired(EXPIRY_BUFFER)
        )
