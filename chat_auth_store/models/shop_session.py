"""ShopSession model: flat storage of an authenticated shop session."""

from __future__ import annotations

from sqlalchemy import BigInteger, Boolean, Column, String, Text

from chat_auth_store.db import Base


class ShopSession(Base):
    """One row per opaque session id.

    ``expires`` is epoch milliseconds and ``online_access_info`` is JSON text,
    the same shape the auth framework serializes sessions to.
    """

    __tablename__ = "shop_sessions"

    id = Column(String(256), primary_key=True)
    shop = Column(String(256), nullable=False, index=True)
    state = Column(String(512), nullable=True)
    is_online = Column(Boolean, nullable=False, default=False)
    scope = Column(Text, nullable=True)
    access_token = Column(Text, nullable=True)
    expires = Column(BigInteger, nullable=True)
    online_access_info = Column(Text, nullable=True)
