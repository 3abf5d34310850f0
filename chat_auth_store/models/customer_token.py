"""CustomerToken model: the current customer access token of a conversation."""

from __future__ import annotations

from sqlalchemy import Column, String, Text

from chat_auth_store.db import Base
from chat_auth_store.models.mixins import TimestampMixin
from chat_auth_store.models.types import UTCDateTime


class CustomerToken(Base, TimestampMixin):
    """At most one row per conversation; replaced in place on every write."""

    __tablename__ = "customer_tokens"

    id = Column(String(64), primary_key=True)
    conversation_id = Column(String(256), unique=True, nullable=False, index=True)
    access_token = Column(Text, nullable=False)
    expires_at = Column(UTCDateTime, nullable=False, index=True)
