"""CustomerAccountUrl model: customer account API URL discovered for a conversation."""

from __future__ import annotations

from sqlalchemy import Column, String, Text

from chat_auth_store.db import Base
from chat_auth_store.models.mixins import TimestampMixin


class CustomerAccountUrl(Base, TimestampMixin):
    __tablename__ = "customer_account_urls"

    conversation_id = Column(String(256), primary_key=True)
    url = Column(Text, nullable=False)
