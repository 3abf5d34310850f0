"""Conversation model: owner of message history and the account URL binding."""

from __future__ import annotations

from sqlalchemy import Column, String
from sqlalchemy.orm import relationship

from chat_auth_store.db import Base
from chat_auth_store.models.mixins import TimestampMixin


class Conversation(Base, TimestampMixin):
    __tablename__ = "conversations"

    id = Column(String(256), primary_key=True)

    messages = relationship(
        "Message",
        back_populates="conversation",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Message.created_at",
    )
