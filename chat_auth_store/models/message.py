"""Message model: one append-only row per chat turn."""

from __future__ import annotations

from sqlalchemy import Column, ForeignKey, Index, String, Text
from sqlalchemy.orm import relationship

from chat_auth_store.db import Base
from chat_auth_store.models.types import UTCDateTime, utcnow


class Message(Base):
    """Role is free-form ('user', 'assistant', ...); rows are never updated."""

    __tablename__ = "messages"
    __table_args__ = (
        Index("ix_messages_conversation_id_created_at", "conversation_id", "created_at"),
    )

    id = Column(String(64), primary_key=True)
    conversation_id = Column(
        String(256),
        ForeignKey("conversations.id", ondelete="CASCADE", onupdate="CASCADE"),
        nullable=False,
    )
    role = Column(String(32), nullable=False)
    content = Column(Text, nullable=False)
    created_at = Column(UTCDateTime, nullable=False, default=utcnow)

    conversation = relationship("Conversation", back_populates="messages")
