"""Pydantic schemas for Conversation, Message and CustomerAccountUrl."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class ConversationInDB(BaseModel):
    id: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class MessageInDB(BaseModel):
    id: str
    conversation_id: str
    role: str
    content: str
    created_at: datetime

    model_config = {"from_attributes": True}


class CustomerAccountUrlInDB(BaseModel):
    conversation_id: str
    url: str
    updated_at: datetime

    model_config = {"from_attributes": True}
