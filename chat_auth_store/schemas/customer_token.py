"""Pydantic schema for customer access tokens."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class CustomerTokenInDB(BaseModel):
    id: str
    conversation_id: str
    access_token: str
    expires_at: datetime
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
