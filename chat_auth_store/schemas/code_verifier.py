"""Pydantic schema for stored PKCE code verifiers."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class CodeVerifierInDB(BaseModel):
    """A verifier as stored (and as handed back by consume)."""

    id: str
    state: str
    verifier: str
    expires_at: datetime

    model_config = {"from_attributes": True}
