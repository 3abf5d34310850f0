"""CodeVerifier model: one single-use PKCE verifier per OAuth state."""

from __future__ import annotations

from sqlalchemy import Column, String, Text

from chat_auth_store.db import Base
from chat_auth_store.models.types import UTCDateTime, utcnow


class CodeVerifier(Base):
    """Live until consumed by the OAuth callback or until expires_at passes."""

    __tablename__ = "code_verifiers"

    id = Column(String(64), primary_key=True)
    state = Column(String(512), unique=True, nullable=False, index=True)
    verifier = Column(Text, nullable=False)
    expires_at = Column(UTCDateTime, nullable=False, index=True)
    created_at = Column(UTCDateTime, nullable=False, default=utcnow)
