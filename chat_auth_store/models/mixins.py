from sqlalchemy import Column

from chat_auth_store.models.types import UTCDateTime, utcnow


class TimestampMixin:
    created_at = Column(UTCDateTime, nullable=False, default=utcnow)
    updated_at = Column(UTCDateTime, nullable=False, default=utcnow, onupdate=utcnow)
