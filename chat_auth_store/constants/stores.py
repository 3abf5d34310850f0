"""Id prefixes and lifecycle constants for stored rows."""

from datetime import timedelta
from enum import StrEnum

DEFAULT_CODE_VERIFIER_TTL = timedelta(minutes=10)

CODE_VERIFIER_ID_PREFIX = "cv"
CUSTOMER_TOKEN_ID_PREFIX = "ct"
MESSAGE_ID_PREFIX = "msg"


class MessageRole(StrEnum):
    """Roles written by the chat flow. Stores accept any role string."""

    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"
