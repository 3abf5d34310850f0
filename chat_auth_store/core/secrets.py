"""At-rest encryption for stored access tokens."""

from __future__ import annotations

from typing import Optional

from cryptography.fernet import Fernet, InvalidToken

from chat_auth_store.config import Settings
from chat_auth_store.exceptions import StorageFaultError


class SecretCipher:
    """Fernet wrapper that works on text columns."""

    def __init__(self, key: str | bytes) -> None:
        self._fernet = Fernet(key.encode() if isinstance(key, str) else key)

    def encrypt(self, value: str) -> str:
        return self._fernet.encrypt(value.encode()).decode()

    def decrypt(self, value: str) -> str:
        try:
            return self._fernet.decrypt(value.encode()).decode()
        except InvalidToken as e:
            raise StorageFaultError(
                "Stored secret could not be decrypted", operation="decrypt"
            ) from e


def build_cipher(settings: Settings) -> Optional[SecretCipher]:
    """Return a cipher when TOKEN_ENCRYPTION_KEY is configured, else None."""
    if not settings.token_encryption_key:
        return None
    return SecretCipher(settings.token_encryption_key)
