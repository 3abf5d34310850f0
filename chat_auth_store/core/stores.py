"""Wiring of the stores around one shared Database handle."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

from chat_auth_store.config import Settings, get_settings
from chat_auth_store.core.secrets import build_cipher
from chat_auth_store.db import Database, create_database
from chat_auth_store.infra.logging_config import LoggingConfig, get_logger
from chat_auth_store.services.conversation_store import ConversationStore
from chat_auth_store.services.session_store import SessionStore
from chat_auth_store.services.token_store import TokenStore
from chat_auth_store.services.verifier_store import VerifierStore

logger = get_logger("stores")


@dataclass
class Stores:
    settings: Settings
    database: Database
    verifiers: VerifierStore
    tokens: TokenStore
    sessions: SessionStore
    conversations: ConversationStore

    async def initialize(self) -> None:
        """Create the schema; safe to call on every start."""
        await self.database.create_schema()

    async def close(self) -> None:
        await self.database.dispose()


def create_stores(
    settings: Optional[Settings] = None,
    database: Optional[Database] = None,
) -> Stores:
    """
    Build every store from one resolved configuration.

    Call once at process start and pass the result (or individual stores) to
    the code that needs them.
    """
    settings = settings or get_settings()
    LoggingConfig(settings)
    database = database or create_database(settings)
    cipher = build_cipher(settings)

    conversations = ConversationStore(database)
    stores = Stores(
        settings=settings,
        database=database,
        verifiers=VerifierStore(
            database, ttl=timedelta(minutes=settings.code_verifier_ttl_minutes)
        ),
        tokens=TokenStore(database, conversations=conversations, cipher=cipher),
        sessions=SessionStore(database, cipher=cipher),
        conversations=conversations,
    )
    logger.info(
        "Stores ready (environment=%s, dialect=%s, encryption=%s)",
        settings.environment,
        database.dialect_name,
        "on" if cipher else "off",
    )
    return stores
