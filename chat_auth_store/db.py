"""Async row-store primitive shared by every store.

``Database`` is the only place that talks to SQLAlchemy's engine. Each call
runs one statement in its own short transaction and translates driver errors
into the package's :mod:`chat_auth_store.exceptions` hierarchy.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, List, Optional

from sqlalchemy import event
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql.expression import Executable

from chat_auth_store.config import Settings, get_settings
from chat_auth_store.exceptions import ConflictError, StorageFaultError
from chat_auth_store.infra.logging_config import get_logger

Base = declarative_base()

logger = get_logger("db")


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """Shared handle over an ``AsyncEngine``; safe for concurrent callers."""

    def __init__(self, engine: AsyncEngine) -> None:
        self.engine = engine
        self._sessionmaker = async_sessionmaker(engine, expire_on_commit=False)
        if self.dialect_name == "sqlite":
            event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

    @property
    def dialect_name(self) -> str:
        return self.engine.dialect.name

    @asynccontextmanager
    async def _transaction(self, operation: str) -> AsyncIterator[AsyncSession]:
        try:
            async with self._sessionmaker() as session:
                async with session.begin():
                    yield session
        except IntegrityError as e:
            logger.info("Constraint violation during %s: %s", operation, e.orig)
            raise ConflictError(str(e.orig), operation=operation) from e
        except SQLAlchemyError as e:
            logger.error("Storage fault during %s: %s", operation, e)
            raise StorageFaultError(str(e), operation=operation) from e

    async def execute(self, statement: Executable, operation: str = "execute") -> int:
        """Run a statement that returns no rows; return the affected row count."""
        async with self._transaction(operation) as session:
            result = await session.execute(statement)
            return result.rowcount

    async def query_all(
        self, statement: Executable, operation: str = "query_all"
    ) -> List[Any]:
        """Run a SELECT (or DML with RETURNING) and return every mapped row."""
        async with self._transaction(operation) as session:
            result = await session.execute(statement)
            return list(result.scalars().all())

    async def query_one(
        self, statement: Executable, operation: str = "query_one"
    ) -> Optional[Any]:
        """Run a SELECT (or DML with RETURNING) and return the first mapped row."""
        async with self._transaction(operation) as session:
            result = await session.execute(statement)
            return result.scalars().first()

    async def create_schema(self) -> None:
        """Create all tables and indexes that do not exist yet."""
        # Import models so they register on Base.metadata
        import chat_auth_store.models  # noqa: F401

        try:
            async with self.engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except SQLAlchemyError as e:
            logger.error("Failed to create schema: %s", e)
            raise StorageFaultError(str(e), operation="create_schema") from e
        logger.info("Schema ready on %s", self.dialect_name)

    async def dispose(self) -> None:
        await self.engine.dispose()


def create_database(settings: Optional[Settings] = None) -> Database:
    """Build the process-wide ``Database`` from settings."""
    settings = settings or get_settings()
    url = settings.database_url_obj
    engine_kwargs: dict[str, Any] = {"echo": settings.database_echo}
    if url.get_backend_name() != "sqlite" and settings.is_production:
        engine_kwargs.update(
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
            pool_pre_ping=True,
        )
    engine = create_async_engine(url, **engine_kwargs)
    return Database(engine)
