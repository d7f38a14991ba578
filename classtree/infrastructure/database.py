"""Database configuration and session management.

Provides the async SQLAlchemy engine, the session factory and the
unit-of-work primitive every taxonomy operation runs inside.
"""

from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

import structlog
from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import declarative_base

from classtree.infrastructure.config import settings

logger = structlog.get_logger()

T = TypeVar("T")

# Base class for models
Base = declarative_base()


def _enable_sqlite_foreign_keys(dbapi_connection: Any, connection_record: Any) -> None:
    """Turn on foreign key enforcement for a fresh SQLite connection.

    SQLite ignores ON DELETE clauses unless this pragma is set per connection.
    """
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """Storage capability handed to the taxonomy engine.

    Owns the engine and session factory and exposes the atomic
    unit of work used by every service operation.

    Example usage:
        database = Database("sqlite+aiosqlite://", poolclass=StaticPool)
        await database.create_schema()
        class_id = await database.run_atomically(
            lambda session: ClassHierarchy(session).create_subtree(node)
        )
    """

    def __init__(self, url: str, echo: bool = False, **engine_kwargs: Any) -> None:
        """Initialize engine and session factory.

        Args:
            url: SQLAlchemy async database URL.
            echo: Whether to log emitted SQL.
            **engine_kwargs: Extra arguments for create_async_engine
                (e.g. poolclass for in-memory SQLite).
        """
        self.url = url
        self.engine: AsyncEngine = create_async_engine(
            url,
            echo=echo,
            pool_pre_ping=True,
            **engine_kwargs,
        )
        if self.engine.dialect.name == "sqlite":
            event.listen(self.engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    async def create_schema(self) -> None:
        """Create all tables if they don't exist."""
        # Registers the mapped tables on Base.metadata
        from classtree.infrastructure import models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def drop_schema(self) -> None:
        """Drop all tables."""
        from classtree.infrastructure import models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)

    async def ping(self) -> bool:
        """Check that the database answers a trivial query."""
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True

    async def run_atomically(self, fn: Callable[[AsyncSession], Awaitable[T]]) -> T:
        """Run fn inside a single transaction.

        The session commits when fn returns and rolls back when it raises.
        A failing rollback is logged and the original error is re-raised.

        Args:
            fn: Coroutine function receiving the session.

        Returns:
            Whatever fn returns.
        """
        async with self.session_factory() as session:
            try:
                result = await fn(session)
                await session.commit()
            except Exception:
                try:
                    await session.rollback()
                except Exception as rollback_error:
                    logger.error(
                        "Rollback failed",
                        error=str(rollback_error),
                    )
                raise
            return result

    async def dispose(self) -> None:
        """Close all pooled connections."""
        await self.engine.dispose()


# Default database built from settings
database = Database(settings.database_url, echo=settings.debug)
