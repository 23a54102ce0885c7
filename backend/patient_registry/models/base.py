"""
Database base configuration.

Declares the shared metadata, the declarative base with generated
timestamps, and the async engine/session factory used by the API.
"""

from collections.abc import AsyncGenerator
from datetime import datetime
from typing import Any

from fastapi import Request
from sqlalchemy import DateTime, MetaData, event, func
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from patient_registry.core.config import DatabaseSettings
from patient_registry.utils.datetime_utils import utc_now

# Constraint naming convention shared with alembic migrations
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

metadata = MetaData(naming_convention=NAMING_CONVENTION)


class Base(DeclarativeBase):
    """Base class for all models, with created/updated timestamps.

    Timestamps are assigned client-side so they are available on the
    instance right after flush; the server default only covers rows
    written outside the ORM.
    """

    metadata = metadata

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        onupdate=utc_now,
        server_default=func.now(),
        nullable=False,
    )


def _enable_sqlite_foreign_keys(dbapi_connection: Any, connection_record: Any) -> None:
    # SQLite ignores ON DELETE CASCADE unless foreign keys are switched on per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_engine_from_settings(db_settings: DatabaseSettings) -> AsyncEngine:
    """Create an async engine for the configured database."""
    return create_db_engine(
        db_settings.url,
        echo=db_settings.echo,
        pool_size=db_settings.pool_size,
        max_overflow=db_settings.max_overflow,
    )


def create_db_engine(
    url: str,
    echo: bool = False,
    pool_size: int | None = None,
    max_overflow: int | None = None,
) -> AsyncEngine:
    """Create an async engine, enabling foreign keys on SQLite."""
    engine_kwargs: dict[str, Any] = {"echo": echo}
    if url.startswith("sqlite"):
        db_engine = create_async_engine(url, **engine_kwargs)
        event.listen(db_engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
        return db_engine

    engine_kwargs["pool_pre_ping"] = True
    if pool_size is not None:
        engine_kwargs["pool_size"] = pool_size
    if max_overflow is not None:
        engine_kwargs["max_overflow"] = max_overflow
    return create_async_engine(url, **engine_kwargs)


def create_session_maker(db_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create a session factory bound to the given engine."""
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


async def init_models(db_engine: AsyncEngine) -> None:
    """Create all tables that do not exist yet."""
    async with db_engine.begin() as conn:
        await conn.run_sync(metadata.create_all)


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency yielding a request-scoped session.

    The session factory is created by the application lifespan and kept on
    ``app.state``; nothing at module level holds a connection.
    """
    session_maker: async_sessionmaker[AsyncSession] = request.app.state.db_session_maker
    async with session_maker() as session:
        yield session
