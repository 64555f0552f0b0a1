from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from .base import Base
from .config import Settings, get_settings


# PUBLIC_INTERFACE
def create_engine(settings: Optional[Settings] = None) -> AsyncEngine:
    """
    Build an AsyncEngine from database settings.

    No engine is cached at module level; the caller owns the returned handle
    and is responsible for disposing it.
    """
    settings = settings or get_settings()
    url = settings.async_database_url
    options = {"echo": settings.SQL_ECHO}
    if not url.startswith("sqlite"):
        options["pool_pre_ping"] = True
    return create_async_engine(url, **options)


# PUBLIC_INTERFACE
def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Return a session factory bound to the given engine."""
    return async_sessionmaker(
        bind=engine, expire_on_commit=False, autoflush=False, autocommit=False
    )


# PUBLIC_INTERFACE
@asynccontextmanager
async def session_scope(
    factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """
    Async context manager yielding one AsyncSession for a unit of work.

    Usage:
        async with session_scope(factory) as session:
            service = AppService(session, provisioner)
            ...

    Uncommitted work is rolled back when the block raises.
    """
    async with factory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


# PUBLIC_INTERFACE
async def init_schema(engine: AsyncEngine) -> None:
    """
    Create every mapped table that does not exist yet.

    Meant for development databases and tests; deployed databases are
    migrated with `python -m paas.db.run_migrations upgrade head`.
    """
    # Import models so every mapped class is registered on Base.metadata.
    from . import models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


# PUBLIC_INTERFACE
async def drop_schema(engine: AsyncEngine) -> None:
    """Drop every mapped table."""
    from . import models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
