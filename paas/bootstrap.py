"""
Process-level wiring for library callers (front-ends, workers, scripts).

A Platform owns the explicitly constructed store handle (engine and session
factory) and the repository provisioner, and hands out one AppService per
unit of work:

    platform = Platform.from_settings()
    async with platform.service() as apps:
        await apps.create(Application(name="myapp", framework="django"))
    await platform.close()
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional
from uuid import uuid4

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from paas.core.logging import configure_logging, correlation_id_var
from paas.core.settings import PlatformSettings, get_platform_settings
from paas.db.config import Settings, get_settings
from paas.db.run_migrations import main as run_alembic
from paas.db.session import create_engine, create_session_factory, session_scope
from paas.services.apps import AppService
from paas.services.provisioning import RepositoryProvisioner

logger = logging.getLogger(__name__)


class Platform:
    """Store handle plus provisioner shared by every AppService of a process."""

    def __init__(self, engine: AsyncEngine, provisioner: RepositoryProvisioner) -> None:
        self.engine = engine
        self.provisioner = provisioner
        self.session_factory: async_sessionmaker[AsyncSession] = create_session_factory(engine)

    # PUBLIC_INTERFACE
    @classmethod
    def from_settings(
        cls,
        platform_settings: Optional[PlatformSettings] = None,
        db_settings: Optional[Settings] = None,
        run_migrations: bool = False,
        setup_logging: bool = True,
    ) -> "Platform":
        """
        Configure logging, optionally migrate the database and build the platform.

        Migrations run synchronously through Alembic, so call this before an
        event loop is running when run_migrations is True.
        """
        platform_settings = platform_settings or get_platform_settings()
        db_settings = db_settings or get_settings()
        if setup_logging:
            configure_logging(platform_settings.LOG_LEVEL)

        if run_migrations:
            logger.info("Running Alembic migrations: upgrade head")
            run_alembic(["upgrade", "head"])
            logger.info("Migrations completed.")

        provisioner = RepositoryProvisioner.from_settings(platform_settings)
        logger.info("Repositories live in %s (host %s)", provisioner.git_root, provisioner.git_host)
        return cls(create_engine(db_settings), provisioner)

    # PUBLIC_INTERFACE
    @asynccontextmanager
    async def service(self, correlation_id: Optional[str] = None) -> AsyncGenerator[AppService, None]:
        """Yield an AppService bound to a fresh session, tagging logs with a correlation id."""
        token = correlation_id_var.set(correlation_id or uuid4().hex)
        try:
            async with session_scope(self.session_factory) as session:
                yield AppService(session, self.provisioner)
        finally:
            correlation_id_var.reset(token)

    async def close(self) -> None:
        await self.engine.dispose()
