from __future__ import annotations

from typing import Any, Optional

from sqlalchemy import Executable
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from paas.core.errors import DuplicateNameError, StoreError


class BaseRepository:
    """
    Base class for repositories providing common helpers.

    Each repository works on the session it is given; the session is
    constructed by the caller (see paas.db.session.session_scope) so no
    process-wide connection state is involved.
    """

    # Label used in error messages ("app", "team").
    kind: str = "record"

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def execute(self, statement: Executable, params: Optional[dict[str, Any]] = None):
        """Execute a SQLAlchemy statement."""
        return await self.session.execute(statement, params or {})

    async def scalars(self, statement: Executable, params: Optional[dict[str, Any]] = None):
        """Execute and return scalars."""
        result = await self.execute(statement, params)
        return result.scalars()

    async def scalar_one_or_none(self, statement: Executable, params: Optional[dict[str, Any]] = None):
        """Execute and return a single scalar or None."""
        result = await self.execute(statement, params)
        return result.scalar_one_or_none()

    async def commit(self) -> None:
        """Commit current transaction."""
        await self.session.commit()

    async def rollback(self) -> None:
        """Roll back current transaction."""
        await self.session.rollback()

    async def add(self, entity: Any) -> None:
        """Add a single entity to session."""
        self.session.add(entity)

    async def insert_unique(self, entity: Any, name: str) -> None:
        """
        Add and commit a new entity whose name is guarded by a unique constraint.

        The store rejects the insert atomically; an IntegrityError is turned
        into DuplicateNameError after rolling the session back.
        """
        await self.add(entity)
        try:
            await self.commit()
        except IntegrityError as exc:
            await self.rollback()
            raise DuplicateNameError(name, kind=self.kind) from exc
        except SQLAlchemyError as exc:
            await self.rollback()
            raise StoreError(f"Failed to insert {self.kind} {name!r}: {exc}") from exc
