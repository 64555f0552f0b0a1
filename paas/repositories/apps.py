from __future__ import annotations

from typing import List, Optional

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import SQLAlchemyError

from paas.core.errors import NotFoundError, StoreError
from paas.db.models.apps import AppRecord
from paas.schemas.apps import Application
from .base import BaseRepository


def _to_app(record: AppRecord) -> Application:
    return Application.model_validate(record)


def _state_value(app: Application) -> Optional[str]:
    if app.state is None:
        return None
    return getattr(app.state, "value", app.state)


class AppRepository(BaseRepository):
    """Repository for the applications collection."""

    kind = "app"

    async def create(self, app: Application) -> Application:
        """
        Insert a new application record.

        Raises:
            DuplicateNameError: an application with the same name exists.
        """
        record = AppRecord(
            name=app.name,
            framework=app.framework,
            state=_state_value(app),
            teams=[t.model_dump(mode="json") for t in app.teams],
        )
        await self.insert_unique(record, app.name)
        return _to_app(record)

    async def find_by_name(self, name: str) -> Optional[Application]:
        stmt = select(AppRecord).where(AppRecord.name == name)
        record = await self.scalar_one_or_none(stmt)
        return _to_app(record) if record is not None else None

    async def get(self, name: str) -> Application:
        """Return the application named `name` or raise NotFoundError."""
        app = await self.find_by_name(name)
        if app is None:
            raise NotFoundError(name, kind=self.kind)
        return app

    async def all_apps(self) -> List[Application]:
        """Every stored application, in insertion order."""
        stmt = select(AppRecord).order_by(AppRecord.id.asc())
        res = await self.scalars(stmt)
        return [_to_app(r) for r in res]

    async def count(self) -> int:
        stmt = select(func.count(AppRecord.id))
        result = await self.execute(stmt)
        return int(result.scalar_one())

    async def update_teams(self, app: Application) -> None:
        """
        Persist the team list of an existing application (last write wins).

        Raises:
            NotFoundError: no record is stored under app.name.
        """
        stmt = (
            update(AppRecord)
            .where(AppRecord.name == app.name)
            .values(teams=[t.model_dump(mode="json") for t in app.teams])
        )
        try:
            result = await self.execute(stmt)
            await self.commit()
        except SQLAlchemyError as exc:
            await self.rollback()
            raise StoreError(f"Failed to update teams of app {app.name!r}: {exc}") from exc
        if result.rowcount == 0:
            raise NotFoundError(app.name, kind=self.kind)

    async def delete(self, app: Application, must_exist: bool = False) -> None:
        """
        Remove the record stored under app.name.

        Deleting an absent record is a no-op unless must_exist is set, in
        which case NotFoundError is raised.
        """
        stmt = delete(AppRecord).where(AppRecord.name == app.name)
        try:
            result = await self.execute(stmt)
            await self.commit()
        except SQLAlchemyError as exc:
            await self.rollback()
            raise StoreError(f"Failed to delete app {app.name!r}: {exc}") from exc
        if must_exist and result.rowcount == 0:
            raise NotFoundError(app.name, kind=self.kind)
