from __future__ import annotations

import asyncio
import logging
from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from paas.core.errors import (
    DestroyError,
    InvalidAppError,
    PlatformError,
    RepositoryProvisionError,
)
from paas.core.logging import app_context
from paas.repositories.apps import AppRepository
from paas.repositories.teams import TeamRepository
from paas.schemas.apps import Application, AppState, Team, User, is_valid_app_name
from paas.services import access
from paas.services.provisioning import RepositoryProvisioner

logger = logging.getLogger(__name__)


class AppService:
    """
    Domain service for the application lifecycle.

    Composes the application store and the repository provisioner. Creation
    and destruction are two-phase and not atomic: between the store write and
    the filesystem step a reader can see a record without a repository.
    Access-control changes are applied to the Application passed in and are
    only persisted through save_access (or the *_team_access helpers).
    """

    def __init__(self, session: AsyncSession, provisioner: RepositoryProvisioner) -> None:
        self.session = session
        self.provisioner = provisioner
        self.app_repo = AppRepository(session)
        self.team_repo = TeamRepository(session)

    # PUBLIC_INTERFACE
    async def create(self, app: Application) -> Application:
        """
        Validate, persist and provision a new application.

        The record is stored with state Pending; the caller's app only takes
        that state once the insert succeeded. When provisioning fails the
        record stays in the store without a repository. The git work runs in
        a worker thread.

        Raises:
            InvalidAppError: the name is not a single safe path segment.
            DuplicateNameError: an application with the same name exists; no
                repository is created.
            RepositoryProvisionError: the record was stored but the repository
                could not be created.
        """
        if not is_valid_app_name(app.name):
            raise InvalidAppError(f"Invalid app name {app.name!r}")

        with app_context(app.name):
            await self.app_repo.create(app.model_copy(update={"state": AppState.PENDING}))
            app.state = AppState.PENDING
            logger.info("Stored app %s (framework=%s)", app.name, app.framework or "-")

            try:
                await asyncio.to_thread(self.provisioner.new_repository, app)
            except RepositoryProvisionError:
                logger.warning("App %s is stored without a repository", app.name)
                raise
            return app

    # PUBLIC_INTERFACE
    async def destroy(self, app: Application) -> None:
        """
        Remove the application's repository, then its record.

        Both steps are always attempted; the repository removal runs in a
        worker thread. A single failure is re-raised as is;
        when both fail a DestroyError carrying both errors is raised.
        """
        errors: List[Exception] = []
        with app_context(app.name):
            try:
                await asyncio.to_thread(self.provisioner.delete_repository, app)
            except RepositoryProvisionError as exc:
                logger.error("Failed to remove repository of app %s: %s", app.name, exc)
                errors.append(exc)

            try:
                await self.app_repo.delete(app)
            except PlatformError as exc:
                logger.error("Failed to remove record of app %s: %s", app.name, exc)
                errors.append(exc)

            if len(errors) == 1:
                raise errors[0]
            if errors:
                raise DestroyError(app.name, errors)
            logger.info("Destroyed app %s", app.name)

    # PUBLIC_INTERFACE
    async def get(self, name: str) -> Application:
        """Return the stored application or raise NotFoundError."""
        return await self.app_repo.get(name)

    # PUBLIC_INTERFACE
    async def all_apps(self) -> List[Application]:
        """Every stored application, in insertion order."""
        return await self.app_repo.all_apps()

    # PUBLIC_INTERFACE
    async def apps_for_user(self, user: User) -> List[Application]:
        """Stored applications the user can access through any of their teams."""
        return [a for a in await self.app_repo.all_apps() if access.check_user_access(a, user)]

    def grant_access(self, app: Application, team: Team) -> None:
        access.grant_access(app, team)

    def revoke_access(self, app: Application, team: Team) -> None:
        access.revoke_access(app, team)

    def has_team(self, app: Application, team: Team) -> bool:
        return access.has_team(app, team)

    def check_user_access(self, app: Application, user: User) -> bool:
        return access.check_user_access(app, user)

    # PUBLIC_INTERFACE
    async def save_access(self, app: Application) -> None:
        """Persist the app's current team list; concurrent writers race, last one wins."""
        await self.app_repo.update_teams(app)
        logger.info("Saved teams of app %s: %s", app.name, ", ".join(t.name for t in app.teams) or "-")

    # PUBLIC_INTERFACE
    async def grant_team_access(self, app_name: str, team_name: str) -> Application:
        """Load app and team from the store, grant access and persist the result."""
        app = await self.app_repo.get(app_name)
        team = await self.team_repo.get(team_name)
        with app_context(app.name):
            access.grant_access(app, team)
            await self.save_access(app)
        return app

    # PUBLIC_INTERFACE
    async def revoke_team_access(self, app_name: str, team_name: str) -> Application:
        """Load app and team from the store, revoke access and persist the result."""
        app = await self.app_repo.get(app_name)
        team = await self.team_repo.get(team_name)
        with app_context(app.name):
            access.revoke_access(app, team)
            await self.save_access(app)
        return app
