from __future__ import annotations

import logging
import os
import shutil
from typing import Optional

from git import GitCommandError, Repo

from paas.core.errors import RepositoryProvisionError
from paas.core.settings import PlatformSettings, get_platform_settings
from paas.schemas.apps import Application

logger = logging.getLogger(__name__)


class RepositoryProvisioner:
    """
    Creates and removes the bare git repository backing each application.

    Names, paths and URLs are derived from the application name alone:
      name: <app>.git
      path: <home>/../git/<app>.git (or <git_root>/<app>.git when configured)
      url:  git@<git_host>:<app>.git
    """

    def __init__(self, home: str, git_host: str, git_root: Optional[str] = None) -> None:
        self.home = home
        self.git_host = git_host
        self.git_root = os.path.normpath(git_root or os.path.join(home, "..", "git"))

    # PUBLIC_INTERFACE
    @classmethod
    def from_settings(cls, settings: Optional[PlatformSettings] = None) -> "RepositoryProvisioner":
        """Build a provisioner from the configured home directory and git host."""
        settings = settings or get_platform_settings()
        return cls(home=settings.HOME, git_host=settings.GIT_HOST, git_root=settings.GIT_ROOT)

    def repository_name(self, app: Application) -> str:
        return f"{app.name}.git"

    def repository_path(self, app: Application) -> str:
        """
        Raises:
            RepositoryProvisionError: the name does not resolve to a direct
            child of the git root.
        """
        path = os.path.normpath(os.path.join(self.git_root, self.repository_name(app)))
        if os.path.dirname(path) != self.git_root:
            raise RepositoryProvisionError(path, f"outside of git root {self.git_root}")
        return path

    def repository_url(self, app: Application) -> str:
        return f"git@{self.git_host}:{self.repository_name(app)}"

    # PUBLIC_INTERFACE
    def new_repository(self, app: Application) -> str:
        """
        Create the bare repository for `app` and return its path.

        Raises:
            RepositoryProvisionError: the directory already exists or could not
            be created, or git failed to initialise it.
        """
        path = self.repository_path(app)
        try:
            os.makedirs(self.git_root, exist_ok=True)
            os.mkdir(path)
        except FileExistsError as exc:
            raise RepositoryProvisionError(path, "already exists") from exc
        except OSError as exc:
            raise RepositoryProvisionError(path, exc.strerror or str(exc)) from exc

        try:
            Repo.init(path, bare=True, mkdir=False)
        except (GitCommandError, OSError) as exc:
            logger.error("git init failed for %s, removing partial repository", path)
            shutil.rmtree(path, ignore_errors=True)
            raise RepositoryProvisionError(path, f"git init failed: {exc}") from exc

        logger.info("Created repository %s", path)
        return path

    # PUBLIC_INTERFACE
    def delete_repository(self, app: Application) -> bool:
        """
        Recursively remove the repository for `app`.

        Returns False when there was nothing to remove.

        Raises:
            RepositoryProvisionError: the directory exists but could not be removed.
        """
        path = self.repository_path(app)
        if not os.path.lexists(path):
            logger.info("Repository %s does not exist, nothing to remove", path)
            return False
        try:
            shutil.rmtree(path)
        except OSError as exc:
            raise RepositoryProvisionError(path, exc.strerror or str(exc)) from exc
        logger.info("Removed repository %s", path)
        return True
