from __future__ import annotations

from typing import Sequence


class PlatformError(Exception):
    """Base class for every error raised by the application lifecycle core."""


class InvalidAppError(PlatformError, ValueError):
    """The application failed in-memory validation before reaching the store."""


class DuplicateNameError(PlatformError):
    """A record with the same name already exists in the store."""

    def __init__(self, name: str, kind: str = "app") -> None:
        self.name = name
        self.kind = kind
        super().__init__(f"There is already {'an' if kind == 'app' else 'a'} {kind} named {name!r}")


class NotFoundError(PlatformError):
    """No record matches the requested name."""

    def __init__(self, name: str, kind: str = "app") -> None:
        self.name = name
        self.kind = kind
        super().__init__(f"{kind.capitalize()} {name!r} not found")


class AlreadyGrantedError(PlatformError):
    """Grant on a team that already has access to the app."""

    def __init__(self, message: str = "This team has already access to this app") -> None:
        super().__init__(message)


class NotGrantedError(PlatformError):
    """Revoke on a team that does not have access to the app."""

    def __init__(self, message: str = "This team does not have access to this app") -> None:
        super().__init__(message)


class RepositoryProvisionError(PlatformError):
    """Creating or removing an application's git repository failed."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Repository {path}: {reason}")


class StoreError(PlatformError):
    """The store failed for a reason other than a uniqueness violation."""


class DestroyError(PlatformError):
    """
    Both phases of an application teardown failed.

    `errors` keeps the individual failures in the order they happened
    (repository removal first, record removal second).
    """

    def __init__(self, name: str, errors: Sequence[Exception]) -> None:
        self.name = name
        self.errors = list(errors)
        details = "; ".join(str(e) for e in self.errors)
        super().__init__(f"Failed to destroy app {name!r}: {details}")
