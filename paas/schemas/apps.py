from __future__ import annotations

import re
from enum import Enum
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


# One path segment: the name becomes the repository directory <name>.git.
APP_NAME_PATTERN = re.compile(r"[A-Za-z0-9][A-Za-z0-9_.-]*")


# PUBLIC_INTERFACE
def is_valid_app_name(name: str) -> bool:
    """Return True if `name` is a safe single path segment for a repository."""
    return bool(name) and APP_NAME_PATTERN.fullmatch(name) is not None and ".." not in name


class AppState(str, Enum):
    """Application states set by this core. Later states belong to the deploy pipeline."""
    PENDING = "Pending"


class User(BaseModel):
    """Platform user, identified by email."""
    model_config = ConfigDict(from_attributes=True)

    email: EmailStr = Field(..., description="User email (identity key)")
    password: str = Field("", description="Opaque credential, stored as given", repr=False)


class Team(BaseModel):
    """Named group of users sharing access to applications."""
    model_config = ConfigDict(from_attributes=True)

    name: str = Field(..., min_length=1, description="Team name (identity key)")
    users: List[User] = Field(default_factory=list, description="Team members")

    @field_validator("users")
    @classmethod
    def _unique_emails(cls, v: List[User]) -> List[User]:
        seen = set()
        for user in v:
            if user.email in seen:
                raise ValueError(f"User {user.email} is listed twice in the team")
            seen.add(user.email)
        return v

    def member_emails(self) -> frozenset[str]:
        """Emails of every member of the team."""
        return frozenset(u.email for u in self.users)


class Application(BaseModel):
    """
    Deployable unit and its authorization scope.

    `state` is None until the application is created; the store may hand back
    states unknown to this core, which are kept as plain strings.
    """
    model_config = ConfigDict(from_attributes=True, validate_assignment=True)

    name: str = Field(..., frozen=True, description="Unique application name, immutable")
    framework: str = Field("", description="Deployment runtime hint, e.g. django")
    state: Optional[Union[AppState, str]] = Field(None, description="Lifecycle state")
    teams: List[Team] = Field(default_factory=list, description="Teams allowed to access the app")

    @field_validator("name")
    @classmethod
    def _safe_name(cls, v: str) -> str:
        if not is_valid_app_name(v):
            raise ValueError(
                f"Invalid app name {v!r}: use letters, digits, '_', '.' or '-', "
                "starting with a letter or digit"
            )
        return v

    @field_validator("state", mode="before")
    @classmethod
    def _known_state(cls, v):
        if isinstance(v, str) and v in AppState._value2member_map_:
            return AppState(v)
        return v

    @field_validator("teams", mode="before")
    @classmethod
    def _default_teams(cls, v):
        return [] if v is None else v

    @field_validator("teams")
    @classmethod
    def _unique_teams(cls, v: List[Team]) -> List[Team]:
        seen = set()
        for team in v:
            if team.name in seen:
                raise ValueError(f"Team {team.name} is listed twice in the app")
            seen.add(team.name)
        return v

    def team_names(self) -> frozenset[str]:
        """Names of every team with access to the application."""
        return frozenset(t.name for t in self.teams)
