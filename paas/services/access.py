"""
Access control over an application's team list.

Grant and revoke mutate the in-memory Application they are given and never
touch the store; persisting the new team list is the caller's decision
(see AppService.save_access). Every comparison goes by identity key: team
name for teams, email for users.
"""
from __future__ import annotations

from paas.core.errors import AlreadyGrantedError, NotGrantedError
from paas.schemas.apps import Application, Team, User


# PUBLIC_INTERFACE
def has_team(app: Application, team: Team) -> bool:
    """Return True if a team with the same name is attached to the app."""
    return team.name in app.team_names()


# PUBLIC_INTERFACE
def team_has_access(team: Team, app: Application) -> bool:
    """Typed membership check with team-first argument order."""
    return has_team(app, team)


# PUBLIC_INTERFACE
def grant_access(app: Application, team: Team) -> None:
    """
    Attach `team` to the app.

    Raises:
        AlreadyGrantedError: the team is already attached; the app is left unchanged.
    """
    if has_team(app, team):
        raise AlreadyGrantedError()
    app.teams.append(team)


# PUBLIC_INTERFACE
def revoke_access(app: Application, team: Team) -> None:
    """
    Detach `team` from the app.

    Raises:
        NotGrantedError: the team is not attached; the app is left unchanged.
    """
    if not has_team(app, team):
        raise NotGrantedError()
    index = next(i for i, t in enumerate(app.teams) if t.name == team.name)
    del app.teams[index]


# PUBLIC_INTERFACE
def check_user_access(app: Application, user: User) -> bool:
    """Return True if `user` is a member of any team attached to the app."""
    return any(user.email in team.member_emails() for team in app.teams)
