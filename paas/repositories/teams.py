from __future__ import annotations

from typing import List, Optional

from sqlalchemy import func, select

from paas.core.errors import NotFoundError
from paas.db.models.teams import TeamRecord
from paas.schemas.apps import Team
from .base import BaseRepository


class TeamRepository(BaseRepository):
    """Repository for the teams collection."""

    kind = "team"

    async def create(self, team: Team) -> Team:
        record = TeamRecord(
            name=team.name,
            users=[u.model_dump(mode="json") for u in team.users],
        )
        await self.insert_unique(record, team.name)
        return Team.model_validate(record)

    async def find_by_name(self, name: str) -> Optional[Team]:
        stmt = select(TeamRecord).where(TeamRecord.name == name)
        record = await self.scalar_one_or_none(stmt)
        return Team.model_validate(record) if record is not None else None

    async def get(self, name: str) -> Team:
        team = await self.find_by_name(name)
        if team is None:
            raise NotFoundError(name, kind=self.kind)
        return team

    async def all_teams(self) -> List[Team]:
        stmt = select(TeamRecord).order_by(TeamRecord.name)
        res = await self.scalars(stmt)
        return [Team.model_validate(r) for r in res]

    async def count(self) -> int:
        stmt = select(func.count(TeamRecord.id))
        result = await self.execute(stmt)
        return int(result.scalar_one())
