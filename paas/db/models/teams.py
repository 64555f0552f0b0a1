from __future__ import annotations

from typing import Any

from sqlalchemy import JSON, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from paas.db.base import Base, UUIDPkMixin, TimestampMixin


class TeamRecord(UUIDPkMixin, TimestampMixin, Base):
    """Stored team document with its users embedded."""
    __tablename__ = "teams"
    __table_args__ = (
        UniqueConstraint("name", name="uq_teams_name"),
    )

    name: Mapped[str] = mapped_column(Text, nullable=False)
    users: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)
