from __future__ import annotations

from typing import Any, Optional

from sqlalchemy import JSON, Integer, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from paas.db.base import Base, TimestampMixin


class AppRecord(TimestampMixin, Base):
    """
    Stored application document.

    The integer key is assigned on insert and gives the insertion order used
    when listing applications. Teams are embedded as a JSON list of team
    documents, each with its own embedded users.
    """
    __tablename__ = "applications"
    __table_args__ = (
        UniqueConstraint("name", name="uq_applications_name"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    framework: Mapped[str] = mapped_column(Text, nullable=False, default="", server_default="")
    state: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    teams: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)
