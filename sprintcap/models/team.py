"""
Team and TeamMember ORM models.
"""

from __future__ import annotations

from sqlalchemy import Boolean, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from sprintcap.models.base import Base, SerialIDMixin, TimestampMixin


class Team(Base, SerialIDMixin, TimestampMixin):
    """A team whose members report daily availability."""

    __tablename__ = "teams"

    name: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Relationships
    members: Mapped[list[TeamMember]] = relationship("TeamMember", back_populates="team")

    def __repr__(self) -> str:
        return f"<Team id={self.id} name={self.name!r}>"


class TeamMember(Base, SerialIDMixin, TimestampMixin):
    """An employee. Managers can only plan half days."""

    __tablename__ = "team_members"

    team_id: Mapped[int | None] = mapped_column(
        ForeignKey("teams.id"), nullable=True, index=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    is_manager: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # Relationships
    team: Mapped[Team | None] = relationship("Team", back_populates="members")

    def __repr__(self) -> str:
        return f"<TeamMember id={self.id} name={self.name!r} is_manager={self.is_manager}>"
