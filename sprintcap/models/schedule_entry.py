"""
ScheduleEntry ORM model.

One row per member per day; ``value`` is '1', '0.5' or 'X'.
"""

from __future__ import annotations

from datetime import date as date_

from sqlalchemy import Date, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from sprintcap.models.base import Base, SerialIDMixin, TimestampMixin


class ScheduleEntryRow(Base, SerialIDMixin, TimestampMixin):
    """A member's availability for a single day."""

    __tablename__ = "schedule_entries"
    __table_args__ = (UniqueConstraint("member_id", "date"),)

    member_id: Mapped[int] = mapped_column(
        ForeignKey("team_members.id", ondelete="CASCADE"), nullable=False, index=True
    )
    entry_date: Mapped[date_] = mapped_column("date", Date, nullable=False, index=True)
    value: Mapped[str] = mapped_column(String(3), nullable=False)
    reason: Mapped[str | None] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<ScheduleEntryRow member_id={self.member_id} date={self.entry_date} value={self.value!r}>"
