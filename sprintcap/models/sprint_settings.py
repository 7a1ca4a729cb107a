"""
GlobalSprintSettings ORM model.

Mirror of the latest detected sprint. Dashboards read it directly, so it is
refreshed whenever detection finds it stale.
"""

from __future__ import annotations

from datetime import date

from sqlalchemy import CheckConstraint, Date, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from sprintcap.models.base import Base, SerialIDMixin, TimestampMixin


class GlobalSprintSettings(Base, SerialIDMixin, TimestampMixin):
    """Company-wide current sprint snapshot."""

    __tablename__ = "global_sprint_settings"
    __table_args__ = (
        CheckConstraint("sprint_length_weeks BETWEEN 1 AND 4", name="sprint_length_weeks_range"),
    )

    sprint_length_weeks: Mapped[int] = mapped_column(Integer, nullable=False, default=2)
    current_sprint_number: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    sprint_start_date: Mapped[date] = mapped_column(Date, nullable=False)
    sprint_end_date: Mapped[date] = mapped_column(Date, nullable=False)
    progress_percentage: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    days_remaining: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    working_days_remaining: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    updated_by: Mapped[str] = mapped_column(String(255), nullable=False, default="system")

    def __repr__(self) -> str:
        return (
            f"<GlobalSprintSettings sprint={self.current_sprint_number} "
            f"{self.sprint_start_date} - {self.sprint_end_date}>"
        )
