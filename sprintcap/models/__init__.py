"""
SQLAlchemy ORM models.

All models imported here to ensure they are registered with Base.metadata.
The tables themselves are owned by the hosted database.
"""

from sprintcap.models.base import Base, SerialIDMixin, TimestampMixin
from sprintcap.models.schedule_entry import ScheduleEntryRow
from sprintcap.models.sprint_settings import GlobalSprintSettings
from sprintcap.models.team import Team, TeamMember

__all__ = [
    "Base",
    "SerialIDMixin",
    "TimestampMixin",
    "Team",
    "TeamMember",
    "ScheduleEntryRow",
    "GlobalSprintSettings",
]
