"""
Capacity calculations.

Potential hours are what a team could plan (members × working days × hours
per day). Planned hours come from daily availability entries, where '1' is a
full day, '0.5' a half day and 'X' (or nothing) is absent.

Raw rows from the database are normalized into ``ScheduleEntry`` before any
arithmetic runs; unrecognized values count as zero hours and never raise.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Iterable, Mapping
from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from sprintcap.engine.utils import as_date, percentage
from sprintcap.engine.workweek import (
    DEFAULT_WORK_WEEK,
    WorkWeekConfig,
    count_working_days_inclusive,
    is_weekend,
    is_working_day,
    iter_days,
)

logger = logging.getLogger(__name__)

WEEKEND_ENTRY_REASON = "Weekend (auto-generated)"


class AvailabilityValue(str, enum.Enum):
    full = "1"
    half = "0.5"
    absent = "X"
    unknown = "unknown"

    @classmethod
    def parse(cls, raw: Any) -> AvailabilityValue:
        """Map a raw stored value onto a variant; anything unrecognized is ``unknown``."""
        if raw is None:
            return cls.absent
        if isinstance(raw, AvailabilityValue):
            return raw
        text = str(raw).strip()
        if text in ("", "X", "x"):
            return cls.absent
        if text == "1":
            return cls.full
        if text == "0.5":
            return cls.half
        logger.debug("Unrecognized availability value %r, counting as 0 hours", raw)
        return cls.unknown

    def hours(self, hours_per_working_day: float) -> float:
        if self is AvailabilityValue.full:
            return hours_per_working_day
        if self is AvailabilityValue.half:
            return hours_per_working_day / 2
        return 0.0

    @property
    def is_recognized(self) -> bool:
        return self is not AvailabilityValue.unknown


class ScheduleEntry(BaseModel):
    """One member's availability for one day."""

    model_config = ConfigDict(frozen=True)

    member_id: int | None = None
    entry_date: date | None = None
    value: AvailabilityValue = AvailabilityValue.absent
    reason: str | None = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any] | Any) -> ScheduleEntry:
        """
        Normalize a loosely typed row (dict or ORM object) into an entry.

        Reads ``member_id``, ``date`` (or ``entry_date``), ``value`` and
        ``reason``. An unparseable date is dropped rather than raised.
        """
        if isinstance(row, Mapping):
            get = row.get
        else:
            def get(name: str) -> Any:
                return getattr(row, name, None)

        raw_date = get("entry_date")
        if raw_date is None:
            raw_date = get("date")
        entry_date = None
        if raw_date is not None:
            try:
                entry_date = as_date(raw_date)
            except (TypeError, ValueError):
                logger.debug("Ignoring unparseable entry date %r", raw_date)

        return cls(
            member_id=get("member_id"),
            entry_date=entry_date,
            value=AvailabilityValue.parse(get("value")),
            reason=get("reason"),
        )

    def hours(self, work_week: WorkWeekConfig = DEFAULT_WORK_WEEK) -> float:
        return self.value.hours(work_week.hours_per_working_day)


def normalize_entries(entries: Iterable[ScheduleEntry | Mapping[str, Any] | Any]) -> list[ScheduleEntry]:
    return [entry if isinstance(entry, ScheduleEntry) else ScheduleEntry.from_row(entry) for entry in entries]


# ---------------------------------------------------------------------------
# Potential / planned hours
# ---------------------------------------------------------------------------


def calculate_sprint_potential(
    member_count: int,
    start_date: date | datetime | str,
    end_date: date | datetime | str,
    work_week: WorkWeekConfig = DEFAULT_WORK_WEEK,
) -> float:
    """members × working days in ``[start_date, end_date]`` × hours per day."""
    working_days = count_working_days_inclusive(start_date, end_date, work_week)
    return member_count * working_days * work_week.hours_per_working_day


def calculate_actual_planned_hours(
    entries: Iterable[ScheduleEntry | Mapping[str, Any] | Any],
    work_week: WorkWeekConfig = DEFAULT_WORK_WEEK,
) -> float:
    """Sum of hours implied by each entry's availability value."""
    return sum((entry.hours(work_week) for entry in normalize_entries(entries)), 0.0)


def generate_weekend_entries(
    member_id: int,
    start_date: date | datetime | str,
    end_date: date | datetime | str,
    work_week: WorkWeekConfig = DEFAULT_WORK_WEEK,
) -> list[ScheduleEntry]:
    """An absent entry for every weekend day in the range."""
    return [
        ScheduleEntry(
            member_id=member_id,
            entry_date=day,
            value=AvailabilityValue.absent,
            reason=WEEKEND_ENTRY_REASON,
        )
        for day in iter_days(as_date(start_date), as_date(end_date))
        if is_weekend(day, work_week)
    ]


# ---------------------------------------------------------------------------
# Member / team summaries
# ---------------------------------------------------------------------------


class TeamMemberSchedule(BaseModel):
    """A member together with their raw entries for a sprint window."""

    member_id: int
    name: str
    is_manager: bool = False
    entries: list[ScheduleEntry] = Field(default_factory=list)

    @field_validator("entries", mode="before")
    @classmethod
    def normalize_rows(cls, value: Any) -> Any:
        if value is None:
            return []
        return normalize_entries(value)


class MemberSprintSummary(BaseModel):
    member_id: int
    member_name: str
    is_manager: bool
    max_possible_hours: float
    actual_hours: float
    utilization_percentage: int
    working_days_filled: int
    total_working_days: int
    missing_days: int
    weekend_days_auto_filled: int


class TeamSprintSummary(BaseModel):
    team_id: int | None = None
    team_name: str | None = None
    sprint_number: int | None = None
    start_date: date
    end_date: date
    total_members: int
    manager_count: int
    max_capacity_hours: float
    actual_hours: float
    utilization_percentage: int
    completion_percentage: int
    member_summaries: list[MemberSprintSummary]


def calculate_member_summary(
    member: TeamMemberSchedule,
    start_date: date | datetime | str,
    end_date: date | datetime | str,
    work_week: WorkWeekConfig = DEFAULT_WORK_WEEK,
) -> MemberSprintSummary:
    """
    Summarize one member's availability over ``[start_date, end_date]``.

    Managers are capped at half a day per working day. Only working-day
    entries add hours; an 'X' on a weekend is counted as auto-filled. Entries
    outside the window or with an unrecognized value are ignored.
    """
    start, end = as_date(start_date), as_date(end_date)
    by_date = {entry.entry_date: entry for entry in member.entries if entry.entry_date is not None}

    hours_per_day = work_week.hours_per_working_day
    max_hours_per_day = hours_per_day / 2 if member.is_manager else hours_per_day

    total_working_days = 0
    filled = 0
    weekend_filled = 0
    actual_hours = 0.0

    for day in iter_days(start, end):
        working = is_working_day(day, work_week)
        if working:
            total_working_days += 1
        entry = by_date.get(day)
        if entry is None or not entry.value.is_recognized:
            continue
        if working:
            filled += 1
            actual_hours += entry.value.hours(hours_per_day)
        elif entry.value is AvailabilityValue.absent:
            weekend_filled += 1

    max_possible = total_working_days * max_hours_per_day
    return MemberSprintSummary(
        member_id=member.member_id,
        member_name=member.name,
        is_manager=member.is_manager,
        max_possible_hours=max_possible,
        actual_hours=actual_hours,
        utilization_percentage=percentage(actual_hours, max_possible),
        working_days_filled=filled,
        total_working_days=total_working_days,
        missing_days=total_working_days - filled,
        weekend_days_auto_filled=weekend_filled,
    )


def calculate_team_summary(
    members: Iterable[TeamMemberSchedule],
    start_date: date | datetime | str,
    end_date: date | datetime | str,
    work_week: WorkWeekConfig = DEFAULT_WORK_WEEK,
    sprint_number: int | None = None,
    team_id: int | None = None,
    team_name: str | None = None,
) -> TeamSprintSummary:
    """Aggregate member summaries; every member's entries are counted independently."""
    start, end = as_date(start_date), as_date(end_date)
    members = list(members)
    summaries = [calculate_member_summary(member, start, end, work_week) for member in members]

    max_capacity = sum((s.max_possible_hours for s in summaries), 0.0)
    actual = sum((s.actual_hours for s in summaries), 0.0)
    working_days = count_working_days_inclusive(start, end, work_week)
    filled = sum(s.working_days_filled for s in summaries)

    return TeamSprintSummary(
        team_id=team_id,
        team_name=team_name,
        sprint_number=sprint_number,
        start_date=start,
        end_date=end,
        total_members=len(members),
        manager_count=sum(1 for m in members if m.is_manager),
        max_capacity_hours=max_capacity,
        actual_hours=actual,
        utilization_percentage=percentage(actual, max_capacity),
        completion_percentage=percentage(filled, len(members) * working_days),
        member_summaries=summaries,
    )
