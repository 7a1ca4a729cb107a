"""
Work-week calendar primitives.

Weekdays are indexed Sunday=0 … Saturday=6, the convention used by the
persisted availability data. The default work week is Sunday–Thursday with
Friday/Saturday as the weekend.

All functions take plain calendar dates (datetimes are truncated) and are
pure; nothing here reads the wall clock.
"""

from __future__ import annotations

from collections.abc import Iterator
from datetime import date, datetime, timedelta
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from sprintcap.engine.utils import as_date

ALL_WEEKDAYS = frozenset(range(7))
DEFAULT_WORKING_WEEKDAYS = frozenset({0, 1, 2, 3, 4})
DEFAULT_HOURS_PER_WORKING_DAY = 7.0

WEEKDAY_NAMES = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")

ONE_DAY = timedelta(days=1)


class WorkWeekConfig(BaseModel):
    """Which weekdays are worked, and how many hours a working day is worth."""

    model_config = ConfigDict(frozen=True)

    working_weekdays: frozenset[int] = Field(default=DEFAULT_WORKING_WEEKDAYS)
    weekend_weekdays: frozenset[int] = Field(default=frozenset())
    hours_per_working_day: float = Field(default=DEFAULT_HOURS_PER_WORKING_DAY, gt=0)

    @model_validator(mode="before")
    @classmethod
    def fill_weekend(cls, data: Any) -> Any:
        # Weekend defaults to the complement of the working days
        if isinstance(data, dict) and not data.get("weekend_weekdays"):
            working = data.get("working_weekdays", DEFAULT_WORKING_WEEKDAYS)
            data = {**data, "weekend_weekdays": ALL_WEEKDAYS - frozenset(working)}
        return data

    @model_validator(mode="after")
    def check_partition(self) -> WorkWeekConfig:
        if not self.working_weekdays:
            raise ValueError("At least one working weekday is required")
        out_of_range = (self.working_weekdays | self.weekend_weekdays) - ALL_WEEKDAYS
        if out_of_range:
            raise ValueError(f"Weekday indices must be 0-6 (Sunday=0), got {sorted(out_of_range)}")
        if self.working_weekdays & self.weekend_weekdays:
            raise ValueError("Working and weekend weekdays overlap")
        if self.working_weekdays | self.weekend_weekdays != ALL_WEEKDAYS:
            raise ValueError("Working and weekend weekdays must cover the whole week")
        return self

    @property
    def working_days_per_week(self) -> int:
        return len(self.working_weekdays)

    @property
    def hours_per_week(self) -> float:
        return self.working_days_per_week * self.hours_per_working_day


DEFAULT_WORK_WEEK = WorkWeekConfig()


def weekday_index(day: date | datetime) -> int:
    """Sunday-based weekday index (Python's ``weekday()`` is Monday-based)."""
    return (as_date(day).weekday() + 1) % 7


def is_working_day(day: date | datetime | str, work_week: WorkWeekConfig = DEFAULT_WORK_WEEK) -> bool:
    return weekday_index(as_date(day)) in work_week.working_weekdays


def is_weekend(day: date | datetime | str, work_week: WorkWeekConfig = DEFAULT_WORK_WEEK) -> bool:
    return weekday_index(as_date(day)) in work_week.weekend_weekdays


def iter_days(start: date, end: date) -> Iterator[date]:
    """Every calendar day in ``[start, end]`` inclusive."""
    current = start
    while current <= end:
        yield current
        current += ONE_DAY


def count_working_days_between(
    start: date | datetime | str,
    end: date | datetime | str,
    work_week: WorkWeekConfig = DEFAULT_WORK_WEEK,
) -> int:
    """
    Count working days in ``[start, end)``.

    Start is inclusive, end exclusive, which makes the count additive across
    adjacent ranges. Returns 0 when ``end`` is not after ``start``.
    """
    start, end = as_date(start), as_date(end)
    count = 0
    current = start
    while current < end:
        if is_working_day(current, work_week):
            count += 1
        current += ONE_DAY
    return count


def count_working_days_inclusive(
    start: date | datetime | str,
    end: date | datetime | str,
    work_week: WorkWeekConfig = DEFAULT_WORK_WEEK,
) -> int:
    """Count working days in ``[start, end]`` (both endpoints included)."""
    return len(enumerate_working_days(start, end, work_week))


def enumerate_working_days(
    start: date | datetime | str,
    end: date | datetime | str,
    work_week: WorkWeekConfig = DEFAULT_WORK_WEEK,
) -> list[date]:
    """All working days in ``[start, end]``, ascending."""
    return [day for day in iter_days(as_date(start), as_date(end)) if is_working_day(day, work_week)]


def add_working_days(
    start: date | datetime | str,
    count: int,
    work_week: WorkWeekConfig = DEFAULT_WORK_WEEK,
) -> date:
    """
    Return the date reached after counting ``count`` working days from ``start``.

    ``start`` itself is day 1 when it is a working day, so
    ``add_working_days(sunday, 5)`` is the Thursday of the same week.
    ``add_working_days(start, 0)`` returns ``start`` unchanged.
    """
    if count < 0:
        raise ValueError("count must be non-negative")
    result = as_date(start)
    if count == 0:
        return result

    added = 1 if is_working_day(result, work_week) else 0
    while added < count:
        result += ONE_DAY
        if is_working_day(result, work_week):
            added += 1
    return result


def next_working_day_after(
    day: date | datetime | str,
    work_week: WorkWeekConfig = DEFAULT_WORK_WEEK,
) -> date:
    """Smallest working day strictly after ``day``, skipping any weekend run."""
    result = as_date(day) + ONE_DAY
    while not is_working_day(result, work_week):
        result += ONE_DAY
    return result
