"""
Completion, progress and health evaluation.

Completion is planned hours over potential hours. Health is an ordered rule
chain over completion, utilization and days remaining: the first matching
rule wins.
"""

from __future__ import annotations

import enum
import math
from collections.abc import Iterable, Mapping
from datetime import date, datetime
from typing import Any

from pydantic import BaseModel

from sprintcap.engine.capacity import (
    ScheduleEntry,
    calculate_actual_planned_hours,
    calculate_sprint_potential,
)
from sprintcap.engine.utils import as_date, percentage, round_half_up
from sprintcap.engine.workweek import (
    DEFAULT_WORK_WEEK,
    WorkWeekConfig,
    count_working_days_inclusive,
    is_working_day,
    iter_days,
)

MAX_RECOMMENDED_TEAM_SIZE = 12
MAX_RECOMMENDED_SPRINT_WORKING_DAYS = 60
MIN_SPRINT_LENGTH_WEEKS = 1
MAX_SPRINT_LENGTH_WEEKS = 4


class HealthStatus(str, enum.Enum):
    excellent = "excellent"
    good = "good"
    warning = "warning"
    critical = "critical"

    @property
    def color(self) -> str:
        return HEALTH_COLORS[self]


HEALTH_COLORS = {
    HealthStatus.excellent: "#10B981",
    HealthStatus.good: "#059669",
    HealthStatus.warning: "#F59E0B",
    HealthStatus.critical: "#EF4444",
}


class SprintHealth(BaseModel):
    status: HealthStatus
    color: str


class SprintMetrics(BaseModel):
    potential_hours: float
    planned_hours: float
    completion_percentage: int
    working_days: int
    team_size: int


class SprintProgress(BaseModel):
    sprint_progress_percentage: int
    days_remaining: int
    is_on_track: bool


class CalculationValidation(BaseModel):
    is_valid: bool
    errors: list[str]
    warnings: list[str]
    details: dict[str, Any] = {}


def calculate_completion_percentage(actual_hours: float, potential_hours: float) -> int:
    """
    ``round(actual / potential × 100)``; 0 when potential is 0.

    Values above 100 mean the team is over-planned and are returned as is.
    """
    return percentage(actual_hours, potential_hours)


def get_sprint_health_status(completion: float, utilization: float, days_remaining: int) -> SprintHealth:
    """
    Classify sprint health.

    ``utilization`` is hours planned against hours available (or sprint
    progress, where the caller tracks that instead); callers pass it
    explicitly alongside ``completion``.
    """
    if completion >= 90 and utilization >= 80 and days_remaining > 2:
        status = HealthStatus.excellent
    elif completion >= 75 and utilization >= 70:
        status = HealthStatus.good
    elif completion >= 50 and utilization >= 50:
        status = HealthStatus.warning
    else:
        status = HealthStatus.critical
    return SprintHealth(status=status, color=status.color)


def calculate_sprint_metrics(
    member_count: int,
    start_date: date | datetime | str,
    end_date: date | datetime | str,
    entries: Iterable[ScheduleEntry | Mapping[str, Any] | Any],
    work_week: WorkWeekConfig = DEFAULT_WORK_WEEK,
) -> SprintMetrics:
    potential = calculate_sprint_potential(member_count, start_date, end_date, work_week)
    planned = calculate_actual_planned_hours(entries, work_week)
    return SprintMetrics(
        potential_hours=potential,
        planned_hours=planned,
        completion_percentage=calculate_completion_percentage(planned, potential),
        working_days=count_working_days_inclusive(start_date, end_date, work_week),
        team_size=member_count,
    )


# ---------------------------------------------------------------------------
# Time progress
# ---------------------------------------------------------------------------


def calculate_sprint_progress(
    start_date: date | datetime | str,
    end_date: date | datetime | str,
    today: date | datetime | str,
) -> int:
    """Share of calendar time elapsed, 0 before the sprint and 100 after it."""
    start, end, today = as_date(start_date), as_date(end_date), as_date(today)
    if today < start:
        return 0
    if today > end:
        return 100
    total = (end - start).days
    if total == 0:
        return 100
    return round_half_up((today - start).days / total * 100)


def calculate_working_days_remaining(
    end_date: date | datetime | str,
    today: date | datetime | str,
    work_week: WorkWeekConfig = DEFAULT_WORK_WEEK,
) -> int:
    """Working days strictly after ``today`` up to and including ``end_date``."""
    end, today = as_date(end_date), as_date(today)
    if today >= end:
        return 0
    return sum(
        1 for day in iter_days(today, end) if day > today and is_working_day(day, work_week)
    )


def calculate_sprint_progress_info(
    start_date: date | datetime | str,
    end_date: date | datetime | str,
    completion_percentage: float,
    today: date | datetime | str,
    work_week: WorkWeekConfig = DEFAULT_WORK_WEEK,
) -> SprintProgress:
    """A sprint is on track when completion keeps up with 80% of elapsed time (floor 20%)."""
    progress = calculate_sprint_progress(start_date, end_date, today)
    expected = max(20, progress * 0.8)
    return SprintProgress(
        sprint_progress_percentage=progress,
        days_remaining=calculate_working_days_remaining(end_date, today, work_week),
        is_on_track=completion_percentage >= expected,
    )


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


def validate_sprint_calculation(
    team_size: int,
    start_date: date | datetime | str,
    end_date: date | datetime | str,
    calculated_potential: float,
    work_week: WorkWeekConfig = DEFAULT_WORK_WEEK,
) -> CalculationValidation:
    """Cross-check a potential-hours figure produced elsewhere (exports, SQL functions)."""
    errors: list[str] = []
    warnings: list[str] = []

    hours_per_day = work_week.hours_per_working_day
    working_days = count_working_days_inclusive(start_date, end_date, work_week)
    expected = team_size * working_days * hours_per_day
    sprint_weeks = math.ceil(working_days / work_week.working_days_per_week)

    if calculated_potential != expected:
        errors.append(f"Sprint potential mismatch: expected {expected:g}h, got {calculated_potential:g}h")

    if team_size <= 0:
        errors.append("Team size must be positive")
    elif sprint_weeks > 0:
        hours_per_week = calculated_potential / team_size / sprint_weeks
        if abs(hours_per_week - work_week.hours_per_week) > 0.1:
            errors.append(
                f"Hours per week inconsistent: expected {work_week.hours_per_week:g}h/person/week, "
                f"calculated {hours_per_week:.1f}h"
            )

    if working_days < work_week.working_days_per_week:
        warnings.append("Sprint duration less than 1 week may lead to inaccurate capacity planning")
    if team_size > MAX_RECOMMENDED_TEAM_SIZE:
        warnings.append(
            f"Large team size (>{MAX_RECOMMENDED_TEAM_SIZE}) may have coordination overhead affecting actual capacity"
        )
    if working_days > MAX_RECOMMENDED_SPRINT_WORKING_DAYS:
        warnings.append("Long sprint duration increases uncertainty in capacity planning")

    return CalculationValidation(
        is_valid=not errors,
        errors=errors,
        warnings=warnings,
        details={
            "team_size": team_size,
            "working_days": working_days,
            "sprint_weeks": sprint_weeks,
            "expected_potential": expected,
            "calculated_potential": calculated_potential,
            "hours_per_day": hours_per_day,
            "breakdown": f"{team_size} people × {working_days} working days × {hours_per_day:g}h/day = {expected:g}h",
        },
    )


def validate_sprint_config(
    start_date: date | datetime | str,
    end_date: date | datetime | str,
    length_weeks: int,
    work_week: WorkWeekConfig = DEFAULT_WORK_WEEK,
) -> CalculationValidation:
    """Sanity-check manually entered sprint dates against the configured length."""
    start, end = as_date(start_date), as_date(end_date)
    errors: list[str] = []
    warnings: list[str] = []

    if start > end:
        errors.append("Start date must be before end date")
    if not MIN_SPRINT_LENGTH_WEEKS <= length_weeks <= MAX_SPRINT_LENGTH_WEEKS:
        errors.append(
            f"Sprint length must be between {MIN_SPRINT_LENGTH_WEEKS} and {MAX_SPRINT_LENGTH_WEEKS} weeks"
        )

    actual = count_working_days_inclusive(start, end, work_week)
    expected = length_weeks * work_week.working_days_per_week
    if actual != expected:
        warnings.append(f"Expected {expected} working days for {length_weeks} weeks, but found {actual}")

    return CalculationValidation(
        is_valid=not errors,
        errors=errors,
        warnings=warnings,
        details={"working_days": actual, "expected_working_days": expected},
    )
