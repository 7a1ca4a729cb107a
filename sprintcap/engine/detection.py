"""
Sprint boundary detection.

Sprints are numbered from 1 starting at a fixed anchor date. Each sprint
covers ``sprint_length_weeks × working_days_per_week`` working days counted
from its start (inclusive); the next sprint starts on the first working day
after the previous one ends. Detection walks these boundaries forward from
the anchor until the target date is reached.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Iterator
from datetime import date, datetime
from itertools import islice
from typing import NamedTuple

from pydantic import BaseModel, ConfigDict, Field, model_validator

from sprintcap.engine.exceptions import SprintDetectionOverflow
from sprintcap.engine.utils import as_date, round_half_up
from sprintcap.engine.workweek import (
    DEFAULT_WORK_WEEK,
    WorkWeekConfig,
    add_working_days,
    count_working_days_between,
    enumerate_working_days,
    is_working_day,
    next_working_day_after,
)

logger = logging.getLogger(__name__)

# Upper bound on boundary-walk steps before detection gives up.
MAX_SPRINT_ITERATIONS = 40

DEFAULT_FIRST_SPRINT_START_DATE = date(2025, 7, 27)
DEFAULT_SPRINT_LENGTH_WEEKS = 2


class SprintDetectionConfig(BaseModel):
    """Anchor and cadence of the sprint sequence."""

    model_config = ConfigDict(frozen=True)

    first_sprint_start_date: date = DEFAULT_FIRST_SPRINT_START_DATE
    sprint_length_weeks: int = Field(default=DEFAULT_SPRINT_LENGTH_WEEKS, gt=0)
    working_days_per_week: int = Field(default=5, gt=0)
    work_week: WorkWeekConfig = DEFAULT_WORK_WEEK
    max_iterations: int = Field(default=MAX_SPRINT_ITERATIONS, gt=0)

    @model_validator(mode="after")
    def check_consistency(self) -> SprintDetectionConfig:
        if self.working_days_per_week != self.work_week.working_days_per_week:
            raise ValueError(
                f"working_days_per_week={self.working_days_per_week} does not match "
                f"the {self.work_week.working_days_per_week} working weekdays configured"
            )
        if not is_working_day(self.first_sprint_start_date, self.work_week):
            raise ValueError(
                f"first_sprint_start_date {self.first_sprint_start_date.isoformat()} is not a working day"
            )
        return self

    @classmethod
    def for_work_week(
        cls,
        work_week: WorkWeekConfig,
        first_sprint_start_date: date = DEFAULT_FIRST_SPRINT_START_DATE,
        sprint_length_weeks: int = DEFAULT_SPRINT_LENGTH_WEEKS,
        max_iterations: int = MAX_SPRINT_ITERATIONS,
    ) -> SprintDetectionConfig:
        """Build a config whose working days per week follow ``work_week``."""
        return cls(
            first_sprint_start_date=first_sprint_start_date,
            sprint_length_weeks=sprint_length_weeks,
            working_days_per_week=work_week.working_days_per_week,
            work_week=work_week,
            max_iterations=max_iterations,
        )

    @property
    def working_days_per_sprint(self) -> int:
        return self.sprint_length_weeks * self.working_days_per_week


DEFAULT_SPRINT_CONFIG = SprintDetectionConfig()


class SprintWindow(NamedTuple):
    sprint_number: int
    start_date: date
    end_date: date


class SprintInfo(BaseModel):
    """A detected sprint, evaluated relative to ``target_date``."""

    model_config = ConfigDict(frozen=True)

    sprint_number: int = Field(ge=1)
    sprint_name: str
    start_date: date
    end_date: date
    length_weeks: int
    working_days: tuple[date, ...]
    target_date: date
    is_current_for_date: bool
    days_remaining: int
    working_days_remaining: int
    progress_percentage: int

    @property
    def is_active(self) -> bool:
        return self.is_current_for_date


class SprintPhase(str, enum.Enum):
    completed = "completed"
    current = "current"
    upcoming = "upcoming"


class ScheduledSprint(BaseModel):
    model_config = ConfigDict(frozen=True)

    sprint_number: int
    start_date: date
    end_date: date
    status: SprintPhase


# ---------------------------------------------------------------------------
# Boundary walk
# ---------------------------------------------------------------------------


def sprint_end_from_start(start: date, config: SprintDetectionConfig = DEFAULT_SPRINT_CONFIG) -> date:
    """Last day of a sprint beginning on ``start``."""
    return add_working_days(start, config.working_days_per_sprint, config.work_week)


def iter_sprint_windows(config: SprintDetectionConfig = DEFAULT_SPRINT_CONFIG) -> Iterator[SprintWindow]:
    """Yield sprint 1, 2, 3… forever; each starts the working day after the last ends."""
    number = 1
    start = config.first_sprint_start_date
    while True:
        end = sprint_end_from_start(start, config)
        yield SprintWindow(number, start, end)
        number += 1
        start = next_working_day_after(end, config.work_week)


def get_sprint_window(sprint_number: int, config: SprintDetectionConfig = DEFAULT_SPRINT_CONFIG) -> SprintWindow:
    """Boundaries of a sprint by number."""
    if sprint_number < 1:
        raise ValueError("sprint_number must be >= 1")
    return next(islice(iter_sprint_windows(config), sprint_number - 1, None))


def find_sprint_window(
    target_date: date | datetime | str,
    config: SprintDetectionConfig = DEFAULT_SPRINT_CONFIG,
) -> SprintWindow:
    """
    Walk boundaries from the anchor until a sprint ends on or after ``target_date``.

    Raises SprintDetectionOverflow when more than ``config.max_iterations``
    steps are needed. Dates before the anchor resolve to sprint 1.
    """
    target = as_date(target_date)
    windows = iter_sprint_windows(config)
    window = next(windows)
    iterations = 0
    while target > window.end_date:
        if iterations >= config.max_iterations:
            raise SprintDetectionOverflow(target, iterations, window.end_date)
        window = next(windows)
        iterations += 1
    return window


# ---------------------------------------------------------------------------
# Detection
# ---------------------------------------------------------------------------


def build_sprint_info(
    window: SprintWindow,
    target_date: date | datetime | str,
    config: SprintDetectionConfig = DEFAULT_SPRINT_CONFIG,
) -> SprintInfo:
    """Evaluate a sprint window relative to ``target_date``."""
    target = as_date(target_date)
    work_week = config.work_week
    working_days = enumerate_working_days(window.start_date, window.end_date, work_week)

    elapsed = count_working_days_between(window.start_date, target, work_week)
    progress = min(100, round_half_up(elapsed / config.working_days_per_sprint * 100))

    is_current = window.start_date <= target <= window.end_date
    if not is_current:
        logger.warning(
            "Target date %s is not within detected sprint %d (%s - %s)",
            target.isoformat(),
            window.sprint_number,
            window.start_date.isoformat(),
            window.end_date.isoformat(),
        )

    return SprintInfo(
        sprint_number=window.sprint_number,
        sprint_name=f"Sprint {window.sprint_number}",
        start_date=window.start_date,
        end_date=window.end_date,
        length_weeks=config.sprint_length_weeks,
        working_days=tuple(working_days),
        target_date=target,
        is_current_for_date=is_current,
        days_remaining=max(0, (window.end_date - target).days),
        working_days_remaining=sum(1 for day in working_days if day > target),
        progress_percentage=progress,
    )


def detect_sprint_for_date(
    target_date: date | datetime | str,
    config: SprintDetectionConfig = DEFAULT_SPRINT_CONFIG,
) -> SprintInfo:
    """
    Detect the sprint containing ``target_date``.

    The target date must be supplied by the caller; this never reads the
    clock, so identical inputs always give identical results.
    """
    target = as_date(target_date)
    logger.debug("Detecting sprint for %s", target.isoformat())

    window = find_sprint_window(target, config)
    info = build_sprint_info(window, target, config)

    logger.debug(
        "Detected %s (%s - %s), progress=%d%%, working_days_remaining=%d",
        info.sprint_name,
        info.start_date.isoformat(),
        info.end_date.isoformat(),
        info.progress_percentage,
        info.working_days_remaining,
    )
    return info


# ---------------------------------------------------------------------------
# Schedule and report
# ---------------------------------------------------------------------------


def expected_sprint_schedule(
    reference_date: date | datetime | str,
    config: SprintDetectionConfig = DEFAULT_SPRINT_CONFIG,
    count: int = 5,
) -> list[ScheduledSprint]:
    """First ``count`` sprints, each labelled relative to ``reference_date``."""
    reference = as_date(reference_date)
    schedule = []
    for window in islice(iter_sprint_windows(config), count):
        if window.end_date < reference:
            status = SprintPhase.completed
        elif window.start_date <= reference:
            status = SprintPhase.current
        else:
            status = SprintPhase.upcoming
        schedule.append(
            ScheduledSprint(
                sprint_number=window.sprint_number,
                start_date=window.start_date,
                end_date=window.end_date,
                status=status,
            )
        )
    return schedule


def _display(day: date) -> str:
    return day.strftime("%a %b %d %Y")


def sprint_detection_report(
    target_date: date | datetime | str,
    config: SprintDetectionConfig = DEFAULT_SPRINT_CONFIG,
    schedule_size: int = 5,
) -> str:
    """Plain-text summary of detection for ``target_date`` plus the upcoming schedule."""
    info = detect_sprint_for_date(target_date, config)
    schedule = expected_sprint_schedule(info.target_date, config, count=max(schedule_size, info.sprint_number))

    lines = [
        "=== SPRINT DETECTION REPORT ===",
        f"Target Date: {_display(info.target_date)}",
        f"Detected Sprint: {info.sprint_name}",
        f"Sprint Date Range: {_display(info.start_date)} - {_display(info.end_date)}",
        f"Is Active for Target Date: {info.is_current_for_date}",
        f"Progress: {info.progress_percentage}%",
        f"Working Days Remaining: {info.working_days_remaining}",
        "",
        "Expected Sprint Schedule:",
    ]
    for sprint in schedule:
        marker = " <- CURRENT" if sprint.status is SprintPhase.current else ""
        lines.append(
            f"Sprint {sprint.sprint_number}: {_display(sprint.start_date)} - "
            f"{_display(sprint.end_date)} ({sprint.status.value}){marker}"
        )
    lines.append("=== END REPORT ===")
    return "\n".join(lines)
