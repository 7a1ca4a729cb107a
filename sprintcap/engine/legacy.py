"""
Adapter between detected sprints and the persisted global sprint settings row.

The persisted row is a mirror of a detection snapshot and goes stale once
the current date moves past its end date. This module only converts and
classifies; writing the refreshed row back is the caller's job.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import date, datetime
from typing import Any

from pydantic import BaseModel

from sprintcap.engine.detection import SprintInfo
from sprintcap.engine.utils import as_date

logger = logging.getLogger(__name__)


class LegacySprintRecord(BaseModel):
    """Shape of a ``global_sprint_settings`` row as dashboards read it."""

    id: str
    current_sprint_number: int
    sprint_length_weeks: int
    sprint_start_date: str
    sprint_end_date: str
    progress_percentage: int
    days_remaining: int
    working_days_remaining: int
    is_active: bool
    notes: str


class SprintValidation(BaseModel):
    is_valid: bool
    reason: str | None = None
    needs_update: bool = False


def to_legacy_record(sprint_info: SprintInfo) -> LegacySprintRecord:
    """Map a detected sprint onto the persisted record (audit fields excluded)."""
    return LegacySprintRecord(
        id=str(sprint_info.sprint_number),
        current_sprint_number=sprint_info.sprint_number,
        sprint_length_weeks=sprint_info.length_weeks,
        sprint_start_date=sprint_info.start_date.isoformat(),
        sprint_end_date=sprint_info.end_date.isoformat(),
        progress_percentage=sprint_info.progress_percentage,
        days_remaining=sprint_info.days_remaining,
        working_days_remaining=sprint_info.working_days_remaining,
        is_active=sprint_info.is_current_for_date,
        notes=f"Auto-calculated Sprint {sprint_info.sprint_number}",
    )


def _sprint_bounds(sprint: SprintInfo | LegacySprintRecord | Mapping[str, Any] | Any) -> tuple[date, date]:
    if isinstance(sprint, SprintInfo):
        return sprint.start_date, sprint.end_date
    if isinstance(sprint, Mapping):
        return as_date(sprint["sprint_start_date"]), as_date(sprint["sprint_end_date"])
    return as_date(sprint.sprint_start_date), as_date(sprint.sprint_end_date)


def validate_sprint_contains_date(
    sprint: SprintInfo | LegacySprintRecord | Mapping[str, Any] | Any,
    target_date: date | datetime | str,
) -> SprintValidation:
    """
    Check whether a persisted (or detected) sprint still covers ``target_date``.

    - target before the start: invalid, no update signal (the stored sprint is
      anchored in the future, which points at a configuration problem)
    - target after the end: invalid with ``needs_update`` set, meaning the
      stored row is stale and should be refreshed from detection
    """
    target = as_date(target_date)
    start, end = _sprint_bounds(sprint)

    if target < start:
        return SprintValidation(
            is_valid=False,
            reason=f"Target date {target.isoformat()} is before sprint start {start.isoformat()}",
        )

    if target > end:
        logger.info(
            "Stored sprint ended %s, target date %s is past it; sprint needs refresh",
            end.isoformat(),
            target.isoformat(),
        )
        return SprintValidation(
            is_valid=False,
            reason=f"Sprint outdated: target date {target.isoformat()} is after sprint end {end.isoformat()}",
            needs_update=True,
        )

    return SprintValidation(is_valid=True)
