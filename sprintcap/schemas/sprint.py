"""
Sprint schemas.

Response models for sprint detection endpoints.
"""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel

from sprintcap.engine.detection import ScheduledSprint, SprintInfo
from sprintcap.engine.legacy import LegacySprintRecord, SprintValidation


class SprintInfoResponse(BaseModel):
    """Response for GET /sprints/detect."""

    sprint: SprintInfo
    cached: bool = False


class CurrentSprintResponse(BaseModel):
    """Response for GET /sprints/current."""

    record: LegacySprintRecord
    validation: SprintValidation
    refreshed: bool


class SprintScheduleResponse(BaseModel):
    """Response for GET /sprints/schedule."""

    reference_date: date
    sprints: list[ScheduledSprint]
