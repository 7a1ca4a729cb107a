"""
Capacity schemas.

Request/response models for capacity and health endpoints.
"""

from __future__ import annotations

from datetime import date
from typing import Any

from pydantic import BaseModel, Field, model_validator

from sprintcap.engine.capacity import TeamSprintSummary
from sprintcap.engine.detection import SprintInfo
from sprintcap.engine.health import SprintHealth, SprintMetrics


class PotentialRequest(BaseModel):
    """Request body for POST /capacity/potential."""

    member_count: int = Field(ge=0)
    start_date: date
    end_date: date

    @model_validator(mode="after")
    def check_range(self) -> PotentialRequest:
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class PotentialResponse(BaseModel):
    potential_hours: float
    working_days: int


class PlannedHoursRequest(BaseModel):
    """Request body for POST /capacity/planned. Entries are raw rows."""

    entries: list[dict[str, Any]] = Field(default_factory=list)
    potential_hours: float | None = Field(default=None, ge=0)


class PlannedHoursResponse(BaseModel):
    planned_hours: float
    completion_percentage: int | None = None


class HealthRequest(BaseModel):
    """Request body for POST /capacity/health. Both percentages are required."""

    completion_percentage: float
    utilization_percentage: float
    days_remaining: int


class TeamCapacityResponse(BaseModel):
    """Response for GET /teams/{team_id}/capacity."""

    sprint: SprintInfo
    metrics: SprintMetrics
    summary: TeamSprintSummary
    health: SprintHealth
