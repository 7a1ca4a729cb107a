"""
Capacity endpoints.

Pure potential/planned/health calculations, plus per-team capacity for the
sprint containing a date.
"""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from sprintcap.core.database import get_db
from sprintcap.core.dependencies import get_sprint_config, get_work_week
from sprintcap.engine.capacity import calculate_actual_planned_hours, calculate_sprint_potential
from sprintcap.engine.detection import SprintDetectionConfig
from sprintcap.engine.health import (
    SprintHealth,
    calculate_completion_percentage,
    get_sprint_health_status,
)
from sprintcap.engine.workweek import WorkWeekConfig, count_working_days_inclusive
from sprintcap.schemas.capacity import (
    HealthRequest,
    PlannedHoursRequest,
    PlannedHoursResponse,
    PotentialRequest,
    PotentialResponse,
    TeamCapacityResponse,
)
from sprintcap.services.capacity_service import CapacityService

router = APIRouter()


def get_capacity_service(
    db: AsyncSession = Depends(get_db),
    config: SprintDetectionConfig = Depends(get_sprint_config),
) -> CapacityService:
    return CapacityService(db=db, config=config)


# ---------------------------------------------------------------------------
# Pure calculations
# ---------------------------------------------------------------------------

@router.post(
    "/capacity/potential",
    response_model=PotentialResponse,
    summary="Potential hours for a team over a date range",
)
async def sprint_potential(
    data: PotentialRequest,
    work_week: WorkWeekConfig = Depends(get_work_week),
) -> PotentialResponse:
    return PotentialResponse(
        potential_hours=calculate_sprint_potential(data.member_count, data.start_date, data.end_date, work_week),
        working_days=count_working_days_inclusive(data.start_date, data.end_date, work_week),
    )


@router.post(
    "/capacity/planned",
    response_model=PlannedHoursResponse,
    summary="Planned hours from raw schedule entries",
)
async def planned_hours(
    data: PlannedHoursRequest,
    work_week: WorkWeekConfig = Depends(get_work_week),
) -> PlannedHoursResponse:
    planned = calculate_actual_planned_hours(data.entries, work_week)
    completion = None
    if data.potential_hours is not None:
        completion = calculate_completion_percentage(planned, data.potential_hours)
    return PlannedHoursResponse(planned_hours=planned, completion_percentage=completion)


@router.post(
    "/capacity/health",
    response_model=SprintHealth,
    summary="Classify sprint health",
)
async def sprint_health(data: HealthRequest) -> SprintHealth:
    return get_sprint_health_status(
        data.completion_percentage,
        data.utilization_percentage,
        data.days_remaining,
    )


# ---------------------------------------------------------------------------
# Team capacity
# ---------------------------------------------------------------------------

@router.get(
    "/teams/{team_id}/capacity",
    response_model=TeamCapacityResponse,
    summary="Team capacity for the sprint containing a date",
)
async def team_capacity(
    team_id: int,
    target_date: date | None = Query(default=None, alias="date"),
    service: CapacityService = Depends(get_capacity_service),
) -> TeamCapacityResponse:
    return await service.team_capacity(team_id, target_date or date.today())
