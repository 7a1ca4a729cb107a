"""
Sprint detection endpoints.

Detect the sprint for a date, read the persisted current sprint and list
the sprint schedule.
"""

from __future__ import annotations

from datetime import date

import redis.asyncio as aioredis
from fastapi import APIRouter, Depends, Query
from fastapi.responses import PlainTextResponse
from sqlalchemy.ext.asyncio import AsyncSession

from sprintcap.core.config import settings
from sprintcap.core.database import get_db
from sprintcap.core.dependencies import get_redis, get_sprint_config
from sprintcap.engine.detection import (
    SprintDetectionConfig,
    detect_sprint_for_date,
    expected_sprint_schedule,
    sprint_detection_report,
)
from sprintcap.schemas.sprint import CurrentSprintResponse, SprintInfoResponse, SprintScheduleResponse
from sprintcap.services.sprint_cache import SprintCache
from sprintcap.services.sprint_settings_service import SprintSettingsService

router = APIRouter()


def get_sprint_settings_service(
    db: AsyncSession = Depends(get_db),
    config: SprintDetectionConfig = Depends(get_sprint_config),
) -> SprintSettingsService:
    return SprintSettingsService(db=db, config=config)


def get_sprint_cache(
    redis: aioredis.Redis = Depends(get_redis),
    config: SprintDetectionConfig = Depends(get_sprint_config),
) -> SprintCache:
    return SprintCache(redis=redis, config=config, ttl_seconds=settings.SPRINT_CACHE_TTL_SECONDS)


# ---------------------------------------------------------------------------
# Detect Sprint
# ---------------------------------------------------------------------------

@router.get(
    "/sprints/detect",
    response_model=SprintInfoResponse,
    summary="Detect the sprint containing a date",
)
async def detect_sprint(
    target_date: date | None = Query(default=None, alias="date"),
    config: SprintDetectionConfig = Depends(get_sprint_config),
    cache: SprintCache = Depends(get_sprint_cache),
) -> SprintInfoResponse:
    target = target_date or date.today()

    cached = await cache.get(target)
    if cached is not None:
        return SprintInfoResponse(sprint=cached, cached=True)

    info = detect_sprint_for_date(target, config)
    await cache.set(info)
    return SprintInfoResponse(sprint=info)


# ---------------------------------------------------------------------------
# Current Sprint
# ---------------------------------------------------------------------------

@router.get(
    "/sprints/current",
    response_model=CurrentSprintResponse,
    summary="Get the persisted current sprint, refreshing it if stale",
)
async def current_sprint(
    service: SprintSettingsService = Depends(get_sprint_settings_service),
) -> CurrentSprintResponse:
    return await service.get_current_sprint(date.today())


# ---------------------------------------------------------------------------
# Schedule
# ---------------------------------------------------------------------------

@router.get(
    "/sprints/schedule",
    response_model=SprintScheduleResponse,
    summary="List the first sprints with their status",
)
async def sprint_schedule(
    reference_date: date | None = Query(default=None, alias="date"),
    count: int = Query(default=5, ge=1, le=100),
    config: SprintDetectionConfig = Depends(get_sprint_config),
) -> SprintScheduleResponse:
    reference = reference_date or date.today()
    return SprintScheduleResponse(
        reference_date=reference,
        sprints=expected_sprint_schedule(reference, config, count=count),
    )


@router.get(
    "/sprints/report",
    response_class=PlainTextResponse,
    summary="Plain-text sprint detection report",
)
async def sprint_report(
    target_date: date | None = Query(default=None, alias="date"),
    config: SprintDetectionConfig = Depends(get_sprint_config),
) -> str:
    return sprint_detection_report(target_date or date.today(), config)
