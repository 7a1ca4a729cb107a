"""
FastAPI dependency injection functions.

Provides Redis connections and the engine configuration built from settings.
"""

from __future__ import annotations

import redis.asyncio as aioredis
from fastapi import Depends

from sprintcap.core.config import settings
from sprintcap.engine.detection import SprintDetectionConfig
from sprintcap.engine.workweek import WorkWeekConfig

# ---------------------------------------------------------------------------
# Redis
# ---------------------------------------------------------------------------

_redis_pool: aioredis.Redis | None = None


async def get_redis() -> aioredis.Redis:
    """
    Return a shared async Redis client.

    Uses a module-level pool so connections are reused across requests.
    """
    global _redis_pool
    if _redis_pool is None:
        _redis_pool = aioredis.from_url(
            str(settings.REDIS_URL),
            encoding="utf-8",
            decode_responses=True,
        )
    return _redis_pool


# ---------------------------------------------------------------------------
# Engine configuration
# ---------------------------------------------------------------------------

_sprint_config: SprintDetectionConfig | None = None


def get_sprint_config() -> SprintDetectionConfig:
    """
    Return the sprint detection config built from settings.

    Built once; raises SprintConfigurationError if settings are inconsistent.
    """
    global _sprint_config
    if _sprint_config is None:
        _sprint_config = settings.sprint_detection()
    return _sprint_config


def get_work_week(config: SprintDetectionConfig = Depends(get_sprint_config)) -> WorkWeekConfig:
    return config.work_week
