"""
Redis mirror of detected sprints.

Detection is deterministic, so a cached snapshot is only ever a shortcut;
the key includes the anchor and cadence so a config change never serves a
stale shape.
"""

from __future__ import annotations

import logging
from datetime import date

import redis.asyncio as aioredis
from pydantic import ValidationError
from redis.exceptions import RedisError

from sprintcap.engine.detection import SprintDetectionConfig, SprintInfo

logger = logging.getLogger(__name__)


def sprint_cache_key(target_date: date, config: SprintDetectionConfig) -> str:
    weekdays = "".join(str(day) for day in sorted(config.work_week.working_weekdays))
    return (
        f"sprintcap:sprint:{config.first_sprint_start_date.isoformat()}"
        f":{config.sprint_length_weeks}:{weekdays}:{target_date.isoformat()}"
    )


class SprintCache:
    """Read-through cache for SprintInfo snapshots."""

    def __init__(self, redis: aioredis.Redis, config: SprintDetectionConfig, ttl_seconds: int) -> None:
        self.redis = redis
        self.config = config
        self.ttl_seconds = ttl_seconds

    async def get(self, target_date: date) -> SprintInfo | None:
        try:
            raw = await self.redis.get(sprint_cache_key(target_date, self.config))
        except RedisError as exc:
            logger.warning("Sprint cache read failed: %s", exc)
            return None
        if raw is None:
            return None
        try:
            return SprintInfo.model_validate_json(raw)
        except ValidationError:
            logger.warning("Discarding malformed cached sprint for %s", target_date.isoformat())
            return None

    async def set(self, info: SprintInfo) -> None:
        if self.ttl_seconds <= 0:
            return
        try:
            await self.redis.set(
                sprint_cache_key(info.target_date, self.config),
                info.model_dump_json(),
                ex=self.ttl_seconds,
            )
        except RedisError as exc:
            logger.warning("Sprint cache write failed: %s", exc)
