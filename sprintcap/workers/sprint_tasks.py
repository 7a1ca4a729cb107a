"""
Sprint background tasks.
Refreshes the persisted global sprint when it no longer contains today.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import date

from sprintcap.engine.exceptions import SprintCapError
from sprintcap.workers.celery_app import celery_app

logger = logging.getLogger(__name__)


@celery_app.task(
    name="sprintcap.workers.sprint_tasks.refresh_global_sprint",
    bind=True,
    max_retries=3,
    default_retry_delay=60,
)
def refresh_global_sprint(self, today: str | None = None) -> dict[str, object]:
    """
    Run the stale-sprint check for ``today`` (ISO date, defaults to the
    worker's current date) and commit any refresh.
    """
    target = date.fromisoformat(today) if today else date.today()
    try:
        # Fresh loop per run; forked workers can inherit a closed one
        from sprintcap.core.database import async_engine
        async_engine.sync_engine.dispose()

        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        try:
            result = loop.run_until_complete(_refresh(target))
        finally:
            loop.close()
        return result
    except SprintCapError as exc:
        # Misconfigured anchor or work week; not retried
        logger.error("refresh_global_sprint failed permanently: %s", exc)
        raise
    except Exception as exc:
        logger.error("refresh_global_sprint failed: %s", exc)
        raise self.retry(exc=exc)


async def _refresh(today: date) -> dict[str, object]:
    """Async helper: check and refresh inside a single transaction."""
    from sprintcap.core.database import AsyncSessionLocal
    from sprintcap.core.dependencies import get_sprint_config
    from sprintcap.services.sprint_settings_service import SprintSettingsService

    async with AsyncSessionLocal() as session:
        service = SprintSettingsService(db=session, config=get_sprint_config())
        current = await service.get_current_sprint(today)
        await session.commit()

    if current.refreshed:
        logger.info("Global sprint refreshed to sprint %d", current.record.current_sprint_number)

    return {
        "sprint_number": current.record.current_sprint_number,
        "refreshed": current.refreshed,
        "is_valid": current.validation.is_valid,
    }
