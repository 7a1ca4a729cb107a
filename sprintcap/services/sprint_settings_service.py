"""
Global sprint settings business logic.

Keeps the persisted ``global_sprint_settings`` row in step with detection:
the row is read, checked against today, and rewritten from a fresh
detection when it has gone stale. A row that still covers today only
supplies the sprint window; progress figures are recomputed on read.
"""

from __future__ import annotations

import logging
from datetime import date

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from sprintcap.engine.detection import (
    SprintDetectionConfig,
    SprintInfo,
    SprintWindow,
    build_sprint_info,
    detect_sprint_for_date,
)
from sprintcap.engine.legacy import (
    LegacySprintRecord,
    SprintValidation,
    to_legacy_record,
    validate_sprint_contains_date,
)
from sprintcap.models.sprint_settings import GlobalSprintSettings
from sprintcap.schemas.sprint import CurrentSprintResponse

logger = logging.getLogger(__name__)

DETECTION_AUTHOR = "smart-detection"


class SprintSettingsService:
    """Reads and refreshes the persisted current sprint."""

    def __init__(self, db: AsyncSession, config: SprintDetectionConfig) -> None:
        self.db = db
        self.config = config

    # -----------------------------------------------------------------------
    # Current sprint
    # -----------------------------------------------------------------------

    async def get_current_sprint(self, today: date) -> CurrentSprintResponse:
        """
        Return the persisted sprint for ``today``, refreshing it if stale.

        A missing row is created from detection. A row that ended before
        ``today`` is overwritten. A row that starts after ``today`` is left
        alone and reported as invalid. Progress figures of a row that still
        covers ``today`` are recomputed for ``today``.
        """
        settings_row = await self._get_latest()

        if settings_row is None:
            detected = detect_sprint_for_date(today, self.config)
            logger.info("No global sprint settings found, creating %s", detected.sprint_name)
            settings_row = GlobalSprintSettings()
            self._apply(settings_row, detected)
            self.db.add(settings_row)
            await self.db.flush()
            return CurrentSprintResponse(
                record=self._persisted_record(settings_row, detected),
                validation=SprintValidation(is_valid=True),
                refreshed=True,
            )

        validation = validate_sprint_contains_date(settings_row, today)

        if validation.needs_update:
            detected = detect_sprint_for_date(today, self.config)
            logger.info(
                "Refreshing stale sprint %d (%s - %s) to %s",
                settings_row.current_sprint_number,
                settings_row.sprint_start_date.isoformat(),
                settings_row.sprint_end_date.isoformat(),
                detected.sprint_name,
            )
            self._apply(settings_row, detected)
            await self.db.flush()
            return CurrentSprintResponse(
                record=self._persisted_record(settings_row, detected),
                validation=validation,
                refreshed=True,
            )

        if not validation.is_valid:
            logger.warning("Stored sprint does not contain %s: %s", today.isoformat(), validation.reason)
            record = self._to_record(settings_row, today)
        else:
            window = SprintWindow(
                settings_row.current_sprint_number,
                settings_row.sprint_start_date,
                settings_row.sprint_end_date,
            )
            live = build_sprint_info(window, today, self.config)
            record = self._persisted_record(settings_row, live)

        return CurrentSprintResponse(record=record, validation=validation, refreshed=False)

    # -----------------------------------------------------------------------
    # Internal helpers
    # -----------------------------------------------------------------------

    async def _get_latest(self) -> GlobalSprintSettings | None:
        result = await self.db.execute(
            select(GlobalSprintSettings)
            .order_by(GlobalSprintSettings.id.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    @staticmethod
    def _persisted_record(settings_row: GlobalSprintSettings, sprint_info: SprintInfo) -> LegacySprintRecord:
        """Record derived from ``sprint_info``, identified by the row it mirrors."""
        return to_legacy_record(sprint_info).model_copy(
            update={
                "id": str(settings_row.id),
                "sprint_length_weeks": settings_row.sprint_length_weeks,
                "notes": settings_row.notes or "",
            }
        )

    @staticmethod
    def _apply(settings_row: GlobalSprintSettings, detected: SprintInfo) -> None:
        record = to_legacy_record(detected)
        settings_row.current_sprint_number = record.current_sprint_number
        settings_row.sprint_length_weeks = record.sprint_length_weeks
        settings_row.sprint_start_date = detected.start_date
        settings_row.sprint_end_date = detected.end_date
        settings_row.progress_percentage = record.progress_percentage
        settings_row.days_remaining = record.days_remaining
        settings_row.working_days_remaining = record.working_days_remaining
        settings_row.notes = record.notes
        settings_row.updated_by = DETECTION_AUTHOR

    @staticmethod
    def _to_record(settings_row: GlobalSprintSettings, today: date) -> LegacySprintRecord:
        return LegacySprintRecord(
            id=str(settings_row.id),
            current_sprint_number=settings_row.current_sprint_number,
            sprint_length_weeks=settings_row.sprint_length_weeks,
            sprint_start_date=settings_row.sprint_start_date.isoformat(),
            sprint_end_date=settings_row.sprint_end_date.isoformat(),
            progress_percentage=settings_row.progress_percentage,
            days_remaining=settings_row.days_remaining,
            working_days_remaining=settings_row.working_days_remaining,
            is_active=settings_row.sprint_start_date <= today <= settings_row.sprint_end_date,
            notes=settings_row.notes or "",
        )
