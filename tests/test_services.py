"""
Service layer tests against a mocked AsyncSession.
"""

from datetime import date
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import HTTPException

from sprintcap.engine.health import HealthStatus
from sprintcap.models.sprint_settings import GlobalSprintSettings
from sprintcap.services.capacity_service import CapacityService
from sprintcap.services.sprint_settings_service import DETECTION_AUTHOR, SprintSettingsService


def make_db(*results) -> AsyncMock:
    db = AsyncMock()
    db.add = MagicMock()
    db.execute.side_effect = list(results)
    return db


def scalar_result(value) -> MagicMock:
    result = MagicMock()
    result.scalar_one_or_none.return_value = value
    return result


def scalars_result(values) -> MagicMock:
    result = MagicMock()
    result.scalars.return_value.all.return_value = values
    return result


def stored_sprint(number: int, start: date, end: date) -> GlobalSprintSettings:
    return GlobalSprintSettings(
        id=1,
        current_sprint_number=number,
        sprint_length_weeks=2,
        sprint_start_date=start,
        sprint_end_date=end,
        progress_percentage=0,
        days_remaining=11,
        working_days_remaining=9,
        notes=f"Auto-calculated Sprint {number}",
        updated_by="system",
    )


# ---------------------------------------------------------------------------
# 1. SprintSettingsService
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_missing_settings_row_is_created(sprint_config):
    db = make_db(scalar_result(None))

    async def assign_id():
        db.add.call_args.args[0].id = 12

    db.flush.side_effect = assign_id
    service = SprintSettingsService(db=db, config=sprint_config)

    current = await service.get_current_sprint(date(2025, 8, 15))

    assert current.refreshed
    assert current.validation.is_valid
    assert current.record.id == "12"
    assert current.record.current_sprint_number == 2
    db.add.assert_called_once()
    created = db.add.call_args.args[0]
    assert isinstance(created, GlobalSprintSettings)
    assert created.sprint_start_date == date(2025, 8, 10)
    assert created.updated_by == DETECTION_AUTHOR
    db.flush.assert_awaited_once()


@pytest.mark.asyncio
async def test_stale_settings_row_is_refreshed(sprint_config):
    row = stored_sprint(1, date(2025, 7, 27), date(2025, 8, 7))
    db = make_db(scalar_result(row))
    service = SprintSettingsService(db=db, config=sprint_config)

    current = await service.get_current_sprint(date(2025, 8, 15))

    assert current.refreshed
    assert current.validation.needs_update
    assert current.record.id == "1"
    assert current.record.current_sprint_number == 2
    assert row.current_sprint_number == 2
    assert row.sprint_start_date == date(2025, 8, 10)
    assert row.sprint_end_date == date(2025, 8, 21)
    assert row.progress_percentage == 50
    assert row.updated_by == DETECTION_AUTHOR
    db.add.assert_not_called()
    db.flush.assert_awaited_once()


@pytest.mark.asyncio
async def test_current_settings_row_is_returned(sprint_config):
    row = stored_sprint(2, date(2025, 8, 10), date(2025, 8, 21))
    db = make_db(scalar_result(row))
    service = SprintSettingsService(db=db, config=sprint_config)

    current = await service.get_current_sprint(date(2025, 8, 15))

    assert not current.refreshed
    assert current.validation.is_valid
    assert current.record.id == "1"
    assert current.record.is_active
    db.flush.assert_not_awaited()


@pytest.mark.asyncio
async def test_current_settings_row_progress_is_recomputed_for_today(sprint_config):
    # Row written on the first day of sprint 2 and read ten days later
    row = stored_sprint(2, date(2025, 8, 10), date(2025, 8, 21))
    db = make_db(scalar_result(row))
    service = SprintSettingsService(db=db, config=sprint_config)

    current = await service.get_current_sprint(date(2025, 8, 20))

    assert not current.refreshed
    assert current.record.progress_percentage == 80
    assert current.record.days_remaining == 1
    assert current.record.working_days_remaining == 1
    assert current.record.notes == "Auto-calculated Sprint 2"
    assert row.progress_percentage == 0
    db.flush.assert_not_awaited()


@pytest.mark.asyncio
async def test_future_settings_row_is_left_alone(sprint_config, caplog):
    row = stored_sprint(4, date(2025, 9, 7), date(2025, 9, 18))
    db = make_db(scalar_result(row))
    service = SprintSettingsService(db=db, config=sprint_config)

    current = await service.get_current_sprint(date(2025, 8, 15))

    assert not current.refreshed
    assert not current.validation.is_valid
    assert not current.record.is_active
    assert row.current_sprint_number == 4
    assert "does not contain 2025-08-15" in caplog.text


# ---------------------------------------------------------------------------
# 2. CapacityService
# ---------------------------------------------------------------------------

def entry_rows(member_id: int) -> list[SimpleNamespace]:
    values = [
        (date(2025, 8, 10), "1"),
        (date(2025, 8, 11), "0.5"),
        (date(2025, 8, 12), "X"),
        (date(2025, 8, 15), "X"),  # Friday
        (date(2025, 8, 16), "X"),  # Saturday
    ]
    return [
        SimpleNamespace(member_id=member_id, entry_date=day, value=value, reason=None)
        for day, value in values
    ]


@pytest.mark.asyncio
async def test_team_capacity(sprint_config):
    team = SimpleNamespace(id=7, name="Core")
    members = [
        SimpleNamespace(id=1, name="Dana", is_manager=False),
        SimpleNamespace(id=2, name="Noa", is_manager=True),
    ]
    db = make_db(
        scalar_result(team),
        scalars_result(members),
        scalars_result(entry_rows(1) + entry_rows(2)),
    )
    service = CapacityService(db=db, config=sprint_config)

    capacity = await service.team_capacity(7, date(2025, 8, 15))

    assert capacity.sprint.sprint_number == 2
    assert capacity.metrics.potential_hours == 140
    assert capacity.metrics.planned_hours == 21
    assert capacity.metrics.completion_percentage == 15
    assert capacity.summary.team_name == "Core"
    assert capacity.summary.sprint_number == 2
    assert capacity.summary.max_capacity_hours == 105
    assert capacity.summary.utilization_percentage == 20
    assert capacity.summary.completion_percentage == 30
    assert capacity.summary.member_summaries[0].weekend_days_auto_filled == 2
    assert capacity.health.status is HealthStatus.critical
    assert db.execute.await_count == 3


@pytest.mark.asyncio
async def test_team_without_members(sprint_config):
    db = make_db(scalar_result(SimpleNamespace(id=7, name="Core")), scalars_result([]))
    service = CapacityService(db=db, config=sprint_config)

    capacity = await service.team_capacity(7, date(2025, 8, 15))

    assert capacity.metrics.potential_hours == 0
    assert capacity.metrics.completion_percentage == 0
    assert capacity.summary.total_members == 0
    assert db.execute.await_count == 2


@pytest.mark.asyncio
async def test_unknown_team_raises_404(sprint_config):
    db = make_db(scalar_result(None))
    service = CapacityService(db=db, config=sprint_config)

    with pytest.raises(HTTPException) as exc_info:
        await service.team_capacity(99, date(2025, 8, 15))

    assert exc_info.value.status_code == 404
    assert exc_info.value.detail["code"] == "TEAM_NOT_FOUND"
