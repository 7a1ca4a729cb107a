"""
Pytest configuration for Sprintcap tests.
"""

from datetime import date

import pytest

from sprintcap.engine.detection import SprintDetectionConfig
from sprintcap.engine.workweek import WorkWeekConfig

# Sprint 1 of the default cadence: Sunday 2025-07-27 to Thursday 2025-08-07
SPRINT_ONE_START = date(2025, 7, 27)
SPRINT_ONE_END = date(2025, 8, 7)


def pytest_configure(config):
    """Configure pytest-asyncio mode."""
    config.addinivalue_line(
        "markers", "asyncio: mark test as async"
    )


@pytest.fixture
def work_week() -> WorkWeekConfig:
    return WorkWeekConfig()


@pytest.fixture
def sprint_config(work_week: WorkWeekConfig) -> SprintDetectionConfig:
    return SprintDetectionConfig.for_work_week(
        work_week,
        first_sprint_start_date=SPRINT_ONE_START,
        sprint_length_weeks=2,
    )
