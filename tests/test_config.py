"""
Settings to engine configuration tests.
"""

from datetime import date

import pytest

from sprintcap.core.config import Settings
from sprintcap.engine.exceptions import SprintConfigurationError


def test_default_settings_build_default_cadence():
    config = Settings().sprint_detection()
    assert config.first_sprint_start_date == date(2025, 7, 27)
    assert config.sprint_length_weeks == 2
    assert config.working_days_per_week == 5
    assert config.work_week.weekend_weekdays == frozenset({5, 6})


def test_celery_urls_default_to_redis():
    settings = Settings(REDIS_URL="redis://cache:6379/1")
    assert settings.CELERY_BROKER_URL == str(settings.REDIS_URL)
    assert settings.CELERY_RESULT_BACKEND == str(settings.REDIS_URL)


def test_custom_work_week():
    settings = Settings(
        WORKING_WEEKDAYS=[1, 2, 3, 4, 5],
        FIRST_SPRINT_START_DATE=date(2025, 7, 28),
        HOURS_PER_WORKING_DAY=8,
    )
    config = settings.sprint_detection()
    assert config.work_week.weekend_weekdays == frozenset({0, 6})
    assert config.work_week.hours_per_week == 40


def test_invalid_weekday_raises_configuration_error():
    with pytest.raises(SprintConfigurationError):
        Settings(WORKING_WEEKDAYS=[0, 1, 9]).work_week()


def test_anchor_on_weekend_raises_configuration_error():
    with pytest.raises(SprintConfigurationError):
        Settings(FIRST_SPRINT_START_DATE=date(2025, 8, 1)).sprint_detection()


def test_configuration_error_is_a_value_error():
    with pytest.raises(ValueError):
        Settings(WORKING_WEEKDAYS=[]).sprint_detection()
