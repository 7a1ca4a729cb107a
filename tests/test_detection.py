"""
Sprint detection tests.

Default cadence: sprint 1 starts Sunday 2025-07-27, two-week sprints over a
Sunday–Thursday work week (10 working days per sprint).
"""

import logging
from datetime import date, timedelta

import pytest
from pydantic import ValidationError

from sprintcap.engine.detection import (
    SprintDetectionConfig,
    SprintPhase,
    detect_sprint_for_date,
    expected_sprint_schedule,
    find_sprint_window,
    get_sprint_window,
    iter_sprint_windows,
    sprint_detection_report,
)
from sprintcap.engine.exceptions import SprintDetectionOverflow
from sprintcap.engine.workweek import WorkWeekConfig, count_working_days_inclusive, next_working_day_after


# ---------------------------------------------------------------------------
# 1. Configuration
# ---------------------------------------------------------------------------

def test_default_config_has_ten_working_days_per_sprint(sprint_config):
    assert sprint_config.working_days_per_sprint == 10
    assert sprint_config.max_iterations == 40


def test_working_days_per_week_must_match_work_week():
    with pytest.raises(ValidationError):
        SprintDetectionConfig(working_days_per_week=4)


def test_anchor_must_be_a_working_day():
    with pytest.raises(ValidationError):
        SprintDetectionConfig(first_sprint_start_date=date(2025, 8, 1))  # Friday


def test_sprint_length_must_be_positive():
    with pytest.raises(ValidationError):
        SprintDetectionConfig(sprint_length_weeks=0)


# ---------------------------------------------------------------------------
# 2. Boundaries
# ---------------------------------------------------------------------------

def test_first_two_sprint_windows(sprint_config):
    first = get_sprint_window(1, sprint_config)
    second = get_sprint_window(2, sprint_config)
    assert (first.start_date, first.end_date) == (date(2025, 7, 27), date(2025, 8, 7))
    assert (second.start_date, second.end_date) == (date(2025, 8, 10), date(2025, 8, 21))


def test_sprint_number_below_one_rejected(sprint_config):
    with pytest.raises(ValueError):
        get_sprint_window(0, sprint_config)


def test_sprints_are_contiguous_and_full_length(sprint_config):
    windows = iter_sprint_windows(sprint_config)
    previous = next(windows)
    for _ in range(19):
        current = next(windows)
        assert current.sprint_number == previous.sprint_number + 1
        assert current.start_date == next_working_day_after(previous.end_date)
        assert count_working_days_inclusive(current.start_date, current.end_date) == 10
        previous = current


def test_monday_to_friday_cadence():
    work_week = WorkWeekConfig(working_weekdays={1, 2, 3, 4, 5})
    config = SprintDetectionConfig.for_work_week(work_week, first_sprint_start_date=date(2025, 7, 28))
    first = get_sprint_window(1, config)
    second = get_sprint_window(2, config)
    assert first.end_date == date(2025, 8, 8)
    assert second.start_date == date(2025, 8, 11)
    assert second.end_date == date(2025, 8, 22)


# ---------------------------------------------------------------------------
# 3. Detection
# ---------------------------------------------------------------------------

def test_detect_mid_sprint(sprint_config):
    info = detect_sprint_for_date(date(2025, 8, 15), sprint_config)
    assert info.sprint_number == 2
    assert info.sprint_name == "Sprint 2"
    assert info.start_date == date(2025, 8, 10)
    assert info.end_date == date(2025, 8, 21)
    assert info.is_current_for_date
    assert info.progress_percentage == 50
    assert info.days_remaining == 6
    assert info.working_days_remaining == 5
    assert len(info.working_days) == 10


def test_detect_first_day_of_sprint(sprint_config):
    info = detect_sprint_for_date(date(2025, 8, 10), sprint_config)
    assert info.sprint_number == 2
    assert info.progress_percentage == 0
    assert info.working_days_remaining == 9


def test_detect_last_day_of_sprint(sprint_config):
    info = detect_sprint_for_date(date(2025, 8, 7), sprint_config)
    assert info.sprint_number == 1
    assert info.is_current_for_date
    assert info.progress_percentage == 90
    assert info.days_remaining == 0
    assert info.working_days_remaining == 0


def test_detect_accepts_iso_strings_with_time(sprint_config):
    info = detect_sprint_for_date("2025-08-15T18:30:00Z", sprint_config)
    assert info.sprint_number == 2
    assert info.target_date == date(2025, 8, 15)


def test_gap_day_resolves_to_next_sprint_with_warning(sprint_config, caplog):
    with caplog.at_level(logging.WARNING, logger="sprintcap.engine.detection"):
        info = detect_sprint_for_date(date(2025, 8, 8), sprint_config)
    assert info.sprint_number == 2
    assert not info.is_current_for_date
    assert info.progress_percentage == 0
    assert "not within detected sprint 2" in caplog.text


def test_date_before_anchor_resolves_to_first_sprint(sprint_config):
    info = detect_sprint_for_date(date(2025, 7, 1), sprint_config)
    assert info.sprint_number == 1
    assert not info.is_current_for_date
    assert info.progress_percentage == 0


def test_every_working_day_is_inside_its_sprint(sprint_config):
    day = date(2025, 7, 27)
    while day < date(2026, 3, 1):
        info = detect_sprint_for_date(day, sprint_config)
        if info.target_date in info.working_days:
            assert info.is_current_for_date
            assert 0 <= info.progress_percentage <= 100
        day += timedelta(days=1)


def test_detection_is_idempotent(sprint_config):
    first = detect_sprint_for_date(date(2025, 11, 3), sprint_config)
    second = detect_sprint_for_date(date(2025, 11, 3), sprint_config)
    assert first == second


def test_overflow_past_iteration_cap():
    config = SprintDetectionConfig(max_iterations=3)
    with pytest.raises(SprintDetectionOverflow) as exc_info:
        find_sprint_window(date(2025, 9, 21), config)
    assert exc_info.value.iterations == 3
    assert exc_info.value.last_end_date == date(2025, 9, 18)


def test_cap_is_reached_exactly_without_overflow():
    config = SprintDetectionConfig(max_iterations=4)
    window = find_sprint_window(date(2025, 9, 21), config)
    assert window.sprint_number == 5


def test_default_cap_overflows_far_future_dates(sprint_config):
    with pytest.raises(SprintDetectionOverflow):
        detect_sprint_for_date(date(2030, 1, 1), sprint_config)


# ---------------------------------------------------------------------------
# 4. Schedule and report
# ---------------------------------------------------------------------------

def test_expected_schedule_statuses(sprint_config):
    schedule = expected_sprint_schedule(date(2025, 8, 15), sprint_config, count=5)
    assert [s.sprint_number for s in schedule] == [1, 2, 3, 4, 5]
    assert [s.status for s in schedule] == [
        SprintPhase.completed,
        SprintPhase.current,
        SprintPhase.upcoming,
        SprintPhase.upcoming,
        SprintPhase.upcoming,
    ]


def test_report_marks_current_sprint(sprint_config):
    report = sprint_detection_report(date(2025, 8, 15), sprint_config)
    assert report.startswith("=== SPRINT DETECTION REPORT ===")
    assert "Detected Sprint: Sprint 2" in report
    assert "Sprint 2: Sun Aug 10 2025 - Thu Aug 21 2025 (current) <- CURRENT" in report
    assert "Sprint 1: Sun Jul 27 2025 - Thu Aug 07 2025 (completed)" in report
    assert report.endswith("=== END REPORT ===")
