"""
Pure sprint and capacity engine.

No I/O and no wall-clock reads: every function is a deterministic map from
configuration, explicit dates and raw entries to a result.
"""

from sprintcap.engine.capacity import (
    AvailabilityValue,
    MemberSprintSummary,
    ScheduleEntry,
    TeamMemberSchedule,
    TeamSprintSummary,
    calculate_actual_planned_hours,
    calculate_member_summary,
    calculate_sprint_potential,
    calculate_team_summary,
    generate_weekend_entries,
    normalize_entries,
)
from sprintcap.engine.detection import (
    DEFAULT_SPRINT_CONFIG,
    MAX_SPRINT_ITERATIONS,
    ScheduledSprint,
    SprintDetectionConfig,
    SprintInfo,
    SprintPhase,
    detect_sprint_for_date,
    expected_sprint_schedule,
    get_sprint_window,
    sprint_detection_report,
)
from sprintcap.engine.exceptions import (
    SprintCapError,
    SprintConfigurationError,
    SprintDetectionOverflow,
)
from sprintcap.engine.health import (
    CalculationValidation,
    HealthStatus,
    SprintHealth,
    SprintMetrics,
    SprintProgress,
    calculate_completion_percentage,
    calculate_sprint_metrics,
    calculate_sprint_progress_info,
    get_sprint_health_status,
    validate_sprint_calculation,
    validate_sprint_config,
)
from sprintcap.engine.legacy import (
    LegacySprintRecord,
    SprintValidation,
    to_legacy_record,
    validate_sprint_contains_date,
)
from sprintcap.engine.utils import format_hours, format_percentage
from sprintcap.engine.workweek import (
    DEFAULT_WORK_WEEK,
    WorkWeekConfig,
    add_working_days,
    count_working_days_between,
    count_working_days_inclusive,
    enumerate_working_days,
    is_working_day,
    next_working_day_after,
)

__all__ = [
    "AvailabilityValue",
    "CalculationValidation",
    "DEFAULT_SPRINT_CONFIG",
    "DEFAULT_WORK_WEEK",
    "HealthStatus",
    "LegacySprintRecord",
    "MAX_SPRINT_ITERATIONS",
    "MemberSprintSummary",
    "ScheduleEntry",
    "ScheduledSprint",
    "SprintCapError",
    "SprintConfigurationError",
    "SprintDetectionConfig",
    "SprintDetectionOverflow",
    "SprintHealth",
    "SprintInfo",
    "SprintMetrics",
    "SprintPhase",
    "SprintProgress",
    "SprintValidation",
    "TeamMemberSchedule",
    "TeamSprintSummary",
    "WorkWeekConfig",
    "add_working_days",
    "calculate_actual_planned_hours",
    "calculate_completion_percentage",
    "calculate_member_summary",
    "calculate_sprint_metrics",
    "calculate_sprint_potential",
    "calculate_sprint_progress_info",
    "calculate_team_summary",
    "count_working_days_between",
    "count_working_days_inclusive",
    "detect_sprint_for_date",
    "enumerate_working_days",
    "expected_sprint_schedule",
    "format_hours",
    "format_percentage",
    "generate_weekend_entries",
    "get_sprint_health_status",
    "get_sprint_window",
    "is_working_day",
    "next_working_day_after",
    "normalize_entries",
    "sprint_detection_report",
    "to_legacy_record",
    "validate_sprint_calculation",
    "validate_sprint_config",
    "validate_sprint_contains_date",
]
