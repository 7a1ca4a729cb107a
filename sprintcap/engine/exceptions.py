"""
Engine exception hierarchy.

Configuration errors fail fast at construction time. Detection overflow is
raised when the sprint boundary walk exceeds its iteration cap.
"""

from __future__ import annotations

from datetime import date


class SprintCapError(Exception):
    """Base class for all engine errors."""


class SprintConfigurationError(SprintCapError, ValueError):
    """Work-week or sprint configuration is invalid or inconsistent."""


class SprintDetectionOverflow(SprintCapError):
    """The boundary walk did not reach the target date within its cap."""

    def __init__(self, target_date: date, iterations: int, last_end_date: date) -> None:
        self.target_date = target_date
        self.iterations = iterations
        self.last_end_date = last_end_date
        super().__init__(
            f"Sprint detection for {target_date.isoformat()} exceeded {iterations} "
            f"iterations (last sprint ended {last_end_date.isoformat()}); "
            "check FIRST_SPRINT_START_DATE"
        )
