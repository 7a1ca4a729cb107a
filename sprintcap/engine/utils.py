"""
Small numeric and date coercion helpers shared by the engine modules.
"""

from __future__ import annotations

import math
from datetime import date, datetime


def as_date(value: date | datetime | str) -> date:
    """
    Normalize a date-like value to a plain calendar date.

    Datetimes are truncated to their date component so time-of-day never
    affects a comparison. Strings must be ISO formatted; a trailing time
    part ("2025-08-10T00:00:00Z") is ignored.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return date.fromisoformat(value.strip()[:10])
    raise TypeError(f"Expected date, datetime or ISO string, got {type(value).__name__}")


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up (not banker's rounding)."""
    return math.floor(value + 0.5)


def percentage(part: float, whole: float) -> int:
    """``round(part / whole × 100)``, or 0 when ``whole`` is 0. Not clamped."""
    if whole == 0:
        return 0
    return round_half_up(part / whole * 100)


def format_hours(hours: float) -> str:
    """``1234.0`` -> ``"1,234h"``; fractional hours keep one decimal."""
    if float(hours).is_integer():
        return f"{int(hours):,}h"
    return f"{hours:,.1f}h"


def format_percentage(value: float) -> str:
    return f"{round_half_up(value)}%"
