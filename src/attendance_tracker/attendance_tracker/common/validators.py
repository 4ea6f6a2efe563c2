from __future__ import annotations

from datetime import MAXYEAR, MINYEAR, date
from typing import Optional

from ..core.exceptions import InvalidRange, ValidationError


def require_positive_int(value, field_name: str) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer")
    if number <= 0:
        raise ValidationError(f"{field_name} must be positive")
    return number


def require_month(value, field_name: str = "month") -> int:
    month = require_positive_int(value, field_name)
    if month > 12:
        raise ValidationError(f"{field_name} must be between 1 and 12")
    return month


def require_year(value, field_name: str = "year") -> int:
    year = require_positive_int(value, field_name)
    if not MINYEAR <= year <= MAXYEAR:
        raise ValidationError(f"{field_name} must be between {MINYEAR} and {MAXYEAR}")
    return year


def require_ordered_range(start: Optional[date], end: Optional[date]) -> None:
    if start is not None and end is not None and end < start:
        raise InvalidRange(f"End date {end.isoformat()} is before start date {start.isoformat()}")
