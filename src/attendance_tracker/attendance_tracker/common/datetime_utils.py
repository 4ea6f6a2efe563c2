from __future__ import annotations

from datetime import date, datetime, time, tzinfo
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid date {value!r}, expected YYYY-MM-DD")


def parse_optional_date(value: Optional[str]) -> Optional[date]:
    value = (value or "").strip()
    return parse_iso_date(value) if value else None


def parse_hhmm(value: str) -> time:
    """Parse HH:MM (used for the late cutoff setting)."""
    try:
        return datetime.strptime(value.strip(), "%H:%M").time()
    except (AttributeError, ValueError):
        raise ValidationError(f"Invalid time {value!r}, expected HH:MM")


def resolve_zone(name: str) -> tzinfo:
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        raise ValidationError(f"Unknown time zone {name!r}")


def iso_or_none(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None
