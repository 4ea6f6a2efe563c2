from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Roles supplied by the identity provider."""

    EMPLOYEE = "employee"
    MANAGER = "manager"


class AttendanceStatus(str, Enum):
    """Daily attendance outcome as persisted in the store."""

    PRESENT = "present"
    ABSENT = "absent"
    LATE = "late"
    HALF_DAY = "half-day"
