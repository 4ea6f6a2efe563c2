from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError
from .rules import derive_hours


@dataclass(frozen=True)
class RecordKey:
    """Composite identity of a day record: one per employee per calendar day."""

    employee_id: int
    work_date: date


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one employee's attendance for one calendar day."""

    employee_id: int
    work_date: date
    check_in_time: Optional[datetime] = None
    check_out_time: Optional[datetime] = None
    status: AttendanceStatus = AttendanceStatus.ABSENT
    total_hours: Decimal = field(default=Decimal("0"))
    created_at: Optional[datetime] = None

    def __post_init__(self):
        if self.check_out_time is not None:
            if self.check_in_time is None:
                raise ValidationError("Check-out recorded without a check-in")
            if self.check_out_time < self.check_in_time:
                raise ValidationError("Check-out cannot be earlier than check-in")
        # total_hours is derived, never trusted from the caller.
        object.__setattr__(self, "total_hours", derive_hours(self.check_in_time, self.check_out_time))

    @property
    def key(self) -> RecordKey:
        return RecordKey(self.employee_id, self.work_date)

    @property
    def checked_in(self) -> bool:
        return self.check_in_time is not None

    @property
    def checked_out(self) -> bool:
        return self.check_out_time is not None

    def with_check_in(self, check_in_time: datetime, status: AttendanceStatus) -> "AttendanceRecord":
        return replace(self, check_in_time=check_in_time, status=status)

    def with_check_out(self, check_out_time: datetime) -> "AttendanceRecord":
        return replace(self, check_out_time=check_out_time)

    def with_status(self, status: AttendanceStatus) -> "AttendanceRecord":
        return replace(self, status=status)


@dataclass(frozen=True)
class RecordFilter:
    """Optional predicates for record queries; ``None`` means "any"."""

    employee_id: Optional[int] = None
    employee_code: Optional[str] = None
    start: Optional[date] = None
    end: Optional[date] = None
    status: Optional[AttendanceStatus] = None
    department: Optional[str] = None
