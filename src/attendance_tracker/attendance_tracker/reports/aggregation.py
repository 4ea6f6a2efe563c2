"""Pure roll-ups of attendance records.

Nothing here performs I/O or raises domain errors: callers hand in records
that are already scoped to the window they care about, and empty input
yields zero-valued results.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Callable, Iterable, Mapping, Optional, Sequence

from ..attendance.model import AttendanceRecord
from ..attendance.rules import round_hours
from ..common.datetime_utils import iso_or_none
from ..common.time_windows import trailing_days
from ..core.constants import DEFAULT_TREND_DAYS, UNKNOWN_DEPARTMENT
from ..core.enums import AttendanceStatus
from ..employees.model import Employee

EmployeeLookup = Callable[[int], Optional[Employee]]

_COUNTER_FIELD = {
    AttendanceStatus.PRESENT: "present",
    AttendanceStatus.ABSENT: "absent",
    AttendanceStatus.LATE: "late",
    AttendanceStatus.HALF_DAY: "half_day",
}


def counter_field(status: AttendanceStatus) -> str:
    """Name of the counter a status rolls into; every status has one."""
    try:
        return _COUNTER_FIELD[AttendanceStatus(status)]
    except (KeyError, ValueError):
        raise ValueError(f"Unhandled attendance status {status!r}")


def counts_as_present(status: AttendanceStatus) -> bool:
    # Head-count reporting treats a late arrival as attendance.
    return status in (AttendanceStatus.PRESENT, AttendanceStatus.LATE)


@dataclass
class StatusCounts:
    present: int = 0
    absent: int = 0
    late: int = 0
    half_day: int = 0

    def add(self, status: AttendanceStatus) -> None:
        name = counter_field(status)
        setattr(self, name, getattr(self, name) + 1)

    def to_dict(self) -> dict:
        return {
            "present": self.present,
            "absent": self.absent,
            "late": self.late,
            "half_day": self.half_day,
        }


@dataclass(frozen=True)
class StatusSummary:
    present: int
    absent: int
    late: int
    half_day: int
    total_hours: Decimal

    def to_dict(self) -> dict:
        return {
            "present": self.present,
            "absent": self.absent,
            "late": self.late,
            "half_day": self.half_day,
            "total_hours": str(self.total_hours),
        }


@dataclass(frozen=True)
class TrendPoint:
    day: date
    present: int
    absent: int

    def to_dict(self) -> dict:
        return {"date": self.day.isoformat(), "present": self.present, "absent": self.absent}


@dataclass(frozen=True)
class DayCounts:
    day: date
    present: int
    absent: int
    late: int
    half_day: int
    total: int

    def to_dict(self) -> dict:
        return {
            "date": self.day.isoformat(),
            "present": self.present,
            "absent": self.absent,
            "late": self.late,
            "half_day": self.half_day,
            "total": self.total,
        }


@dataclass(frozen=True)
class EmployeeDayStatus:
    employee: Employee
    checked_in: bool
    checked_out: bool
    status: AttendanceStatus
    check_in_time: Optional[datetime] = None
    check_out_time: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "employee": employee_to_dict(self.employee),
            "checked_in": self.checked_in,
            "checked_out": self.checked_out,
            "check_in_time": iso_or_none(self.check_in_time),
            "check_out_time": iso_or_none(self.check_out_time),
            "status": self.status.value,
        }


def employee_to_dict(e: Employee) -> dict:
    return {
        "id": e.employee_id,
        "employee_id": e.employee_code,
        "name": e.full_name,
        "email": e.email,
        "department": e.department,
    }


def summarize(records: Iterable[AttendanceRecord]) -> StatusSummary:
    counts = StatusCounts()
    hours = Decimal("0")
    for r in records:
        counts.add(r.status)
        hours += r.total_hours or Decimal("0")
    # Rounded once over the sum, not per record.
    return StatusSummary(
        present=counts.present,
        absent=counts.absent,
        late=counts.late,
        half_day=counts.half_day,
        total_hours=round_hours(hours),
    )


def department_breakdown(records: Iterable[AttendanceRecord], employee_lookup: EmployeeLookup) -> dict[str, StatusCounts]:
    breakdown: dict[str, StatusCounts] = {}
    for r in records:
        employee = employee_lookup(r.employee_id)
        dept = (employee.department if employee else None) or UNKNOWN_DEPARTMENT
        breakdown.setdefault(dept, StatusCounts()).add(r.status)
    return breakdown


def weekly_trend(
    today: date,
    total_employee_count: int,
    records: Iterable[AttendanceRecord],
    *,
    days: int = DEFAULT_TREND_DAYS,
) -> list[TrendPoint]:
    present_by_day: dict[date, int] = {}
    for r in records:
        if counts_as_present(r.status):
            present_by_day[r.work_date] = present_by_day.get(r.work_date, 0) + 1

    points = []
    for day in trailing_days(today, days):
        present = present_by_day.get(day, 0)
        points.append(TrendPoint(day=day, present=present, absent=int(total_employee_count) - present))
    return points


def _index_by_employee(records: Iterable[AttendanceRecord]) -> dict[int, AttendanceRecord]:
    return {r.employee_id: r for r in records}


def absent_today(all_employees: Sequence[Employee], todays_records: Iterable[AttendanceRecord]) -> list[Employee]:
    by_employee = _index_by_employee(todays_records)
    absent = []
    for e in all_employees:
        record = by_employee.get(e.employee_id)
        if record is None or record.status == AttendanceStatus.ABSENT:
            absent.append(e)
    return absent


def today_status_for_all(
    all_employees: Sequence[Employee],
    todays_records: Iterable[AttendanceRecord],
) -> list[EmployeeDayStatus]:
    by_employee = _index_by_employee(todays_records)
    result = []
    for e in all_employees:
        record = by_employee.get(e.employee_id)
        if record is None:
            result.append(
                EmployeeDayStatus(employee=e, checked_in=False, checked_out=False, status=AttendanceStatus.ABSENT)
            )
            continue
        result.append(
            EmployeeDayStatus(
                employee=e,
                checked_in=record.checked_in,
                checked_out=record.checked_out,
                status=record.status,
                check_in_time=record.check_in_time,
                check_out_time=record.check_out_time,
            )
        )
    return result


def day_counts(records: Iterable[AttendanceRecord], day: date) -> DayCounts:
    """Team calendar cell for one day (present includes late arrivals)."""
    counts = StatusCounts()
    total = 0
    for r in records:
        if r.work_date != day:
            continue
        counts.add(r.status)
        total += 1
    return DayCounts(
        day=day,
        present=counts.present + counts.late,
        absent=counts.absent,
        late=counts.late,
        half_day=counts.half_day,
        total=total,
    )


def breakdown_to_dict(breakdown: Mapping[str, StatusCounts]) -> dict:
    return {dept: counts.to_dict() for dept, counts in sorted(breakdown.items())}
