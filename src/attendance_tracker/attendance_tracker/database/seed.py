"""Demo directory and 30 days of generated attendance."""

from __future__ import annotations

import random
from datetime import date, datetime, time, timedelta, tzinfo
from typing import Optional, Sequence

from ..attendance.model import AttendanceRecord
from ..attendance.rules import derive_on_check_in
from ..core.enums import Role
from ..employees.model import Employee

DEMO_EMPLOYEES = (
    Employee(1, "MGR001", "Manager User", "Management", Role.MANAGER, "manager@example.com"),
    Employee(2, "EMP001", "John Doe", "Engineering", Role.EMPLOYEE, "john@example.com"),
    Employee(3, "EMP002", "Jane Smith", "Engineering", Role.EMPLOYEE, "jane@example.com"),
    Employee(4, "EMP003", "Bob Johnson", "Sales", Role.EMPLOYEE, "bob@example.com"),
    Employee(5, "EMP004", "Alice Williams", "Marketing", Role.EMPLOYEE, "alice@example.com"),
    Employee(6, "EMP005", "Charlie Brown", "Sales", Role.EMPLOYEE, "charlie@example.com"),
)


def demo_records(
    employees: Sequence[Employee],
    *,
    today: date,
    tz: tzinfo,
    days: int = 30,
    attendance_rate: float = 0.7,
    rng: Optional[random.Random] = None,
) -> list[AttendanceRecord]:
    """Weekday records only; check-ins spread over 08:00-09:59, check-outs 17:00-18:59."""

    rng = rng or random.Random()
    records = []
    for offset in range(days):
        day = today - timedelta(days=offset)
        if day.weekday() >= 5:
            continue
        for e in employees:
            if e.role != Role.EMPLOYEE or rng.random() >= attendance_rate:
                continue
            check_in = datetime.combine(day, time(8 + rng.randrange(2), rng.randrange(60)), tzinfo=tz)
            check_out = datetime.combine(day, time(17 + rng.randrange(2), rng.randrange(60)), tzinfo=tz)
            records.append(
                AttendanceRecord(
                    employee_id=e.employee_id,
                    work_date=day,
                    check_in_time=check_in,
                    check_out_time=check_out,
                    status=derive_on_check_in(check_in),
                )
            )
    return records
