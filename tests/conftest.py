from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

import pytest

from src.attendance_tracker.attendance_tracker.attendance.memory_attendance_repository import (
    InMemoryAttendanceRepository,
)
from src.attendance_tracker.attendance_tracker.common.clock import FixedClock
from src.attendance_tracker.attendance_tracker.container import assemble
from src.attendance_tracker.attendance_tracker.core.enums import Role
from src.attendance_tracker.attendance_tracker.employees.model import Actor, Employee


@dataclass
class InMemoryEmployees:
    employees: list[Employee] = field(default_factory=list)

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        return next((e for e in self.employees if e.employee_id == employee_id), None)

    def get_by_code(self, employee_code: str) -> Optional[Employee]:
        return next((e for e in self.employees if e.employee_code == employee_code), None)

    def list_employees(self, *, role: Optional[Role] = None, department: Optional[str] = None, include_inactive: bool = False):
        return [
            e
            for e in self.employees
            if (include_inactive or e.is_active)
            and (role is None or e.role == role)
            and (department is None or e.department == department)
        ]


@pytest.fixture
def fixed_now() -> datetime:
    # A Wednesday, well before the 09:00 cutoff.
    return datetime(2026, 2, 4, 8, 30, 0, tzinfo=timezone.utc)


@pytest.fixture
def clock(fixed_now) -> FixedClock:
    return FixedClock(current=fixed_now, tz=timezone.utc)


@pytest.fixture
def staff() -> list[Employee]:
    return [
        Employee(1, "MGR001", "Manager User", "Management", Role.MANAGER, "manager@example.com"),
        Employee(2, "EMP001", "John Doe", "Engineering", Role.EMPLOYEE, "john@example.com"),
        Employee(3, "EMP002", "Jane Smith", "Engineering", Role.EMPLOYEE, "jane@example.com"),
        Employee(4, "EMP003", "Bob Johnson", "Sales", Role.EMPLOYEE, "bob@example.com"),
        Employee(5, "EMP004", "Alice Williams", None, Role.EMPLOYEE, "alice@example.com"),
    ]


@pytest.fixture
def employees(staff) -> InMemoryEmployees:
    return InMemoryEmployees(list(staff))


@pytest.fixture
def attendance_repo(clock) -> InMemoryAttendanceRepository:
    return InMemoryAttendanceRepository(now=clock.now)


@pytest.fixture
def container(attendance_repo, employees, clock):
    return assemble(attendance_repo=attendance_repo, employees=employees, clock=clock)


@pytest.fixture
def manager() -> Actor:
    return Actor(employee_id=1, role=Role.MANAGER, department="Management")


@pytest.fixture
def employee_actor() -> Actor:
    return Actor(employee_id=2, role=Role.EMPLOYEE, department="Engineering")
