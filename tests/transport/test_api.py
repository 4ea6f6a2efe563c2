from __future__ import annotations

from datetime import date, datetime, timezone

import pytest

from src.attendance_tracker.attendance_tracker.attendance.memory_attendance_repository import (
    InMemoryAttendanceRepository,
)
from src.attendance_tracker.attendance_tracker.attendance.model import AttendanceRecord
from src.attendance_tracker.attendance_tracker.container import assemble
from src.attendance_tracker.attendance_tracker.core.enums import Role
from src.attendance_tracker.attendance_tracker.core.exceptions import StorageError
from src.attendance_tracker.attendance_tracker.employees.model import Employee
from src.attendance_tracker.attendance_tracker.main import create_app

EMPLOYEE = {"X-Employee-Id": "2", "X-Employee-Role": "employee", "X-Employee-Department": "Engineering"}
MANAGER = {"X-Employee-Id": "1", "X-Employee-Role": "manager"}


@pytest.fixture
def client(container):
    app = create_app(container, settings_module="config.testing")
    return app.test_client()


def test_missing_identity_is_401(client):
    assert client.post("/api/attendance/checkin").status_code == 401
    assert client.get("/api/attendance/today", headers={"X-Employee-Id": "abc"}).status_code == 401


def test_checkin_then_duplicate_is_409(client):
    first = client.post("/api/attendance/checkin", headers=EMPLOYEE)
    assert first.status_code == 200
    assert first.get_json()["attendance"]["status"] == "present"

    second = client.post("/api/attendance/checkin", headers=EMPLOYEE)
    assert second.status_code == 409
    assert second.get_json()["error"] == "AlreadyCheckedIn"


def test_checkout_without_checkin_is_400(client):
    resp = client.post("/api/attendance/checkout", headers=EMPLOYEE)

    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Please check in first"


def test_checkout_reports_hours(client, clock):
    client.post("/api/attendance/checkin", headers=EMPLOYEE)
    clock.set(datetime(2026, 2, 4, 17, 0, tzinfo=timezone.utc))

    resp = client.post("/api/attendance/checkout", headers=EMPLOYEE)

    assert resp.status_code == 200
    assert resp.get_json()["attendance"]["total_hours"] == "8.50"
    today = client.get("/api/attendance/today", headers=EMPLOYEE).get_json()
    assert today["checked_out"] is True


def test_my_history_and_summary(client):
    client.post("/api/attendance/checkin", headers=EMPLOYEE)

    history = client.get("/api/attendance/my-history", headers=EMPLOYEE).get_json()
    assert [r["date"] for r in history] == ["2026-02-04"]

    summary = client.get("/api/attendance/my-summary?month=2&year=2026", headers=EMPLOYEE).get_json()
    assert (summary["month"], summary["present"]) == (2, 1)


def test_manager_routes_reject_employees(client):
    for path in (
        "/api/attendance/all",
        "/api/attendance/summary",
        "/api/attendance/today-status",
        "/api/attendance/export",
        "/api/attendance/employee/3",
        "/api/dashboard/manager",
    ):
        assert client.get(path, headers=EMPLOYEE).status_code == 403, path


def test_all_attendance_filters(client):
    client.post("/api/attendance/checkin", headers=EMPLOYEE)
    client.post("/api/attendance/checkin", headers={"X-Employee-Id": "4"})

    rows = client.get("/api/attendance/all?department=Engineering", headers=MANAGER).get_json()

    assert [r["employee"]["employee_id"] for r in rows] == ["EMP001"]


def test_all_attendance_rejects_reversed_range(client):
    resp = client.get("/api/attendance/all?startDate=2026-02-10&endDate=2026-02-01", headers=MANAGER)

    assert resp.status_code == 400
    assert resp.get_json()["error"] == "InvalidRange"


def test_bad_status_filter_is_400(client):
    assert client.get("/api/attendance/all?status=holiday", headers=MANAGER).status_code == 400


def test_override_then_calendar(client):
    resp = client.post(
        "/api/attendance/override",
        json={"employee_id": 3, "date": "2026-02-02", "status": "half-day"},
        headers=MANAGER,
    )
    assert resp.status_code == 200
    assert resp.get_json()["status"] == "half-day"

    day = client.get("/api/attendance/calendar?date=2026-02-02", headers=MANAGER).get_json()
    assert (day["half_day"], day["total"]) == (1, 1)


def test_calendar_requires_date(client):
    assert client.get("/api/attendance/calendar", headers=MANAGER).status_code == 400


def test_export_returns_columns_and_rows(client):
    client.post("/api/attendance/checkin", headers=EMPLOYEE)

    data = client.get("/api/attendance/export", headers=MANAGER).get_json()

    assert [c["id"] for c in data["columns"]][:3] == ["date", "employee_id", "name"]
    assert data["rows"][0]["employee_id"] == "EMP001"
    assert data["rows"][0]["check_out_time"] == "N/A"


def test_dashboards(client):
    client.post("/api/attendance/checkin", headers=EMPLOYEE)

    mine = client.get("/api/dashboard/employee", headers=EMPLOYEE).get_json()
    assert mine["today_status"]["checked_in"] is True

    team = client.get("/api/dashboard/manager", headers=MANAGER).get_json()
    assert team["total_employees"] == 4
    assert team["today_attendance"]["present"] == 1


class BrokenRepository(InMemoryAttendanceRepository):
    def get(self, key):
        raise StorageError("connection refused")


def test_storage_failure_is_503(employees, clock):
    container = assemble(attendance_repo=BrokenRepository(), employees=employees, clock=clock)
    client = create_app(container, settings_module="config.testing").test_client()

    resp = client.post("/api/attendance/checkin", headers=EMPLOYEE)

    assert resp.status_code == 503
    assert resp.get_json()["error"] == "StorageError"


def test_month_summary_with_year_out_of_range_is_400(client):
    resp = client.get("/api/attendance/my-summary?month=1&year=0", headers=EMPLOYEE)

    assert resp.status_code == 400
    assert resp.get_json()["error"] == "ValidationError"


def test_all_attendance_resolves_deactivated_employees(client, employees, attendance_repo):
    employees.employees.append(Employee(6, "EMP099", "Former Staff", "Sales", Role.EMPLOYEE, is_active=False))
    attendance_repo.insert_if_absent(AttendanceRecord(employee_id=6, work_date=date(2026, 2, 2)))

    rows = client.get("/api/attendance/all?employeeId=EMP099", headers=MANAGER).get_json()

    assert rows[0]["employee"]["name"] == "Former Staff"
