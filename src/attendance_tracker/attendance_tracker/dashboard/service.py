from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

from ..attendance.model import AttendanceRecord
from ..attendance.service import AttendanceService, TodayStatus, record_to_dict
from ..common.clock import Clock
from ..common.time_windows import calendar_day
from ..core.constants import DEFAULT_RECENT_LIMIT
from ..core.enums import AttendanceStatus
from ..employees.model import Actor, Employee, require_manager
from ..reports.aggregation import (
    StatusCounts,
    TrendPoint,
    breakdown_to_dict,
    counts_as_present,
    employee_to_dict,
)
from ..reports.service import MonthSummary, ReportService


@dataclass(frozen=True)
class EmployeeDashboard:
    today: TodayStatus
    month: MonthSummary
    recent: list[AttendanceRecord]

    def to_dict(self) -> dict:
        month = self.month.summary
        return {
            "today_status": self.today.to_dict(),
            "month_summary": {
                "present": month.present,
                "absent": month.absent,
                "late": month.late,
                "total_hours": str(month.total_hours),
            },
            "recent_attendance": [record_to_dict(r) for r in self.recent],
        }


@dataclass(frozen=True)
class ManagerDashboard:
    total_employees: int
    present_today: int
    absent_today: int
    late_arrivals: int
    weekly_trend: list[TrendPoint]
    department_wise: dict[str, StatusCounts]
    absent_employees: list[Employee]

    def to_dict(self) -> dict:
        return {
            "total_employees": self.total_employees,
            "today_attendance": {
                "present": self.present_today,
                "absent": self.absent_today,
                "late_arrivals": self.late_arrivals,
            },
            "weekly_trend": [p.to_dict() for p in self.weekly_trend],
            "department_wise": breakdown_to_dict(self.department_wise),
            "absent_employees": [employee_to_dict(e) for e in self.absent_employees],
        }


class DashboardService:
    """Composes the per-role landing views out of the other services."""

    def __init__(self, attendance: AttendanceService, reports: ReportService, clock: Clock):
        self._attendance = attendance
        self._reports = reports
        self._clock = clock

    def employee_dashboard(self, employee_id: int) -> EmployeeDashboard:
        now = self._clock.now()
        today = calendar_day(now, self._clock.tz)
        recent = self._attendance.history(
            employee_id,
            start=today - timedelta(days=DEFAULT_RECENT_LIMIT),
            end=today,
            limit=DEFAULT_RECENT_LIMIT,
        )
        return EmployeeDashboard(
            today=self._attendance.get_today_status(employee_id, now=now),
            month=self._reports.personal_month_summary(employee_id, month=today.month, year=today.year),
            recent=list(recent),
        )

    def manager_dashboard(self, actor: Actor) -> ManagerDashboard:
        require_manager(actor)
        staff = self._reports.staff()
        todays = self._reports.today_status_for_all(actor)
        present = sum(1 for s in todays if counts_as_present(s.status))
        late = sum(1 for s in todays if s.status == AttendanceStatus.LATE)

        return ManagerDashboard(
            total_employees=len(staff),
            present_today=present,
            absent_today=len(staff) - present,
            late_arrivals=late,
            weekly_trend=self._reports.weekly_trend(actor),
            department_wise=self._reports.department_month_breakdown(actor),
            absent_employees=self._reports.absentees_today(actor),
        )
