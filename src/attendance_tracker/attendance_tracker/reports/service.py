from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Collection, Optional, Sequence

from ..attendance.model import AttendanceRecord, RecordFilter
from ..attendance.repository import AttendanceRepository
from ..attendance.service import AttendanceService, record_to_dict
from ..common.clock import Clock
from ..common.time_windows import as_date_range, calendar_day, day_bounds, month_bounds, trailing_days
from ..common.validators import require_month, require_year
from ..core.enums import Role
from ..employees.model import Actor, Employee, require_manager
from ..employees.repository import EmployeeDirectory
from .aggregation import (
    DayCounts,
    EmployeeDayStatus,
    StatusCounts,
    StatusSummary,
    TrendPoint,
    absent_today,
    breakdown_to_dict,
    day_counts,
    department_breakdown,
    summarize,
    today_status_for_all,
    weekly_trend,
)
from .export import ExportRow, build_export_rows

logger = logging.getLogger(__name__)

DEFAULT_EXPORT_LIMIT = 10000


@dataclass(frozen=True)
class MonthSummary:
    month: int
    year: int
    summary: StatusSummary

    def to_dict(self) -> dict:
        return {"month": self.month, "year": self.year, **self.summary.to_dict()}


@dataclass(frozen=True)
class TeamMonthSummary:
    month: int
    year: int
    total_employees: int
    total_records: int
    summary: StatusSummary
    department_wise: dict[str, StatusCounts] = field(default_factory=dict)

    def to_dict(self) -> dict:
        data = {
            "month": self.month,
            "year": self.year,
            "total_employees": self.total_employees,
            "total_records": self.total_records,
        }
        data.update(self.summary.to_dict())
        data["department_wise"] = breakdown_to_dict(self.department_wise)
        return data


@dataclass(frozen=True)
class CalendarDay:
    counts: DayCounts
    records: list[AttendanceRecord]

    def to_dict(self) -> dict:
        return {**self.counts.to_dict(), "records": [record_to_dict(r) for r in self.records]}


class ReportService:
    """Read-side use cases: summaries, trends, absentee lists and exports."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeDirectory,
        clock: Clock,
        *,
        queries: AttendanceService,
        export_limit: int = DEFAULT_EXPORT_LIMIT,
    ):
        self._attendance = attendance
        self._employees = employees
        self._clock = clock
        self._queries = queries
        self._export_limit = int(export_limit)

    def _today(self) -> date:
        return calendar_day(self._clock.now(), self._clock.tz)

    def _month_or_current(self, month: Optional[int], year: Optional[int]) -> tuple[int, int]:
        today = self._today()
        m = require_month(month) if month is not None else today.month
        y = require_year(year) if year is not None else today.year
        return m, y

    def _month_records(self, month: int, year: int, employee_ids: Optional[Collection[int]] = None) -> Sequence[AttendanceRecord]:
        start, end = as_date_range(month_bounds(month, year, self._clock.tz))
        return self._attendance.find(employee_ids=employee_ids, start_date=start, end_date=end)

    def _day_records(self, day: date, employee_ids: Optional[Collection[int]] = None) -> Sequence[AttendanceRecord]:
        start, end = as_date_range(day_bounds(day, self._clock.tz))
        return self._attendance.find(employee_ids=employee_ids, start_date=start, end_date=end)

    def _employee_lookup(self):
        # Deactivated employees still own their past records.
        by_id = {e.employee_id: e for e in self._employees.list_employees(include_inactive=True)}
        return by_id.get

    def staff(self) -> Sequence[Employee]:
        """Employees counted by team reports (managers excluded)."""
        return self._employees.list_employees(role=Role.EMPLOYEE)

    def _staff_ids(self, staff: Sequence[Employee]) -> list[int]:
        return [e.employee_id for e in staff]

    def personal_month_summary(self, employee_id: int, *, month: Optional[int] = None, year: Optional[int] = None) -> MonthSummary:
        m, y = self._month_or_current(month, year)
        return MonthSummary(month=m, year=y, summary=summarize(self._month_records(m, y, [int(employee_id)])))

    def team_month_summary(self, actor: Actor, *, month: Optional[int] = None, year: Optional[int] = None) -> TeamMonthSummary:
        require_manager(actor)
        m, y = self._month_or_current(month, year)
        staff = self.staff()
        records = self._month_records(m, y, self._staff_ids(staff))
        logger.debug("Team summary %s-%02d over %d records", y, m, len(records))
        return TeamMonthSummary(
            month=m,
            year=y,
            total_employees=len(staff),
            total_records=len(records),
            summary=summarize(records),
            department_wise=department_breakdown(records, self._employee_lookup()),
        )

    def department_month_breakdown(self, actor: Actor, *, month: Optional[int] = None, year: Optional[int] = None) -> dict[str, StatusCounts]:
        require_manager(actor)
        m, y = self._month_or_current(month, year)
        records = self._month_records(m, y, self._staff_ids(self.staff()))
        return department_breakdown(records, self._employee_lookup())

    def weekly_trend(self, actor: Actor) -> list[TrendPoint]:
        require_manager(actor)
        staff = self.staff()
        days = trailing_days(self._today())
        records = self._attendance.find(employee_ids=self._staff_ids(staff), start_date=days[0], end_date=days[-1])
        return weekly_trend(days[-1], len(staff), records, days=len(days))

    def absentees_today(self, actor: Actor) -> list[Employee]:
        require_manager(actor)
        staff = self.staff()
        return absent_today(staff, self._day_records(self._today(), self._staff_ids(staff)))

    def today_status_for_all(self, actor: Actor) -> list[EmployeeDayStatus]:
        require_manager(actor)
        staff = self.staff()
        return today_status_for_all(staff, self._day_records(self._today(), self._staff_ids(staff)))

    def team_calendar_day(self, actor: Actor, day: date) -> CalendarDay:
        require_manager(actor)
        records = list(self._day_records(day, self._staff_ids(self.staff())))
        return CalendarDay(counts=day_counts(records, day), records=records)

    def export_rows(self, actor: Actor, filters: RecordFilter) -> list[ExportRow]:
        require_manager(actor)
        records = self._queries.find_records(filters, limit=self._export_limit)
        logger.info("Export of %d attendance rows by manager=%s", len(records), actor.employee_id)
        return build_export_rows(records, self._employee_lookup())
