from __future__ import annotations

from dataclasses import dataclass
from datetime import time
from typing import Optional

from .attendance.factory import AttendanceStrategyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .common.clock import Clock, SystemClock
from .common.datetime_utils import resolve_zone
from .core.constants import DEFAULT_HISTORY_LIMIT, DEFAULT_LATE_CUTOFF, DEFAULT_RECORDS_LIMIT, DEFAULT_TIMEZONE
from .dashboard.service import DashboardService
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeDirectory
from .employees.repository import EmployeeDirectory
from .reports.service import DEFAULT_EXPORT_LIMIT, ReportService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]
    clock: Clock

    attendance_repo: AttendanceRepository
    employees: EmployeeDirectory

    attendance_service: AttendanceService
    report_service: ReportService
    dashboard_service: DashboardService


def assemble(
    *,
    attendance_repo: AttendanceRepository,
    employees: EmployeeDirectory,
    clock: Clock,
    conn: Optional[DatabaseConnection] = None,
    late_cutoff: time = DEFAULT_LATE_CUTOFF,
    history_limit: int = DEFAULT_HISTORY_LIMIT,
    records_limit: int = DEFAULT_RECORDS_LIMIT,
    export_limit: int = DEFAULT_EXPORT_LIMIT,
) -> Container:
    """Wire services over already-built stores (MySQL in production, memory in tests)."""

    attendance_service = AttendanceService(
        attendance_repo,
        employees,
        clock,
        strategy_factory=AttendanceStrategyFactory(cutoff=late_cutoff),
        history_limit=history_limit,
        records_limit=records_limit,
    )
    report_service = ReportService(
        attendance_repo,
        employees,
        clock,
        queries=attendance_service,
        export_limit=export_limit,
    )
    dashboard_service = DashboardService(attendance_service, report_service, clock)

    return Container(
        conn=conn,
        clock=clock,
        attendance_repo=attendance_repo,
        employees=employees,
        attendance_service=attendance_service,
        report_service=report_service,
        dashboard_service=dashboard_service,
    )


def build_container(
    *,
    db_config: dict,
    timezone_name: str = DEFAULT_TIMEZONE,
    late_cutoff: time = DEFAULT_LATE_CUTOFF,
    history_limit: int = DEFAULT_HISTORY_LIMIT,
    records_limit: int = DEFAULT_RECORDS_LIMIT,
) -> Container:
    config = DBConfig(
        host=str(db_config["host"]),
        port=int(db_config.get("port", 3306)),
        user=str(db_config["user"]),
        password=str(db_config["password"]),
        database=str(db_config["database"]),
    )
    conn = DatabaseConnection.get_instance(config)
    tz = resolve_zone(timezone_name)

    return assemble(
        attendance_repo=MySQLAttendanceRepository(conn, tz=tz),
        employees=MySQLEmployeeDirectory(conn),
        clock=SystemClock(tz),
        conn=conn,
        late_cutoff=late_cutoff,
        history_limit=history_limit,
        records_limit=records_limit,
    )
