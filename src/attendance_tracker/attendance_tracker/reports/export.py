from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Iterable, Mapping, Optional

from ..attendance.model import AttendanceRecord
from ..core.constants import NOT_AVAILABLE
from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError
from .aggregation import EmployeeLookup

EXPORT_COLUMNS = (
    "date",
    "employee_id",
    "name",
    "department",
    "check_in_time",
    "check_out_time",
    "status",
    "total_hours",
)

# Header titles for delimited-text writers.
EXPORT_TITLES = {
    "date": "Date",
    "employee_id": "Employee ID",
    "name": "Name",
    "department": "Department",
    "check_in_time": "Check In Time",
    "check_out_time": "Check Out Time",
    "status": "Status",
    "total_hours": "Total Hours",
}


@dataclass(frozen=True)
class ExportRow:
    """One tabular row of the attendance export."""

    work_date: date
    employee_code: Optional[str]
    name: Optional[str]
    department: Optional[str]
    check_in_time: Optional[datetime]
    check_out_time: Optional[datetime]
    status: AttendanceStatus
    total_hours: Decimal

    def to_dict(self) -> dict[str, str]:
        return {
            "date": self.work_date.isoformat(),
            "employee_id": self.employee_code or NOT_AVAILABLE,
            "name": self.name or NOT_AVAILABLE,
            "department": self.department or NOT_AVAILABLE,
            "check_in_time": self.check_in_time.isoformat() if self.check_in_time else NOT_AVAILABLE,
            "check_out_time": self.check_out_time.isoformat() if self.check_out_time else NOT_AVAILABLE,
            "status": self.status.value,
            "total_hours": f"{self.total_hours:.2f}",
        }


def build_export_rows(records: Iterable[AttendanceRecord], employee_lookup: EmployeeLookup) -> list[ExportRow]:
    rows = []
    for r in records:
        employee = employee_lookup(r.employee_id)
        rows.append(
            ExportRow(
                work_date=r.work_date,
                employee_code=employee.employee_code if employee else None,
                name=employee.full_name if employee else None,
                department=employee.department if employee else None,
                check_in_time=r.check_in_time,
                check_out_time=r.check_out_time,
                status=r.status,
                total_hours=r.total_hours,
            )
        )
    return rows


def _optional(value: Optional[str]) -> Optional[str]:
    value = (value or "").strip()
    return None if not value or value == NOT_AVAILABLE else value


def _optional_timestamp(value: Optional[str], field_name: str) -> Optional[datetime]:
    value = _optional(value)
    if value is None:
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        raise ValidationError(f"Invalid {field_name} {value!r}")


def parse_export_row(cells: Mapping[str, str]) -> ExportRow:
    """Rebuild typed values from the string cells produced by ``to_dict``."""

    try:
        work_date = date.fromisoformat(cells["date"])
        status = AttendanceStatus(cells["status"])
        total_hours = Decimal(cells.get("total_hours") or "0")
    except (KeyError, ValueError, InvalidOperation) as e:
        raise ValidationError(f"Malformed export row: {e}")

    return ExportRow(
        work_date=work_date,
        employee_code=_optional(cells.get("employee_id")),
        name=_optional(cells.get("name")),
        department=_optional(cells.get("department")),
        check_in_time=_optional_timestamp(cells.get("check_in_time"), "check_in_time"),
        check_out_time=_optional_timestamp(cells.get("check_out_time"), "check_out_time"),
        status=status,
        total_hours=total_hours,
    )
