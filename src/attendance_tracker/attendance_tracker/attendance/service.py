from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Sequence

from ..common.clock import Clock
from ..common.datetime_utils import iso_or_none
from ..common.time_windows import as_date_range, calendar_day, month_bounds
from ..common.validators import require_month, require_ordered_range, require_positive_int, require_year
from ..core.constants import DEFAULT_HISTORY_LIMIT, DEFAULT_RECORDS_LIMIT
from ..core.enums import AttendanceStatus
from ..core.exceptions import (
    AlreadyCheckedIn,
    AlreadyCheckedOut,
    NotCheckedIn,
    RecordConflict,
    ValidationError,
)
from ..employees.model import Actor, require_manager
from ..employees.repository import EmployeeDirectory
from .factory import AttendanceStrategyFactory
from .model import AttendanceRecord, RecordFilter, RecordKey
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CheckInResult:
    check_in_time: datetime
    status: AttendanceStatus


@dataclass(frozen=True)
class CheckOutResult:
    check_out_time: datetime
    total_hours: Decimal


@dataclass(frozen=True)
class TodayStatus:
    checked_in: bool
    checked_out: bool
    status: AttendanceStatus
    check_in_time: Optional[datetime] = None
    check_out_time: Optional[datetime] = None
    total_hours: Decimal = Decimal("0")

    @classmethod
    def from_record(cls, record: Optional[AttendanceRecord]) -> "TodayStatus":
        if record is None:
            return cls(checked_in=False, checked_out=False, status=AttendanceStatus.ABSENT)
        return cls(
            checked_in=record.checked_in,
            checked_out=record.checked_out,
            status=record.status,
            check_in_time=record.check_in_time,
            check_out_time=record.check_out_time,
            total_hours=record.total_hours,
        )

    def to_dict(self) -> dict:
        return {
            "checked_in": self.checked_in,
            "checked_out": self.checked_out,
            "check_in_time": iso_or_none(self.check_in_time),
            "check_out_time": iso_or_none(self.check_out_time),
            "status": self.status.value,
            "total_hours": str(self.total_hours),
        }


def record_to_dict(r: AttendanceRecord) -> dict:
    return {
        "employee_id": r.employee_id,
        "date": r.work_date.isoformat(),
        "check_in_time": iso_or_none(r.check_in_time),
        "check_out_time": iso_or_none(r.check_out_time),
        "status": r.status.value,
        "total_hours": str(r.total_hours),
    }


class AttendanceService:
    """Check-in / check-out transactions and record queries."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeDirectory,
        clock: Clock,
        *,
        strategy_factory: AttendanceStrategyFactory | None = None,
        history_limit: int = DEFAULT_HISTORY_LIMIT,
        records_limit: int = DEFAULT_RECORDS_LIMIT,
    ):
        self._attendance = attendance
        self._employees = employees
        self._clock = clock
        self._factory = strategy_factory or AttendanceStrategyFactory()
        self._history_limit = int(history_limit)
        self._records_limit = int(records_limit)

    def _resolve_now(self, now: datetime | None) -> datetime:
        if now is None:
            return self._clock.now()
        if now.tzinfo is None:
            return now.replace(tzinfo=self._clock.tz)
        return now.astimezone(self._clock.tz)

    def _key(self, employee_id: int, now: datetime) -> RecordKey:
        return RecordKey(int(employee_id), calendar_day(now, self._clock.tz))

    # ----- transactions -----

    def check_in(self, employee_id: int, *, now: datetime | None = None) -> CheckInResult:
        now = self._resolve_now(now)
        key = self._key(employee_id, now)

        existing = self._attendance.get(key)
        if existing and existing.checked_in:
            logger.info("Rejected check-in: employee=%s day=%s already checked in", key.employee_id, key.work_date)
            raise AlreadyCheckedIn("Already checked in today")

        decision = self._factory.for_checkin(now=now).decide_checkin(now=now)

        if existing:
            # Day record created earlier without a check-in (absence mark, override).
            if not self._attendance.set_check_in(key, check_in_time=now, status=decision.status):
                raise AlreadyCheckedIn("Already checked in today")
        else:
            try:
                self._attendance.insert_if_absent(
                    AttendanceRecord(
                        employee_id=key.employee_id,
                        work_date=key.work_date,
                        check_in_time=now,
                        status=decision.status,
                    )
                )
            except RecordConflict:
                logger.info("Concurrent check-in lost: employee=%s day=%s", key.employee_id, key.work_date)
                raise AlreadyCheckedIn("Already checked in today")

        logger.info(
            "Check-in recorded: employee=%s day=%s status=%s%s",
            key.employee_id,
            key.work_date,
            decision.status.value,
            f" ({decision.note})" if decision.note else "",
        )
        return CheckInResult(check_in_time=now, status=decision.status)

    def check_out(self, employee_id: int, *, now: datetime | None = None) -> CheckOutResult:
        now = self._resolve_now(now)
        key = self._key(employee_id, now)

        record = self._attendance.get(key)
        if not record or not record.checked_in:
            raise NotCheckedIn("Please check in first")
        if record.checked_out:
            raise AlreadyCheckedOut("Already checked out today")
        if now < record.check_in_time:
            raise ValidationError("Check-out cannot be earlier than check-in")

        if not self._attendance.set_check_out(key, check_out_time=now):
            raise AlreadyCheckedOut("Already checked out today")

        closed = record.with_check_out(now)
        logger.info(
            "Check-out recorded: employee=%s day=%s hours=%s",
            key.employee_id,
            key.work_date,
            closed.total_hours,
        )
        return CheckOutResult(check_out_time=now, total_hours=closed.total_hours)

    def get_today_status(self, employee_id: int, *, now: datetime | None = None) -> TodayStatus:
        now = self._resolve_now(now)
        return TodayStatus.from_record(self._attendance.get(self._key(employee_id, now)))

    # ----- administrative paths -----

    def override_status(
        self,
        actor: Actor,
        *,
        employee_id: int,
        work_date: date,
        status: AttendanceStatus,
    ) -> AttendanceRecord:
        """Manager correction of a day's status; the only source of ``half-day``."""

        require_manager(actor)
        key = RecordKey(int(employee_id), work_date)
        try:
            self._attendance.insert_if_absent(
                AttendanceRecord(employee_id=key.employee_id, work_date=key.work_date, status=status)
            )
        except RecordConflict:
            self._attendance.set_status(key, status=status)

        logger.info(
            "Status override: employee=%s day=%s status=%s by=%s",
            key.employee_id,
            key.work_date,
            status.value,
            actor.employee_id,
        )
        return self._attendance.get(key)

    def mark_absent(self, actor: Actor, *, employee_id: int, work_date: date) -> AttendanceRecord:
        require_manager(actor)
        key = RecordKey(int(employee_id), work_date)
        try:
            return self._attendance.insert_if_absent(
                AttendanceRecord(employee_id=key.employee_id, work_date=key.work_date)
            )
        except RecordConflict:
            return self._attendance.get(key)

    # ----- queries -----

    def history(
        self,
        employee_id: int,
        *,
        start: date | None = None,
        end: date | None = None,
        limit: int | None = None,
    ) -> Sequence[AttendanceRecord]:
        require_ordered_range(start, end)
        limit = require_positive_int(limit if limit is not None else self._history_limit, "limit")
        return self._attendance.find(employee_ids=[int(employee_id)], start_date=start, end_date=end, limit=limit)

    def month_history(self, employee_id: int, *, month: int, year: int, limit: int | None = None) -> Sequence[AttendanceRecord]:
        start, end = as_date_range(month_bounds(require_month(month), require_year(year), self._clock.tz))
        return self.history(employee_id, start=start, end=end, limit=limit)

    def find_records(self, filters: RecordFilter, *, limit: int | None = None) -> Sequence[AttendanceRecord]:
        require_ordered_range(filters.start, filters.end)
        limit = require_positive_int(limit if limit is not None else self._records_limit, "limit")

        employee_ids: set[int] | None = None
        if filters.employee_id is not None:
            employee_ids = {int(filters.employee_id)}
        if filters.employee_code:
            employee = self._employees.get_by_code(filters.employee_code)
            if not employee:
                return []
            employee_ids = {employee.employee_id} if employee_ids is None else employee_ids & {employee.employee_id}
        if filters.department:
            members = self._employees.list_employees(department=filters.department, include_inactive=True)
            dept_ids = {e.employee_id for e in members}
            employee_ids = dept_ids if employee_ids is None else employee_ids & dept_ids

        return self._attendance.find(
            employee_ids=employee_ids,
            start_date=filters.start,
            end_date=filters.end,
            status=filters.status,
            limit=limit,
        )
