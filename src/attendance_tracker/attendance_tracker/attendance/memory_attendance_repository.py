from __future__ import annotations

import threading
from datetime import date, datetime
from typing import Callable, Collection, Optional, Sequence

from ..core.enums import AttendanceStatus
from ..core.exceptions import RecordConflict
from .model import AttendanceRecord, RecordKey
from .repository import AttendanceRepository


class InMemoryAttendanceRepository(AttendanceRepository):
    """Process-local store.

    A single lock serialises every read-modify-write, which is what gives
    concurrent check-ins for the same key exactly one winner.
    """

    def __init__(self, *, now: Optional[Callable[[], datetime]] = None):
        self._records: dict[RecordKey, AttendanceRecord] = {}
        self._lock = threading.Lock()
        self._now = now

    def get(self, key: RecordKey) -> Optional[AttendanceRecord]:
        with self._lock:
            return self._records.get(key)

    def insert_if_absent(self, record: AttendanceRecord) -> AttendanceRecord:
        with self._lock:
            if record.key in self._records:
                raise RecordConflict(
                    f"Record already exists for employee {record.employee_id} on {record.work_date.isoformat()}"
                )
            if record.created_at is None and self._now is not None:
                record = AttendanceRecord(
                    employee_id=record.employee_id,
                    work_date=record.work_date,
                    check_in_time=record.check_in_time,
                    check_out_time=record.check_out_time,
                    status=record.status,
                    created_at=self._now(),
                )
            self._records[record.key] = record
            return record

    def set_check_in(self, key: RecordKey, *, check_in_time: datetime, status: AttendanceStatus) -> bool:
        with self._lock:
            current = self._records.get(key)
            if current is None or current.checked_in:
                return False
            self._records[key] = current.with_check_in(check_in_time, status)
            return True

    def set_check_out(self, key: RecordKey, *, check_out_time: datetime) -> bool:
        with self._lock:
            current = self._records.get(key)
            if current is None or not current.checked_in or current.checked_out:
                return False
            self._records[key] = current.with_check_out(check_out_time)
            return True

    def set_status(self, key: RecordKey, *, status: AttendanceStatus) -> bool:
        with self._lock:
            current = self._records.get(key)
            if current is None:
                return False
            self._records[key] = current.with_status(status)
            return True

    def find(
        self,
        *,
        employee_ids: Optional[Collection[int]] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        status: Optional[AttendanceStatus] = None,
        limit: Optional[int] = None,
    ) -> Sequence[AttendanceRecord]:
        with self._lock:
            items = list(self._records.values())

        if employee_ids is not None:
            wanted = set(employee_ids)
            items = [r for r in items if r.employee_id in wanted]
        if start_date is not None:
            items = [r for r in items if r.work_date >= start_date]
        if end_date is not None:
            items = [r for r in items if r.work_date <= end_date]
        if status is not None:
            items = [r for r in items if r.status == status]

        items.sort(key=lambda r: (-r.work_date.toordinal(), r.employee_id))
        if limit is not None:
            items = items[: int(limit)]
        return items
