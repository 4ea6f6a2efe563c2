from __future__ import annotations

from datetime import date, datetime
from typing import Collection, Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord, RecordKey


class AttendanceRepository(Protocol):
    """Store of day records keyed by ``RecordKey``.

    Writes are conditional so the read-modify-write of a check-in/out is
    atomic at the store boundary.
    """

    def get(self, key: RecordKey) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def insert_if_absent(self, record: AttendanceRecord) -> AttendanceRecord:
        """Persist a new record; raise ``RecordConflict`` if the key exists."""

        raise NotImplementedError

    def set_check_in(self, key: RecordKey, *, check_in_time: datetime, status: AttendanceStatus) -> bool:
        """Fill the check-in of an existing record that has none yet."""

        raise NotImplementedError

    def set_check_out(self, key: RecordKey, *, check_out_time: datetime) -> bool:
        """Close a checked-in, not yet checked-out record and recompute hours.

        A check-out earlier than the stored check-in raises ``ValidationError``.
        """

        raise NotImplementedError

    def set_status(self, key: RecordKey, *, status: AttendanceStatus) -> bool:
        raise NotImplementedError

    def find(
        self,
        *,
        employee_ids: Optional[Collection[int]] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        status: Optional[AttendanceStatus] = None,
        limit: Optional[int] = None,
    ) -> Sequence[AttendanceRecord]:
        """Records matching every given predicate, newest work day first."""

        raise NotImplementedError
