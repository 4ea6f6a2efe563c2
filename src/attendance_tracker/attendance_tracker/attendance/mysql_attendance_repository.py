from __future__ import annotations

from datetime import date, datetime, timezone, tzinfo
from typing import Any, Collection, Dict, Optional, Sequence

from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, from_db_timestamp, to_db_timestamp
from .model import AttendanceRecord, RecordKey
from .repository import AttendanceRepository
from .rules import derive_hours

_COLUMNS = "employee_id, work_date, check_in_time, check_out_time, status, total_hours, created_at"


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection, *, tz: tzinfo = timezone.utc):
        self._conn_factory = conn_factory
        self._tz = tz

    def _to_record(self, r: Dict[str, Any]) -> AttendanceRecord:
        return AttendanceRecord(
            employee_id=int(r["employee_id"]),
            work_date=r["work_date"],
            check_in_time=from_db_timestamp(r.get("check_in_time"), self._tz),
            check_out_time=from_db_timestamp(r.get("check_out_time"), self._tz),
            status=AttendanceStatus(r["status"]),
            created_at=from_db_timestamp(r.get("created_at"), self._tz),
        )

    def get(self, key: RecordKey) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE employee_id=%s AND work_date=%s
                """,
                (key.employee_id, key.work_date),
            )
            r = fetchone(cur)
            return self._to_record(r) if r else None

    def insert_if_absent(self, record: AttendanceRecord) -> AttendanceRecord:
        # The composite primary key turns a concurrent duplicate into ER_DUP_ENTRY,
        # which db_cursor raises as RecordConflict.
        created_at = record.created_at or datetime.now(timezone.utc)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_records(
                    employee_id, work_date, check_in_time, check_out_time, status, total_hours, created_at
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    record.employee_id,
                    record.work_date,
                    to_db_timestamp(record.check_in_time),
                    to_db_timestamp(record.check_out_time),
                    record.status.value,
                    record.total_hours,
                    to_db_timestamp(created_at),
                ),
            )
        return AttendanceRecord(
            employee_id=record.employee_id,
            work_date=record.work_date,
            check_in_time=record.check_in_time,
            check_out_time=record.check_out_time,
            status=record.status,
            created_at=created_at.astimezone(self._tz),
        )

    def set_check_in(self, key: RecordKey, *, check_in_time: datetime, status: AttendanceStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET check_in_time=%s, status=%s
                WHERE employee_id=%s AND work_date=%s AND check_in_time IS NULL
                """,
                (to_db_timestamp(check_in_time), status.value, key.employee_id, key.work_date),
            )
            return cur.rowcount > 0

    def set_check_out(self, key: RecordKey, *, check_out_time: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT check_in_time, check_out_time
                FROM attendance_records
                WHERE employee_id=%s AND work_date=%s
                FOR UPDATE
                """,
                (key.employee_id, key.work_date),
            )
            r = fetchone(cur)
            if not r or r.get("check_in_time") is None or r.get("check_out_time") is not None:
                return False

            check_in_time = from_db_timestamp(r["check_in_time"], self._tz)
            if check_out_time < check_in_time:
                raise ValidationError("Check-out cannot be earlier than check-in")

            cur.execute(
                """
                UPDATE attendance_records
                SET check_out_time=%s, total_hours=%s
                WHERE employee_id=%s AND work_date=%s AND check_out_time IS NULL
                """,
                (
                    to_db_timestamp(check_out_time),
                    derive_hours(check_in_time, check_out_time),
                    key.employee_id,
                    key.work_date,
                ),
            )
            return cur.rowcount > 0

    def set_status(self, key: RecordKey, *, status: AttendanceStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET status=%s
                WHERE employee_id=%s AND work_date=%s
                """,
                (status.value, key.employee_id, key.work_date),
            )
            return cur.rowcount > 0

    def find(
        self,
        *,
        employee_ids: Optional[Collection[int]] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        status: Optional[AttendanceStatus] = None,
        limit: Optional[int] = None,
    ) -> Sequence[AttendanceRecord]:
        clauses: list[str] = []
        params: list[object] = []

        if employee_ids is not None:
            ids = sorted({int(i) for i in employee_ids})
            if not ids:
                return []
            clauses.append(f"employee_id IN ({', '.join(['%s'] * len(ids))})")
            params.extend(ids)
        if start_date is not None:
            clauses.append("work_date >= %s")
            params.append(start_date)
        if end_date is not None:
            clauses.append("work_date <= %s")
            params.append(end_date)
        if status is not None:
            clauses.append("status=%s")
            params.append(status.value)

        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        limit_sql = ""
        if limit is not None:
            limit_sql = "LIMIT %s"
            params.append(int(limit))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                {where}
                ORDER BY work_date DESC, employee_id ASC
                {limit_sql}
                """,
                tuple(params),
            )
            return [self._to_record(r) for r in fetchall(cur)]
