from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import mysql.connector
import pytest
from mysql.connector import errorcode

from src.attendance_tracker.attendance_tracker.attendance.model import AttendanceRecord, RecordKey
from src.attendance_tracker.attendance_tracker.attendance.mysql_attendance_repository import (
    MySQLAttendanceRepository,
)
from src.attendance_tracker.attendance_tracker.core.enums import AttendanceStatus
from src.attendance_tracker.attendance_tracker.core.exceptions import RecordConflict, StorageError, ValidationError

PLUS_7 = timezone(timedelta(hours=7))


class FakeCursor:
    def __init__(self, conn):
        self._conn = conn
        self.rowcount = 0
        self._rows = []

    def execute(self, sql, params=()):
        self._conn.executed.append((" ".join(sql.split()), tuple(params)))
        if self._conn.error is not None:
            raise self._conn.error
        self._rows = self._conn.results.pop(0) if self._conn.results else []
        self.rowcount = self._conn.rowcount

    def fetchone(self):
        return self._rows[0] if self._rows else None

    def fetchall(self):
        return list(self._rows)

    def close(self):
        pass


class FakeConnection:
    def __init__(self, *, results=None, rowcount=0, error=None):
        self.results = list(results or [])
        self.rowcount = rowcount
        self.error = error
        self.executed = []
        self.committed = False
        self.rolled_back = False
        self.closed = False

    def cursor(self, dictionary=False):
        return FakeCursor(self)

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True

    def close(self):
        self.closed = True


class FakeConnFactory:
    def __init__(self, conn: FakeConnection):
        self.conn = conn
        self.connects = 0

    def connect(self):
        self.connects += 1
        return self.conn


def _repo(conn, tz=timezone.utc):
    return MySQLAttendanceRepository(FakeConnFactory(conn), tz=tz)


def test_get_converts_stored_utc_to_configured_zone():
    conn = FakeConnection(
        results=[
            [
                {
                    "employee_id": 2,
                    "work_date": date(2026, 2, 4),
                    "check_in_time": datetime(2026, 2, 4, 1, 30),
                    "check_out_time": datetime(2026, 2, 4, 10, 0),
                    "status": "present",
                    "total_hours": Decimal("8.50"),
                    "created_at": datetime(2026, 2, 4, 1, 30),
                }
            ]
        ]
    )

    record = _repo(conn, PLUS_7).get(RecordKey(2, date(2026, 2, 4)))

    assert record.check_in_time == datetime(2026, 2, 4, 8, 30, tzinfo=PLUS_7)
    assert record.check_in_time.utcoffset() == timedelta(hours=7)
    assert record.total_hours == Decimal("8.50")
    assert record.status == AttendanceStatus.PRESENT
    assert conn.committed and conn.closed


def test_get_missing_returns_none():
    assert _repo(FakeConnection()).get(RecordKey(2, date(2026, 2, 4))) is None


def test_insert_stores_naive_utc_timestamps():
    conn = FakeConnection(rowcount=1)
    check_in = datetime(2026, 2, 4, 8, 30, tzinfo=PLUS_7)

    _repo(conn).insert_if_absent(
        AttendanceRecord(employee_id=2, work_date=date(2026, 2, 4), check_in_time=check_in, status=AttendanceStatus.PRESENT)
    )

    sql, params = conn.executed[0]
    assert sql.startswith("INSERT INTO attendance_records")
    assert params[2] == datetime(2026, 2, 4, 1, 30)
    assert params[4] == "present"


def test_duplicate_insert_raises_record_conflict():
    conn = FakeConnection(error=mysql.connector.IntegrityError(msg="Duplicate entry", errno=errorcode.ER_DUP_ENTRY))

    with pytest.raises(RecordConflict):
        _repo(conn).insert_if_absent(AttendanceRecord(employee_id=2, work_date=date(2026, 2, 4)))

    assert conn.rolled_back and conn.closed
    assert not conn.committed


def test_other_integrity_errors_are_storage_errors():
    conn = FakeConnection(error=mysql.connector.IntegrityError(msg="FK fails", errno=errorcode.ER_NO_REFERENCED_ROW_2))

    with pytest.raises(StorageError):
        _repo(conn).insert_if_absent(AttendanceRecord(employee_id=99, work_date=date(2026, 2, 4)))


def test_driver_failure_surfaces_as_storage_error():
    conn = FakeConnection(error=mysql.connector.OperationalError(msg="Lost connection", errno=2013))

    with pytest.raises(StorageError):
        _repo(conn).find()

    assert conn.rolled_back


def test_set_check_in_only_when_unset():
    conn = FakeConnection(rowcount=0)

    assert _repo(conn).set_check_in(
        RecordKey(2, date(2026, 2, 4)),
        check_in_time=datetime(2026, 2, 4, 8, 0, tzinfo=timezone.utc),
        status=AttendanceStatus.PRESENT,
    ) is False
    assert "check_in_time IS NULL" in conn.executed[0][0]


def test_set_check_out_refuses_closed_day():
    conn = FakeConnection(
        results=[[{"check_in_time": datetime(2026, 2, 4, 8, 0), "check_out_time": datetime(2026, 2, 4, 17, 0)}]]
    )

    ok = _repo(conn).set_check_out(RecordKey(2, date(2026, 2, 4)), check_out_time=datetime(2026, 2, 4, 18, 0, tzinfo=timezone.utc))

    assert ok is False
    assert len(conn.executed) == 1
    assert conn.executed[0][0].endswith("FOR UPDATE")


def test_set_check_out_writes_derived_hours():
    conn = FakeConnection(results=[[{"check_in_time": datetime(2026, 2, 4, 8, 0), "check_out_time": None}]], rowcount=1)

    ok = _repo(conn).set_check_out(RecordKey(2, date(2026, 2, 4)), check_out_time=datetime(2026, 2, 4, 16, 45, tzinfo=timezone.utc))

    assert ok is True
    _, params = conn.executed[1]
    assert params[:2] == (datetime(2026, 2, 4, 16, 45), Decimal("8.75"))


def test_find_builds_filters_and_limit():
    conn = FakeConnection()

    _repo(conn).find(
        employee_ids=[3, 2, 3],
        start_date=date(2026, 2, 1),
        end_date=date(2026, 2, 28),
        status=AttendanceStatus.LATE,
        limit=10,
    )

    sql, params = conn.executed[0]
    assert "employee_id IN (%s, %s)" in sql
    assert "ORDER BY work_date DESC, employee_id ASC" in sql
    assert params == (2, 3, date(2026, 2, 1), date(2026, 2, 28), "late", 10)


def test_find_with_empty_employee_set_skips_database():
    factory = FakeConnFactory(FakeConnection())

    assert MySQLAttendanceRepository(factory).find(employee_ids=[]) == []
    assert factory.connects == 0


def test_set_check_out_before_stored_checkin_is_a_validation_error():
    conn = FakeConnection(results=[[{"check_in_time": datetime(2026, 2, 4, 9, 0), "check_out_time": None}]], rowcount=1)

    with pytest.raises(ValidationError):
        _repo(conn).set_check_out(RecordKey(2, date(2026, 2, 4)), check_out_time=datetime(2026, 2, 4, 8, 0, tzinfo=timezone.utc))

    assert len(conn.executed) == 1
    assert conn.rolled_back and not conn.committed
