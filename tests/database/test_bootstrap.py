from __future__ import annotations

import random
from datetime import date, time, timezone
from pathlib import Path

from src.attendance_tracker.attendance_tracker.core.enums import AttendanceStatus, Role
from src.attendance_tracker.attendance_tracker.database.bootstrap import iter_sql_statements
from src.attendance_tracker.attendance_tracker.database.seed import DEMO_EMPLOYEES, demo_records

SCHEMA = Path(__file__).resolve().parents[2] / "database" / "schema.sql"


def test_split_ignores_semicolons_in_literals_and_comments():
    sql = """
    -- setup; not a statement
    CREATE TABLE t (note VARCHAR(20) DEFAULT 'a;b');
    INSERT INTO t VALUES ("it\\"s; fine");
    SELECT 1
    """

    statements = list(iter_sql_statements(sql))

    assert statements == [
        "CREATE TABLE t (note VARCHAR(20) DEFAULT 'a;b')",
        'INSERT INTO t VALUES ("it\\"s; fine")',
        "SELECT 1",
    ]


def test_schema_file_declares_both_tables():
    statements = list(iter_sql_statements(SCHEMA.read_text(encoding="utf-8")))

    creates = [s for s in statements if s.upper().startswith("CREATE TABLE")]
    assert any("employees" in s for s in creates)
    assert any("attendance_records" in s and "PRIMARY KEY (employee_id, work_date)" in s for s in creates)


def test_demo_records_skip_weekends_and_managers():
    # 2026-02-08 is a Sunday.
    records = demo_records(
        DEMO_EMPLOYEES,
        today=date(2026, 2, 8),
        tz=timezone.utc,
        days=14,
        attendance_rate=1.0,
        rng=random.Random(7),
    )

    assert records
    assert all(r.work_date.weekday() < 5 for r in records)
    managers = {e.employee_id for e in DEMO_EMPLOYEES if e.role == Role.MANAGER}
    assert not any(r.employee_id in managers for r in records)
    assert len(records) == 10 * 5
    assert len({r.key for r in records}) == len(records)


def test_demo_records_status_follows_checkin_time():
    records = demo_records(DEMO_EMPLOYEES, today=date(2026, 2, 6), tz=timezone.utc, rng=random.Random(3))

    for r in records:
        expected = AttendanceStatus.LATE if r.check_in_time.time() > time(9, 0) else AttendanceStatus.PRESENT
        assert r.status == expected
        assert r.total_hours > 0
