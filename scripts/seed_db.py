"""Reset attendance and load the demo directory plus 30 days of records.

Usage: python scripts/seed_db.py [--keep] [--days N] [--seed N]
"""

from __future__ import annotations

import argparse
import importlib
import random
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.attendance_tracker.attendance_tracker.attendance.mysql_attendance_repository import MySQLAttendanceRepository
from src.attendance_tracker.attendance_tracker.common.clock import SystemClock
from src.attendance_tracker.attendance_tracker.common.datetime_utils import resolve_zone
from src.attendance_tracker.attendance_tracker.common.time_windows import calendar_day
from src.attendance_tracker.attendance_tracker.core.exceptions import RecordConflict
from src.attendance_tracker.attendance_tracker.database.bootstrap import reset_attendance, upsert_employees
from src.attendance_tracker.attendance_tracker.database.connection import DBConfig, DatabaseConnection
from src.attendance_tracker.attendance_tracker.database.seed import DEMO_EMPLOYEES, demo_records
from src.attendance_tracker.attendance_tracker.main import configure_logging


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--keep", action="store_true", help="do not delete existing attendance first")
    parser.add_argument("--days", type=int, default=30)
    parser.add_argument("--seed", type=int, default=None, help="random seed for reproducible data")
    args = parser.parse_args()

    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    db_config = dict(settings.DB_CONFIG)
    tz = resolve_zone(getattr(settings, "ATTENDANCE_TIMEZONE", "UTC"))

    upsert_employees(db_config, DEMO_EMPLOYEES)
    if not args.keep:
        reset_attendance(db_config)

    repo = MySQLAttendanceRepository(DatabaseConnection(DBConfig(**db_config)), tz=tz)
    today = calendar_day(SystemClock(tz).now(), tz)
    created = skipped = 0
    for record in demo_records(DEMO_EMPLOYEES, today=today, tz=tz, days=args.days, rng=random.Random(args.seed)):
        try:
            repo.insert_if_absent(record)
            created += 1
        except RecordConflict:
            skipped += 1

    print(
        "OK: Seeded database -> "
        f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')} "
        f"(employees={len(DEMO_EMPLOYEES)}, records={created}, skipped={skipped})"
    )


if __name__ == "__main__":
    main()
