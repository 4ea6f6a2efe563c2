from __future__ import annotations

from contextlib import contextmanager
from datetime import datetime, timezone, tzinfo
from typing import Any, Dict, List, Optional

import mysql.connector
from mysql.connector import errorcode

from ..core.exceptions import RecordConflict, StorageError
from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """One connection + cursor per unit of work, committed on success.

    Driver errors leave as ``StorageError``; duplicate keys as ``RecordConflict``.
    """

    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except mysql.connector.IntegrityError as e:
        conn.rollback()
        if e.errno == errorcode.ER_DUP_ENTRY:
            raise RecordConflict("Record already exists for this employee and day") from e
        raise StorageError(str(e)) from e
    except mysql.connector.Error as e:
        conn.rollback()
        raise StorageError(str(e)) from e
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def to_db_timestamp(value: Optional[datetime]) -> Optional[datetime]:
    """Timestamps are stored as naive UTC DATETIME(3) values."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def from_db_timestamp(value: Optional[datetime], tz: tzinfo) -> Optional[datetime]:
    if value is None:
        return None
    return value.replace(tzinfo=timezone.utc).astimezone(tz)
