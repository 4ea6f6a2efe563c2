from __future__ import annotations

import logging
import re
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator

import mysql.connector

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DBTarget:
    host: str
    port: int
    user: str
    password: str
    database: str


def _as_target(db_config: dict) -> DBTarget:
    return DBTarget(
        host=str(db_config.get("host", "localhost")),
        port=int(db_config.get("port", 3306)),
        user=str(db_config.get("user", "root")),
        password=str(db_config.get("password", "")),
        database=str(db_config.get("database", "attendance_db")),
    )


@contextmanager
def _admin_connection(target: DBTarget, *, with_database: bool = True) -> Iterator:
    kwargs = dict(host=target.host, port=target.port, user=target.user, password=target.password, use_pure=True)
    if with_database:
        kwargs["database"] = target.database
    conn = mysql.connector.connect(**kwargs)
    try:
        yield conn
        conn.commit()
    finally:
        conn.close()


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql usable against any configured database name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def iter_sql_statements(sql: str) -> Iterable[str]:
    """Split a script on ``;`` outside of quoted literals and ``--`` comments."""

    buf: list[str] = []
    quote: str | None = None
    i = 0
    while i < len(sql):
        ch = sql[i]
        if quote:
            buf.append(ch)
            if ch == "\\" and i + 1 < len(sql):
                buf.append(sql[i + 1])
                i += 1
            elif ch == quote:
                quote = None
        elif ch in ("'", '"'):
            quote = ch
            buf.append(ch)
        elif sql.startswith("--", i):
            end = sql.find("\n", i)
            i = len(sql) if end == -1 else end
            continue
        elif ch == ";":
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
        else:
            buf.append(ch)
        i += 1

    tail = "".join(buf).strip()
    if tail:
        yield tail


def ensure_database_exists(db_config: dict) -> None:
    target = _as_target(db_config)
    with _admin_connection(target, with_database=False) as conn:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    target = _as_target(db_config)
    ensure_database_exists(db_config)

    sql = _strip_create_db_and_use(Path(schema_path).read_text(encoding="utf-8"))
    with _admin_connection(target) as conn:
        cur = conn.cursor()
        for stmt in iter_sql_statements(sql):
            cur.execute(stmt)
    logger.info("Applied schema %s to %s", schema_path, target.database)


def upsert_employees(db_config: dict, employees) -> None:
    target = _as_target(db_config)
    with _admin_connection(target) as conn:
        cur = conn.cursor()
        for e in employees:
            cur.execute(
                """
                INSERT INTO employees (employee_id, employee_code, full_name, email, department, role, is_active)
                VALUES (%s, %s, %s, %s, %s, %s, %s)
                ON DUPLICATE KEY UPDATE
                    full_name=VALUES(full_name), email=VALUES(email), department=VALUES(department),
                    role=VALUES(role), is_active=VALUES(is_active)
                """,
                (e.employee_id, e.employee_code, e.full_name, e.email, e.department, e.role.value, int(e.is_active)),
            )


def reset_attendance(db_config: dict) -> None:
    """Bulk administrative reset: removes every attendance record."""
    target = _as_target(db_config)
    with _admin_connection(target) as conn:
        conn.cursor().execute("DELETE FROM attendance_records")
    logger.warning("All attendance records deleted from %s", target.database)


def list_tables(db_config: dict) -> list[str]:
    target = _as_target(db_config)
    with _admin_connection(target) as conn:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
