from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Employee
from .repository import EmployeeDirectory

_SELECT = """
    SELECT employee_id, employee_code, full_name, email, department, role, is_active
    FROM employees
"""


def _to_employee(row: Dict[str, Any]) -> Employee:
    return Employee(
        employee_id=int(row["employee_id"]),
        employee_code=row["employee_code"],
        full_name=row["full_name"],
        email=row.get("email"),
        department=row.get("department"),
        role=Role(row["role"]),
        is_active=bool(row.get("is_active", True)),
    )


class MySQLEmployeeDirectory(EmployeeDirectory):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE employee_id=%s", (int(employee_id),))
            row = fetchone(cur)
            return _to_employee(row) if row else None

    def get_by_code(self, employee_code: str) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE employee_code=%s", (employee_code,))
            row = fetchone(cur)
            return _to_employee(row) if row else None

    def list_employees(
        self,
        *,
        role: Optional[Role] = None,
        department: Optional[str] = None,
        include_inactive: bool = False,
    ) -> Sequence[Employee]:
        clauses = [] if include_inactive else ["is_active=1"]
        params: list[object] = []
        if role is not None:
            clauses.append("role=%s")
            params.append(role.value)
        if department is not None:
            clauses.append("department=%s")
            params.append(department)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + (f" WHERE {' AND '.join(clauses)}" if clauses else "") + " ORDER BY employee_code ASC",
                tuple(params),
            )
            return [_to_employee(r) for r in fetchall(cur)]
