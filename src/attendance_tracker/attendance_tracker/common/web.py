"""Flask plumbing shared by the controllers.

The caller's identity arrives in headers set by the upstream identity
provider (gateway); the app trusts them and does no authentication itself.
"""

from __future__ import annotations

import logging
from functools import wraps
from typing import Optional

from flask import Flask, g, jsonify, request

from ..attendance.service import record_to_dict
from ..core.enums import AttendanceStatus, Role
from ..core.exceptions import (
    AlreadyCheckedIn,
    AlreadyCheckedOut,
    AuthorizationError,
    DomainError,
    RecordConflict,
    StorageError,
    ValidationError,
)
from ..employees.model import Actor
from ..reports.aggregation import employee_to_dict

logger = logging.getLogger(__name__)

HEADER_EMPLOYEE_ID = "X-Employee-Id"
HEADER_ROLE = "X-Employee-Role"
HEADER_DEPARTMENT = "X-Employee-Department"

_CONFLICTS = (AlreadyCheckedIn, AlreadyCheckedOut, RecordConflict)


def _actor_from_headers() -> Optional[Actor]:
    raw_id = request.headers.get(HEADER_EMPLOYEE_ID, "").strip()
    if not raw_id:
        return None
    try:
        employee_id = int(raw_id)
        role = Role(request.headers.get(HEADER_ROLE, Role.EMPLOYEE.value).strip().lower())
    except ValueError:
        return None
    department = request.headers.get(HEADER_DEPARTMENT, "").strip() or None
    return Actor(employee_id=employee_id, role=role, department=department)


def identity_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        actor = _actor_from_headers()
        if actor is None:
            return jsonify({"message": "Missing or invalid identity"}), 401
        g.actor = actor
        return view(*args, **kwargs)

    return wrapper


def manager_required(view):
    @wraps(view)
    @identity_required
    def wrapper(*args, **kwargs):
        if not g.actor.is_manager:
            return jsonify({"message": "Manager access required"}), 403
        return view(*args, **kwargs)

    return wrapper


def current_actor() -> Actor:
    return g.actor


def optional_int(name: str) -> Optional[int]:
    value = (request.args.get(name) or "").strip()
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        raise ValidationError(f"{name} must be an integer")


def optional_status(value: Optional[str]) -> Optional[AttendanceStatus]:
    value = (value or "").strip()
    if not value:
        return None
    try:
        return AttendanceStatus(value)
    except ValueError:
        raise ValidationError(f"Unknown status {value!r}")


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        if isinstance(e, AuthorizationError):
            code = 403
        elif isinstance(e, _CONFLICTS):
            code = 409
        else:
            code = 400
        return jsonify({"message": str(e), "error": type(e).__name__}), code

    @app.errorhandler(StorageError)
    def handle_storage_error(e: StorageError):
        logger.exception("Storage failure while handling %s %s", request.method, request.path)
        return jsonify({"message": "Storage temporarily unavailable", "error": "StorageError"}), 503


def records_with_employees(records, employees) -> list[dict]:
    """Serialise records with their directory entry attached."""
    by_id = {e.employee_id: e for e in employees.list_employees(include_inactive=True)}
    out = []
    for r in records:
        row = record_to_dict(r)
        employee = by_id.get(r.employee_id)
        row["employee"] = employee_to_dict(employee) if employee else None
        out.append(row)
    return out
