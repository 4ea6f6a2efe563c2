from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role
from ..core.exceptions import AuthorizationError


@dataclass(frozen=True)
class Employee:
    """Directory entry for an employee.

    Owned by the external directory: the attendance core only reads it.
    """

    employee_id: int
    employee_code: str
    full_name: str
    department: Optional[str]
    role: Role = Role.EMPLOYEE
    email: Optional[str] = None
    is_active: bool = True


@dataclass(frozen=True)
class Actor:
    """Already-authenticated caller handed in by the identity provider."""

    employee_id: int
    role: Role
    department: Optional[str] = None

    @property
    def is_manager(self) -> bool:
        return self.role == Role.MANAGER


def require_manager(actor: Actor) -> None:
    if not actor.is_manager:
        raise AuthorizationError("Only managers can perform this action")
