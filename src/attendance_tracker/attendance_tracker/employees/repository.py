from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import Role
from .model import Employee


class EmployeeDirectory(Protocol):
    """Read-only view of the employee directory.

    Note: services depend on this interface, never on a concrete backend.
    """

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def get_by_code(self, employee_code: str) -> Optional[Employee]:
        raise NotImplementedError

    def list_employees(
        self,
        *,
        role: Optional[Role] = None,
        department: Optional[str] = None,
        include_inactive: bool = False,
    ) -> Sequence[Employee]:
        """Active employees, optionally by role and/or department.

        ``include_inactive`` also returns deactivated entries (for resolving past records).
        """

        raise NotImplementedError
