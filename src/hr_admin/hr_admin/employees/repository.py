from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import Role, WorkLocation
from .model import Employee


class EmployeeRepository(Protocol):
    """Repository interface for employees.

    Services depend on this interface, never on a concrete database.
    """

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[Employee]:
        raise NotImplementedError

    def list_all(self, *, search: Optional[str] = None) -> Sequence[Employee]:
        raise NotImplementedError

    def count(self) -> int:
        raise NotImplementedError

    def max_code_number(self, prefix: str) -> int:
        """Highest numeric suffix among codes starting with prefix (0 if none)."""

        raise NotImplementedError

    def create(
        self,
        *,
        employee_code: str,
        name: str,
        email: str,
        phone: Optional[str],
        department: str,
        role: Role,
        work_location: WorkLocation,
        password_hash: str,
    ) -> int:
        raise NotImplementedError

    def update(
        self,
        *,
        employee_id: int,
        name: str,
        email: str,
        phone: Optional[str],
        department: str,
        role: Role,
        work_location: WorkLocation,
    ) -> bool:
        raise NotImplementedError

    def delete_by_id(self, employee_id: int) -> bool:
        raise NotImplementedError
