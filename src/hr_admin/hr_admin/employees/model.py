from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import Role, WorkLocation


@dataclass(frozen=True)
class Employee:
    """Domain entity: an employee account.

    Plain data object; no database access here.
    """

    employee_id: int
    employee_code: str
    name: str
    email: str
    department: str
    role: Role
    work_location: WorkLocation
    password_hash: str
    phone: Optional[str] = None
    created_at: Optional[datetime] = None

    def public_dict(self) -> dict:
        return {
            "employee_id": self.employee_id,
            "employee_code": self.employee_code,
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "department": self.department,
            "role": self.role.value,
            "work_location": self.work_location.value,
            "created_at": self.created_at,
        }
