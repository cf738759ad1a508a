from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import optional_text, parse_enum, require_min_length, require_non_empty
from ..core.constants import EMPLOYEE_CODE_PREFIX, MIN_PASSWORD_LENGTH
from ..core.enums import Role, WorkLocation
from ..core.exceptions import AuthenticationError, AuthorizationError, ValidationError
from .model import Employee
from .repository import EmployeeRepository

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


@dataclass(frozen=True)
class SessionUser:
    """What we store into the Flask session after login."""

    employee_id: int
    employee_code: str
    name: str
    role: Role
    work_location: WorkLocation


class AuthService:
    """Use case: authenticate an employee (login)."""

    def __init__(self, employees: EmployeeRepository):
        self._employees = employees

    def authenticate(self, email: str, password: str) -> SessionUser:
        employee = self._employees.get_by_email((email or "").strip().lower())
        if not employee:
            raise AuthenticationError("Invalid email or password")

        try:
            ok = check_password_hash(employee.password_hash, password or "")
        except ValueError:
            # e.g. placeholder hashes like 'CHANGE_ME'
            ok = False

        if not ok:
            raise AuthenticationError("Invalid email or password")

        return SessionUser(
            employee_id=employee.employee_id,
            employee_code=employee.employee_code,
            name=employee.name,
            role=employee.role,
            work_location=employee.work_location,
        )


class EmployeeService:
    """Use case: manage employees (admin)."""

    def __init__(self, employees: EmployeeRepository):
        self._employees = employees

    def get(self, employee_id: int) -> Employee:
        employee = self._employees.get_by_id(int(employee_id))
        if not employee:
            raise ValidationError("Employee not found")
        return employee

    def list_employees(self, *, search: Optional[str] = None):
        return list(self._employees.list_all(search=optional_text(search)))

    def next_employee_code(self) -> str:
        n = self._employees.max_code_number(EMPLOYEE_CODE_PREFIX) + 1
        return f"{EMPLOYEE_CODE_PREFIX}{n:03d}"

    @staticmethod
    def _clean_email(email: str) -> str:
        email = require_non_empty(email, "Email").lower()
        if not _EMAIL_RE.match(email):
            raise ValidationError("Email is not valid")
        return email

    def create_employee(
        self,
        *,
        current_role: Role,
        name: str,
        email: str,
        password: str,
        department: str,
        phone: Optional[str] = None,
        role: Role | str = Role.EMPLOYEE,
        work_location: WorkLocation | str = WorkLocation.IN_OFFICE,
    ) -> Employee:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only admins can add employees")

        name = require_non_empty(name, "Name")
        email = self._clean_email(email)
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)
        department = require_non_empty(department, "Department")
        role = parse_enum(Role, role, "role")
        work_location = parse_enum(WorkLocation, work_location, "work location")

        if self._employees.get_by_email(email):
            raise ValidationError("An employee with this email already exists")

        code = self.next_employee_code()
        employee_id = self._employees.create(
            employee_code=code,
            name=name,
            email=email,
            phone=optional_text(phone),
            department=department,
            role=role,
            work_location=work_location,
            password_hash=generate_password_hash(password),
        )
        return self.get(employee_id)

    def update_employee(
        self,
        *,
        current_role: Role,
        employee_id: int,
        name: str,
        email: str,
        department: str,
        phone: Optional[str] = None,
        role: Role | str = Role.EMPLOYEE,
        work_location: WorkLocation | str = WorkLocation.IN_OFFICE,
    ) -> Employee:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only admins can edit employees")

        existing = self.get(employee_id)
        name = require_non_empty(name, "Name")
        email = self._clean_email(email)
        department = require_non_empty(department, "Department")
        role = parse_enum(Role, role, "role")
        work_location = parse_enum(WorkLocation, work_location, "work location")

        other = self._employees.get_by_email(email)
        if other and other.employee_id != existing.employee_id:
            raise ValidationError("An employee with this email already exists")

        self._employees.update(
            employee_id=existing.employee_id,
            name=name,
            email=email,
            phone=optional_text(phone),
            department=department,
            role=role,
            work_location=work_location,
        )
        return self.get(existing.employee_id)

    def delete_employee(self, *, current_role: Role, current_employee_id: int, employee_id: int) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only admins can delete employees")
        if int(employee_id) == int(current_employee_id):
            raise ValidationError("You cannot delete your own account")

        self.get(employee_id)
        if not self._employees.delete_by_id(int(employee_id)):
            raise ValidationError("Failed to delete employee")
