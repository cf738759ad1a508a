from __future__ import annotations

import pytest

from src.hr_admin.hr_admin.core.enums import Role, WorkLocation
from src.hr_admin.hr_admin.core.exceptions import AuthenticationError, AuthorizationError, ValidationError
from src.hr_admin.hr_admin.employees.service import AuthService, EmployeeService


def test_auth_success_is_case_insensitive_on_email(employees_repo):
    user = AuthService(employees_repo).authenticate("ASHA@example.com", "employee123")

    assert user.employee_id == 2
    assert user.role == Role.EMPLOYEE


def test_auth_wrong_password_raises(employees_repo):
    with pytest.raises(AuthenticationError):
        AuthService(employees_repo).authenticate("asha@example.com", "nope")


def test_auth_unknown_email_raises(employees_repo):
    with pytest.raises(AuthenticationError):
        AuthService(employees_repo).authenticate("ghost@example.com", "employee123")


def test_create_employee_assigns_next_code(employees_repo):
    svc = EmployeeService(employees_repo)

    employee = svc.create_employee(
        current_role=Role.ADMIN,
        name="Nila",
        email="Nila@Example.com",
        password="secret123",
        department="Sales",
        work_location="field",
    )

    assert employee.employee_code == "EMP004"
    assert employee.email == "nila@example.com"
    assert employee.work_location == WorkLocation.FIELD


def test_employee_code_does_not_reuse_deleted_numbers(employees_repo):
    svc = EmployeeService(employees_repo)
    svc.delete_employee(current_role=Role.ADMIN, current_employee_id=1, employee_id=2)

    assert svc.next_employee_code() == "EMP004"


def test_duplicate_email_is_rejected(employees_repo):
    svc = EmployeeService(employees_repo)

    with pytest.raises(ValidationError, match="already exists"):
        svc.create_employee(
            current_role=Role.ADMIN, name="Copy", email="asha@example.com", password="secret123", department="HR"
        )


def test_short_password_is_rejected(employees_repo):
    with pytest.raises(ValidationError):
        EmployeeService(employees_repo).create_employee(
            current_role=Role.ADMIN, name="Short", email="short@example.com", password="123", department="HR"
        )


def test_only_admin_can_create(employees_repo):
    with pytest.raises(AuthorizationError):
        EmployeeService(employees_repo).create_employee(
            current_role=Role.EMPLOYEE, name="X", email="x@example.com", password="secret123", department="HR"
        )


def test_update_changes_fields(employees_repo):
    svc = EmployeeService(employees_repo)

    updated = svc.update_employee(
        current_role=Role.ADMIN,
        employee_id=2,
        name="Asha K",
        email="asha@example.com",
        department="Finance",
        work_location="wfh",
    )

    assert updated.name == "Asha K"
    assert updated.department == "Finance"
    assert updated.work_location == WorkLocation.WFH


def test_admin_cannot_delete_self(employees_repo):
    with pytest.raises(ValidationError, match="own account"):
        EmployeeService(employees_repo).delete_employee(current_role=Role.ADMIN, current_employee_id=1, employee_id=1)
    assert employees_repo.get_by_id(1) is not None
