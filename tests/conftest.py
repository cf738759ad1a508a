from __future__ import annotations

from datetime import datetime

import pytest

from src.hr_admin.hr_admin.core.enums import Role, WorkLocation

from tests.fakes import InMemoryAttendance, InMemoryEmployees, InMemoryLeaves, InMemoryTasks, make_employee


@pytest.fixture
def fixed_now() -> datetime:
    # Monday morning
    return datetime(2026, 3, 2, 9, 0, 0)


@pytest.fixture
def employees_repo() -> InMemoryEmployees:
    return InMemoryEmployees(
        [
            make_employee(1, name="Admin Demo", email="admin@example.com", role=Role.ADMIN, password="admin123"),
            make_employee(2, name="Asha Office", email="asha@example.com", password="employee123"),
            make_employee(3, name="Ravi Remote", email="ravi@example.com", work_location=WorkLocation.WFH),
        ]
    )


@pytest.fixture
def attendance_repo(employees_repo) -> InMemoryAttendance:
    return InMemoryAttendance(employees_repo)


@pytest.fixture
def leaves_repo(employees_repo) -> InMemoryLeaves:
    return InMemoryLeaves(employees_repo)


@pytest.fixture
def tasks_repo() -> InMemoryTasks:
    return InMemoryTasks()
