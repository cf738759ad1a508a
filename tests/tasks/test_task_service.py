from __future__ import annotations

import base64
from datetime import date, datetime

import pytest

from src.hr_admin.hr_admin.core.constants import MAX_PHOTO_BYTES
from src.hr_admin.hr_admin.core.enums import Role, TaskPriority, TaskStatus
from src.hr_admin.hr_admin.core.exceptions import AuthorizationError, ValidationError
from src.hr_admin.hr_admin.tasks.service import TaskService, photo_size

DONE_AT = datetime(2026, 3, 3, 17, 0, 0)


def _photo(size: int) -> str:
    return "data:image/png;base64," + base64.b64encode(b"x" * size).decode("ascii")


def _svc(tasks_repo, employees_repo) -> TaskService:
    return TaskService(tasks_repo, employees_repo)


def test_admin_creates_task_not_started(tasks_repo, employees_repo):
    svc = _svc(tasks_repo, employees_repo)

    task_id = svc.create(
        current_role=Role.ADMIN,
        created_by=1,
        title="Prepare payroll",
        assigned_to=2,
        due_date=date(2026, 3, 20),
    )

    task = svc.get(task_id)
    assert task.status == TaskStatus.NOT_STARTED
    assert task.priority == TaskPriority.MEDIUM


def test_create_requires_title_assignee_and_due_date(tasks_repo, employees_repo):
    with pytest.raises(ValidationError, match="required fields"):
        _svc(tasks_repo, employees_repo).create(
            current_role=Role.ADMIN, created_by=1, title="Untitled", assigned_to=2, due_date=None
        )


def test_create_rejects_unknown_assignee(tasks_repo, employees_repo):
    with pytest.raises(ValidationError, match="not found"):
        _svc(tasks_repo, employees_repo).create(
            current_role=Role.ADMIN, created_by=1, title="T", assigned_to=99, due_date=date(2026, 3, 20)
        )


def test_assignee_moves_between_open_statuses(tasks_repo, employees_repo):
    task = tasks_repo.add(2)
    svc = _svc(tasks_repo, employees_repo)

    assert svc.update_status(current_role=Role.EMPLOYEE, employee_id=2, task_id=task.task_id, new_status="in_progress").status == TaskStatus.IN_PROGRESS
    assert svc.update_status(current_role=Role.EMPLOYEE, employee_id=2, task_id=task.task_id, new_status="shelved").status == TaskStatus.SHELVED


def test_other_employee_cannot_update(tasks_repo, employees_repo):
    task = tasks_repo.add(2)

    with pytest.raises(AuthorizationError):
        _svc(tasks_repo, employees_repo).update_status(
            current_role=Role.EMPLOYEE, employee_id=3, task_id=task.task_id, new_status="in_progress"
        )


def test_employee_cannot_set_accepted(tasks_repo, employees_repo):
    task = tasks_repo.add(2, status=TaskStatus.IN_PROGRESS)

    with pytest.raises(ValidationError, match="Cannot change task"):
        _svc(tasks_repo, employees_repo).update_status(
            current_role=Role.EMPLOYEE, employee_id=2, task_id=task.task_id, new_status="accepted"
        )


def test_complete_sets_timestamp_and_notes(tasks_repo, employees_repo):
    task = tasks_repo.add(2, status=TaskStatus.IN_PROGRESS)

    done = _svc(tasks_repo, employees_repo).complete(
        current_role=Role.EMPLOYEE, employee_id=2, task_id=task.task_id, notes="All done", now=DONE_AT
    )

    assert done.status == TaskStatus.COMPLETED
    assert done.completed_at == DONE_AT
    assert done.completion_notes == "All done"


def test_admin_accepts_completed_task(tasks_repo, employees_repo):
    task = tasks_repo.add(2, status=TaskStatus.COMPLETED)

    accepted = _svc(tasks_repo, employees_repo).accept(current_role=Role.ADMIN, task_id=task.task_id)

    assert accepted.status == TaskStatus.ACCEPTED


def test_accept_requires_completed(tasks_repo, employees_repo):
    task = tasks_repo.add(2, status=TaskStatus.IN_PROGRESS)

    with pytest.raises(ValidationError):
        _svc(tasks_repo, employees_repo).accept(current_role=Role.ADMIN, task_id=task.task_id)


def test_reject_requires_note_then_task_can_be_reopened(tasks_repo, employees_repo):
    task = tasks_repo.add(2, status=TaskStatus.COMPLETED)
    svc = _svc(tasks_repo, employees_repo)

    with pytest.raises(ValidationError):
        svc.reject(current_role=Role.ADMIN, task_id=task.task_id, note="")

    rejected = svc.reject(current_role=Role.ADMIN, task_id=task.task_id, note="Missing totals")
    assert rejected.status == TaskStatus.REJECTED
    assert rejected.rejection_note == "Missing totals"

    reopened = svc.update_status(current_role=Role.EMPLOYEE, employee_id=2, task_id=task.task_id, new_status="in_progress")
    assert reopened.status == TaskStatus.IN_PROGRESS
    assert reopened.completed_at is None


def test_accepted_task_is_terminal(tasks_repo, employees_repo):
    task = tasks_repo.add(2, status=TaskStatus.ACCEPTED)
    svc = _svc(tasks_repo, employees_repo)

    with pytest.raises(ValidationError):
        svc.update_status(current_role=Role.EMPLOYEE, employee_id=2, task_id=task.task_id, new_status="in_progress")
    with pytest.raises(ValidationError):
        svc.complete(current_role=Role.EMPLOYEE, employee_id=2, task_id=task.task_id)


def test_photo_size_decodes_payload():
    assert photo_size(_photo(10)) == 10

    with pytest.raises(ValidationError):
        photo_size("https://example.com/cat.png")


def test_save_references_accepts_photos_up_to_limit(tasks_repo, employees_repo):
    task = tasks_repo.add(2)
    svc = _svc(tasks_repo, employees_repo)

    saved = svc.save_references(
        current_role=Role.EMPLOYEE, employee_id=2, task_id=task.task_id, references="see doc", photos=[_photo(1024)]
    )
    assert saved.employee_references == "see doc"
    assert len(saved.employee_photos) == 1

    with pytest.raises(ValidationError, match="5MB"):
        svc.save_references(
            current_role=Role.EMPLOYEE,
            employee_id=2,
            task_id=task.task_id,
            references=None,
            photos=[_photo(MAX_PHOTO_BYTES + 1)],
        )


def test_admin_listing_and_employee_grouping(tasks_repo, employees_repo):
    tasks_repo.add(2, status=TaskStatus.IN_PROGRESS)
    tasks_repo.add(2, status=TaskStatus.ACCEPTED)
    tasks_repo.add(2, status=TaskStatus.REJECTED)
    tasks_repo.add(3, status=TaskStatus.COMPLETED)
    svc = _svc(tasks_repo, employees_repo)

    data = svc.list_for_admin(status="completed")
    assert data["stats"]["total"] == 4
    assert data["stats"]["completed"] == 1
    assert [t.assigned_to for t in data["tasks"]] == [3]

    groups = svc.list_mine(employee_id=2)
    assert [len(groups[k]) for k in ("active", "completed", "rejected")] == [1, 1, 1]


def test_delete_is_admin_only(tasks_repo, employees_repo):
    task = tasks_repo.add(2)
    svc = _svc(tasks_repo, employees_repo)

    with pytest.raises(AuthorizationError):
        svc.delete(current_role=Role.EMPLOYEE, task_id=task.task_id)

    svc.delete(current_role=Role.ADMIN, task_id=task.task_id)
    assert tasks_repo.get(task_id=task.task_id) is None


def test_task_outlives_its_creator(tasks_repo, employees_repo):
    task = tasks_repo.add(2, status=TaskStatus.COMPLETED, created_by=None)
    svc = _svc(tasks_repo, employees_repo)

    listed = svc.list_for_admin()["tasks"]
    assert [t.task_id for t in listed] == [task.task_id]
    assert svc.to_dict(listed[0])["created_by"] is None

    accepted = svc.accept(current_role=Role.ADMIN, task_id=task.task_id)
    assert accepted.status == TaskStatus.ACCEPTED
    assert accepted.created_by is None
