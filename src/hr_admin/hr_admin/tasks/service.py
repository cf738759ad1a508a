from __future__ import annotations

import base64
import binascii
import re
from datetime import date, datetime
from typing import Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.validators import optional_text, parse_enum, require_non_empty
from ..core.constants import DEFAULT_LIST_LIMIT, MAX_PHOTO_BYTES
from ..core.enums import Role, TaskPriority, TaskStatus
from ..core.exceptions import AuthorizationError, ValidationError
from ..employees.repository import EmployeeRepository
from .model import Task
from .repository import TaskRepository

# Statuses an assignee may move a task into, keyed by the current status.
EMPLOYEE_TRANSITIONS: dict[TaskStatus, frozenset[TaskStatus]] = {
    TaskStatus.NOT_STARTED: frozenset({TaskStatus.IN_PROGRESS, TaskStatus.SHELVED}),
    TaskStatus.IN_PROGRESS: frozenset({TaskStatus.NOT_STARTED, TaskStatus.SHELVED}),
    TaskStatus.SHELVED: frozenset({TaskStatus.NOT_STARTED, TaskStatus.IN_PROGRESS}),
    TaskStatus.REJECTED: frozenset({TaskStatus.IN_PROGRESS, TaskStatus.SHELVED}),
}

COMPLETABLE = frozenset({TaskStatus.NOT_STARTED, TaskStatus.IN_PROGRESS, TaskStatus.SHELVED, TaskStatus.REJECTED})
OPEN_STATUSES = (TaskStatus.NOT_STARTED, TaskStatus.IN_PROGRESS)

_DATA_URL_RE = re.compile(r"^data:image/[A-Za-z0-9.+-]+;base64,(?P<payload>.+)$", re.DOTALL)


def photo_size(data_url: str) -> int:
    """Decoded byte size of an inline image data URL."""

    m = _DATA_URL_RE.match(data_url or "")
    if not m:
        raise ValidationError("Photos must be image data URLs")
    try:
        return len(base64.b64decode(m.group("payload"), validate=True))
    except (binascii.Error, ValueError):
        raise ValidationError("Photo data is not valid base64")


class TaskService:
    def __init__(self, tasks: TaskRepository, employees: EmployeeRepository):
        self._tasks = tasks
        self._employees = employees

    def get(self, task_id: int) -> Task:
        task = self._tasks.get(task_id=int(task_id))
        if not task:
            raise ValidationError("Task not found")
        return task

    def _get_own(self, *, current_role: Role, employee_id: int, task_id: int) -> Task:
        if current_role != Role.EMPLOYEE:
            raise AuthorizationError("Only the assigned employee can update this task")
        task = self.get(task_id)
        if task.assigned_to != int(employee_id):
            raise AuthorizationError("You can only update tasks assigned to you")
        return task

    @staticmethod
    def _require_admin(current_role: Role) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission to manage tasks")

    def create(
        self,
        *,
        current_role: Role,
        created_by: int,
        title: str,
        assigned_to: Optional[int],
        due_date: Optional[date],
        description: str = "",
        priority: TaskPriority | str = TaskPriority.MEDIUM,
        reference_materials: Optional[str] = None,
    ) -> int:
        self._require_admin(current_role)

        if not (title or "").strip() or not assigned_to or not due_date:
            raise ValidationError("Please fill in all required fields")

        try:
            assignee = self._employees.get_by_id(int(assigned_to))
        except (TypeError, ValueError):
            raise ValidationError("Invalid assignee")
        if not assignee:
            raise ValidationError("Assigned employee not found")

        return self._tasks.create(
            title=require_non_empty(title, "Title"),
            description=(description or "").strip(),
            assigned_to=assignee.employee_id,
            created_by=int(created_by),
            priority=parse_enum(TaskPriority, priority or TaskPriority.MEDIUM, "priority"),
            due_date=due_date,
            reference_materials=optional_text(reference_materials),
        )

    def update_status(
        self,
        *,
        current_role: Role,
        employee_id: int,
        task_id: int,
        new_status: TaskStatus | str,
    ) -> Task:
        new_status = parse_enum(TaskStatus, new_status, "status")
        if new_status == TaskStatus.COMPLETED:
            return self.complete(current_role=current_role, employee_id=employee_id, task_id=task_id)

        task = self._get_own(current_role=current_role, employee_id=employee_id, task_id=task_id)
        if new_status == task.status:
            return task

        allowed = EMPLOYEE_TRANSITIONS.get(task.status, frozenset())
        if new_status not in allowed:
            raise ValidationError(f"Cannot change task from {task.status.value} to {new_status.value}")

        self._tasks.set_status(task_id=task.task_id, status=new_status, completed_at=None)
        return self.get(task.task_id)

    def complete(
        self,
        *,
        current_role: Role,
        employee_id: int,
        task_id: int,
        notes: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Task:
        task = self._get_own(current_role=current_role, employee_id=employee_id, task_id=task_id)
        if task.status not in COMPLETABLE:
            raise ValidationError("Task has already been completed")

        self._tasks.set_status(
            task_id=task.task_id,
            status=TaskStatus.COMPLETED,
            completed_at=now or now_local(),
            completion_notes=optional_text(notes),
        )
        return self.get(task.task_id)

    def accept(self, *, current_role: Role, task_id: int) -> Task:
        self._require_admin(current_role)
        task = self.get(task_id)
        if task.status != TaskStatus.COMPLETED:
            raise ValidationError("Only completed tasks can be accepted")

        ok = self._tasks.set_status(
            task_id=task.task_id,
            status=TaskStatus.ACCEPTED,
            completed_at=task.completed_at,
            only_if=TaskStatus.COMPLETED,
        )
        if not ok:
            raise ValidationError("Failed to accept task")
        return self.get(task.task_id)

    def reject(self, *, current_role: Role, task_id: int, note: Optional[str]) -> Task:
        self._require_admin(current_role)
        reason = optional_text(note)
        if not reason:
            raise ValidationError("Please provide a note explaining what needs to change.")

        task = self.get(task_id)
        if task.status != TaskStatus.COMPLETED:
            raise ValidationError("Only completed tasks can be rejected")

        ok = self._tasks.set_status(
            task_id=task.task_id,
            status=TaskStatus.REJECTED,
            completed_at=task.completed_at,
            rejection_note=reason,
            only_if=TaskStatus.COMPLETED,
        )
        if not ok:
            raise ValidationError("Failed to reject task")
        return self.get(task.task_id)

    def save_references(
        self,
        *,
        current_role: Role,
        employee_id: int,
        task_id: int,
        references: Optional[str],
        photos: Optional[Sequence[str]] = None,
    ) -> Task:
        task = self._get_own(current_role=current_role, employee_id=employee_id, task_id=task_id)

        photos = list(photos or [])
        for p in photos:
            if photo_size(p) > MAX_PHOTO_BYTES:
                raise ValidationError("Each photo must be 5MB or smaller")

        self._tasks.save_references(task_id=task.task_id, references=optional_text(references), photos=photos)
        return self.get(task.task_id)

    def delete(self, *, current_role: Role, task_id: int) -> None:
        self._require_admin(current_role)
        if not self._tasks.delete(task_id=int(task_id)):
            raise ValidationError("Task not found")

    def list_for_admin(
        self,
        *,
        status: Optional[TaskStatus | str] = None,
        search: Optional[str] = None,
    ) -> dict:
        status_filter = parse_enum(TaskStatus, status, "status") if status else None

        all_tasks = list(self._tasks.list_tasks(search=optional_text(search), limit=DEFAULT_LIST_LIMIT))
        stats = {s.value: 0 for s in TaskStatus}
        stats["total"] = len(all_tasks)
        for t in all_tasks:
            stats[t.status.value] += 1

        tasks = [t for t in all_tasks if status_filter is None or t.status == status_filter]
        return {"tasks": tasks, "stats": stats}

    def list_mine(self, *, employee_id: int) -> dict:
        """Tasks assigned to one employee, grouped the way the task board shows them."""

        groups: dict[str, list[Task]] = {"active": [], "completed": [], "rejected": []}
        for t in self._tasks.list_tasks(assigned_to=int(employee_id), limit=DEFAULT_LIST_LIMIT):
            if t.status in (TaskStatus.COMPLETED, TaskStatus.ACCEPTED):
                groups["completed"].append(t)
            elif t.status == TaskStatus.REJECTED:
                groups["rejected"].append(t)
            else:
                groups["active"].append(t)
        return groups

    @staticmethod
    def to_dict(t: Task) -> dict:
        return {
            "task_id": t.task_id,
            "title": t.title,
            "description": t.description,
            "assigned_to": t.assigned_to,
            "assignee_name": t.assignee_name,
            "created_by": t.created_by,
            "creator_name": t.creator_name,
            "priority": t.priority.value,
            "status": t.status.value,
            "due_date": t.due_date,
            "completed_at": t.completed_at,
            "completion_notes": t.completion_notes,
            "rejection_note": t.rejection_note,
            "reference_materials": t.reference_materials,
            "employee_references": t.employee_references,
            "employee_photos": list(t.employee_photos),
            "created_at": t.created_at,
        }
