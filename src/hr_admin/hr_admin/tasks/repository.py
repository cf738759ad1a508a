from __future__ import annotations

from datetime import date, datetime
from typing import Iterable, Optional, Protocol, Sequence

from ..core.enums import TaskPriority, TaskStatus
from .model import Task


class TaskRepository(Protocol):
    def create(
        self,
        *,
        title: str,
        description: str,
        assigned_to: int,
        created_by: int,
        priority: TaskPriority,
        due_date: date,
        reference_materials: Optional[str],
    ) -> int:
        raise NotImplementedError

    def get(self, *, task_id: int) -> Optional[Task]:
        raise NotImplementedError

    def list_tasks(
        self,
        *,
        assigned_to: Optional[int] = None,
        search: Optional[str] = None,
        limit: int = 500,
    ) -> Sequence[Task]:
        raise NotImplementedError

    def set_status(
        self,
        *,
        task_id: int,
        status: TaskStatus,
        completed_at: Optional[datetime],
        completion_notes: Optional[str] = None,
        rejection_note: Optional[str] = None,
        only_if: Optional[TaskStatus] = None,
    ) -> bool:
        """Write the new status.

        None notes leave the stored value unchanged. When only_if is given
        the update applies only if the current status matches it.
        """

        raise NotImplementedError

    def save_references(self, *, task_id: int, references: Optional[str], photos: Sequence[str]) -> bool:
        raise NotImplementedError

    def delete(self, *, task_id: int) -> bool:
        raise NotImplementedError

    def count_by_status(self, statuses: Iterable[TaskStatus], *, assigned_to: Optional[int] = None) -> int:
        raise NotImplementedError
