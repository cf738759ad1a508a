from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..core.enums import TaskPriority, TaskStatus


@dataclass(frozen=True)
class Task:
    task_id: int
    title: str
    description: str
    assigned_to: int
    created_by: Optional[int]
    priority: TaskPriority
    status: TaskStatus
    due_date: Optional[date] = None
    completed_at: Optional[datetime] = None
    completion_notes: Optional[str] = None
    rejection_note: Optional[str] = None
    reference_materials: Optional[str] = None
    employee_references: Optional[str] = None
    employee_photos: tuple[str, ...] = field(default_factory=tuple)
    created_at: Optional[datetime] = None
    assignee_name: Optional[str] = None
    creator_name: Optional[str] = None
