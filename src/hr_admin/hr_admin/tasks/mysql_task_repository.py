from __future__ import annotations

import json
from datetime import date, datetime
from typing import Iterable, Optional, Sequence

from ..core.enums import TaskPriority, TaskStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import build_where, db_cursor, fetchall, fetchone, like_pattern
from .model import Task
from .repository import TaskRepository

_SELECT = """
    SELECT t.task_id, t.title, t.description, t.assigned_to, t.created_by,
           t.priority, t.status, t.due_date, t.completed_at, t.completion_notes,
           t.rejection_note, t.reference_materials, t.employee_references,
           t.employee_photos, t.created_at,
           a.name AS assignee_name, c.name AS creator_name
    FROM tasks t
    LEFT JOIN employees a ON a.employee_id = t.assigned_to
    LEFT JOIN employees c ON c.employee_id = t.created_by
"""


def _load_photos(raw) -> tuple[str, ...]:
    if not raw:
        return ()
    try:
        photos = json.loads(raw)
    except ValueError:
        return ()
    return tuple(p for p in photos if isinstance(p, str))


def _to_task(r: dict) -> Task:
    return Task(
        task_id=int(r["task_id"]),
        title=r["title"],
        description=r.get("description") or "",
        assigned_to=int(r["assigned_to"]),
        created_by=int(r["created_by"]) if r.get("created_by") is not None else None,
        priority=TaskPriority(r["priority"]),
        status=TaskStatus(r["status"]),
        due_date=r.get("due_date"),
        completed_at=r.get("completed_at"),
        completion_notes=r.get("completion_notes"),
        rejection_note=r.get("rejection_note"),
        reference_materials=r.get("reference_materials"),
        employee_references=r.get("employee_references"),
        employee_photos=_load_photos(r.get("employee_photos")),
        created_at=r.get("created_at"),
        assignee_name=r.get("assignee_name") or "Unknown",
        creator_name=r.get("creator_name") or "Unknown",
    )


class MySQLTaskRepository(TaskRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO tasks(title, description, assigned_to, created_by, priority, status, due_date, reference_materials)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    title,
                    description,
                    int(assigned_to),
                    int(created_by),
                    priority.value,
                    TaskStatus.NOT_STARTED.value,
                    due_date,
                    reference_materials,
                ),
            )
            return int(cur.lastrowid)

    def get(self, *, task_id: int) -> Optional[Task]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE t.task_id=%s", (int(task_id),))
            r = fetchone(cur)
            return _to_task(r) if r else None

    def list_tasks(
        self,
        *,
        assigned_to: Optional[int] = None,
        search: Optional[str] = None,
        limit: int = 500,
    ) -> Sequence[Task]:
        where, params = build_where({"assigned_to": assigned_to}, alias="t")
        pattern = like_pattern(search)
        if pattern:
            where += " AND (t.title LIKE %s OR t.description LIKE %s OR a.name LIKE %s)"
            params += [pattern, pattern, pattern]

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + f" WHERE {where} ORDER BY t.created_at DESC LIMIT %s",
                tuple(params + [int(limit)]),
            )
            return [_to_task(r) for r in fetchall(cur)]

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
        sql = """
            UPDATE tasks
            SET status=%s,
                completed_at=%s,
                completion_notes=COALESCE(%s, completion_notes),
                rejection_note=COALESCE(%s, rejection_note)
            WHERE task_id=%s
        """
        params: list = [status.value, completed_at, completion_notes, rejection_note, int(task_id)]
        if only_if is not None:
            sql += " AND status=%s"
            params.append(only_if.value)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return cur.rowcount > 0

    def save_references(self, *, task_id: int, references: Optional[str], photos: Sequence[str]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE tasks SET employee_references=%s, employee_photos=%s WHERE task_id=%s",
                (references, json.dumps(list(photos)), int(task_id)),
            )
            return cur.rowcount > 0

    def delete(self, *, task_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM tasks WHERE task_id=%s", (int(task_id),))
            return cur.rowcount > 0

    def count_by_status(self, statuses: Iterable[TaskStatus], *, assigned_to: Optional[int] = None) -> int:
        values = [s.value for s in statuses]
        if not values:
            return 0
        placeholders = ",".join(["%s"] * len(values))
        sql = f"SELECT COUNT(*) AS n FROM tasks WHERE status IN ({placeholders})"
        params: list = list(values)
        if assigned_to is not None:
            sql += " AND assigned_to=%s"
            params.append(int(assigned_to))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            row = fetchone(cur)
            return int(row["n"]) if row else 0
