from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import LeaveStatus, LeaveType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import build_where, db_cursor, fetchall, fetchone, like_pattern
from .model import LeaveRequest
from .repository import LeaveRepository

_SELECT = """
    SELECT l.leave_id, l.employee_id, l.leave_type, l.subject, l.description,
           l.from_date, l.to_date, l.status, l.has_document,
           l.approved_by, l.approved_at, l.rejection_reason, l.created_at,
           e.name AS employee_name, e.employee_code
    FROM leave_requests l
    JOIN employees e ON e.employee_id = l.employee_id
"""


def _to_leave(r: dict) -> LeaveRequest:
    return LeaveRequest(
        leave_id=int(r["leave_id"]),
        employee_id=int(r["employee_id"]),
        leave_type=LeaveType(r["leave_type"]),
        subject=r["subject"],
        description=r.get("description") or "",
        from_date=r["from_date"],
        to_date=r["to_date"],
        status=LeaveStatus(r["status"]),
        has_document=bool(r.get("has_document")),
        created_at=r.get("created_at"),
        approved_by=r.get("approved_by"),
        approved_at=r.get("approved_at"),
        rejection_reason=r.get("rejection_reason"),
        employee_name=r.get("employee_name"),
        employee_code=r.get("employee_code"),
    )


class MySQLLeaveRepository(LeaveRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        employee_id: int,
        leave_type: LeaveType,
        subject: str,
        description: str,
        from_date: date,
        to_date: date,
        has_document: bool,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leave_requests(
                    employee_id, leave_type, subject, description, from_date, to_date, has_document, status
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(employee_id),
                    leave_type.value,
                    subject,
                    description,
                    from_date,
                    to_date,
                    1 if has_document else 0,
                    LeaveStatus.PENDING.value,
                ),
            )
            return int(cur.lastrowid)

    def get(self, *, leave_id: int) -> Optional[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE l.leave_id=%s", (int(leave_id),))
            r = fetchone(cur)
            return _to_leave(r) if r else None

    def list_requests(
        self,
        *,
        status: Optional[LeaveStatus] = None,
        employee_id: Optional[int] = None,
        search: Optional[str] = None,
        limit: int = 500,
    ) -> Sequence[LeaveRequest]:
        where, params = build_where({"status": status, "employee_id": employee_id}, alias="l")
        pattern = like_pattern(search)
        if pattern:
            where += " AND (e.name LIKE %s OR e.employee_code LIKE %s OR l.leave_type LIKE %s)"
            params += [pattern, pattern, pattern]

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + f" WHERE {where} ORDER BY l.created_at DESC LIMIT %s",
                tuple(params + [int(limit)]),
            )
            return [_to_leave(r) for r in fetchall(cur)]

    def list_overlapping(
        self,
        *,
        employee_id: Optional[int],
        start: date,
        end: date,
        status: Optional[LeaveStatus] = None,
    ) -> Sequence[LeaveRequest]:
        where, params = build_where({"status": status, "employee_id": employee_id}, alias="l")
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + f" WHERE {where} AND l.from_date <= %s AND l.to_date >= %s ORDER BY l.from_date",
                tuple(params + [end, start]),
            )
            return [_to_leave(r) for r in fetchall(cur)]

    def decide(
        self,
        *,
        leave_id: int,
        status: LeaveStatus,
        decided_by: int,
        decided_at: datetime,
        comment: Optional[str] = None,
        only_if: Optional[LeaveStatus] = None,
    ) -> bool:
        sql = """
            UPDATE leave_requests
            SET status=%s, approved_by=%s, approved_at=%s, rejection_reason=%s
            WHERE leave_id=%s
        """
        params: list = [status.value, int(decided_by), decided_at, comment, int(leave_id)]
        if only_if is not None:
            sql += " AND status=%s"
            params.append(only_if.value)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return cur.rowcount > 0

    def count_by_status(self, status: LeaveStatus) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM leave_requests WHERE status=%s", (status.value,))
            row = fetchone(cur)
            return int(row["n"]) if row else 0
