from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import AttendanceMethod, AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import build_where, db_cursor, fetchall, fetchone, like_pattern
from .model import AttendanceListRow, AttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = """
    a.attendance_id, a.employee_id, a.work_date, a.check_in_time, a.check_out_time,
    a.check_in_lat, a.check_in_lng, a.check_out_lat, a.check_out_lng,
    a.status, a.method, a.created_at
"""


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        employee_id=int(r["employee_id"]),
        work_date=r["work_date"],
        check_in_time=r.get("check_in_time"),
        check_out_time=r.get("check_out_time"),
        status=AttendanceStatus(r["status"]),
        method=AttendanceMethod(r["method"]),
        check_in_lat=r.get("check_in_lat"),
        check_in_lng=r.get("check_in_lng"),
        check_out_lat=r.get("check_out_lat"),
        check_out_lng=r.get("check_out_lng"),
        created_at=r.get("created_at"),
    )


def _to_list_row(r: dict) -> AttendanceListRow:
    return AttendanceListRow(
        record=_to_record(r),
        employee_code=r["employee_code"],
        employee_name=r["name"],
        department=r["department"],
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance a WHERE a.employee_id=%s AND a.work_date=%s",
                (int(employee_id), work_date),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def get_recent_for_employee(self, employee_id: int, limit: int) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM attendance a
                WHERE a.employee_id=%s
                ORDER BY a.work_date DESC
                LIMIT %s
                """,
                (int(employee_id), int(limit)),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_for_employee_between(self, employee_id: int, start: date, end: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM attendance a
                WHERE a.employee_id=%s AND a.work_date BETWEEN %s AND %s
                ORDER BY a.work_date ASC
                """,
                (int(employee_id), start, end),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def create_checkin(
        self,
        *,
        employee_id: int,
        work_date: date,
        check_in_time: datetime,
        lat: float,
        lng: float,
        status: AttendanceStatus,
        method: AttendanceMethod,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance(employee_id, work_date, check_in_time, check_in_lat, check_in_lng, status, method)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (int(employee_id), work_date, check_in_time, lat, lng, status.value, method.value),
            )
            return int(cur.lastrowid)

    def update_checkout(self, *, attendance_id: int, check_out_time: datetime, lat: float, lng: float) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance
                SET check_out_time=%s, check_out_lat=%s, check_out_lng=%s
                WHERE attendance_id=%s
                """,
                (check_out_time, lat, lng, int(attendance_id)),
            )
            return cur.rowcount > 0

    def list_for_admin(
        self,
        *,
        work_date: Optional[date] = None,
        status: Optional[AttendanceStatus] = None,
        search: Optional[str] = None,
        limit: int = 500,
    ) -> Sequence[AttendanceListRow]:
        where, params = build_where({"work_date": work_date, "status": status}, alias="a")
        pattern = like_pattern(search)
        if pattern:
            where += " AND (e.name LIKE %s OR e.employee_code LIKE %s OR e.department LIKE %s)"
            params += [pattern, pattern, pattern]

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}, e.employee_code, e.name, e.department
                FROM attendance a
                JOIN employees e ON e.employee_id = a.employee_id
                WHERE {where}
                ORDER BY a.work_date DESC, a.check_in_time DESC
                LIMIT %s
                """,
                tuple(params + [int(limit)]),
            )
            return [_to_list_row(r) for r in fetchall(cur)]

    def list_recent(self, limit: int) -> Sequence[AttendanceListRow]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}, e.employee_code, e.name, e.department
                FROM attendance a
                JOIN employees e ON e.employee_id = a.employee_id
                ORDER BY a.created_at DESC
                LIMIT %s
                """,
                (int(limit),),
            )
            return [_to_list_row(r) for r in fetchall(cur)]
