from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceMethod, AttendanceStatus
from .model import AttendanceListRow, AttendanceRecord


class AttendanceRepository(Protocol):
    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_recent_for_employee(self, employee_id: int, limit: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_for_employee_between(self, employee_id: int, start: date, end: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

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
        raise NotImplementedError

    def update_checkout(self, *, attendance_id: int, check_out_time: datetime, lat: float, lng: float) -> bool:
        raise NotImplementedError

    def list_for_admin(
        self,
        *,
        work_date: Optional[date] = None,
        status: Optional[AttendanceStatus] = None,
        search: Optional[str] = None,
        limit: int = 500,
    ) -> Sequence[AttendanceListRow]:
        raise NotImplementedError

    def list_recent(self, limit: int) -> Sequence[AttendanceListRow]:
        raise NotImplementedError
