from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceMethod, AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one attendance row per employee per day."""

    attendance_id: int
    employee_id: int
    work_date: date
    check_in_time: Optional[datetime]
    check_out_time: Optional[datetime]
    status: AttendanceStatus
    method: AttendanceMethod
    check_in_lat: Optional[float] = None
    check_in_lng: Optional[float] = None
    check_out_lat: Optional[float] = None
    check_out_lng: Optional[float] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class AttendanceListRow:
    """Read-model for admin listings (record joined with the employee)."""

    record: AttendanceRecord
    employee_code: str
    employee_name: str
    department: str
