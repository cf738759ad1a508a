from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import LeaveStatus, LeaveType


@dataclass(frozen=True)
class LeaveRequest:
    leave_id: int
    employee_id: int
    leave_type: LeaveType
    subject: str
    description: str
    from_date: date
    to_date: date
    status: LeaveStatus
    has_document: bool
    created_at: Optional[datetime] = None
    approved_by: Optional[int] = None
    approved_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None
    employee_name: Optional[str] = None
    employee_code: Optional[str] = None

    def overlaps(self, start: date, end: date) -> bool:
        return self.from_date <= end and self.to_date >= start
