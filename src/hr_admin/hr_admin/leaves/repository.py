from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import LeaveStatus, LeaveType
from .model import LeaveRequest


class LeaveRepository(Protocol):
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
        raise NotImplementedError

    def get(self, *, leave_id: int) -> Optional[LeaveRequest]:
        raise NotImplementedError

    def list_requests(
        self,
        *,
        status: Optional[LeaveStatus] = None,
        employee_id: Optional[int] = None,
        search: Optional[str] = None,
        limit: int = 500,
    ) -> Sequence[LeaveRequest]:
        raise NotImplementedError

    def list_overlapping(
        self,
        *,
        employee_id: Optional[int],
        start: date,
        end: date,
        status: Optional[LeaveStatus] = None,
    ) -> Sequence[LeaveRequest]:
        raise NotImplementedError

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
        """Set the decision fields.

        When only_if is given the update applies only if the current
        status matches it.
        """

        raise NotImplementedError

    def count_by_status(self, status: LeaveStatus) -> int:
        raise NotImplementedError
