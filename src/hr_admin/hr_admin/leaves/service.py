from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import now_local
from ..common.validators import optional_text, parse_enum, require_non_empty
from ..core.constants import DEFAULT_LIST_LIMIT
from ..core.enums import LeaveStatus, LeaveType, Role
from ..core.exceptions import AuthorizationError, ValidationError
from .model import LeaveRequest
from .repository import LeaveRepository


def leave_days(from_date: date, to_date: date) -> int:
    """Inclusive day count of a leave range."""
    return abs((to_date - from_date).days) + 1


class LeaveService:
    def __init__(self, leaves: LeaveRepository):
        self._leaves = leaves

    def apply(
        self,
        *,
        current_role: Role,
        employee_id: int,
        leave_type: LeaveType | str,
        subject: str,
        from_date: Optional[date],
        to_date: Optional[date],
        description: str = "",
        has_document: bool = False,
    ) -> int:
        if current_role != Role.EMPLOYEE:
            raise AuthorizationError("Only employees can apply for leave")

        if not leave_type or not (subject or "").strip() or not from_date or not to_date:
            raise ValidationError("Please fill in all required fields")

        leave_type = parse_enum(LeaveType, leave_type, "leave type")
        subject = require_non_empty(subject, "Subject")
        if to_date < from_date:
            raise ValidationError("End date must be on or after the start date")

        return self._leaves.create(
            employee_id=int(employee_id),
            leave_type=leave_type,
            subject=subject,
            description=(description or "").strip(),
            from_date=from_date,
            to_date=to_date,
            has_document=bool(has_document),
        )

    def get(self, leave_id: int) -> LeaveRequest:
        req = self._leaves.get(leave_id=int(leave_id))
        if not req:
            raise ValidationError("Leave request not found")
        return req

    def approve(
        self,
        *,
        current_role: Role,
        admin_employee_id: int,
        leave_id: int,
        comment: str = "",
        now: Optional[datetime] = None,
    ) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission to review leave requests")

        req = self.get(leave_id)
        if req.status != LeaveStatus.PENDING:
            raise ValidationError("Leave request has already been reviewed")

        ok = self._leaves.decide(
            leave_id=req.leave_id,
            status=LeaveStatus.APPROVED,
            decided_by=int(admin_employee_id),
            decided_at=now or now_local(),
            comment=optional_text(comment),
            only_if=LeaveStatus.PENDING,
        )
        if not ok:
            raise ValidationError("Failed to approve leave request")

    def reject(
        self,
        *,
        current_role: Role,
        admin_employee_id: int,
        leave_id: int,
        comment: str,
        now: Optional[datetime] = None,
    ) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission to review leave requests")

        reason = optional_text(comment)
        if not reason:
            raise ValidationError("Please provide a reason for rejection.")

        req = self.get(leave_id)
        if req.status != LeaveStatus.PENDING:
            raise ValidationError("Leave request has already been reviewed")

        ok = self._leaves.decide(
            leave_id=req.leave_id,
            status=LeaveStatus.REJECTED,
            decided_by=int(admin_employee_id),
            decided_at=now or now_local(),
            comment=reason,
            only_if=LeaveStatus.PENDING,
        )
        if not ok:
            raise ValidationError("Failed to reject leave request")

    def change_status(
        self,
        *,
        current_role: Role,
        admin_employee_id: int,
        leave_id: int,
        new_status: LeaveStatus | str,
        comment: str = "",
        now: Optional[datetime] = None,
    ) -> None:
        """Revise an existing decision (last write wins)."""

        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission to review leave requests")

        new_status = parse_enum(LeaveStatus, new_status, "status")
        reason = optional_text(comment)
        if new_status == LeaveStatus.REJECTED and not reason:
            raise ValidationError("Please provide a reason for rejection.")

        req = self.get(leave_id)
        ok = self._leaves.decide(
            leave_id=req.leave_id,
            status=new_status,
            decided_by=int(admin_employee_id),
            decided_at=now or now_local(),
            comment=reason,
        )
        if not ok:
            raise ValidationError("Failed to update leave status")

    def list_mine(self, *, employee_id: int) -> list[LeaveRequest]:
        return list(self._leaves.list_requests(employee_id=int(employee_id), limit=DEFAULT_LIST_LIMIT))

    def list_for_admin(
        self,
        *,
        status: Optional[LeaveStatus | str] = None,
        search: Optional[str] = None,
    ) -> dict:
        status_filter = parse_enum(LeaveStatus, status, "status") if status else None

        all_requests = list(self._leaves.list_requests(search=optional_text(search), limit=DEFAULT_LIST_LIMIT))
        stats = {s.value: 0 for s in LeaveStatus}
        stats["total"] = len(all_requests)
        for r in all_requests:
            stats[r.status.value] += 1

        requests = [r for r in all_requests if status_filter is None or r.status == status_filter]
        return {"requests": requests, "stats": stats}

    @staticmethod
    def to_dict(req: LeaveRequest) -> dict:
        return {
            "leave_id": req.leave_id,
            "employee_id": req.employee_id,
            "employee_code": req.employee_code,
            "employee_name": req.employee_name,
            "leave_type": req.leave_type.value,
            "subject": req.subject,
            "description": req.description,
            "from_date": req.from_date,
            "to_date": req.to_date,
            "days": leave_days(req.from_date, req.to_date),
            "status": req.status.value,
            "has_document": req.has_document,
            "approved_by": req.approved_by,
            "approved_at": req.approved_at,
            "rejection_reason": req.rejection_reason,
            "created_at": req.created_at,
        }
