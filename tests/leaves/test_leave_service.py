from __future__ import annotations

from datetime import date, datetime

import pytest

from src.hr_admin.hr_admin.core.enums import LeaveStatus, LeaveType, Role
from src.hr_admin.hr_admin.core.exceptions import AuthorizationError, ValidationError
from src.hr_admin.hr_admin.leaves.service import LeaveService, leave_days

DECIDED_AT = datetime(2026, 3, 2, 10, 0, 0)


def _apply(svc: LeaveService, **overrides) -> int:
    kwargs = dict(
        current_role=Role.EMPLOYEE,
        employee_id=2,
        leave_type="sick",
        subject="Fever",
        from_date=date(2026, 3, 9),
        to_date=date(2026, 3, 11),
    )
    kwargs.update(overrides)
    return svc.apply(**kwargs)


def test_leave_days_is_inclusive():
    assert leave_days(date(2026, 3, 9), date(2026, 3, 9)) == 1
    assert leave_days(date(2026, 3, 9), date(2026, 3, 11)) == 3


def test_employee_can_apply_and_request_starts_pending(leaves_repo):
    svc = LeaveService(leaves_repo)

    leave_id = _apply(svc)

    req = svc.get(leave_id)
    assert req.status == LeaveStatus.PENDING
    assert req.leave_type == LeaveType.SICK
    assert LeaveService.to_dict(req)["days"] == 3


def test_admin_cannot_apply(leaves_repo):
    with pytest.raises(AuthorizationError):
        _apply(LeaveService(leaves_repo), current_role=Role.ADMIN)


def test_missing_fields_are_rejected(leaves_repo):
    with pytest.raises(ValidationError, match="required fields"):
        _apply(LeaveService(leaves_repo), subject="  ")


def test_end_before_start_is_rejected(leaves_repo):
    with pytest.raises(ValidationError):
        _apply(LeaveService(leaves_repo), from_date=date(2026, 3, 11), to_date=date(2026, 3, 9))


def test_unknown_leave_type_is_rejected(leaves_repo):
    with pytest.raises(ValidationError, match="leave type"):
        _apply(LeaveService(leaves_repo), leave_type="holiday")


def test_admin_approves_pending_request(leaves_repo):
    svc = LeaveService(leaves_repo)
    leave_id = _apply(svc)

    svc.approve(current_role=Role.ADMIN, admin_employee_id=1, leave_id=leave_id, now=DECIDED_AT)

    req = svc.get(leave_id)
    assert req.status == LeaveStatus.APPROVED
    assert req.approved_by == 1
    assert req.approved_at == DECIDED_AT


def test_reject_requires_reason(leaves_repo):
    svc = LeaveService(leaves_repo)
    leave_id = _apply(svc)

    with pytest.raises(ValidationError, match="reason for rejection"):
        svc.reject(current_role=Role.ADMIN, admin_employee_id=1, leave_id=leave_id, comment=" ")
    assert svc.get(leave_id).status == LeaveStatus.PENDING

    svc.reject(current_role=Role.ADMIN, admin_employee_id=1, leave_id=leave_id, comment="Busy week", now=DECIDED_AT)
    req = svc.get(leave_id)
    assert req.status == LeaveStatus.REJECTED
    assert req.rejection_reason == "Busy week"


def test_decided_request_cannot_be_approved_again(leaves_repo):
    svc = LeaveService(leaves_repo)
    leave_id = _apply(svc)
    svc.approve(current_role=Role.ADMIN, admin_employee_id=1, leave_id=leave_id)

    with pytest.raises(ValidationError, match="already been reviewed"):
        svc.approve(current_role=Role.ADMIN, admin_employee_id=1, leave_id=leave_id)


def test_change_status_revises_a_decision(leaves_repo):
    svc = LeaveService(leaves_repo)
    leave_id = _apply(svc)
    svc.approve(current_role=Role.ADMIN, admin_employee_id=1, leave_id=leave_id)

    svc.change_status(
        current_role=Role.ADMIN, admin_employee_id=1, leave_id=leave_id, new_status="rejected", comment="Changed plans"
    )

    assert svc.get(leave_id).status == LeaveStatus.REJECTED


def test_employee_cannot_review(leaves_repo):
    svc = LeaveService(leaves_repo)
    leave_id = _apply(svc)

    with pytest.raises(AuthorizationError):
        svc.approve(current_role=Role.EMPLOYEE, admin_employee_id=2, leave_id=leave_id)


def test_admin_listing_filters_and_counts(leaves_repo):
    leaves_repo.add(2, date(2026, 3, 9), date(2026, 3, 9), status=LeaveStatus.APPROVED)
    leaves_repo.add(3, date(2026, 3, 10), date(2026, 3, 10))
    leaves_repo.add(3, date(2026, 3, 12), date(2026, 3, 12))
    svc = LeaveService(leaves_repo)

    data = svc.list_for_admin(status="pending")

    assert data["stats"] == {"pending": 2, "approved": 1, "rejected": 0, "total": 3}
    assert all(r.status == LeaveStatus.PENDING for r in data["requests"])
    assert len(svc.list_mine(employee_id=3)) == 2
