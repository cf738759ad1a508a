from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Role used for authorization checks."""

    ADMIN = "admin"
    EMPLOYEE = "employee"


class WorkLocation(str, Enum):
    """Where an employee normally works. Only IN_OFFICE is geofenced."""

    IN_OFFICE = "in_office"
    WFH = "wfh"
    FIELD = "field"


class AttendanceStatus(str, Enum):
    PRESENT = "present"
    ABSENT = "absent"
    LATE = "late"
    ON_LEAVE = "on_leave"


class AttendanceMethod(str, Enum):
    QR = "qr"
    MANUAL = "manual"
    BIOMETRIC = "biometric"


class LeaveType(str, Enum):
    SICK = "sick"
    CASUAL = "casual"
    ANNUAL = "annual"
    MATERNITY = "maternity"
    PATERNITY = "paternity"
    UNPAID = "unpaid"


class LeaveStatus(str, Enum):
    """Approval flow of a leave request."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class TaskPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class TaskStatus(str, Enum):
    """Canonical task lifecycle.

    not_started -> in_progress -> completed -> accepted | rejected,
    with shelved as a parking state while the task is still open.
    """

    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    SHELVED = "shelved"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
