from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import format_hours, is_weekend, iter_days, month_bounds, now_local
from ..core.constants import (
    MAX_RECENT_ACTIVITIES,
    RECENT_ATTENDANCE_ACTIVITIES,
    RECENT_LEAVE_ACTIVITIES,
)
from ..core.enums import AttendanceStatus, LeaveStatus, TaskStatus
from ..core.exceptions import ValidationError
from ..employees.repository import EmployeeRepository
from ..leaves.repository import LeaveRepository
from ..tasks.repository import TaskRepository
from ..tasks.service import OPEN_STATUSES
from .calculator.base import WorkedTimeCalculator
from .calculator.standard_calculator import StandardWorkedTimeCalculator


@dataclass(frozen=True)
class MonthlyReport:
    year: int
    month: int
    rows: list[dict]
    stats: dict


def relative_time(then: Optional[datetime], now: datetime) -> str:
    if not then:
        return ""
    seconds = max(int((now - then).total_seconds()), 0)
    if seconds < 60:
        return "just now"
    if seconds < 3600:
        return f"{seconds // 60} min ago"
    if seconds < 86400:
        return f"{seconds // 3600} hours ago"
    return f"{seconds // 86400} days ago"


def _check_month(year: int, month: int) -> None:
    if not 1 <= int(month) <= 12:
        raise ValidationError("Month must be between 1 and 12")
    if not 1 <= int(year) <= 9999:
        raise ValidationError("Invalid year")


class ReportService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        leaves: LeaveRepository,
        tasks: TaskRepository,
        employees: EmployeeRepository,
        *,
        calculator: Optional[WorkedTimeCalculator] = None,
    ):
        self._attendance = attendance
        self._leaves = leaves
        self._tasks = tasks
        self._employees = employees
        self._calculator = calculator or StandardWorkedTimeCalculator()

    def monthly_report(self, *, employee_id: int, year: int, month: int) -> MonthlyReport:
        _check_month(year, month)
        start, end = month_bounds(int(year), int(month))
        records = self._attendance.list_for_employee_between(int(employee_id), start, end)

        rows: list[dict] = []
        stats = {s.value: 0 for s in AttendanceStatus}
        total_minutes = 0
        for r in records:
            minutes = self._calculator.worked_minutes(r)
            total_minutes += minutes
            stats[r.status.value] += 1
            rows.append(
                {
                    "date": r.work_date.strftime("%Y-%m-%d"),
                    "status": r.status.value,
                    "check_in": r.check_in_time.strftime("%H:%M") if r.check_in_time else "-",
                    "check_out": r.check_out_time.strftime("%H:%M") if r.check_out_time else "-",
                    "worked_hours": format_hours(minutes),
                }
            )

        stats["total_days"] = len(rows)
        stats["total_hours"] = format_hours(total_minutes)
        return MonthlyReport(year=int(year), month=int(month), rows=rows, stats=stats)

    def calendar(self, *, employee_id: int, year: int, month: int) -> dict:
        """Day map for one month.

        Attendance first, then approved leaves on top, then weekends that
        are still empty are shown as on_leave.
        """

        _check_month(year, month)
        start, end = month_bounds(int(year), int(month))
        days: dict[str, dict] = {}

        for r in self._attendance.list_for_employee_between(int(employee_id), start, end):
            minutes = self._calculator.worked_minutes(r)
            days[r.work_date.isoformat()] = {
                "status": r.status.value,
                "worked_hours": format_hours(minutes) if r.check_out_time else None,
            }

        approved = self._leaves.list_overlapping(
            employee_id=int(employee_id),
            start=start,
            end=end,
            status=LeaveStatus.APPROVED,
        )
        for leave in approved:
            for d in iter_days(max(leave.from_date, start), min(leave.to_date, end)):
                days[d.isoformat()] = {
                    "status": AttendanceStatus.ON_LEAVE.value,
                    "leave_type": leave.leave_type.value,
                }

        for d in iter_days(start, end):
            if is_weekend(d) and d.isoformat() not in days:
                days[d.isoformat()] = {"status": AttendanceStatus.ON_LEAVE.value, "holiday": True}

        stats = {s.value: 0 for s in AttendanceStatus}
        leave_breakdown: dict[str, int] = {}
        for info in days.values():
            stats[info["status"]] += 1
            if info.get("leave_type"):
                leave_breakdown[info["leave_type"]] = leave_breakdown.get(info["leave_type"], 0) + 1

        return {
            "year": int(year),
            "month": int(month),
            "days": dict(sorted(days.items())),
            "stats": stats,
            "leave_breakdown": leave_breakdown,
        }

    def dashboard_stats(self, *, today: Optional[date] = None, now: Optional[datetime] = None) -> dict:
        now = now or now_local()
        today = today or now.date()

        total = self._employees.count()
        today_rows = self._attendance.list_for_admin(work_date=today)
        present = sum(1 for row in today_rows if row.record.status == AttendanceStatus.PRESENT)
        late = sum(1 for row in today_rows if row.record.status == AttendanceStatus.LATE)
        on_leave = sum(1 for row in today_rows if row.record.status == AttendanceStatus.ON_LEAVE)

        return {
            "total_employees": total,
            "present_today": present,
            "late_arrivals": late,
            "on_leave_today": on_leave,
            "absent_today": max(0, total - present - on_leave),
            "pending_leaves": self._leaves.count_by_status(LeaveStatus.PENDING),
            "completed_tasks": self._tasks.count_by_status([TaskStatus.COMPLETED]),
            "open_tasks": self._tasks.count_by_status(OPEN_STATUSES),
            "recent_activities": self.recent_activities(now=now),
        }

    def recent_activities(self, *, now: Optional[datetime] = None) -> list[dict]:
        now = now or now_local()
        activities: list[dict] = []

        for row in self._attendance.list_recent(RECENT_ATTENDANCE_ACTIVITIES):
            activities.append(
                {
                    "type": "attendance",
                    "id": row.record.attendance_id,
                    "message": f"{row.employee_name or 'Employee'} marked attendance",
                    "time": relative_time(row.record.created_at, now),
                    "status": "warning" if row.record.status == AttendanceStatus.LATE else "success",
                }
            )

        for leave in self._leaves.list_requests(limit=RECENT_LEAVE_ACTIVITIES):
            activities.append(
                {
                    "type": "leave",
                    "id": leave.leave_id,
                    "message": f"{leave.employee_name or 'Employee'} applied for {leave.leave_type.value} leave",
                    "time": relative_time(leave.created_at, now),
                    "status": "success" if leave.status == LeaveStatus.APPROVED else "pending",
                }
            )

        return activities[:MAX_RECENT_ACTIVITIES]

    def employee_summary(self, *, employee_id: int) -> dict:
        employee = self._employees.get_by_id(int(employee_id))
        if not employee:
            raise ValidationError("Employee not found")

        attendance = {s.value: 0 for s in AttendanceStatus}
        total_minutes = 0
        records = self._attendance.list_for_employee_between(employee.employee_id, date(1970, 1, 1), date(9999, 12, 31))
        for r in records:
            attendance[r.status.value] += 1
            total_minutes += self._calculator.worked_minutes(r)
        attendance["total_days"] = len(records)
        attendance["total_hours"] = format_hours(total_minutes)

        leaves = {s.value: 0 for s in LeaveStatus}
        for req in self._leaves.list_requests(employee_id=employee.employee_id):
            leaves[req.status.value] += 1

        tasks = {s.value: 0 for s in TaskStatus}
        for t in self._tasks.list_tasks(assigned_to=employee.employee_id):
            tasks[t.status.value] += 1

        return {
            "employee": employee.public_dict(),
            "attendance": attendance,
            "leaves": leaves,
            "tasks": tasks,
        }
