from __future__ import annotations

from dataclasses import dataclass
from datetime import time
from typing import Optional

from .attendance.factory import AttendanceStrategyFactory
from .attendance.geofence import OfficeLocation
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .core.constants import DEFAULT_LATE_GRACE_MINUTES
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.repository import EmployeeRepository
from .employees.service import AuthService, EmployeeService
from .leaves.mysql_leave_repository import MySQLLeaveRepository
from .leaves.repository import LeaveRepository
from .leaves.service import LeaveService
from .reports.service import ReportService
from .tasks.mysql_task_repository import MySQLTaskRepository
from .tasks.repository import TaskRepository
from .tasks.service import TaskService


@dataclass(frozen=True)
class Container:
    employees_repo: EmployeeRepository
    attendance_repo: AttendanceRepository
    leaves_repo: LeaveRepository
    tasks_repo: TaskRepository

    auth_service: AuthService
    employee_service: EmployeeService
    attendance_service: AttendanceService
    leave_service: LeaveService
    task_service: TaskService
    report_service: ReportService


def build_services(
    *,
    employees_repo: EmployeeRepository,
    attendance_repo: AttendanceRepository,
    leaves_repo: LeaveRepository,
    tasks_repo: TaskRepository,
    office: Optional[OfficeLocation] = None,
    late_after: Optional[time] = None,
    grace_minutes: int = DEFAULT_LATE_GRACE_MINUTES,
) -> Container:
    """Wire services on top of any repository implementation."""

    return Container(
        employees_repo=employees_repo,
        attendance_repo=attendance_repo,
        leaves_repo=leaves_repo,
        tasks_repo=tasks_repo,
        auth_service=AuthService(employees_repo),
        employee_service=EmployeeService(employees_repo),
        attendance_service=AttendanceService(
            attendance_repo,
            employees_repo,
            office=office,
            strategy_factory=AttendanceStrategyFactory(),
            late_after=late_after,
            grace_minutes=grace_minutes,
        ),
        leave_service=LeaveService(leaves_repo),
        task_service=TaskService(tasks_repo, employees_repo),
        report_service=ReportService(attendance_repo, leaves_repo, tasks_repo, employees_repo),
    )


def build_container(
    *,
    db_config: dict,
    office: Optional[OfficeLocation] = None,
    late_after: Optional[time] = None,
    grace_minutes: int = DEFAULT_LATE_GRACE_MINUTES,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return build_services(
        employees_repo=MySQLEmployeeRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        leaves_repo=MySQLLeaveRepository(conn),
        tasks_repo=MySQLTaskRepository(conn),
        office=office,
        late_after=late_after,
        grace_minutes=grace_minutes,
    )
