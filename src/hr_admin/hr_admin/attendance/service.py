from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Optional

from ..common.datetime_utils import format_hours, now_local
from ..common.validators import optional_text, parse_enum
from ..core.constants import DEFAULT_HISTORY_LIMIT, DEFAULT_LIST_LIMIT
from ..core.enums import AttendanceMethod, AttendanceStatus
from ..core.exceptions import AuthorizationError, LocationOutOfRangeError, ValidationError
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..reports.calculator.base import WorkedTimeCalculator
from ..reports.calculator.standard_calculator import StandardWorkedTimeCalculator
from .factory import AttendanceStrategyFactory
from .geofence import OfficeLocation, ProximityResult, check_employee_proximity, validate_coordinates
from .model import AttendanceListRow, AttendanceRecord
from .repository import AttendanceRepository

CHECK_IN = "check_in"
CHECK_OUT = "check_out"


@dataclass(frozen=True)
class MarkResult:
    action: str
    record: AttendanceRecord
    proximity: ProximityResult
    minutes_late: int = 0

    @property
    def message(self) -> str:
        if self.action == CHECK_IN:
            return "Attendance check-in successful!"
        return "Check-out time recorded!"


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        *,
        office: Optional[OfficeLocation] = None,
        strategy_factory: Optional[AttendanceStrategyFactory] = None,
        late_after: Optional[time] = None,
        grace_minutes: int = 0,
        calculator: Optional[WorkedTimeCalculator] = None,
    ):
        self._attendance = attendance
        self._employees = employees
        self._office = office or OfficeLocation()
        self._factory = strategy_factory or AttendanceStrategyFactory()
        self._late_after = late_after
        self._grace_minutes = int(grace_minutes)
        self._calculator = calculator or StandardWorkedTimeCalculator()

    @property
    def office(self) -> OfficeLocation:
        return self._office

    def _get_employee(self, employee_id: int) -> Employee:
        employee = self._employees.get_by_id(int(employee_id))
        if not employee:
            raise ValidationError("Employee not found")
        return employee

    def check_location(self, employee_id: int, lat: Optional[float], lng: Optional[float]) -> ProximityResult:
        """Proximity of the employee's reported position, without marking anything."""

        if lat is None or lng is None:
            raise ValidationError("Location not available. Please enable location services.")
        validate_coordinates(lat, lng)
        employee = self._get_employee(employee_id)
        return check_employee_proximity(employee.work_location, lat, lng, self._office)

    def mark_attendance(
        self,
        employee_id: int,
        *,
        method: AttendanceMethod | str,
        submitted_code: Optional[str],
        lat: Optional[float],
        lng: Optional[float],
        now: Optional[datetime] = None,
    ) -> MarkResult:
        """Check in if there is no record today, otherwise check out."""

        method = parse_enum(AttendanceMethod, method, "method")
        code = optional_text(submitted_code)
        if not code:
            raise ValidationError("Employee ID is required")

        employee = self._get_employee(employee_id)
        if code != employee.employee_code:
            raise AuthorizationError("You can only mark attendance for your own Employee ID")

        proximity = self.check_location(employee.employee_id, lat, lng)
        if not proximity.within_range:
            raise LocationOutOfRangeError(
                distance_m=proximity.distance_m,
                allowed_radius_m=self._office.allowed_radius_m,
            )

        now = now or now_local()
        today = now.date()
        existing = self._attendance.get_for_employee_and_date(employee.employee_id, today)
        minutes_late = 0

        if existing is None:
            strategy = self._factory.for_checkin(now=now, late_after=self._late_after, grace_minutes=self._grace_minutes)
            decision = strategy.decide_checkin(now=now, late_after=self._late_after, grace_minutes=self._grace_minutes)
            self._attendance.create_checkin(
                employee_id=employee.employee_id,
                work_date=today,
                check_in_time=now,
                lat=float(lat),
                lng=float(lng),
                status=decision.status,
                method=method,
            )
            minutes_late = decision.minutes_late
            action = CHECK_IN
        elif existing.check_out_time is None:
            ok = self._attendance.update_checkout(
                attendance_id=existing.attendance_id,
                check_out_time=now,
                lat=float(lat),
                lng=float(lng),
            )
            if not ok:
                raise ValidationError("Failed to mark attendance. Please try again.")
            action = CHECK_OUT
        else:
            raise ValidationError("You have already checked out for today")

        record = self._attendance.get_for_employee_and_date(employee.employee_id, today)
        return MarkResult(action=action, record=record, proximity=proximity, minutes_late=minutes_late)

    def get_today_record(self, employee_id: int, today: Optional[date] = None) -> Optional[AttendanceRecord]:
        today = today or now_local().date()
        return self._attendance.get_for_employee_and_date(int(employee_id), today)

    def get_history(self, employee_id: int, *, limit: int = DEFAULT_HISTORY_LIMIT) -> list[dict]:
        rows = self._attendance.get_recent_for_employee(int(employee_id), int(limit))
        return [self.to_row(r) for r in rows]

    def list_for_admin(
        self,
        *,
        work_date: Optional[date] = None,
        status: Optional[AttendanceStatus | str] = None,
        search: Optional[str] = None,
    ) -> dict:
        status_filter = parse_enum(AttendanceStatus, status, "status") if status else None
        all_rows = list(
            self._attendance.list_for_admin(
                work_date=work_date,
                search=optional_text(search),
                limit=DEFAULT_LIST_LIMIT,
            )
        )

        stats = {s.value: 0 for s in AttendanceStatus}
        stats["total"] = len(all_rows)
        for row in all_rows:
            stats[row.record.status.value] += 1

        rows = [r for r in all_rows if status_filter is None or r.record.status == status_filter]
        return {"records": [self._to_admin_row(r) for r in rows], "stats": stats}

    def to_row(self, r: AttendanceRecord) -> dict:
        return {
            "attendance_id": r.attendance_id,
            "date": r.work_date.strftime("%Y-%m-%d"),
            "check_in": r.check_in_time.strftime("%H:%M:%S") if r.check_in_time else "-",
            "check_out": r.check_out_time.strftime("%H:%M:%S") if r.check_out_time else "-",
            "status": r.status.value,
            "method": r.method.value,
            "worked_hours": format_hours(self._calculator.worked_minutes(r)),
        }

    def _to_admin_row(self, row: AttendanceListRow) -> dict:
        out = self.to_row(row.record)
        out.update(
            {
                "employee_id": row.record.employee_id,
                "employee_code": row.employee_code,
                "employee_name": row.employee_name,
                "department": row.department,
                "location": (
                    {"lat": row.record.check_in_lat, "lng": row.record.check_in_lng}
                    if row.record.check_in_lat is not None
                    else None
                ),
            }
        )
        return out
