from __future__ import annotations

from datetime import datetime, time, timedelta

import pytest

from src.hr_admin.hr_admin.attendance.geofence import OfficeLocation
from src.hr_admin.hr_admin.attendance.service import CHECK_IN, CHECK_OUT, AttendanceService
from src.hr_admin.hr_admin.core.enums import AttendanceMethod, AttendanceStatus
from src.hr_admin.hr_admin.core.exceptions import AuthorizationError, LocationOutOfRangeError, ValidationError
from src.hr_admin.hr_admin.reports.calculator.base import WorkedTimeCalculator

OFFICE = OfficeLocation(lat=11.603722, lng=76.209250, allowed_radius_m=100)


def _service(attendance_repo, employees_repo, **kwargs) -> AttendanceService:
    return AttendanceService(attendance_repo, employees_repo, office=OFFICE, **kwargs)


def test_first_mark_checks_in_then_second_checks_out(attendance_repo, employees_repo, fixed_now):
    svc = _service(attendance_repo, employees_repo)

    first = svc.mark_attendance(2, method="qr", submitted_code="EMP002", lat=OFFICE.lat, lng=OFFICE.lng, now=fixed_now)
    assert first.action == CHECK_IN
    assert first.message == "Attendance check-in successful!"
    assert first.record.status == AttendanceStatus.PRESENT
    assert first.record.method == AttendanceMethod.QR

    later = fixed_now + timedelta(hours=8, minutes=30)
    second = svc.mark_attendance(2, method="qr", submitted_code="EMP002", lat=OFFICE.lat, lng=OFFICE.lng, now=later)
    assert second.action == CHECK_OUT
    assert second.record.check_out_time == later
    assert svc.to_row(second.record)["worked_hours"] == "08:30"


def test_third_mark_same_day_is_rejected(attendance_repo, employees_repo, fixed_now):
    svc = _service(attendance_repo, employees_repo)
    for minutes in (0, 60):
        svc.mark_attendance(
            2, method="manual", submitted_code="EMP002", lat=OFFICE.lat, lng=OFFICE.lng,
            now=fixed_now + timedelta(minutes=minutes),
        )

    with pytest.raises(ValidationError, match="already checked out"):
        svc.mark_attendance(
            2, method="manual", submitted_code="EMP002", lat=OFFICE.lat, lng=OFFICE.lng,
            now=fixed_now + timedelta(hours=2),
        )


def test_code_of_another_employee_is_refused(attendance_repo, employees_repo, fixed_now):
    svc = _service(attendance_repo, employees_repo)

    with pytest.raises(AuthorizationError):
        svc.mark_attendance(2, method="qr", submitted_code="EMP003", lat=OFFICE.lat, lng=OFFICE.lng, now=fixed_now)
    assert attendance_repo.records == {}


def test_missing_code_is_refused(attendance_repo, employees_repo, fixed_now):
    svc = _service(attendance_repo, employees_repo)

    with pytest.raises(ValidationError, match="Employee ID is required"):
        svc.mark_attendance(2, method="manual", submitted_code="  ", lat=OFFICE.lat, lng=OFFICE.lng, now=fixed_now)


def test_in_office_employee_far_away_is_refused(attendance_repo, employees_repo, fixed_now):
    svc = _service(attendance_repo, employees_repo)

    with pytest.raises(LocationOutOfRangeError) as exc:
        svc.mark_attendance(2, method="manual", submitted_code="EMP002", lat=OFFICE.lat + 0.01, lng=OFFICE.lng, now=fixed_now)

    assert exc.value.distance_m > 1000
    assert "within 100m" in str(exc.value)
    assert attendance_repo.records == {}


def test_remote_employee_can_mark_from_anywhere(attendance_repo, employees_repo, fixed_now):
    svc = _service(attendance_repo, employees_repo)

    result = svc.mark_attendance(3, method="manual", submitted_code="EMP003", lat=0.0, lng=0.0, now=fixed_now)

    assert result.action == CHECK_IN
    assert result.proximity.distance_m == 0


def test_missing_location_is_refused(attendance_repo, employees_repo, fixed_now):
    svc = _service(attendance_repo, employees_repo)

    with pytest.raises(ValidationError, match="Location not available"):
        svc.mark_attendance(2, method="manual", submitted_code="EMP002", lat=None, lng=None, now=fixed_now)


def test_late_cutoff_marks_late(attendance_repo, employees_repo, fixed_now):
    svc = _service(attendance_repo, employees_repo, late_after=time(8, 30), grace_minutes=10)

    result = svc.mark_attendance(2, method="manual", submitted_code="EMP002", lat=OFFICE.lat, lng=OFFICE.lng, now=fixed_now)

    assert result.record.status == AttendanceStatus.LATE
    assert result.minutes_late == 30


def test_admin_listing_counts_by_status(attendance_repo, employees_repo, fixed_now):
    today = fixed_now.date()
    attendance_repo.add(2, today, status=AttendanceStatus.PRESENT, check_in=fixed_now)
    attendance_repo.add(3, today, status=AttendanceStatus.LATE, check_in=fixed_now)
    svc = _service(attendance_repo, employees_repo)

    data = svc.list_for_admin(work_date=today)

    assert data["stats"]["total"] == 2
    assert data["stats"]["present"] == 1
    assert data["stats"]["late"] == 1
    assert {r["employee_code"] for r in data["records"]} == {"EMP002", "EMP003"}

    late_only = svc.list_for_admin(work_date=today, status="late")
    assert [r["employee_code"] for r in late_only["records"]] == ["EMP003"]
    assert late_only["stats"] == data["stats"]


def test_on_time_check_in_has_no_minutes_late(attendance_repo, employees_repo, fixed_now):
    svc = _service(attendance_repo, employees_repo, late_after=time(9, 30))

    result = svc.mark_attendance(2, method="manual", submitted_code="EMP002", lat=OFFICE.lat, lng=OFFICE.lng, now=fixed_now)

    assert result.record.status == AttendanceStatus.PRESENT
    assert result.minutes_late == 0


def test_worked_hours_follow_the_configured_calculator(attendance_repo, employees_repo, fixed_now):
    class FlatDayCalculator(WorkedTimeCalculator):
        def worked_minutes(self, record) -> int:
            return 8 * 60

    record = attendance_repo.add(2, fixed_now.date(), check_in=fixed_now)
    svc = _service(attendance_repo, employees_repo, calculator=FlatDayCalculator())

    assert svc.to_row(record)["worked_hours"] == "08:00"
    assert svc.get_history(2)[0]["worked_hours"] == "08:00"
