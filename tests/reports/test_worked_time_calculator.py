from datetime import date, datetime

from src.hr_admin.hr_admin.attendance.model import AttendanceRecord
from src.hr_admin.hr_admin.core.enums import AttendanceMethod, AttendanceStatus
from src.hr_admin.hr_admin.reports.calculator.standard_calculator import StandardWorkedTimeCalculator


def _record(check_in, check_out) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=1,
        employee_id=2,
        work_date=date(2026, 3, 2),
        check_in_time=check_in,
        check_out_time=check_out,
        status=AttendanceStatus.PRESENT,
        method=AttendanceMethod.MANUAL,
    )


def test_standard_calculator_counts_out_minus_in():
    calc = StandardWorkedTimeCalculator()
    assert calc.worked_minutes(_record(datetime(2026, 3, 2, 9, 0), datetime(2026, 3, 2, 17, 45))) == 8 * 60 + 45


def test_standard_calculator_without_checkout_is_zero():
    calc = StandardWorkedTimeCalculator()
    assert calc.worked_minutes(_record(datetime(2026, 3, 2, 9, 0), None)) == 0


def test_standard_calculator_never_negative():
    calc = StandardWorkedTimeCalculator()
    assert calc.worked_minutes(_record(datetime(2026, 3, 2, 17, 0), datetime(2026, 3, 2, 9, 0))) == 0
