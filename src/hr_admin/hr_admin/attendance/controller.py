from __future__ import annotations

from flask import Flask, current_app, request

from ..common.web import (
    admin_required,
    current_employee_id,
    employee_required,
    handle_errors,
    json_error,
    json_ok,
    login_required,
    parse_date_arg,
    parse_float_arg,
    request_data,
    to_json,
)
from ..container import Container
from ..core.exceptions import LocationOutOfRangeError


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    @app.route("/api/attendance/location-check", methods=["POST"], endpoint="api_attendance_location_check")
    @employee_required
    @handle_errors("check your location")
    def api_attendance_location_check():
        data = request_data()
        result = service.check_location(
            current_employee_id(),
            parse_float_arg(data.get("lat"), "latitude"),
            parse_float_arg(data.get("lng"), "longitude"),
        )
        return json_ok(
            within_range=result.within_range,
            distance_m=result.distance_m,
            allowed_radius_m=service.office.allowed_radius_m,
        )

    @app.route("/api/attendance/mark", methods=["POST"], endpoint="api_attendance_mark")
    @employee_required
    @handle_errors("mark attendance")
    def api_attendance_mark():
        """Check in, or check out if already checked in today."""

        data = request_data()
        try:
            result = service.mark_attendance(
                current_employee_id(),
                method=data.get("method") or "manual",
                submitted_code=data.get("employee_code"),
                lat=parse_float_arg(data.get("lat"), "latitude"),
                lng=parse_float_arg(data.get("lng"), "longitude"),
            )
        except LocationOutOfRangeError as e:
            return json_error(str(e), 400, distance_m=e.distance_m, allowed_radius_m=e.allowed_radius_m)

        current_app.logger.info(
            "Attendance %s for employee %s (%sm from office)",
            result.action,
            current_employee_id(),
            result.proximity.distance_m,
        )
        return json_ok(
            result.message,
            action=result.action,
            record=service.to_row(result.record) if result.record else None,
            distance_m=result.proximity.distance_m,
            minutes_late=result.minutes_late,
        )

    @app.route("/api/attendance/today", methods=["GET"], endpoint="api_attendance_today")
    @login_required
    @handle_errors("load today's attendance")
    def api_attendance_today():
        record = service.get_today_record(current_employee_id())
        return json_ok(record=service.to_row(record) if record else None)

    @app.route("/api/attendance/history", methods=["GET"], endpoint="api_attendance_history")
    @login_required
    @handle_errors("load attendance history")
    def api_attendance_history():
        return json_ok(records=service.get_history(current_employee_id()))

    @app.route("/api/admin/attendance", methods=["GET"], endpoint="api_admin_attendance")
    @admin_required
    @handle_errors("load attendance records")
    def api_admin_attendance():
        data = service.list_for_admin(
            work_date=parse_date_arg(request.args.get("date"), "date"),
            status=request.args.get("status") or None,
            search=request.args.get("search"),
        )
        return json_ok(**to_json(data))
