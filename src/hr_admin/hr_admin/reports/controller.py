from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import now_local
from ..common.web import admin_required, current_employee_id, handle_errors, json_ok, login_required, to_json
from ..container import Container
from ..core.exceptions import ValidationError


def _year_month() -> tuple[int, int]:
    today = now_local().date()
    try:
        year = int(request.args.get("year") or today.year)
        month = int(request.args.get("month") or today.month)
    except ValueError:
        raise ValidationError("Year and month must be numbers")
    return year, month


def register(app: Flask, container: Container) -> None:
    service = container.report_service

    @app.route("/api/reports/monthly", methods=["GET"], endpoint="api_reports_monthly")
    @login_required
    @handle_errors("load report")
    def api_reports_monthly():
        year, month = _year_month()
        report = service.monthly_report(employee_id=current_employee_id(), year=year, month=month)
        return json_ok(year=report.year, month=report.month, rows=report.rows, stats=report.stats)

    @app.route("/api/reports/calendar", methods=["GET"], endpoint="api_reports_calendar")
    @login_required
    @handle_errors("load calendar")
    def api_reports_calendar():
        year, month = _year_month()
        return json_ok(**service.calendar(employee_id=current_employee_id(), year=year, month=month))

    @app.route("/api/admin/dashboard", methods=["GET"], endpoint="api_admin_dashboard")
    @admin_required
    @handle_errors("load dashboard")
    def api_admin_dashboard():
        return json_ok(stats=to_json(service.dashboard_stats()))
