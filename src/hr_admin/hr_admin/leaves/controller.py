from __future__ import annotations

from flask import Flask, current_app, request, session

from ..common.web import (
    admin_required,
    current_employee_id,
    employee_required,
    handle_errors,
    json_ok,
    parse_bool_arg,
    parse_date_arg,
    request_data,
    to_json,
)
from ..container import Container
from ..core.enums import Role


def register(app: Flask, container: Container) -> None:
    service = container.leave_service

    def _role() -> Role:
        return Role(session["role"])

    @app.route("/api/leaves", methods=["POST"], endpoint="api_leaves_apply")
    @employee_required
    @handle_errors("submit leave request")
    def api_leaves_apply():
        data = request_data()
        leave_id = service.apply(
            current_role=_role(),
            employee_id=current_employee_id(),
            leave_type=data.get("leave_type", ""),
            subject=data.get("subject", ""),
            from_date=parse_date_arg(data.get("from_date"), "From date"),
            to_date=parse_date_arg(data.get("to_date"), "To date"),
            description=data.get("description", ""),
            has_document=parse_bool_arg(data.get("has_document")),
        )
        current_app.logger.info("Leave request %s submitted by employee %s", leave_id, current_employee_id())
        return json_ok("Leave request submitted successfully!", 201, leave_id=leave_id)

    @app.route("/api/leaves/mine", methods=["GET"], endpoint="api_leaves_mine")
    @employee_required
    @handle_errors("load your leave requests")
    def api_leaves_mine():
        requests = service.list_mine(employee_id=current_employee_id())
        return json_ok(requests=to_json([service.to_dict(r) for r in requests]))

    @app.route("/api/admin/leaves", methods=["GET"], endpoint="api_admin_leaves")
    @admin_required
    @handle_errors("load leave requests")
    def api_admin_leaves():
        data = service.list_for_admin(
            status=request.args.get("status") or None,
            search=request.args.get("search"),
        )
        return json_ok(
            requests=to_json([service.to_dict(r) for r in data["requests"]]),
            stats=data["stats"],
        )

    @app.route("/api/admin/leaves/<int:leave_id>/approve", methods=["POST"], endpoint="api_admin_leaves_approve")
    @admin_required
    @handle_errors("approve leave request")
    def api_admin_leaves_approve(leave_id: int):
        service.approve(
            current_role=_role(),
            admin_employee_id=current_employee_id(),
            leave_id=leave_id,
            comment=request_data().get("comment", ""),
        )
        current_app.logger.info("Leave request %s approved by %s", leave_id, session.get("employee_code"))
        return json_ok("Leave request approved")

    @app.route("/api/admin/leaves/<int:leave_id>/reject", methods=["POST"], endpoint="api_admin_leaves_reject")
    @admin_required
    @handle_errors("reject leave request")
    def api_admin_leaves_reject(leave_id: int):
        service.reject(
            current_role=_role(),
            admin_employee_id=current_employee_id(),
            leave_id=leave_id,
            comment=request_data().get("comment", ""),
        )
        current_app.logger.info("Leave request %s rejected by %s", leave_id, session.get("employee_code"))
        return json_ok("Leave request rejected")

    @app.route("/api/admin/leaves/<int:leave_id>/status", methods=["POST"], endpoint="api_admin_leaves_status")
    @admin_required
    @handle_errors("update leave status")
    def api_admin_leaves_status(leave_id: int):
        data = request_data()
        service.change_status(
            current_role=_role(),
            admin_employee_id=current_employee_id(),
            leave_id=leave_id,
            new_status=data.get("status", ""),
            comment=data.get("comment", ""),
        )
        return json_ok("Leave status updated")
