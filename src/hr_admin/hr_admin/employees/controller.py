from __future__ import annotations

import io
from datetime import timedelta

import qrcode
from flask import Flask, current_app, request, send_file, session

from ..common.web import (
    admin_required,
    current_employee_id,
    handle_errors,
    json_ok,
    login_required,
    request_data,
    to_json,
)
from ..container import Container
from ..core.constants import DEFAULT_SESSION_DAYS
from ..core.enums import Role


def register(app: Flask, container: Container) -> None:
    app.permanent_session_lifetime = timedelta(days=DEFAULT_SESSION_DAYS)

    @app.route("/api/login", methods=["POST"], endpoint="api_login")
    @handle_errors("sign in")
    def api_login():
        data = request_data()
        user = container.auth_service.authenticate(data.get("email", ""), data.get("password", ""))

        session.clear()
        session.permanent = True
        session["employee_id"] = user.employee_id
        session["employee_code"] = user.employee_code
        session["name"] = user.name
        session["role"] = user.role.value
        session["work_location"] = user.work_location.value

        current_app.logger.info("Employee %s signed in as %s", user.employee_code, user.role.value)
        return json_ok(f"Welcome, {user.name}!", employee=to_json(container.employee_service.get(user.employee_id).public_dict()))

    @app.route("/api/logout", methods=["POST"], endpoint="api_logout")
    def api_logout():
        session.clear()
        return json_ok("Signed out")

    @app.route("/api/me", methods=["GET"], endpoint="api_me")
    @login_required
    @handle_errors("load your profile")
    def api_me():
        employee = container.employee_service.get(current_employee_id())
        return json_ok(employee=to_json(employee.public_dict()))

    @app.route("/api/me/qr.png", methods=["GET"], endpoint="api_me_qr")
    @login_required
    @handle_errors("generate your QR code")
    def api_me_qr():
        """Personal badge: a QR code carrying the employee code."""

        employee = container.employee_service.get(current_employee_id())
        qr = qrcode.QRCode(
            version=1,
            error_correction=qrcode.constants.ERROR_CORRECT_L,
            box_size=10,
            border=2,
        )
        qr.add_data(employee.employee_code)
        qr.make(fit=True)
        img = qr.make_image(fill_color="black", back_color="white")

        buf = io.BytesIO()
        img.save(buf, format="PNG")
        buf.seek(0)
        return send_file(buf, mimetype="image/png", download_name=f"{employee.employee_code}.png")

    @app.route("/api/admin/employees", methods=["GET"], endpoint="api_admin_employees")
    @admin_required
    @handle_errors("load employees")
    def api_admin_employees():
        employees = container.employee_service.list_employees(search=request.args.get("search"))
        return json_ok(
            employees=[to_json(e.public_dict()) for e in employees],
            next_employee_code=container.employee_service.next_employee_code(),
        )

    @app.route("/api/admin/employees", methods=["POST"], endpoint="api_admin_employees_create")
    @admin_required
    @handle_errors("create employee")
    def api_admin_employees_create():
        data = request_data()
        employee = container.employee_service.create_employee(
            current_role=Role(session["role"]),
            name=data.get("name", ""),
            email=data.get("email", ""),
            password=data.get("password", ""),
            department=data.get("department", ""),
            phone=data.get("phone"),
            role=data.get("role") or Role.EMPLOYEE,
            work_location=data.get("work_location") or "in_office",
        )
        current_app.logger.info("Employee %s created by %s", employee.employee_code, session.get("employee_code"))
        return json_ok(
            f"Employee {employee.name} added with ID {employee.employee_code}",
            201,
            employee=to_json(employee.public_dict()),
        )

    @app.route("/api/admin/employees/<int:employee_id>", methods=["PUT"], endpoint="api_admin_employees_update")
    @admin_required
    @handle_errors("update employee")
    def api_admin_employees_update(employee_id: int):
        data = request_data()
        employee = container.employee_service.update_employee(
            current_role=Role(session["role"]),
            employee_id=employee_id,
            name=data.get("name", ""),
            email=data.get("email", ""),
            department=data.get("department", ""),
            phone=data.get("phone"),
            role=data.get("role") or Role.EMPLOYEE,
            work_location=data.get("work_location") or "in_office",
        )
        return json_ok("Employee updated", employee=to_json(employee.public_dict()))

    @app.route("/api/admin/employees/<int:employee_id>", methods=["DELETE"], endpoint="api_admin_employees_delete")
    @admin_required
    @handle_errors("delete employee")
    def api_admin_employees_delete(employee_id: int):
        container.employee_service.delete_employee(
            current_role=Role(session["role"]),
            current_employee_id=current_employee_id(),
            employee_id=employee_id,
        )
        current_app.logger.info("Employee %s deleted by %s", employee_id, session.get("employee_code"))
        return json_ok("Employee deleted")

    @app.route("/api/admin/employees/<int:employee_id>/summary", methods=["GET"], endpoint="api_admin_employee_summary")
    @admin_required
    @handle_errors("load employee report")
    def api_admin_employee_summary(employee_id: int):
        return json_ok(summary=to_json(container.report_service.employee_summary(employee_id=employee_id)))
