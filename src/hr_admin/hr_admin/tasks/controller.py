from __future__ import annotations

from flask import Flask, current_app, request, session

from ..common.web import (
    admin_required,
    current_employee_id,
    employee_required,
    handle_errors,
    json_ok,
    parse_date_arg,
    request_data,
    to_json,
)
from ..container import Container
from ..core.enums import Role


def register(app: Flask, container: Container) -> None:
    service = container.task_service

    def _role() -> Role:
        return Role(session["role"])

    def _task_json(task):
        return to_json(service.to_dict(task))

    @app.route("/api/admin/tasks", methods=["GET"], endpoint="api_admin_tasks")
    @admin_required
    @handle_errors("load tasks")
    def api_admin_tasks():
        data = service.list_for_admin(
            status=request.args.get("status") or None,
            search=request.args.get("search"),
        )
        return json_ok(tasks=[_task_json(t) for t in data["tasks"]], stats=data["stats"])

    @app.route("/api/admin/tasks", methods=["POST"], endpoint="api_admin_tasks_create")
    @admin_required
    @handle_errors("create task")
    def api_admin_tasks_create():
        data = request_data()
        task_id = service.create(
            current_role=_role(),
            created_by=current_employee_id(),
            title=data.get("title", ""),
            assigned_to=data.get("assigned_to"),
            due_date=parse_date_arg(data.get("due_date"), "Due date"),
            description=data.get("description", ""),
            priority=data.get("priority") or "medium",
            reference_materials=data.get("reference_materials"),
        )
        current_app.logger.info("Task %s created by %s", task_id, session.get("employee_code"))
        return json_ok("Task created successfully!", 201, task_id=task_id)

    @app.route("/api/admin/tasks/<int:task_id>/accept", methods=["POST"], endpoint="api_admin_tasks_accept")
    @admin_required
    @handle_errors("accept task")
    def api_admin_tasks_accept(task_id: int):
        task = service.accept(current_role=_role(), task_id=task_id)
        return json_ok("Task accepted", task=_task_json(task))

    @app.route("/api/admin/tasks/<int:task_id>/reject", methods=["POST"], endpoint="api_admin_tasks_reject")
    @admin_required
    @handle_errors("reject task")
    def api_admin_tasks_reject(task_id: int):
        task = service.reject(current_role=_role(), task_id=task_id, note=request_data().get("note"))
        return json_ok("Task sent back for revision", task=_task_json(task))

    @app.route("/api/admin/tasks/<int:task_id>", methods=["DELETE"], endpoint="api_admin_tasks_delete")
    @admin_required
    @handle_errors("delete task")
    def api_admin_tasks_delete(task_id: int):
        service.delete(current_role=_role(), task_id=task_id)
        current_app.logger.info("Task %s deleted by %s", task_id, session.get("employee_code"))
        return json_ok("Task deleted")

    @app.route("/api/tasks/mine", methods=["GET"], endpoint="api_tasks_mine")
    @employee_required
    @handle_errors("load your tasks")
    def api_tasks_mine():
        groups = service.list_mine(employee_id=current_employee_id())
        return json_ok(**{name: [_task_json(t) for t in tasks] for name, tasks in groups.items()})

    @app.route("/api/tasks/<int:task_id>/status", methods=["POST"], endpoint="api_tasks_status")
    @employee_required
    @handle_errors("update task status")
    def api_tasks_status(task_id: int):
        task = service.update_status(
            current_role=_role(),
            employee_id=current_employee_id(),
            task_id=task_id,
            new_status=request_data().get("status", ""),
        )
        return json_ok("Task status updated", task=_task_json(task))

    @app.route("/api/tasks/<int:task_id>/complete", methods=["POST"], endpoint="api_tasks_complete")
    @employee_required
    @handle_errors("complete task")
    def api_tasks_complete(task_id: int):
        task = service.complete(
            current_role=_role(),
            employee_id=current_employee_id(),
            task_id=task_id,
            notes=request_data().get("notes"),
        )
        return json_ok("Task marked as completed", task=_task_json(task))

    @app.route("/api/tasks/<int:task_id>/references", methods=["POST"], endpoint="api_tasks_references")
    @employee_required
    @handle_errors("save references")
    def api_tasks_references(task_id: int):
        data = request_data()
        task = service.save_references(
            current_role=_role(),
            employee_id=current_employee_id(),
            task_id=task_id,
            references=data.get("references"),
            photos=data.get("photos") or [],
        )
        return json_ok("References saved", task=_task_json(task))
