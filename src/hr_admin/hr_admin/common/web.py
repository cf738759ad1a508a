from __future__ import annotations

from datetime import date, datetime
from functools import wraps
from typing import Optional

from flask import current_app, jsonify, request, session

from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, ValidationError


def json_ok(message: Optional[str] = None, status: int = 200, **payload):
    body = {"success": True}
    if message:
        body["message"] = message
    body.update(payload)
    return jsonify(body), status


def json_error(message: str, status: int = 400, **payload):
    body = {"success": False, "message": message}
    body.update(payload)
    return jsonify(body), status


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "employee_id" not in session:
            return json_error("Please sign in to continue", 401)
        return view(*args, **kwargs)

    return wrapper


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "employee_id" not in session:
            return json_error("Please sign in to continue", 401)
        if session.get("role") != Role.ADMIN.value:
            return json_error("Admin access required", 403)
        return view(*args, **kwargs)

    return wrapper


def employee_required(view):
    """Allow only the Employee role (self-service screens)."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        if "employee_id" not in session:
            return json_error("Please sign in to continue", 401)
        if session.get("role") != Role.EMPLOYEE.value:
            return json_error("Employee access required", 403)
        return view(*args, **kwargs)

    return wrapper


def handle_errors(action: str):
    """Translate domain errors into JSON responses.

    Every failure surfaces as a message the client shows to the user;
    there is no retry policy on the server side.
    """

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            try:
                return view(*args, **kwargs)
            except AuthenticationError as e:
                return json_error(str(e), 401)
            except AuthorizationError as e:
                return json_error(str(e), 403)
            except ValidationError as e:
                return json_error(str(e), 400)
            except Exception:
                current_app.logger.exception("Unexpected error while trying to %s", action)
                return json_error(f"Failed to {action}. Please try again.", 500)

        return wrapper

    return decorator


def current_employee_id() -> int:
    return int(session["employee_id"])


def request_data() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return request.form.to_dict()
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def parse_date_arg(value: Optional[str], field_name: str) -> Optional[date]:
    v = (value or "").strip()
    if not v:
        return None
    try:
        return datetime.strptime(v, "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(f"{field_name} must be a date (YYYY-MM-DD)")


def parse_bool_arg(value) -> bool:
    """Checkbox-style flag: JSON booleans as given, form strings like "true" or "1"."""
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value).strip().lower() in ("1", "true", "yes", "on")


def parse_float_arg(value, field_name: str) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid {field_name}")


def to_json(value):
    """Make dataclass-derived dicts JSON friendly (dates, enums)."""
    if isinstance(value, dict):
        return {k: to_json(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_json(v) for v in value]
    if isinstance(value, datetime):
        return value.isoformat(timespec="seconds")
    if isinstance(value, date):
        return value.strftime("%Y-%m-%d")
    if hasattr(value, "value") and isinstance(getattr(value, "value"), str):
        return value.value
    return value
