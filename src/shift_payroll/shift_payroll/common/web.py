"""Helpers shared by the Flask controllers.

The caller identity (``session["user_id"]`` / ``session["role"]``) is written by
the external login flow; controllers only read it.
"""

from __future__ import annotations

from functools import wraps
from typing import Optional

from flask import jsonify, request, session

from ..core.enums import Role
from ..core.exceptions import AuthenticationError, ValidationError
from .datetime_utils import parse_iso_date, parse_iso_datetime


def current_user_id() -> int:
    if "user_id" not in session:
        raise AuthenticationError("Please sign in to continue")
    return int(session["user_id"])


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return jsonify({"success": False, "error": "authentication_error", "message": "Please sign in to continue"}), 401
        return view(*args, **kwargs)

    return wrapper


def role_required(role: Role):
    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                return jsonify({"success": False, "error": "authentication_error", "message": "Please sign in to continue"}), 401
            if session.get("role") != role.value:
                return jsonify({"success": False, "error": "authorization_error", "message": "You do not have access to this resource"}), 403
            return view(*args, **kwargs)

        return wrapper

    return decorator


provider_required = role_required(Role.SERVICE_PROVIDER)
worker_required = role_required(Role.SUPPORT_WORKER)


def json_body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def require_field(data: dict, name: str):
    value = data.get(name)
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError(f"{name} is required")
    return value


def require_int(data: dict, name: str) -> int:
    value = require_field(data, name)
    if isinstance(value, bool):
        raise ValidationError(f"{name} must be an integer id")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{name} must be an integer id")


def optional_int(value) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid id {value!r}")


def optional_date_arg(name: str):
    value = request.args.get(name)
    return parse_iso_date(value) if value else None


def optional_datetime(value):
    return parse_iso_datetime(value) if value else None


def ok(payload, status: int = 200):
    return jsonify(payload), status
