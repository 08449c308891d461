from __future__ import annotations

from functools import wraps
from typing import Iterable

from flask import jsonify, session

from ..core.enums import Role
from ..core.exceptions import AuthorizationError, DomainError, NotFoundError


def error_response(e: DomainError):
    """Render a typed domain error as JSON with a matching status code."""
    if isinstance(e, NotFoundError):
        status = 404
    elif isinstance(e, AuthorizationError):
        status = 403
    else:
        status = 400
    return jsonify({"success": False, "error": e.code, "message": str(e)}), status


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "employee_id" not in session:
            return jsonify({"success": False, "error": "unauthorized", "message": "Unauthorized"}), 401
        return view(*args, **kwargs)

    return wrapper


def roles_required(roles: Iterable[Role]):
    allowed = {r.value for r in roles}

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "employee_id" not in session:
                return jsonify({"success": False, "error": "unauthorized", "message": "Unauthorized"}), 401
            if session.get("role") not in allowed:
                return error_response(AuthorizationError("Access denied"))
            return view(*args, **kwargs)

        return wrapper

    return decorator


admin_required = roles_required([Role.ADMIN])
staff_required = roles_required([Role.ADMIN, Role.HR])


def current_employee_id() -> int:
    return int(session["employee_id"])
