from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import admin_required, current_employee_id, error_response
from ..core.exceptions import DomainError, ValidationError
from ..container import Container


def _policy_json(policy) -> dict:
    return {
        "work_hours": policy.work_hours,
        "grace_period": policy.grace_period,
        "check_in_start": policy.check_in_start,
        "check_in_end": policy.check_in_end,
        "check_out_start": policy.check_out_start,
        "check_out_end": policy.check_out_end,
        "overtime_rate": policy.overtime_rate,
        "auto_checkout": policy.auto_checkout,
        "updated_by": policy.updated_by,
        "updated_at": policy.updated_at.isoformat() if policy.updated_at else None,
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/api/admin/settings/attendance", methods=["GET"], endpoint="admin_attendance_settings")
    @admin_required
    def admin_attendance_settings():
        return jsonify({"settings": _policy_json(container.policy_service.get_active())})

    @app.route("/api/admin/settings/attendance", methods=["PUT"], endpoint="admin_attendance_settings_update")
    @admin_required
    def admin_attendance_settings_update():
        changes = request.get_json(silent=True)
        if not isinstance(changes, dict) or not changes:
            return error_response(ValidationError("Request body must be a JSON object"))
        try:
            policy = container.policy_service.update(changes, updated_by=current_employee_id())
        except DomainError as e:
            return error_response(e)
        return jsonify({"success": True, "settings": _policy_json(policy)})
