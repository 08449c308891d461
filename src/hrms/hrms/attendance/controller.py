from __future__ import annotations

from datetime import date

from flask import Flask, jsonify, request

from ..common.datetime_utils import now_local, parse_iso_date
from ..common.http import admin_required, current_employee_id, error_response, login_required, staff_required
from ..common.validators import require_positive_int
from ..core.enums import AttendanceStatus
from ..core.exceptions import DomainError, ValidationError
from ..container import Container


def _event_json(event) -> dict:
    return {
        "id": event.attendance_id,
        "employee_id": event.employee_id,
        "date": event.work_date.isoformat(),
        "check_in": event.check_in.isoformat() if event.check_in else None,
        "check_out": event.check_out.isoformat() if event.check_out else None,
        "status": event.status.value,
        "late_minutes": event.late_minutes,
        "early_checkout": event.early_checkout,
        "early_minutes": event.early_minutes,
        "overtime_minutes": event.overtime_minutes,
        "work_hours": f"{event.work_hours:.2f}",
        "is_manual_entry": event.is_manual_entry,
        "notes": event.notes,
    }


def register(app: Flask, container: Container) -> None:
    def _today() -> date:
        return now_local(container.tz).date()

    def _parse_status(value: str | None) -> AttendanceStatus | None:
        if not value:
            return None
        try:
            return AttendanceStatus(value)
        except ValueError as e:
            raise ValidationError(f"Unknown status {value!r}") from e

    @app.route("/api/attendance/checkin", methods=["POST"], endpoint="api_checkin")
    @login_required
    def api_checkin():
        data = request.get_json(silent=True) or {}
        try:
            # Without a timestamp the server clock is used.
            outcome = container.attendance_service.check_in(current_employee_id(), timestamp=data.get("timestamp"))
        except DomainError as e:
            return error_response(e)
        return jsonify({"success": True, "message": outcome.message, "attendance": _event_json(outcome.event)})

    @app.route("/api/attendance/checkout", methods=["POST"], endpoint="api_checkout")
    @login_required
    def api_checkout():
        data = request.get_json(silent=True) or {}
        try:
            outcome = container.attendance_service.check_out(current_employee_id(), timestamp=data.get("timestamp"))
        except DomainError as e:
            return error_response(e)
        return jsonify({"success": True, "message": outcome.message, "attendance": _event_json(outcome.event)})

    @app.route("/api/attendance/today", methods=["GET"], endpoint="api_today")
    @login_required
    def api_today():
        try:
            summary = container.attendance_service.today(current_employee_id())
        except DomainError as e:
            return error_response(e)
        return jsonify({"attendance": summary})

    @app.route("/api/attendance/history", methods=["GET"], endpoint="api_history")
    @login_required
    def api_history():
        try:
            limit = require_positive_int(request.args.get("limit", "15"), "limit")
        except DomainError as e:
            return error_response(e)
        rows = container.attendance_service.get_history_ui(current_employee_id(), limit=limit)
        return jsonify({"data": rows})

    @app.route("/api/admin/attendance/list", methods=["GET"], endpoint="admin_attendance_list")
    @staff_required
    def admin_attendance_list():
        try:
            date_s = request.args.get("date")
            page = container.report_service.list_records(
                work_date=parse_iso_date(date_s) if date_s else None,
                limit=request.args.get("limit", "100"),
                offset=request.args.get("offset", "0"),
            )
        except DomainError as e:
            return error_response(e)
        return jsonify({"success": True, "data": page.rows, "pagination": page.pagination()})

    @app.route("/api/admin/attendance/report", methods=["GET"], endpoint="admin_attendance_report")
    @staff_required
    def admin_attendance_report():
        try:
            today = _today()
            start_s = request.args.get("start")
            end_s = request.args.get("end")
            data = container.report_service.build_attendance_report(
                start=parse_iso_date(start_s) if start_s else today.replace(day=1),
                end=parse_iso_date(end_s) if end_s else today,
                department=request.args.get("department") or None,
                status=_parse_status(request.args.get("status")),
            )
        except DomainError as e:
            return error_response(e)
        return jsonify({"rows": data.rows, "summary": data.summary, "total": len(data.rows)})

    @app.route("/api/admin/attendance/stats", methods=["GET"], endpoint="admin_attendance_stats")
    @staff_required
    def admin_attendance_stats():
        try:
            date_s = request.args.get("date")
            stats = container.report_service.daily_stats(work_date=parse_iso_date(date_s) if date_s else _today())
        except DomainError as e:
            return error_response(e)
        return jsonify({"stats": stats})

    @app.route("/api/admin/attendance/manual", methods=["POST"], endpoint="admin_attendance_manual")
    @admin_required
    def admin_attendance_manual():
        data = request.get_json(silent=True) or {}
        employee_id = data.get("employee_id")
        date_s = data.get("date")
        if not employee_id or not date_s or not data.get("check_in") or not data.get("check_out"):
            return error_response(ValidationError("Employee, date, check-in, and check-out times are required"))

        try:
            employee_id = int(employee_id)
        except (TypeError, ValueError):
            return error_response(ValidationError("employee_id must be an integer"))

        try:
            event = container.attendance_service.manual_entry(
                employee_id,
                parse_iso_date(date_s),
                data["check_in"],
                data["check_out"],
                data.get("notes"),
                entered_by=current_employee_id(),
            )
        except DomainError as e:
            return error_response(e)
        return jsonify({"success": True, "message": "Attendance record saved", "attendance": _event_json(event)})

    @app.route("/api/admin/attendance/<int:attendance_id>", methods=["DELETE"], endpoint="admin_attendance_delete")
    @admin_required
    def admin_attendance_delete(attendance_id: int):
        try:
            container.attendance_service.delete_record(attendance_id, deleted_by=current_employee_id())
        except DomainError as e:
            return error_response(e)
        return jsonify({"success": True, "message": "Attendance record deleted successfully"})
