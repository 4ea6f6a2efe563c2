from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import iso_or_none, parse_iso_date
from ..common.web import (
    current_actor,
    identity_required,
    manager_required,
    optional_int,
    optional_status,
    records_with_employees,
)
from ..container import Container
from ..core.exceptions import ValidationError
from .service import record_to_dict


def register(app: Flask, container: Container) -> None:
    svc = container.attendance_service

    def _month_history(employee_id: int):
        month = optional_int("month")
        year = optional_int("year")
        if month and year:
            return svc.month_history(employee_id, month=month, year=year)
        return svc.history(employee_id)

    @app.route("/api/attendance/checkin", methods=["POST"], endpoint="checkin")
    @identity_required
    def checkin():
        result = svc.check_in(current_actor().employee_id)
        return jsonify(
            {
                "message": "Checked in successfully",
                "attendance": {
                    "check_in_time": iso_or_none(result.check_in_time),
                    "status": result.status.value,
                },
            }
        )

    @app.route("/api/attendance/checkout", methods=["POST"], endpoint="checkout")
    @identity_required
    def checkout():
        result = svc.check_out(current_actor().employee_id)
        return jsonify(
            {
                "message": "Checked out successfully",
                "attendance": {
                    "check_out_time": iso_or_none(result.check_out_time),
                    "total_hours": str(result.total_hours),
                },
            }
        )

    @app.route("/api/attendance/today", methods=["GET"], endpoint="attendance_today")
    @identity_required
    def today():
        return jsonify(svc.get_today_status(current_actor().employee_id).to_dict())

    @app.route("/api/attendance/my-history", methods=["GET"], endpoint="my_history")
    @identity_required
    def my_history():
        return jsonify([record_to_dict(r) for r in _month_history(current_actor().employee_id)])

    @app.route("/api/attendance/employee/<int:employee_id>", methods=["GET"], endpoint="employee_history")
    @manager_required
    def employee_history(employee_id: int):
        return jsonify(records_with_employees(_month_history(employee_id), container.employees))

    @app.route("/api/attendance/override", methods=["POST"], endpoint="override_status")
    @manager_required
    def override_status():
        data = request.get_json(silent=True) or {}
        status = optional_status(data.get("status"))
        if status is None:
            raise ValidationError("status is required")
        try:
            employee_id = int(data.get("employee_id"))
        except (TypeError, ValueError):
            raise ValidationError("employee_id must be an integer")

        record = svc.override_status(
            current_actor(),
            employee_id=employee_id,
            work_date=parse_iso_date(data.get("date", "")),
            status=status,
        )
        return jsonify(record_to_dict(record))
