from __future__ import annotations

from flask import Flask, jsonify, request

from ..attendance.model import RecordFilter
from ..common.datetime_utils import parse_iso_date, parse_optional_date
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
from .export import EXPORT_COLUMNS, EXPORT_TITLES


def register(app: Flask, container: Container) -> None:
    reports = container.report_service
    attendance = container.attendance_service

    def _filters_from_query() -> RecordFilter:
        return RecordFilter(
            employee_code=(request.args.get("employeeId") or "").strip() or None,
            start=parse_optional_date(request.args.get("startDate")),
            end=parse_optional_date(request.args.get("endDate")),
            status=optional_status(request.args.get("status")),
            department=(request.args.get("department") or "").strip() or None,
        )

    @app.route("/api/attendance/my-summary", methods=["GET"], endpoint="my_summary")
    @identity_required
    def my_summary():
        summary = reports.personal_month_summary(
            current_actor().employee_id,
            month=optional_int("month"),
            year=optional_int("year"),
        )
        return jsonify(summary.to_dict())

    @app.route("/api/attendance/all", methods=["GET"], endpoint="all_attendance")
    @manager_required
    def all_attendance():
        records = attendance.find_records(_filters_from_query(), limit=optional_int("limit"))
        return jsonify(records_with_employees(records, container.employees))

    @app.route("/api/attendance/summary", methods=["GET"], endpoint="team_summary")
    @manager_required
    def team_summary():
        summary = reports.team_month_summary(
            current_actor(),
            month=optional_int("month"),
            year=optional_int("year"),
        )
        return jsonify(summary.to_dict())

    @app.route("/api/attendance/today-status", methods=["GET"], endpoint="today_status_all")
    @manager_required
    def today_status_all():
        return jsonify([s.to_dict() for s in reports.today_status_for_all(current_actor())])

    @app.route("/api/attendance/calendar", methods=["GET"], endpoint="team_calendar")
    @manager_required
    def team_calendar():
        value = request.args.get("date")
        if not value:
            raise ValidationError("date is required")
        return jsonify(reports.team_calendar_day(current_actor(), parse_iso_date(value)).to_dict())

    @app.route("/api/attendance/export", methods=["GET"], endpoint="export_attendance")
    @manager_required
    def export_attendance():
        rows = reports.export_rows(current_actor(), _filters_from_query())
        return jsonify(
            {
                "columns": [{"id": c, "title": EXPORT_TITLES[c]} for c in EXPORT_COLUMNS],
                "rows": [row.to_dict() for row in rows],
            }
        )
