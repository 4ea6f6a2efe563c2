from __future__ import annotations

from flask import Flask, jsonify

from ..common.web import current_actor, identity_required, manager_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    dashboards = container.dashboard_service

    @app.route("/api/dashboard/employee", methods=["GET"], endpoint="employee_dashboard")
    @identity_required
    def employee_dashboard():
        return jsonify(dashboards.employee_dashboard(current_actor().employee_id).to_dict())

    @app.route("/api/dashboard/manager", methods=["GET"], endpoint="manager_dashboard")
    @manager_required
    def manager_dashboard():
        return jsonify(dashboards.manager_dashboard(current_actor()).to_dict())
