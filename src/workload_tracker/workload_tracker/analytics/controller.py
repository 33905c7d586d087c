from __future__ import annotations

from flask import Flask

from ..access.policy import AccessPolicy
from ..common.http import current_caller, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/analytics/projects", methods=["GET"], endpoint="project_analytics")
    def project_analytics():
        caller = current_caller(container.users_repo)
        return ok(container.analytics_service.project_analytics(caller))

    @app.route("/api/analytics/employees", methods=["GET"], endpoint="employee_analytics")
    def employee_analytics():
        caller = current_caller(container.users_repo)
        AccessPolicy.ensure_admin(caller, "employee_analytics")
        return ok(container.analytics_service.employee_analytics())

    @app.route("/api/analytics/workload", methods=["GET"], endpoint="workload_analytics")
    def workload_analytics():
        caller = current_caller(container.users_repo)
        AccessPolicy.ensure_admin(caller, "workload_analytics")
        return ok(container.analytics_service.workload_analytics())

    @app.route("/api/analytics/projects/<int:project_id>/timeline", methods=["GET"], endpoint="project_timeline")
    def project_timeline(project_id: int):
        caller = current_caller(container.users_repo)
        return ok(container.analytics_service.project_timeline(caller, project_id))
