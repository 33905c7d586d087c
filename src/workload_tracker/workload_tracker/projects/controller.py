from __future__ import annotations

from flask import Flask

from ..common.http import current_caller, date_field, enum_field, json_body, ok, required
from ..container import Container
from ..core.enums import ProjectStatus, ProjectType


def register(app: Flask, container: Container) -> None:
    @app.route("/api/projects", methods=["GET"], endpoint="list_projects")
    def list_projects():
        caller = current_caller(container.users_repo)
        return ok(container.project_service.list_projects(caller))

    @app.route("/api/projects/<int:project_id>", methods=["GET"], endpoint="get_project")
    def get_project(project_id: int):
        caller = current_caller(container.users_repo)
        return ok(container.project_service.get_project(caller, project_id))

    @app.route("/api/projects", methods=["POST"], endpoint="create_project")
    def create_project():
        caller = current_caller(container.users_repo)
        body = json_body()
        project = container.project_service.create_project(
            caller,
            project_code=required(body, "projectCode"),
            project_name=required(body, "projectName"),
            pm_email=required(body, "pmEmail"),
            project_type=enum_field(ProjectType, body, "projectType"),
            start_date=date_field(body, "startDate"),
            end_date=date_field(body, "endDate", optional=True),
            status=enum_field(ProjectStatus, body, "status", default=ProjectStatus.PRESALE),
            description=body.get("description"),
        )
        return ok(project, "Project created successfully", 201)

    @app.route("/api/projects/<int:project_id>", methods=["PUT"], endpoint="update_project")
    def update_project(project_id: int):
        caller = current_caller(container.users_repo)
        body = json_body()
        project = container.project_service.update_project(
            caller,
            project_id,
            project_code=required(body, "projectCode"),
            project_name=required(body, "projectName"),
            pm_email=required(body, "pmEmail"),
            project_type=enum_field(ProjectType, body, "projectType"),
            start_date=date_field(body, "startDate"),
            end_date=date_field(body, "endDate", optional=True),
            description=body.get("description"),
        )
        return ok(project, "Project updated successfully")

    @app.route("/api/projects/<int:project_id>/status", methods=["PUT"], endpoint="update_project_status")
    def update_project_status(project_id: int):
        caller = current_caller(container.users_repo)
        status = enum_field(ProjectStatus, json_body(), "status")
        project = container.project_service.change_status(caller, project_id, status)
        return ok(project, "Project status updated successfully")
