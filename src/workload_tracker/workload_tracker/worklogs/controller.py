from __future__ import annotations

from flask import Flask

from ..common.http import current_caller, date_field, int_field, json_body, ok, required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/work-logs", methods=["GET"], endpoint="list_work_logs")
    def list_work_logs():
        caller = current_caller(container.users_repo)
        return ok(container.work_log_service.list_visible(caller))

    @app.route("/api/work-logs/user/<int:user_id>", methods=["GET"], endpoint="user_work_logs")
    def user_work_logs(user_id: int):
        caller = current_caller(container.users_repo)
        return ok(container.work_log_service.list_for_user(caller, user_id))

    @app.route("/api/work-logs/project/<int:project_id>", methods=["GET"], endpoint="project_work_logs")
    def project_work_logs(project_id: int):
        caller = current_caller(container.users_repo)
        return ok(container.work_log_service.list_for_project(caller, project_id))

    @app.route("/api/work-logs", methods=["POST"], endpoint="create_work_log")
    def create_work_log():
        caller = current_caller(container.users_repo)
        body = json_body()
        entry = container.work_log_service.create_entry(
            caller,
            project_id=int_field(body, "projectId"),
            work_date=date_field(body, "workDate"),
            hours_worked=required(body, "hoursWorked"),
            task_feature=required(body, "taskFeature"),
            description=body.get("workDescription"),
        )
        return ok(entry, "Work log created successfully", 201)

    @app.route("/api/work-logs/<int:entry_id>", methods=["PUT"], endpoint="update_work_log")
    def update_work_log(entry_id: int):
        caller = current_caller(container.users_repo)
        body = json_body()
        entry = container.work_log_service.update_entry(
            caller,
            entry_id,
            work_date=date_field(body, "workDate"),
            hours_worked=required(body, "hoursWorked"),
            task_feature=required(body, "taskFeature"),
            description=body.get("workDescription"),
        )
        return ok(entry, "Work log updated successfully")

    @app.route("/api/work-logs/<int:entry_id>", methods=["DELETE"], endpoint="delete_work_log")
    def delete_work_log(entry_id: int):
        caller = current_caller(container.users_repo)
        container.work_log_service.delete_entry(caller, entry_id)
        return ok(None, "Work log deleted successfully")
