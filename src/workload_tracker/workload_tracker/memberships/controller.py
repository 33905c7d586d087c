from __future__ import annotations

from flask import Flask, request

from ..access.policy import AccessPolicy
from ..common.http import current_caller, date_field, int_field, json_body, ok, required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/projects/<int:project_id>/members", methods=["GET"], endpoint="list_project_members")
    def list_project_members(project_id: int):
        caller = current_caller(container.users_repo)
        include_ended = request.args.get("includeEnded", "").lower() in {"1", "true", "yes"}
        return ok(container.membership_ledger.list_members(caller, project_id, include_ended=include_ended))

    @app.route("/api/projects/<int:project_id>/members", methods=["POST"], endpoint="add_project_member")
    def add_project_member(project_id: int):
        caller = current_caller(container.users_repo)
        body = json_body()
        membership = container.membership_ledger.assign_member(
            caller,
            project_id=project_id,
            user_id=int_field(body, "userId"),
            workload_percentage=required(body, "workloadPercentage"),
            joined_date=date_field(body, "joinedDate", optional=True),
        )
        return ok(membership, "Member added to project successfully", 201)

    @app.route(
        "/api/projects/<int:project_id>/members/<int:user_id>", methods=["PUT"], endpoint="update_member_workload"
    )
    def update_member_workload(project_id: int, user_id: int):
        caller = current_caller(container.users_repo)
        body = json_body()
        membership = container.membership_ledger.update_workload(
            caller,
            project_id=project_id,
            user_id=user_id,
            workload_percentage=required(body, "workloadPercentage"),
        )
        return ok(membership, "Member workload updated successfully")

    @app.route(
        "/api/projects/<int:project_id>/members/<int:user_id>", methods=["DELETE"], endpoint="remove_project_member"
    )
    def remove_project_member(project_id: int, user_id: int):
        caller = current_caller(container.users_repo)
        body = request.get_json(silent=True) or {}
        membership = container.membership_ledger.end_membership(
            caller,
            project_id=project_id,
            user_id=user_id,
            left_date=date_field(body, "leftDate", optional=True),
        )
        return ok(membership, "Member removed from project successfully")

    @app.route("/api/users/<int:user_id>/workload", methods=["GET"], endpoint="user_workload")
    def user_workload(user_id: int):
        caller = current_caller(container.users_repo)
        return ok(container.membership_ledger.get_user_workload(caller, user_id))

    @app.route("/api/users/<int:user_id>/memberships", methods=["GET"], endpoint="user_memberships")
    def user_memberships(user_id: int):
        caller = current_caller(container.users_repo)
        if caller.user_id != user_id:
            AccessPolicy.ensure_admin(caller, "view_user_memberships")
        active_only = request.args.get("includeEnded", "").lower() not in {"1", "true", "yes"}
        return ok(container.membership_ledger.list_user_memberships(user_id, active_only=active_only))
