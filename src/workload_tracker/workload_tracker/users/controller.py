from __future__ import annotations

from flask import Flask

from ..common.http import current_caller, enum_field, json_body, ok, required
from ..container import Container
from ..core.enums import Role


def register(app: Flask, container: Container) -> None:
    @app.route("/api/users", methods=["POST"], endpoint="create_user")
    def create_user():
        caller = current_caller(container.users_repo)
        body = json_body()
        user = container.user_service.create_user(
            caller,
            full_name=required(body, "fullName"),
            email=required(body, "email"),
            role=enum_field(Role, body, "role"),
        )
        return ok(user, "User created successfully", 201)

    @app.route("/api/users/<int:user_id>/role", methods=["PUT"], endpoint="change_user_role")
    def change_user_role(user_id: int):
        caller = current_caller(container.users_repo)
        role = enum_field(Role, json_body(), "role")
        return ok(container.user_service.change_role(caller, user_id, role), "User role updated successfully")

    @app.route("/api/users/<int:user_id>/active", methods=["PUT"], endpoint="set_user_active")
    def set_user_active(user_id: int):
        caller = current_caller(container.users_repo)
        is_active = bool(required(json_body(), "isActive"))
        return ok(container.user_service.set_active(caller, user_id, is_active=is_active), "User updated successfully")
