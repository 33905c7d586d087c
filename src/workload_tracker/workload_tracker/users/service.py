from __future__ import annotations

from contextlib import nullcontext
from dataclasses import replace
from typing import Any, Callable, ContextManager, Optional

import structlog

from ..access.policy import AccessPolicy
from ..common.validators import require_non_empty
from ..core.enums import Role
from ..core.exceptions import NotFoundError, ValidationError
from .model import User
from .repository import UserRepository

logger = structlog.get_logger(__name__)


class UserService:
    """Use case: manage employees (admin)."""

    def __init__(
        self,
        users: UserRepository,
        *,
        transaction: Optional[Callable[[], ContextManager[Any]]] = None,
    ):
        self._users = users
        self._transaction = transaction or nullcontext

    def _require_user(self, user_id: int) -> User:
        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFoundError(f"User not found with id: {user_id}")
        return user

    def create_user(self, caller: User, *, full_name: str, email: str, role: Role) -> User:
        AccessPolicy.ensure_admin(caller, "create_user")
        full_name = require_non_empty(full_name, "Full name")
        email = require_non_empty(email, "Email")
        if "@" not in email:
            raise ValidationError("Email is not valid", code="email")

        with self._transaction():
            if self._users.get_by_email(email):
                raise ValidationError("Email already exists", code="email")
            user_id = self._users.create_user(full_name=full_name, email=email, role=role)

        logger.info("user_created", user_id=user_id, role=role.value, created_by=caller.user_id)
        return User(user_id=user_id, full_name=full_name, email=email, role=role, is_active=True)

    def change_role(self, caller: User, user_id: int, role: Role) -> User:
        AccessPolicy.ensure_admin(caller, "change_role")
        with self._transaction():
            user = self._require_user(user_id)
            if user.role != role:
                self._users.update_role(user.user_id, role=role)

        logger.info("user_role_changed", user_id=user.user_id, previous=user.role.value, role=role.value)
        return replace(user, role=role)

    def set_active(self, caller: User, user_id: int, *, is_active: bool) -> User:
        AccessPolicy.ensure_admin(caller, "set_active")
        with self._transaction():
            user = self._require_user(user_id)
            if user.is_active != is_active:
                self._users.set_active(user.user_id, is_active=is_active)

        logger.info("user_activation_changed", user_id=user.user_id, is_active=is_active)
        return replace(user, is_active=is_active)
