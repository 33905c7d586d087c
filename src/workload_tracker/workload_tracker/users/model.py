from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: User.

    Note: Plain data object (no DB access). `email` doubles as the PM identity key that
    projects reference through `Project.pm_email`.
    """

    user_id: int
    full_name: str
    email: str
    role: Role
    is_active: bool = True
