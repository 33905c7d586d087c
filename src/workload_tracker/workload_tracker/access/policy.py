from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Sequence

import structlog

from ..core.enums import Role
from ..core.exceptions import AuthorizationError
from ..memberships.repository import MembershipRepository
from ..projects.model import Project
from ..projects.repository import ProjectRepository
from ..users.model import User

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class AccessRule:
    """Capabilities of one role.

    Each predicate receives the policy (for read-only lookups), the caller and the target.
    """

    can_view_project: Callable[["AccessPolicy", User, Project], bool]
    can_view_user_work_logs: Callable[["AccessPolicy", User, int], bool]
    accessible_projects: Callable[["AccessPolicy", User], Sequence[Project]]


def _always(policy: "AccessPolicy", caller: User, target) -> bool:
    return True


def _manages(policy: "AccessPolicy", caller: User, project: Project) -> bool:
    return project.is_managed_by(caller.email)


def _is_member(policy: "AccessPolicy", caller: User, project: Project) -> bool:
    return policy.is_active_member(project_id=project.project_id, user_id=caller.user_id)


def _manages_member(policy: "AccessPolicy", caller: User, target_user_id: int) -> bool:
    managed = {p.project_id for p in policy.projects.list_by_pm_email(caller.email)}
    if not managed:
        return False
    joined = {p.project_id for p in policy.projects.list_by_active_member(int(target_user_id))}
    return bool(managed & joined)


def _is_self(policy: "AccessPolicy", caller: User, target_user_id: int) -> bool:
    return caller.user_id == int(target_user_id)


def _all_projects(policy: "AccessPolicy", caller: User) -> Sequence[Project]:
    return list(policy.projects.list_all())


def _managed_projects(policy: "AccessPolicy", caller: User) -> Sequence[Project]:
    return list(policy.projects.list_by_pm_email(caller.email))


def _member_projects(policy: "AccessPolicy", caller: User) -> Sequence[Project]:
    return list(policy.projects.list_by_active_member(caller.user_id))


_MEMBER_RULE = AccessRule(
    can_view_project=_is_member,
    can_view_user_work_logs=_is_self,
    accessible_projects=_member_projects,
)

ACCESS_MATRIX: Dict[Role, AccessRule] = {
    Role.ADMIN: AccessRule(
        can_view_project=_always,
        can_view_user_work_logs=_always,
        accessible_projects=_all_projects,
    ),
    Role.PM: AccessRule(
        can_view_project=_manages,
        can_view_user_work_logs=_manages_member,
        accessible_projects=_managed_projects,
    ),
    Role.DEV: _MEMBER_RULE,
    Role.BA: _MEMBER_RULE,
    Role.TEST: _MEMBER_RULE,
}


class AccessPolicy:
    """Decides what a caller may see, keyed by role through ACCESS_MATRIX.

    The policy only reads; every decision is a function of the caller, the target and the
    current membership data.
    """

    def __init__(self, projects: ProjectRepository, memberships: MembershipRepository):
        self.projects = projects
        self.memberships = memberships

    def _rule(self, caller: User) -> AccessRule:
        rule = ACCESS_MATRIX.get(caller.role)
        if rule is None:
            raise AuthorizationError(f"Unsupported role: {caller.role}")
        return rule

    def is_active_member(self, *, project_id: int, user_id: int) -> bool:
        return self.memberships.get_current(project_id=project_id, user_id=user_id) is not None

    def can_view_project(self, caller: User, project: Project) -> bool:
        return self._rule(caller).can_view_project(self, caller, project)

    def can_view_project_work_logs(self, caller: User, project: Project) -> bool:
        return self.can_view_project(caller, project)

    def can_view_user_work_logs(self, caller: User, target_user_id: int) -> bool:
        return self._rule(caller).can_view_user_work_logs(self, caller, target_user_id)

    def accessible_projects(self, caller: User) -> Sequence[Project]:
        """Projects in the caller's scope. Narrows instead of failing (may be empty)."""
        return self._rule(caller).accessible_projects(self, caller)

    def ensure_can_view_project(self, caller: User, project: Project) -> None:
        if not self.can_view_project(caller, project):
            logger.warning("access_denied", action="view_project", user_id=caller.user_id, project_id=project.project_id)
            raise AuthorizationError("Access denied to this project")

    def ensure_can_view_user_work_logs(self, caller: User, target_user_id: int) -> None:
        if not self.can_view_user_work_logs(caller, target_user_id):
            logger.warning(
                "access_denied", action="view_user_work_logs", user_id=caller.user_id, target_user_id=target_user_id
            )
            raise AuthorizationError("Access denied to view work logs for this user")

    @staticmethod
    def ensure_admin(caller: User, action: str) -> None:
        if caller.role != Role.ADMIN:
            logger.warning("access_denied", action=action, user_id=caller.user_id, role=caller.role.value)
            raise AuthorizationError("Only administrators can perform this action")
