from __future__ import annotations

from contextlib import nullcontext
from datetime import date
from decimal import Decimal
from typing import Any, Callable, ContextManager, Optional, Sequence

import structlog

from ..access.policy import AccessPolicy
from ..common import datetime_utils
from ..common.validators import require_workload
from ..core.enums import ProjectStatus
from ..core.exceptions import NotFoundError, ValidationError
from ..notifications.sink import NotificationSink, NullNotificationSink
from ..projects.model import Project
from ..projects.repository import ProjectRepository
from ..users.model import User
from ..users.repository import UserRepository
from .capacity import AdvisoryCapPolicy, WorkloadCapPolicy
from .model import Membership, UserWorkload
from .repository import MembershipRepository

logger = structlog.get_logger(__name__)


class MembershipLedger:
    """Use cases: who works on what, at which percentage, over which dates.

    Commands run their read-validate-write sequence inside one `transaction()` block.
    Notifications are sent after the block and never fail the command.
    """

    def __init__(
        self,
        memberships: MembershipRepository,
        projects: ProjectRepository,
        users: UserRepository,
        *,
        policy: AccessPolicy,
        cap_policy: Optional[WorkloadCapPolicy] = None,
        notifier: Optional[NotificationSink] = None,
        transaction: Optional[Callable[[], ContextManager[Any]]] = None,
    ):
        self._memberships = memberships
        self._projects = projects
        self._users = users
        self._policy = policy
        self._cap_policy = cap_policy or AdvisoryCapPolicy()
        self._notifier = notifier or NullNotificationSink()
        self._transaction = transaction or nullcontext

    def _require_project(self, project_id: int) -> Project:
        project = self._projects.get_by_id(int(project_id))
        if not project:
            raise NotFoundError(f"Project not found with id: {project_id}")
        return project

    def _require_user(self, user_id: int) -> User:
        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFoundError(f"User not found with id: {user_id}")
        return user

    def _notify(self, signal: str, **kwargs) -> None:
        try:
            getattr(self._notifier, signal)(**kwargs)
        except Exception:
            logger.exception("notification_failed", signal=signal)

    def assign_member(
        self,
        caller: User,
        *,
        project_id: int,
        user_id: int,
        workload_percentage,
        joined_date: Optional[date] = None,
    ) -> Membership:
        self._policy.ensure_admin(caller, "assign_member")
        workload = require_workload(workload_percentage)

        with self._transaction():
            project = self._require_project(project_id)
            user = self._require_user(user_id)

            if project.status == ProjectStatus.CLOSED:
                raise ValidationError("Cannot add members to a closed project", code="status")
            if not user.is_active:
                raise ValidationError("Inactive users cannot be assigned to projects", code="membership")
            if self._memberships.get_current(project_id=project.project_id, user_id=user.user_id):
                raise ValidationError("User is already an active member of this project", code="membership")

            projected = self._memberships.total_active_workload(user.user_id) + workload
            over_capacity = self._cap_policy.check(user_id=user.user_id, projected_total=projected)

            joined = joined_date or project.start_date
            membership_id = self._memberships.create_membership(
                project_id=project.project_id,
                user_id=user.user_id,
                workload_percentage=workload,
                joined_date=joined,
                created_by=caller.user_id,
            )

        membership = Membership(
            membership_id=membership_id,
            project_id=project.project_id,
            user_id=user.user_id,
            workload_percentage=workload,
            joined_date=joined,
            created_by=caller.user_id,
        )
        logger.info(
            "member_assigned",
            project_id=project.project_id,
            user_id=user.user_id,
            workload=str(workload),
            created_by=caller.user_id,
        )
        self._notify("member_assigned", membership=membership, project=project)
        if over_capacity:
            self._notify("workload_reminder", user_id=user.user_id, total_workload=projected)
        return membership

    def update_workload(self, caller: User, *, project_id: int, user_id: int, workload_percentage) -> Membership:
        self._policy.ensure_admin(caller, "update_workload")
        workload = require_workload(workload_percentage)

        with self._transaction():
            project = self._require_project(project_id)
            current = self._memberships.get_current(project_id=project.project_id, user_id=int(user_id))
            if not current:
                raise NotFoundError(f"No active membership for user {user_id} on project {project_id}")

            total = self._memberships.total_active_workload(current.user_id)
            projected = total - current.workload_percentage + workload
            over_capacity = self._cap_policy.check(user_id=current.user_id, projected_total=projected)

            self._memberships.update_workload(current.membership_id, workload_percentage=workload)

        updated = Membership(
            membership_id=current.membership_id,
            project_id=current.project_id,
            user_id=current.user_id,
            workload_percentage=workload,
            joined_date=current.joined_date,
            left_date=current.left_date,
            is_active=current.is_active,
            created_by=current.created_by,
        )
        logger.info(
            "workload_updated",
            project_id=project.project_id,
            user_id=current.user_id,
            previous=str(current.workload_percentage),
            workload=str(workload),
        )
        self._notify("workload_changed", membership=updated, project=project, previous=current.workload_percentage)
        if over_capacity:
            self._notify("workload_reminder", user_id=current.user_id, total_workload=projected)
        return updated

    def end_membership(
        self, caller: User, *, project_id: int, user_id: int, left_date: Optional[date] = None
    ) -> Membership:
        """End a membership; ending an already ended one returns it unchanged."""

        self._policy.ensure_admin(caller, "end_membership")

        with self._transaction():
            project = self._require_project(project_id)
            current = self._memberships.get_current(project_id=project.project_id, user_id=int(user_id))
            if not current:
                latest = self._memberships.get_latest(project_id=project.project_id, user_id=int(user_id))
                if not latest:
                    raise NotFoundError(f"User {user_id} is not a member of project {project_id}")
                return latest

            left = left_date or datetime_utils.today()
            if left < current.joined_date:
                raise ValidationError("Left date cannot be before the joined date", code="timeline")
            self._memberships.end_membership(current.membership_id, left_date=left)

        ended = Membership(
            membership_id=current.membership_id,
            project_id=current.project_id,
            user_id=current.user_id,
            workload_percentage=current.workload_percentage,
            joined_date=current.joined_date,
            left_date=left,
            is_active=False,
            created_by=current.created_by,
        )
        logger.info("membership_ended", project_id=project.project_id, user_id=current.user_id, left_date=str(left))
        self._notify("membership_ended", membership=ended, project=project)
        return ended

    def close_all_memberships_for_project(self, project_id: int, end_date: date) -> int:
        """Archive every current membership of a closing project. Idempotent."""

        with self._transaction():
            project = self._require_project(project_id)
            closed = self._memberships.end_all_for_project(project.project_id, left_date=end_date)
        logger.info("memberships_closed", project_id=project.project_id, count=closed, left_date=str(end_date))
        return closed

    def project_closed(self, project: Project) -> None:
        """Lifecycle hook: a project reached Closed."""
        end_date = project.end_date or datetime_utils.today()
        self.close_all_memberships_for_project(project.project_id, end_date)

    def total_active_workload(self, user_id: int) -> Decimal:
        return self._memberships.total_active_workload(int(user_id))

    def active_project_count(self, user_id: int) -> int:
        return self._memberships.count_active_projects(int(user_id))

    def user_workload(self, user: User) -> UserWorkload:
        return UserWorkload(
            user_id=user.user_id,
            full_name=user.full_name,
            email=user.email,
            role=user.role.value,
            total_workload=self.total_active_workload(user.user_id),
            active_project_count=self.active_project_count(user.user_id),
        )

    def get_user_workload(self, caller: User, user_id: int) -> UserWorkload:
        self._policy.ensure_admin(caller, "view_user_workload")
        return self.user_workload(self._require_user(user_id))

    def list_members(self, caller: User, project_id: int, *, include_ended: bool = False) -> Sequence[Membership]:
        project = self._require_project(project_id)
        self._policy.ensure_can_view_project(caller, project)
        return list(self._memberships.list_for_project(project.project_id, active_only=not include_ended))

    def list_user_memberships(self, user_id: int, *, active_only: bool = True) -> Sequence[Membership]:
        user = self._require_user(user_id)
        return list(self._memberships.list_for_user(user.user_id, active_only=active_only))
