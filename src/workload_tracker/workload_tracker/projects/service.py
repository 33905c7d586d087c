from __future__ import annotations

from contextlib import nullcontext
from dataclasses import replace
from datetime import date
from typing import Any, Callable, ContextManager, Optional, Sequence

import structlog

from ..access.policy import AccessPolicy
from ..common import datetime_utils
from ..common.validators import require_non_empty
from ..core.enums import ProjectStatus, ProjectType, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..memberships.repository import MembershipRepository
from ..notifications.sink import NotificationSink, NullNotificationSink
from ..users.model import User
from .lifecycle import ProjectLifecycleListener
from .model import Project
from .repository import ProjectRepository

logger = structlog.get_logger(__name__)


class ProjectService:
    """Use cases: create projects, list them per role, move them through their lifecycle.

    The transition graph itself is not enforced here; reaching Closed archives memberships
    through the lifecycle listener.
    """

    def __init__(
        self,
        projects: ProjectRepository,
        memberships: MembershipRepository,
        *,
        policy: AccessPolicy,
        lifecycle: Optional[ProjectLifecycleListener] = None,
        notifier: Optional[NotificationSink] = None,
        transaction: Optional[Callable[[], ContextManager[Any]]] = None,
    ):
        self._projects = projects
        self._memberships = memberships
        self._policy = policy
        self._lifecycle = lifecycle
        self._notifier = notifier or NullNotificationSink()
        self._transaction = transaction or nullcontext

    def create_project(
        self,
        caller: User,
        *,
        project_code: str,
        project_name: str,
        pm_email: str,
        project_type: ProjectType,
        start_date: date,
        end_date: Optional[date] = None,
        status: ProjectStatus = ProjectStatus.PRESALE,
        description: Optional[str] = None,
    ) -> Project:
        self._policy.ensure_admin(caller, "create_project")
        code = require_non_empty(project_code, "Project code")
        name = require_non_empty(project_name, "Project name")
        pm = require_non_empty(pm_email, "PM email")
        if end_date is not None and end_date < start_date:
            raise ValidationError("End date cannot be before start date", code="timeline")

        with self._transaction():
            if self._projects.get_by_code(code):
                raise ValidationError(f"Project code already exists: {code}", code="project-code")
            project_id = self._projects.create_project(
                project_code=code,
                project_name=name,
                pm_email=pm,
                status=status,
                project_type=project_type,
                start_date=start_date,
                end_date=end_date,
                description=(description or "").strip() or None,
                created_by=caller.user_id,
            )

        logger.info("project_created", project_id=project_id, project_code=code, created_by=caller.user_id)
        return Project(
            project_id=project_id,
            project_code=code,
            project_name=name,
            pm_email=pm,
            status=status,
            project_type=project_type,
            start_date=start_date,
            end_date=end_date,
            description=(description or "").strip() or None,
        )

    def list_projects(self, caller: User) -> Sequence[Project]:
        return self._policy.accessible_projects(caller)

    def get_project(self, caller: User, project_id: int) -> Project:
        project = self._projects.get_by_id(int(project_id))
        if not project:
            raise NotFoundError(f"Project not found with id: {project_id}")
        self._policy.ensure_can_view_project(caller, project)
        return project

    def update_project(
        self,
        caller: User,
        project_id: int,
        *,
        project_code: str,
        project_name: str,
        pm_email: str,
        project_type: ProjectType,
        start_date: date,
        end_date: Optional[date] = None,
        description: Optional[str] = None,
    ) -> Project:
        """Edit project fields. Status moves only through `change_status`."""

        self._policy.ensure_admin(caller, "update_project")
        code = require_non_empty(project_code, "Project code")
        name = require_non_empty(project_name, "Project name")
        pm = require_non_empty(pm_email, "PM email")
        if end_date is not None and end_date < start_date:
            raise ValidationError("End date cannot be before start date", code="timeline")
        note = (description or "").strip() or None

        with self._transaction():
            project = self._projects.get_by_id(int(project_id))
            if not project:
                raise NotFoundError(f"Project not found with id: {project_id}")
            clash = self._projects.get_by_code(code)
            if clash and clash.project_id != project.project_id:
                raise ValidationError(f"Project code already exists: {code}", code="project-code")
            self._projects.update_project(
                project.project_id,
                project_code=code,
                project_name=name,
                pm_email=pm,
                project_type=project_type,
                start_date=start_date,
                end_date=end_date,
                description=note,
            )

        logger.info("project_updated", project_id=project.project_id, project_code=code, updated_by=caller.user_id)
        return replace(
            project,
            project_code=code,
            project_name=name,
            pm_email=pm,
            project_type=project_type,
            start_date=start_date,
            end_date=end_date,
            description=note,
        )

    def change_status(self, caller: User, project_id: int, status: ProjectStatus) -> Project:
        with self._transaction():
            project = self._projects.get_by_id(int(project_id))
            if not project:
                raise NotFoundError(f"Project not found with id: {project_id}")
            if caller.role != Role.ADMIN and not (caller.role == Role.PM and project.is_managed_by(caller.email)):
                logger.warning("access_denied", action="change_status", user_id=caller.user_id, project_id=project.project_id)
                raise AuthorizationError("Only administrators or the managing PM can change project status")

            end_date = project.end_date
            if status == ProjectStatus.CLOSED and end_date is None:
                end_date = datetime_utils.today()
                if end_date < project.start_date:
                    raise ValidationError("Cannot close a project before its start date", code="timeline")

            member_ids = [m.user_id for m in self._memberships.list_for_project(project.project_id, active_only=True)]
            self._projects.update_status(project.project_id, status=status, end_date=end_date)
            updated = replace(project, status=status, end_date=end_date)

            if status == ProjectStatus.CLOSED and self._lifecycle is not None:
                self._lifecycle.project_closed(updated)

        logger.info(
            "project_status_changed",
            project_id=project.project_id,
            previous=project.status.value,
            status=status.value,
            changed_by=caller.user_id,
        )
        if status != project.status:
            try:
                self._notifier.project_status_changed(project=updated, previous=project.status, member_ids=member_ids)
            except Exception:
                logger.exception("notification_failed", signal="project_status_changed")
        return updated
