from __future__ import annotations

from contextlib import nullcontext
from datetime import date
from typing import Any, Callable, ContextManager, Dict, Optional, Sequence

import structlog

from ..access.policy import AccessPolicy
from ..common.datetime_utils import within_window
from ..common.validators import require_hours, require_non_empty
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..projects.model import Project
from ..projects.repository import ProjectRepository
from ..users.model import User
from ..users.repository import UserRepository
from .model import WorkLogEntry
from .repository import WorkLogRepository

logger = structlog.get_logger(__name__)

VisibleLogs = Callable[[WorkLogRepository, User], Sequence[WorkLogEntry]]

# Which entries each role sees when it asks for "my work logs" without a target.
VISIBLE_LOGS: Dict[Role, VisibleLogs] = {
    Role.ADMIN: lambda logs, caller: logs.list_all(),
    Role.PM: lambda logs, caller: logs.list_by_pm_email(caller.email),
    Role.DEV: lambda logs, caller: logs.list_by_user(caller.user_id),
    Role.BA: lambda logs, caller: logs.list_by_user(caller.user_id),
    Role.TEST: lambda logs, caller: logs.list_by_user(caller.user_id),
}


class WorkLogService:
    """Use cases: record, amend and remove daily time entries."""

    def __init__(
        self,
        work_logs: WorkLogRepository,
        projects: ProjectRepository,
        users: UserRepository,
        *,
        policy: AccessPolicy,
        transaction: Optional[Callable[[], ContextManager[Any]]] = None,
    ):
        self._work_logs = work_logs
        self._projects = projects
        self._users = users
        self._policy = policy
        self._transaction = transaction or nullcontext

    def _require_project(self, project_id: int) -> Project:
        project = self._projects.get_by_id(int(project_id))
        if not project:
            raise NotFoundError(f"Project not found with id: {project_id}")
        return project

    @staticmethod
    def _deny(caller: User, action: str, message: str) -> AuthorizationError:
        logger.warning("access_denied", action=action, user_id=caller.user_id, role=caller.role.value)
        return AuthorizationError(message)

    def _ensure_owner(self, caller: User, entry: WorkLogEntry, action: str) -> None:
        if caller.role == Role.ADMIN:
            raise self._deny(caller, action, "Admin users cannot modify work logs")
        if entry.user_id != caller.user_id:
            raise self._deny(caller, action, "You can only modify your own work logs")

    @staticmethod
    def _ensure_within_timeline(project: Project, work_date: date) -> None:
        if not within_window(work_date, project.start_date, project.end_date):
            raise ValidationError("Work date must be within project timeline", code="date-range")

    def _ensure_unique_day(self, *, user_id: int, project_id: int, work_date: date) -> None:
        if self._work_logs.find_for_day(user_id=user_id, project_id=project_id, work_date=work_date):
            raise ValidationError("Work log already exists for this date and project", code="duplicate")

    def create_entry(
        self,
        caller: User,
        *,
        project_id: int,
        work_date: date,
        hours_worked,
        task_feature: str,
        description: Optional[str] = None,
    ) -> WorkLogEntry:
        if caller.role == Role.ADMIN:
            raise self._deny(caller, "create_work_log", "Admin users cannot create work logs")

        with self._transaction():
            project = self._require_project(project_id)
            if not self._policy.is_active_member(project_id=project.project_id, user_id=caller.user_id):
                raise self._deny(caller, "create_work_log", "You are not assigned to this project")

            self._ensure_unique_day(user_id=caller.user_id, project_id=project.project_id, work_date=work_date)
            hours = require_hours(hours_worked)
            self._ensure_within_timeline(project, work_date)
            feature = require_non_empty(task_feature, "Task feature")
            note = (description or "").strip() or None

            entry_id = self._work_logs.create_entry(
                user_id=caller.user_id,
                project_id=project.project_id,
                work_date=work_date,
                hours_worked=hours,
                task_feature=feature,
                description=note,
            )

        logger.info(
            "work_log_created",
            entry_id=entry_id,
            user_id=caller.user_id,
            project_id=project.project_id,
            work_date=str(work_date),
            hours=str(hours),
        )
        return WorkLogEntry(
            entry_id=entry_id,
            user_id=caller.user_id,
            project_id=project.project_id,
            work_date=work_date,
            hours_worked=hours,
            task_feature=feature,
            description=note,
        )

    def update_entry(
        self,
        caller: User,
        entry_id: int,
        *,
        work_date: date,
        hours_worked,
        task_feature: str,
        description: Optional[str] = None,
    ) -> WorkLogEntry:
        with self._transaction():
            entry = self._work_logs.get_by_id(int(entry_id))
            if not entry:
                raise NotFoundError(f"Work log not found with id: {entry_id}")
            self._ensure_owner(caller, entry, "update_work_log")

            hours = require_hours(hours_worked)
            project = self._require_project(entry.project_id)
            self._ensure_within_timeline(project, work_date)
            if work_date != entry.work_date:
                self._ensure_unique_day(user_id=caller.user_id, project_id=entry.project_id, work_date=work_date)

            feature = require_non_empty(task_feature, "Task feature")
            note = (description or "").strip() or None
            self._work_logs.update_entry(
                entry.entry_id,
                work_date=work_date,
                hours_worked=hours,
                task_feature=feature,
                description=note,
            )

        logger.info("work_log_updated", entry_id=entry.entry_id, user_id=caller.user_id, work_date=str(work_date))
        return WorkLogEntry(
            entry_id=entry.entry_id,
            user_id=entry.user_id,
            project_id=entry.project_id,
            work_date=work_date,
            hours_worked=hours,
            task_feature=feature,
            description=note,
            created_at=entry.created_at,
        )

    def delete_entry(self, caller: User, entry_id: int) -> bool:
        """Remove an entry owned by the caller. Deleting a missing entry is a no-op."""

        with self._transaction():
            entry = self._work_logs.get_by_id(int(entry_id))
            if not entry:
                return False
            self._ensure_owner(caller, entry, "delete_work_log")
            self._work_logs.delete_entry(entry.entry_id)

        logger.info("work_log_deleted", entry_id=entry.entry_id, user_id=caller.user_id)
        return True

    def list_for_user(self, caller: User, target_user_id: int) -> Sequence[WorkLogEntry]:
        if not self._users.get_by_id(int(target_user_id)):
            raise NotFoundError(f"User not found with id: {target_user_id}")
        self._policy.ensure_can_view_user_work_logs(caller, int(target_user_id))
        return list(self._work_logs.list_by_user(int(target_user_id)))

    def list_for_project(self, caller: User, project_id: int) -> Sequence[WorkLogEntry]:
        project = self._require_project(project_id)
        if not self._policy.can_view_project_work_logs(caller, project):
            raise self._deny(caller, "view_project_work_logs", "Access denied to view work logs for this project")
        return list(self._work_logs.list_by_project(project.project_id))

    def list_visible(self, caller: User) -> Sequence[WorkLogEntry]:
        scope = VISIBLE_LOGS.get(caller.role)
        if scope is None:
            raise self._deny(caller, "list_work_logs", "Access denied")
        return list(scope(self._work_logs, caller))
