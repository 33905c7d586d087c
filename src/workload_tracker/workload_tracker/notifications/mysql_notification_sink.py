from __future__ import annotations

from decimal import Decimal
from typing import Optional

from ..core.enums import NotificationType, ProjectStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor
from ..memberships.model import Membership
from ..projects.model import Project
from .sink import NotificationSink


class MySQLNotificationSink(NotificationSink):
    """Stores in-app notifications in the `notifications` table."""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _insert(
        self,
        *,
        user_ids: list[int],
        kind: NotificationType,
        title: str,
        message: str,
        project_id: Optional[int] = None,
        related_user_id: Optional[int] = None,
    ) -> None:
        if not user_ids:
            return
        with db_cursor(self._conn_factory) as (_, cur):
            cur.executemany(
                """
                INSERT INTO notifications(user_id, notification_type, title, message, related_project_id, related_user_id)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                [(uid, kind.value, title, message, project_id, related_user_id) for uid in user_ids],
            )

    def member_assigned(self, *, membership: Membership, project: Project) -> None:
        self._insert(
            user_ids=[membership.user_id],
            kind=NotificationType.MEMBER_ASSIGNED,
            title=f"Assigned to {project.project_name}",
            message=(
                f"You have been added to project {project.project_code} "
                f"with {membership.workload_percentage}% workload from {membership.joined_date:%Y-%m-%d}."
            ),
            project_id=project.project_id,
            related_user_id=membership.user_id,
        )

    def workload_changed(self, *, membership: Membership, project: Project, previous: Decimal) -> None:
        self._insert(
            user_ids=[membership.user_id],
            kind=NotificationType.WORKLOAD_CHANGED,
            title=f"Workload updated on {project.project_name}",
            message=f"Your workload on {project.project_code} changed from {previous}% to {membership.workload_percentage}%.",
            project_id=project.project_id,
            related_user_id=membership.user_id,
        )

    def membership_ended(self, *, membership: Membership, project: Project) -> None:
        self._insert(
            user_ids=[membership.user_id],
            kind=NotificationType.MEMBERSHIP_ENDED,
            title=f"Removed from {project.project_name}",
            message=f"Your assignment to {project.project_code} ended.",
            project_id=project.project_id,
            related_user_id=membership.user_id,
        )

    def project_status_changed(self, *, project: Project, previous: ProjectStatus, member_ids: list[int]) -> None:
        self._insert(
            user_ids=member_ids,
            kind=NotificationType.PROJECT_STATUS_CHANGED,
            title=f"{project.project_name} is now {project.status.label}",
            message=f"Project {project.project_code} moved from {previous.label} to {project.status.label}.",
            project_id=project.project_id,
        )

    def workload_reminder(self, *, user_id: int, total_workload: Decimal) -> None:
        self._insert(
            user_ids=[user_id],
            kind=NotificationType.WORKLOAD_REMINDER,
            title="Workload above 100%",
            message=f"Your committed workload across active projects is {total_workload}%.",
            related_user_id=user_id,
        )
