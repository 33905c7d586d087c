from __future__ import annotations

from decimal import Decimal
from typing import Protocol

from ..core.enums import ProjectStatus
from ..memberships.model import Membership
from ..projects.model import Project


class NotificationSink(Protocol):
    """Fire-and-forget signals emitted by membership and project commands."""

    def member_assigned(self, *, membership: Membership, project: Project) -> None:
        raise NotImplementedError

    def workload_changed(self, *, membership: Membership, project: Project, previous: Decimal) -> None:
        raise NotImplementedError

    def membership_ended(self, *, membership: Membership, project: Project) -> None:
        raise NotImplementedError

    def project_status_changed(
        self, *, project: Project, previous: ProjectStatus, member_ids: list[int]
    ) -> None:
        raise NotImplementedError

    def workload_reminder(self, *, user_id: int, total_workload: Decimal) -> None:
        raise NotImplementedError


class NullNotificationSink(NotificationSink):
    """Discards every signal (tests, or deployments without notifications)."""

    def member_assigned(self, *, membership, project) -> None:
        return None

    def workload_changed(self, *, membership, project, previous) -> None:
        return None

    def membership_ended(self, *, membership, project) -> None:
        return None

    def project_status_changed(self, *, project, previous, member_ids) -> None:
        return None

    def workload_reminder(self, *, user_id, total_workload) -> None:
        return None
