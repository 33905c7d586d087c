from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User role used for access decisions."""

    ADMIN = "admin"
    PM = "pm"
    DEV = "dev"
    BA = "ba"
    TEST = "test"


class ProjectStatus(str, Enum):
    """Project lifecycle: Presale -> InProgress -> (Hold <-> InProgress) -> Closed."""

    PRESALE = "Presale"
    IN_PROGRESS = "InProgress"
    HOLD = "Hold"
    CLOSED = "Closed"

    @property
    def label(self) -> str:
        return _STATUS_LABELS[self]


class ProjectType(str, Enum):
    TM = "TM"
    PACKAGE = "Package"
    OSDC = "OSDC"
    PRESALE = "Presale"

    @property
    def label(self) -> str:
        return _TYPE_LABELS[self]


_STATUS_LABELS = {
    ProjectStatus.PRESALE: "Presale",
    ProjectStatus.IN_PROGRESS: "In Progress",
    ProjectStatus.HOLD: "Hold",
    ProjectStatus.CLOSED: "Closed",
}

_TYPE_LABELS = {
    ProjectType.TM: "Time & Material",
    ProjectType.PACKAGE: "Package",
    ProjectType.OSDC: "OSDC",
    ProjectType.PRESALE: "Presale",
}


class NotificationType(str, Enum):
    MEMBER_ASSIGNED = "MEMBER_ASSIGNED"
    WORKLOAD_CHANGED = "WORKLOAD_CHANGED"
    MEMBERSHIP_ENDED = "MEMBERSHIP_ENDED"
    PROJECT_STATUS_CHANGED = "PROJECT_STATUS_CHANGED"
    WORKLOAD_REMINDER = "WORKLOAD_REMINDER"
