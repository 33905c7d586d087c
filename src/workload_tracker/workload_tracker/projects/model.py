from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..core.enums import ProjectStatus, ProjectType


@dataclass(frozen=True)
class Project:
    """Domain entity: Project.

    `pm_email` is a denormalized reference to the managing PM (not a foreign key).
    `end_date` is None for open-ended projects (typically Presale).
    """

    project_id: int
    project_code: str
    project_name: str
    pm_email: str
    status: ProjectStatus
    project_type: ProjectType
    start_date: date
    end_date: Optional[date] = None
    description: Optional[str] = None

    def is_managed_by(self, email: str) -> bool:
        return bool(email) and self.pm_email == email
