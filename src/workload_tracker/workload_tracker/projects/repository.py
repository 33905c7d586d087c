from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import ProjectStatus, ProjectType
from .model import Project


class ProjectRepository(Protocol):
    def get_by_id(self, project_id: int) -> Optional[Project]:
        raise NotImplementedError

    def get_by_code(self, project_code: str) -> Optional[Project]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Project]:
        raise NotImplementedError

    def list_by_pm_email(self, pm_email: str) -> Sequence[Project]:
        raise NotImplementedError

    def list_by_active_member(self, user_id: int) -> Sequence[Project]:
        """Projects on which the user holds an active membership."""
        raise NotImplementedError

    def create_project(
        self,
        *,
        project_code: str,
        project_name: str,
        pm_email: str,
        status: ProjectStatus,
        project_type: ProjectType,
        start_date: date,
        end_date: Optional[date],
        description: Optional[str],
        created_by: int,
    ) -> int:
        raise NotImplementedError

    def update_status(self, project_id: int, *, status: ProjectStatus, end_date: Optional[date]) -> bool:
        raise NotImplementedError

    def update_project(
        self,
        project_id: int,
        *,
        project_code: str,
        project_name: str,
        pm_email: str,
        project_type: ProjectType,
        start_date: date,
        end_date: Optional[date],
        description: Optional[str],
    ) -> bool:
        raise NotImplementedError
