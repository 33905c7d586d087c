from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional, Protocol, Sequence

from .model import WorkLogEntry, WorkLogSummary


class WorkLogRepository(Protocol):
    def get_by_id(self, entry_id: int) -> Optional[WorkLogEntry]:
        raise NotImplementedError

    def find_for_day(self, *, user_id: int, project_id: int, work_date: date) -> Optional[WorkLogEntry]:
        raise NotImplementedError

    def create_entry(
        self,
        *,
        user_id: int,
        project_id: int,
        work_date: date,
        hours_worked: Decimal,
        task_feature: str,
        description: Optional[str],
    ) -> int:
        raise NotImplementedError

    def update_entry(
        self,
        entry_id: int,
        *,
        work_date: date,
        hours_worked: Decimal,
        task_feature: str,
        description: Optional[str],
    ) -> bool:
        raise NotImplementedError

    def delete_entry(self, entry_id: int) -> bool:
        raise NotImplementedError

    def list_all(self) -> Sequence[WorkLogEntry]:
        raise NotImplementedError

    def list_by_user(self, user_id: int) -> Sequence[WorkLogEntry]:
        raise NotImplementedError

    def list_by_project(self, project_id: int) -> Sequence[WorkLogEntry]:
        raise NotImplementedError

    def list_by_pm_email(self, pm_email: str) -> Sequence[WorkLogEntry]:
        """Entries on every project managed by the PM with this email."""
        raise NotImplementedError

    def count_by_project(self, project_id: int) -> int:
        raise NotImplementedError

    def summarize_by_project(self, project_id: int) -> Sequence[WorkLogSummary]:
        raise NotImplementedError
