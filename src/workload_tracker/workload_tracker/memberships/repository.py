from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional, Protocol, Sequence

from .model import Membership


class MembershipRepository(Protocol):
    def get_current(self, *, project_id: int, user_id: int) -> Optional[Membership]:
        """The current (active, not left) membership of a user on a project."""
        raise NotImplementedError

    def get_latest(self, *, project_id: int, user_id: int) -> Optional[Membership]:
        """Most recent membership row for the pair, current or ended."""
        raise NotImplementedError

    def list_for_project(self, project_id: int, *, active_only: bool = False) -> Sequence[Membership]:
        raise NotImplementedError

    def list_for_user(self, user_id: int, *, active_only: bool = False) -> Sequence[Membership]:
        raise NotImplementedError

    def create_membership(
        self,
        *,
        project_id: int,
        user_id: int,
        workload_percentage: Decimal,
        joined_date: date,
        created_by: Optional[int],
    ) -> int:
        raise NotImplementedError

    def update_workload(self, membership_id: int, *, workload_percentage: Decimal) -> bool:
        raise NotImplementedError

    def end_membership(self, membership_id: int, *, left_date: date) -> bool:
        raise NotImplementedError

    def end_all_for_project(self, project_id: int, *, left_date: date) -> int:
        """End every current membership of a project; returns the number of rows ended."""
        raise NotImplementedError

    def total_active_workload(self, user_id: int) -> Decimal:
        raise NotImplementedError

    def count_active_projects(self, user_id: int) -> int:
        raise NotImplementedError
