from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class Membership:
    """Domain entity: one user's assignment to one project.

    A row is current iff `is_active` is set and `left_date` is empty. Ended rows are kept
    as history (projects that close archive their members instead of deleting them).
    """

    membership_id: int
    project_id: int
    user_id: int
    workload_percentage: Decimal
    joined_date: date
    left_date: Optional[date] = None
    is_active: bool = True
    created_by: Optional[int] = None

    @property
    def is_current(self) -> bool:
        return self.is_active and self.left_date is None


@dataclass(frozen=True)
class UserWorkload:
    """Read-model: a user's committed workload across current memberships."""

    user_id: int
    full_name: str
    email: str
    role: str
    total_workload: Decimal
    active_project_count: int
