from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class WorkLogEntry:
    """Domain entity: one user's hours on one project for one day.

    At most one entry exists per (user_id, project_id, work_date).
    """

    entry_id: int
    user_id: int
    project_id: int
    work_date: date
    hours_worked: Decimal
    task_feature: str
    description: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class WorkLogSummary:
    """Read-model: work logs of a project bucketed by month."""

    period: str
    entry_count: int
    total_hours: Decimal
    contributor_count: int
