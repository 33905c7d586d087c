from __future__ import annotations

from decimal import Decimal

from ...core.constants import COMPLETION_CAP, COMPLETION_POINTS_PER_LOG
from ...projects.model import Project
from ...worklogs.repository import WorkLogRepository
from .base import CompletionStrategy


class WorkLogCountCompletion(CompletionStrategy):
    """Placeholder heuristic: each logged entry counts 10 points, capped at 100.

    Not a progress measure; swap in a real model by passing another CompletionStrategy.
    """

    def __init__(
        self,
        work_logs: WorkLogRepository,
        *,
        points_per_log: int = COMPLETION_POINTS_PER_LOG,
        cap: int = COMPLETION_CAP,
    ):
        self._work_logs = work_logs
        self._points_per_log = int(points_per_log)
        self._cap = int(cap)

    def completion(self, project: Project) -> Decimal:
        count = self._work_logs.count_by_project(project.project_id)
        return Decimal(min(count * self._points_per_log, self._cap))
