from __future__ import annotations

from collections import Counter
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, List, Optional, Sequence

from ..access.policy import AccessPolicy
from ..core.constants import AVERAGE_SCALE, DEFAULT_TOP_WORKLOAD_LIMIT, FULL_CAPACITY, UTILIZATION_SCALE
from ..core.enums import ProjectStatus, Role
from ..core.exceptions import NotFoundError
from ..memberships.ledger import MembershipLedger
from ..memberships.model import UserWorkload
from ..projects.repository import ProjectRepository
from ..users.model import User
from ..users.repository import UserRepository
from ..worklogs.repository import WorkLogRepository
from .completion.base import CompletionStrategy
from .completion.work_log_count import WorkLogCountCompletion
from .model import EmployeeAnalytics, ProjectAnalytics, ProjectMilestone, ProjectTimeline, WorkloadAnalytics

_ZERO = Decimal("0")


def _quantize(value: Decimal, places: int) -> Decimal:
    return value.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)


class AnalyticsService:
    """Read-only rollups over projects, users and memberships.

    Project-level reports are scoped by AccessPolicy (they narrow, never fail). Employee and
    workload reports are admin-only; the controller layer enforces that.
    """

    def __init__(
        self,
        projects: ProjectRepository,
        users: UserRepository,
        work_logs: WorkLogRepository,
        ledger: MembershipLedger,
        *,
        policy: AccessPolicy,
        completion: Optional[CompletionStrategy] = None,
        top_limit: int = DEFAULT_TOP_WORKLOAD_LIMIT,
    ):
        self._projects = projects
        self._users = users
        self._work_logs = work_logs
        self._ledger = ledger
        self._policy = policy
        self._completion = completion or WorkLogCountCompletion(work_logs)
        self._top_limit = int(top_limit)

    def project_analytics(self, caller: User) -> ProjectAnalytics:
        projects = self._policy.accessible_projects(caller)

        # Counter only holds labels that occur, so empty buckets never show up.
        by_status = Counter(p.status.label for p in projects)
        by_type = Counter(p.project_type.label for p in projects)

        return ProjectAnalytics(
            total_projects=len(projects),
            active_projects=sum(1 for p in projects if p.status == ProjectStatus.IN_PROGRESS),
            completed_projects=sum(1 for p in projects if p.status == ProjectStatus.CLOSED),
            projects_by_status=dict(by_status),
            projects_by_type=dict(by_type),
        )

    def _non_admin(self, employees: Sequence[User]) -> List[User]:
        return [u for u in employees if u.role != Role.ADMIN]

    def employee_analytics(self) -> EmployeeAnalytics:
        everyone = self._users.list_all()
        employees = self._users.list_active()
        non_admin = self._non_admin(employees)

        total_workload = sum((self._ledger.total_active_workload(u.user_id) for u in non_admin), _ZERO)
        average = (
            _quantize(total_workload / Decimal(len(non_admin)), AVERAGE_SCALE)
            if non_admin
            else _quantize(_ZERO, AVERAGE_SCALE)
        )

        return EmployeeAnalytics(
            total_employees=len(everyone),
            active_employees=len(employees),
            employees_by_role=dict(Counter(u.role.value for u in employees)),
            average_workload=average,
        )

    def workload_analytics(self) -> WorkloadAnalytics:
        # list_active() is ordered by user_id, which keeps equal workloads in a stable order.
        non_admin = self._non_admin(self._users.list_active())
        loads: List[UserWorkload] = [self._ledger.user_workload(u) for u in non_admin]

        by_role: Dict[str, Decimal] = {role.value: _ZERO for role in Role if role != Role.ADMIN}
        for load in loads:
            by_role[load.role] += load.total_workload

        top = sorted(loads, key=lambda w: w.total_workload, reverse=True)[: self._top_limit]

        used = sum((w.total_workload for w in loads), _ZERO)
        capacity = Decimal(len(non_admin)) * FULL_CAPACITY
        if capacity > 0:
            ratio = _quantize(used / capacity, UTILIZATION_SCALE)
            utilization = _quantize(ratio * Decimal(100), AVERAGE_SCALE)
        else:
            utilization = _quantize(_ZERO, AVERAGE_SCALE)

        return WorkloadAnalytics(
            workload_by_role=by_role,
            top_workload_users=top,
            total_used_workload=used,
            non_admin_employees=len(non_admin),
            system_workload_utilization=utilization,
        )

    def project_timeline(self, caller: User, project_id: int) -> ProjectTimeline:
        project = self._projects.get_by_id(int(project_id))
        if not project:
            raise NotFoundError(f"Project not found with id: {project_id}")
        self._policy.ensure_can_view_project(caller, project)

        milestone = ProjectMilestone(
            project_id=project.project_id,
            project_name=project.project_name,
            start_date=project.start_date,
            end_date=project.end_date,
            status=project.status.label,
            completion=self._completion.completion(project),
        )
        return ProjectTimeline(
            milestones=[milestone],
            work_log_trends=list(self._work_logs.summarize_by_project(project.project_id)),
        )
