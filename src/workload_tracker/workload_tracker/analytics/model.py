from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional

from ..memberships.model import UserWorkload
from ..worklogs.model import WorkLogSummary


@dataclass(frozen=True)
class ProjectAnalytics:
    total_projects: int
    active_projects: int
    completed_projects: int
    projects_by_status: Dict[str, int] = field(default_factory=dict)
    projects_by_type: Dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class EmployeeAnalytics:
    total_employees: int
    active_employees: int
    employees_by_role: Dict[str, int] = field(default_factory=dict)
    average_workload: Decimal = Decimal("0.00")


@dataclass(frozen=True)
class WorkloadAnalytics:
    workload_by_role: Dict[str, Decimal]
    top_workload_users: List[UserWorkload]
    total_used_workload: Decimal
    non_admin_employees: int
    system_workload_utilization: Decimal


@dataclass(frozen=True)
class ProjectMilestone:
    project_id: int
    project_name: str
    start_date: date
    end_date: Optional[date]
    status: str
    completion: Decimal


@dataclass(frozen=True)
class ProjectTimeline:
    milestones: List[ProjectMilestone]
    work_log_trends: List[WorkLogSummary]
