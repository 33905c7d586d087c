from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from .access.policy import AccessPolicy
from .analytics.completion.work_log_count import WorkLogCountCompletion
from .analytics.service import AnalyticsService
from .core.constants import DEFAULT_TOP_WORKLOAD_LIMIT
from .database.connection import DBConfig, DatabaseConnection
from .memberships.capacity import cap_policy_for
from .memberships.ledger import MembershipLedger
from .memberships.mysql_membership_repository import MySQLMembershipRepository
from .memberships.repository import MembershipRepository
from .notifications.mysql_notification_sink import MySQLNotificationSink
from .notifications.sink import NotificationSink
from .projects.mysql_project_repository import MySQLProjectRepository
from .projects.repository import ProjectRepository
from .projects.service import ProjectService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import UserService
from .worklogs.mysql_work_log_repository import MySQLWorkLogRepository
from .worklogs.repository import WorkLogRepository
from .worklogs.service import WorkLogService


@dataclass(frozen=True)
class Container:
    users_repo: UserRepository
    projects_repo: ProjectRepository
    memberships_repo: MembershipRepository
    work_logs_repo: WorkLogRepository
    notifier: NotificationSink

    access_policy: AccessPolicy
    user_service: UserService
    project_service: ProjectService
    membership_ledger: MembershipLedger
    work_log_service: WorkLogService
    analytics_service: AnalyticsService

    conn: Optional[DatabaseConnection] = None


def wire_services(
    *,
    users_repo: UserRepository,
    projects_repo: ProjectRepository,
    memberships_repo: MembershipRepository,
    work_logs_repo: WorkLogRepository,
    notifier: NotificationSink,
    transaction: Any = None,
    enforce_workload_cap: bool = False,
    top_workload_limit: int = DEFAULT_TOP_WORKLOAD_LIMIT,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Build services over any set of repositories (MySQL in production, fakes in tests)."""

    policy = AccessPolicy(projects_repo, memberships_repo)
    ledger = MembershipLedger(
        memberships_repo,
        projects_repo,
        users_repo,
        policy=policy,
        cap_policy=cap_policy_for(enforce_workload_cap),
        notifier=notifier,
        transaction=transaction,
    )
    return Container(
        users_repo=users_repo,
        projects_repo=projects_repo,
        memberships_repo=memberships_repo,
        work_logs_repo=work_logs_repo,
        notifier=notifier,
        access_policy=policy,
        user_service=UserService(users_repo, transaction=transaction),
        project_service=ProjectService(
            projects_repo,
            memberships_repo,
            policy=policy,
            lifecycle=ledger,
            notifier=notifier,
            transaction=transaction,
        ),
        membership_ledger=ledger,
        work_log_service=WorkLogService(
            work_logs_repo,
            projects_repo,
            users_repo,
            policy=policy,
            transaction=transaction,
        ),
        analytics_service=AnalyticsService(
            projects_repo,
            users_repo,
            work_logs_repo,
            ledger,
            policy=policy,
            completion=WorkLogCountCompletion(work_logs_repo),
            top_limit=top_workload_limit,
        ),
        conn=conn,
    )


def build_container(
    *,
    db_config: dict,
    enforce_workload_cap: bool = False,
    top_workload_limit: int = DEFAULT_TOP_WORKLOAD_LIMIT,
) -> Container:
    config = DBConfig(
        host=str(db_config["host"]),
        port=int(db_config.get("port", 3306)),
        user=str(db_config["user"]),
        password=str(db_config["password"]),
        database=str(db_config["database"]),
    )
    conn = DatabaseConnection.get_instance(config)

    return wire_services(
        users_repo=MySQLUserRepository(conn),
        projects_repo=MySQLProjectRepository(conn),
        memberships_repo=MySQLMembershipRepository(conn),
        work_logs_repo=MySQLWorkLogRepository(conn),
        notifier=MySQLNotificationSink(conn),
        transaction=conn.transaction,
        enforce_workload_cap=enforce_workload_cap,
        top_workload_limit=top_workload_limit,
        conn=conn,
    )
