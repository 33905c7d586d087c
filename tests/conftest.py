from __future__ import annotations

from collections import defaultdict
from dataclasses import replace
from datetime import date
from decimal import Decimal
from typing import Optional

import pytest

from workload_tracker.container import wire_services
from workload_tracker.core.enums import ProjectStatus, ProjectType, Role
from workload_tracker.memberships.model import Membership
from workload_tracker.projects.model import Project
from workload_tracker.users.model import User
from workload_tracker.worklogs.model import WorkLogEntry, WorkLogSummary


class InMemoryUsers:
    def __init__(self):
        self.users: dict[int, User] = {}
        self._id = 0

    def add(self, full_name: str, email: str, role: Role, *, is_active: bool = True) -> User:
        self._id += 1
        user = User(user_id=self._id, full_name=full_name, email=email, role=role, is_active=is_active)
        self.users[user.user_id] = user
        return user

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self.users.get(user_id)

    def get_by_email(self, email: str) -> Optional[User]:
        return next((u for u in self.users.values() if u.email == email), None)

    def list_all(self):
        return [self.users[k] for k in sorted(self.users)]

    def list_active(self):
        return [u for u in self.list_all() if u.is_active]

    def create_user(self, *, full_name: str, email: str, role: Role) -> int:
        return self.add(full_name, email, role).user_id

    def update_role(self, user_id: int, *, role: Role) -> bool:
        self.users[user_id] = replace(self.users[user_id], role=role)
        return True

    def set_active(self, user_id: int, *, is_active: bool) -> bool:
        self.users[user_id] = replace(self.users[user_id], is_active=is_active)
        return True


class InMemoryMemberships:
    def __init__(self):
        self.rows: dict[int, Membership] = {}
        self._id = 0

    def get_current(self, *, project_id: int, user_id: int) -> Optional[Membership]:
        rows = [m for m in self.rows.values() if m.project_id == project_id and m.user_id == user_id and m.is_current]
        return rows[-1] if rows else None

    def get_latest(self, *, project_id: int, user_id: int) -> Optional[Membership]:
        rows = [m for m in self.rows.values() if m.project_id == project_id and m.user_id == user_id]
        return rows[-1] if rows else None

    def list_for_project(self, project_id: int, *, active_only: bool = False):
        return [m for m in self.rows.values() if m.project_id == project_id and (m.is_current or not active_only)]

    def list_for_user(self, user_id: int, *, active_only: bool = False):
        return [m for m in self.rows.values() if m.user_id == user_id and (m.is_current or not active_only)]

    def create_membership(self, *, project_id, user_id, workload_percentage, joined_date, created_by) -> int:
        self._id += 1
        self.rows[self._id] = Membership(
            membership_id=self._id,
            project_id=project_id,
            user_id=user_id,
            workload_percentage=Decimal(workload_percentage),
            joined_date=joined_date,
            created_by=created_by,
        )
        return self._id

    def update_workload(self, membership_id: int, *, workload_percentage: Decimal) -> bool:
        self.rows[membership_id] = replace(self.rows[membership_id], workload_percentage=workload_percentage)
        return True

    def end_membership(self, membership_id: int, *, left_date: date) -> bool:
        row = self.rows[membership_id]
        if not row.is_current:
            return False
        self.rows[membership_id] = replace(row, is_active=False, left_date=left_date)
        return True

    def end_all_for_project(self, project_id: int, *, left_date: date) -> int:
        ended = 0
        for m in self.list_for_project(project_id, active_only=True):
            self.end_membership(m.membership_id, left_date=left_date)
            ended += 1
        return ended

    def total_active_workload(self, user_id: int) -> Decimal:
        return sum((m.workload_percentage for m in self.list_for_user(user_id, active_only=True)), Decimal("0"))

    def count_active_projects(self, user_id: int) -> int:
        return len({m.project_id for m in self.list_for_user(user_id, active_only=True)})


class InMemoryProjects:
    def __init__(self, memberships: InMemoryMemberships):
        self.projects: dict[int, Project] = {}
        self._memberships = memberships
        self._id = 0

    def add(
        self,
        code: str,
        *,
        pm_email: str = "pm@example.com",
        status: ProjectStatus = ProjectStatus.IN_PROGRESS,
        project_type: ProjectType = ProjectType.TM,
        start_date: date = date(2026, 1, 1),
        end_date: Optional[date] = date(2026, 12, 31),
    ) -> Project:
        self._id += 1
        project = Project(
            project_id=self._id,
            project_code=code,
            project_name=f"Project {code}",
            pm_email=pm_email,
            status=status,
            project_type=project_type,
            start_date=start_date,
            end_date=end_date,
        )
        self.projects[project.project_id] = project
        return project

    def get_by_id(self, project_id: int) -> Optional[Project]:
        return self.projects.get(project_id)

    def get_by_code(self, project_code: str) -> Optional[Project]:
        return next((p for p in self.projects.values() if p.project_code == project_code), None)

    def list_all(self):
        return [self.projects[k] for k in sorted(self.projects)]

    def list_by_pm_email(self, pm_email: str):
        return [p for p in self.list_all() if p.pm_email == pm_email]

    def list_by_active_member(self, user_id: int):
        joined = {m.project_id for m in self._memberships.list_for_user(user_id, active_only=True)}
        return [p for p in self.list_all() if p.project_id in joined]

    def create_project(self, *, project_code, project_name, pm_email, status, project_type, start_date, end_date,
                       description, created_by) -> int:
        project = self.add(
            project_code,
            pm_email=pm_email,
            status=status,
            project_type=project_type,
            start_date=start_date,
            end_date=end_date,
        )
        self.projects[project.project_id] = replace(project, project_name=project_name, description=description)
        return project.project_id

    def update_project(self, project_id: int, **fields) -> bool:
        self.projects[project_id] = replace(self.projects[project_id], **fields)
        return True

    def update_status(self, project_id: int, *, status: ProjectStatus, end_date: Optional[date]) -> bool:
        self.projects[project_id] = replace(self.projects[project_id], status=status, end_date=end_date)
        return True


class InMemoryWorkLogs:
    def __init__(self, projects: InMemoryProjects):
        self.entries: dict[int, WorkLogEntry] = {}
        self._projects = projects
        self._id = 0

    def get_by_id(self, entry_id: int) -> Optional[WorkLogEntry]:
        return self.entries.get(entry_id)

    def find_for_day(self, *, user_id: int, project_id: int, work_date: date) -> Optional[WorkLogEntry]:
        return next(
            (
                e
                for e in self.entries.values()
                if e.user_id == user_id and e.project_id == project_id and e.work_date == work_date
            ),
            None,
        )

    def create_entry(self, *, user_id, project_id, work_date, hours_worked, task_feature, description) -> int:
        self._id += 1
        self.entries[self._id] = WorkLogEntry(
            entry_id=self._id,
            user_id=user_id,
            project_id=project_id,
            work_date=work_date,
            hours_worked=Decimal(hours_worked),
            task_feature=task_feature,
            description=description,
        )
        return self._id

    def update_entry(self, entry_id: int, *, work_date, hours_worked, task_feature, description) -> bool:
        self.entries[entry_id] = replace(
            self.entries[entry_id],
            work_date=work_date,
            hours_worked=hours_worked,
            task_feature=task_feature,
            description=description,
        )
        return True

    def delete_entry(self, entry_id: int) -> bool:
        return self.entries.pop(entry_id, None) is not None

    def list_all(self):
        return list(self.entries.values())

    def list_by_user(self, user_id: int):
        return [e for e in self.entries.values() if e.user_id == user_id]

    def list_by_project(self, project_id: int):
        return [e for e in self.entries.values() if e.project_id == project_id]

    def list_by_pm_email(self, pm_email: str):
        managed = {p.project_id for p in self._projects.list_by_pm_email(pm_email)}
        return [e for e in self.entries.values() if e.project_id in managed]

    def count_by_project(self, project_id: int) -> int:
        return len(self.list_by_project(project_id))

    def summarize_by_project(self, project_id: int):
        buckets: dict[str, list[WorkLogEntry]] = defaultdict(list)
        for e in self.list_by_project(project_id):
            buckets[e.work_date.strftime("%Y-%m")].append(e)
        return [
            WorkLogSummary(
                period=period,
                entry_count=len(items),
                total_hours=sum((e.hours_worked for e in items), Decimal("0")),
                contributor_count=len({e.user_id for e in items}),
            )
            for period, items in sorted(buckets.items())
        ]


class RecordingNotifier:
    def __init__(self):
        self.events: list[tuple[str, dict]] = []

    def _record(self, name, **kwargs):
        self.events.append((name, kwargs))

    def member_assigned(self, *, membership, project):
        self._record("member_assigned", membership=membership, project=project)

    def workload_changed(self, *, membership, project, previous):
        self._record("workload_changed", membership=membership, project=project, previous=previous)

    def membership_ended(self, *, membership, project):
        self._record("membership_ended", membership=membership, project=project)

    def project_status_changed(self, *, project, previous, member_ids):
        self._record("project_status_changed", project=project, previous=previous, member_ids=member_ids)

    def workload_reminder(self, *, user_id, total_workload):
        self._record("workload_reminder", user_id=user_id, total_workload=total_workload)

    def names(self) -> list[str]:
        return [name for name, _ in self.events]


class Store:
    def __init__(self):
        self.users = InMemoryUsers()
        self.memberships = InMemoryMemberships()
        self.projects = InMemoryProjects(self.memberships)
        self.work_logs = InMemoryWorkLogs(self.projects)
        self.notifier = RecordingNotifier()

    def member(self, project: Project, user: User, workload="50", joined: Optional[date] = None) -> Membership:
        membership_id = self.memberships.create_membership(
            project_id=project.project_id,
            user_id=user.user_id,
            workload_percentage=Decimal(workload),
            joined_date=joined or project.start_date,
            created_by=None,
        )
        return self.memberships.rows[membership_id]

    def container(self, *, enforce_workload_cap: bool = False, top_workload_limit: int = 10):
        return wire_services(
            users_repo=self.users,
            projects_repo=self.projects,
            memberships_repo=self.memberships,
            work_logs_repo=self.work_logs,
            notifier=self.notifier,
            enforce_workload_cap=enforce_workload_cap,
            top_workload_limit=top_workload_limit,
        )


@pytest.fixture
def store() -> Store:
    return Store()


@pytest.fixture
def admin(store) -> User:
    return store.users.add("Admin", "admin@example.com", Role.ADMIN)


@pytest.fixture
def pm(store) -> User:
    return store.users.add("Project Manager", "pm@example.com", Role.PM)


@pytest.fixture
def dev(store) -> User:
    return store.users.add("Developer", "dev@example.com", Role.DEV)


@pytest.fixture
def services(store):
    return store.container()
