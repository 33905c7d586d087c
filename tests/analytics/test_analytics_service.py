from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from workload_tracker.analytics.completion.work_log_count import WorkLogCountCompletion
from workload_tracker.core.enums import ProjectStatus, ProjectType, Role
from workload_tracker.core.exceptions import AuthorizationError, NotFoundError


@pytest.fixture
def analytics(services):
    return services.analytics_service


def test_project_analytics_counts_by_status_and_type(store, analytics, admin):
    store.projects.add("P1", status=ProjectStatus.IN_PROGRESS, project_type=ProjectType.TM)
    store.projects.add("P2", status=ProjectStatus.IN_PROGRESS, project_type=ProjectType.PACKAGE)
    store.projects.add("P3", status=ProjectStatus.CLOSED, project_type=ProjectType.TM)
    store.projects.add("P4", status=ProjectStatus.PRESALE, project_type=ProjectType.PRESALE)

    report = analytics.project_analytics(admin)

    assert report.total_projects == 4
    assert report.active_projects == 2
    assert report.completed_projects == 1
    assert report.projects_by_status == {"In Progress": 2, "Closed": 1, "Presale": 1}
    assert report.projects_by_type == {"Time & Material": 2, "Package": 1, "Presale": 1}


def test_project_analytics_is_scoped_to_the_caller(store, analytics, pm, dev):
    store.projects.add("P1", pm_email=pm.email)
    store.projects.add("P2", pm_email="other@example.com")
    joined = store.projects.add("P3", pm_email="other@example.com", status=ProjectStatus.HOLD)
    store.member(joined, dev)

    assert analytics.project_analytics(pm).total_projects == 1
    member_view = analytics.project_analytics(dev)
    assert member_view.total_projects == 1
    assert member_view.projects_by_status == {"Hold": 1}


def test_project_analytics_for_empty_scope(analytics, dev):
    report = analytics.project_analytics(dev)

    assert report.total_projects == 0
    assert report.projects_by_status == {}


def test_employee_analytics_average_ignores_admins(store, analytics, admin):
    a = store.users.add("A", "a@example.com", Role.DEV)
    b = store.users.add("B", "b@example.com", Role.BA)
    store.users.add("C", "c@example.com", Role.TEST)
    project = store.projects.add("P1")
    other = store.projects.add("P2")
    store.member(project, admin, "100")
    store.member(project, a, "50")
    store.member(other, a, "50")
    store.member(project, b, "33.33")

    report = analytics.employee_analytics()

    assert report.total_employees == 4
    assert report.active_employees == 4
    assert report.employees_by_role == {"admin": 1, "dev": 1, "ba": 1, "test": 1}
    # (100 + 33.33 + 0) / 3
    assert report.average_workload == Decimal("44.44")


def test_average_workload_rounds_half_up(store, analytics):
    a = store.users.add("A", "a@example.com", Role.DEV)
    store.users.add("B", "b@example.com", Role.DEV)
    store.member(store.projects.add("P1"), a, "0.01")

    # 0.005 rounds up to 0.01
    assert analytics.employee_analytics().average_workload == Decimal("0.01")


def test_average_workload_without_non_admin_users_is_zero(analytics, admin):
    report = analytics.employee_analytics()

    assert report.average_workload == Decimal("0.00")
    assert str(report.average_workload) == "0.00"


def test_inactive_users_are_counted_only_in_total(store, analytics):
    store.users.add("A", "a@example.com", Role.DEV)
    store.users.add("Gone", "gone@example.com", Role.DEV, is_active=False)

    report = analytics.employee_analytics()

    assert report.total_employees == 2
    assert report.active_employees == 1
    assert report.employees_by_role == {"dev": 1}


def test_workload_analytics_top_ten_excludes_admin(store, analytics, admin):
    project = store.projects.add("P1")
    store.member(project, admin, "100")
    users = [store.users.add(f"U{i}", f"u{i}@example.com", Role.DEV) for i in range(12)]
    for i, user in enumerate(users):
        store.member(project, user, str(10 + i * 5))

    report = analytics.workload_analytics()

    assert len(report.top_workload_users) == 10
    assert admin.user_id not in {w.user_id for w in report.top_workload_users}
    totals = [w.total_workload for w in report.top_workload_users]
    assert totals == sorted(totals, reverse=True)
    assert totals[0] == Decimal("65")
    assert totals[-1] == Decimal("20")


def test_top_workload_ties_keep_user_id_order(store, analytics):
    project = store.projects.add("P1")
    users = [store.users.add(f"U{i}", f"u{i}@example.com", Role.DEV) for i in range(3)]
    for user in users:
        store.member(project, user, "50")

    top = analytics.workload_analytics().top_workload_users

    assert [w.user_id for w in top] == [u.user_id for u in users]


def test_top_workload_limit_is_configurable(store, admin):
    analytics = store.container(top_workload_limit=2).analytics_service
    project = store.projects.add("P1")
    for i in range(5):
        store.member(project, store.users.add(f"U{i}", f"u{i}@example.com", Role.DEV), "10")

    assert len(analytics.workload_analytics().top_workload_users) == 2


def test_workload_by_role_and_system_utilization(store, analytics, admin):
    dev = store.users.add("D", "d@example.com", Role.DEV)
    ba = store.users.add("B", "b@example.com", Role.BA)
    store.users.add("T", "t@example.com", Role.TEST)
    p1 = store.projects.add("P1")
    p2 = store.projects.add("P2")
    store.member(p1, admin, "100")
    store.member(p1, dev, "80")
    store.member(p2, dev, "40")
    store.member(p1, ba, "50")

    report = analytics.workload_analytics()

    assert report.workload_by_role == {
        "pm": Decimal("0"),
        "dev": Decimal("120"),
        "ba": Decimal("50"),
        "test": Decimal("0"),
    }
    assert report.total_used_workload == Decimal("170")
    assert report.non_admin_employees == 3
    # 170 / 300 = 0.5667 -> 56.67
    assert report.system_workload_utilization == Decimal("56.67")


def test_utilization_without_non_admin_users_is_zero(analytics, admin):
    report = analytics.workload_analytics()

    assert report.non_admin_employees == 0
    assert report.top_workload_users == []
    assert report.system_workload_utilization == Decimal("0.00")


def test_ended_memberships_do_not_count_towards_workload(store, analytics):
    dev = store.users.add("D", "d@example.com", Role.DEV)
    project = store.projects.add("P1")
    membership = store.member(project, dev, "60")
    store.memberships.end_membership(membership.membership_id, left_date=date(2026, 6, 1))

    report = analytics.workload_analytics()

    assert report.total_used_workload == Decimal("0")
    assert report.top_workload_users[0].active_project_count == 0


def test_project_timeline_for_visible_project(store, services, analytics, pm, dev):
    project = store.projects.add("P1", pm_email=pm.email, start_date=date(2026, 1, 1), end_date=date(2026, 12, 31))
    store.member(project, dev)
    for day in (date(2026, 1, 5), date(2026, 1, 6), date(2026, 2, 2)):
        services.work_log_service.create_entry(
            dev, project_id=project.project_id, work_date=day, hours_worked="4", task_feature="API"
        )

    timeline = analytics.project_timeline(pm, project.project_id)

    milestone = timeline.milestones[0]
    assert milestone.status == "In Progress"
    assert milestone.completion == Decimal("30")
    assert [(t.period, t.entry_count, t.total_hours) for t in timeline.work_log_trends] == [
        ("2026-01", 2, Decimal("8")),
        ("2026-02", 1, Decimal("4")),
    ]


def test_project_timeline_checks_access(store, analytics, dev):
    project = store.projects.add("P1")

    with pytest.raises(AuthorizationError):
        analytics.project_timeline(dev, project.project_id)
    with pytest.raises(NotFoundError):
        analytics.project_timeline(dev, 404)


def test_completion_placeholder_is_capped(store):
    project = store.projects.add("P1", start_date=date(2026, 1, 1))
    for i in range(12):
        store.work_logs.create_entry(
            user_id=1,
            project_id=project.project_id,
            work_date=date(2026, 1, 1 + i),
            hours_worked=Decimal("1"),
            task_feature="x",
            description=None,
        )

    assert WorkLogCountCompletion(store.work_logs).completion(project) == Decimal("100")
    assert WorkLogCountCompletion(store.work_logs, points_per_log=5).completion(project) == Decimal("60")
