from __future__ import annotations

from datetime import date

import pytest

from workload_tracker.core.enums import ProjectStatus
from workload_tracker.main import create_app


@pytest.fixture
def app(monkeypatch, store):
    monkeypatch.setenv("APP_ENV", "testing")
    return create_app(container=store.container())


@pytest.fixture
def client(app):
    return app.test_client()


def _login(client, user):
    with client.session_transaction() as sess:
        sess["user_id"] = user.user_id


def test_requests_without_session_are_unauthenticated(client):
    res = client.get("/api/projects")

    assert res.status_code == 401
    assert res.get_json()["success"] is False


def test_inactive_session_user_is_unauthenticated(store, client, dev):
    store.users.set_active(dev.user_id, is_active=False)
    _login(client, dev)

    assert client.get("/api/projects").status_code == 401


def test_admin_creates_project_and_assigns_member(client, admin, dev):
    _login(client, admin)

    created = client.post(
        "/api/projects",
        json={
            "projectCode": "PRJ-1",
            "projectName": "Portal",
            "pmEmail": "pm@example.com",
            "projectType": "TM",
            "startDate": "2026-01-01",
            "endDate": "2026-12-31",
        },
    )
    assert created.status_code == 201
    project = created.get_json()["data"]
    assert project["status"] == "Presale"

    added = client.post(
        f"/api/projects/{project['project_id']}/members",
        json={"userId": dev.user_id, "workloadPercentage": 60},
    )
    assert added.status_code == 201
    assert added.get_json()["data"]["workload_percentage"] == 60.0
    assert added.get_json()["data"]["joined_date"] == "2026-01-01"

    workload = client.get(f"/api/users/{dev.user_id}/workload").get_json()["data"]
    assert workload["total_workload"] == 60.0
    assert workload["active_project_count"] == 1


def test_out_of_range_workload_is_a_bad_request(store, client, admin, dev):
    project = store.projects.add("P1")
    _login(client, admin)

    res = client.post(
        f"/api/projects/{project.project_id}/members", json={"userId": dev.user_id, "workloadPercentage": 0}
    )

    assert res.status_code == 400
    assert res.get_json()["code"] == "workload"


def test_non_admin_membership_changes_are_forbidden(store, client, pm, dev):
    project = store.projects.add("P1", pm_email=pm.email)
    _login(client, pm)

    res = client.post(
        f"/api/projects/{project.project_id}/members", json={"userId": dev.user_id, "workloadPercentage": 50}
    )

    assert res.status_code == 403


def test_member_logs_work_and_duplicate_is_rejected(store, client, dev):
    project = store.projects.add("P1")
    store.member(project, dev)
    _login(client, dev)
    payload = {
        "projectId": project.project_id,
        "workDate": "2026-03-02",
        "hoursWorked": 7.5,
        "taskFeature": "Checkout",
        "workDescription": "Cart totals",
    }

    first = client.post("/api/work-logs", json=payload)
    second = client.post("/api/work-logs", json=payload)

    assert first.status_code == 201
    assert first.get_json()["data"]["hours_worked"] == 7.5
    assert second.status_code == 400
    assert second.get_json()["code"] == "duplicate"


def test_member_cannot_read_logs_of_foreign_project(store, client, dev):
    p1 = store.projects.add("P1")
    p2 = store.projects.add("P2")
    store.member(p1, dev)
    _login(client, dev)

    assert client.get(f"/api/work-logs/project/{p1.project_id}").status_code == 200
    assert client.get(f"/api/work-logs/project/{p2.project_id}").status_code == 403


def test_missing_project_is_not_found(client, admin):
    _login(client, admin)

    res = client.get("/api/projects/404")

    assert res.status_code == 404
    assert res.get_json()["success"] is False


def test_malformed_date_is_a_bad_request(store, client, dev):
    project = store.projects.add("P1")
    store.member(project, dev)
    _login(client, dev)

    res = client.post(
        "/api/work-logs",
        json={"projectId": project.project_id, "workDate": "03/02/2026", "hoursWorked": 2, "taskFeature": "x"},
    )

    assert res.status_code == 400


def test_closing_project_over_http_archives_members(store, client, admin, dev):
    project = store.projects.add("P1", end_date=date(2026, 10, 31))
    store.member(project, dev)
    _login(client, admin)

    res = client.put(f"/api/projects/{project.project_id}/status", json={"status": "Closed"})

    assert res.status_code == 200
    assert store.projects.get_by_id(project.project_id).status == ProjectStatus.CLOSED
    members = client.get(f"/api/projects/{project.project_id}/members?includeEnded=true").get_json()["data"]
    assert [(m["is_active"], m["left_date"]) for m in members] == [(False, "2026-10-31")]


def test_analytics_endpoints_are_admin_only(client, pm):
    _login(client, pm)

    assert client.get("/api/analytics/workload").status_code == 403
    assert client.get("/api/analytics/employees").status_code == 403
    assert client.get("/api/analytics/projects").status_code == 200


def test_workload_analytics_payload(store, client, admin, dev):
    store.member(store.projects.add("P1"), dev, "50")
    _login(client, admin)

    data = client.get("/api/analytics/workload").get_json()["data"]

    assert data["non_admin_employees"] == 1
    assert data["system_workload_utilization"] == 50.0
    assert data["top_workload_users"][0]["email"] == dev.email


def test_user_memberships_visible_to_self_and_admin_only(store, client, admin, pm, dev):
    store.member(store.projects.add("P1"), dev)

    _login(client, dev)
    assert len(client.get(f"/api/users/{dev.user_id}/memberships").get_json()["data"]) == 1

    _login(client, pm)
    assert client.get(f"/api/users/{dev.user_id}/memberships").status_code == 403

    _login(client, admin)
    assert client.get(f"/api/users/{dev.user_id}/memberships").status_code == 200


@pytest.mark.parametrize("user_id", ["abc", True, 1.5, [1]])
def test_malformed_user_id_is_a_bad_request(store, client, admin, user_id):
    project = store.projects.add("P1")
    _login(client, admin)

    res = client.post(f"/api/projects/{project.project_id}/members", json={"userId": user_id, "workloadPercentage": 50})

    assert res.status_code == 400
    assert res.get_json()["code"] == "required"


def test_malformed_project_id_is_a_bad_request(client, dev):
    _login(client, dev)

    res = client.post(
        "/api/work-logs", json={"projectId": "P-1", "workDate": "2026-03-02", "hoursWorked": 2, "taskFeature": "x"}
    )

    assert res.status_code == 400


def test_nan_hours_are_a_bad_request(store, client, dev):
    project = store.projects.add("P1")
    store.member(project, dev)
    _login(client, dev)
    body = '{"projectId": %d, "workDate": "2026-03-02", "hoursWorked": NaN, "taskFeature": "x"}' % project.project_id

    res = client.post("/api/work-logs", data=body, content_type="application/json")

    assert res.status_code == 400
    assert res.get_json()["code"] == "required"


def test_user_memberships_of_unknown_user_is_not_found(client, admin):
    _login(client, admin)

    assert client.get("/api/users/404/memberships").status_code == 404


def test_admin_edits_project_over_http(store, client, admin):
    project = store.projects.add("P1")
    _login(client, admin)
    body = {
        "projectCode": "P1",
        "projectName": "Renamed",
        "pmEmail": "pm@example.com",
        "projectType": "OSDC",
        "startDate": "2026-01-01",
        "endDate": "2026-03-31",
    }

    res = client.put(f"/api/projects/{project.project_id}", json=body)

    assert res.status_code == 200
    assert res.get_json()["data"]["project_name"] == "Renamed"
    assert store.projects.get_by_id(project.project_id).end_date == date(2026, 3, 31)

    res = client.put(f"/api/projects/{project.project_id}", json={**body, "endDate": "2025-12-31"})

    assert res.status_code == 400
    assert res.get_json()["code"] == "timeline"
