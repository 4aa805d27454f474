from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

import pytest

from timesheet_api.domains.tasks.service import TaskPage, WeekSummary, summarize
from timesheet_api.models import Task, Week


def _submit(client, actor, description="Build invoice export", hours=8, **extra):
    return client.post(
        "/tasks", json={"description": description, "hours": hours, **extra}, headers=actor.headers
    )


def test_week_summary_after_first_task(client, admin, developer):
    created = client.post(
        "/admin/weeks",
        json={"start_date": "2024-01-01", "end_date": "2024-01-07"},
        headers=admin.headers,
    )
    assert created.status_code == 201

    task = _submit(client, developer, hours=8)
    assert task.status_code == 201
    assert task.json()["status"] == "pending"
    assert task.json()["week_id"] == created.json()["id"]

    summary = client.get("/tasks/summary", headers=developer.headers)
    assert summary.status_code == 200
    assert summary.json() == {
        "total_hours": 8.0,
        "approved_hours": 0.0,
        "total_payout": 400.0,
        "approved_payout": 0.0,
    }


def test_rejection_requires_comment(client, admin, developer, open_week):
    task_id = _submit(client, developer).json()["id"]

    missing = client.patch(
        f"/admin/tasks/{task_id}", json={"status": "rejected"}, headers=admin.headers
    )
    assert missing.status_code == 400
    assert missing.json() == {"error": "Admin comment required for rejection"}

    rejected = client.patch(
        f"/admin/tasks/{task_id}",
        json={"status": "rejected", "admin_comment": "incomplete"},
        headers=admin.headers,
    )
    assert rejected.status_code == 200
    assert rejected.json()["status"] == "rejected"
    assert rejected.json()["admin_comment"] == "incomplete"
    assert rejected.json()["approved_by"] == admin.id
    assert rejected.json()["reviewed_at"]


def test_whitespace_comment_counts_as_missing(client, hr, developer, open_week):
    task_id = _submit(client, developer).json()["id"]

    response = client.patch(
        f"/admin/tasks/{task_id}",
        json={"status": "rejected", "admin_comment": "   "},
        headers=hr.headers,
    )

    assert response.status_code == 400


def test_submit_without_open_week(client, developer):
    response = _submit(client, developer)

    assert response.status_code == 400
    assert response.json() == {"error": "No open week available"}


@pytest.mark.parametrize(
    "payload",
    [
        {"hours": 4},
        {"description": "work"},
        {"description": "  ", "hours": 4},
        {"description": "work", "hours": 0},
        {"description": "work", "hours": -2},
        {"description": "work", "hours": 0.001},
        {"description": "work", "hours": 1000},
    ],
)
def test_submit_validates_fields(client, developer, open_week, payload):
    response = client.post("/tasks", json=payload, headers=developer.headers)

    assert response.status_code == 400


def test_submit_keeps_jira_reference(client, developer, open_week):
    response = _submit(client, developer, jira_task_id="10001", jira_task_key="PAY-12")

    assert response.status_code == 201
    assert response.json()["jira_task_key"] == "PAY-12"
    assert response.json()["jira_task_id"] == "10001"


def test_hours_must_fit_two_decimal_places(client, developer, open_week):
    tiny = _submit(client, developer, hours=0.001)
    precise = _submit(client, developer, hours=1.255)
    largest = _submit(client, developer, hours=999.99)

    assert tiny.status_code == 400
    assert precise.json() == {"error": "Hours allow at most two decimal places"}
    assert largest.status_code == 201
    assert largest.json()["hours"] == 999.99
    summary = client.get("/tasks/summary", headers=developer.headers).json()
    assert summary["total_hours"] == 999.99


def test_update_applies_hours_bounds(client, developer, open_week):
    task_id = _submit(client, developer, hours=2).json()["id"]

    too_many = client.put(
        f"/tasks/{task_id}", json={"description": "x", "hours": 1000}, headers=developer.headers
    )
    too_fine = client.put(
        f"/tasks/{task_id}", json={"description": "x", "hours": 0.001}, headers=developer.headers
    )

    assert too_many.status_code == 400
    assert too_fine.status_code == 400
    assert client.get(f"/tasks/{task_id}", headers=developer.headers).json()["hours"] == 2.0


def test_owner_updates_and_deletes_pending_task(client, developer, open_week):
    task_id = _submit(client, developer).json()["id"]

    updated = client.put(
        f"/tasks/{task_id}",
        json={"description": "Refined export", "hours": 5.5},
        headers=developer.headers,
    )
    assert updated.status_code == 200
    assert updated.json()["description"] == "Refined export"
    assert updated.json()["hours"] == 5.5

    deleted = client.delete(f"/tasks/{task_id}", headers=developer.headers)
    assert deleted.status_code == 204
    assert client.get(f"/tasks/{task_id}", headers=developer.headers).status_code == 404


def test_reviewed_task_is_locked(client, admin, developer, open_week):
    task_id = _submit(client, developer).json()["id"]
    approved = client.patch(
        f"/admin/tasks/{task_id}", json={"status": "approved"}, headers=admin.headers
    )
    assert approved.status_code == 200

    update = client.put(
        f"/tasks/{task_id}", json={"description": "x", "hours": 1}, headers=developer.headers
    )
    delete = client.delete(f"/tasks/{task_id}", headers=developer.headers)
    again = client.patch(
        f"/admin/tasks/{task_id}",
        json={"status": "rejected", "admin_comment": "changed my mind"},
        headers=admin.headers,
    )

    assert update.status_code == 403
    assert update.json() == {"error": "Only pending tasks can be updated"}
    assert delete.status_code == 403
    assert delete.json() == {"error": "Only pending tasks can be deleted"}
    assert again.status_code == 403


def test_other_developer_cannot_touch_task(client, developer, make_user, open_week):
    other = make_user("other@example.com")
    task_id = _submit(client, developer).json()["id"]

    assert client.get(f"/tasks/{task_id}", headers=other.headers).status_code == 404
    assert client.delete(f"/tasks/{task_id}", headers=other.headers).status_code == 404


def test_review_rejects_unknown_status(client, admin, developer, open_week):
    task_id = _submit(client, developer).json()["id"]

    response = client.patch(
        f"/admin/tasks/{task_id}", json={"status": "pending"}, headers=admin.headers
    )

    assert response.status_code == 400


def test_developer_cannot_review(client, developer, open_week):
    task_id = _submit(client, developer).json()["id"]

    response = client.patch(
        f"/admin/tasks/{task_id}", json={"status": "approved"}, headers=developer.headers
    )

    assert response.status_code == 403


def test_review_queue_filters_open_week(client, hr, developer, db_session, open_week):
    closed = Week(start_date=date(2023, 12, 25), end_date=date(2023, 12, 31), is_open=False)
    db_session.add(closed)
    db_session.flush()
    db_session.add(Task(user_id=developer.id, week_id=closed.id, description="old", hours=2))
    db_session.commit()

    first = _submit(client, developer, description="first").json()
    _submit(client, developer, description="second")
    client.patch(f"/admin/tasks/{first['id']}", json={"status": "approved"}, headers=hr.headers)

    everything = client.get("/admin/tasks", headers=hr.headers)
    pending = client.get("/admin/tasks", params={"status": "pending"}, headers=hr.headers)
    bogus = client.get("/admin/tasks", params={"status": "done"}, headers=hr.headers)

    assert everything.status_code == 200
    assert {task["description"] for task in everything.json()} == {"first", "second"}
    assert everything.json()[0]["user"]["email"] == developer.email
    assert [task["description"] for task in pending.json()] == ["second"]
    assert bogus.status_code == 400


def test_resubmission_creates_new_task(client, admin, developer, open_week):
    original = _submit(client, developer, jira_task_key="PAY-3").json()
    client.patch(
        f"/admin/tasks/{original['id']}",
        json={"status": "rejected", "admin_comment": "split it"},
        headers=admin.headers,
    )

    resubmitted = _submit(client, developer, jira_task_key="PAY-3")

    assert resubmitted.status_code == 201
    assert resubmitted.json()["id"] != original["id"]
    listing = client.get("/tasks", headers=developer.headers).json()
    assert sorted(task["status"] for task in listing["tasks"]) == ["pending", "rejected"]


def test_task_list_pagination_and_summary(client, admin, developer, open_week):
    for index in range(7):
        _submit(client, developer, description=f"task {index}", hours=1)

    first = client.get("/tasks", params={"page": 1, "page_size": 5}, headers=developer.headers)
    last = client.get("/tasks", params={"page": 2, "page_size": 5}, headers=developer.headers)

    assert first.status_code == 200
    assert len(first.json()["tasks"]) == 5
    assert first.json()["pagination"] == {
        "current_page": 1,
        "page_size": 5,
        "total": 7,
        "total_pages": 2,
        "has_more": True,
    }
    assert len(last.json()["tasks"]) == 2
    assert last.json()["pagination"]["has_more"] is False
    # Summary covers the whole week, not just the page.
    assert last.json()["summary"]["total_hours"] == 7.0


def test_task_list_without_open_week_is_empty(client, developer):
    response = client.get("/tasks", headers=developer.headers)

    assert response.status_code == 200
    assert response.json()["tasks"] == []
    assert response.json()["pagination"]["total"] == 0


class _FakeTask:
    def __init__(self, hours, status):
        self.hours = Decimal(hours)
        self.status = status


def test_summarize_bounds():
    tasks = [_FakeTask("3", "approved"), _FakeTask("2.5", "pending"), _FakeTask("1", "rejected")]

    summary = summarize(tasks, 40)

    assert summary == WeekSummary(
        total_hours=Decimal("6.5"),
        approved_hours=Decimal("3"),
        total_payout=Decimal("260.0"),
        approved_payout=Decimal("120"),
    )
    assert summary.approved_hours <= summary.total_hours
    assert summary.approved_payout <= summary.total_payout


def test_task_page_math():
    page = TaskPage(tasks=[], summary=WeekSummary(), page=3, page_size=5, total=11)

    assert page.total_pages == 3
    assert page.has_more is False


def test_update_refreshes_updated_at(client, developer, open_week, db_session):
    task_id = _submit(client, developer).json()["id"]
    stale = datetime(2020, 1, 1)
    db_session.query(Task).filter_by(id=task_id).update({"updated_at": stale})
    db_session.commit()

    client.put(f"/tasks/{task_id}", json={"description": "x", "hours": 1}, headers=developer.headers)

    db_session.expire_all()
    assert db_session.get(Task, task_id).updated_at > stale
