from __future__ import annotations

from datetime import date

import pytest

from timesheet_api.core.errors import ValidationError
from timesheet_api.domains.schedules.service import upsert_schedule
from timesheet_api.models import DeveloperWorkSchedule, Task, User, Week

from conftest import TestingSessionLocal


def _save(client, actor, user_id, days=5, hours=8, payout=None):
    payload = {"user_id": user_id, "days_per_week": days, "hours_per_day": hours}
    if payout is not None:
        payload["expected_payout"] = payout
    return client.post("/admin/developer-schedule", json=payload, headers=actor.headers)


def test_save_and_fetch_schedule(client, admin, developer):
    saved = _save(client, admin, developer.id, days=4, hours=6, payout=1200)

    assert saved.status_code == 200
    assert saved.json()["days_per_week"] == 4
    assert saved.json()["hours_per_day"] == 6
    assert saved.json()["expected_payout"] == 1200.0

    lookup = client.get(f"/admin/developer-schedule/{developer.id}", headers=admin.headers)
    assert lookup.json()["schedule"]["id"] == saved.json()["id"]

    listing = client.get("/admin/developer-schedule", headers=admin.headers)
    assert [row["user_id"] for row in listing.json()] == [developer.id]


def test_missing_schedule_lookup_is_null(client, admin, developer):
    response = client.get(f"/admin/developer-schedule/{developer.id}", headers=admin.headers)

    assert response.status_code == 200
    assert response.json() == {"schedule": None}


def test_second_save_updates_same_row(client, admin, developer, db_session):
    first = _save(client, admin, developer.id, days=5, hours=8).json()
    second = _save(client, admin, developer.id, days=3, hours=10).json()

    assert second["id"] == first["id"]
    assert second["days_per_week"] == 3
    rows = db_session.query(DeveloperWorkSchedule).filter_by(user_id=developer.id).all()
    assert len(rows) == 1


def test_interleaved_upserts_leave_one_row(admin, developer):
    first_db = TestingSessionLocal()
    second_db = TestingSessionLocal()
    try:
        first_actor = first_db.get(User, admin.id)
        second_actor = second_db.get(User, admin.id)
        # Both sessions start without a schedule for the developer.
        assert first_db.query(DeveloperWorkSchedule).count() == 0
        assert second_db.query(DeveloperWorkSchedule).count() == 0

        upsert_schedule(first_db, first_actor, developer.id, 5, 8)
        upsert_schedule(second_db, second_actor, developer.id, 4, 9)

        rows = second_db.query(DeveloperWorkSchedule).all()
        assert len(rows) == 1
        assert (rows[0].days_per_week, rows[0].hours_per_day) == (4, 9)
    finally:
        first_db.close()
        second_db.close()


@pytest.mark.parametrize(
    ("days", "hours"),
    [(0, 8), (8, 8), (5, 0), (5, 25), (None, 8), (5, None), ("x", 8)],
)
def test_schedule_bounds(admin, developer, db_session, days, hours):
    actor = db_session.get(User, admin.id)

    with pytest.raises(ValidationError):
        upsert_schedule(db_session, actor, developer.id, days, hours)


def test_schedule_unknown_user(client, admin):
    assert _save(client, admin, 999).status_code == 404


def test_only_admin_manages_schedules(client, hr, developer):
    assert _save(client, hr, developer.id).status_code == 403
    assert client.get("/admin/developer-schedule", headers=hr.headers).status_code == 403


def test_week_status_uses_schedule(client, admin, developer, db_session):
    db_session.add_all(
        [
            Week(start_date=date(2023, 12, 25), end_date=date(2023, 12, 31), is_open=False),
            Week(start_date=date(2024, 1, 1), end_date=date(2024, 1, 7), is_open=False),
        ]
    )
    db_session.commit()
    latest = db_session.query(Week).filter_by(start_date=date(2024, 1, 1)).one()
    db_session.add_all(
        [
            Task(user_id=developer.id, week_id=latest.id, description="a", hours=10, status="approved"),
            Task(user_id=developer.id, week_id=latest.id, description="b", hours=6),
        ]
    )
    db_session.commit()
    _save(client, admin, developer.id, days=4, hours=5)

    response = client.get("/developer/week-status", headers=developer.headers)

    assert response.status_code == 200
    assert response.json() == {
        "current_week_id": latest.id,
        "start_date": "2024-01-01",
        "end_date": "2024-01-07",
        "is_open": False,
        "total_hours_worked": 16.0,
        "total_hours_expected": 20,
        "hourly_rate": 50.0,
        "days_per_week": 4,
        "hours_per_day": 5,
        "expected_earnings": 1000.0,
        "actual_earnings": 500.0,
        "remaining_hours": 4.0,
    }


def test_week_status_defaults_without_schedule(client, developer, open_week):
    response = client.get("/developer/week-status", headers=developer.headers)

    assert response.json()["total_hours_expected"] == 40
    assert response.json()["remaining_hours"] == 40.0


def test_week_status_without_weeks(client, developer):
    assert client.get("/developer/week-status", headers=developer.headers).status_code == 404
