from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, InvalidOperation

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session

from timesheet_api.core.errors import NotFound, ValidationError
from timesheet_api.core.logging import get_logger
from timesheet_api.domains.auth.permissions import Action, ensure_allowed
from timesheet_api.domains.tasks.service import summarize
from timesheet_api.models import DeveloperWorkSchedule, Task, User, Week

logger = get_logger(__name__)

DEFAULT_DAYS_PER_WEEK = 5
DEFAULT_HOURS_PER_DAY = 8

_UPSERT_DIALECTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


@dataclass
class WeekStatus:
    week_id: int
    start_date: date
    end_date: date
    is_open: bool
    total_hours_worked: Decimal
    total_hours_expected: int
    hourly_rate: Decimal
    days_per_week: int
    hours_per_day: int
    expected_earnings: Decimal
    actual_earnings: Decimal
    remaining_hours: Decimal


def _bounded_int(value, name: str, upper: int) -> int:
    if value in (None, "", 0):
        raise ValidationError("Missing required fields")
    try:
        number = int(value)
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"Invalid {name}") from exc
    if not 1 <= number <= upper:
        raise ValidationError(f"{name} must be between 1 and {upper}")
    return number


def upsert_schedule(
    db: Session,
    actor: User,
    user_id: int | None,
    days_per_week,
    hours_per_day,
    expected_payout=None,
) -> DeveloperWorkSchedule:
    """Create or replace a developer's schedule in one INSERT ... ON CONFLICT."""
    ensure_allowed(actor, Action.MANAGE_SCHEDULES)
    if not user_id:
        raise ValidationError("Missing required fields")
    days = _bounded_int(days_per_week, "days_per_week", 7)
    hours = _bounded_int(hours_per_day, "hours_per_day", 24)
    payout = None
    if expected_payout is not None:
        try:
            payout = Decimal(str(expected_payout))
        except (InvalidOperation, ValueError) as exc:
            raise ValidationError("Invalid expected_payout") from exc

    if db.get(User, user_id) is None:
        raise NotFound("User not found")

    dialect = db.get_bind().dialect.name
    insert = _UPSERT_DIALECTS.get(dialect)
    if insert is None:
        raise RuntimeError(f"Schedule upsert is not supported on {dialect}")

    now = datetime.utcnow()
    statement = insert(DeveloperWorkSchedule).values(
        user_id=user_id,
        days_per_week=days,
        hours_per_day=hours,
        expected_payout=payout,
        created_at=now,
        updated_at=now,
    )
    statement = statement.on_conflict_do_update(
        index_elements=[DeveloperWorkSchedule.user_id],
        set_={
            "days_per_week": statement.excluded.days_per_week,
            "hours_per_day": statement.excluded.hours_per_day,
            "expected_payout": statement.excluded.expected_payout,
            "updated_at": statement.excluded.updated_at,
        },
    )
    db.execute(statement)
    db.commit()

    schedule = db.query(DeveloperWorkSchedule).filter(DeveloperWorkSchedule.user_id == user_id).one()
    db.refresh(schedule)
    logger.info("schedule_saved", user_id=user_id, days_per_week=days, hours_per_day=hours)
    return schedule


def list_schedules(db: Session, actor: User) -> list[DeveloperWorkSchedule]:
    ensure_allowed(actor, Action.MANAGE_SCHEDULES)
    return db.query(DeveloperWorkSchedule).order_by(DeveloperWorkSchedule.user_id.asc()).all()


def get_schedule(db: Session, actor: User, user_id: int) -> DeveloperWorkSchedule | None:
    ensure_allowed(actor, Action.MANAGE_SCHEDULES)
    return (
        db.query(DeveloperWorkSchedule)
        .filter(DeveloperWorkSchedule.user_id == user_id)
        .one_or_none()
    )


def get_week_status(db: Session, user: User) -> WeekStatus:
    """Progress for the latest week against the developer's expected schedule."""
    week = db.query(Week).order_by(Week.start_date.desc(), Week.id.desc()).first()
    if week is None:
        raise NotFound("No weeks found")

    schedule = (
        db.query(DeveloperWorkSchedule)
        .filter(DeveloperWorkSchedule.user_id == user.id)
        .one_or_none()
    )
    days = (schedule.days_per_week if schedule else None) or DEFAULT_DAYS_PER_WEEK
    hours = (schedule.hours_per_day if schedule else None) or DEFAULT_HOURS_PER_DAY
    expected_hours = days * hours

    tasks = db.query(Task).filter(Task.user_id == user.id, Task.week_id == week.id).all()
    summary = summarize(tasks, user.hourly_rate)
    rate = Decimal(str(user.hourly_rate or 0))

    return WeekStatus(
        week_id=week.id,
        start_date=week.start_date,
        end_date=week.end_date,
        is_open=week.is_open,
        total_hours_worked=summary.total_hours,
        total_hours_expected=expected_hours,
        hourly_rate=rate,
        days_per_week=days,
        hours_per_day=hours,
        expected_earnings=expected_hours * rate,
        actual_earnings=summary.approved_payout,
        remaining_hours=max(Decimal("0"), Decimal(expected_hours) - summary.total_hours),
    )
