from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from timesheet_api.core.errors import Conflict, NotFound, ValidationError
from timesheet_api.core.logging import get_logger
from timesheet_api.core.observability import record_workflow_event
from timesheet_api.domains.auth.permissions import Action, ensure_allowed
from timesheet_api.models import Task, User, Week

logger = get_logger(__name__)

OPEN_WEEK_CONFLICT = "Another week is already open. Close it before opening a new one."


@dataclass
class WeekWithCount:
    week: Week
    task_count: int


@dataclass
class ClosedWeekHours:
    week: Week
    total_hours: Decimal


def get_open_week(db: Session) -> Week | None:
    return (
        db.query(Week)
        .filter(Week.is_open.is_(True))
        .order_by(Week.start_date.desc(), Week.id.desc())
        .first()
    )


def _other_open_week(db: Session, week_id: int | None = None) -> Week | None:
    query = db.query(Week).filter(Week.is_open.is_(True))
    if week_id is not None:
        query = query.filter(Week.id != week_id)
    return query.first()


def _commit_open_week(db: Session) -> None:
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise Conflict(OPEN_WEEK_CONFLICT) from exc


def create_week(db: Session, actor: User, start_date: date | None, end_date: date | None) -> Week:
    ensure_allowed(actor, Action.MANAGE_WEEKS)
    if not start_date or not end_date:
        raise ValidationError("Missing required fields")
    if end_date < start_date:
        raise ValidationError("End date must not be before start date")
    if _other_open_week(db) is not None:
        raise Conflict(OPEN_WEEK_CONFLICT)

    week = Week(start_date=start_date, end_date=end_date, is_open=True)
    db.add(week)
    _commit_open_week(db)
    db.refresh(week)

    logger.info("week_created", week_id=week.id, start=str(start_date), end=str(end_date))
    record_workflow_event("week_created")
    return week


def set_week_open(db: Session, actor: User, week_id: int, is_open: bool) -> Week:
    ensure_allowed(actor, Action.MANAGE_WEEKS)
    week = db.get(Week, week_id)
    if week is None:
        raise NotFound("Week not found")
    if is_open and _other_open_week(db, week_id) is not None:
        raise Conflict(OPEN_WEEK_CONFLICT)

    week.is_open = bool(is_open)
    _commit_open_week(db)
    db.refresh(week)

    logger.info("week_toggled", week_id=week.id, is_open=week.is_open)
    record_workflow_event("week_opened" if week.is_open else "week_closed")
    return week


def list_weeks(db: Session, actor: User) -> list[WeekWithCount]:
    ensure_allowed(actor, Action.VIEW_WEEKS)
    rows = (
        db.query(Week, func.count(Task.id))
        .outerjoin(Task, Task.week_id == Week.id)
        .group_by(Week.id)
        .order_by(Week.start_date.desc(), Week.id.desc())
        .all()
    )
    return [WeekWithCount(week=week, task_count=count) for week, count in rows]


def list_closed_weeks_with_approved_hours(
    db: Session, actor: User, developer_id: int | None
) -> list[ClosedWeekHours]:
    """Closed weeks holding approved work for a developer, for invoicing."""
    ensure_allowed(actor, Action.MANAGE_INVOICES)
    if not developer_id:
        raise ValidationError("Developer ID is required")

    rows = (
        db.query(Week, func.sum(Task.hours))
        .join(Task, Task.week_id == Week.id)
        .filter(
            Week.is_open.is_(False),
            Task.user_id == developer_id,
            Task.status == "approved",
        )
        .group_by(Week.id)
        .order_by(Week.end_date.asc(), Week.id.asc())
        .all()
    )
    return [ClosedWeekHours(week=week, total_hours=Decimal(total or 0)) for week, total in rows]
