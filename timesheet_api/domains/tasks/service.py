"""Task submission and review.

Developers log tasks against the single open week. Admin/HR reviewers move a
pending task to approved or rejected; both are final, so a rejected piece of
work is resubmitted as a new task.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal, InvalidOperation

from sqlalchemy.orm import Session, joinedload

from timesheet_api.core.errors import InvalidState, NoOpenWeek, NotFound, ValidationError
from timesheet_api.core.logging import get_logger
from timesheet_api.core.observability import record_workflow_event
from timesheet_api.domains.auth.permissions import Action, ensure_allowed
from timesheet_api.domains.weeks.service import get_open_week
from timesheet_api.models import Task, User

logger = get_logger(__name__)

REVIEW_STATUSES = ("approved", "rejected")
REVIEW_FILTERS = ("all", "pending", "approved", "rejected")
HOURS_STEP = Decimal("0.01")
MAX_TASK_HOURS = Decimal("999.99")


@dataclass
class WeekSummary:
    total_hours: Decimal = Decimal("0")
    approved_hours: Decimal = Decimal("0")
    total_payout: Decimal = Decimal("0")
    approved_payout: Decimal = Decimal("0")


@dataclass
class TaskPage:
    tasks: list[Task]
    summary: WeekSummary
    page: int
    page_size: int
    total: int
    total_pages: int = field(init=False)
    has_more: bool = field(init=False)

    def __post_init__(self) -> None:
        self.total_pages = math.ceil(self.total / self.page_size) if self.page_size else 0
        self.has_more = self.page < self.total_pages


def _validate_entry(description: str | None, hours) -> tuple[str, Decimal]:
    text = (description or "").strip()
    if not text or hours is None:
        raise ValidationError("Description and hours are required")
    try:
        value = Decimal(str(hours))
    except (InvalidOperation, ValueError) as exc:
        raise ValidationError("Invalid hours value") from exc
    # Stored as Numeric(5, 2).
    if not value.is_finite() or value <= 0 or value > MAX_TASK_HOURS:
        raise ValidationError("Invalid hours value")
    if value != value.quantize(HOURS_STEP):
        raise ValidationError("Hours allow at most two decimal places")
    return text, value


def _own_task(db: Session, user: User, task_id: int) -> Task:
    task = db.query(Task).filter(Task.id == task_id, Task.user_id == user.id).one_or_none()
    if task is None:
        raise NotFound("Task not found")
    return task


def create_task(
    db: Session,
    user: User,
    description: str | None,
    hours,
    jira_task_id: str | None = None,
    jira_task_key: str | None = None,
) -> Task:
    ensure_allowed(user, Action.SUBMIT_TASKS)
    text, value = _validate_entry(description, hours)

    week = get_open_week(db)
    if week is None:
        raise NoOpenWeek()

    task = Task(
        user_id=user.id,
        week_id=week.id,
        description=text,
        hours=value,
        status="pending",
        jira_task_id=jira_task_id or None,
        jira_task_key=jira_task_key or None,
    )
    db.add(task)
    db.commit()
    db.refresh(task)

    logger.info("task_created", task_id=task.id, user_id=user.id, week_id=week.id, hours=str(value))
    record_workflow_event("task_created")
    return task


def get_task(db: Session, user: User, task_id: int) -> Task:
    return _own_task(db, user, task_id)


def update_task(
    db: Session,
    user: User,
    task_id: int,
    description: str | None,
    hours,
    jira_task_id: str | None = None,
    jira_task_key: str | None = None,
) -> Task:
    text, value = _validate_entry(description, hours)
    task = _own_task(db, user, task_id)
    if task.status != "pending":
        raise InvalidState("Only pending tasks can be updated")

    task.description = text
    task.hours = value
    task.jira_task_id = jira_task_id or None
    task.jira_task_key = jira_task_key or None
    db.commit()
    db.refresh(task)

    logger.info("task_updated", task_id=task.id, user_id=user.id)
    return task


def delete_task(db: Session, user: User, task_id: int) -> None:
    task = _own_task(db, user, task_id)
    if task.status != "pending":
        raise InvalidState("Only pending tasks can be deleted")

    db.delete(task)
    db.commit()
    logger.info("task_deleted", task_id=task_id, user_id=user.id)


def review_task(
    db: Session,
    reviewer: User,
    task_id: int,
    status: str | None,
    comment: str | None = None,
) -> Task:
    ensure_allowed(reviewer, Action.REVIEW_TASKS)
    if status not in REVIEW_STATUSES:
        raise ValidationError("Status must be approved or rejected")
    comment = (comment or "").strip() or None
    if status == "rejected" and not comment:
        raise ValidationError("Admin comment required for rejection")

    task = db.get(Task, task_id)
    if task is None:
        raise NotFound("Task not found")
    if task.status != "pending":
        raise InvalidState(f"Task has already been {task.status}")

    task.status = status
    task.admin_comment = comment
    task.approved_by = reviewer.id
    task.reviewed_at = datetime.utcnow()
    db.commit()
    db.refresh(task)

    logger.info("task_reviewed", task_id=task.id, status=status, reviewer_id=reviewer.id)
    record_workflow_event("task_reviewed", status=status)
    return task


def list_tasks_for_review(db: Session, reviewer: User, status_filter: str | None = "all") -> list[Task]:
    ensure_allowed(reviewer, Action.REVIEW_TASKS)
    status_filter = status_filter or "all"
    if status_filter not in REVIEW_FILTERS:
        raise ValidationError("Invalid status filter")

    week = get_open_week(db)
    if week is None:
        return []

    query = (
        db.query(Task)
        .options(joinedload(Task.user))
        .filter(Task.week_id == week.id)
    )
    if status_filter != "all":
        query = query.filter(Task.status == status_filter)
    return query.order_by(Task.created_at.desc(), Task.id.desc()).all()


def summarize(tasks: list[Task], hourly_rate) -> WeekSummary:
    rate = Decimal(str(hourly_rate or 0))
    total = sum((Decimal(task.hours) for task in tasks), Decimal("0"))
    approved = sum(
        (Decimal(task.hours) for task in tasks if task.status == "approved"), Decimal("0")
    )
    return WeekSummary(
        total_hours=total,
        approved_hours=approved,
        total_payout=total * rate,
        approved_payout=approved * rate,
    )


def compute_week_summary(db: Session, user: User) -> WeekSummary:
    week = get_open_week(db)
    if week is None:
        return WeekSummary()
    tasks = db.query(Task).filter(Task.user_id == user.id, Task.week_id == week.id).all()
    return summarize(tasks, user.hourly_rate)


def list_my_tasks(db: Session, user: User, page: int = 1, page_size: int = 5) -> TaskPage:
    page = max(page, 1)
    page_size = max(page_size, 1)
    week = get_open_week(db)
    if week is None:
        return TaskPage(tasks=[], summary=WeekSummary(), page=page, page_size=page_size, total=0)

    query = db.query(Task).filter(Task.user_id == user.id, Task.week_id == week.id)
    total = query.count()
    tasks = (
        query.order_by(Task.created_at.desc(), Task.id.desc())
        .offset((page - 1) * page_size)
        .limit(page_size)
        .all()
    )
    return TaskPage(
        tasks=tasks,
        summary=compute_week_summary(db, user),
        page=page,
        page_size=page_size,
        total=total,
    )
