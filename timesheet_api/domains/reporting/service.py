from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from sqlalchemy.orm import Session

from timesheet_api.domains.auth.permissions import Action, ensure_allowed
from timesheet_api.domains.weeks.service import get_open_week
from timesheet_api.models import Task, User


@dataclass
class AdminStats:
    total_developers: int
    total_hours: Decimal
    total_cost: Decimal
    pending_tasks: int


def get_admin_stats(db: Session, actor: User) -> AdminStats:
    ensure_allowed(actor, Action.VIEW_STATS)
    developers = db.query(User).filter(User.role == "developer").count()

    total_hours = Decimal("0")
    total_cost = Decimal("0")
    pending = 0
    week = get_open_week(db)
    if week is not None:
        rows = (
            db.query(Task.hours, Task.status, User.hourly_rate)
            .join(User, Task.user_id == User.id)
            .filter(Task.week_id == week.id)
            .all()
        )
        for hours, status, rate in rows:
            hours = Decimal(hours)
            total_hours += hours
            total_cost += hours * Decimal(rate or 0)
            if status == "pending":
                pending += 1

    return AdminStats(
        total_developers=developers,
        total_hours=total_hours,
        total_cost=total_cost,
        pending_tasks=pending,
    )
