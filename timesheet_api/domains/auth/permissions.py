from __future__ import annotations

from enum import Enum

from timesheet_api.core.errors import Unauthorized


class Action(str, Enum):
    SUBMIT_TASKS = "submit_tasks"
    REVIEW_TASKS = "review_tasks"
    MANAGE_WEEKS = "manage_weeks"
    VIEW_WEEKS = "view_weeks"
    MANAGE_INVOICES = "manage_invoices"
    VIEW_INVOICES = "view_invoices"
    MANAGE_PAYMENT_EVIDENCE = "manage_payment_evidence"
    MANAGE_SCHEDULES = "manage_schedules"
    VIEW_USERS = "view_users"
    MANAGE_USERS = "manage_users"
    VIEW_STATS = "view_stats"


ALL_ROLES = frozenset({"admin", "hr", "developer"})
STAFF = frozenset({"admin", "hr"})
ADMIN = frozenset({"admin"})

PERMISSION_MATRIX: dict[Action, frozenset[str]] = {
    Action.SUBMIT_TASKS: ALL_ROLES,
    Action.REVIEW_TASKS: STAFF,
    Action.MANAGE_WEEKS: ADMIN,
    Action.VIEW_WEEKS: STAFF,
    Action.MANAGE_INVOICES: STAFF,
    Action.VIEW_INVOICES: ALL_ROLES,
    Action.MANAGE_PAYMENT_EVIDENCE: STAFF,
    Action.MANAGE_SCHEDULES: ADMIN,
    Action.VIEW_USERS: STAFF,
    Action.MANAGE_USERS: ADMIN,
    Action.VIEW_STATS: STAFF,
}


def is_staff(user) -> bool:
    return getattr(user, "role", None) in STAFF


def authorize(user, action: Action) -> bool:
    role = getattr(user, "role", None)
    if not role:
        return False
    return role in PERMISSION_MATRIX.get(action, frozenset())


def ensure_allowed(user, action: Action) -> None:
    if not authorize(user, action):
        raise Unauthorized()
