from __future__ import annotations

from decimal import Decimal, InvalidOperation

from sqlalchemy.orm import Session

from timesheet_api.core.errors import NotFound, ValidationError
from timesheet_api.core.logging import get_logger
from timesheet_api.domains.auth.permissions import Action, ensure_allowed
from timesheet_api.models import User
from timesheet_api.models.user import ROLES

logger = get_logger(__name__)

MAX_NAME_LENGTH = 100
_UNSET = object()


def list_users(db: Session, actor: User, role: str | None = None) -> list[User]:
    ensure_allowed(actor, Action.VIEW_USERS)
    query = db.query(User)
    if role in ROLES:
        query = query.filter(User.role == role)
    return query.order_by(User.created_at.desc(), User.id.desc()).all()


def _parse_rate(value) -> Decimal:
    if isinstance(value, bool):
        raise ValidationError("Invalid hourly rate")
    try:
        rate = Decimal(str(value))
    except (InvalidOperation, ValueError) as exc:
        raise ValidationError("Invalid hourly rate") from exc
    if not rate.is_finite() or rate < 0:
        raise ValidationError("Invalid hourly rate")
    return rate


def update_user(
    db: Session,
    actor: User,
    user_id: int,
    role: str | None = None,
    hourly_rate=None,
) -> User:
    """Admin-only change of a user's role and/or hourly rate."""
    ensure_allowed(actor, Action.MANAGE_USERS)
    if role is not None and role not in ROLES:
        raise ValidationError("Invalid role")
    rate = _parse_rate(hourly_rate) if hourly_rate is not None else None

    user = db.get(User, user_id)
    if user is None:
        raise NotFound("User not found")

    if role is not None:
        user.role = role
    if rate is not None:
        user.hourly_rate = rate
    db.commit()
    db.refresh(user)

    logger.info("user_updated", user_id=user.id, role=user.role, changed_by=actor.id)
    return user


def update_profile(
    db: Session,
    user: User,
    name=_UNSET,
    jira_url=_UNSET,
    jira_token=_UNSET,
) -> User:
    if name is not _UNSET:
        if name is None or not str(name).strip():
            raise ValidationError("Name must not be empty")
        if len(name) > MAX_NAME_LENGTH:
            raise ValidationError(f"Name must be less than {MAX_NAME_LENGTH} characters")
        user.name = name.strip()
    if jira_url is not _UNSET:
        user.jira_url = jira_url or None
    if jira_token is not _UNSET:
        user.jira_token = jira_token or None
    db.commit()
    db.refresh(user)
    logger.info("profile_updated", user_id=user.id)
    return user

