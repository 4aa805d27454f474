from __future__ import annotations

import secrets
from datetime import datetime, timedelta

from sqlalchemy import func
from sqlalchemy.orm import Session

from timesheet_api.core.config import settings
from timesheet_api.core.errors import Unauthenticated, ValidationError
from timesheet_api.core.logging import get_logger
from timesheet_api.models import AuthSession, User

logger = get_logger(__name__)


def find_user_by_email(db: Session, email: str) -> User | None:
    return db.query(User).filter(func.lower(User.email) == email.strip().lower()).one_or_none()


def sign_in(
    db: Session,
    email: str,
    name: str | None = None,
    image: str | None = None,
    ttl_hours: int | None = None,
) -> tuple[User, AuthSession]:
    """Find or create the user behind a verified identity and open a session.

    New users start as developers with a zero hourly rate.
    """
    email = (email or "").strip()
    if "@" not in email:
        raise ValidationError("Invalid email")

    user = find_user_by_email(db, email)
    if user is None:
        user = User(email=email, name=(name or email.split("@")[0]).strip(), image=image)
        db.add(user)
        db.flush()
        logger.info("user_registered", user_id=user.id, email=email)
    elif image and not user.image:
        user.image = image

    ttl = ttl_hours if ttl_hours is not None else settings.session_ttl_hours
    session = AuthSession(
        session_token=secrets.token_urlsafe(32),
        user_id=user.id,
        expires=datetime.utcnow() + timedelta(hours=ttl),
    )
    db.add(session)
    db.commit()
    db.refresh(user)
    logger.info("sign_in", user_id=user.id, role=user.role)
    return user, session


def sign_out(db: Session, token: str) -> None:
    db.query(AuthSession).filter(AuthSession.session_token == token).delete()
    db.commit()


def resolve_session(db: Session, token: str | None) -> User:
    if not token:
        raise Unauthenticated()
    session = db.get(AuthSession, token)
    if session is None:
        raise Unauthenticated()
    if session.expires <= datetime.utcnow():
        db.delete(session)
        db.commit()
        raise Unauthenticated("Session expired")
    user = db.get(User, session.user_id)
    if user is None:
        raise Unauthenticated()
    return user
