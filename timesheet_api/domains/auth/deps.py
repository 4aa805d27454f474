from __future__ import annotations

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from timesheet_api.db.session import get_session
from timesheet_api.domains.auth.service import resolve_session
from timesheet_api.models import User


def bearer_token(authorization: str | None = Header(default=None)) -> str | None:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def get_current_user(
    token: str | None = Depends(bearer_token),
    db: Session = Depends(get_session),
) -> User:
    return resolve_session(db, token)
