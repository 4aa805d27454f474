from __future__ import annotations

from datetime import datetime
from hmac import compare_digest

from fastapi import APIRouter, Depends, Header
from pydantic import BaseModel, field_validator
from sqlalchemy.orm import Session

from timesheet_api.core.config import settings
from timesheet_api.core.errors import Unauthenticated
from timesheet_api.db.session import get_session
from timesheet_api.domains.auth.deps import bearer_token, get_current_user
from timesheet_api.domains.auth.service import sign_in, sign_out
from timesheet_api.models import User

router = APIRouter(prefix="/auth", tags=["auth"])


class SignInRequest(BaseModel):
    email: str
    name: str | None = None
    image: str | None = None

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.strip()


class SessionUser(BaseModel):
    id: int
    email: str
    name: str
    role: str
    hourly_rate: float


class SignInResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires: datetime
    user: SessionUser


def _session_user(user: User) -> SessionUser:
    return SessionUser(
        id=user.id,
        email=user.email,
        name=user.name,
        role=user.role,
        hourly_rate=float(user.hourly_rate or 0),
    )


def _check_callback_secret(secret: str | None) -> None:
    expected = settings.auth_callback_secret
    if not expected or not secret or not compare_digest(expected, secret):
        raise Unauthenticated("Invalid identity provider callback")


@router.post("/sessions", response_model=SignInResponse, status_code=201)
def create_session(
    payload: SignInRequest,
    x_auth_callback_secret: str | None = Header(default=None),
    db: Session = Depends(get_session),
) -> SignInResponse:
    """Called by the identity provider once it has verified the user."""
    _check_callback_secret(x_auth_callback_secret)
    user, session = sign_in(db, payload.email, name=payload.name, image=payload.image)
    return SignInResponse(
        access_token=session.session_token,
        expires=session.expires,
        user=_session_user(user),
    )


@router.delete("/sessions", status_code=204)
def delete_session(
    token: str | None = Depends(bearer_token),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> None:
    sign_out(db, token)
    return None


@router.get("/session", response_model=SessionUser)
def current_session(user: User = Depends(get_current_user)) -> SessionUser:
    return _session_user(user)
