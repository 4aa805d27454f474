from __future__ import annotations

from datetime import datetime
from typing import Literal

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session

from timesheet_api.db.session import get_session
from timesheet_api.domains.auth.deps import get_current_user
from timesheet_api.domains.users import service
from timesheet_api.models import User

router = APIRouter(tags=["users"])


class UserOut(BaseModel):
    id: int
    name: str
    email: str
    image: str | None = None
    role: Literal["admin", "developer", "hr"]
    hourly_rate: float
    created_at: datetime
    updated_at: datetime


class ProfileOut(UserOut):
    jira_url: str | None = None
    jira_connected: bool
    has_jira_token: bool


class UserUpdate(BaseModel):
    role: str | None = None
    hourly_rate: float | str | None = None


class ProfileUpdate(BaseModel):
    name: str | None = None
    jira_url: str | None = None
    jira_token: str | None = None


def _sanitize(user: User) -> UserOut:
    return UserOut(
        id=user.id,
        name=user.name,
        email=user.email,
        image=user.image,
        role=user.role,
        hourly_rate=float(user.hourly_rate or 0),
        created_at=user.created_at or datetime.utcnow(),
        updated_at=user.updated_at or datetime.utcnow(),
    )


def _profile(user: User) -> ProfileOut:
    return ProfileOut(
        **_sanitize(user).model_dump(),
        jira_url=user.jira_url,
        jira_connected=bool(user.jira_connected),
        has_jira_token=bool(user.jira_token),
    )


@router.get("/users", response_model=list[UserOut])
def list_users(
    role: str | None = None,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> list[UserOut]:
    return [_sanitize(row) for row in service.list_users(db, user, role)]


@router.put("/admin/users/{user_id}", response_model=UserOut)
def update_user(
    user_id: int,
    payload: UserUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> UserOut:
    updated = service.update_user(
        db, user, user_id, role=payload.role, hourly_rate=payload.hourly_rate
    )
    return _sanitize(updated)


@router.get("/user/profile", response_model=ProfileOut)
def get_profile(user: User = Depends(get_current_user)) -> ProfileOut:
    return _profile(user)


@router.put("/user/profile", response_model=ProfileOut)
def update_profile(
    payload: ProfileUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> ProfileOut:
    changes = payload.model_dump(exclude_unset=True)
    return _profile(service.update_profile(db, user, **changes))
