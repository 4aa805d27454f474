from datetime import date, datetime

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session

from timesheet_api.db.session import get_session
from timesheet_api.domains.auth.deps import get_current_user
from timesheet_api.domains.schedules import service
from timesheet_api.models import DeveloperWorkSchedule, User

router = APIRouter(tags=["schedules"])


class ScheduleIn(BaseModel):
    user_id: int | None = None
    days_per_week: int | None = None
    hours_per_day: int | None = None
    expected_payout: float | None = None


class ScheduleOut(BaseModel):
    id: int
    user_id: int
    days_per_week: int
    hours_per_day: int
    expected_payout: float | None = None
    updated_at: datetime


class ScheduleLookup(BaseModel):
    schedule: ScheduleOut | None = None


class WeekStatusOut(BaseModel):
    current_week_id: int
    start_date: date
    end_date: date
    is_open: bool
    total_hours_worked: float
    total_hours_expected: int
    hourly_rate: float
    days_per_week: int
    hours_per_day: int
    expected_earnings: float
    actual_earnings: float
    remaining_hours: float


def _schedule_out(schedule: DeveloperWorkSchedule) -> ScheduleOut:
    return ScheduleOut(
        id=schedule.id,
        user_id=schedule.user_id,
        days_per_week=schedule.days_per_week,
        hours_per_day=schedule.hours_per_day,
        expected_payout=float(schedule.expected_payout) if schedule.expected_payout is not None else None,
        updated_at=schedule.updated_at,
    )


@router.get("/admin/developer-schedule", response_model=list[ScheduleOut])
def list_schedules(
    user: User = Depends(get_current_user), db: Session = Depends(get_session)
) -> list[ScheduleOut]:
    return [_schedule_out(schedule) for schedule in service.list_schedules(db, user)]


@router.post("/admin/developer-schedule", response_model=ScheduleOut)
def save_schedule(
    payload: ScheduleIn,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> ScheduleOut:
    schedule = service.upsert_schedule(
        db,
        user,
        payload.user_id,
        payload.days_per_week,
        payload.hours_per_day,
        payload.expected_payout,
    )
    return _schedule_out(schedule)


@router.get("/admin/developer-schedule/{user_id}", response_model=ScheduleLookup)
def get_schedule(
    user_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_session)
) -> ScheduleLookup:
    schedule = service.get_schedule(db, user, user_id)
    return ScheduleLookup(schedule=_schedule_out(schedule) if schedule else None)


@router.get("/developer/week-status", response_model=WeekStatusOut)
def week_status(
    user: User = Depends(get_current_user), db: Session = Depends(get_session)
) -> WeekStatusOut:
    status = service.get_week_status(db, user)
    return WeekStatusOut(
        current_week_id=status.week_id,
        start_date=status.start_date,
        end_date=status.end_date,
        is_open=status.is_open,
        total_hours_worked=float(status.total_hours_worked),
        total_hours_expected=status.total_hours_expected,
        hourly_rate=float(status.hourly_rate),
        days_per_week=status.days_per_week,
        hours_per_day=status.hours_per_day,
        expected_earnings=float(status.expected_earnings),
        actual_earnings=float(status.actual_earnings),
        remaining_hours=float(status.remaining_hours),
    )
