from datetime import date

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session

from timesheet_api.db.session import get_session
from timesheet_api.domains.auth.deps import get_current_user
from timesheet_api.domains.weeks import service
from timesheet_api.models import User, Week

router = APIRouter(prefix="/admin/weeks", tags=["weeks"])


class WeekCreate(BaseModel):
    start_date: date | None = None
    end_date: date | None = None


class WeekUpdate(BaseModel):
    is_open: bool


class WeekOut(BaseModel):
    id: int
    start_date: date
    end_date: date
    is_open: bool


class WeekListItem(WeekOut):
    task_count: int


class ClosedWeekOut(BaseModel):
    id: int
    start_date: date
    end_date: date
    total_hours: float
    has_tasks_completed: bool = True


def _week_out(week: Week) -> WeekOut:
    return WeekOut(
        id=week.id,
        start_date=week.start_date,
        end_date=week.end_date,
        is_open=week.is_open,
    )


@router.get("", response_model=list[WeekListItem])
def list_weeks(
    user: User = Depends(get_current_user), db: Session = Depends(get_session)
) -> list[WeekListItem]:
    return [
        WeekListItem(**_week_out(row.week).model_dump(), task_count=row.task_count)
        for row in service.list_weeks(db, user)
    ]


@router.post("", response_model=WeekOut, status_code=201)
def create_week(
    payload: WeekCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> WeekOut:
    week = service.create_week(db, user, payload.start_date, payload.end_date)
    return _week_out(week)


@router.patch("/{week_id}", response_model=WeekOut)
def update_week(
    week_id: int,
    payload: WeekUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> WeekOut:
    return _week_out(service.set_week_open(db, user, week_id, payload.is_open))


@router.get("/closed", response_model=list[ClosedWeekOut])
def list_closed_weeks(
    developer_id: int | None = None,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> list[ClosedWeekOut]:
    rows = service.list_closed_weeks_with_approved_hours(db, user, developer_id)
    return [
        ClosedWeekOut(
            id=row.week.id,
            start_date=row.week.start_date,
            end_date=row.week.end_date,
            total_hours=float(row.total_hours),
        )
        for row in rows
    ]
