from datetime import datetime

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
from sqlalchemy.orm import Session

from timesheet_api.db.session import get_session
from timesheet_api.domains.auth.deps import get_current_user
from timesheet_api.domains.tasks import service
from timesheet_api.models import Task, User

router = APIRouter(tags=["tasks"])


class TaskIn(BaseModel):
    description: str | None = None
    hours: float | None = None
    jira_task_id: str | None = None
    jira_task_key: str | None = None


class TaskReview(BaseModel):
    status: str | None = None
    admin_comment: str | None = None


class TaskOut(BaseModel):
    id: int
    user_id: int
    week_id: int
    description: str
    hours: float
    status: str
    admin_comment: str | None = None
    approved_by: int | None = None
    reviewed_at: datetime | None = None
    jira_task_id: str | None = None
    jira_task_key: str | None = None
    created_at: datetime


class TaskUser(BaseModel):
    id: int
    name: str
    email: str
    hourly_rate: float


class ReviewTaskOut(TaskOut):
    user: TaskUser


class SummaryOut(BaseModel):
    total_hours: float
    approved_hours: float
    total_payout: float
    approved_payout: float


class PaginationOut(BaseModel):
    current_page: int
    page_size: int
    total: int
    total_pages: int
    has_more: bool


class TaskListOut(BaseModel):
    tasks: list[TaskOut]
    summary: SummaryOut
    pagination: PaginationOut


def _task_out(task: Task) -> TaskOut:
    return TaskOut(
        id=task.id,
        user_id=task.user_id,
        week_id=task.week_id,
        description=task.description,
        hours=float(task.hours),
        status=task.status,
        admin_comment=task.admin_comment,
        approved_by=task.approved_by,
        reviewed_at=task.reviewed_at,
        jira_task_id=task.jira_task_id,
        jira_task_key=task.jira_task_key,
        created_at=task.created_at,
    )


def _summary_out(summary: service.WeekSummary) -> SummaryOut:
    return SummaryOut(
        total_hours=float(summary.total_hours),
        approved_hours=float(summary.approved_hours),
        total_payout=float(summary.total_payout),
        approved_payout=float(summary.approved_payout),
    )


@router.get("/tasks", response_model=TaskListOut)
def list_tasks(
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=5, ge=1, le=100),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> TaskListOut:
    result = service.list_my_tasks(db, user, page=page, page_size=page_size)
    return TaskListOut(
        tasks=[_task_out(task) for task in result.tasks],
        summary=_summary_out(result.summary),
        pagination=PaginationOut(
            current_page=result.page,
            page_size=result.page_size,
            total=result.total,
            total_pages=result.total_pages,
            has_more=result.has_more,
        ),
    )


@router.get("/tasks/summary", response_model=SummaryOut)
def week_summary(
    user: User = Depends(get_current_user), db: Session = Depends(get_session)
) -> SummaryOut:
    return _summary_out(service.compute_week_summary(db, user))


@router.post("/tasks", response_model=TaskOut, status_code=201)
def create_task(
    payload: TaskIn,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> TaskOut:
    task = service.create_task(
        db,
        user,
        payload.description,
        payload.hours,
        jira_task_id=payload.jira_task_id,
        jira_task_key=payload.jira_task_key,
    )
    return _task_out(task)


@router.get("/tasks/{task_id}", response_model=TaskOut)
def get_task(
    task_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_session)
) -> TaskOut:
    return _task_out(service.get_task(db, user, task_id))


@router.put("/tasks/{task_id}", response_model=TaskOut)
def update_task(
    task_id: int,
    payload: TaskIn,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> TaskOut:
    task = service.update_task(
        db,
        user,
        task_id,
        payload.description,
        payload.hours,
        jira_task_id=payload.jira_task_id,
        jira_task_key=payload.jira_task_key,
    )
    return _task_out(task)


@router.delete("/tasks/{task_id}", status_code=204)
def delete_task(
    task_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_session)
) -> None:
    service.delete_task(db, user, task_id)
    return None


@router.get("/admin/tasks", response_model=list[ReviewTaskOut])
def list_tasks_for_review(
    status: str = "all",
    user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> list[ReviewTaskOut]:
    return [
        ReviewTaskOut(
            **_task_out(task).model_dump(),
            user=TaskUser(
                id=task.user.id,
                name=task.user.name,
                email=task.user.email,
                hourly_rate=float(task.user.hourly_rate or 0),
            ),
        )
        for task in service.list_tasks_for_review(db, user, status)
    ]


@router.patch("/admin/tasks/{task_id}", response_model=TaskOut)
def review_task(
    task_id: int,
    payload: TaskReview,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> TaskOut:
    return _task_out(service.review_task(db, user, task_id, payload.status, payload.admin_comment))
