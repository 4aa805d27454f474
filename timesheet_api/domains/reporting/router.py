from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session

from timesheet_api.db.session import get_session
from timesheet_api.domains.auth.deps import get_current_user
from timesheet_api.domains.reporting.service import get_admin_stats
from timesheet_api.models import User

router = APIRouter(prefix="/admin/stats", tags=["reporting"])


class AdminStatsOut(BaseModel):
    total_developers: int
    total_hours: float
    total_cost: float
    pending_tasks: int


@router.get("", response_model=AdminStatsOut)
def admin_stats(
    user: User = Depends(get_current_user), db: Session = Depends(get_session)
) -> AdminStatsOut:
    stats = get_admin_stats(db, user)
    return AdminStatsOut(
        total_developers=stats.total_developers,
        total_hours=float(stats.total_hours),
        total_cost=float(stats.total_cost),
        pending_tasks=stats.pending_tasks,
    )
