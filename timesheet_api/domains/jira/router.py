from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
from sqlalchemy.orm import Session

from timesheet_api.db.session import get_session
from timesheet_api.domains.auth.deps import get_current_user
from timesheet_api.domains.jira import service
from timesheet_api.domains.jira.client import JiraClient, JiraIssue, get_jira_client
from timesheet_api.models import User

router = APIRouter(prefix="/jira", tags=["jira"])


class ConnectionOut(BaseModel):
    connected: bool
    url: str | None = None


class JiraIssueOut(BaseModel):
    id: str
    key: str
    summary: str
    status: str
    updated: str | None = None
    assignee: str | None = None


class JiraIssuesOut(BaseModel):
    tasks: list[JiraIssueOut]
    has_jira_integration: bool
    total: int
    start_at: int
    max_results: int
    has_more: bool
    jira_url: str | None = None
    error: str | None = None
    message: str | None = None


def _issue_out(issue: JiraIssue) -> JiraIssueOut:
    return JiraIssueOut(
        id=issue.id,
        key=issue.key,
        summary=issue.summary,
        status=issue.status,
        updated=issue.updated,
        assignee=issue.assignee_display_name or issue.assignee_name,
    )


@router.get("/connect", response_model=ConnectionOut)
def connection_status(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
    client: JiraClient = Depends(get_jira_client),
) -> ConnectionOut:
    status = service.connection_status(db, client, user)
    return ConnectionOut(connected=status.connected, url=status.url)


@router.post("/connect", response_model=ConnectionOut)
def connect(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
    client: JiraClient = Depends(get_jira_client),
) -> ConnectionOut:
    status = service.connect(db, client, user)
    return ConnectionOut(connected=status.connected, url=status.url)


@router.get("/tasks", response_model=JiraIssuesOut)
def list_tasks(
    start_at: int = Query(default=0, ge=0),
    max_results: int = Query(default=10, ge=1, le=100),
    user: User = Depends(get_current_user),
    client: JiraClient = Depends(get_jira_client),
) -> JiraIssuesOut:
    listing = service.list_open_issues(client, user, start_at=start_at, max_results=max_results)
    message = None
    if not listing.has_jira_integration:
        message = "You're not connected to Jira. Please check if your email is registered in Jira."
    return JiraIssuesOut(
        tasks=[_issue_out(issue) for issue in listing.page.tasks],
        has_jira_integration=listing.has_jira_integration,
        total=listing.page.total,
        start_at=listing.page.start_at,
        max_results=listing.page.max_results,
        has_more=listing.page.has_more,
        jira_url=listing.url,
        error=listing.error,
        message=message,
    )
