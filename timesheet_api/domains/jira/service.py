from __future__ import annotations

from dataclasses import dataclass, field

from sqlalchemy.orm import Session

from timesheet_api.core.errors import DependencyFailure, NotFound
from timesheet_api.core.logging import get_logger
from timesheet_api.domains.jira.client import JiraClient, JiraIssuePage
from timesheet_api.models import User

logger = get_logger(__name__)


@dataclass
class ConnectionStatus:
    connected: bool
    url: str | None = None


@dataclass
class IssueListing:
    has_jira_integration: bool
    page: JiraIssuePage = field(default_factory=JiraIssuePage)
    url: str | None = None
    error: str | None = None


def _mark_connected(db: Session, user: User) -> None:
    user.jira_connected = True
    db.commit()
    logger.info("jira_connected", user_id=user.id)


def connection_status(db: Session, client: JiraClient, user: User) -> ConnectionStatus:
    """Report the link, connecting on the fly when the email is known to Jira."""
    if user.jira_connected:
        return ConnectionStatus(connected=True, url=client.base_url or None)
    if client.configured and client.user_exists(user.email):
        _mark_connected(db, user)
        return ConnectionStatus(connected=True, url=client.base_url)
    return ConnectionStatus(connected=False)


def connect(db: Session, client: JiraClient, user: User) -> ConnectionStatus:
    if not client.configured:
        raise DependencyFailure("Jira credentials not configured in server environment")
    if not client.user_exists(user.email):
        raise NotFound(
            "Your email address was not found in Jira. Ask an administrator to add you."
        )
    _mark_connected(db, user)
    return ConnectionStatus(connected=True, url=client.base_url)


def list_open_issues(
    client: JiraClient, user: User, start_at: int = 0, max_results: int = 10
) -> IssueListing:
    if not user.jira_connected:
        return IssueListing(has_jira_integration=False)
    try:
        page = client.fetch_open_issues(user.email, start_at=start_at, max_results=max_results)
    except DependencyFailure as exc:
        return IssueListing(has_jira_integration=True, url=client.base_url or None, error=exc.message)
    return IssueListing(has_jira_integration=True, page=page, url=client.base_url)
