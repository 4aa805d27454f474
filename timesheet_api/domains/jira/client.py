"""Read-only Jira lookups using the shared service account."""

from __future__ import annotations

from dataclasses import dataclass, field

import httpx

from timesheet_api.core.config import Settings, settings
from timesheet_api.core.errors import DependencyFailure
from timesheet_api.core.logging import get_logger

logger = get_logger(__name__)

ISSUE_FIELDS = "summary,key,status,assignee,updated"


@dataclass
class JiraIssue:
    id: str
    key: str
    summary: str
    status: str
    updated: str | None = None
    assignee_name: str | None = None
    assignee_display_name: str | None = None


@dataclass
class JiraIssuePage:
    tasks: list[JiraIssue] = field(default_factory=list)
    total: int = 0
    start_at: int = 0
    max_results: int = 10

    @property
    def has_more(self) -> bool:
        return self.start_at + self.max_results < self.total


def open_issues_jql(email: str) -> str:
    local_part = email.split("@")[0]
    return (
        f'assignee in ("{email}", "{local_part}") '
        "AND status not in (Done, Closed) ORDER BY updated DESC"
    )


def _parse_issue(raw: dict) -> JiraIssue:
    fields = raw.get("fields") or {}
    assignee = fields.get("assignee") or {}
    return JiraIssue(
        id=str(raw.get("id", "")),
        key=str(raw.get("key", "")),
        summary=fields.get("summary") or "",
        status=(fields.get("status") or {}).get("name") or "Unknown",
        updated=fields.get("updated"),
        assignee_name=assignee.get("name"),
        assignee_display_name=assignee.get("displayName"),
    )


class JiraClient:
    def __init__(
        self,
        base_url: str | None,
        email: str,
        api_token: str | None,
        timeout: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = (base_url or "").rstrip("/")
        self.email = email
        self.api_token = api_token
        self.timeout = timeout
        self.transport = transport

    @classmethod
    def from_settings(cls, config: Settings = settings) -> "JiraClient":
        return cls(
            base_url=config.jira_url,
            email=config.jira_email,
            api_token=config.jira_api_token,
            timeout=config.jira_timeout_seconds,
        )

    @property
    def configured(self) -> bool:
        return bool(self.base_url and self.api_token)

    def _client(self) -> httpx.Client:
        if not self.configured:
            raise DependencyFailure("Jira credentials are not configured")
        return httpx.Client(
            base_url=self.base_url,
            auth=(self.email, self.api_token),
            headers={"Accept": "application/json"},
            timeout=self.timeout,
            transport=self.transport,
        )

    def fetch_open_issues(self, email: str, start_at: int = 0, max_results: int = 10) -> JiraIssuePage:
        params = {
            "jql": open_issues_jql(email),
            "startAt": start_at,
            "maxResults": max_results,
            "fields": ISSUE_FIELDS,
        }
        try:
            with self._client() as client:
                response = client.get("/rest/api/2/search", params=params)
                response.raise_for_status()
                data = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.error("jira_search_failed", email=email, error=str(exc))
            raise DependencyFailure("Failed to fetch tasks from Jira") from exc

        issues = [_parse_issue(issue) for issue in data.get("issues") or []]
        logger.info("jira_issues_fetched", email=email, count=len(issues), total=data.get("total"))
        return JiraIssuePage(
            tasks=issues,
            total=int(data.get("total") or 0),
            start_at=int(data.get("startAt") or 0),
            max_results=int(data.get("maxResults") or max_results),
        )

    def user_exists(self, email: str) -> bool:
        try:
            with self._client() as client:
                response = client.get("/rest/api/2/user/search", params={"query": email})
                response.raise_for_status()
                users = response.json()
        except (httpx.HTTPError, DependencyFailure, ValueError) as exc:
            logger.warning("jira_user_lookup_failed", email=email, error=str(exc))
            return False
        return bool(users)


def get_jira_client() -> JiraClient:
    return JiraClient.from_settings()
