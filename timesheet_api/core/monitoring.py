import sentry_sdk

from timesheet_api.core.config import settings

# Credentials that must never reach the error tracker.
SENSITIVE_HEADERS = frozenset({"authorization", "x-auth-callback-secret", "cookie"})


def scrub_event(event: dict, hint: dict) -> dict:
    headers = (event.get("request") or {}).get("headers")
    if isinstance(headers, dict):
        for key in list(headers):
            if key.lower() in SENSITIVE_HEADERS:
                headers[key] = "[Filtered]"
    return event


def configure_error_monitoring() -> None:
    if settings.sentry_dsn:
        sentry_sdk.init(
            dsn=settings.sentry_dsn,
            environment=settings.env,
            traces_sample_rate=0.2,
            send_default_pii=False,
            before_send=scrub_event,
        )


def report_exception(exc: BaseException, path: str | None = None) -> None:
    if not settings.sentry_dsn:
        return
    with sentry_sdk.new_scope() as scope:
        if path:
            scope.set_tag("http.path", path)
        sentry_sdk.capture_exception(exc)
