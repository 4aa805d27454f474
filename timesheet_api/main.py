from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from timesheet_api.api.routes import health
from timesheet_api.core.config import settings
from timesheet_api.core.errors import register_error_handlers
from timesheet_api.core.logging import bind_request, configure_logging, get_logger
from timesheet_api.core.monitoring import configure_error_monitoring
from timesheet_api.core.observability import configure_observability
from timesheet_api.domains.auth.router import router as auth_router
from timesheet_api.domains.invoices.router import router as invoices_router
from timesheet_api.domains.jira.router import router as jira_router
from timesheet_api.domains.payment_evidence.router import router as payment_evidence_router
from timesheet_api.domains.reporting.router import router as reporting_router
from timesheet_api.domains.schedules.router import router as schedules_router
from timesheet_api.domains.tasks.router import router as tasks_router
from timesheet_api.domains.users.router import router as users_router
from timesheet_api.domains.weeks.router import router as weeks_router

configure_logging(settings.log_level)
configure_observability()
configure_error_monitoring()
logger = get_logger(__name__)

app = FastAPI(title=settings.app_name)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[str(origin).rstrip("/") for origin in settings.cors_origins] or ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

app.include_router(health.router)
app.include_router(auth_router)
app.include_router(weeks_router)
app.include_router(tasks_router)
app.include_router(invoices_router)
app.include_router(payment_evidence_router)
app.include_router(schedules_router)
app.include_router(users_router)
app.include_router(reporting_router)
app.include_router(jira_router)


@app.middleware("http")
async def request_context(request: Request, call_next):
    request_id = request.headers.get("x-request-id") or uuid4().hex
    bind_request(request_id, request.method, request.url.path)
    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response


@app.on_event("startup")
def startup_event() -> None:
    logger.info("startup_complete", env=settings.env)


@app.get("/")
def root() -> dict[str, str]:
    return {"message": "Timesheet API running", "environment": settings.env}
