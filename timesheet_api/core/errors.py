"""Workflow error taxonomy and the JSON error envelope.

Services raise the typed errors below; the handlers registered on the app turn
them into ``{"error": "<message>"}`` responses with the matching status code.
"""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from timesheet_api.core.logging import get_logger
from timesheet_api.core.monitoring import report_exception

logger = get_logger(__name__)


class WorkflowError(Exception):
    status_code = 400
    default_message = "Request failed"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthenticated(WorkflowError):
    status_code = 401
    default_message = "Unauthorized"


class Unauthorized(WorkflowError):
    status_code = 403
    default_message = "Access denied"


class ValidationError(WorkflowError):
    status_code = 400
    default_message = "Missing required fields"


class NoOpenWeek(ValidationError):
    default_message = "No open week available"


class NotFound(WorkflowError):
    status_code = 404
    default_message = "Not found"


class InvalidState(WorkflowError):
    status_code = 403
    default_message = "Action not allowed in the current state"


class Conflict(WorkflowError):
    status_code = 409
    default_message = "Conflict"


class DocumentMissing(NotFound):
    default_message = (
        "The file may have been removed during a server restart. Please contact support."
    )


class DependencyFailure(WorkflowError):
    status_code = 502
    default_message = "Upstream service failed"


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part not in ("body", "query"))
    message = first.get("msg", "Invalid value")
    return f"{location}: {message}" if location else message


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(WorkflowError)
    async def handle_workflow_error(request: Request, exc: WorkflowError) -> JSONResponse:
        logger.info(
            "workflow_error",
            path=request.url.path,
            error=type(exc).__name__,
            status_code=exc.status_code,
            detail=exc.message,
        )
        return error_response(exc.status_code, exc.message)

    @app.exception_handler(HTTPException)
    async def handle_http_exception(request: Request, exc: HTTPException) -> JSONResponse:
        return error_response(exc.status_code, str(exc.detail))

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
        return error_response(400, _validation_message(exc))

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("unhandled_error", path=request.url.path)
        report_exception(exc, path=request.url.path)
        return error_response(500, "Internal server error")
