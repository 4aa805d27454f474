import logging

import structlog

SERVICE_NAME = "timesheet-api"


def _add_service(_, __, event_dict: dict) -> dict:
    event_dict.setdefault("service", SERVICE_NAME)
    return event_dict


def configure_logging(level: str = "INFO") -> None:
    level = level.upper()
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            _add_service,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(logging.getLevelName(level)),
    )
    logging.basicConfig(level=level)


def bind_request(request_id: str, method: str, path: str) -> None:
    """Attach request identity to every log line emitted while serving it."""
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(request_id=request_id, method=method, path=path)


def get_logger(name: str) -> structlog.BoundLogger:
    return structlog.get_logger(name)
