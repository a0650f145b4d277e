"""
Structured Logging

JSON log output for the headless API. Every record written while a request
is handled carries the request ID, including records from GraphQL resolvers
and the schema composer.
"""

import json
import logging
import time
import uuid
from collections.abc import Callable, Iterable
from contextvars import ContextVar
from datetime import datetime, timezone

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

request_id_var: ContextVar[str] = ContextVar("request_id", default="")

# Attributes passed through ``extra=`` that end up in the JSON document
_EXTRA_FIELDS = (
    "method",
    "path",
    "status_code",
    "duration_ms",
    "client_ip",
    "operation_name",
    "model_id",
    "mode",
)

_LIBRARY_LEVELS = {
    "uvicorn": "WARNING",
    "uvicorn.access": "WARNING",
    "sqlalchemy.engine": "WARNING",
}


class RequestIdFilter(logging.Filter):
    """Copy the current request ID onto each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get("")
        return True


class StructuredFormatter(logging.Formatter):
    """One JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        document = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "request_id": getattr(record, "request_id", ""),
        }
        document.update({key: getattr(record, key) for key in _EXTRA_FIELDS if hasattr(record, key)})
        if record.exc_info:
            document["exception"] = self.formatException(record.exc_info)
        return json.dumps(document, default=str)


def _client_ip(request: Request) -> str:
    forwarded = request.headers.get("X-Forwarded-For") or request.headers.get("X-Real-IP")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def _level_for(status_code: int) -> int:
    if status_code >= 500:
        return logging.ERROR
    if status_code >= 400:
        return logging.WARNING
    return logging.INFO


class StructuredLoggingMiddleware(BaseHTTPMiddleware):
    """
    Assign a request ID (echoed in ``X-Request-ID``) and write one access
    record per request with its status and duration.
    """

    def __init__(
        self,
        app: ASGIApp,
        logger_name: str = "headless_cms.access",
        skip_paths: Iterable[str] = ("/health",),
    ):
        super().__init__(app)
        self.logger = logging.getLogger(logger_name)
        self.skip_paths = frozenset(skip_paths)

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request_id_var.set(request_id)
        started = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as exc:
            self._access(request, 500, started, error=str(exc))
            raise

        response.headers["X-Request-ID"] = request_id
        self._access(request, response.status_code, started)
        return response

    def _access(self, request: Request, status_code: int, started: float, error: str | None = None) -> None:
        path = request.url.path
        if path in self.skip_paths:
            return

        duration_ms = (time.perf_counter() - started) * 1000
        message = f"{request.method} {path} - {status_code} ({duration_ms:.2f}ms)"
        if error:
            message = f"{message} - Error: {error}"

        self.logger.log(
            _level_for(status_code),
            message,
            extra={
                "method": request.method,
                "path": path,
                "status_code": status_code,
                "duration_ms": round(duration_ms, 2),
                "client_ip": _client_ip(request),
            },
        )


def setup_structured_logging(log_level: str = "INFO", json_format: bool = True, log_file: str | None = None) -> None:
    """
    Configure the root logger.

    Args:
        log_level: Level for the root and ``headless_cms`` loggers
        json_format: JSON lines when true, a plain text format otherwise
        log_file: Write to this file instead of stderr
    """
    handler = logging.FileHandler(log_file) if log_file else logging.StreamHandler()
    if json_format:
        handler.setFormatter(StructuredFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s [%(request_id)s] %(message)s"))
    handler.addFilter(RequestIdFilter())

    level = log_level.upper()
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    logging.getLogger("headless_cms").setLevel(level)
    for name, library_level in _LIBRARY_LEVELS.items():
        logging.getLogger(name).setLevel(library_level)
