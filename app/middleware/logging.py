"""
Structured Logging

JSON log formatting, a request-id filter and a request logging middleware.
`configure_logging` is called once from main.create_app.
"""

import json
import logging
import time
import uuid
from collections.abc import Callable
from contextvars import ContextVar
from datetime import datetime, timezone

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

request_id_var: ContextVar[str] = ContextVar("request_id", default="")

EXTRA_KEYS = ("method", "path", "status_code", "duration_ms", "type_id", "field_type", "widget_id", "table", "operation")
QUIET_PATHS = ("/health",)


class RequestIdFilter(logging.Filter):
    """Adds the current request id to every record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get("")
        return True


class StructuredFormatter(logging.Formatter):
    """One JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "request_id": getattr(record, "request_id", ""),
        }
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        for key in EXTRA_KEYS:
            if hasattr(record, key):
                log_data[key] = getattr(record, key)
        return json.dumps(log_data, default=str)


class StructuredLoggingMiddleware(BaseHTTPMiddleware):
    """Assigns a request id, times the request and logs one line per response."""

    def __init__(self, app: ASGIApp, logger_name: str = "app.access"):
        super().__init__(app)
        self.logger = logging.getLogger(logger_name)

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        token = request_id_var.set(request_id)
        start_time = time.perf_counter()
        try:
            try:
                response = await call_next(request)
            except Exception as e:
                self._log_request(request, 500, start_time, error=str(e))
                raise
            response.headers["X-Request-ID"] = request_id
            self._log_request(request, response.status_code, start_time)
            return response
        finally:
            request_id_var.reset(token)

    def _log_request(self, request: Request, status_code: int, start_time: float, error: str | None = None) -> None:
        if request.url.path in QUIET_PATHS:
            return
        duration_ms = (time.perf_counter() - start_time) * 1000

        if status_code >= 500:
            log_level = logging.ERROR
        elif status_code >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        extra = {
            "method": request.method,
            "path": request.url.path,
            "status_code": status_code,
            "duration_ms": round(duration_ms, 2),
        }
        message = f"{request.method} {request.url.path} - {status_code} ({duration_ms:.2f}ms)"
        if error:
            message += f" - Error: {error}"
        self.logger.log(log_level, message, extra=extra)


def configure_logging(log_level: str = "INFO", json_format: bool = False) -> None:
    """
    Configure the root logger.

    Args:
        log_level: Logging level name (DEBUG, INFO, WARNING, ERROR)
        json_format: Use StructuredFormatter instead of the plain text format
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))
    root_logger.handlers.clear()

    handler = logging.StreamHandler()
    if json_format:
        handler.setFormatter(StructuredFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - [%(request_id)s] %(message)s"))
    handler.addFilter(RequestIdFilter())
    root_logger.addHandler(handler)

    for logger_name, level in {"uvicorn.access": "WARNING", "sqlalchemy.engine": "WARNING"}.items():
        logging.getLogger(logger_name).setLevel(level)


def get_request_id() -> str:
    return request_id_var.get("")
