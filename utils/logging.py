"""
Logging for the navigation service.

Every record carries the current request id. Navigation log lines are
prefixed with a component tag such as "[NAV:CLIENT]"; the JSON formatter
lifts that tag into its own field so log queries can filter on it.
"""

import json
import logging
import re
import sys
import time
import uuid
from contextvars import ContextVar, Token
from datetime import datetime, timezone
from typing import Any, Iterable, Optional

_request_id_ctx: ContextVar[Optional[str]] = ContextVar("request_id", default=None)

_COMPONENT_RE = re.compile(r"^\[([A-Z]+(?::[A-Z]+)*)\]\s*")

_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {"message", "request_id"}

TEXT_FORMAT = "%(asctime)s %(levelname)-8s [%(request_id)s] %(name)s: %(message)s"

QUIET_LOGGERS = ("redis", "httpx", "httpcore")


def get_request_id() -> Optional[str]:
    return _request_id_ctx.get()


def bind_request_id(request_id: Optional[str] = None) -> Token:
    """Bind a request id (generated when omitted) to the current context."""
    return _request_id_ctx.set(request_id or uuid.uuid4().hex[:8])


def unbind_request_id(token: Token) -> None:
    _request_id_ctx.reset(token)


def split_component(message: str) -> tuple[Optional[str], str]:
    """Split "[NAV:REDIS] get failed" into ("NAV:REDIS", "get failed")."""
    match = _COMPONENT_RE.match(message)
    if match is None:
        return None, message
    return match.group(1), message[match.end():]


class RequestIDFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = get_request_id() or "-"
        return True


class JSONFormatter(logging.Formatter):
    """One JSON object per line, with extra={...} fields merged in."""

    def format(self, record: logging.LogRecord) -> str:
        component, text = split_component(record.getMessage())
        data: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": text,
        }
        if component:
            data["component"] = component

        request_id = get_request_id()
        if request_id:
            data["request_id"] = request_id

        for key, value in record.__dict__.items():
            if key not in _RECORD_ATTRS:
                data[key] = value

        if record.exc_info:
            data["exception"] = self.formatException(record.exc_info)

        return json.dumps(data, default=str)


def setup_logging(
    level: str = "INFO",
    json_format: bool = False,
    module_levels: Optional[dict[str, str]] = None,
    quiet: Iterable[str] = QUIET_LOGGERS,
) -> None:
    """
    Configure the root logger.

    Args:
        level: Root log level
        json_format: Emit JSON lines instead of plain text
        module_levels: Per-logger overrides, e.g. {"navigation": "DEBUG"}
        quiet: Third-party loggers held at WARNING unless overridden
    """
    root = logging.getLogger()
    root.setLevel(level.upper())
    for handler in root.handlers[:]:
        root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(RequestIDFilter())
    handler.setFormatter(JSONFormatter() if json_format else logging.Formatter(TEXT_FORMAT, datefmt="%H:%M:%S"))
    root.addHandler(handler)

    levels = {name: "WARNING" for name in quiet}
    levels.update(module_levels or {})
    for name, name_level in levels.items():
        logging.getLogger(name).setLevel(name_level.upper())


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


async def request_logging_middleware(request, call_next):
    """
    Bind X-Request-ID (or a fresh id) for the request and log its outcome.

    Health checks are not logged.
    """
    token = bind_request_id(request.headers.get("X-Request-ID"))
    try:
        path = request.url.path
        start = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start) * 1000

        if path != "/health":
            get_logger("api.request").info(
                f"{request.method} {path} -> {response.status_code} ({duration_ms:.0f}ms)",
                extra={"status_code": response.status_code, "duration_ms": round(duration_ms, 1)},
            )
        response.headers["X-Request-ID"] = get_request_id()
        return response
    finally:
        unbind_request_id(token)
