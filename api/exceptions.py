"""
API errors and the JSON error envelope.

Every error response has the shape:
    {"error": {"message", "code", "status_code", "timestamp", "details"?, "request_id"?}}
"""

import logging
from datetime import datetime, timezone
from typing import Any, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from navigation import NavigationStoreError
from utils.logging import get_request_id

logger = logging.getLogger("api.errors")


class APIError(Exception):
    def __init__(self, message: str, status_code: int, code: str, details: Optional[dict[str, Any]] = None):
        self.message = message
        self.status_code = status_code
        self.code = code
        self.details = details or {}
        super().__init__(message)


class NotFoundError(APIError):
    def __init__(self, message: str, resource_type: str, resource_id: str):
        super().__init__(
            message,
            status.HTTP_404_NOT_FOUND,
            "NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class ValidationFailedError(APIError):
    """A request that is well-formed but names unknown roles or modules."""

    def __init__(self, message: str, field: str, errors: Optional[list] = None):
        details: dict[str, Any] = {"field": field}
        if errors:
            details["errors"] = errors
        super().__init__(message, status.HTTP_400_BAD_REQUEST, "VALIDATION_ERROR", details)


class StoreUnavailableError(APIError):
    """The navigation store refused or failed a write."""

    def __init__(self, message: str, store: str, operation: Optional[str] = None):
        details = {"store": store}
        if operation:
            details["operation"] = operation
        super().__init__(message, status.HTTP_502_BAD_GATEWAY, "STORE_UNAVAILABLE", details)


def build_error_response(
    message: str,
    status_code: int,
    code: str,
    details: Optional[dict[str, Any]] = None,
) -> dict[str, Any]:
    error: dict[str, Any] = {
        "message": message,
        "code": code,
        "status_code": status_code,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
    if details:
        error["details"] = details
    request_id = get_request_id()
    if request_id:
        error["request_id"] = request_id
    return {"error": error}


def _error_response(status_code: int, message: str, code: str, details: Optional[dict[str, Any]] = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=build_error_response(message, status_code, code, details))


async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    logger.warning(f"[API ERROR] {exc.code} on {request.url.path}: {exc.message}", extra={"details": exc.details})
    return _error_response(exc.status_code, exc.message, exc.code, exc.details)


async def navigation_store_error_handler(request: Request, exc: NavigationStoreError) -> JSONResponse:
    """Store failures that reach a route (resets and deletes) become 502s."""
    logger.error(f"[API ERROR] Store failure on {request.method} {request.url.path}: {exc}")
    details = {"operation": exc.operation} if exc.operation else None
    return _error_response(status.HTTP_502_BAD_GATEWAY, "Navigation store unavailable", "STORE_UNAVAILABLE", details)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {"location": " -> ".join(str(x) for x in error["loc"]), "message": error["msg"], "type": error["type"]}
        for error in exc.errors()
    ]
    logger.warning(f"[VALIDATION ERROR] {len(errors)} errors on {request.url.path}")
    return _error_response(
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        "Request validation failed",
        "VALIDATION_ERROR",
        {"errors": errors},
    )


def setup_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(NavigationStoreError, navigation_store_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
