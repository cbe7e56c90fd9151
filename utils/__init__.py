# Utils - Shared utilities

from utils.logging import (
    bind_request_id,
    get_logger,
    get_request_id,
    request_logging_middleware,
    setup_logging,
    unbind_request_id,
)

__all__ = [
    "setup_logging",
    "get_logger",
    "get_request_id",
    "bind_request_id",
    "unbind_request_id",
    "request_logging_middleware",
]
