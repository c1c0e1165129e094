"""
Structured logging for services using the gate.
"""

from .structured import (
    REQUEST_ID_HEADER,
    setup_logging,
    get_logger,
    RequestLoggingMiddleware,
)

__all__ = [
    "REQUEST_ID_HEADER",
    "setup_logging",
    "get_logger",
    "RequestLoggingMiddleware",
]
