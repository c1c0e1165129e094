"""
Response Envelope Package

Success, pagination and error rendering plus framework error handlers.
"""

from .pagination import (
    PageQuery,
    parse_page_query,
    previous_skip,
    build_page_envelope,
)
from .responses import (
    request_url,
    build_success_body,
    success_response,
    render_error,
    error_response,
)
from .handlers import (
    http_exception_to_error,
    register_error_handlers,
)

__all__ = [
    # Pagination
    "PageQuery",
    "parse_page_query",
    "previous_skip",
    "build_page_envelope",
    # Rendering
    "request_url",
    "build_success_body",
    "success_response",
    "render_error",
    "error_response",
    # Handlers
    "http_exception_to_error",
    "register_error_handlers",
]
