"""
Error Taxonomy Package

Structured error values rendered by the response envelope.
"""

from .models import (
    GENERIC_ERROR_CODE,
    ErrorKind,
    ApiError,
    ApiErrors,
)

__all__ = [
    "GENERIC_ERROR_CODE",
    "ErrorKind",
    "ApiError",
    "ApiErrors",
]
