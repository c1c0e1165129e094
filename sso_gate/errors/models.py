"""
Error Taxonomy
==============
Structured error values shared by the session gate, the identity client
and application handlers.

Every error carries a kind tag; code, name and default HTTP status are
derived from the tag rather than stored per instance.
"""

import traceback
from enum import Enum
from typing import Any, Dict, Optional


# Code used when a handler fails with a bare message instead of an error value
GENERIC_ERROR_CODE = "E_ERROR"


class ErrorKind(str, Enum):
    """The five canonical error kinds."""
    VALIDATION = "E_VALIDATION"
    AUTH = "E_AUTH"
    SERVER = "E_SERVER"
    REQUEST = "E_REQUEST"
    NOT_FOUND = "E_NOTFOUND"

    @property
    def code(self) -> str:
        return self.value

    @property
    def default_status(self) -> Optional[int]:
        return _DEFAULT_STATUS[self]

    @property
    def error_name(self) -> str:
        return _ERROR_NAMES[self]


_DEFAULT_STATUS: Dict[ErrorKind, Optional[int]] = {
    ErrorKind.VALIDATION: None,
    ErrorKind.AUTH: 403,
    ErrorKind.SERVER: 500,
    ErrorKind.REQUEST: 400,
    ErrorKind.NOT_FOUND: 404,
}

_ERROR_NAMES: Dict[ErrorKind, str] = {
    ErrorKind.VALIDATION: "ValidationError",
    ErrorKind.AUTH: "AuthError",
    ErrorKind.SERVER: "ServerError",
    ErrorKind.REQUEST: "RequestError",
    ErrorKind.NOT_FOUND: "NotFoundError",
}


class ApiError(Exception):
    """
    A tagged, renderable error.

    Args:
        kind: Which of the canonical kinds this is
        message: Human-readable message, sent to the client
        status: HTTP status override (defaults to the kind's status)
        original_error: Lower-level failure this error wraps, if any
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        status: Optional[int] = None,
        original_error: Any = None,
    ):
        super().__init__(message)
        self.kind = ErrorKind(kind)
        self.message = message
        self.status = status if status is not None else self.kind.default_status
        self.original_error = original_error
        # Drop this frame so the trace ends at the caller
        self.trace = "".join(traceback.format_stack()[:-1])

    @property
    def name(self) -> str:
        return self.kind.error_name

    @property
    def code(self) -> str:
        return self.kind.code

    def to_dict(self) -> Dict[str, Any]:
        data = {"code": self.code, "status": self.status, "message": self.message}
        return {key: value for key, value in data.items() if value is not None}

    def __repr__(self) -> str:
        return f"{self.name}(message={self.message!r}, status={self.status!r})"


class ApiErrors:
    """Factory methods for the canonical error kinds."""

    @staticmethod
    def validation(message: str, status: Optional[int] = None) -> ApiError:
        """Handler-level input validation failed."""
        return ApiError(ErrorKind.VALIDATION, message, status=status)

    @staticmethod
    def auth(message: str) -> ApiError:
        """No valid session."""
        return ApiError(ErrorKind.AUTH, message)

    @staticmethod
    def server(message: str, original_error: Any = None) -> ApiError:
        """Unexpected internal failure."""
        return ApiError(ErrorKind.SERVER, message, original_error=original_error)

    @staticmethod
    def request(message: str) -> ApiError:
        """Malformed client request."""
        return ApiError(ErrorKind.REQUEST, message)

    @staticmethod
    def not_found(message: str) -> ApiError:
        """Missing resource."""
        return ApiError(ErrorKind.NOT_FOUND, message)
