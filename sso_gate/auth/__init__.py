"""
SSO Session Authentication

Bearer-token verification against the identity service.
"""

from .session import (
    BEARER_PREFIX,
    NO_AUTHORIZATION_HEADER,
    INVALID_AUTHORIZATION_HEADER,
    get_authorization,
    is_bearer_header,
    SessionGate,
    attach_principal,
    get_principal,
    RequireSession,
)

__all__ = [
    "BEARER_PREFIX",
    "NO_AUTHORIZATION_HEADER",
    "INVALID_AUTHORIZATION_HEADER",
    "get_authorization",
    "is_bearer_header",
    "SessionGate",
    "attach_principal",
    "get_principal",
    "RequireSession",
]
