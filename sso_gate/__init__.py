"""
SSO Gate
========
Session gating and JSON response envelopes for Starlette/FastAPI services.
"""

__version__ = "0.1.0"

# Config
from sso_gate.config import GateConfig, DEFAULT_PAGE_LIMIT
from sso_gate.environment import EnvironmentValidator

# Errors
from sso_gate.errors import (
    ErrorKind,
    ApiError,
    ApiErrors,
)

# Identity service
from sso_gate.http import IdentityClient

# Session gate
from sso_gate.auth import (
    SessionGate,
    RequireSession,
    get_principal,
)
from sso_gate.middleware import SessionGuardMiddleware

# Envelope
from sso_gate.envelope import (
    PageQuery,
    build_success_body,
    success_response,
    render_error,
    error_response,
    register_error_handlers,
)

# Routes
from sso_gate.routes import prefix_routes, build_routes

# Logging
from sso_gate.logging import setup_logging, RequestLoggingMiddleware

# Wiring
from sso_gate.app import build_session_gate, install_gate

__all__ = [
    # Config
    "GateConfig",
    "DEFAULT_PAGE_LIMIT",
    "EnvironmentValidator",
    # Errors
    "ErrorKind",
    "ApiError",
    "ApiErrors",
    # Identity service
    "IdentityClient",
    # Session gate
    "SessionGate",
    "RequireSession",
    "get_principal",
    "SessionGuardMiddleware",
    # Envelope
    "PageQuery",
    "build_success_body",
    "success_response",
    "render_error",
    "error_response",
    "register_error_handlers",
    # Routes
    "prefix_routes",
    "build_routes",
    # Logging
    "setup_logging",
    "RequestLoggingMiddleware",
    # Wiring
    "build_session_gate",
    "install_gate",
]
