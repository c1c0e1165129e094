"""
SSO Gate Middleware Package
"""

from .session_guard import SessionGuardMiddleware

__all__ = [
    "SessionGuardMiddleware",
]
