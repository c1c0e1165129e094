"""
Session Guard Middleware
========================
Runs the session gate in front of every route. Requests without a valid
SSO session get the rendered auth error and never reach a handler.

Usage:
    from sso_gate.middleware import SessionGuardMiddleware

    app.add_middleware(
        SessionGuardMiddleware,
        gate=SessionGate(IdentityClient(config.sso_url, timeout=config.sso_timeout)),
        public_paths={"/health"},
    )
"""

from typing import Iterable, Optional

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from sso_gate.auth import SessionGate, attach_principal
from sso_gate.envelope import error_response
from sso_gate.errors import ApiError

logger = structlog.get_logger(__name__)


class SessionGuardMiddleware(BaseHTTPMiddleware):
    """
    Middleware that requires an SSO session on all non-public paths.

    On success the principal is stored on ``request.state.user``.
    """

    def __init__(
        self,
        app,
        gate: SessionGate,
        public_paths: Optional[Iterable[str]] = None,
        allow_preflight: bool = True,
    ):
        super().__init__(app)
        self.gate = gate
        self.public_paths = {p.rstrip("/") or "/" for p in (public_paths or ())}
        self.allow_preflight = allow_preflight

    def _is_public_path(self, path: str) -> bool:
        """Exact match or a sub-path of a public path."""
        path = path.rstrip("/") or "/"
        for public in self.public_paths:
            if path == public:
                return True
            if public != "/" and path.startswith(public + "/"):
                return True
        return False

    async def dispatch(self, request: Request, call_next):
        path = request.url.path

        if self._is_public_path(path):
            return await call_next(request)

        # Allow OPTIONS for CORS
        if self.allow_preflight and request.method == "OPTIONS":
            return await call_next(request)

        try:
            principal = await self.gate.authenticate(request.headers)
        except ApiError as e:
            logger.warning(
                "session_guard_blocked",
                path=path,
                method=request.method,
                reason=e.message,
            )
            return error_response(e)

        attach_principal(request, principal)
        logger.debug("session_guard_passed", path=path)
        return await call_next(request)
