"""
Session Gate
============
Decides whether a request carries a valid SSO session.

Usage (per route, FastAPI):
    from sso_gate.auth import SessionGate, RequireSession
    from sso_gate.http import IdentityClient

    gate = SessionGate(IdentityClient(settings.SSO_URL))
    require_session = RequireSession(gate)

    @app.get("/v1/orders")
    async def list_orders(user: dict = Depends(require_session)):
        ...

For gating every route at once, see sso_gate.middleware.SessionGuardMiddleware.
"""

from typing import Any, Dict, Mapping, Optional

import structlog
from starlette.requests import Request

from sso_gate.errors import ApiErrors
from sso_gate.http import IdentityClient

logger = structlog.get_logger(__name__)

BEARER_PREFIX = "Bearer "

NO_AUTHORIZATION_HEADER = "No authorization header present"
INVALID_AUTHORIZATION_HEADER = "Invalid authorization header present"


def get_authorization(headers: Mapping[str, str]) -> Optional[str]:
    """Case-insensitive lookup of the Authorization header."""
    for key, value in headers.items():
        if key.lower() == "authorization":
            return value
    return None


def is_bearer_header(value: str) -> bool:
    """True when ``Bearer `` occurs exactly once in the header value."""
    return BEARER_PREFIX in value and len(value.split(BEARER_PREFIX)) == 2


class SessionGate:
    """Verify bearer tokens against the identity service."""

    def __init__(self, identity_client: IdentityClient):
        self.identity_client = identity_client

    async def authenticate(self, headers: Mapping[str, str]) -> Dict[str, Any]:
        """
        Resolve the request's principal.

        Args:
            headers: The request headers

        Returns:
            The principal returned by the identity service

        Raises:
            ApiError: E_AUTH when the header is missing or malformed, or the
                identity service rejects the token
        """
        authorization = get_authorization(headers)
        if authorization is None:
            logger.warning("session_gate_rejected", reason="missing_header")
            raise ApiErrors.auth(NO_AUTHORIZATION_HEADER)

        if not is_bearer_header(authorization):
            logger.warning("session_gate_rejected", reason="invalid_header")
            raise ApiErrors.auth(INVALID_AUTHORIZATION_HEADER)

        return await self.identity_client.fetch_principal(authorization)


def attach_principal(request: Request, principal: Dict[str, Any]) -> None:
    request.state.user = principal


def get_principal(request: Request) -> Dict[str, Any]:
    """
    Dependency returning the principal attached by the gate.

    Raises:
        ApiError: E_AUTH when the request never passed the gate
    """
    principal = getattr(request.state, "user", None)
    if principal is None:
        raise ApiErrors.auth(NO_AUTHORIZATION_HEADER)
    return principal


class RequireSession:
    """
    FastAPI dependency that authenticates the request on a single route.

    Raised errors are rendered by the handlers from
    sso_gate.envelope.register_error_handlers.
    """

    def __init__(self, gate: SessionGate):
        self.gate = gate

    async def __call__(self, request: Request) -> Dict[str, Any]:
        principal = getattr(request.state, "user", None)
        if principal is None:
            principal = await self.gate.authenticate(request.headers)
            attach_principal(request, principal)
        return principal
