"""
Application Wiring
==================
One call to put the session gate and the response envelope in front of an
application.

Usage:
    from fastapi import FastAPI
    from sso_gate import GateConfig, install_gate

    config = GateConfig.from_env(public_paths={"/health"})
    app = FastAPI()
    install_gate(app, config)
"""

from contextlib import asynccontextmanager
from typing import Optional

import httpx
import structlog

from sso_gate.auth import SessionGate
from sso_gate.config import GateConfig
from sso_gate.envelope import register_error_handlers
from sso_gate.http import IdentityClient
from sso_gate.logging import RequestLoggingMiddleware
from sso_gate.middleware import SessionGuardMiddleware

logger = structlog.get_logger(__name__)


def build_session_gate(
    config: GateConfig,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> SessionGate:
    """
    Create a session gate talking to the configured identity service.

    The gate owns one long-lived ``httpx.AsyncClient``; close it with
    ``gate.identity_client.aclose()`` (``install_gate`` does this on shutdown).
    """
    http_client = httpx.AsyncClient(timeout=config.sso_timeout, transport=transport)
    client = IdentityClient(config.sso_url, timeout=config.sso_timeout, client=http_client)
    return SessionGate(client)


def close_on_shutdown(app, identity_client: IdentityClient) -> None:
    """Close ``identity_client`` when ``app``'s lifespan ends, after any existing lifespan."""
    lifespan = app.router.lifespan_context

    @asynccontextmanager
    async def lifespan_context(app):
        try:
            async with lifespan(app) as state:
                yield state
        finally:
            await identity_client.aclose()
            logger.info("identity_client_closed", url=identity_client.me_url)

    app.router.lifespan_context = lifespan_context


def install_gate(
    app,
    config: GateConfig,
    gate: Optional[SessionGate] = None,
    request_logging: bool = True,
) -> SessionGate:
    """
    Register error handlers and the session guard on ``app``.

    Middleware order (outermost first): request logging, session guard.
    A gate built here has its HTTP client closed on application shutdown;
    a gate passed in stays owned by the caller.

    Returns:
        The session gate in use, for per-route RequireSession dependencies
    """
    if gate is None:
        gate = build_session_gate(config)
        close_on_shutdown(app, gate.identity_client)

    register_error_handlers(app)
    app.add_middleware(
        SessionGuardMiddleware,
        gate=gate,
        public_paths=config.public_paths,
    )
    if request_logging:
        app.add_middleware(RequestLoggingMiddleware)

    logger.info(
        "session_gate_installed",
        service=config.service_name,
        sso_url=config.sso_url,
        public_paths=sorted(config.public_paths),
    )
    return gate
