"""
Structured Logging
==================
structlog setup and request logging for services using the gate.

Usage:
    from sso_gate.logging import setup_logging, RequestLoggingMiddleware

    setup_logging(service_name="orders-api")
    app.add_middleware(RequestLoggingMiddleware)
"""

import logging
import sys
import time
import uuid
from typing import Optional

import structlog

REQUEST_ID_HEADER = "X-Request-ID"


def setup_logging(
    service_name: str,
    level: str = "INFO",
    json_output: bool = True,
) -> None:
    """
    Configure structlog on top of stdlib logging.

    Args:
        service_name: Name of the service, bound to every event
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_output: Render JSON (production) instead of console output
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    if json_output:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()
    handler.setFormatter(structlog.stdlib.ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
        ],
    ))

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    structlog.contextvars.bind_contextvars(service=service_name)
    structlog.get_logger(__name__).info("logging_configured", service=service_name, level=level)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger with the given name."""
    return structlog.get_logger(name)


class RequestLoggingMiddleware:
    """
    ASGI middleware logging each request and its response.

    Assigns a request id (reusing an inbound X-Request-ID when present),
    binds it to the structlog context and echoes it on the response.
    """

    def __init__(self, app, header_name: str = REQUEST_ID_HEADER):
        self.app = app
        self.header_name = header_name
        self.logger = structlog.get_logger("sso_gate.http")

    def _inbound_request_id(self, scope) -> Optional[str]:
        wanted = self.header_name.lower().encode("latin-1")
        for key, value in scope.get("headers", []):
            if key.lower() == wanted:
                return value.decode("latin-1")
        return None

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request_id = self._inbound_request_id(scope) or uuid.uuid4().hex[:16]
        method = scope.get("method", "")
        path = scope.get("path", "")

        structlog.contextvars.bind_contextvars(request_id=request_id)
        self.logger.info(
            "http_request",
            method=method,
            path=path,
            query=scope.get("query_string", b"").decode("latin-1"),
        )

        start_time = time.perf_counter()
        status_code = 500

        async def send_wrapper(message):
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message.get("status", 500)
                headers = list(message.get("headers", []))
                headers.append((self.header_name.lower().encode("latin-1"), request_id.encode("latin-1")))
                message = {**message, "headers": headers}
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        except Exception:
            self.logger.exception("http_request_failed", method=method, path=path)
            raise
        finally:
            duration_ms = int((time.perf_counter() - start_time) * 1000)
            if status_code < 400:
                log = self.logger.info
            elif status_code < 500:
                log = self.logger.warning
            else:
                log = self.logger.error
            log(
                "http_response",
                method=method,
                path=path,
                status_code=status_code,
                duration_ms=duration_ms,
            )
            structlog.contextvars.unbind_contextvars("request_id")
