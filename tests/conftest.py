"""
Shared fixtures: a fake identity service and a gated FastAPI app.
"""

from typing import Any, List, Optional

import httpx
import pytest
from fastapi import Depends, FastAPI, Request
from fastapi.testclient import TestClient

from sso_gate import ApiErrors, GateConfig, get_principal, install_gate, success_response
from sso_gate.app import build_session_gate

SSO_URL = "https://sso.example.test"
VALID_AUTH = {"Authorization": "Bearer good-token"}


class FakeIdentityService:
    """MockTransport handler standing in for the SSO /api/v1/me endpoint."""

    def __init__(self):
        self.status_code = 200
        self.json_body: Any = {"id": 7}
        self.content: Optional[bytes] = None
        self.error: Optional[Exception] = None
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        if self.content is not None:
            return httpx.Response(self.status_code, content=self.content)
        return httpx.Response(self.status_code, json=self.json_body)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


@pytest.fixture
def identity_service():
    return FakeIdentityService()


@pytest.fixture
def config():
    return GateConfig(sso_url=SSO_URL, public_paths={"/health"})


@pytest.fixture
def app(config, identity_service):
    app = FastAPI()
    gate = build_session_gate(config, transport=identity_service.transport)
    install_gate(app, config, gate=gate)

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    @app.get("/me")
    async def me(request: Request, user: dict = Depends(get_principal)):
        return success_response(request, user)

    @app.get("/orders")
    async def list_orders(request: Request, count: int = 0):
        return success_response(request, [{"id": i} for i in range(count)])

    @app.get("/orders/{order_id}")
    async def get_order(order_id: int):
        raise ApiErrors.not_found(f"Order {order_id} not found")

    @app.get("/boom")
    async def boom():
        raise RuntimeError("kaboom")

    return app


@pytest.fixture
def client(app):
    return TestClient(app, raise_server_exceptions=False)
