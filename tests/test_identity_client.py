"""
Tests for the identity service client.
"""

import httpx
import pytest

from sso_gate.errors import ApiError, ErrorKind
from sso_gate.http import ACCESS_TOKEN_INVALID, INVALID_SSO_RESPONSE, IdentityClient

SSO_URL = "https://sso.example.test/"


def make_client(identity_service) -> IdentityClient:
    return IdentityClient(SSO_URL, transport=identity_service.transport)


class TestFetchPrincipal:
    """Should verify tokens against the identity service."""

    @pytest.mark.asyncio
    async def test_returns_principal_on_200(self, identity_service):
        """Should return the principal from a 200 response."""
        principal = await make_client(identity_service).fetch_principal("Bearer abc")

        assert principal == {"id": 7}

    @pytest.mark.asyncio
    async def test_request_shape(self, identity_service):
        """Should send GET /api/v1/me with the forwarded Authorization header."""
        await make_client(identity_service).fetch_principal("Bearer abc")

        assert len(identity_service.requests) == 1
        request = identity_service.requests[0]
        assert request.method == "GET"
        assert str(request.url) == "https://sso.example.test/api/v1/me"
        assert request.headers["Authorization"] == "Bearer abc"
        assert request.headers["Accept"] == "application/json"
        assert request.headers["Content-Type"] == "application/json"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status_code", [201, 204, 301, 401, 403, 404, 500, 503])
    async def test_any_non_200_status_is_rejected(self, identity_service, status_code):
        """Should reject every status other than 200."""
        identity_service.status_code = status_code

        with pytest.raises(ApiError) as exc_info:
            await make_client(identity_service).fetch_principal("Bearer abc")

        assert exc_info.value.kind is ErrorKind.AUTH
        assert exc_info.value.message == ACCESS_TOKEN_INVALID
        assert exc_info.value.status == 403

    @pytest.mark.asyncio
    async def test_transport_error_is_rejected(self, identity_service):
        """Should reject when the identity service is unreachable."""
        identity_service.error = httpx.ConnectError("connection refused")

        with pytest.raises(ApiError) as exc_info:
            await make_client(identity_service).fetch_principal("Bearer abc")

        assert exc_info.value.message == ACCESS_TOKEN_INVALID

    @pytest.mark.asyncio
    async def test_timeout_is_rejected(self, identity_service):
        """Should reject when the identity service times out."""
        identity_service.error = httpx.ReadTimeout("timed out")

        with pytest.raises(ApiError) as exc_info:
            await make_client(identity_service).fetch_principal("Bearer abc")

        assert exc_info.value.message == ACCESS_TOKEN_INVALID

    @pytest.mark.asyncio
    @pytest.mark.parametrize("content", [b"null", b"[1, 2]", b"\"user\"", b"42", b"not json", b""])
    async def test_non_object_body_is_rejected(self, identity_service, content):
        """Should reject a body that is not a JSON object."""
        identity_service.content = content

        with pytest.raises(ApiError) as exc_info:
            await make_client(identity_service).fetch_principal("Bearer abc")

        assert exc_info.value.code == "E_AUTH"
        assert exc_info.value.message == INVALID_SSO_RESPONSE

    @pytest.mark.asyncio
    async def test_uses_injected_client(self, identity_service):
        """Should use and close an injected AsyncClient."""
        http_client = httpx.AsyncClient(transport=identity_service.transport)
        client = IdentityClient(SSO_URL, client=http_client)
        try:
            principal = await client.fetch_principal("Bearer abc")
        finally:
            await client.aclose()

        assert principal == {"id": 7}
        assert http_client.is_closed
