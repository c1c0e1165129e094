import httpx
import structlog
from typing import Any, Dict, Optional

from sso_gate.config import DEFAULT_SSO_TIMEOUT
from sso_gate.errors import ApiErrors

logger = structlog.get_logger(__name__)

ACCESS_TOKEN_INVALID = "Access token invalid"
INVALID_SSO_RESPONSE = "Invalid response from SSO"


class IdentityClient:
    """
    Async client for the identity (SSO) service.

    Resolves a forwarded Authorization header into the principal returned by
    ``GET <base_url>/api/v1/me``. Every failure becomes an auth error; there
    are no retries.
    """

    ME_PATH = "/api/v1/me"

    def __init__(
        self,
        base_url: str,
        timeout: float = DEFAULT_SSO_TIMEOUT,
        client: Optional[httpx.AsyncClient] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = client
        self._transport = transport

    @property
    def me_url(self) -> str:
        return f"{self.base_url}{self.ME_PATH}"

    def _headers(self, authorization: str) -> Dict[str, str]:
        return {
            "Accept": "application/json",
            "Content-Type": "application/json",
            "Authorization": authorization,
        }

    async def _get_me(self, authorization: str) -> httpx.Response:
        if self._client is not None:
            return await self._client.get(
                self.me_url, headers=self._headers(authorization), timeout=self.timeout
            )
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            return await client.get(self.me_url, headers=self._headers(authorization))

    async def fetch_principal(self, authorization: str) -> Dict[str, Any]:
        """
        Verify a bearer token with the identity service.

        Args:
            authorization: The inbound Authorization header, forwarded verbatim

        Returns:
            The decoded principal object

        Raises:
            ApiError: E_AUTH on transport errors, non-200 statuses and
                malformed bodies
        """
        try:
            response = await self._get_me(authorization)
        except httpx.HTTPError as e:
            logger.warning("identity_request_failed", url=self.me_url, error=str(e))
            raise ApiErrors.auth(ACCESS_TOKEN_INVALID) from e

        if response.status_code != 200:
            logger.warning("identity_invalid_status", url=self.me_url, status_code=response.status_code)
            raise ApiErrors.auth(ACCESS_TOKEN_INVALID)

        try:
            body = response.json()
        except ValueError:
            body = None

        if not isinstance(body, dict):
            logger.warning("identity_invalid_response", url=self.me_url)
            raise ApiErrors.auth(INVALID_SSO_RESPONSE)

        return body

    async def aclose(self) -> None:
        """Close an injected HTTP client."""
        if self._client is not None:
            await self._client.aclose()
