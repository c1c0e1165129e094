from .client import (
    IdentityClient,
    ACCESS_TOKEN_INVALID,
    INVALID_SSO_RESPONSE,
)

__all__ = [
    "IdentityClient",
    "ACCESS_TOKEN_INVALID",
    "INVALID_SSO_RESPONSE",
]
