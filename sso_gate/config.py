"""
Gate Configuration
==================
Read-only process configuration, passed explicitly to the components
that need it.
"""

import os
from dataclasses import dataclass, field
from typing import Optional, Set

DEFAULT_PAGE_LIMIT = 250
DEFAULT_SSO_TIMEOUT = 10.0


def _env_flag(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class GateConfig:
    """Configuration for the session gate and response envelope."""
    sso_url: str = ""
    sso_timeout: float = DEFAULT_SSO_TIMEOUT
    path_prefix: Optional[str] = None
    default_limit: int = DEFAULT_PAGE_LIMIT

    # Paths that skip the session gate (health checks, etc.)
    public_paths: Set[str] = field(default_factory=set)

    service_name: str = "sso-gate"
    log_level: str = "INFO"
    json_logs: bool = True

    @classmethod
    def from_env(cls, **overrides) -> "GateConfig":
        """Build a config from environment variables, applying overrides last."""
        public_paths = {
            path.strip()
            for path in os.environ.get("PUBLIC_PATHS", "").split(",")
            if path.strip()
        }
        values = {
            "sso_url": os.environ.get("SSO_URL", ""),
            "sso_timeout": float(os.environ.get("SSO_TIMEOUT", DEFAULT_SSO_TIMEOUT)),
            "path_prefix": os.environ.get("PATH_PREFIX"),
            "public_paths": public_paths,
            "service_name": os.environ.get("SERVICE_NAME", "sso-gate"),
            "log_level": os.environ.get("LOG_LEVEL", "INFO"),
            "json_logs": _env_flag("LOG_JSON", True),
        }
        values.update(overrides)
        return cls(**values)
