"""
Environment Validation
======================
Checks at startup that the variables a deployment needs are present and
of the declared type.

Usage:
    from sso_gate.environment import EnvironmentValidator

    REQUIRED = {
        "production": {"SSO_URL": "string", "PORT": "number"},
        "development": {"SSO_URL": "string"},
    }

    EnvironmentValidator(REQUIRED).validate()   # exits on failure
"""

import os
import re
from typing import Callable, Dict, Mapping, Optional

import structlog

logger = structlog.get_logger(__name__)

# Same acceptance rule as a lenient integer parse: a leading integer is enough
_NUMBER_PATTERN = re.compile(r"\s*[+-]?\d")

SUPPORTED_TYPES = ("string", "number")


class EnvironmentValidator:
    """
    Validate required environment variables for the active environment.

    Args:
        required: Environment name -> {variable name: "string" | "number"}
        environment: Active environment name (defaults to APP_ENV, then "development")
        environ: Variables to check (defaults to os.environ)
    """

    def __init__(
        self,
        required: Mapping[str, Mapping[str, str]],
        environment: Optional[str] = None,
        environ: Optional[Mapping[str, str]] = None,
    ):
        self.required = required
        self.environment = environment or os.environ.get("APP_ENV", "development")
        self.environ = os.environ if environ is None else environ

    def problems(self) -> Dict[str, str]:
        """Return {variable: reason} for every variable that fails its check."""
        found = {}
        expected = self.required.get(self.environment)
        if expected is None:
            logger.warning("env_validation_unknown_environment", environment=self.environment)
            return found

        for key, expected_type in expected.items():
            if key not in self.environ:
                found[key] = "missing"
            elif expected_type == "number":
                if not _NUMBER_PATTERN.match(self.environ[key]):
                    found[key] = "incorrect type: string, should be number"
            elif expected_type != "string":
                found[key] = f"incorrect type: string, should be {expected_type}"
        return found

    def validate(self, callback: Optional[Callable[[bool], None]] = None) -> bool:
        """
        Run the checks and report the outcome.

        With a callback, the callback receives the result. Without one, a
        failed validation raises SystemExit(1).
        """
        logger.info("env_validation_started", environment=self.environment)

        found = self.problems()
        for key, reason in found.items():
            logger.error("env_validation_failed_key", key=key, reason=reason)

        valid = not found
        if valid:
            logger.info("env_validation_passed", environment=self.environment)
        else:
            logger.error("env_validation_failed", environment=self.environment, count=len(found))

        if callback is not None:
            callback(valid)
        elif not valid:
            raise SystemExit(1)
        return valid
