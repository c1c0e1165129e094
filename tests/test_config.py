"""
Tests for configuration, environment validation and logging setup.
"""

import logging

import pytest
import structlog

from sso_gate.config import DEFAULT_PAGE_LIMIT, GateConfig
from sso_gate.environment import EnvironmentValidator
from sso_gate.logging import setup_logging

REQUIRED = {
    "production": {"SSO_URL": "string", "PORT": "number"},
    "development": {"SSO_URL": "string"},
}


class TestGateConfig:
    """Should build configuration from defaults and the environment."""

    def test_defaults(self):
        """Should use the documented defaults."""
        config = GateConfig()

        assert config.sso_url == ""
        assert config.default_limit == DEFAULT_PAGE_LIMIT == 250
        assert config.sso_timeout == 10.0
        assert config.public_paths == set()

    def test_from_env(self, monkeypatch):
        """Should read every setting from the environment."""
        monkeypatch.setenv("SSO_URL", "https://sso.example.test")
        monkeypatch.setenv("SSO_TIMEOUT", "2.5")
        monkeypatch.setenv("PATH_PREFIX", "/api")
        monkeypatch.setenv("PUBLIC_PATHS", "/health, /ready")
        monkeypatch.setenv("LOG_JSON", "false")

        config = GateConfig.from_env()

        assert config.sso_url == "https://sso.example.test"
        assert config.sso_timeout == 2.5
        assert config.path_prefix == "/api"
        assert config.public_paths == {"/health", "/ready"}
        assert config.json_logs is False

    def test_from_env_overrides(self, monkeypatch):
        """Should let keyword overrides win over the environment."""
        monkeypatch.delenv("PATH_PREFIX", raising=False)

        config = GateConfig.from_env(sso_url="http://localhost:9000")

        assert config.sso_url == "http://localhost:9000"
        assert config.path_prefix is None


class TestEnvironmentValidator:
    """Should check required variables for the deployment environment."""

    def test_valid_environment(self):
        """Should pass when every required variable is valid."""
        validator = EnvironmentValidator(
            REQUIRED,
            environment="production",
            environ={"SSO_URL": "https://sso", "PORT": "8080"},
        )

        assert validator.validate() is True

    def test_missing_key_exits(self):
        """Should exit with status 1 when a variable is missing."""
        validator = EnvironmentValidator(REQUIRED, environment="production", environ={"PORT": "8080"})

        with pytest.raises(SystemExit) as exc_info:
            validator.validate()

        assert exc_info.value.code == 1

    def test_callback_receives_result(self):
        """Should hand the result to the callback instead of exiting."""
        results = []
        validator = EnvironmentValidator(REQUIRED, environment="production", environ={"SSO_URL": "x"})

        assert validator.validate(callback=results.append) is False
        assert results == [False]

    @pytest.mark.parametrize("port, valid", [
        ("8080", True),
        ("  12abc", True),
        ("-1", True),
        ("abc", False),
        ("", False),
    ])
    def test_number_type(self, port, valid):
        """Should accept numbers by their leading integer."""
        validator = EnvironmentValidator(
            REQUIRED,
            environment="production",
            environ={"SSO_URL": "x", "PORT": port},
        )

        assert validator.validate(callback=lambda ok: None) is valid

    def test_unsupported_type_fails(self):
        """Should fail types other than string and number."""
        validator = EnvironmentValidator(
            {"production": {"DEBUG": "boolean"}},
            environment="production",
            environ={"DEBUG": "true"},
        )

        assert validator.problems() == {"DEBUG": "incorrect type: string, should be boolean"}

    def test_unknown_environment_requires_nothing(self):
        """Should require nothing for an unknown environment."""
        validator = EnvironmentValidator(REQUIRED, environment="staging", environ={})

        assert validator.validate() is True

    def test_environment_from_app_env(self, monkeypatch):
        """Should read the environment name from APP_ENV."""
        monkeypatch.setenv("APP_ENV", "production")

        assert EnvironmentValidator(REQUIRED, environ={}).environment == "production"


class TestSetupLogging:
    """Should configure structlog over the root logger."""

    @pytest.fixture(autouse=True)
    def restore_logging(self):
        root_logger = logging.getLogger()
        handlers = list(root_logger.handlers)
        level = root_logger.level
        yield
        root_logger.handlers[:] = handlers
        root_logger.setLevel(level)
        structlog.reset_defaults()
        structlog.contextvars.clear_contextvars()

    def test_configures_root_logger(self):
        """Should install one ProcessorFormatter handler at the given level."""
        setup_logging("orders-api", level="debug", json_output=True)

        root_logger = logging.getLogger()
        assert root_logger.level == logging.DEBUG
        assert len(root_logger.handlers) == 1
        assert isinstance(root_logger.handlers[0].formatter, structlog.stdlib.ProcessorFormatter)

    def test_binds_service_name(self):
        """Should bind the service name to the log context."""
        setup_logging("orders-api", json_output=False)

        assert structlog.contextvars.get_contextvars()["service"] == "orders-api"
