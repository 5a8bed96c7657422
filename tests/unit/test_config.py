"""Test cases for configuration management."""

import os
from unittest.mock import patch


class TestSettings:
    """Test Settings class configuration loading."""

    def test_settings_loads_defaults(self):
        """Test that settings loads with default values."""
        from walletauth.core.config import Settings

        settings = Settings()

        assert settings.app_name == "walletauth"
        assert settings.debug is False
        assert settings.metamask_route_prefix == "/metamask"
        assert settings.nonce_expire_seconds == 300

    def test_settings_environment_override(self):
        """Test that environment variables override defaults."""
        from walletauth.core.config import Settings

        with patch.dict(
            os.environ,
            {"DEBUG": "true", "AUTH_SERVICE_URL": "https://auth.example.com/"},
        ):
            settings = Settings()

        assert settings.debug is True
        assert settings.auth_service_url == "https://auth.example.com/"

    def test_metamask_base_url_construction(self):
        """Test the wallet endpoint URL is built from its parts."""
        from walletauth.core.config import Settings

        settings = Settings(
            auth_service_url="https://auth.example.com/",
            metamask_route_prefix="/wallet",
        )

        assert settings.metamask_base_url == "https://auth.example.com/wallet"

    def test_get_settings_is_cached(self):
        """Test get_settings returns one instance."""
        from walletauth.core.config import get_settings

        assert get_settings() is get_settings()


class TestLoggingConfiguration:
    """Test logging setup."""

    def test_json_formatter(self):
        """Test records render as JSON objects."""
        import json
        import logging

        from walletauth.core.logging_config import JsonFormatter

        record = logging.LogRecord(
            "walletauth.test", logging.WARNING, __file__, 1, "hello %s", ("world",), None
        )

        data = json.loads(JsonFormatter().format(record))

        assert data["message"] == "hello world"
        assert data["level"] == "WARNING"
        assert data["logger"] == "walletauth.test"

    def test_configure_logging_sets_level(self):
        """Test the root level follows settings."""
        import logging

        from walletauth.core.config import Settings
        from walletauth.core.logging_config import configure_logging

        root = logging.getLogger()
        previous = root.level
        try:
            configure_logging(Settings(log_level="debug", log_format="console"))
            assert root.level == logging.DEBUG
        finally:
            root.setLevel(previous)
