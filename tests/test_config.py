"""Tests for configuration loading."""

import os

import pytest
from pydantic import ValidationError as PydanticValidationError

from maileroo.config import DEFAULT_BASE_URL, ClientSettings, load_settings


class TestClientSettings:
    """Tests for ClientSettings."""

    def test_defaults(self, monkeypatch):
        for name in ("MAILEROO_API_KEY", "MAILEROO_BASE_URL", "MAILEROO_TIMEOUT"):
            monkeypatch.delenv(name, raising=False)

        settings = ClientSettings()

        assert settings.api_key is None
        assert settings.base_url == DEFAULT_BASE_URL
        assert settings.timeout == 30.0
        assert settings.user_agent.startswith("maileroo-python/")

    def test_environment_variables(self, monkeypatch):
        monkeypatch.setenv("MAILEROO_API_KEY", "env-key")
        monkeypatch.setenv("MAILEROO_TIMEOUT", "12.5")

        settings = ClientSettings()

        assert settings.api_key == "env-key"
        assert settings.timeout == 12.5

    def test_non_positive_timeout_rejected(self):
        with pytest.raises(PydanticValidationError):
            ClientSettings(timeout=0)


class TestLoadSettings:
    """Tests for load_settings."""

    def test_env_file(self, temp_dir, monkeypatch):
        """Test reading values from a .env file."""
        monkeypatch.delenv("MAILEROO_API_KEY", raising=False)
        env_file = temp_dir / ".env"
        env_file.write_text("MAILEROO_API_KEY=dotenv-key\n")

        try:
            settings = load_settings(env_file)
            assert settings.api_key == "dotenv-key"
        finally:
            os.environ.pop("MAILEROO_API_KEY", None)

    def test_overrides_win(self, monkeypatch):
        monkeypatch.setenv("MAILEROO_BASE_URL", "https://env.example.test/")

        settings = load_settings(base_url="https://override.example.test/")

        assert settings.base_url == "https://override.example.test/"
