"""Configuration management for the Maileroo client."""

from pathlib import Path
from typing import Optional, Union

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from . import __version__

DEFAULT_BASE_URL = "https://smtp.maileroo.com/api/v2/"
DEFAULT_TIMEOUT = 30.0


class ClientSettings(BaseSettings):
    """Client settings, read from MAILEROO_* environment variables."""

    api_key: Optional[str] = Field(None, description="Maileroo sending key")
    base_url: str = Field(DEFAULT_BASE_URL, description="API base URL")
    timeout: float = Field(DEFAULT_TIMEOUT, description="Default per-request timeout in seconds")
    user_agent: str = Field(
        f"maileroo-python/{__version__}", description="User-Agent sent with every request"
    )

    model_config = SettingsConfigDict(env_prefix="MAILEROO_", case_sensitive=False)

    @field_validator("timeout")
    @classmethod
    def _timeout_positive(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("timeout must be positive")
        return value


def load_settings(env_file: Optional[Union[str, Path]] = None, **overrides) -> ClientSettings:
    """Load settings from the environment, optionally reading a .env file first.

    Args:
        env_file: Path to a .env file; the default lookup is used when omitted
        **overrides: Explicit values taking precedence over the environment

    Returns:
        ClientSettings instance
    """
    if env_file and Path(env_file).exists():
        load_dotenv(env_file)
    else:
        load_dotenv()
    return ClientSettings(**overrides)
