"""Shared test fixtures."""

import pytest
from pathlib import Path
import tempfile

from maileroo.client import MailerooClient
from maileroo.config import ClientSettings
from maileroo.models import EmailAddress
from maileroo.transports.mock import MockTransport


@pytest.fixture
def settings():
    """Settings that don't depend on the environment."""
    return ClientSettings(api_key=None, base_url="https://api.example.test/v2/", timeout=30)


@pytest.fixture
def sender():
    return EmailAddress("sender@example.com", "Sender")


@pytest.fixture
def recipient():
    return EmailAddress("alice@example.com")


@pytest.fixture
def transport():
    return MockTransport()


@pytest.fixture
def client(transport, settings):
    """Client wired to a mock transport with deterministic reference ids."""
    counter = iter(range(1, 10_000))
    return MailerooClient(
        api_key="test-key",
        transport=transport,
        settings=settings,
        reference_id_factory=lambda: f"{next(counter):024x}",
    )


@pytest.fixture
def temp_dir():
    """Create a temporary directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def png_file(temp_dir):
    path = temp_dir / "logo.PNG"
    path.write_bytes(b"\x89PNG\r\n\x1a\nfake")
    return path
