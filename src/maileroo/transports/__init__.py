"""HTTP transport implementations."""

from .base import AsyncBaseTransport, BaseTransport, RawResponse
from .httpx_transport import HttpxTransport
from .mock import AsyncMockTransport, MockTransport
from .requests_transport import RequestsTransport

__all__ = [
    "AsyncBaseTransport",
    "BaseTransport",
    "RawResponse",
    "HttpxTransport",
    "AsyncMockTransport",
    "MockTransport",
    "RequestsTransport",
]
