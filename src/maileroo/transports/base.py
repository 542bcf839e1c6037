"""Transport interfaces used by the clients."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional


@dataclass(frozen=True)
class RawResponse:
    """Status code and undecoded body of an HTTP response."""

    status_code: int
    body: str


class BaseTransport(ABC):
    """Abstract base class for synchronous HTTP transports."""

    @abstractmethod
    def request(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        json: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
        timeout: Optional[float] = None,
    ) -> RawResponse:
        """Send one HTTP request.

        Args:
            method: HTTP method
            url: Absolute URL
            headers: Request headers
            json: JSON body, if any
            params: Query string parameters, if any
            timeout: Seconds to wait before giving up

        Returns:
            RawResponse

        Raises:
            RequestTimeoutError: If the timeout elapses
            TransportError: If the exchange fails
        """
        pass

    def close(self) -> None:
        """Release any held connections."""
        pass


class AsyncBaseTransport(ABC):
    """Abstract base class for asyncio HTTP transports."""

    @abstractmethod
    async def request(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        json: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
        timeout: Optional[float] = None,
    ) -> RawResponse:
        """Send one HTTP request; see BaseTransport.request."""
        pass

    async def aclose(self) -> None:
        """Release any held connections."""
        pass
