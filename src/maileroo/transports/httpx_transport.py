"""httpx-based asyncio transport."""

import asyncio
import logging
from typing import Any, Dict, Mapping, Optional

import httpx

from ..exceptions import RequestTimeoutError, TransportError
from .base import AsyncBaseTransport, RawResponse

logger = logging.getLogger(__name__)


class HttpxTransport(AsyncBaseTransport):
    """Sends requests through an httpx.AsyncClient.

    The timeout bounds the whole exchange, not each phase. Task cancellation
    propagates unchanged as asyncio.CancelledError.
    """

    def __init__(self, client: Optional[httpx.AsyncClient] = None):
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient()

    async def request(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        json: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
        timeout: Optional[float] = None,
    ) -> RawResponse:
        try:
            response = await asyncio.wait_for(
                self.client.request(
                    method,
                    url,
                    headers=dict(headers),
                    json=json,
                    params=params,
                    timeout=timeout,
                ),
                timeout,
            )
        except (httpx.TimeoutException, asyncio.TimeoutError) as e:
            raise RequestTimeoutError(f"{method} {url} timed out after {timeout}s") from e
        except httpx.HTTPError as e:
            raise TransportError(f"{method} {url} failed: {e}") from e

        logger.debug(f"{method} {url} -> {response.status_code}")
        return RawResponse(status_code=response.status_code, body=response.text)

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()
