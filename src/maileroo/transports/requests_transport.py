"""requests-based synchronous transport."""

import logging
import time
from typing import Any, Dict, Mapping, Optional

import requests

from ..exceptions import RequestTimeoutError, TransportError
from .base import BaseTransport, RawResponse

logger = logging.getLogger(__name__)

CHUNK_SIZE = 8192


class RequestsTransport(BaseTransport):
    """Sends requests through a requests.Session. No retries are attempted.

    requests applies a timeout to each connect and read separately, so the body
    is streamed and the overall deadline is checked between chunks.
    """

    def __init__(self, session: Optional[requests.Session] = None):
        """Initialize the transport.

        Args:
            session: Session to use; a new one is created and owned when omitted
        """
        self._owns_session = session is None
        self.session = session or requests.Session()

    def request(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        json: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
        timeout: Optional[float] = None,
    ) -> RawResponse:
        deadline = time.monotonic() + timeout if timeout else None
        try:
            response = self.session.request(
                method,
                url,
                headers=dict(headers),
                json=json,
                params=params,
                timeout=timeout,
                stream=True,
            )
            try:
                chunks = []
                for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                    if deadline is not None and time.monotonic() > deadline:
                        raise RequestTimeoutError(
                            f"{method} {url} timed out after {timeout}s"
                        )
                    chunks.append(chunk)
            finally:
                response.close()
        except requests.exceptions.Timeout as e:
            raise RequestTimeoutError(f"{method} {url} timed out after {timeout}s") from e
        except requests.exceptions.RequestException as e:
            raise TransportError(f"{method} {url} failed: {e}") from e

        logger.debug(f"{method} {url} -> {response.status_code}")
        body = b"".join(chunks).decode(response.encoding or "utf-8", errors="replace")
        return RawResponse(status_code=response.status_code, body=body)

    def close(self) -> None:
        if self._owns_session:
            self.session.close()
