"""Mock transports for testing and dry runs."""

import json as jsonlib
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Union

from .base import AsyncBaseTransport, BaseTransport, RawResponse


@dataclass
class RecordedRequest:
    """A request captured by a mock transport."""

    method: str
    url: str
    headers: Dict[str, str]
    json: Optional[Dict[str, Any]]
    params: Optional[Dict[str, Any]]
    timeout: Optional[float]


def ok(data: Any = None, message: str = "OK", status_code: int = 200) -> RawResponse:
    """Build a successful envelope response."""
    body: Dict[str, Any] = {"success": True, "message": message}
    if data is not None:
        body["data"] = data
    return RawResponse(status_code=status_code, body=jsonlib.dumps(body))


def error(message: str, status_code: int = 400) -> RawResponse:
    """Build a failed envelope response."""
    return RawResponse(
        status_code=status_code,
        body=jsonlib.dumps({"success": False, "message": message}),
    )


class _Recorder:
    def __init__(self, responses: Optional[List[Union[RawResponse, Exception]]] = None):
        self.responses = list(responses or [])
        self.requests: List[RecordedRequest] = []

    def queue(self, response: Union[RawResponse, Exception]) -> None:
        """Queue a response, or an exception to raise, for the next request."""
        self.responses.append(response)

    @property
    def last_request(self) -> RecordedRequest:
        return self.requests[-1]

    def _next(self, method, url, headers, json, params, timeout) -> RawResponse:
        self.requests.append(
            RecordedRequest(method, url, dict(headers), json, params, timeout)
        )
        if not self.responses:
            return ok()
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


class MockTransport(_Recorder, BaseTransport):
    """Transport that doesn't send anything and replays queued responses."""

    def request(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        json: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
        timeout: Optional[float] = None,
    ) -> RawResponse:
        return self._next(method, url, headers, json, params, timeout)


class AsyncMockTransport(_Recorder, AsyncBaseTransport):
    """Asyncio twin of MockTransport."""

    async def request(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        json: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
        timeout: Optional[float] = None,
    ) -> RawResponse:
        return self._next(method, url, headers, json, params, timeout)
