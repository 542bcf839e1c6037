"""Tests for the asyncio client."""

import asyncio
import json

import httpx
import pytest

from maileroo.client import AsyncMailerooClient
from maileroo.exceptions import ApiError, RequestTimeoutError, TransportError, ValidationError
from maileroo.payloads import BasicEmail, BulkEmail, BulkMessage, TemplatedEmail
from maileroo.transports.base import AsyncBaseTransport
from maileroo.transports.httpx_transport import HttpxTransport
from maileroo.transports.mock import AsyncMockTransport, error, ok

REFERENCE_ID = "0123456789abcdef01234567"


class SlowTransport(AsyncBaseTransport):
    """Transport that never answers on its own."""

    async def request(self, method, url, headers, json=None, params=None, timeout=None):
        await asyncio.sleep(3600)


@pytest.fixture
def async_transport():
    return AsyncMockTransport()


@pytest.fixture
def async_client(async_transport, settings):
    return AsyncMailerooClient(api_key="test-key", transport=async_transport, settings=settings)


class TestAsyncClient:
    """Tests for AsyncMailerooClient with a mock transport."""

    def test_send_basic_email(self, async_client, async_transport, sender, recipient):
        async_transport.queue(ok({"reference_id": REFERENCE_ID}))

        result = asyncio.run(
            async_client.send_basic_email(
                BasicEmail(from_address=sender, to=recipient, subject="Hi", html="<p>Hi</p>")
            )
        )

        assert result == REFERENCE_ID
        assert async_transport.last_request.url == "https://api.example.test/v2/emails"
        assert async_transport.last_request.headers["Authorization"] == "Bearer test-key"

    def test_send_templated_email(self, async_client, async_transport, sender, recipient):
        async_transport.queue(ok({"reference_id": REFERENCE_ID}))

        result = asyncio.run(
            async_client.send_templated_email(
                TemplatedEmail(from_address=sender, to=recipient, subject="Hi", template_id=3)
            )
        )

        assert result == REFERENCE_ID
        assert async_transport.last_request.json["template_id"] == 3

    def test_send_bulk_emails(self, async_client, async_transport, sender, recipient):
        async_transport.queue(ok({"reference_ids": [REFERENCE_ID]}))

        result = asyncio.run(
            async_client.send_bulk_emails(
                BulkEmail(
                    subject="News",
                    template_id=3,
                    messages=[BulkMessage(from_address=sender, to=recipient)],
                )
            )
        )

        assert result == [REFERENCE_ID]

    def test_scheduled_operations(self, async_client, async_transport):
        async_transport.queue(ok())
        async_transport.queue(
            ok({"page": 1, "per_page": 10, "total_count": 0, "total_pages": 0, "results": []})
        )

        async def run():
            deleted = await async_client.delete_scheduled_email(REFERENCE_ID)
            page = await async_client.get_scheduled_emails()
            return deleted, page

        deleted, page = asyncio.run(run())

        assert deleted is True
        assert page.results == []
        assert async_transport.last_request.params == {"page": 1, "per_page": 10}

    def test_invalid_paging(self, async_client, async_transport):
        with pytest.raises(ValidationError):
            asyncio.run(async_client.get_scheduled_emails(page=1, per_page=101))

        assert async_transport.requests == []

    def test_api_failure(self, async_client, async_transport):
        async_transport.queue(error("Quota exceeded"))

        with pytest.raises(ApiError) as exc_info:
            asyncio.run(async_client.delete_scheduled_email(REFERENCE_ID))

        assert exc_info.value.message == "Quota exceeded"

    def test_concurrent_operations(self, async_client, async_transport):
        """Test that several operations can run at once on one client."""
        for _ in range(3):
            async_transport.queue(ok())

        async def run():
            return await asyncio.gather(
                *(async_client.delete_scheduled_email(REFERENCE_ID) for _ in range(3))
            )

        assert asyncio.run(run()) == [True, True, True]
        assert len(async_transport.requests) == 3

    def test_cancellation_propagates(self, settings):
        """Test that cancelling the task raises CancelledError, not a client error."""
        transport = SlowTransport()
        client = AsyncMailerooClient(api_key="k", transport=transport, settings=settings)

        async def run():
            task = asyncio.ensure_future(client.delete_scheduled_email(REFERENCE_ID))
            await asyncio.sleep(0)
            task.cancel()
            await task

        with pytest.raises(asyncio.CancelledError):
            asyncio.run(run())


class TestHttpxTransport:
    """Tests for the httpx transport."""

    def test_request_roundtrip(self, settings, sender, recipient):
        """Test a full send through httpx with a mocked network layer."""
        seen = {}

        def handler(request):
            seen["method"] = request.method
            seen["url"] = str(request.url)
            seen["auth"] = request.headers["Authorization"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(
                200, json={"success": True, "message": "OK", "data": {"reference_id": REFERENCE_ID}}
            )

        async def run():
            transport = HttpxTransport(httpx.AsyncClient(transport=httpx.MockTransport(handler)))
            async with AsyncMailerooClient(api_key="k", transport=transport, settings=settings) as client:
                return await client.send_basic_email(
                    BasicEmail(from_address=sender, to=recipient, subject="Hi", plain="x")
                )

        assert asyncio.run(run()) == REFERENCE_ID
        assert seen["method"] == "POST"
        assert seen["url"] == "https://api.example.test/v2/emails"
        assert seen["auth"] == "Bearer k"
        assert seen["body"]["subject"] == "Hi"

    def test_query_params(self):
        seen = {}

        def handler(request):
            seen["params"] = dict(request.url.params)
            return httpx.Response(200, text='{"success": true}')

        async def run():
            transport = HttpxTransport(httpx.AsyncClient(transport=httpx.MockTransport(handler)))
            return await transport.request(
                "GET", "https://api.example.test/v2/emails/scheduled", {}, params={"page": 1, "per_page": 5}
            )

        response = asyncio.run(run())

        assert response.status_code == 200
        assert seen["params"] == {"page": "1", "per_page": "5"}

    def test_timeout_maps_to_timeout_error(self):
        def handler(request):
            raise httpx.ReadTimeout("slow", request=request)

        async def run():
            transport = HttpxTransport(httpx.AsyncClient(transport=httpx.MockTransport(handler)))
            await transport.request("GET", "https://api.example.test", {}, timeout=1)

        with pytest.raises(RequestTimeoutError):
            asyncio.run(run())

    def test_timeout_bounds_whole_exchange(self):
        """Test that a response slower than the timeout is cut off."""
        async def handler(request):
            await asyncio.sleep(3600)

        async def run():
            transport = HttpxTransport(httpx.AsyncClient(transport=httpx.MockTransport(handler)))
            await transport.request("GET", "https://api.example.test", {}, timeout=0.05)

        with pytest.raises(RequestTimeoutError):
            asyncio.run(run())

    def test_connect_error_maps_to_transport_error(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        async def run():
            transport = HttpxTransport(httpx.AsyncClient(transport=httpx.MockTransport(handler)))
            await transport.request("GET", "https://api.example.test", {})

        with pytest.raises(TransportError) as exc_info:
            asyncio.run(run())

        assert not isinstance(exc_info.value, RequestTimeoutError)
