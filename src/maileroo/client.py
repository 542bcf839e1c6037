"""Maileroo API clients."""

import logging
from typing import Any, Callable, Dict, List, Optional, Tuple

from .config import ClientSettings, load_settings
from .exceptions import ValidationError
from .models import ScheduledEmailPage
from .payloads import BasicEmail, BulkEmail, PayloadBuilder, TemplatedEmail
from .response import (
    decode_envelope,
    parse_reference_id,
    parse_reference_ids,
    parse_scheduled_page,
    raise_for_failure,
)
from .transports.base import AsyncBaseTransport, BaseTransport, RawResponse
from .transports.httpx_transport import HttpxTransport
from .transports.requests_transport import RequestsTransport
from .validators import generate_reference_id, validate_reference_id

logger = logging.getLogger(__name__)

MAX_PER_PAGE = 100

# (method, endpoint, json body, query params)
Request = Tuple[str, str, Optional[Dict[str, Any]], Optional[Dict[str, Any]]]


def _validate_paging(page: Any, per_page: Any) -> Dict[str, int]:
    if not isinstance(page, int) or isinstance(page, bool) or page < 1:
        raise ValidationError("page must be a positive integer (>= 1).")
    if not isinstance(per_page, int) or isinstance(per_page, bool) or per_page < 1:
        raise ValidationError("per_page must be a positive integer (>= 1).")
    if per_page > MAX_PER_PAGE:
        raise ValidationError(f"per_page cannot be greater than {MAX_PER_PAGE}.")
    return {"page": page, "per_page": per_page}


class _ClientBase:
    """Configuration and request preparation shared by both clients.

    Holds only immutable configuration after construction.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
        base_url: Optional[str] = None,
        settings: Optional[ClientSettings] = None,
        reference_id_factory: Optional[Callable[[], str]] = None,
    ):
        settings = settings or load_settings()
        api_key = api_key if api_key is not None else settings.api_key
        if not isinstance(api_key, str) or not api_key.strip():
            raise ValidationError("API key must be a non-empty string.")

        timeout = timeout if timeout is not None else settings.timeout
        if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
            raise ValidationError("timeout must be a positive number of seconds.")

        self._api_key = api_key
        self.timeout = float(timeout)
        self.base_url = (base_url or settings.base_url).rstrip("/") + "/"
        self.builder = PayloadBuilder(reference_id_factory or generate_reference_id)
        self._headers = {
            "Authorization": f"Bearer {api_key}",
            "User-Agent": settings.user_agent,
            "Accept": "application/json",
        }

    def __repr__(self) -> str:
        return f"{type(self).__name__}(base_url={self.base_url!r}, timeout={self.timeout})"

    def generate_reference_id(self) -> str:
        """Generate a reference id to pass in a request and later cancel with."""
        return self.builder.reference_id_factory()

    def _url(self, endpoint: str) -> str:
        return self.base_url + endpoint.lstrip("/")

    def _timeout(self, timeout: Optional[float]) -> float:
        if timeout is None:
            return self.timeout
        if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
            raise ValidationError("timeout must be a positive number of seconds.")
        return float(timeout)

    def _prepare_basic(self, email: BasicEmail) -> Request:
        return "POST", "emails", self.builder.build_basic(email), None

    def _prepare_templated(self, email: TemplatedEmail) -> Request:
        return "POST", "emails/template", self.builder.build_templated(email), None

    def _prepare_bulk(self, email: BulkEmail) -> Request:
        return "POST", "emails/bulk", self.builder.build_bulk(email), None

    def _prepare_delete(self, reference_id: str) -> Request:
        reference_id = validate_reference_id(reference_id)
        return "DELETE", f"emails/scheduled/{reference_id}", None, None

    def _prepare_listing(self, page: int, per_page: int) -> Request:
        return "GET", "emails/scheduled", None, _validate_paging(page, per_page)

    def _log_request(self, request: Request) -> None:
        method, endpoint, body, _ = request
        reference = ""
        if body and "reference_id" in body:
            reference = f" (reference_id: {body['reference_id']})"
        elif body and "messages" in body:
            reference = f" ({len(body['messages'])} messages)"
        logger.debug(f"Sending {method} {endpoint}{reference}")


class MailerooClient(_ClientBase):
    """Synchronous Maileroo client."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
        base_url: Optional[str] = None,
        transport: Optional[BaseTransport] = None,
        settings: Optional[ClientSettings] = None,
        reference_id_factory: Optional[Callable[[], str]] = None,
    ):
        """Initialize the client.

        Args:
            api_key: Maileroo sending key; MAILEROO_API_KEY is used when omitted
            timeout: Default per-request timeout in seconds (30 when unset)
            base_url: API base URL
            transport: Transport to send requests through; RequestsTransport by default
            settings: Settings to read defaults from instead of the environment
            reference_id_factory: Generator for reference ids

        Raises:
            ValidationError: If the API key is missing or blank
        """
        super().__init__(api_key, timeout, base_url, settings, reference_id_factory)
        self._owns_transport = transport is None
        self.transport = transport or RequestsTransport()

    def __enter__(self) -> "MailerooClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def close(self) -> None:
        """Close the transport if this client created it."""
        if self._owns_transport:
            self.transport.close()

    def send_basic_email(self, email: BasicEmail, timeout: Optional[float] = None) -> str:
        """Send a message with an HTML and/or plain-text body.

        Returns:
            The message's reference id
        """
        return parse_reference_id(self._execute(self._prepare_basic(email), timeout))

    def send_templated_email(self, email: TemplatedEmail, timeout: Optional[float] = None) -> str:
        """Send a message rendered from a stored template.

        Returns:
            The message's reference id
        """
        return parse_reference_id(self._execute(self._prepare_templated(email), timeout))

    def send_bulk_emails(self, email: BulkEmail, timeout: Optional[float] = None) -> List[str]:
        """Send up to 500 messages in one request.

        Returns:
            Reference ids of the accepted messages
        """
        return parse_reference_ids(self._execute(self._prepare_bulk(email), timeout))

    def delete_scheduled_email(self, reference_id: str, timeout: Optional[float] = None) -> bool:
        """Cancel a scheduled message."""
        raise_for_failure(self._execute(self._prepare_delete(reference_id), timeout))
        return True

    def get_scheduled_emails(
        self, page: int = 1, per_page: int = 10, timeout: Optional[float] = None
    ) -> ScheduledEmailPage:
        """List scheduled messages, one page at a time."""
        return parse_scheduled_page(self._execute(self._prepare_listing(page, per_page), timeout))

    def _execute(self, request: Request, timeout: Optional[float]):
        method, endpoint, body, params = request
        timeout = self._timeout(timeout)
        self._log_request(request)
        raw: RawResponse = self.transport.request(
            method,
            self._url(endpoint),
            headers=self._headers,
            json=body,
            params=params,
            timeout=timeout,
        )
        return decode_envelope(raw.body, raw.status_code)


class AsyncMailerooClient(_ClientBase):
    """Asyncio Maileroo client.

    Operations may be awaited concurrently. Cancelling the awaiting task aborts
    the request and raises asyncio.CancelledError.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
        base_url: Optional[str] = None,
        transport: Optional[AsyncBaseTransport] = None,
        settings: Optional[ClientSettings] = None,
        reference_id_factory: Optional[Callable[[], str]] = None,
    ):
        super().__init__(api_key, timeout, base_url, settings, reference_id_factory)
        self._owns_transport = transport is None
        self.transport = transport or HttpxTransport()

    async def __aenter__(self) -> "AsyncMailerooClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_transport:
            await self.transport.aclose()

    async def send_basic_email(self, email: BasicEmail, timeout: Optional[float] = None) -> str:
        return parse_reference_id(await self._execute(self._prepare_basic(email), timeout))

    async def send_templated_email(
        self, email: TemplatedEmail, timeout: Optional[float] = None
    ) -> str:
        return parse_reference_id(await self._execute(self._prepare_templated(email), timeout))

    async def send_bulk_emails(
        self, email: BulkEmail, timeout: Optional[float] = None
    ) -> List[str]:
        return parse_reference_ids(await self._execute(self._prepare_bulk(email), timeout))

    async def delete_scheduled_email(
        self, reference_id: str, timeout: Optional[float] = None
    ) -> bool:
        raise_for_failure(await self._execute(self._prepare_delete(reference_id), timeout))
        return True

    async def get_scheduled_emails(
        self, page: int = 1, per_page: int = 10, timeout: Optional[float] = None
    ) -> ScheduledEmailPage:
        return parse_scheduled_page(
            await self._execute(self._prepare_listing(page, per_page), timeout)
        )

    async def _execute(self, request: Request, timeout: Optional[float]):
        method, endpoint, body, params = request
        timeout = self._timeout(timeout)
        self._log_request(request)
        raw = await self.transport.request(
            method,
            self._url(endpoint),
            headers=self._headers,
            json=body,
            params=params,
            timeout=timeout,
        )
        return decode_envelope(raw.body, raw.status_code)
