"""Custom exceptions for the Maileroo client."""

from typing import Optional


class MailerooError(Exception):
    """Base exception for all Maileroo client errors."""

    pass


class ValidationError(MailerooError, ValueError):
    """Raised when caller-supplied data is rejected before any request is made."""

    pass


class ResponseError(MailerooError):
    """Raised when the API response is malformed or lacks an expected field."""

    pass


class ApiError(MailerooError):
    """Raised when the API answers with ``success: false``."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(f"The API returned an error: {message}")
        self.message = message
        self.status_code = status_code


class TransportError(MailerooError):
    """Raised when the HTTP exchange itself fails."""

    pass


class RequestTimeoutError(TransportError):
    """Raised when a request does not complete within its timeout."""

    pass
