"""Client library for the Maileroo transactional email API."""

__version__ = "0.1.0"

from .exceptions import (
    MailerooError,
    ValidationError,
    ResponseError,
    ApiError,
    TransportError,
    RequestTimeoutError,
)
from .models import (
    EmailAddress,
    Attachment,
    Success,
    Failure,
    ScheduledEmail,
    ScheduledEmailPage,
)
from .payloads import BasicEmail, TemplatedEmail, BulkEmail, BulkMessage, PayloadBuilder
from .response import decode_envelope, extract_field
from .validators import generate_reference_id, validate_reference_id, validate_scalar_map
from .config import ClientSettings, load_settings
from .client import MailerooClient, AsyncMailerooClient

__all__ = [
    "MailerooError",
    "ValidationError",
    "ResponseError",
    "ApiError",
    "TransportError",
    "RequestTimeoutError",
    "EmailAddress",
    "Attachment",
    "Success",
    "Failure",
    "ScheduledEmail",
    "ScheduledEmailPage",
    "BasicEmail",
    "TemplatedEmail",
    "BulkEmail",
    "BulkMessage",
    "PayloadBuilder",
    "decode_envelope",
    "extract_field",
    "generate_reference_id",
    "validate_reference_id",
    "validate_scalar_map",
    "ClientSettings",
    "load_settings",
    "MailerooClient",
    "AsyncMailerooClient",
]
