"""Typed request records and the builder that turns them into API payloads."""

import logging
from dataclasses import dataclass, fields
from datetime import datetime
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Union

from .exceptions import ValidationError
from .models import Attachment, EmailAddress
from .validators import (
    generate_reference_id,
    validate_reference_id,
    validate_scalar_map,
    validate_subject,
    validate_template_data,
    validate_template_id,
)

logger = logging.getLogger(__name__)

MAX_BULK_MESSAGES = 500

# One address serializes as an object, a sequence as an array.
Recipients = Union[EmailAddress, Sequence[EmailAddress]]


@dataclass
class BasicEmail:
    """A single message with an inline HTML and/or plain-text body."""

    from_address: EmailAddress
    to: Recipients
    subject: str
    html: Optional[str] = None
    plain: Optional[str] = None
    cc: Optional[Recipients] = None
    bcc: Optional[Recipients] = None
    reply_to: Optional[Recipients] = None
    tracking: Optional[bool] = None
    tags: Optional[Mapping[str, Any]] = None
    headers: Optional[Mapping[str, Any]] = None
    attachments: Optional[Sequence[Attachment]] = None
    scheduled_at: Optional[Union[str, datetime]] = None
    reference_id: Optional[str] = None


@dataclass
class TemplatedEmail:
    """A single message rendered server-side from a stored template."""

    from_address: EmailAddress
    to: Recipients
    subject: str
    template_id: Union[int, str]
    template_data: Optional[Mapping[str, Any]] = None
    cc: Optional[Recipients] = None
    bcc: Optional[Recipients] = None
    reply_to: Optional[Recipients] = None
    tracking: Optional[bool] = None
    tags: Optional[Mapping[str, Any]] = None
    headers: Optional[Mapping[str, Any]] = None
    attachments: Optional[Sequence[Attachment]] = None
    scheduled_at: Optional[Union[str, datetime]] = None
    reference_id: Optional[str] = None


@dataclass
class BulkMessage:
    """One recipient entry of a bulk send."""

    from_address: EmailAddress
    to: Recipients
    cc: Optional[Recipients] = None
    bcc: Optional[Recipients] = None
    reply_to: Optional[Recipients] = None
    template_data: Optional[Mapping[str, Any]] = None
    reference_id: Optional[str] = None


@dataclass
class BulkEmail:
    """A batch of messages sharing a subject and body."""

    subject: str
    messages: Sequence[Union[BulkMessage, Mapping[str, Any]]]
    html: Optional[str] = None
    plain: Optional[str] = None
    template_id: Optional[Union[int, str]] = None
    tracking: Optional[bool] = None
    tags: Optional[Mapping[str, Any]] = None
    headers: Optional[Mapping[str, Any]] = None
    attachments: Optional[Sequence[Attachment]] = None


_BULK_MESSAGE_FIELDS = {f.name for f in fields(BulkMessage)}


def serialize_recipients(value: Any, field_name: str) -> Union[Dict[str, str], List[Dict[str, str]]]:
    """Serialize a one-or-many address field.

    Args:
        value: A single EmailAddress or a list/tuple of them
        field_name: Field name used in error messages

    Returns:
        One address object, or a list of address objects for a sequence
    """
    if isinstance(value, EmailAddress):
        return value.to_api()
    if isinstance(value, (list, tuple)):
        if not value:
            raise ValidationError(f"Field '{field_name}' must not be an empty list.")
        if not all(isinstance(item, EmailAddress) for item in value):
            raise ValidationError(
                f"Field '{field_name}' must contain only EmailAddress instances."
            )
        return [item.to_api() for item in value]
    raise ValidationError(
        f"Field '{field_name}' must be an EmailAddress or a list of EmailAddress."
    )


def _serialize_sender(value: Any) -> Dict[str, str]:
    if not isinstance(value, EmailAddress):
        raise ValidationError("Field 'from' is required and must be an EmailAddress.")
    return value.to_api()


def _serialize_attachments(attachments: Any) -> Optional[List[Dict[str, Any]]]:
    if attachments is None:
        return None
    if not isinstance(attachments, (list, tuple)):
        raise ValidationError("attachments must be a list of Attachment instances.")
    serialized = []
    for attachment in attachments:
        if not isinstance(attachment, Attachment):
            raise ValidationError("Each attachment must be an instance of Attachment.")
        serialized.append(attachment.to_api())
    return serialized or None


def _serialize_scheduled_at(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, str):
        return value
    raise ValidationError("scheduled_at must be a string or a datetime.")


def _validate_body(value: Any, field_name: str) -> Optional[str]:
    if value is not None and not isinstance(value, str):
        raise ValidationError(f"{field_name} must be a string.")
    return value


def _drop_none(payload: Dict[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in payload.items() if value is not None}


class PayloadBuilder:
    """Validates typed requests and assembles the JSON bodies the API expects."""

    def __init__(self, reference_id_factory: Callable[[], str] = generate_reference_id):
        """Initialize the builder.

        Args:
            reference_id_factory: Called for every message sent without a reference id
        """
        self.reference_id_factory = reference_id_factory

    def reference_id(self, supplied: Optional[str] = None) -> str:
        """Validate a supplied reference id or generate a new one."""
        if supplied is None:
            return self.reference_id_factory()
        return validate_reference_id(supplied)

    def build_basic(self, email: BasicEmail) -> Dict[str, Any]:
        """Build the payload for a basic send.

        Raises:
            ValidationError: If any field is missing or invalid
        """
        if not isinstance(email, BasicEmail):
            raise ValidationError("Expected a BasicEmail.")

        payload = self._build_common(email)
        html = _validate_body(email.html, "html")
        plain = _validate_body(email.plain, "plain")
        if html is None and plain is None:
            raise ValidationError("Either html or plain body is required.")

        payload["html"] = html
        payload["plain"] = plain
        return _drop_none(payload)

    def build_templated(self, email: TemplatedEmail) -> Dict[str, Any]:
        """Build the payload for a templated send.

        Raises:
            ValidationError: If any field is missing or invalid
        """
        if not isinstance(email, TemplatedEmail):
            raise ValidationError("Expected a TemplatedEmail.")

        payload = self._build_common(email)
        if email.template_id is None:
            raise ValidationError("template_id is required.")
        payload["template_id"] = validate_template_id(email.template_id)
        payload["template_data"] = validate_template_data(email.template_data)
        return _drop_none(payload)

    def build_bulk(self, email: BulkEmail) -> Dict[str, Any]:
        """Build the payload for a bulk send.

        The batch carries either an html/plain body or a template_id, never both.
        Each message gets its own reference id.

        Raises:
            ValidationError: If any field is missing or invalid
        """
        if not isinstance(email, BulkEmail):
            raise ValidationError("Expected a BulkEmail.")

        subject = validate_subject(email.subject)
        html = _validate_body(email.html, "html")
        plain = _validate_body(email.plain, "plain")
        has_body = html is not None or plain is not None
        has_template = email.template_id is not None

        if not has_body and not has_template:
            raise ValidationError("You must provide either html, plain, or template_id.")
        if has_body and has_template:
            raise ValidationError("template_id cannot be combined with html or plain.")

        messages = email.messages
        if not isinstance(messages, (list, tuple)) or not messages:
            raise ValidationError("messages must be a non-empty list.")
        if len(messages) > MAX_BULK_MESSAGES:
            raise ValidationError(
                f"messages cannot contain more than {MAX_BULK_MESSAGES} items."
            )

        payload = {
            "subject": subject,
            "html": html,
            "plain": plain,
            "template_id": validate_template_id(email.template_id) if has_template else None,
        }
        payload.update(self._build_options(email))
        payload["messages"] = [
            self._build_bulk_message(message, index) for index, message in enumerate(messages)
        ]

        logger.debug(f"Built bulk payload with {len(messages)} messages")
        return _drop_none(payload)

    def _build_common(self, email: Union[BasicEmail, TemplatedEmail]) -> Dict[str, Any]:
        payload = {
            "from": _serialize_sender(email.from_address),
            "to": self._serialize_to(email.to),
            "cc": self._serialize_optional(email.cc, "cc"),
            "bcc": self._serialize_optional(email.bcc, "bcc"),
            "reply_to": self._serialize_optional(email.reply_to, "reply_to"),
            "subject": validate_subject(email.subject),
        }
        payload.update(self._build_options(email))
        payload["scheduled_at"] = _serialize_scheduled_at(email.scheduled_at)
        payload["reference_id"] = self.reference_id(email.reference_id)
        return payload

    def _build_options(self, email: Any) -> Dict[str, Any]:
        """Validate tracking, tags, headers and attachments."""
        options: Dict[str, Any] = {}
        if email.tracking is not None:
            if not isinstance(email.tracking, bool):
                raise ValidationError("Tracking must be a boolean value.")
            options["tracking"] = email.tracking
        if email.tags is not None:
            options["tags"] = validate_scalar_map(email.tags, "tags")
        if email.headers is not None:
            options["headers"] = validate_scalar_map(email.headers, "headers")
        options["attachments"] = _serialize_attachments(email.attachments)
        return options

    def _build_bulk_message(self, message: Any, index: int) -> Dict[str, Any]:
        if isinstance(message, Mapping):
            message = dict(message)
            if "from" in message:
                if "from_address" in message:
                    raise ValidationError(
                        f"Use either 'from' or 'from_address', not both (message index {index})."
                    )
                message["from_address"] = message.pop("from")
            unknown = set(message) - _BULK_MESSAGE_FIELDS
            if unknown:
                raise ValidationError(
                    f"Unknown message fields {sorted(unknown)} (message index {index})."
                )
            if "from_address" not in message or "to" not in message:
                raise ValidationError(
                    f"Each message must include 'from' and 'to' (message index {index})."
                )
            message = BulkMessage(**message)
        elif not isinstance(message, BulkMessage):
            raise ValidationError(
                f"Each message must be a BulkMessage or a mapping (message index {index})."
            )

        try:
            item = {
                "from": _serialize_sender(message.from_address),
                "to": self._serialize_to(message.to),
                "cc": self._serialize_optional(message.cc, "cc"),
                "bcc": self._serialize_optional(message.bcc, "bcc"),
                "reply_to": self._serialize_optional(message.reply_to, "reply_to"),
                "reference_id": self.reference_id(message.reference_id),
            }
            if message.template_data is not None:
                item["template_data"] = validate_template_data(message.template_data)
        except ValidationError as e:
            raise ValidationError(f"{e} (message index {index})") from e

        return _drop_none(item)

    @staticmethod
    def _serialize_to(value: Any) -> Union[Dict[str, str], List[Dict[str, str]]]:
        if value is None:
            raise ValidationError("Field 'to' is required.")
        return serialize_recipients(value, "to")

    @staticmethod
    def _serialize_optional(value: Any, field_name: str) -> Any:
        if value is None:
            return None
        return serialize_recipients(value, field_name)
