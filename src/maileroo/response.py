"""Decoding of the API's {success, message, data} response envelope."""

import json
import logging
from typing import Any, Dict, List, Optional, Type, Union

from pydantic import ValidationError as PydanticValidationError

from .exceptions import ApiError, ResponseError
from .models import Envelope, Failure, ScheduledEmailPage, Success

logger = logging.getLogger(__name__)

UNKNOWN_MESSAGE = "Unknown"


def decode_envelope(raw_body: Union[str, bytes], status_code: Optional[int] = None) -> Envelope:
    """Decode a raw response body into a Success or Failure envelope.

    Args:
        raw_body: Response body as received
        status_code: HTTP status code, kept for error reporting

    Returns:
        Success or Failure

    Raises:
        ResponseError: If the body is not a JSON object with a boolean "success" field
    """
    try:
        decoded = json.loads(raw_body)
    except (TypeError, ValueError) as e:
        raise ResponseError("The API response is not valid JSON.") from e

    if not isinstance(decoded, dict):
        raise ResponseError("The API response is not valid JSON.")
    if "success" not in decoded:
        raise ResponseError('The API response is missing the "success" field.')

    success = decoded["success"]
    if not isinstance(success, bool):
        raise ResponseError("The API response 'success' field is not a boolean.")

    message = decoded.get("message")
    message = UNKNOWN_MESSAGE if message is None else str(message)

    if success:
        return Success(message=message, data=decoded.get("data"), status_code=status_code)
    return Failure(message=message, status_code=status_code)


def raise_for_failure(envelope: Envelope) -> Success:
    """Return a Success envelope or raise ApiError for a Failure."""
    if isinstance(envelope, Failure):
        logger.warning(
            f"Maileroo API reported failure (status {envelope.status_code}): {envelope.message}"
        )
        raise ApiError(envelope.message, status_code=envelope.status_code)
    return envelope


def extract_field(envelope: Success, path: str, expected: Type = str) -> Any:
    """Extract a field from a successful envelope.

    Args:
        envelope: Decoded Success envelope
        path: Dotted path from the envelope root, e.g. "data.reference_id"
        expected: str, list (a list of strings) or dict

    Returns:
        The field value

    Raises:
        ResponseError: If the field is missing or has the wrong shape
    """
    value: Any = envelope.to_dict()
    for part in path.split("."):
        if not isinstance(value, dict) or value.get(part) is None:
            raise ResponseError(f"The API response is missing the {path} field.")
        value = value[part]

    if expected is str and isinstance(value, str):
        return value
    if expected is list and isinstance(value, list) and all(isinstance(v, str) for v in value):
        return list(value)
    if expected is dict and isinstance(value, dict):
        return dict(value)
    raise ResponseError(f"Failed to parse {path}.")


def parse_reference_id(envelope: Envelope) -> str:
    return extract_field(raise_for_failure(envelope), "data.reference_id", str)


def parse_reference_ids(envelope: Envelope) -> List[str]:
    return extract_field(raise_for_failure(envelope), "data.reference_ids", list)


def parse_scheduled_page(envelope: Envelope) -> ScheduledEmailPage:
    data: Dict[str, Any] = extract_field(raise_for_failure(envelope), "data", dict)
    try:
        return ScheduledEmailPage.model_validate(data)
    except PydanticValidationError as e:
        raise ResponseError(f"Failed to parse data: {e}") from e
