"""Validation helpers for request fields."""

import re
import secrets
from decimal import Decimal
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from email_validator import SPECIAL_USE_DOMAIN_NAMES, EmailNotValidError, validate_email

from .exceptions import ValidationError

MAX_SUBJECT_LENGTH = 255
MAX_MAP_KEY_LENGTH = 128
MAX_MAP_VALUE_LENGTH = 768
REFERENCE_ID_LENGTH = 24

_REFERENCE_ID_RE = re.compile(r"^[0-9a-fA-F]{%d}$" % REFERENCE_ID_LENGTH)
_TEMPLATE_ID_RE = re.compile(r"^[+-]?[0-9]+$")
_HOSTNAME_RE = re.compile(
    r"^(?!-)[A-Za-z0-9-]{1,63}(?<!-)(\.(?!-)[A-Za-z0-9-]{1,63}(?<!-))*$"
)
_SCALAR_TYPES = (str, bool, int, float, Decimal)


def _is_reserved_domain(domain: str) -> bool:
    domain = domain.lower()
    return any(domain == d or domain.endswith("." + d) for d in SPECIAL_USE_DOMAIN_NAMES)


def validate_email_address(email: str) -> Tuple[bool, str]:
    """Validate an email address's syntax.

    Deliverability is not checked; only the local-part@domain grammar.
    Reserved names such as ``localhost`` are well-formed hosts and pass.

    Args:
        email: Email address to validate

    Returns:
        Tuple of (is_valid, normalized address or error message)
    """
    local, _, domain = email.rpartition("@")
    reserved = bool(local) and _is_reserved_domain(domain)
    if reserved:
        if not _HOSTNAME_RE.fullmatch(domain):
            return False, f"The part after the @-sign is not a valid host name: {domain}"
        # the local part is still checked against a neutral domain
        email = f"{local}@example.com"

    try:
        valid = validate_email(
            email,
            check_deliverability=False,
            globally_deliverable=False,
            test_environment=True,
            allow_quoted_local=True,
            allow_domain_literal=True,
        )
    except EmailNotValidError as e:
        return False, str(e)

    if reserved:
        return True, f"{valid.local_part}@{domain.lower()}"
    return True, valid.normalized


def validate_subject(subject: Any) -> str:
    """Validate a message subject.

    Args:
        subject: Subject line

    Returns:
        The subject, unchanged

    Raises:
        ValidationError: If the subject is not a non-blank string of at most 255 characters
    """
    if (
        not isinstance(subject, str)
        or not subject.strip()
        or len(subject) > MAX_SUBJECT_LENGTH
    ):
        raise ValidationError(
            f"Subject must be a non-empty string with a maximum length of "
            f"{MAX_SUBJECT_LENGTH} characters."
        )
    return subject


def validate_scalar_map(mapping: Any, label: str) -> Dict[str, Any]:
    """Validate a tags or headers map.

    Args:
        mapping: Map of string keys to scalar values
        label: Field name used in error messages

    Returns:
        A plain dict copy of the map

    Raises:
        ValidationError: If a key or value breaks the type or length limits
    """
    if not isinstance(mapping, Mapping):
        raise ValidationError(f"{label} must be a mapping of string keys to scalar values.")

    for key, value in mapping.items():
        if not isinstance(key, str) or not key:
            raise ValidationError(f"{label} keys must be non-empty strings.")
        if value is not None and not isinstance(value, _SCALAR_TYPES):
            raise ValidationError(
                f"{label} must be an associative map with string keys and scalar values."
            )
        if len(key) > MAX_MAP_KEY_LENGTH or len(str(value)) > MAX_MAP_VALUE_LENGTH:
            raise ValidationError(
                f"{label} key must not exceed {MAX_MAP_KEY_LENGTH} characters and value "
                f"must not exceed {MAX_MAP_VALUE_LENGTH} characters."
            )

    return dict(mapping)


def validate_template_id(template_id: Any) -> int:
    """Coerce a template id given as an int or a numeric string."""
    if isinstance(template_id, bool):
        raise ValidationError("template_id must be an integer or a string.")
    if isinstance(template_id, int):
        return template_id
    if isinstance(template_id, str):
        if not _TEMPLATE_ID_RE.match(template_id.strip()):
            raise ValidationError(f"template_id must be numeric, got {template_id!r}.")
        return int(template_id.strip())
    raise ValidationError("template_id must be an integer or a string.")


def validate_template_data(template_data: Any) -> Dict[str, Any]:
    """Validate template substitution data; None becomes an empty dict."""
    if template_data is None:
        return {}
    if not isinstance(template_data, Mapping):
        raise ValidationError("template_data must be a dictionary if provided.")
    if not all(isinstance(key, str) for key in template_data):
        raise ValidationError("template_data keys must be strings.")
    return dict(template_data)


def generate_reference_id(randbytes: Callable[[int], bytes] = secrets.token_bytes) -> str:
    """Generate a reference id.

    Args:
        randbytes: Source of random bytes, called with the number of bytes wanted

    Returns:
        24 lowercase hexadecimal characters
    """
    return randbytes(REFERENCE_ID_LENGTH // 2).hex()


def validate_reference_id(reference_id: Optional[str]) -> str:
    """Validate a caller-supplied reference id.

    Args:
        reference_id: Reference id to check

    Returns:
        The reference id in lowercase

    Raises:
        ValidationError: If the id has surrounding whitespace or is not 24 hex characters
    """
    if not isinstance(reference_id, str):
        raise ValidationError("reference_id must be a string.")
    if reference_id != reference_id.strip():
        raise ValidationError("reference_id must not contain whitespace.")
    if not _REFERENCE_ID_RE.match(reference_id):
        raise ValidationError(
            f"reference_id must be a {REFERENCE_ID_LENGTH}-character hexadecimal string."
        )
    return reference_id.lower()
