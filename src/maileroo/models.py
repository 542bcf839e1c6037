"""Data models for the Maileroo client."""

import base64
import binascii
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict

from .exceptions import ValidationError
from .mime import DEFAULT_CONTENT_TYPE, guess_content_type
from .validators import validate_email_address


@dataclass(frozen=True)
class EmailAddress:
    """An email address with an optional display name."""

    address: str
    display_name: Optional[str] = None

    def __post_init__(self):
        if not isinstance(self.address, str) or not self.address.strip():
            raise ValidationError("Email address must be a non-empty string.")

        is_valid, error = validate_email_address(self.address)
        if not is_valid:
            raise ValidationError(f"Invalid email address format: {self.address} ({error})")

        if self.display_name is not None and (
            not isinstance(self.display_name, str) or not self.display_name.strip()
        ):
            raise ValidationError("Display name must be a non-empty string or None.")

    def to_api(self) -> Dict[str, str]:
        """Convert to the API representation."""
        data = {"address": self.address}
        if self.display_name is not None:
            data["display_name"] = self.display_name
        return data


@dataclass(frozen=True)
class Attachment:
    """A file attached to a message, with base64-encoded content.

    Build instances with from_content() or from_file().
    """

    file_name: str
    content_type: str
    content: str
    inline: bool = False

    def __post_init__(self):
        if not isinstance(self.file_name, str) or not self.file_name:
            raise ValidationError("file_name is required.")
        if not isinstance(self.content, str) or not self.content:
            raise ValidationError("content must be a non-empty base64 string.")
        if not isinstance(self.content_type, str) or not self.content_type.strip():
            object.__setattr__(self, "content_type", DEFAULT_CONTENT_TYPE)
        if not isinstance(self.inline, bool):
            raise ValidationError("inline must be a boolean value.")

    @classmethod
    def from_content(
        cls,
        file_name: str,
        content: Union[str, bytes],
        content_type: Optional[str] = None,
        inline: bool = False,
        is_base64: bool = False,
    ) -> "Attachment":
        """Create an attachment from in-memory content.

        Args:
            file_name: Name shown to the recipient
            content: Text (encoded as UTF-8) or raw bytes
            content_type: MIME type, application/octet-stream when omitted
            inline: Whether the attachment is displayed inline
            is_base64: Treat content as already base64-encoded

        Returns:
            Attachment instance

        Raises:
            ValidationError: If the content is missing or is not valid base64
        """
        if isinstance(content, str):
            raw = content.encode("utf-8")
        elif isinstance(content, (bytes, bytearray)):
            raw = bytes(content)
        else:
            raise ValidationError("content must be a string or bytes.")

        if is_base64:
            try:
                # line-wrapped base64 (MIME style) is accepted
                raw = base64.b64decode(b"".join(raw.split()), validate=True)
            except (binascii.Error, ValueError) as e:
                raise ValidationError("Invalid base64 content provided.") from e

        return cls(
            file_name=file_name,
            content_type=content_type or DEFAULT_CONTENT_TYPE,
            content=base64.b64encode(raw).decode("ascii"),
            inline=inline,
        )

    @classmethod
    def from_file(
        cls,
        path: Union[str, "os.PathLike[str]"],
        content_type: Optional[str] = None,
        inline: bool = False,
        mime_types: Optional[Mapping[str, str]] = None,
    ) -> "Attachment":
        """Create an attachment by reading a file.

        Args:
            path: Path to the file
            content_type: MIME type; guessed from the extension when omitted
            inline: Whether the attachment is displayed inline
            mime_types: Extension table used for guessing

        Returns:
            Attachment instance

        Raises:
            ValidationError: If the path is not a readable file
        """
        if not isinstance(path, (str, os.PathLike)) or not str(path).strip():
            raise ValidationError("path must be a readable file.")

        file_path = Path(path)
        if not file_path.is_file():
            raise ValidationError(f"path must be a readable file: {file_path}")

        try:
            raw = file_path.read_bytes()
        except OSError as e:
            raise ValidationError(f"Failed to read attachment {file_path}: {e}") from e

        return cls(
            file_name=file_path.name,
            content_type=content_type or guess_content_type(file_path, mime_types),
            content=base64.b64encode(raw).decode("ascii"),
            inline=inline,
        )

    def to_api(self) -> Dict[str, Any]:
        """Convert to the API representation."""
        return {
            "file_name": self.file_name,
            "content_type": self.content_type,
            "content": self.content,
            "inline": self.inline,
        }


@dataclass(frozen=True)
class Success:
    """A decoded response envelope reporting success."""

    message: str
    data: Any = None
    status_code: Optional[int] = None

    success = True

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {"success": True, "message": self.message, "data": self.data}


@dataclass(frozen=True)
class Failure:
    """A decoded response envelope reporting failure."""

    message: str
    status_code: Optional[int] = None

    success = False

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {"success": False, "message": self.message}


Envelope = Union[Success, Failure]


class ScheduledEmail(BaseModel):
    """A scheduled email as listed by the API."""

    model_config = ConfigDict(extra="allow", frozen=True)

    reference_id: str
    subject: str
    scheduled_at: str


class ScheduledEmailPage(BaseModel):
    """One page of scheduled emails."""

    model_config = ConfigDict(extra="allow", frozen=True)

    page: int
    per_page: int
    total_count: int
    total_pages: int
    results: List[ScheduledEmail]
