"""Project enums."""

from __future__ import annotations

import mimetypes
from enum import StrEnum


class _EnumMixin(StrEnum):
    """Shared conversion helpers for user-facing enums."""

    @classmethod
    def from_str(cls, value: str) -> _EnumMixin:
        """Parse enum from string.

        Args:
            value: Raw string value.

        Raises:
            ValueError: If the value is not supported.

        Returns:
            _EnumMixin: Parsed enum value.
        """
        try:
            return cls(value)
        except ValueError as exc:
            supported = ", ".join(member.value for member in cls)
            message = f"Unsupported {cls.__name__} value '{value}'. Expected one of: {supported}"
            raise ValueError(message) from exc

    def to_str(self) -> str:
        """Return string representation.

        Returns:
            str: Enum string value.
        """
        return self.value


class MediaType(_EnumMixin):
    """Accepted upload media types."""

    PDF = "application/pdf"
    JPEG = "image/jpeg"
    PNG = "image/png"
    GIF = "image/gif"
    DOC = "application/msword"
    DOCX = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

    @property
    def is_image(self) -> bool:
        """Return whether the type is a raster image."""
        return self.value.startswith("image/")

    @classmethod
    def is_supported(cls, value: str) -> bool:
        """Return whether a raw media type string is in the allow-list.

        Args:
            value: Declared media type.

        Returns:
            bool: True when accepted.
        """
        return value in cls._value2member_map_


def guess_media_type(filename: str) -> str:
    """Guess a declared media type from a file name, the way a file picker would.

    Args:
        filename: File name or path.

    Returns:
        str: Guessed media type, or `application/octet-stream` when unknown.
    """
    guessed, _ = mimetypes.guess_type(filename, strict=False)
    if guessed is None and filename.lower().endswith(".docx"):
        return MediaType.DOCX.value
    return guessed or "application/octet-stream"


class WorkflowPhase(_EnumMixin):
    """Phase of the intake workflow."""

    EMPTY = "empty"
    ANALYZING = "analyzing"
    READY = "ready"
    AWAITING_PAYMENT = "awaiting_payment"
    PROCESSING = "processing"
    PAID_CONFIRMATION = "paid_confirmation"

    @property
    def holds_record(self) -> bool:
        """Return whether a file record is attached in this phase."""
        return self not in {WorkflowPhase.EMPTY, WorkflowPhase.ANALYZING}


class RejectionKind(_EnumMixin):
    """User-visible error categories."""

    UNSUPPORTED_TYPE = "unsupported_type"
    OVERSIZE_FILE = "oversize_file"
    INVALID_FILE = "invalid_file"
    OVERSIZED_DOCUMENT = "oversized_document"
    WORKFLOW_BUSY = "workflow_busy"
    CANCELLED = "cancelled"
    SETTLEMENT_DECLINED = "settlement_declined"
    PRINT_FAILED = "print_failed"


class IntakeStatus(_EnumMixin):
    """Result of a file submission."""

    ACCEPTED = "accepted"
    REJECTED = "rejected"
