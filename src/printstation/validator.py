"""Upload policy checks."""

from __future__ import annotations

from typing import TYPE_CHECKING

from printstation.exceptions import (
    IntakeRejectedError,
    InvalidFileError,
    OversizedDocumentError,
    OversizeFileError,
    UnsupportedTypeError,
)
from printstation.typing.enums import MediaType
from printstation.typing.models import Rejection

if TYPE_CHECKING:
    from printstation.settings import Settings


def _format_megabytes(size_bytes: int) -> str:
    """Render a byte ceiling the way it is shown to users (e.g. `10MB`).

    Args:
        size_bytes (int): Byte count.

    Returns:
        str: Whole or fractional megabyte label.
    """
    megabytes = size_bytes / (1024 * 1024)
    return f"{megabytes:g}MB"


def ensure_valid(media_type: str, size_bytes: int, settings: Settings) -> MediaType:
    """Check a candidate upload against the type allow-list and size ceiling.

    Args:
        media_type (str): Declared media type.
        size_bytes (int): Declared byte size.
        settings (Settings): Policy limits.

    Raises:
        UnsupportedTypeError: If the media type is not accepted.
        InvalidFileError: If the size is negative.
        OversizeFileError: If the file is larger than the ceiling.

    Returns:
        MediaType: The accepted media type.
    """
    if not MediaType.is_supported(media_type):
        raise UnsupportedTypeError
    if size_bytes < 0:
        raise InvalidFileError(message=f"Invalid file size: {size_bytes} bytes.")
    if size_bytes > settings.max_file_size_bytes:
        limit = _format_megabytes(settings.max_file_size_bytes)
        raise OversizeFileError(message=f"File size exceeds {limit} limit.")
    return MediaType(media_type)


def validate(media_type: str, size_bytes: int, settings: Settings) -> Rejection | None:
    """Return the rejection for a candidate upload, or None when it is acceptable.

    Args:
        media_type (str): Declared media type.
        size_bytes (int): Declared byte size.
        settings (Settings): Policy limits.

    Returns:
        Rejection | None: Why the upload is refused, if it is.
    """
    try:
        ensure_valid(media_type, size_bytes, settings)
    except IntakeRejectedError as exc:
        return to_rejection(exc)
    return None


def check_page_limit(page_count: int, settings: Settings) -> None:
    """Refuse documents whose estimated page count exceeds the ceiling.

    Args:
        page_count (int): Estimated page count.
        settings (Settings): Policy limits.

    Raises:
        OversizedDocumentError: If the document has too many pages.
    """
    if page_count > settings.max_pages:
        raise OversizedDocumentError(message=f"Document exceeds {settings.max_pages} page limit.")


def to_rejection(exc: IntakeRejectedError) -> Rejection:
    """Convert an intake error into its user-visible form."""
    return Rejection(kind=exc.kind, message=exc.message)
