"""Heuristic page-count estimation per document type.

Estimates are structural approximations, not parses:

* PDF: occurrences of the page marker (`/Page` by default) are counted in the raw
  byte stream and halved, since common producers emit the marker about twice per
  page (`/Type /Page` plus the `/Pages` tree). Producers that deviate from that
  pattern, compressed object streams or incremental updates will skew the count
  either way. This is a known accuracy limitation.
* Images: always one page.
* Word documents: the byte size divided by an average page size.

All estimates are at least 1. The page ceiling is enforced by the workflow, not here.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from printstation.logging import get_logger
from printstation.typing.enums import MediaType

if TYPE_CHECKING:
    from printstation.settings import Settings
    from printstation.typing.models import FileDescriptor

logger = get_logger(__name__)

PDF_MARKER_HITS_PER_PAGE = 2


def count_marker(data: bytes, marker: bytes) -> int:
    """Count non-overlapping occurrences of a marker in a byte stream.

    Args:
        data (bytes): Raw document bytes.
        marker (bytes): Pattern to count.

    Returns:
        int: Number of occurrences.
    """
    return data.count(marker)


def estimate_pdf_pages(data: bytes, marker: bytes) -> int:
    """Estimate PDF pages from marker occurrences.

    Args:
        data (bytes): Raw PDF bytes.
        marker (bytes): Page marker.

    Returns:
        int: `max(1, ceil(hits / 2))`.
    """
    hits = count_marker(data, marker)
    return max(1, math.ceil(hits / PDF_MARKER_HITS_PER_PAGE))


def estimate_by_size(size_bytes: int, average_page_bytes: int) -> int:
    """Estimate pages from file size.

    Args:
        size_bytes (int): File size.
        average_page_bytes (int): Average byte size of one page.

    Returns:
        int: `max(1, ceil(size / average))`.
    """
    return max(1, math.ceil(size_bytes / average_page_bytes))


def needs_bytes(media_type: MediaType) -> bool:
    """Return whether estimating this type requires the file content."""
    return media_type == MediaType.PDF


def estimate(media_type: MediaType, data: bytes | None, size_bytes: int, settings: Settings) -> int:
    """Estimate the printable page count of a document.

    Args:
        media_type (MediaType): Accepted media type.
        data (bytes | None): File content; required for PDF only.
        size_bytes (int): File size.
        settings (Settings): Estimation constants.

    Raises:
        ValueError: If PDF content is missing.

    Returns:
        int: Estimated page count, at least 1.
    """
    if media_type == MediaType.PDF:
        if data is None:
            raise ValueError("PDF page estimation requires the document bytes")
        return estimate_pdf_pages(data, settings.pdf_page_marker_bytes)
    if media_type.is_image:
        return 1
    return estimate_by_size(size_bytes, settings.average_word_page_bytes)


async def estimate_descriptor(
    descriptor: FileDescriptor,
    media_type: MediaType,
    settings: Settings,
) -> int:
    """Estimate a submitted file, reading its content only when needed.

    Args:
        descriptor (FileDescriptor): Validated upload.
        media_type (MediaType): Its accepted media type.
        settings (Settings): Estimation constants.

    Returns:
        int: Estimated page count, at least 1.
    """
    data: bytes | None = None
    if needs_bytes(media_type):
        data = await descriptor.source.read()

    page_count = estimate(media_type, data, descriptor.size_bytes, settings)
    logger.info(
        "Page count estimated",
        extra={"file_name": descriptor.name, "media_type": media_type.value, "pages": page_count},
    )
    return page_count
