"""Package exceptions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from printstation.typing.enums import RejectionKind


class PackageError(Exception):
    """Root exception for the package."""


@dataclass(frozen=True)
class SettingsError(PackageError):
    """Raised when settings cannot be loaded or validated."""

    message: str = "Failed to load settings"
    exc: BaseException | None = None

    def __str__(self) -> str:
        """Return error message payload."""
        return f"{self.message}: {self.exc}" if self.exc else self.message


@dataclass(frozen=True)
class AsyncExecutionError(PackageError):
    """Raised when an async operation fails in compatibility runner."""

    result: BaseException
    message: str = "Async operation failed"

    def __str__(self) -> str:
        """Return error message payload."""
        return f"{self.message}: {self.result}"


@dataclass(frozen=True)
class IntakeRejectedError(PackageError):
    """Base class for recoverable, user-visible intake rejections."""

    kind: ClassVar[RejectionKind]
    message: str

    def __str__(self) -> str:
        """Return error message payload."""
        return self.message


@dataclass(frozen=True)
class UnsupportedTypeError(IntakeRejectedError):
    """Raised when a media type is not in the allow-list."""

    kind: ClassVar[RejectionKind] = RejectionKind.UNSUPPORTED_TYPE
    message: str = "Unsupported file type. Please upload PDF, Image, or Word documents."


@dataclass(frozen=True)
class OversizeFileError(IntakeRejectedError):
    """Raised when a file exceeds the byte-size ceiling."""

    kind: ClassVar[RejectionKind] = RejectionKind.OVERSIZE_FILE
    message: str = "File size exceeds 10MB limit."


@dataclass(frozen=True)
class InvalidFileError(IntakeRejectedError):
    """Raised when a file descriptor is malformed (e.g. negative size)."""

    kind: ClassVar[RejectionKind] = RejectionKind.INVALID_FILE
    message: str = "File could not be read."


@dataclass(frozen=True)
class OversizedDocumentError(IntakeRejectedError):
    """Raised when the estimated page count exceeds the page ceiling."""

    kind: ClassVar[RejectionKind] = RejectionKind.OVERSIZED_DOCUMENT
    message: str = "Document exceeds 50 page limit."


@dataclass(frozen=True)
class WorkflowBusyError(IntakeRejectedError):
    """Raised when a submission arrives while analysis or payment is in flight."""

    kind: ClassVar[RejectionKind] = RejectionKind.WORKFLOW_BUSY
    message: str = "Another document is being processed. Please wait."


@dataclass(frozen=True)
class AnalysisCancelledError(IntakeRejectedError):
    """Raised when a submission is superseded or cleared before its analysis completes."""

    kind: ClassVar[RejectionKind] = RejectionKind.CANCELLED
    message: str = "Document analysis was cancelled."


@dataclass(frozen=True)
class SettlementDeclinedError(PackageError):
    """Raised by a payment gateway when settlement does not go through."""

    kind: ClassVar[RejectionKind] = RejectionKind.SETTLEMENT_DECLINED
    message: str = "Payment was declined."

    def __str__(self) -> str:
        """Return error message payload."""
        return self.message


@dataclass(frozen=True)
class PrintError(PackageError):
    """Raised by a print service when the print command fails."""

    kind: ClassVar[RejectionKind] = RejectionKind.PRINT_FAILED
    message: str = "Printing failed."

    def __str__(self) -> str:
        """Return error message payload."""
        return self.message
