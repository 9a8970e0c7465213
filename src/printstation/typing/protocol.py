"""Collaborator interfaces used by the intake workflow."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from printstation.typing.models import FileDescriptor, PaymentReceipt, PricingQuote, ResourceHandle


@runtime_checkable
class ByteSource(Protocol):
    """Lazy access to the content of an uploaded file."""

    async def read(self) -> bytes:
        """Read the full byte content.

        Returns:
            bytes: File content.
        """


class ResourceProvider(Protocol):
    """Turns uploaded content into revocable handles for viewers."""

    async def acquire(self, descriptor: FileDescriptor) -> ResourceHandle:
        """Create a handle for the descriptor's content.

        Args:
            descriptor: Accepted upload.

        Returns:
            ResourceHandle: Dereferenceable handle.
        """

    def release(self, handle: ResourceHandle) -> None:
        """Revoke a handle and free its backing content.

        Args:
            handle: Handle previously returned by `acquire`.
        """


class OpenedDocument(Protocol):
    """A document loaded by a viewer and ready to be printed."""

    @property
    def handle(self) -> ResourceHandle:
        """Return the handle the viewer loaded."""


class PrintService(Protocol):
    """Opens a document in a viewer, then prints it once loaded."""

    async def open(self, handle: ResourceHandle) -> OpenedDocument:
        """Open a viewer on the handle; returns once the content has loaded.

        Returning is the loaded signal: a viewer that cannot load the document must
        raise instead, and `print` is never called for it.

        Args:
            handle: Document to open.

        Raises:
            PrintError: If the document could not be loaded.

        Returns:
            OpenedDocument: Loaded document.
        """

    async def print(self, document: OpenedDocument) -> None:
        """Issue the print command for a loaded document.

        Args:
            document: Result of `open`.
        """


class PreviewService(Protocol):
    """Shows a document without printing it."""

    def open_preview(self, handle: ResourceHandle) -> None:
        """Open a preview of the handle.

        Args:
            handle: Document to preview.
        """


class PaymentGateway(Protocol):
    """Settles the amount of a quote."""

    async def settle(self, quote: PricingQuote) -> PaymentReceipt:
        """Collect payment for a quote.

        Args:
            quote: Amount to collect.

        Raises:
            SettlementDeclinedError: If the payment does not go through.

        Returns:
            PaymentReceipt: Proof of settlement.
        """
