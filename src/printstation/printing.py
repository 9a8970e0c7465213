"""Viewer-based print and preview services."""

from __future__ import annotations

import asyncio
import shlex
import webbrowser
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import urlparse
from urllib.request import url2pathname

from printstation.exceptions import PrintError
from printstation.logging import get_logger
from printstation.typing.models import ResourceHandle

logger = get_logger(__name__)


@dataclass(frozen=True)
class ViewerDocument:
    """Document opened in the system viewer."""

    handle: ResourceHandle


def local_path(handle: ResourceHandle) -> Path | None:
    """Return the local file behind a `file://` handle, if it has one.

    Args:
        handle (ResourceHandle): Handle to resolve.

    Returns:
        Path | None: Local path, or None for non-file URIs.
    """
    parsed = urlparse(handle.uri)
    if parsed.scheme != "file":
        return None
    return Path(url2pathname(parsed.path))


class BrowserPrintService:
    """Opens documents in the default web browser and optionally sends them to a printer.

    Without a print command the document is only opened, and the user prints it from
    the viewer's own dialog.
    """

    def __init__(self, print_command: str | None = None) -> None:
        self.print_command = print_command

    async def open(self, handle: ResourceHandle) -> ViewerDocument:
        """Open the handle in a new browser tab; returns once the viewer was launched.

        Args:
            handle (ResourceHandle): Document to open.

        Raises:
            PrintError: If no viewer accepted the document.

        Returns:
            ViewerDocument: The document as loaded by the viewer.
        """
        if not await asyncio.to_thread(webbrowser.open, handle.uri, 2):
            raise PrintError(message=f"No viewer could open the document: {handle.uri}")
        return ViewerDocument(handle=handle)

    async def print(self, document: ViewerDocument) -> None:
        """Send a loaded document to the configured print command.

        Args:
            document (ViewerDocument): Document returned by `open`.

        Raises:
            PrintError: If the document has no local file or the command fails.
        """
        if not self.print_command:
            logger.info("Document opened for printing from the viewer", extra={"uri": document.handle.uri})
            return

        path = local_path(document.handle)
        if path is None:
            raise PrintError(message=f"Cannot print non-local document: {document.handle.uri}")

        argv = [*shlex.split(self.print_command), str(path)]
        try:
            process = await asyncio.create_subprocess_exec(
                *argv,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as exc:
            raise PrintError(message=f"Print command could not start: {exc}") from exc

        _, stderr = await process.communicate()
        if process.returncode != 0:
            detail = stderr.decode("utf-8", errors="replace").strip()
            raise PrintError(message=f"Print command failed ({process.returncode}): {detail}")
        logger.info("Document sent to printer", extra={"path": str(path), "command": argv[0]})

    def open_preview(self, handle: ResourceHandle) -> None:
        """Open the handle in a new browser tab without printing."""
        if not webbrowser.open(handle.uri, new=2):
            logger.warning("No viewer could open the preview", extra={"uri": handle.uri})
