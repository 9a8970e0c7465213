"""Byte sources and resource-handle providers."""

from __future__ import annotations

import asyncio
import tempfile
from pathlib import Path
from uuid import uuid4

from printstation.logging import get_logger
from printstation.typing.enums import guess_media_type
from printstation.typing.models import FileDescriptor, ResourceHandle

logger = get_logger(__name__)


class BytesSource:
    """Byte source over content already held in memory."""

    def __init__(self, data: bytes) -> None:
        self._data = data

    async def read(self) -> bytes:
        """Return the held content."""
        return self._data


class PathSource:
    """Byte source reading a file from disk off the event loop."""

    def __init__(self, path: Path) -> None:
        self.path = path

    async def read(self) -> bytes:
        """Read the file content in a worker thread."""
        return await asyncio.to_thread(self.path.read_bytes)


def describe_path(path: Path, *, media_type: str | None = None) -> FileDescriptor:
    """Build a descriptor for a local file, as a file picker would.

    Args:
        path (Path): File on disk.
        media_type (str | None): Declared type; guessed from the name when omitted.

    Returns:
        FileDescriptor: Descriptor reading lazily from `path`.
    """
    return FileDescriptor(
        name=path.name,
        media_type=media_type or guess_media_type(path.name),
        size_bytes=path.stat().st_size,
        source=PathSource(path),
    )


def describe_bytes(name: str, data: bytes, media_type: str) -> FileDescriptor:
    """Build a descriptor for in-memory content.

    Args:
        name (str): Display file name.
        data (bytes): File content.
        media_type (str): Declared media type.

    Returns:
        FileDescriptor: Descriptor over `data`.
    """
    return FileDescriptor(name=name, media_type=media_type, size_bytes=len(data), source=BytesSource(data))


async def _read_descriptor(descriptor: FileDescriptor) -> bytes:
    return await descriptor.source.read()


class InMemoryResourceProvider:
    """Keeps uploaded content in memory behind `blob:` style handles."""

    scheme = "blob:printstation/"

    def __init__(self) -> None:
        self._contents: dict[str, bytes] = {}

    @property
    def active_handles(self) -> list[str]:
        """Return ids of handles not yet released."""
        return list(self._contents)

    async def acquire(self, descriptor: FileDescriptor) -> ResourceHandle:
        """Store the descriptor's content and return a handle to it."""
        data = await _read_descriptor(descriptor)
        handle_id = uuid4().hex
        self._contents[handle_id] = data
        handle = ResourceHandle(handle_id=handle_id, uri=f"{self.scheme}{handle_id}", media_type=descriptor.media_type)
        logger.debug("Resource handle acquired", extra={"uri": handle.uri, "size": len(data)})
        return handle

    def read(self, handle: ResourceHandle) -> bytes:
        """Dereference a live handle.

        Args:
            handle (ResourceHandle): Handle returned by `acquire`.

        Raises:
            KeyError: If the handle was released or never issued.

        Returns:
            bytes: The stored content.
        """
        return self._contents[handle.handle_id]

    def release(self, handle: ResourceHandle) -> None:
        """Drop the content behind a handle; releasing twice is a logged no-op."""
        if self._contents.pop(handle.handle_id, None) is None:
            logger.warning("Resource handle already released", extra={"uri": handle.uri})
            return
        logger.debug("Resource handle released", extra={"uri": handle.uri})


class TemporaryFileResourceProvider:
    """Copies uploaded content to temporary files exposed as `file://` URIs."""

    def __init__(self, directory: str | Path | None = None) -> None:
        self.directory = Path(directory) if directory else None
        self._paths: dict[str, Path] = {}

    @property
    def active_handles(self) -> list[str]:
        """Return ids of handles not yet released."""
        return list(self._paths)

    async def acquire(self, descriptor: FileDescriptor) -> ResourceHandle:
        """Write the descriptor's content to a temporary file and return its handle."""
        data = await _read_descriptor(descriptor)
        path = await asyncio.to_thread(self._write, data, Path(descriptor.name).suffix)

        handle_id = uuid4().hex
        self._paths[handle_id] = path
        handle = ResourceHandle(handle_id=handle_id, uri=path.as_uri(), media_type=descriptor.media_type)
        logger.debug("Resource handle acquired", extra={"uri": handle.uri, "size": len(data)})
        return handle

    def path_for(self, handle: ResourceHandle) -> Path:
        """Return the file backing a live handle.

        Args:
            handle (ResourceHandle): Handle returned by `acquire`.

        Raises:
            KeyError: If the handle was released or never issued.

        Returns:
            Path: Temporary file path.
        """
        return self._paths[handle.handle_id]

    def release(self, handle: ResourceHandle) -> None:
        """Delete the file behind a handle; releasing twice is a logged no-op."""
        path = self._paths.pop(handle.handle_id, None)
        if path is None:
            logger.warning("Resource handle already released", extra={"uri": handle.uri})
            return
        path.unlink(missing_ok=True)
        logger.debug("Resource handle released", extra={"uri": handle.uri})

    def _write(self, data: bytes, suffix: str) -> Path:
        if self.directory is not None:
            self.directory.mkdir(parents=True, exist_ok=True)
        handle = tempfile.NamedTemporaryFile(  # noqa: SIM115
            prefix="printstation-",
            suffix=suffix,
            dir=self.directory,
            delete=False,
        )
        path = Path(handle.name)
        try:
            with handle:
                handle.write(data)
        except BaseException:
            path.unlink(missing_ok=True)
            raise
        return path
