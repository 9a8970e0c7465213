from __future__ import annotations

import asyncio
import tempfile
from pathlib import Path

import pytest

from printstation.resources import (
    InMemoryResourceProvider,
    PathSource,
    TemporaryFileResourceProvider,
    describe_bytes,
    describe_path,
)


def test_describe_path_guesses_media_type(tmp_path: Path) -> None:
    pdf = tmp_path / "doc.pdf"
    pdf.write_bytes(b"%PDF-1.4 /Page")

    descriptor = describe_path(pdf)

    assert descriptor.name == "doc.pdf"
    assert descriptor.media_type == "application/pdf"
    assert descriptor.size_bytes == 14
    assert isinstance(descriptor.source, PathSource)
    assert asyncio.run(descriptor.source.read()) == b"%PDF-1.4 /Page"


def test_describe_path_keeps_declared_media_type(tmp_path: Path) -> None:
    blob = tmp_path / "upload.bin"
    blob.write_bytes(b"abc")

    assert describe_path(blob, media_type="image/png").media_type == "image/png"


def test_in_memory_provider_issues_blob_handles() -> None:
    provider = InMemoryResourceProvider()
    descriptor = describe_bytes("a.png", b"png-bytes", "image/png")

    handle = asyncio.run(provider.acquire(descriptor))

    assert handle.uri.startswith("blob:printstation/")
    assert handle.media_type == "image/png"
    assert provider.read(handle) == b"png-bytes"
    assert provider.active_handles == [handle.handle_id]


def test_in_memory_provider_release_is_idempotent() -> None:
    provider = InMemoryResourceProvider()
    handle = asyncio.run(provider.acquire(describe_bytes("a.png", b"x", "image/png")))

    provider.release(handle)
    provider.release(handle)

    assert provider.active_handles == []
    with pytest.raises(KeyError):
        provider.read(handle)


def test_temporary_file_provider_writes_and_deletes_copy(tmp_path: Path) -> None:
    provider = TemporaryFileResourceProvider(tmp_path / "resources")
    descriptor = describe_bytes("letter.docx", b"docx-bytes", "application/msword")

    handle = asyncio.run(provider.acquire(descriptor))
    path = provider.path_for(handle)

    assert path.suffix == ".docx"
    assert path.read_bytes() == b"docx-bytes"
    assert handle.uri == path.as_uri()

    provider.release(handle)
    provider.release(handle)

    assert not path.exists()
    assert provider.active_handles == []


def test_temporary_file_provider_creates_missing_directory(tmp_path: Path) -> None:
    spool = tmp_path / "nested" / "spool"
    provider = TemporaryFileResourceProvider(spool)

    handle = asyncio.run(provider.acquire(describe_bytes("a.png", b"x", "image/png")))

    assert spool.is_dir()
    assert provider.path_for(handle).parent == spool


def test_temporary_file_provider_removes_partial_copy_on_write_error(mocker, tmp_path: Path) -> None:
    real_named_temporary_file = tempfile.NamedTemporaryFile
    created: list[Path] = []

    def _failing_file(**kwargs: object):
        wrapper = real_named_temporary_file(**kwargs)
        created.append(Path(wrapper.name))
        wrapper.write = mocker.Mock(side_effect=OSError("disk full"))
        return wrapper

    mocker.patch("printstation.resources.tempfile.NamedTemporaryFile", side_effect=_failing_file)
    provider = TemporaryFileResourceProvider(tmp_path / "spool")

    with pytest.raises(OSError, match="disk full"):
        asyncio.run(provider.acquire(describe_bytes("a.pdf", b"%PDF", "application/pdf")))

    assert len(created) == 1
    assert not created[0].exists()
    assert provider.active_handles == []
