"""Resource registry tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from lakecatalog.preview.mime import is_image, is_pdf, is_previewable, mime_type_for
from lakecatalog.preview.resources import URI_PREFIX, ResourceError, ResourceRegistry


def test_allocate_read_and_release() -> None:
    registry = ResourceRegistry()

    handle = registry.allocate(b"payload", "text/plain")

    assert handle.uri.startswith(URI_PREFIX)
    assert handle.size == 7
    assert registry.resolve(handle.uri) is handle
    assert registry.read(handle) == b"payload"
    assert registry.live_count == 1

    registry.release(handle)

    assert handle.released
    assert registry.live_count == 0
    with pytest.raises(ResourceError):
        registry.read(handle)
    with pytest.raises(ResourceError):
        registry.resolve(handle.uri)


def test_double_release_raises() -> None:
    registry = ResourceRegistry()
    handle = registry.allocate(b"x", "application/octet-stream")
    registry.release(handle)

    with pytest.raises(ResourceError):
        registry.release(handle)


def test_large_content_spools_and_saves(tmp_path: Path) -> None:
    registry = ResourceRegistry(spool_threshold_bytes=4)
    handle = registry.allocate(b"0123456789", "application/octet-stream")

    saved = registry.save(handle, tmp_path / "nested" / "blob.bin")

    assert saved.read_bytes() == b"0123456789"
    registry.release(handle)
    assert registry.live_count == 0


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("report.PDF", "application/pdf"),
        ("photo.jpeg", "image/jpeg"),
        ("diagram.svg", "image/svg+xml"),
        ("data.csv", "text/csv"),
        ("archive.tar.gz", "application/octet-stream"),
        ("README", "application/octet-stream"),
    ],
)
def test_mime_type_for(name: str, expected: str) -> None:
    assert mime_type_for(name) == expected


def test_preview_capabilities() -> None:
    assert is_previewable("scan.pdf") and is_pdf("scan.pdf")
    assert is_previewable("logo.webp") and is_image("logo.webp")
    assert not is_previewable("notes.txt")
