"""Addressable, releasable binary resources backing file previews."""

from __future__ import annotations

import logging
import shutil
import tempfile
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import IO, Optional

from lakecatalog.catalog.errors import LakeCatalogError

LOGGER = logging.getLogger(__name__)

URI_PREFIX = "blob:lakecatalog/"


class ResourceError(LakeCatalogError):
    """Raised when a resource handle is unknown or already released."""


@dataclass(slots=True, eq=False)
class ResourceHandle:
    """Opaque reference to decoded content held by a ``ResourceRegistry``.

    Attributes:
        uri: Address the rendering layer uses to reach the content.
        mime_type: Content type the blob was tagged with.
        size: Content length in bytes.
    """

    uri: str
    mime_type: str
    size: int
    _buffer: Optional[IO[bytes]] = field(default=None, repr=False)

    @property
    def released(self) -> bool:
        return self._buffer is None


class ResourceRegistry:
    """Allocate and release binary resources addressed by URI.

    Content is held in a spooled temporary file: it stays in memory below
    ``spool_threshold_bytes`` and moves to disk above it. Releasing closes the
    buffer, which also deletes any spooled file.
    """

    def __init__(self, spool_threshold_bytes: int = 8 * 1024 * 1024) -> None:
        self._spool_threshold = spool_threshold_bytes
        self._live: dict[str, ResourceHandle] = {}

    @property
    def live_count(self) -> int:
        """Return the number of handles allocated and not yet released."""
        return len(self._live)

    def allocate(self, data: bytes, mime_type: str) -> ResourceHandle:
        """Store ``data`` and return a new handle addressing it."""
        buffer = tempfile.SpooledTemporaryFile(max_size=self._spool_threshold)
        buffer.write(data)
        buffer.seek(0)
        handle = ResourceHandle(
            uri=f"{URI_PREFIX}{uuid.uuid4()}",
            mime_type=mime_type,
            size=len(data),
            _buffer=buffer,
        )
        self._live[handle.uri] = handle
        LOGGER.debug("Allocated %s (%d bytes, %s)", handle.uri, handle.size, mime_type)
        return handle

    def release(self, handle: ResourceHandle) -> None:
        """Free the content behind ``handle``.

        Raises:
            ResourceError: If the handle was never allocated here or was already released.
        """
        if self._live.pop(handle.uri, None) is None or handle._buffer is None:
            raise ResourceError(f"Resource {handle.uri} is not live")
        handle._buffer.close()
        handle._buffer = None
        LOGGER.debug("Released %s", handle.uri)

    def resolve(self, uri: str) -> ResourceHandle:
        """Return the live handle addressed by ``uri``."""
        try:
            return self._live[uri]
        except KeyError as exc:
            raise ResourceError(f"Resource {uri} is not live") from exc

    def read(self, handle: ResourceHandle) -> bytes:
        """Return the full content behind a live handle."""
        buffer = self._buffer_for(handle)
        buffer.seek(0)
        return buffer.read()

    def save(self, handle: ResourceHandle, destination: Path) -> Path:
        """Copy the content behind ``handle`` to ``destination``."""
        buffer = self._buffer_for(handle)
        destination.parent.mkdir(parents=True, exist_ok=True)
        buffer.seek(0)
        with destination.open("wb") as target:
            shutil.copyfileobj(buffer, target)
        return destination

    def _buffer_for(self, handle: ResourceHandle) -> IO[bytes]:
        if handle._buffer is None or handle.uri not in self._live:
            raise ResourceError(f"Resource {handle.uri} is not live")
        return handle._buffer


__all__ = ["ResourceError", "ResourceHandle", "ResourceRegistry", "URI_PREFIX"]
