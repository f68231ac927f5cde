"""Lifecycle management for the single active file preview."""

from __future__ import annotations

import base64
import binascii
import logging
from pathlib import Path
from typing import Optional

from lakecatalog.catalog.errors import describe_error
from lakecatalog.catalog.models import FileRecord
from lakecatalog.clients.protocols import StorageClient
from lakecatalog.state.models import CatalogViewState, PreviewState, PreviewStatus

from .mime import mime_type_for
from .resources import ResourceRegistry

LOGGER = logging.getLogger(__name__)


def decode_content(encoded: str | bytes) -> bytes:
    """Decode base64 transport content, rejecting malformed input.

    Raises:
        ValueError: If ``encoded`` is not valid base64.
    """
    if isinstance(encoded, bytes):
        encoded = encoded.decode("ascii")
    compact = "".join(encoded.split())
    try:
        return base64.b64decode(compact, validate=True)
    except binascii.Error as exc:
        raise ValueError(f"Invalid base64 content: {exc}") from exc


class PreviewManager:
    """Own the preview slot of a ``CatalogViewState``.

    At most one resource handle is live at any time. ``select`` releases the
    previous handle before it starts fetching, ``close`` and ``dispose``
    release it before clearing the slot, and a fetch that completes after its
    preview was replaced is discarded without allocating anything.
    """

    def __init__(
        self,
        state: CatalogViewState,
        storage: StorageClient,
        registry: ResourceRegistry | None = None,
        *,
        downloads_dir: Path | None = None,
    ) -> None:
        self.state = state
        self.storage = storage
        self.registry = registry or ResourceRegistry()
        self.downloads_dir = downloads_dir
        self._disposed = False

    async def select(self, file: FileRecord) -> None:
        """Fetch, decode, and expose ``file`` as the active preview."""
        if self._disposed:
            LOGGER.warning("Ignoring selection of %s after disposal", file.full_path)
            return

        self._release_current()
        preview = PreviewState(file=file)
        self.state.preview = preview

        try:
            data = decode_content(await self.storage.read_file_encoded(file.full_path))
        except Exception as exc:
            LOGGER.error("Failed to load file %s: %s", file.full_path, exc)
            if self._is_current(preview):
                preview.status = PreviewStatus.ERROR
                preview.error_detail = f"Failed to load file: {describe_error(exc)}"
            return

        if not self._is_current(preview):
            LOGGER.debug("Discarding superseded preview of %s", file.full_path)
            return

        try:
            handle = self.registry.allocate(data, mime_type_for(file.name))
        except Exception as exc:
            LOGGER.error("Failed to allocate preview of %s: %s", file.full_path, exc)
            preview.status = PreviewStatus.ERROR
            preview.error_detail = f"Failed to load file: {describe_error(exc)}"
            return

        preview.resource_handle = handle
        preview.status = PreviewStatus.READY

    def close(self) -> None:
        """Release the active preview and clear the slot."""
        self._release_current()
        self.state.preview = None

    def download(self, directory: Path | None = None) -> Optional[Path]:
        """Save the ready preview under its original file name.

        Args:
            directory: Target directory; defaults to the configured downloads directory.

        Returns:
            Optional[Path]: Written file, or None when no ready preview exists.
        """
        preview = self.state.preview
        if preview is None or preview.resource_handle is None:
            return None
        target_dir = (directory or self.downloads_dir or Path.cwd()).expanduser()
        destination = self.registry.save(preview.resource_handle, target_dir / preview.file.name)
        LOGGER.info("Saved %s to %s", preview.file.full_path, destination)
        return destination

    def dispose(self) -> None:
        """Release any live handle; later selections are ignored."""
        if self._disposed:
            return
        self._disposed = True
        self._release_current()
        self.state.preview = None

    def _is_current(self, preview: PreviewState) -> bool:
        return not self._disposed and self.state.preview is preview

    def _release_current(self) -> None:
        preview = self.state.preview
        if preview is None or preview.resource_handle is None:
            return
        handle = preview.resource_handle
        preview.resource_handle = None
        self.registry.release(handle)


__all__ = ["PreviewManager", "decode_content"]
