"""Catalog browsing session combining discovery, filtering, and previews."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

from lakecatalog.catalog.builder import BuildReport, CatalogBuilder
from lakecatalog.catalog.diagnostics import DiagnosticSink
from lakecatalog.catalog.filters import filter_files
from lakecatalog.catalog.models import FileRecord
from lakecatalog.clients.protocols import StorageClient, WorkspaceResolver
from lakecatalog.config.models import LakeCatalogConfig
from lakecatalog.preview.manager import PreviewManager
from lakecatalog.preview.resources import ResourceRegistry
from lakecatalog.state.models import CatalogViewState, PreviewState


class CatalogSession:
    """Observable state and commands exposed to a presentation layer.

    The builder writes the listing fields of the shared ``CatalogViewState``
    and the preview manager writes only its ``preview`` slot.
    """

    def __init__(
        self,
        resolver: WorkspaceResolver,
        storage: StorageClient,
        *,
        item_id: Optional[str] = None,
        config: LakeCatalogConfig | None = None,
        sink: DiagnosticSink | None = None,
        registry: ResourceRegistry | None = None,
    ) -> None:
        config = config or LakeCatalogConfig()
        self.state = CatalogViewState()
        self.builder = CatalogBuilder(
            self.state,
            resolver,
            storage,
            item_id=item_id,
            settings=config.catalog,
            sink=sink,
        )
        self.previews = PreviewManager(
            self.state,
            storage,
            registry or ResourceRegistry(config.preview.spool_threshold_bytes),
            downloads_dir=Path(config.preview.downloads_dir),
        )

    async def __aenter__(self) -> "CatalogSession":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        self.dispose()

    # Observable state -------------------------------------------------

    @property
    def files(self) -> list[FileRecord]:
        """Records visible under the current filter query."""
        return filter_files(self.state.files, self.state.filter_query)

    @property
    def all_files(self) -> list[FileRecord]:
        return list(self.state.files)

    @property
    def preview(self) -> Optional[PreviewState]:
        return self.state.preview

    @property
    def loading(self) -> bool:
        return self.state.loading

    @property
    def error(self) -> Optional[str]:
        return self.state.error

    @property
    def filter_query(self) -> str:
        return self.state.filter_query

    @property
    def workspace_id(self) -> Optional[str]:
        return self.state.workspace_id

    # Commands ---------------------------------------------------------

    async def build(self) -> BuildReport:
        return await self.builder.build()

    async def select(self, file: FileRecord) -> None:
        await self.previews.select(file)

    def close(self) -> None:
        self.previews.close()

    def download(self, directory: Path | None = None) -> Optional[Path]:
        return self.previews.download(directory)

    def set_filter_query(self, query: str) -> None:
        self.state.filter_query = query

    def clear_error(self) -> None:
        self.state.error = None

    def find(self, full_path: str) -> Optional[FileRecord]:
        """Return the record with ``full_path`` from the unfiltered listing."""
        return next((record for record in self.state.files if record.full_path == full_path), None)

    def dispose(self) -> None:
        """Release the preview resource; the session should not be reused."""
        self.previews.dispose()


__all__ = ["CatalogSession"]
