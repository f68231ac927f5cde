"""In-memory state containers observed by the presentation layer."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from lakecatalog.catalog.models import FileRecord
from lakecatalog.preview.resources import ResourceHandle


class PreviewStatus(str, Enum):
    """Lifecycle stage of the active preview."""

    LOADING = "loading"
    READY = "ready"
    ERROR = "error"


@dataclass(slots=True)
class PreviewState:
    """The single preview attached to a catalog view.

    Attributes:
        file: Record being previewed.
        resource_handle: Decoded content handle; set only while ``status`` is ready.
        status: Current lifecycle stage.
        error_detail: Failure message; set only while ``status`` is error.
    """

    file: FileRecord
    resource_handle: Optional[ResourceHandle] = None
    status: PreviewStatus = PreviewStatus.LOADING
    error_detail: Optional[str] = None


@dataclass(slots=True)
class CatalogViewState:
    """Root state combining the file listing, preview, and filter.

    Attributes:
        files: Records in discovery order (container order, then listing order).
        preview: Active preview, if any.
        loading: True only while a catalog build is in flight.
        error: Top-level error or guidance message.
        workspace_id: Workspace the listing was built from.
        filter_query: Free-text filter applied to name and container name.
    """

    files: list[FileRecord] = field(default_factory=list)
    preview: Optional[PreviewState] = None
    loading: bool = False
    error: Optional[str] = None
    workspace_id: Optional[str] = None
    filter_query: str = ""


__all__ = ["PreviewStatus", "PreviewState", "CatalogViewState"]
