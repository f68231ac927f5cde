"""Data models describing workspaces, containers, and enumerated files."""

from __future__ import annotations

import math
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Workspace(BaseModel):
    """A workspace the caller can access."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str
    display_name: Optional[str] = Field(default=None, alias="displayName")


class WorkspaceItem(BaseModel):
    """An item returned when listing a workspace.

    Attributes:
        id: Item identifier; for containers this is also the first path segment.
        display_name: Human readable item name.
        type: Item type, e.g. ``Lakehouse``.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str
    display_name: str = Field(default="", alias="displayName")
    type: str = ""


class PathEntry(BaseModel):
    """Raw metadata for one entry returned by a recursive path listing.

    ``name`` is relative to the workspace filesystem and already includes the
    ``{container_id}/Files/`` prefix. Services report ``isDirectory`` and
    ``contentLength`` as strings, so both are kept loosely typed here.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str
    is_directory: Any = Field(default=False, alias="isDirectory")
    content_length: Any = Field(default=None, alias="contentLength")
    last_modified: Optional[str] = Field(default=None, alias="lastModified")

    @property
    def directory(self) -> bool:
        """Return True when the entry is flagged as a directory."""
        return str(self.is_directory).lower() == "true"


class FileRecord(BaseModel):
    """One enumerated file, flattened for display.

    Attributes:
        full_path: Container-qualified path usable for read operations
            (``{workspace_id}/{container_id}/Files/...``).
        name: Leaf file name.
        relative_path: Path relative to the container's files root.
        size: Byte length; unknown sizes are stored as 0.
        last_modified: Timestamp string, empty when unavailable.
        container_name: Display name of the owning container.
        container_id: Identifier of the owning container.
    """

    model_config = ConfigDict(frozen=True)

    full_path: str
    name: str
    relative_path: str
    size: int = 0
    last_modified: str = ""
    container_name: str = ""
    container_id: str = ""

    @field_validator("size", mode="before")
    @classmethod
    def _coerce_size(cls, value: Any) -> int:
        return normalize_size(value)

    @field_validator("last_modified", mode="before")
    @classmethod
    def _coerce_last_modified(cls, value: Any) -> str:
        return value or ""


def normalize_size(value: Any) -> int:
    """Coerce a reported content length into a non-negative integer.

    Args:
        value: Raw value as reported by the storage listing.

    Returns:
        int: Parsed byte length, or 0 when the value is missing or invalid.
    """
    if value is None or isinstance(value, bool):
        return 0
    try:
        number = float(str(value).strip())
    except ValueError:
        return 0
    if not math.isfinite(number) or number < 0:
        return 0
    return int(number)


__all__ = ["Workspace", "WorkspaceItem", "PathEntry", "FileRecord", "normalize_size"]
