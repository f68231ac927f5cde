"""Contracts for the external collaborators used by the catalog core."""

from __future__ import annotations

from typing import Protocol, Sequence

from lakecatalog.catalog.models import PathEntry, Workspace, WorkspaceItem


class WorkspaceResolver(Protocol):
    """Map item identifiers to workspaces and enumerate accessible workspaces."""

    async def resolve_workspace_for_item(self, item_id: str) -> str:
        """Return the workspace id that owns ``item_id``."""
        ...

    async def list_accessible_workspaces(self) -> Sequence[Workspace]:
        """Return the caller's workspaces in service order."""
        ...


class StorageClient(Protocol):
    """List workspace items and container paths, and read file content."""

    async def list_items(self, workspace_id: str) -> Sequence[WorkspaceItem]:
        """Return every item in ``workspace_id``."""
        ...

    async def list_paths_recursive(self, workspace_id: str, path: str) -> Sequence[PathEntry]:
        """Return metadata for all entries beneath ``path``, recursively."""
        ...

    async def read_file_encoded(self, full_path: str) -> str:
        """Return the base64-encoded content of the file at ``full_path``."""
        ...


__all__ = ["WorkspaceResolver", "StorageClient"]
