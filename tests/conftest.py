"""Shared fakes for the catalog collaborators."""

from __future__ import annotations

import base64
from typing import Any, Sequence

import pytest

from lakecatalog.catalog.models import PathEntry, Workspace, WorkspaceItem


def lakehouse(item_id: str, name: str | None = None) -> WorkspaceItem:
    return WorkspaceItem(id=item_id, display_name=name or item_id, type="Lakehouse")


def entry(
    name: str, *, directory: Any = False, size: Any = "10", modified: str | None = None
) -> PathEntry:
    return PathEntry(name=name, is_directory=directory, content_length=size, last_modified=modified)


def encoded(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


class FakeFabric:
    """In-memory stand-in for the workspace resolver and storage client.

    Values given as exceptions are raised from the matching call.
    """

    def __init__(
        self,
        *,
        workspaces: Sequence[str] = ("ws1",),
        item_workspace: Any = None,
        items: Any = None,
        paths: dict[str, Any] | None = None,
        files: dict[str, Any] | None = None,
    ) -> None:
        self.workspaces = workspaces
        self.item_workspace = item_workspace
        self.items = items if items is not None else []
        self.paths = paths or {}
        self.files = files or {}
        self.calls: list[tuple[str, ...]] = []
        self.closed = False

    async def resolve_workspace_for_item(self, item_id: str) -> str:
        self.calls.append(("resolve", item_id))
        if isinstance(self.item_workspace, Exception):
            raise self.item_workspace
        return self.item_workspace

    async def list_accessible_workspaces(self) -> list[Workspace]:
        self.calls.append(("workspaces",))
        if isinstance(self.workspaces, Exception):
            raise self.workspaces
        return [Workspace(id=workspace_id) for workspace_id in self.workspaces]

    async def list_items(self, workspace_id: str) -> list[WorkspaceItem]:
        self.calls.append(("items", workspace_id))
        if isinstance(self.items, Exception):
            raise self.items
        return list(self.items)

    async def list_paths_recursive(self, workspace_id: str, path: str) -> list[PathEntry]:
        self.calls.append(("paths", workspace_id, path))
        result = self.paths.get(path, [])
        if isinstance(result, Exception):
            raise result
        return list(result)

    async def read_file_encoded(self, full_path: str) -> str:
        self.calls.append(("read", full_path))
        result = self.files[full_path]
        if isinstance(result, Exception):
            raise result
        return result

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def fabric() -> FakeFabric:
    """Return a fake with two Lakehouses holding three files and one folder."""
    return FakeFabric(
        items=[
            lakehouse("lh1", "Sales"),
            WorkspaceItem(id="nb1", display_name="Notebook", type="Notebook"),
            lakehouse("lh2", "Research"),
        ],
        paths={
            "lh1/Files": [
                entry("lh1/Files/reports", directory="true"),
                entry("lh1/Files/reports/q1.pdf", size="2048", modified="2024-01-02"),
                entry("lh1/Files/logo.png", size="512"),
            ],
            "lh2/Files": [entry("lh2/Files/notes.txt", size="5")],
        },
    )
