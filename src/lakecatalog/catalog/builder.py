"""Catalog build orchestration: workspace resolution to a flat file listing."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional, Sequence

from lakecatalog.clients.protocols import StorageClient, WorkspaceResolver
from lakecatalog.config.models import CatalogSettings
from lakecatalog.state.models import CatalogViewState

from .diagnostics import DiagnosticEvent, DiagnosticSink, LoggingDiagnosticSink
from .errors import NO_CONTAINERS_MESSAGE, NO_WORKSPACE_MESSAGE, describe_error
from .models import FileRecord, PathEntry, WorkspaceItem

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class BuildReport:
    """Outcome of the most recent build.

    Attributes:
        workspace_id: Workspace the build resolved, if any.
        containers: Containers discovered, in enumeration order.
        files: Flattened records committed to the view state.
        skipped: Display names of containers whose listing failed.
        error: Top-level error or guidance message, if the build stopped early.
    """

    workspace_id: Optional[str] = None
    containers: list[WorkspaceItem] = field(default_factory=list)
    files: list[FileRecord] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    error: Optional[str] = None

    def counts(self) -> dict[str, int]:
        return {
            "containers": len(self.containers),
            "skipped": len(self.skipped),
            "files": len(self.files),
        }


def flatten_entries(
    workspace_id: str,
    container: WorkspaceItem,
    entries: Iterable[PathEntry],
    *,
    files_root: str = "Files",
) -> list[FileRecord]:
    """Turn a container's raw path listing into file records.

    Entry names are workspace-relative (``{container_id}/Files/sub/doc.pdf``).
    Directories are dropped; the remaining entries get a container-qualified
    ``full_path`` and a ``relative_path`` below the files root.

    Args:
        workspace_id: Workspace that owns the container.
        container: Container the entries were listed from.
        entries: Raw entries returned by the storage listing.
        files_root: Name of the container's files folder.

    Returns:
        list[FileRecord]: Records in listing order.
    """
    container_prefix = f"{container.id}/"
    files_prefix = f"{container.id}/{files_root}/"
    records: list[FileRecord] = []
    for entry in entries:
        if entry.directory:
            continue
        within_container = entry.name.removeprefix(container_prefix)
        relative_path = entry.name.removeprefix(files_prefix)
        name = relative_path.rsplit("/", 1)[-1] or relative_path
        records.append(
            FileRecord(
                full_path=f"{workspace_id}/{container.id}/{within_container}",
                name=name,
                relative_path=relative_path,
                size=entry.content_length,
                last_modified=entry.last_modified,
                container_name=container.display_name,
                container_id=container.id,
            )
        )
    return records


class CatalogBuilder:
    """Resolve a workspace, discover containers, and list their files.

    Every build replaces ``files``, ``workspace_id``, ``loading``, and ``error``
    on the view state in a single step once all containers were attempted.
    Failures never escape ``build``; they become state instead.
    """

    def __init__(
        self,
        state: CatalogViewState,
        resolver: WorkspaceResolver,
        storage: StorageClient,
        *,
        item_id: Optional[str] = None,
        settings: CatalogSettings | None = None,
        sink: DiagnosticSink | None = None,
    ) -> None:
        self.state = state
        self.resolver = resolver
        self.storage = storage
        self.item_id = item_id
        self.settings = settings or CatalogSettings()
        self.sink: DiagnosticSink = sink or LoggingDiagnosticSink()

    async def build(self) -> BuildReport:
        """Rebuild the catalog and commit the result to the view state."""
        state = self.state
        state.loading = True
        state.error = None
        report = BuildReport()

        try:
            workspace_id = await self._resolve_workspace()
            if workspace_id is None:
                report.error = NO_WORKSPACE_MESSAGE
                state.loading = False
                state.error = report.error
                return report

            report.workspace_id = workspace_id
            report.containers = await self._discover_containers(workspace_id)
            if not report.containers:
                report.error = NO_CONTAINERS_MESSAGE
                state.files = []
                state.workspace_id = workspace_id
                state.loading = False
                state.error = report.error
                return report

            report.files = await self._enumerate(workspace_id, report.containers, report)
        except asyncio.CancelledError:
            state.loading = False
            raise
        except Exception as exc:
            LOGGER.error("Failed to load files: %s", exc, exc_info=True)
            report.error = describe_error(exc)
            state.loading = False
            state.error = report.error
            return report

        state.files = report.files
        state.workspace_id = report.workspace_id
        state.loading = False
        state.error = None
        return report

    async def _resolve_workspace(self) -> Optional[str]:
        if self.item_id:
            try:
                workspace_id = await self.resolver.resolve_workspace_for_item(self.item_id)
            except Exception as exc:
                self.sink.emit(
                    DiagnosticEvent(
                        code="workspace_resolution_failed",
                        message=f"Could not resolve workspace from item {self.item_id}: "
                        f"{describe_error(exc)}",
                        error=exc,
                    )
                )
            else:
                if workspace_id:
                    return workspace_id

        workspaces = await self.resolver.list_accessible_workspaces()
        if workspaces:
            return workspaces[0].id
        return None

    async def _discover_containers(self, workspace_id: str) -> list[WorkspaceItem]:
        items = await self.storage.list_items(workspace_id)
        return [item for item in items if item.type == self.settings.container_type]

    async def _enumerate(
        self,
        workspace_id: str,
        containers: Sequence[WorkspaceItem],
        report: BuildReport,
    ) -> list[FileRecord]:
        semaphore = asyncio.Semaphore(self.settings.max_concurrency)

        async def _list(container: WorkspaceItem) -> list[FileRecord] | None:
            async with semaphore:
                try:
                    entries = await self.storage.list_paths_recursive(
                        workspace_id, f"{container.id}/{self.settings.files_root}"
                    )
                    return flatten_entries(
                        workspace_id, container, entries, files_root=self.settings.files_root
                    )
                except Exception as exc:
                    self.sink.emit(
                        DiagnosticEvent(
                            code="container_listing_failed",
                            message=(
                                f'Failed to list files in Lakehouse "{container.display_name}": '
                                f"{describe_error(exc)}"
                            ),
                            container_id=container.id,
                            container_name=container.display_name,
                            error=exc,
                        )
                    )
                    return None

        # gather keeps container enumeration order regardless of completion order.
        results = await asyncio.gather(*(_list(container) for container in containers))

        files: list[FileRecord] = []
        seen: set[str] = set()
        for container, records in zip(containers, results):
            if records is None:
                report.skipped.append(container.display_name)
                continue
            for record in records:
                if record.full_path in seen:
                    LOGGER.debug("Dropping duplicate path %s", record.full_path)
                    continue
                seen.add(record.full_path)
                files.append(record)
        return files


__all__ = ["BuildReport", "CatalogBuilder", "flatten_entries"]
