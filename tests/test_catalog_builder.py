"""Tests covering catalog discovery and flattening."""

from __future__ import annotations

import asyncio
import logging

import pytest
from conftest import FakeFabric, entry, lakehouse

from lakecatalog.catalog.builder import CatalogBuilder, flatten_entries
from lakecatalog.catalog.diagnostics import CollectingDiagnosticSink
from lakecatalog.catalog.errors import NO_CONTAINERS_MESSAGE, NO_WORKSPACE_MESSAGE
from lakecatalog.catalog.models import FileRecord
from lakecatalog.clients.fabric import ApiError
from lakecatalog.config.models import CatalogSettings
from lakecatalog.state.models import CatalogViewState


def _builder(
    fabric: FakeFabric, **kwargs
) -> tuple[CatalogBuilder, CatalogViewState, CollectingDiagnosticSink]:
    state = CatalogViewState()
    sink = CollectingDiagnosticSink()
    builder = CatalogBuilder(state, fabric, fabric, sink=sink, **kwargs)
    return builder, state, sink


def test_flatten_entries_derives_paths_and_names() -> None:
    records = flatten_entries(
        "ws1",
        lakehouse("lh1", "Sales"),
        [entry("lh1/Files/sub/doc.pdf", size="42", modified="2024-05-01T10:00:00Z")],
    )

    assert records == [
        FileRecord(
            full_path="ws1/lh1/Files/sub/doc.pdf",
            name="doc.pdf",
            relative_path="sub/doc.pdf",
            size=42,
            last_modified="2024-05-01T10:00:00Z",
            container_name="Sales",
            container_id="lh1",
        )
    ]


def test_flatten_entries_skips_directories_and_normalizes_metadata() -> None:
    records = flatten_entries(
        "ws1",
        lakehouse("lh1"),
        [
            entry("lh1/Files/folder", directory="true"),
            entry("lh1/Files/other", directory=True),
            entry("lh1/Files/top.csv", size="not-a-number"),
            entry("lh1/Files/none.bin", size=None),
        ],
    )

    assert [record.name for record in records] == ["top.csv", "none.bin"]
    assert all(record.size == 0 for record in records)
    assert all(record.last_modified == "" for record in records)


def test_flatten_entries_keeps_names_outside_files_root() -> None:
    records = flatten_entries("ws1", lakehouse("lh1"), [entry("elsewhere.txt")])

    assert records[0].relative_path == "elsewhere.txt"
    assert records[0].name == "elsewhere.txt"
    assert records[0].full_path == "ws1/lh1/elsewhere.txt"


def test_build_lists_all_lakehouses_in_order(fabric: FakeFabric) -> None:
    builder, state, sink = _builder(fabric)

    report = asyncio.run(builder.build())

    assert [record.relative_path for record in state.files] == [
        "reports/q1.pdf",
        "logo.png",
        "notes.txt",
    ]
    assert [record.container_name for record in state.files] == ["Sales", "Sales", "Research"]
    assert state.workspace_id == "ws1"
    assert state.loading is False
    assert state.error is None
    assert report.counts() == {"containers": 2, "skipped": 0, "files": 3}
    assert not sink.events
    assert ("paths", "ws1", "nb1/Files") not in fabric.calls


def test_build_never_yields_duplicate_full_paths(fabric: FakeFabric) -> None:
    fabric.paths["lh2/Files"] = [
        entry("lh2/Files/notes.txt"),
        entry("lh2/Files/notes.txt"),
    ]
    builder, state, _ = _builder(fabric)

    asyncio.run(builder.build())

    full_paths = [record.full_path for record in state.files]
    assert len(full_paths) == len(set(full_paths))


def test_build_skips_failing_lakehouse(fabric: FakeFabric) -> None:
    fabric.paths["lh1/Files"] = PermissionError("forbidden")
    builder, state, sink = _builder(fabric)

    report = asyncio.run(builder.build())

    assert [record.name for record in state.files] == ["notes.txt"]
    assert state.error is None
    assert report.skipped == ["Sales"]
    assert sink.codes() == ["container_listing_failed"]
    assert sink.events[0].container_id == "lh1"
    assert "forbidden" in sink.events[0].message


def test_default_sink_logs_skipped_lakehouse(
    fabric: FakeFabric, caplog: pytest.LogCaptureFixture
) -> None:
    fabric.paths["lh1/Files"] = PermissionError("forbidden")
    state = CatalogViewState()
    builder = CatalogBuilder(state, fabric, fabric)
    caplog.set_level(logging.WARNING, logger="lakecatalog")

    asyncio.run(builder.build())

    records = [
        record
        for record in caplog.records
        if getattr(record, "diagnostic_code", None) == "container_listing_failed"
    ]
    assert len(records) == 1
    assert records[0].levelno == logging.WARNING
    assert records[0].container_id == "lh1"
    assert records[0].container_name == "Sales"
    assert "forbidden" in records[0].getMessage()
    assert [record.name for record in state.files] == ["notes.txt"]


def test_build_falls_back_to_first_workspace_when_item_lookup_fails() -> None:
    fabric = FakeFabric(
        workspaces=["ws1", "ws2"],
        item_workspace=ApiError(404, "Not Found"),
        items=[lakehouse("lh1")],
    )
    builder, state, sink = _builder(fabric, item_id="item-1")

    asyncio.run(builder.build())

    assert state.workspace_id == "ws1"
    assert ("items", "ws1") in fabric.calls
    assert sink.codes() == ["workspace_resolution_failed"]


def test_build_uses_resolved_item_workspace() -> None:
    fabric = FakeFabric(workspaces=["ws1"], item_workspace="ws9", items=[lakehouse("lh1")])
    builder, state, _ = _builder(fabric, item_id="item-1")

    asyncio.run(builder.build())

    assert state.workspace_id == "ws9"
    assert ("workspaces",) not in fabric.calls


def test_build_reports_missing_workspace() -> None:
    fabric = FakeFabric(workspaces=[])
    builder, state, _ = _builder(fabric)

    report = asyncio.run(builder.build())

    assert state.error == NO_WORKSPACE_MESSAGE
    assert report.error == NO_WORKSPACE_MESSAGE
    assert state.loading is False
    assert state.files == []
    assert state.workspace_id is None


def test_build_reports_workspace_without_lakehouses() -> None:
    fabric = FakeFabric(items=[])
    builder, state, _ = _builder(fabric)
    state.files = [FileRecord(full_path="old", name="old", relative_path="old")]

    asyncio.run(builder.build())

    assert state.files == []
    assert state.error == NO_CONTAINERS_MESSAGE
    assert state.workspace_id == "ws1"
    assert state.loading is False


def test_build_failure_keeps_previous_listing(fabric: FakeFabric) -> None:
    builder, state, _ = _builder(fabric)
    asyncio.run(builder.build())
    previous = list(state.files)

    fabric.items = ApiError(503, "Service Unavailable")
    asyncio.run(builder.build())

    assert state.files == previous
    assert state.error == "HTTP 503: Service Unavailable"
    assert state.loading is False


def test_build_commits_listing_only_after_all_lakehouses(fabric: FakeFabric) -> None:
    builder, state, _ = _builder(fabric)
    observed: list[tuple[bool, int]] = []
    original = fabric.list_paths_recursive

    async def _observe(workspace_id: str, path: str):
        observed.append((state.loading, len(state.files)))
        return await original(workspace_id, path)

    fabric.list_paths_recursive = _observe  # type: ignore[method-assign]

    asyncio.run(builder.build())

    assert observed == [(True, 0), (True, 0)]
    assert len(state.files) == 3


def test_concurrent_listing_preserves_container_order(fabric: FakeFabric) -> None:
    original = fabric.list_paths_recursive

    async def _slow_first(workspace_id: str, path: str):
        if path == "lh1/Files":
            await asyncio.sleep(0.01)
        return await original(workspace_id, path)

    fabric.list_paths_recursive = _slow_first  # type: ignore[method-assign]
    builder, state, _ = _builder(fabric, settings=CatalogSettings(max_concurrency=4))

    asyncio.run(builder.build())

    assert [record.container_id for record in state.files] == ["lh1", "lh1", "lh2"]
