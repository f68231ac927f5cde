"""Client-side text filtering of the catalog listing."""

from __future__ import annotations

from typing import Sequence

from .models import FileRecord


def filter_files(files: Sequence[FileRecord], query: str) -> list[FileRecord]:
    """Return records whose name or container name contains ``query``.

    Matching is a case-insensitive substring test. An empty query returns
    every record; the input sequence is never modified.
    """
    if not query:
        return list(files)
    needle = query.casefold()
    return [
        record
        for record in files
        if needle in record.name.casefold() or needle in record.container_name.casefold()
    ]


__all__ = ["filter_files"]
