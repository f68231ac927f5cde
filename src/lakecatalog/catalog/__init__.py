"""Catalog discovery: data models, error messages, and diagnostics."""

from .diagnostics import (
    CollectingDiagnosticSink,
    DiagnosticEvent,
    DiagnosticSink,
    LoggingDiagnosticSink,
)
from .errors import ErrorKind, LakeCatalogError, WorkloadAuthError, describe_error
from .models import FileRecord, PathEntry, Workspace, WorkspaceItem

__all__ = [
    "CollectingDiagnosticSink",
    "DiagnosticEvent",
    "DiagnosticSink",
    "LoggingDiagnosticSink",
    "ErrorKind",
    "LakeCatalogError",
    "WorkloadAuthError",
    "describe_error",
    "FileRecord",
    "PathEntry",
    "Workspace",
    "WorkspaceItem",
]
