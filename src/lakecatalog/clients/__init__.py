"""Collaborator contracts and the HTTP-backed Fabric client."""

from .fabric import ApiConnectionError, ApiError, FabricClient
from .protocols import StorageClient, WorkspaceResolver

__all__ = [
    "ApiConnectionError",
    "ApiError",
    "FabricClient",
    "StorageClient",
    "WorkspaceResolver",
]
