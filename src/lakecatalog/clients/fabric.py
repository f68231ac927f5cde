"""HTTP client for the Fabric REST API and OneLake DFS.

Workspaces and items come from the Fabric REST API, which pages with
``continuationToken``. Path listings and file reads go to OneLake DFS, which
pages with the ``x-ms-continuation`` header. Callers supply the bearer token.
"""

from __future__ import annotations

import base64
import logging
from typing import Any, Optional
from urllib.parse import quote

import httpx

from lakecatalog.catalog.errors import LakeCatalogError
from lakecatalog.catalog.models import PathEntry, Workspace, WorkspaceItem
from lakecatalog.config.models import FabricSettings

LOGGER = logging.getLogger(__name__)

CONTINUATION_HEADER = "x-ms-continuation"


class ApiError(LakeCatalogError):
    """Non-success HTTP response from Fabric or OneLake.

    Attributes:
        status_code: HTTP status code.
        status_text: Reason phrase reported by the server.
        body: Response text, truncated.
    """

    def __init__(self, status_code: int, status_text: str = "", body: str = "") -> None:
        self.status_code = status_code
        self.status_text = status_text
        self.body = body[:500]
        super().__init__(f"HTTP {status_code}: {status_text or 'Request failed'}")


class ApiConnectionError(LakeCatalogError):
    """Transport-level failure such as a DNS error, timeout, or reset connection."""


class FabricClient:
    """Async client for workspace discovery and OneLake storage access.

    Args:
        settings: Endpoint, token, and timeout settings.
        client: Preconfigured ``httpx.AsyncClient``; one is created when omitted.
    """

    def __init__(
        self,
        settings: FabricSettings,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.api_base_url = settings.api_base_url.rstrip("/")
        self.onelake_base_url = settings.onelake_base_url.rstrip("/")
        self.access_token = settings.access_token
        self.client = client or httpx.AsyncClient(timeout=settings.timeout_seconds)

    async def aclose(self) -> None:
        """Close the underlying HTTP connection pool."""
        await self.client.aclose()

    async def __aenter__(self) -> "FabricClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    # Workspace resolution ---------------------------------------------

    async def list_accessible_workspaces(self) -> list[Workspace]:
        """List every workspace the token can see, in service order."""
        payloads = await self._get_paged(f"{self.api_base_url}/workspaces")
        return [Workspace.model_validate(payload) for payload in payloads]

    async def resolve_workspace_for_item(self, item_id: str) -> str:
        """Find the workspace that owns ``item_id``.

        Accessible workspaces are scanned in order until one lists the item.

        Raises:
            LookupError: If no accessible workspace contains the item.
        """
        for workspace in await self.list_accessible_workspaces():
            items = await self.list_items(workspace.id)
            if any(item.id == item_id for item in items):
                LOGGER.debug("Resolved item %s to workspace %s", item_id, workspace.id)
                return workspace.id
        raise LookupError(f"Item {item_id} was not found in any accessible workspace")

    # Storage ----------------------------------------------------------

    async def list_items(self, workspace_id: str) -> list[WorkspaceItem]:
        """List all items in a workspace."""
        url = f"{self.api_base_url}/workspaces/{quote(workspace_id)}/items"
        payloads = await self._get_paged(url)
        return [WorkspaceItem.model_validate(payload) for payload in payloads]

    async def list_paths_recursive(self, workspace_id: str, path: str) -> list[PathEntry]:
        """List every path beneath ``path`` inside the workspace filesystem."""
        url = f"{self.onelake_base_url}/{quote(workspace_id)}"
        params: dict[str, Any] = {
            "resource": "filesystem",
            "recursive": "true",
            "directory": path,
        }
        entries: list[PathEntry] = []
        while True:
            response = await self._request("GET", url, params=params)
            for payload in response.json().get("paths", []):
                entries.append(PathEntry.model_validate(payload))
            continuation = response.headers.get(CONTINUATION_HEADER)
            if not continuation:
                return entries
            params = {**params, "continuation": continuation}

    async def read_file_encoded(self, full_path: str) -> str:
        """Download a file and return its content base64-encoded."""
        url = f"{self.onelake_base_url}/{quote(full_path)}"
        response = await self._request("GET", url)
        return base64.b64encode(response.content).decode("ascii")

    # Internal helpers -------------------------------------------------

    async def _get_paged(self, url: str) -> list[dict[str, Any]]:
        results: list[dict[str, Any]] = []
        params: dict[str, Any] = {}
        while True:
            body = (await self._request("GET", url, params=params or None)).json()
            results.extend(body.get("value", []))
            token = body.get("continuationToken")
            if not token:
                return results
            params = {"continuationToken": token}

    async def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        headers = dict(kwargs.pop("headers", None) or {})
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"

        try:
            response = await self.client.request(method, url, headers=headers, **kwargs)
        except httpx.RequestError as exc:
            raise ApiConnectionError(f"Request failed: {exc}") from exc

        if not response.is_success:
            raise ApiError(response.status_code, response.reason_phrase, response.text)
        return response


__all__ = ["ApiError", "ApiConnectionError", "FabricClient", "CONTINUATION_HEADER"]
