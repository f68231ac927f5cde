"""Error types and user-facing message derivation for catalog operations."""

from __future__ import annotations

import json
from collections.abc import Mapping
from enum import Enum
from typing import Any, Optional


class ErrorKind(Enum):
    """Known workload authentication failure kinds, keyed by host condition code."""

    UNSUPPORTED_ENVIRONMENT = 0
    INTERACTION_FAILED = 1
    AUTH_CONFIGURATION = 2

    @classmethod
    def from_code(cls, code: Any) -> Optional["ErrorKind"]:
        """Return the kind registered for ``code``, or None when unknown."""
        if isinstance(code, bool) or not isinstance(code, int):
            return None
        try:
            return cls(code)
        except ValueError:
            return None


ERROR_MESSAGES: dict[ErrorKind, str] = {
    ErrorKind.UNSUPPORTED_ENVIRONMENT: (
        "Authentication is not supported in this environment. Open this workload through "
        "the Fabric portal (https://app.fabric.microsoft.com) instead of localhost."
    ),
    ErrorKind.INTERACTION_FAILED: (
        "User interaction failed during authentication. Please try again."
    ),
    ErrorKind.AUTH_CONFIGURATION: (
        "Workload authentication configuration error. Verify that your Entra App "
        "registration (FRONTEND_APPID) and redirect URIs are configured correctly."
    ),
}

NO_WORKSPACE_MESSAGE = "No workspace found. Please ensure you have access to a Fabric workspace."
NO_CONTAINERS_MESSAGE = (
    "No Lakehouses found in this workspace. "
    "Create a Lakehouse and upload files to see them here."
)
UNKNOWN_ERROR_MESSAGE = "Unknown error"


class LakeCatalogError(Exception):
    """Base exception for lakecatalog runtime failures."""


class WorkloadAuthError(LakeCatalogError):
    """Raised when the host reports an authentication condition."""

    def __init__(self, kind: ErrorKind, message: str | None = None) -> None:
        super().__init__(message or ERROR_MESSAGES[kind])
        self.kind = kind


_ERROR_FIELDS = ("error", "message", "status_code", "statusCode", "status_text", "statusText")


def describe_error(error: Any) -> str:
    """Return a human-readable message for an arbitrary failure.

    Known authentication kinds map to fixed messages; other exceptions use
    their own message. Object- or mapping-shaped errors are inspected for
    ``error``, ``message``, and status code fields before falling back to a
    string rendering of the raw value.

    Args:
        error: Exception, mapping, string, or any other failure payload.

    Returns:
        str: Message suitable for display to the user.
    """
    if error is None or error == "" or error is False:
        return UNKNOWN_ERROR_MESSAGE
    if isinstance(error, WorkloadAuthError):
        return ERROR_MESSAGES[error.kind]
    if isinstance(error, ErrorKind):
        return ERROR_MESSAGES[error]
    if isinstance(error, BaseException):
        text = str(error)
        if text:
            return text
    if isinstance(error, str):
        return error

    described = _describe_fields(error)
    if described is not None:
        return described

    if isinstance(error, BaseException):
        return type(error).__name__
    try:
        return json.dumps(error)
    except (TypeError, ValueError):
        return repr(error)


def _describe_fields(error: Any) -> str | None:
    if isinstance(error, Mapping):
        fields = error
    else:
        fields = {
            name: getattr(error, name)
            for name in _ERROR_FIELDS
            if hasattr(error, name)
        }

    code = fields.get("error")
    kind = ErrorKind.from_code(code)
    if kind is not None:
        return ERROR_MESSAGES[kind]
    if isinstance(code, str) and code:
        return code

    message = fields.get("message")
    if isinstance(message, str) and message:
        return message

    status = fields.get("status_code", fields.get("statusCode"))
    if isinstance(status, int) and not isinstance(status, bool):
        status_text = fields.get("status_text") or fields.get("statusText") or "Request failed"
        return f"HTTP {status}: {status_text}"
    return None


__all__ = [
    "ErrorKind",
    "ERROR_MESSAGES",
    "NO_WORKSPACE_MESSAGE",
    "NO_CONTAINERS_MESSAGE",
    "UNKNOWN_ERROR_MESSAGE",
    "LakeCatalogError",
    "WorkloadAuthError",
    "describe_error",
]
