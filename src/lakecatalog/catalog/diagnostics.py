"""Structured diagnostic events emitted for recoverable failures."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, Protocol

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class DiagnosticEvent:
    """A recoverable failure observed while building the catalog.

    Attributes:
        code: Stable identifier such as ``workspace_resolution_failed``.
        message: Human-readable description of the failure.
        container_id: Container the failure relates to, when any.
        container_name: Display name of that container.
        error: Original exception, kept for callers that want the traceback.
        timestamp: When the event was recorded (UTC).
    """

    code: str
    message: str
    container_id: Optional[str] = None
    container_name: Optional[str] = None
    error: Optional[BaseException] = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class DiagnosticSink(Protocol):
    """Receiver for diagnostic events."""

    def emit(self, event: DiagnosticEvent) -> None: ...


class LoggingDiagnosticSink:
    """Forward diagnostic events to the standard logging system."""

    def __init__(self, logger: logging.Logger | None = None, level: int = logging.WARNING) -> None:
        self._logger = logger or LOGGER
        self._level = level

    def emit(self, event: DiagnosticEvent) -> None:
        self._logger.log(
            self._level,
            "%s: %s",
            event.code,
            event.message,
            extra={
                "diagnostic_code": event.code,
                "container_id": event.container_id,
                "container_name": event.container_name,
            },
        )


class CollectingDiagnosticSink:
    """Keep events in memory, optionally forwarding them to another sink."""

    def __init__(self, forward: DiagnosticSink | None = None) -> None:
        self.events: list[DiagnosticEvent] = []
        self._forward = forward

    def emit(self, event: DiagnosticEvent) -> None:
        self.events.append(event)
        if self._forward is not None:
            self._forward.emit(event)

    def codes(self) -> list[str]:
        """Return the codes of all collected events in emission order."""
        return [event.code for event in self.events]


__all__ = [
    "DiagnosticEvent",
    "DiagnosticSink",
    "LoggingDiagnosticSink",
    "CollectingDiagnosticSink",
]
