"""Event data models and types for the presentation boundary."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Protocol

APP_EVENT_TOPIC = "app-event"

WATCHER_STATUS = "WatcherStatus"
BATCH_UPDATE = "BatchUpdate"


@dataclass(frozen=True)
class Event:
    """
    Immutable event delivered to bus subscribers.

    Attributes:
        event_type: Topic the event was emitted on (e.g., "app-event")
        timestamp: When the event was emitted
        source: Origin of the event (e.g., "log_watcher")
        data: Tagged payload, ``{"type": ..., "payload": {...}}``
    """

    event_type: str
    timestamp: datetime
    source: str
    data: dict[str, Any]


class EventHandler(Protocol):
    """
    Protocol defining the interface for event handlers.

    Example:
        def my_handler(event: Event) -> None:
            print(f"Received event: {event.data['type']}")

        bus.subscribe("app-event", my_handler)
    """

    def __call__(self, event: Event) -> None: ...


class EventSink(Protocol):
    """Single boundary call used by the watcher to hand data to the presentation layer.

    Implementations must not block the caller for long; delivery is
    fire-and-forget from the watcher's point of view.
    """

    def emit(self, topic: str, payload: dict[str, Any]) -> None: ...


def watcher_status(active: bool, path: str) -> dict[str, Any]:
    """Build a ``WatcherStatus`` tagged payload."""
    return {"type": WATCHER_STATUS, "payload": {"active": active, "path": path}}


def batch_update(logs: list[dict[str, Any]], agents: list[dict[str, Any]]) -> dict[str, Any]:
    """Build a ``BatchUpdate`` tagged payload."""
    return {"type": BATCH_UPDATE, "payload": {"logs": logs, "agents": agents}}
