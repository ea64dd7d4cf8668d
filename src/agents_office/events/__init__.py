"""Event delivery from the watcher to the presentation layer."""

from agents_office.events.bus import EventBus
from agents_office.events.models import (
    APP_EVENT_TOPIC,
    BATCH_UPDATE,
    WATCHER_STATUS,
    Event,
    EventHandler,
    EventSink,
    batch_update,
    watcher_status,
)

__all__ = [
    "APP_EVENT_TOPIC",
    "BATCH_UPDATE",
    "WATCHER_STATUS",
    "Event",
    "EventBus",
    "EventHandler",
    "EventSink",
    "batch_update",
    "watcher_status",
]
