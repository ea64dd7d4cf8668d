"""In-process fan-out from the watcher thread to event consumers."""

import logging
import threading
import uuid
from datetime import UTC, datetime
from typing import Any

from agents_office.events.models import Event, EventHandler

logger = logging.getLogger(__name__)


class EventBus:
    """Topic-keyed fan-out used as the watcher's :class:`EventSink`.

    ``emit`` is called from the watcher thread and invokes every handler
    subscribed to the topic on that same thread, in subscription order.
    Handlers are expected to hand the event off (the server pushes it onto
    an asyncio queue) and return. A handler that raises is logged and
    skipped; the remaining handlers still see the event.
    """

    def __init__(self, source: str = "log_watcher") -> None:
        self.source = source
        self._lock = threading.Lock()
        # topic -> {subscription id: handler}, insertion ordered
        self._handlers: dict[str, dict[str, EventHandler]] = {}
        self._topic_by_id: dict[str, str] = {}

    def subscribe(self, topic: str, handler: EventHandler) -> str:
        """Register ``handler`` for ``topic`` and return its subscription id."""
        subscription_id = uuid.uuid4().hex
        with self._lock:
            self._handlers.setdefault(topic, {})[subscription_id] = handler
            self._topic_by_id[subscription_id] = topic

        logger.debug(
            "Handler subscribed",
            extra={"topic": topic, "subscription_id": subscription_id},
        )
        return subscription_id

    def unsubscribe(self, subscription_id: str) -> bool:
        """Drop a subscription. Returns False when the id is unknown."""
        with self._lock:
            topic = self._topic_by_id.pop(subscription_id, None)
            if topic is not None:
                handlers = self._handlers[topic]
                del handlers[subscription_id]
                if not handlers:
                    del self._handlers[topic]

        if topic is None:
            logger.warning(
                "Unknown subscription id",
                extra={"subscription_id": subscription_id},
            )
            return False

        logger.debug(
            "Handler unsubscribed",
            extra={"topic": topic, "subscription_id": subscription_id},
        )
        return True

    def emit(self, topic: str, payload: dict[str, Any]) -> None:
        """Deliver a tagged ``{"type": ..., "payload": ...}`` dict on ``topic``."""
        with self._lock:
            # Copied so handlers may subscribe or unsubscribe while being called
            handlers = list(self._handlers.get(topic, {}).items())

        if not handlers:
            return

        event = Event(
            event_type=topic,
            timestamp=datetime.now(UTC),
            source=self.source,
            data=payload,
        )
        for subscription_id, handler in handlers:
            try:
                handler(event)
            except Exception as e:
                logger.error(
                    "Event handler failed",
                    extra={
                        "topic": topic,
                        "payload_type": payload.get("type"),
                        "subscription_id": subscription_id,
                        "error": str(e),
                        "error_type": type(e).__name__,
                    },
                )
