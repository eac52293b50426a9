"""
Synchronous event bus for decoded bus events.
"""

import logging
from typing import Callable, Dict, List

from .events import CecEvent, EventType

logger = logging.getLogger(__name__)

Subscriber = Callable[[CecEvent], None]


class EventBus:
    """
    Delivers events to subscribers registered per event type.

    Delivery is synchronous and in subscription order. A failing subscriber is
    logged and skipped so the stream keeps flowing.
    """

    def __init__(self):
        self._handlers: Dict[EventType, List[Subscriber]] = {}
        self._wildcard: List[Subscriber] = []

    def subscribe(self, event_type: EventType, handler: Subscriber):
        """Subscribe to one event type."""
        self._handlers.setdefault(event_type, []).append(handler)

    def subscribe_all(self, handler: Subscriber):
        """Subscribe to every event."""
        self._wildcard.append(handler)

    def unsubscribe(self, event_type: EventType, handler: Subscriber):
        """Unsubscribe from one event type."""
        handlers = self._handlers.get(event_type)
        if handlers and handler in handlers:
            handlers.remove(handler)

    def emit(self, event: CecEvent):
        """Emit an event to all subscribers."""
        for handler in self._handlers.get(event.event_type, []) + self._wildcard:
            try:
                handler(event)
            except Exception as e:
                logger.error(f"Event handler error for {event.event_type.value}: {e}")

    def clear(self):
        """Clear all subscriptions."""
        self._handlers.clear()
        self._wildcard.clear()
