"""
Event bus for the reel display.

Provides pub/sub messaging from the controller and the live channel to
the display layer (status line, headless activity log).
"""

from dataclasses import dataclass, field
from typing import Any, Callable
from enum import Enum, auto
import logging
import time
from collections import defaultdict

logger = logging.getLogger(__name__)


class EventType(Enum):
    """Built-in event types."""
    # Catalog events
    CATALOG_LOADED = auto()
    CATALOG_FAILED = auto()

    # Spin events
    SPIN_QUEUED = auto()
    SPIN_STARTED = auto()
    SPIN_COMPLETED = auto()
    SPIN_DROPPED = auto()

    # Presentation events
    FEED_UPDATED = auto()
    OVERLAY_SHOWN = auto()
    OVERLAY_DISMISSED = auto()

    # Push channel events
    CHANNEL_CONNECTED = auto()
    CHANNEL_DISCONNECTED = auto()
    CHANNEL_ERROR = auto()


@dataclass
class Event:
    """
    Event data container.

    Attributes:
        type: Event type
        data: Event payload
        source: Component that emitted the event
        timestamp: Wall-clock time the event was created
    """
    type: EventType
    data: dict[str, Any] = field(default_factory=dict)
    source: str = "system"
    timestamp: float = field(default_factory=time.time)


Handler = Callable[[Event], None]


class EventBus:
    """
    Central event bus for component communication.

    Dispatch is synchronous: everything runs on the display's event loop
    thread, so handlers see events in emit order.
    """

    def __init__(self) -> None:
        self._handlers: dict[EventType, list[Handler]] = defaultdict(list)
        self._global_handlers: list[Handler] = []

    def subscribe(self, event_type: EventType, handler: Handler) -> Callable[[], None]:
        """
        Subscribe to an event type.

        Returns:
            Unsubscribe function
        """
        self._handlers[event_type].append(handler)
        logger.debug(f"Handler subscribed to {event_type}")

        def unsubscribe() -> None:
            if handler in self._handlers[event_type]:
                self._handlers[event_type].remove(handler)
                logger.debug(f"Handler unsubscribed from {event_type}")

        return unsubscribe

    def subscribe_all(self, handler: Handler) -> Callable[[], None]:
        """Subscribe to all events. Returns an unsubscribe function."""
        self._global_handlers.append(handler)

        def unsubscribe() -> None:
            if handler in self._global_handlers:
                self._global_handlers.remove(handler)

        return unsubscribe

    def emit(self, event: Event) -> None:
        """Dispatch an event to its subscribers, then to global handlers."""
        handlers = list(self._handlers.get(event.type, [])) + list(self._global_handlers)
        for handler in handlers:
            try:
                handler(event)
            except Exception as e:
                logger.error(f"Error in event handler for {event.type}: {e}")


# Convenience constructors for reel events
def spin_event(event_type: EventType, prize_id: str, prize_name: str,
               spinner_name: str | None = None, **extra: Any) -> Event:
    """Create a spin lifecycle event."""
    data = {"prize_id": prize_id, "prize_name": prize_name, "spinner_name": spinner_name}
    data.update(extra)
    return Event(event_type, data=data, source="reel")


def channel_event(event_type: EventType, club_id: str, **extra: Any) -> Event:
    """Create a push channel event."""
    return Event(event_type, data={"club_id": club_id, **extra}, source="channel")
