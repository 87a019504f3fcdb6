"""Event bus implementation for decoupled event handling."""

import asyncio
import logging
from enum import Enum
from typing import Any
from typing import Awaitable
from typing import Callable
from typing import Dict
from typing import Set

logger = logging.getLogger(__name__)


class EventType(str, Enum):
    """Standardized event types for operation changes."""

    # One committed batch (start / end / reset) on an operation
    OPERATION_UPDATED = "operation_updated"

    # Field-specific channels
    OPERATION_STATE_CHANGED = "operation_state_changed"
    OPERATION_DATA_CHANGED = "operation_data_changed"
    OPERATION_ERROR_CHANGED = "operation_error_changed"


class EventBus:
    """Central event bus for publishing and subscribing to events."""

    def __init__(self):
        """Initialize an empty event bus."""
        self._subscribers: Dict[EventType, Set[Callable[[Dict[str, Any]], Awaitable[None]]]] = {}

    async def publish(self, event_type: EventType, data: Dict[str, Any]) -> None:
        """Publish an event to all subscribers.

        Args:
            event_type: The type of event being published
            data: Event payload data
        """
        if event_type not in self._subscribers:
            return

        logger.debug("Publishing event %s with data: %s", event_type, data)

        # Fan out concurrently so a slow subscriber does not block the others.
        # return_exceptions=True lets every callback run; errors are logged.
        callbacks = list(self._subscribers[event_type])
        results = await asyncio.gather(*(callback(data) for callback in callbacks), return_exceptions=True)

        for callback, result in zip(callbacks, results):
            if isinstance(result, Exception):
                logger.error("Error in event handler %r for %s: %s", callback, event_type, result)

    def subscribe(self, event_type: EventType, callback: Callable[[Dict[str, Any]], Awaitable[None]]) -> None:
        """Subscribe to an event type.

        Args:
            event_type: The event type to subscribe to
            callback: Async callback function to handle the event
        """
        if event_type not in self._subscribers:
            self._subscribers[event_type] = set()

        self._subscribers[event_type].add(callback)
        logger.debug("Added subscriber for event %s", event_type)

    def unsubscribe(self, event_type: EventType, callback: Callable[[Dict[str, Any]], Awaitable[None]]) -> None:
        """Unsubscribe from an event type.

        Args:
            event_type: The event type to unsubscribe from
            callback: The callback function to remove
        """
        if event_type in self._subscribers:
            self._subscribers[event_type].discard(callback)
            logger.debug("Removed subscriber for event %s", event_type)

            # Clean up empty subscriber sets
            if not self._subscribers[event_type]:
                del self._subscribers[event_type]

    def subscriber_count(self, event_type: EventType) -> int:
        return len(self._subscribers.get(event_type, ()))


# Global event bus instance
event_bus = EventBus()
