"""Event bus and event publishing infrastructure."""

from .event_bus import EventBus
from .event_bus import EventType
from .event_bus import event_bus

__all__ = ["EventBus", "EventType", "event_bus"]
