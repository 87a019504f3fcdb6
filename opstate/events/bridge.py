"""Forward Operation changes onto an :class:`~opstate.events.EventBus`.

Each committed batch (the synchronous part of ``start``, an ``end`` or a
``reset``) becomes one ``OPERATION_UPDATED`` event followed by one
field-specific event per changed field.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable
from typing import Dict
from typing import List
from typing import Optional

from opstate.observable import ANY
from opstate.observable import FieldChange
from opstate.operation import Operation
from opstate.schemas import FieldChangeSchema
from opstate.schemas import OperationUpdatedEvent

from .event_bus import EventBus
from .event_bus import EventType
from .publisher import publish_event_fire_and_forget

logger = logging.getLogger(__name__)

FIELD_EVENT_TYPES: Dict[str, EventType] = {
    "operation_state": EventType.OPERATION_STATE_CHANGED,
    "data": EventType.OPERATION_DATA_CHANGED,
    "error": EventType.OPERATION_ERROR_CHANGED,
}


def bind_operation(operation: Operation, bus: Optional[EventBus] = None) -> Callable[[], None]:
    """Publish every committed change of *operation* on *bus*.

    Events are scheduled on the running loop; batches committed while no loop
    is running are skipped.

    Returns:
        A function that stops forwarding.
    """

    def _forward(changes: List[FieldChange]) -> None:
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running event loop, not publishing changes of %s", operation.name)
            return

        event = OperationUpdatedEvent(
            name=operation.name,
            changes=[FieldChangeSchema(field=c.field, old=c.old, new=c.new) for c in changes],
            snapshot=operation.snapshot(),
        )
        payload = event.model_dump()
        payload["event_type"] = EventType.OPERATION_UPDATED
        publish_event_fire_and_forget(EventType.OPERATION_UPDATED, payload, bus=bus)

        for change in changes:
            event_type = FIELD_EVENT_TYPES[change.field]
            publish_event_fire_and_forget(
                event_type,
                {
                    "event_type": event_type,
                    "name": operation.name,
                    "old": change.old,
                    "new": change.new,
                },
                bus=bus,
            )

    return operation.observe(ANY, _forward)
