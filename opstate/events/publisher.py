"""Event publishing helpers.

Two ways to publish:

* :func:`publish_event` from async code – awaits every subscriber.
* :func:`publish_event_fire_and_forget` from synchronous code running inside
  an event loop – schedules a tracked task and returns immediately.

Publishing failures are logged and never raised to the caller.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any
from typing import Dict
from typing import Optional

from opstate.config import get_settings

from .event_bus import EventBus
from .event_bus import EventType
from .event_bus import event_bus

logger = logging.getLogger(__name__)

# Fire-and-forget tasks still running; cleared by their done callback.
_active_tasks: set = set()


async def publish_event(event_type: EventType, data: Dict[str, Any], *, bus: Optional[EventBus] = None) -> None:
    """Publish *data* and wait for every subscriber.

    Args:
        event_type: The event type to publish
        data: Event data dictionary
        bus: Target bus; defaults to the global :data:`event_bus`
    """
    try:
        await (bus or event_bus).publish(event_type, data)
    except Exception as e:
        logger.error("Failed to publish event %s: %s", event_type, e)


def publish_event_fire_and_forget(
    event_type: EventType, data: Dict[str, Any], *, bus: Optional[EventBus] = None
) -> None:
    """Schedule publication on the running loop without waiting for it.

    Logs an error and does nothing when no event loop is running.
    """
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        logger.error("Cannot publish fire-and-forget event %s - no running event loop", event_type)
        return

    task = loop.create_task(_publish_event_safe(event_type, data, bus or event_bus))
    _active_tasks.add(task)
    task.add_done_callback(_cleanup_task)


def _cleanup_task(task: asyncio.Task) -> None:
    """Remove task from tracking and log any exceptions."""
    _active_tasks.discard(task)

    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.error("Fire-and-forget event publishing task failed: %s", exc)


async def _publish_event_safe(event_type: EventType, data: Dict[str, Any], bus: EventBus) -> None:
    try:
        await bus.publish(event_type, data)
    except Exception as e:
        logger.error("Failed to publish fire-and-forget event %s: %s", event_type, e)


async def shutdown_event_publisher(timeout: Optional[float] = None) -> None:
    """Wait for all fire-and-forget tasks, cancelling them after *timeout*.

    *timeout* defaults to ``Settings.event_shutdown_timeout_s``.
    """
    if not _active_tasks:
        return

    if timeout is None:
        timeout = get_settings().event_shutdown_timeout_s

    logger.info("Waiting for %d active event publishing tasks to complete", len(_active_tasks))

    # Copy: tasks remove themselves from the set as they finish.
    pending_tasks = list(_active_tasks)

    try:
        await asyncio.wait_for(asyncio.gather(*pending_tasks, return_exceptions=True), timeout=timeout)
        logger.info("All event publishing tasks completed gracefully")
    except asyncio.TimeoutError:
        logger.warning("Timeout waiting for %d event publishing tasks, cancelling them", len(_active_tasks))
        for task in list(_active_tasks):
            if not task.done():
                task.cancel()


def get_active_task_count() -> int:
    """Get the number of active fire-and-forget tasks (for monitoring/debugging)."""
    return len(_active_tasks)
