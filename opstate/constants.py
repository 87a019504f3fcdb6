"""Lifecycle states shared by every :class:`~opstate.operation.Operation`."""

from enum import Enum


class OperationStates(str, Enum):
    """Closed set of lifecycle states.

    Values keep the camelCase spelling used on the wire by UI consumers.
    """

    NOT_STARTED = "notStarted"
    PENDING = "pending"

    # Never entered by Operation itself: ``end`` leaves the state untouched and
    # only ``data``/``error`` reflect the outcome.
    COMPLETED = "completed"
    FAILED = "failed"
