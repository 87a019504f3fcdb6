"""Operation – a named, observable wrapper around one asynchronous unit of work.

An :class:`Operation` tracks three observable fields:

* ``operation_state`` – where the work is in its lifecycle,
* ``data`` – the most recent successful output,
* ``error`` – the most recent error payload.

Callers either let the wrapped callback drive the lifecycle through
:meth:`Operation.start`, or report completion out of band through
:meth:`Operation.end`.  Failures are data: they reach observers through
``error`` just like successful output reaches them through ``data``.

``end`` never moves ``operation_state`` out of ``pending``; the outcome is only
visible through ``data``/``error``.
"""

from __future__ import annotations

import inspect
import logging
from typing import Any
from typing import Awaitable
from typing import Callable
from typing import Optional

from opstate.config import get_settings
from opstate.constants import OperationStates
from opstate.exceptions import InvalidName
from opstate.exceptions import InvalidStartLogic
from opstate.observable import Observable
from opstate.schemas import OperationSnapshot
from opstate.utils.merge import merge_data

logger = logging.getLogger(__name__)

MergeFunction = Callable[[Any, Any], Any]


class Operation(Observable):
    """Represents one named, repeatable asynchronous task instance."""

    observable_fields = ("operation_state", "data", "error")

    def __init__(
        self,
        name: str,
        start_logic: Callable[..., Any],
        *,
        merge: Optional[MergeFunction] = None,
        discard_stale: Optional[bool] = None,
    ) -> None:
        """Create an Operation.

        Args:
            name: Unique, non-empty name of the operation.
            start_logic: Callback invoked by :meth:`start`.  It may return a
                plain value or an awaitable.
            merge: Strategy used when old data is persisted; defaults to
                :func:`opstate.utils.merge.merge_data`.
            discard_stale: Drop results of a ``start`` that was superseded by
                a later ``start`` or ``reset`` while its callback ran.
                Defaults to ``Settings.discard_stale_results``.

        Raises:
            InvalidName: *name* is not a non-empty string.
            InvalidStartLogic: *start_logic* (or *merge*) is not callable.
        """
        if not name or not isinstance(name, str):
            raise InvalidName(name)
        if not callable(start_logic):
            raise InvalidStartLogic(start_logic)
        if merge is not None and not callable(merge):
            raise InvalidStartLogic(merge, argument="merge")

        super().__init__()

        self._name = name
        self._start_logic = start_logic
        self._merge: MergeFunction = merge if merge is not None else merge_data
        self._discard_stale = get_settings().discard_stale_results if discard_stale is None else discard_stale

        self._operation_state = OperationStates.NOT_STARTED
        self._data: Any = None
        self._error: Any = None
        self._generation = 0

    def __repr__(self) -> str:
        return f"Operation(name={self._name!r}, state={self._operation_state.value})"

    # ------------------------------------------------------------------
    # Read-only accessors
    # ------------------------------------------------------------------

    @property
    def name(self) -> str:
        return self._name

    @property
    def operation_state(self) -> OperationStates:
        return self._operation_state

    @property
    def data(self) -> Any:
        return self._data

    @property
    def error(self) -> Any:
        return self._error

    @property
    def generation(self) -> int:
        """Incremented by every ``start`` and ``reset``."""
        return self._generation

    def snapshot(self) -> OperationSnapshot:
        return OperationSnapshot(
            name=self._name,
            operation_state=self._operation_state,
            data=self._data,
            error=self._error,
        )

    # ------------------------------------------------------------------
    # Mutators
    # ------------------------------------------------------------------

    def start(self, persist_old_data: bool, *start_args: Any, **start_kwargs: Any) -> Awaitable[None]:
        """Run the owned callback and record its result.

        The state moves to ``pending`` and ``error`` is cleared as soon as
        ``start`` is called, before the callback runs; ``data`` is cleared too
        unless *persist_old_data* is set, in which case the result is merged
        into it.  The callback is invoked right away and the returned
        awaitable settles once its result has been passed to :meth:`end`::

            pending = op.start(False, page=1)   # op.operation_state is PENDING
            await pending                       # op.data holds the result

        Exceptions raised by the callback propagate unchanged and leave
        ``error`` untouched: a synchronous callback raises from ``start``
        itself, an asynchronous one from the returned awaitable.  Drivers
        that want failures recorded call ``end(exc, True, ...)`` themselves.
        """
        with self.transaction():
            self._generation += 1
            generation = self._generation
            self._set("operation_state", OperationStates.PENDING)
            if not persist_old_data:
                self._set("data", None)
            self._set("error", None)

        logger.debug("Operation %s started (generation %d)", self._name, generation)

        result = self._start_logic(*start_args, **start_kwargs)
        return self._settle(result, generation, persist_old_data)

    async def _settle(self, result: Any, generation: int, persist_old_data: bool) -> None:
        if inspect.isawaitable(result):
            result = await result

        if self._discard_stale and generation != self._generation:
            logger.info(
                "Discarding stale result of %s (generation %d, current %d)",
                self._name,
                generation,
                self._generation,
            )
            return

        self.end(result, False, persist_old_data)

    def end(self, data: Any, is_error: bool = False, should_persist_old_data: bool = False) -> None:
        """Record a completion.

        Normally called by :meth:`start`, but may be called directly when
        completion is signalled by another execution path.  Exactly one of
        ``data``/``error`` is assigned; ``operation_state`` is left alone.
        """
        with self.transaction():
            if is_error:
                self._set("error", data)
            elif should_persist_old_data:
                self._set("data", self._merge(self._data, data))
            else:
                self._set("data", data)

        logger.debug("Operation %s ended (is_error=%s)", self._name, is_error)

    def reset(self) -> None:
        """Clear output and error and return to ``not_started``."""
        with self.transaction():
            self._generation += 1
            self._set("data", None)
            self._set("error", None)
            self._set("operation_state", OperationStates.NOT_STARTED)

        logger.debug("Operation %s reset", self._name)
