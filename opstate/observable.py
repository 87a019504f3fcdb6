"""Per-field change notification with batched delivery.

Subclasses declare the fields they expose in ``observable_fields`` and store
each one in a private ``_<field>`` attribute.  All writes go through
:meth:`Observable._set` so observers can react to them.  Writes made inside a
:meth:`Observable.transaction` block are delivered once, when the outermost
block exits, so observers never see a half-applied update.
"""

import logging
from contextlib import contextmanager
from typing import Any
from typing import Callable
from typing import Dict
from typing import Iterator
from typing import List
from typing import NamedTuple
from typing import Set
from typing import Tuple

logger = logging.getLogger(__name__)

# Subscribe to every field; the callback receives the whole batch.
ANY = "*"


class FieldChange(NamedTuple):
    field: str
    old: Any
    new: Any


FieldObserver = Callable[[FieldChange], None]
BatchObserver = Callable[[List[FieldChange]], None]


class Observable:
    """Mixin giving a class observable fields and transaction boundaries."""

    observable_fields: Tuple[str, ...] = ()

    def __init__(self) -> None:
        self._observers: Dict[str, Set[Callable[[Any], None]]] = {}
        self._batch_depth = 0
        self._pending: Dict[str, FieldChange] = {}

    # ------------------------------------------------------------------
    # Subscription
    # ------------------------------------------------------------------

    def observe(self, field: str, callback: Callable[[Any], None]) -> Callable[[], None]:
        """Register *callback* for changes to *field*.

        Args:
            field: One of ``observable_fields`` or :data:`ANY`.
            callback: Called with a :class:`FieldChange` for a single field,
                or with the list of changes of a committed batch for
                :data:`ANY`.

        Returns:
            A no-argument function that removes the subscription.
        """
        if field != ANY and field not in self.observable_fields:
            raise ValueError(f"{type(self).__name__} has no observable field {field!r}")

        self._observers.setdefault(field, set()).add(callback)
        logger.debug("Added observer for %s.%s", type(self).__name__, field)

        def _unsubscribe() -> None:
            self.unobserve(field, callback)

        return _unsubscribe

    def unobserve(self, field: str, callback: Callable[[Any], None]) -> None:
        observers = self._observers.get(field)
        if observers is None:
            return
        observers.discard(callback)
        if not observers:
            del self._observers[field]

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    @contextmanager
    def transaction(self) -> Iterator[None]:
        """Defer notifications until the outermost transaction exits."""
        self._batch_depth += 1
        try:
            yield
        finally:
            self._batch_depth -= 1
            if self._batch_depth == 0:
                self._flush()

    def _set(self, field: str, value: Any) -> None:
        attr = f"_{field}"
        old = getattr(self, attr)
        if old is value:
            return

        setattr(self, attr, value)

        previous = self._pending.get(field)
        first_old = previous.old if previous is not None else old
        self._pending[field] = FieldChange(field, first_old, value)

        if self._batch_depth == 0:
            self._flush()

    def _flush(self) -> None:
        changes = [change for change in self._pending.values() if change.old is not change.new]
        self._pending = {}
        if not changes:
            return

        for change in changes:
            for callback in list(self._observers.get(change.field, ())):
                self._notify(callback, change)

        for callback in list(self._observers.get(ANY, ())):
            self._notify(callback, changes)

    def _notify(self, callback: Callable[[Any], None], payload: Any) -> None:
        try:
            callback(payload)
        except Exception as e:
            logger.error("Error in observer %r for %s: %s", callback, type(self).__name__, e)
