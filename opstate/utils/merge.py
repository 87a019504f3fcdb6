"""Default strategy for combining a previous output with a new one."""

from collections.abc import Mapping
from collections.abc import Set
from typing import Any


def merge_data(old: Any, new: Any) -> Any:
    """Merge *new* into *old* and return the combined value.

    Neither argument is mutated.

    * ``None`` on either side yields the other value.
    * Two mappings are shallow-merged into a new ``dict``; keys from *new* win.
    * Two lists/tuples are concatenated into a new ``list``.
    * Two sets are unioned.
    * Anything else is replaced by *new*.

    Example:
        >>> merge_data({"a": 1, "b": 1}, {"b": 2})
        {'a': 1, 'b': 2}
    """

    if old is None:
        return new
    if new is None:
        return old

    if isinstance(old, Mapping) and isinstance(new, Mapping):
        return {**old, **new}

    if isinstance(old, (list, tuple)) and isinstance(new, (list, tuple)):
        return [*old, *new]

    if isinstance(old, Set) and isinstance(new, Set):
        return old | new

    return new
