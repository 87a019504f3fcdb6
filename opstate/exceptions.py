"""Errors raised while constructing an Operation.

Failures of the wrapped work are *not* modelled as exceptions here; they are
data carried through ``Operation.error``.
"""


class OperationConstructionError(Exception):
    """Base class for invalid Operation arguments."""


class InvalidName(OperationConstructionError, ValueError):
    """Operation name is missing, empty or not a string."""

    def __init__(self, name):
        super().__init__(f"name must be a non-empty string, got {name!r}")
        self.name = name


class InvalidStartLogic(OperationConstructionError, TypeError):
    """A callback handed to Operation cannot be invoked."""

    def __init__(self, value, argument: str = "start_logic"):
        super().__init__(f"{argument} must be callable, got {type(value).__name__}")
        self.value = value
        self.argument = argument
