"""Named, observable wrappers around asynchronous units of work."""

from opstate.constants import OperationStates
from opstate.exceptions import InvalidName
from opstate.exceptions import InvalidStartLogic
from opstate.exceptions import OperationConstructionError
from opstate.observable import ANY
from opstate.observable import FieldChange
from opstate.operation import Operation
from opstate.utils.merge import merge_data

__all__ = [
    "ANY",
    "FieldChange",
    "InvalidName",
    "InvalidStartLogic",
    "Operation",
    "OperationConstructionError",
    "OperationStates",
    "merge_data",
]
