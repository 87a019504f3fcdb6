"""Pydantic models describing Operation state and change events.

These are the payloads handed to event-bus subscribers, so they carry the
output/error values as-is (no coercion).
"""

from __future__ import annotations

from typing import Any
from typing import List
from typing import Optional

from pydantic import BaseModel
from pydantic import Field

from opstate.constants import OperationStates

# ---------------------------------------------------------------------------
# Snapshot
# ---------------------------------------------------------------------------


class OperationSnapshot(BaseModel):
    """Point-in-time copy of an Operation's observable fields."""

    name: str = Field(..., description="Operation identifier")
    operation_state: OperationStates = Field(..., description="Current lifecycle state")
    data: Optional[Any] = Field(None, description="Most recent successful output")
    error: Optional[Any] = Field(None, description="Most recent error payload")


# ---------------------------------------------------------------------------
# Change events
# ---------------------------------------------------------------------------


class FieldChangeSchema(BaseModel):
    field: str = Field(..., description="Name of the changed field")
    old: Optional[Any] = Field(None, description="Value before the batch")
    new: Optional[Any] = Field(None, description="Value after the batch")


class OperationUpdatedEvent(BaseModel):
    """One committed batch of changes on a single Operation."""

    name: str = Field(..., description="Operation identifier")
    changes: List[FieldChangeSchema] = Field(default_factory=list, description="Fields changed by the batch")
    snapshot: OperationSnapshot = Field(..., description="State after the batch")
