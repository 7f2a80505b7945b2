from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


# PUBLIC_INTERFACE
class Task(BaseModel):
    """
    A task as held by the client, parsed from the camelCase wire format.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., description="Unique opaque identifier of the task")
    title: str = Field(..., description="Trimmed task title")
    completed: bool = Field(default=False, description="Completion status flag")
    created_at_ms: int = Field(..., alias="createdAtMs", description="Creation time in epoch milliseconds")
