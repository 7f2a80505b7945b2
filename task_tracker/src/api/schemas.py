from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .errors import ValidationError
from .models import TaskEntity


# PUBLIC_INTERFACE
def normalize_title(value: Any) -> str:
    """
    Validate and trim a task title.

    Raises:
        ValidationError: if the title is missing, not a string, or blank after trimming.
    """
    if not value or not isinstance(value, str):
        raise ValidationError("Title is required and must be a string")
    s = value.strip()
    if not s:
        raise ValidationError("Title cannot be empty")
    return s


# PUBLIC_INTERFACE
class TaskCreate(BaseModel):
    """
    Request body for creating a Task.

    The title is accepted as any JSON value so that the store, not the request parser,
    decides what counts as a valid title (missing, non-string and blank titles all map
    to a 400 with a specific message).
    """

    model_config = ConfigDict(
        extra="ignore",
        json_schema_extra={"example": {"title": "Buy groceries"}},
    )

    title: Optional[Any] = Field(default=None, description="Title of the new task; trimmed before storage")


# PUBLIC_INTERFACE
class TaskOut(BaseModel):
    """
    Wire and file representation of a Task.

    Serialized with camelCase keys (`createdAtMs`); accepts either the alias or the
    Python field name on input.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "id": "0b6c3c1e-5d52-4f0e-9a55-2f1d5f6c4e21",
                "title": "Buy groceries",
                "completed": False,
                "createdAtMs": 1737800130123,
            }
        },
    )

    id: str = Field(..., description="Unique opaque identifier of the task")
    title: str = Field(..., min_length=1, description="Trimmed task title")
    completed: bool = Field(..., description="Completion status flag")
    created_at_ms: int = Field(..., alias="createdAtMs", description="Creation time in epoch milliseconds")

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        """
        Reject whitespace-only titles; stored titles are already trimmed.
        """
        if not v.strip():
            raise ValueError("title must not be blank")
        return v

    @classmethod
    def from_entity(cls, entity: TaskEntity) -> "TaskOut":
        return cls(**entity)

    def to_entity(self) -> TaskEntity:
        return {
            "id": self.id,
            "title": self.title,
            "completed": self.completed,
            "created_at_ms": self.created_at_ms,
        }


class ErrorOut(BaseModel):
    """Error body returned by every failing endpoint."""

    error: str = Field(..., description="Human-readable error message")
