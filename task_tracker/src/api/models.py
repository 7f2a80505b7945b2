from __future__ import annotations

import time
import uuid
from typing import TypedDict


# PUBLIC_INTERFACE
class TaskEntity(TypedDict):
    """
    A lightweight domain model representing a Task inside the storage backends.

    Fields:
    - id: Opaque random identifier (UUID4 string), immutable after creation
    - title: Trimmed, non-empty title
    - completed: Boolean completion flag
    - created_at_ms: Creation timestamp in epoch milliseconds; drives list order
    """

    id: str
    title: str
    completed: bool
    created_at_ms: int


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return time.time_ns() // 1_000_000


def new_task_id() -> str:
    return str(uuid.uuid4())
