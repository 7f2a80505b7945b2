"""
In-memory task list with optimistic updates.

Every mutation is applied to the local list first, then sent to the backend.
The backend's answer either commits the tentative state (possibly replacing it
with a fresh authoritative list) or rolls it back to the snapshot taken before
the change. Outcomes are returned as SyncResult values rather than raised.
"""
from __future__ import annotations

import enum
import logging
import uuid
from dataclasses import dataclass
from typing import Callable, List, Optional

from ..api.models import now_ms
from .backends import TaskBackend
from .errors import ApiError
from .models import Task

logger = logging.getLogger(__name__)


# PUBLIC_INTERFACE
class ListStatus(str, enum.Enum):
    """Lifecycle of a task list: IDLE -> LOADING -> READY | ERRORED."""

    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    ERRORED = "errored"


# PUBLIC_INTERFACE
@dataclass(frozen=True)
class SyncResult:
    """
    Outcome of a list operation.

    - ok: True when the change was committed
    - error: human-readable message when it was not
    - task: the affected task as the backend returned it, when there is one
    """

    ok: bool
    error: Optional[str] = None
    task: Optional[Task] = None

    @classmethod
    def success(cls, task: Optional[Task] = None) -> "SyncResult":
        return cls(ok=True, task=task)

    @classmethod
    def failure(cls, error: str) -> "SyncResult":
        return cls(ok=False, error=error)


# PUBLIC_INTERFACE
class TaskList:
    """
    Client-side task collection reconciled against a TaskBackend.

    The list keeps a single ordered sequence; active/completed are filtered views
    over it. Calls are synchronous, so backend answers are applied in the order
    the operations were issued.
    """

    def __init__(self, backend: TaskBackend, clock: Optional[Callable[[], int]] = None) -> None:
        self._backend = backend
        self._clock = clock or now_ms
        self._tasks: List[Task] = []
        self.status: ListStatus = ListStatus.IDLE
        self.error: Optional[str] = None

    # Views

    @property
    def tasks(self) -> List[Task]:
        return list(self._tasks)

    @property
    def active(self) -> List[Task]:
        return [t for t in self._tasks if not t.completed]

    @property
    def completed(self) -> List[Task]:
        return [t for t in self._tasks if t.completed]

    @property
    def active_count(self) -> int:
        return len(self.active)

    @property
    def completed_count(self) -> int:
        return len(self.completed)

    @property
    def is_empty(self) -> bool:
        return not self._tasks

    # Internals

    def _snapshot(self) -> List[Task]:
        return [t.model_copy() for t in self._tasks]

    def _rollback(self, snapshot: List[Task], action: str, exc: ApiError) -> SyncResult:
        logger.warning("Reverting %s: %s", action, exc.message)
        self._tasks = snapshot
        self.error = exc.message
        return SyncResult.failure(exc.message)

    def _index_of(self, task_id: str) -> Optional[int]:
        for i, t in enumerate(self._tasks):
            if t.id == task_id:
                return i
        return None

    def _refetch(self) -> SyncResult:
        self.status = ListStatus.LOADING
        try:
            fresh = self._backend.list_tasks()
        except ApiError as e:
            logger.warning("Loading tasks failed: %s", e.message)
            self.status = ListStatus.ERRORED
            self.error = e.message
            return SyncResult.failure(e.message)
        self._tasks = list(fresh)
        self.status = ListStatus.READY
        self.error = None
        return SyncResult.success()

    # Operations

    # PUBLIC_INTERFACE
    def load(self) -> SyncResult:
        """Replace the list with the backend's authoritative contents."""
        return self._refetch()

    # PUBLIC_INTERFACE
    def retry(self) -> SyncResult:
        """Reload after a failed load. Does nothing unless the list is ERRORED."""
        if self.status is not ListStatus.ERRORED:
            return SyncResult.failure(f"Nothing to retry while {self.status.value}")
        return self._refetch()

    # PUBLIC_INTERFACE
    def add(self, title: str) -> SyncResult:
        """
        Prepend a provisional task, then create it on the backend.

        On success the provisional entry is swapped for the backend's task in place;
        on failure the list returns to its state before the call.
        """
        clean = (title or "").strip()
        if not clean:
            return SyncResult.failure("Title cannot be empty")

        snapshot = self._snapshot()
        provisional = Task(id=str(uuid.uuid4()), title=clean, completed=False, created_at_ms=self._clock())
        self._tasks.insert(0, provisional)

        try:
            created = self._backend.create_task(clean)
        except ApiError as e:
            return self._rollback(snapshot, "add", e)

        index = self._index_of(provisional.id)
        if index is None:
            self._tasks.insert(0, created)
        else:
            self._tasks[index] = created
        self.error = None
        return SyncResult.success(created)

    # PUBLIC_INTERFACE
    def toggle(self, task_id: str) -> SyncResult:
        """
        Flip a task and move it to the front, then reconcile with the backend.

        The move is local only: the store keeps createdAtMs on toggle, so the
        refetched list puts the task back at its creation position.
        """
        index = self._index_of(task_id)
        if index is None:
            return SyncResult.failure("Task not found")

        snapshot = self._snapshot()
        task = self._tasks.pop(index)
        touched = task.model_copy(update={"completed": not task.completed, "created_at_ms": self._clock()})
        self._tasks.insert(0, touched)

        try:
            updated = self._backend.toggle_task(task_id)
        except ApiError as e:
            return self._rollback(snapshot, "toggle", e)

        result = self._refetch()
        if not result.ok:
            return result
        return SyncResult.success(updated)

    # PUBLIC_INTERFACE
    def delete(self, task_id: str) -> SyncResult:
        """Remove a task locally, then on the backend; restore it if that fails."""
        index = self._index_of(task_id)
        if index is None:
            return SyncResult.failure("Task not found")

        snapshot = self._snapshot()
        removed = self._tasks.pop(index)

        try:
            self._backend.delete_task(task_id)
        except ApiError as e:
            return self._rollback(snapshot, "delete", e)

        self.error = None
        return SyncResult.success(removed)
