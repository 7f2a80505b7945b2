from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from functools import lru_cache
from pathlib import Path
from threading import RLock
from typing import Any, Callable, Iterable, List, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from .errors import NotFoundError, StorageError
from .models import TaskEntity, new_task_id, now_ms
from .schemas import TaskOut, normalize_title
from .settings import get_settings

logger = logging.getLogger(__name__)

Clock = Callable[[], int]
IdFactory = Callable[[], str]


def sort_newest_first(items: Iterable[TaskEntity]) -> List[TaskEntity]:
    """
    Order tasks by created_at_ms descending.

    Sorting the reversed collection keeps the sort stable with later insertions first,
    so two tasks created within the same millisecond still list newest-first.
    """
    return sorted(reversed(list(items)), key=lambda t: t["created_at_ms"], reverse=True)


# PUBLIC_INTERFACE
class TaskRepository(ABC):
    """
    Abstract repository contract for task storage backends.

    Every backend shares the same validation, id/timestamp assignment and ordering;
    subclasses only decide where the collection lives via _load/_save. The whole
    collection is read, mutated and written back on every call.
    """

    def __init__(self, clock: Optional[Clock] = None, id_factory: Optional[IdFactory] = None) -> None:
        self._lock = RLock()
        self._clock: Clock = clock or now_ms
        self._id_factory: IdFactory = id_factory or new_task_id

    @abstractmethod
    def _load(self) -> List[TaskEntity]:
        """Return the full stored collection in insertion order."""

    @abstractmethod
    def _save(self, items: List[TaskEntity]) -> None:
        """Replace the full stored collection."""

    def list_all(self) -> List[TaskEntity]:
        """Return copies of all tasks, newest created_at_ms first."""
        with self._lock:
            return [t.copy() for t in sort_newest_first(self._load())]

    def create(self, title: Any) -> TaskEntity:
        """
        Create and return a new task.

        Raises:
            ValidationError: title missing, not a string, or blank.
            StorageError: the collection could not be read or written.
        """
        clean_title = normalize_title(title)
        with self._lock:
            items = self._load()
            entity: TaskEntity = {
                "id": self._id_factory(),
                "title": clean_title,
                "completed": False,
                "created_at_ms": self._clock(),
            }
            items.append(entity)
            self._save(items)
            logger.info("Created task %s", entity["id"])
            return entity.copy()

    def toggle(self, task_id: str) -> TaskEntity:
        """
        Flip the completed flag of a task and return it.

        created_at_ms is left untouched, so toggling never changes list order.
        """
        with self._lock:
            items = self._load()
            for i, existing in enumerate(items):
                if existing["id"] == task_id:
                    updated = existing.copy()
                    updated["completed"] = not existing["completed"]
                    items[i] = updated
                    self._save(items)
                    logger.info("Toggled task %s to completed=%s", task_id, updated["completed"])
                    return updated.copy()
        raise NotFoundError()

    def delete(self, task_id: str) -> None:
        """Remove a task. Raises NotFoundError for unknown ids."""
        with self._lock:
            items = self._load()
            remaining = [t for t in items if t["id"] != task_id]
            if len(remaining) == len(items):
                raise NotFoundError()
            self._save(remaining)
            logger.info("Deleted task %s", task_id)


class InMemoryRepository(TaskRepository):
    """
    In-memory repository suitable for testing and ephemeral runs.
    """

    def __init__(
        self,
        items: Optional[Iterable[TaskEntity]] = None,
        clock: Optional[Clock] = None,
        id_factory: Optional[IdFactory] = None,
    ) -> None:
        super().__init__(clock=clock, id_factory=id_factory)
        self._items: List[TaskEntity] = [t.copy() for t in items or []]

    def _load(self) -> List[TaskEntity]:
        return [t.copy() for t in self._items]

    def _save(self, items: List[TaskEntity]) -> None:
        self._items = [t.copy() for t in items]


class JsonFileRepository(TaskRepository):
    """
    Repository persisting the whole collection as one JSON array of Task objects.

    The lock only serializes callers inside this process; separate processes writing
    the same file race and the last writer wins.
    """

    def __init__(
        self,
        path: Union[str, Path],
        clock: Optional[Clock] = None,
        id_factory: Optional[IdFactory] = None,
    ) -> None:
        super().__init__(clock=clock, id_factory=id_factory)
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> List[TaskEntity]:
        if not self._path.exists():
            return []
        try:
            with self._path.open("r", encoding="utf-8") as f:
                raw = json.load(f)
        except (OSError, ValueError) as e:
            logger.error("Failed to read tasks from %s: %s", self._path, e)
            raise StorageError(f"Failed to read tasks from {self._path}") from e

        if not isinstance(raw, list):
            logger.error("Task file %s does not contain a JSON array", self._path)
            raise StorageError(f"Task file {self._path} is not a JSON array")
        try:
            return [TaskOut.model_validate(item).to_entity() for item in raw]
        except PydanticValidationError as e:
            logger.error("Task file %s contains invalid tasks: %s", self._path, e)
            raise StorageError(f"Task file {self._path} contains invalid tasks") from e

    def _save(self, items: List[TaskEntity]) -> None:
        payload = [TaskOut.from_entity(t).model_dump(by_alias=True) for t in items]
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with self._path.open("w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2, ensure_ascii=False)
        except OSError as e:
            logger.error("Failed to write tasks to %s: %s", self._path, e)
            raise StorageError(f"Failed to write tasks to {self._path}") from e
        logger.debug("Wrote %d tasks to %s", len(items), self._path)


# PUBLIC_INTERFACE
@lru_cache(maxsize=1)
def get_repository() -> TaskRepository:
    """
    Return the process-wide repository configured by settings.
    - json: JsonFileRepository at TASKS_DATA_FILE (default)
    - memory: InMemoryRepository
    """
    settings = get_settings()
    if settings.persistence_backend == "memory":
        return InMemoryRepository()
    return JsonFileRepository(settings.tasks_data_file)
