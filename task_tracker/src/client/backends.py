from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional, Union

from ..api.errors import TaskError
from ..api.models import TaskEntity
from ..api.repositories import JsonFileRepository
from ..api.settings import Settings, get_settings
from .errors import ApiError
from .gateway import TaskApiClient
from .models import Task


# PUBLIC_INTERFACE
class TaskBackend(ABC):
    """
    Storage interface the TaskList reconciles against.

    Implementations raise ApiError for every failure. Exactly one backend is used
    per deployment; they are never chained.
    """

    @abstractmethod
    def list_tasks(self) -> List[Task]:
        """Return the authoritative task list, newest first."""

    @abstractmethod
    def create_task(self, title: str) -> Task:
        """Persist a new task and return it with its assigned id and timestamp."""

    @abstractmethod
    def toggle_task(self, task_id: str) -> Task:
        """Flip a task's completed flag and return the updated task."""

    @abstractmethod
    def delete_task(self, task_id: str) -> None:
        """Remove a task."""


class ApiTaskBackend(TaskBackend):
    """Backend talking to the Task API over HTTP."""

    def __init__(self, client: TaskApiClient) -> None:
        self._client = client

    def list_tasks(self) -> List[Task]:
        return self._client.fetch_tasks()

    def create_task(self, title: str) -> Task:
        return self._client.create_task(title)

    def toggle_task(self, task_id: str) -> Task:
        return self._client.toggle_task(task_id)

    def delete_task(self, task_id: str) -> None:
        self._client.delete_task(task_id)


@contextmanager
def _as_api_error() -> Iterator[None]:
    try:
        yield
    except TaskError as e:
        raise ApiError(e.message, e.status_code) from e
    except (OSError, ValueError) as e:
        raise ApiError(f"An unexpected error occurred: {e}") from e


def _to_task(entity: TaskEntity) -> Task:
    return Task(**entity)


class LocalTaskBackend(TaskBackend):
    """
    Backend keeping tasks in a local JSON file, with no server involved.

    Shares the store's ordering and validation rules; store errors surface as
    ApiError with the equivalent HTTP status.
    """

    def __init__(self, path: Union[str, Path], repository: Optional[JsonFileRepository] = None) -> None:
        self._repo = repository or JsonFileRepository(path)

    def list_tasks(self) -> List[Task]:
        with _as_api_error():
            return [_to_task(t) for t in self._repo.list_all()]

    def create_task(self, title: str) -> Task:
        with _as_api_error():
            return _to_task(self._repo.create(title))

    def toggle_task(self, task_id: str) -> Task:
        with _as_api_error():
            return _to_task(self._repo.toggle(task_id))

    def delete_task(self, task_id: str) -> None:
        with _as_api_error():
            self._repo.delete(task_id)


# PUBLIC_INTERFACE
def get_backend(settings: Optional[Settings] = None) -> TaskBackend:
    """
    Return the backend selected by TASK_CLIENT_BACKEND.
    - api: ApiTaskBackend against TASK_API_BASE_URL (default)
    - local: LocalTaskBackend on TASK_CLIENT_LOCAL_FILE
    """
    settings = settings or get_settings()
    if settings.client_backend == "local":
        return LocalTaskBackend(settings.client_local_file)
    return ApiTaskBackend(TaskApiClient(settings.api_base_url))
