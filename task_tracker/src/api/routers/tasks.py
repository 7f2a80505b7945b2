from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator, List, Optional

from fastapi import APIRouter, Body, Depends, Response, status

from ..errors import StorageError
from ..repositories import TaskRepository, get_repository
from ..schemas import ErrorOut, TaskCreate, TaskOut

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/tasks",
    tags=["tasks"],
)


def _get_repo(repo: TaskRepository = Depends(get_repository)) -> TaskRepository:
    """
    Dependency wrapper for repository to keep signatures clean.
    """
    return repo


@contextmanager
def _storage_failure(message: str) -> Iterator[None]:
    """Replace low-level storage errors with the operation's public message."""
    try:
        yield
    except StorageError as e:
        logger.exception("Storage failure: %s", e.message)
        raise StorageError(message) from e


# PUBLIC_INTERFACE
@router.get(
    "",
    response_model=List[TaskOut],
    summary="List Tasks",
    description="List all tasks, newest createdAtMs first.",
    responses={
        200: {"description": "Tasks retrieved successfully"},
        500: {"model": ErrorOut, "description": "Task store could not be read"},
    },
)
def list_tasks(repo: TaskRepository = Depends(_get_repo)) -> List[TaskOut]:
    """
    Return every stored task sorted newest-first.
    """
    with _storage_failure("Failed to get tasks"):
        items = repo.list_all()
    return [TaskOut.from_entity(it) for it in items]


# PUBLIC_INTERFACE
@router.post(
    "",
    response_model=TaskOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create Task",
    description="Create a new task from a title. The title is trimmed and must not be empty.",
    responses={
        201: {"description": "Task created successfully"},
        400: {"model": ErrorOut, "description": "Title missing, not a string, or empty"},
        500: {"model": ErrorOut, "description": "Task store could not be written"},
    },
)
def create_task(
    payload: Optional[TaskCreate] = Body(default=None),
    repo: TaskRepository = Depends(_get_repo),
) -> TaskOut:
    """
    Create a new Task.
    """
    with _storage_failure("Failed to create task"):
        created = repo.create(payload.title if payload else None)
    return TaskOut.from_entity(created)


# PUBLIC_INTERFACE
@router.patch(
    "/{task_id}/toggle",
    response_model=TaskOut,
    summary="Toggle Task",
    description="Flip the completed flag of a task. The task's createdAtMs, and so its position, is unchanged.",
    responses={
        200: {"description": "Task toggled"},
        404: {"model": ErrorOut, "description": "Task not found"},
        500: {"model": ErrorOut, "description": "Task store could not be updated"},
    },
)
def toggle_task(task_id: str, repo: TaskRepository = Depends(_get_repo)) -> TaskOut:
    """
    Toggle the completion status of a Task.
    """
    with _storage_failure("Failed to toggle task"):
        updated = repo.toggle(task_id)
    return TaskOut.from_entity(updated)


# PUBLIC_INTERFACE
@router.delete(
    "/{task_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete Task",
    description="Delete a task by id.",
    responses={
        204: {"description": "Task deleted"},
        404: {"model": ErrorOut, "description": "Task not found"},
        500: {"model": ErrorOut, "description": "Task store could not be updated"},
    },
)
def delete_task(task_id: str, repo: TaskRepository = Depends(_get_repo)) -> Response:
    """
    Delete a Task. Returns 204 on success, 404 if not found.
    """
    with _storage_failure("Failed to delete task"):
        repo.delete(task_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
