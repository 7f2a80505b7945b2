"""
Client-side task list library.

Exposes the HTTP gateway, the two interchangeable task backends and the
TaskList reconciler a UI drives.
"""

from .backends import ApiTaskBackend, LocalTaskBackend, TaskBackend, get_backend
from .errors import ApiError, TransportError
from .gateway import TaskApiClient
from .models import Task
from .task_list import ListStatus, SyncResult, TaskList

__all__ = [
    "ApiError",
    "ApiTaskBackend",
    "ListStatus",
    "LocalTaskBackend",
    "SyncResult",
    "Task",
    "TaskApiClient",
    "TaskBackend",
    "TaskList",
    "TransportError",
    "get_backend",
]
