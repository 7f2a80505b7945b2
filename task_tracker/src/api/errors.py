from __future__ import annotations


# PUBLIC_INTERFACE
class TaskError(Exception):
    """
    Base class for task domain errors.

    Each subclass carries the HTTP status code the API responds with; the message
    is returned to clients verbatim as {"error": message}.
    """

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


# PUBLIC_INTERFACE
class ValidationError(TaskError):
    """Bad input, e.g. a missing or blank title."""

    status_code = 400


# PUBLIC_INTERFACE
class NotFoundError(TaskError):
    """No task exists with the requested id."""

    status_code = 404

    def __init__(self, message: str = "Task not found") -> None:
        super().__init__(message)


# PUBLIC_INTERFACE
class StorageError(TaskError):
    """The backing store could not be read or written."""

    status_code = 500
