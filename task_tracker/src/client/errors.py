from __future__ import annotations

from typing import Optional


# PUBLIC_INTERFACE
class ApiError(Exception):
    """
    The single error kind surfaced to the task list.

    `message` is meant to be shown to users as-is. `status` is the HTTP status
    code when the server answered, None when it could not be reached.
    """

    def __init__(self, message: str, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.status = status


# PUBLIC_INTERFACE
class TransportError(ApiError):
    """The request never got a response (connection refused, blocked, timed out)."""

    def __init__(self, message: str) -> None:
        super().__init__(message, status=None)
