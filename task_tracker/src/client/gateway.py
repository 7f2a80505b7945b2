from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx
from pydantic import ValidationError as PydanticValidationError

from .errors import ApiError, TransportError
from .models import Task

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:3001"


# PUBLIC_INTERFACE
class TaskApiClient:
    """
    Thin HTTP gateway to the Task API.

    Every failure is normalized into ApiError: error responses carry the server's
    {"error": ...} message and status code, unreachable servers become a
    TransportError with a message that points at the configured base URL.

    An existing httpx.Client (for example FastAPI's TestClient) can be injected via
    `http`; request paths are then resolved against that client's own base_url.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        http: Optional[httpx.Client] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._owns_http = http is None
        if http is None:
            kwargs: Dict[str, Any] = {"base_url": self.base_url}
            if timeout is not None:
                kwargs["timeout"] = timeout
            http = httpx.Client(**kwargs)
        self._http = http

    def close(self) -> None:
        if self._owns_http:
            self._http.close()

    def __enter__(self) -> "TaskApiClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _connect_error(self, exc: Exception) -> TransportError:
        text = str(exc).lower()
        if "cors" in text:
            return TransportError("CORS error: The backend may not be allowing requests from this origin.")
        return TransportError(
            f"Unable to connect to server. Please check if the backend is running on {self.base_url}"
        )

    def _request(self, method: str, path: str, json: Optional[Dict[str, Any]] = None) -> Any:
        try:
            response = self._http.request(
                method,
                path,
                json=json,
                headers={"Content-Type": "application/json", "Accept": "application/json"},
            )
        except httpx.TransportError as e:
            logger.warning("%s %s failed: %s", method, path, e)
            raise self._connect_error(e) from e
        except httpx.HTTPError as e:
            raise ApiError(f"An unexpected error occurred: {e}") from e

        if not response.is_success:
            try:
                body = response.json()
            except ValueError:
                body = {}
            message = body.get("error") if isinstance(body, dict) else None
            raise ApiError(message or f"HTTP error! status: {response.status_code}", response.status_code)

        if response.status_code == 204:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise ApiError(f"An unexpected error occurred: {e}") from e

    @staticmethod
    def _parse_task(data: Any) -> Task:
        try:
            return Task.model_validate(data)
        except PydanticValidationError as e:
            raise ApiError(f"An unexpected error occurred: {e}") from e

    # PUBLIC_INTERFACE
    def health(self) -> Dict[str, Any]:
        """GET /health."""
        return self._request("GET", "/health")

    # PUBLIC_INTERFACE
    def fetch_tasks(self) -> List[Task]:
        """GET /tasks; tasks arrive newest-first."""
        data = self._request("GET", "/tasks")
        if not isinstance(data, list):
            raise ApiError("An unexpected error occurred: task list is not an array")
        return [self._parse_task(item) for item in data]

    # PUBLIC_INTERFACE
    def create_task(self, title: str) -> Task:
        """POST /tasks."""
        return self._parse_task(self._request("POST", "/tasks", json={"title": title}))

    # PUBLIC_INTERFACE
    def toggle_task(self, task_id: str) -> Task:
        """PATCH /tasks/{id}/toggle."""
        return self._parse_task(self._request("PATCH", f"/tasks/{task_id}/toggle"))

    # PUBLIC_INTERFACE
    def delete_task(self, task_id: str) -> None:
        """DELETE /tasks/{id}."""
        self._request("DELETE", f"/tasks/{task_id}")
