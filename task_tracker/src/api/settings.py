from __future__ import annotations

import os
from dataclasses import dataclass
from typing import List, Optional

_LOCAL_ORIGIN_REGEX = r"^http://(localhost|127\.0\.0\.1)(:\d+)?$"


@dataclass(frozen=True)
class Settings:
    """
    Application settings loaded from environment variables.

    Env vars:
    - PERSISTENCE_BACKEND: 'json' (default) or 'memory'
    - TASKS_DATA_FILE: path to the JSON task file. Default './data/tasks.json'
    - CORS_ALLOW_ORIGINS: comma-separated list of allowed origins or '*'; empty (default)
      allows any localhost / 127.0.0.1 origin
    - LOG_LEVEL: root log level (default: INFO)
    - HOST / PORT: bind address for `python -m src.api` (default: 0.0.0.0:3001)
    - TASK_API_BASE_URL: base URL used by the client gateway (default: http://localhost:3001)
    - TASK_CLIENT_BACKEND: 'api' (default) or 'local'
    - TASK_CLIENT_LOCAL_FILE: JSON file used by the local client backend
    """

    persistence_backend: str
    tasks_data_file: str
    cors_allow_origins: List[str]
    log_level: str
    host: str
    port: int
    api_base_url: str
    client_backend: str
    client_local_file: str

    @property
    def cors_origin_regex(self) -> Optional[str]:
        """Regex used for CORS when no explicit origins are configured."""
        return _LOCAL_ORIGIN_REGEX if not self.cors_allow_origins else None


def _get_env(name: str, default: str) -> str:
    value = os.getenv(name, default)
    if value is None or value == "":
        return default
    return value


def _parse_int(value: str, default: int) -> int:
    try:
        return int(value.strip())
    except ValueError:
        return default


def _parse_origins(origins_value: str) -> List[str]:
    """
    Parse CORS origins from env. Supports:
    - '*' to allow all origins
    - Comma-separated list of origins
    """
    value = origins_value.strip()
    if value == "*":
        return ["*"]
    return [o.strip() for o in value.split(",") if o.strip()]


# PUBLIC_INTERFACE
def get_settings() -> Settings:
    """Return application settings loaded from environment variables."""
    backend = _get_env("PERSISTENCE_BACKEND", "json").strip().lower()
    if backend not in {"json", "memory"}:
        backend = "json"

    client_backend = _get_env("TASK_CLIENT_BACKEND", "api").strip().lower()
    if client_backend not in {"api", "local"}:
        client_backend = "api"

    return Settings(
        persistence_backend=backend,
        tasks_data_file=_get_env("TASKS_DATA_FILE", "./data/tasks.json").strip(),
        cors_allow_origins=_parse_origins(os.getenv("CORS_ALLOW_ORIGINS", "")),
        log_level=_get_env("LOG_LEVEL", "INFO").strip().upper(),
        host=_get_env("HOST", "0.0.0.0").strip(),
        port=_parse_int(_get_env("PORT", "3001"), 3001),
        api_base_url=_get_env("TASK_API_BASE_URL", "http://localhost:3001").strip().rstrip("/"),
        client_backend=client_backend,
        client_local_file=_get_env("TASK_CLIENT_LOCAL_FILE", "./data/local_tasks.json").strip(),
    )
