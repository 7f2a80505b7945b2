import json
import logging

import pytest

from src.api.generate_openapi import generate_openapi
from src.api.logging_config import setup_logging
from src.api.settings import get_settings


@pytest.fixture()
def clean_env(monkeypatch):
    for name in (
        "PERSISTENCE_BACKEND",
        "TASKS_DATA_FILE",
        "CORS_ALLOW_ORIGINS",
        "LOG_LEVEL",
        "HOST",
        "PORT",
        "TASK_API_BASE_URL",
        "TASK_CLIENT_BACKEND",
        "TASK_CLIENT_LOCAL_FILE",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestSettings:
    def test_defaults(self, clean_env):
        s = get_settings()
        assert s.persistence_backend == "json"
        assert s.tasks_data_file == "./data/tasks.json"
        assert s.cors_allow_origins == []
        assert s.cors_origin_regex is not None
        assert s.log_level == "INFO"
        assert (s.host, s.port) == ("0.0.0.0", 3001)
        assert s.api_base_url == "http://localhost:3001"
        assert s.client_backend == "api"

    def test_overrides(self, clean_env):
        clean_env.setenv("PERSISTENCE_BACKEND", "MEMORY")
        clean_env.setenv("CORS_ALLOW_ORIGINS", "http://a.example, http://b.example")
        clean_env.setenv("PORT", "8080")
        clean_env.setenv("TASK_API_BASE_URL", "http://api.example/")
        clean_env.setenv("TASK_CLIENT_BACKEND", "local")
        s = get_settings()
        assert s.persistence_backend == "memory"
        assert s.cors_allow_origins == ["http://a.example", "http://b.example"]
        assert s.cors_origin_regex is None
        assert s.port == 8080
        assert s.api_base_url == "http://api.example"
        assert s.client_backend == "local"

    def test_invalid_values_fall_back(self, clean_env):
        clean_env.setenv("PERSISTENCE_BACKEND", "sqlite")
        clean_env.setenv("PORT", "not-a-port")
        clean_env.setenv("TASK_CLIENT_BACKEND", "carrier-pigeon")
        s = get_settings()
        assert s.persistence_backend == "json"
        assert s.port == 3001
        assert s.client_backend == "api"

    def test_star_origin(self, clean_env):
        clean_env.setenv("CORS_ALLOW_ORIGINS", "*")
        assert get_settings().cors_allow_origins == ["*"]


class TestLogging:
    def test_setup_logging_installs_single_handler(self):
        root = logging.getLogger()
        saved_level, saved_handlers = root.level, list(root.handlers)
        try:
            setup_logging("debug")
            setup_logging("DEBUG")
            assert root.level == logging.DEBUG
            assert len(root.handlers) == 1
            setup_logging("no-such-level")
            assert root.level == logging.INFO
        finally:
            root.handlers = saved_handlers
            root.setLevel(saved_level)


class TestOpenApi:
    def test_generate_openapi_writes_schema(self, tmp_path):
        out = generate_openapi(tmp_path / "interfaces")
        schema = json.loads(out.read_text(encoding="utf-8"))
        assert out.name == "openapi.json"
        assert {"/health", "/tasks", "/tasks/{task_id}/toggle", "/tasks/{task_id}"} <= set(schema["paths"])
        assert {t["name"] for t in schema["tags"]} >= {"health", "tasks"}
