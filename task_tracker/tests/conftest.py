import json
import os
from pathlib import Path
from typing import Callable, Dict, List

import pytest
from fastapi.testclient import TestClient

# Default to the memory backend so importing the app never touches ./data
os.environ.setdefault("PERSISTENCE_BACKEND", "memory")
os.environ.pop("CORS_ALLOW_ORIGINS", None)

from src.api.main import app  # noqa: E402
from src.api.repositories import JsonFileRepository, get_repository  # noqa: E402

BASE_MS = 1_700_000_000_000


class FakeClock:
    """Deterministic epoch-ms clock advancing one second per reading."""

    def __init__(self, start: int = BASE_MS, step: int = 1000) -> None:
        self.start = start
        self.now = start
        self.step = step

    def __call__(self) -> int:
        value = self.now
        self.now += self.step
        return value


def sample_tasks() -> List[Dict]:
    """Three stored tasks in insertion order; test-task-3 is the newest."""
    return [
        {"id": "test-task-1", "title": "Test Task 1", "completed": False, "createdAtMs": BASE_MS - 10_000},
        {"id": "test-task-2", "title": "Test Task 2", "completed": True, "createdAtMs": BASE_MS - 5_000},
        {"id": "test-task-3", "title": "Test Task 3", "completed": False, "createdAtMs": BASE_MS - 1_000},
    ]


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def sample() -> List[Dict]:
    return sample_tasks()


@pytest.fixture()
def data_file(tmp_path: Path) -> Path:
    return tmp_path / "data" / "tasks.json"


@pytest.fixture()
def seed(data_file: Path) -> Callable[[List[Dict]], None]:
    """Write raw task dicts straight into the data file."""

    def _seed(tasks: List[Dict]) -> None:
        data_file.parent.mkdir(parents=True, exist_ok=True)
        data_file.write_text(json.dumps(tasks, indent=2), encoding="utf-8")

    return _seed


@pytest.fixture()
def repo(data_file: Path, clock: FakeClock) -> JsonFileRepository:
    return JsonFileRepository(data_file, clock=clock)


@pytest.fixture()
def client(repo: JsonFileRepository):
    app.dependency_overrides[get_repository] = lambda: repo
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
