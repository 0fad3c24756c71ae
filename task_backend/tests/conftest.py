import os

import pytest
from fastapi.testclient import TestClient

# Default to the memory backend so importing the app never touches the filesystem
os.environ.setdefault("PERSISTENCE_BACKEND", "memory")

from src.task_api.db import SQLiteRepository  # noqa: E402
from src.task_api.main import app  # noqa: E402
from src.task_api.repositories import InMemoryRepository, Repository  # noqa: E402
from src.task_api.routers.procedures import get_repository  # noqa: E402

from fakes import BrokenRepository  # noqa: E402


@pytest.fixture(params=["memory", "sqlite"])
def repo(request, tmp_path) -> Repository:
    """A fresh, empty repository of each backend."""
    if request.param == "sqlite":
        return SQLiteRepository(str(tmp_path / "tasks.db"))
    return InMemoryRepository()


@pytest.fixture()
def client(repo: Repository):
    """TestClient wired to the per-test repository."""
    app.dependency_overrides[get_repository] = lambda: repo
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture()
def broken_client():
    app.dependency_overrides[get_repository] = lambda: BrokenRepository()
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
