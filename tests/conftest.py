"""Pytest fixtures for todo backend tests."""

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from todo_backend.config import Settings
from todo_backend.main import create_app
from todo_backend.storage import TodoStorage


@pytest.fixture
def db_url(tmp_path: Path) -> str:
    return f"sqlite:///{tmp_path / 'todos.db'}"


@pytest.fixture
def storage(db_url: str):
    store = TodoStorage(db_url)
    assert store.init_schema()
    yield store
    store.close()


@pytest.fixture
def client(db_url: str, storage: TodoStorage) -> TestClient:
    """Create a test client backed by a fresh database file."""
    app = create_app(settings=Settings(database_url=db_url), storage=storage)
    return TestClient(app)


@pytest.fixture
def broken_client(tmp_path: Path) -> TestClient:
    """A client whose store could never be opened."""
    url = f"sqlite:///{tmp_path / 'missing' / 'nested' / 'todos.db'}"
    store = TodoStorage(url)
    app = create_app(settings=Settings(database_url=url), storage=store)
    return TestClient(app)
