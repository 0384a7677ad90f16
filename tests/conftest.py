from __future__ import annotations

from typing import Iterator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from task_tracker.main import create_app
from task_tracker.repositories import InMemoryTaskStore, TaskStore
from task_tracker.settings import Settings


@pytest.fixture()
def settings() -> Settings:
    """
    Settings built directly rather than read from the environment, so tests
    never pick up a developer's .env or a real database.
    """
    return Settings(
        store_conn_str="memory://",
        use_db_auth=False,
        db_username=None,
        db_password=None,
        host="127.0.0.1",
        port=8080,
        cors_allow_origins=["*"],
        log_level="DEBUG",
        log_file=None,
        api_url="http://testserver",
    )


@pytest.fixture()
def store() -> TaskStore:
    return InMemoryTaskStore()


@pytest.fixture()
def app(settings: Settings, store: TaskStore) -> FastAPI:
    return create_app(settings, store=store)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    # Entering the context runs the lifespan, which connects the store
    with TestClient(app) as c:
        yield c
