# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from todo_app.core.state import AppState
from todo_app.tasks.task_models import TaskIdGenerator
from todo_app.tasks.task_repository import TaskRepository
from todo_app.tasks.task_store import TaskStore

from .fakes import FakeClock, FakeShareTarget


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the bootstrap helpers.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the environment and any local .env.
    """
    return SimpleNamespace(
        app_name="todo-test",
        log_level="DEBUG",
        console_enabled=False,
        storage_backend="sqlite",
        data_dir=tmp_path / "data",
        tasks_db_path=tmp_path / "data" / "tasks.sqlite3",
        share_path=None,
    )


@pytest.fixture()
def store(settings: SimpleNamespace) -> TaskStore:
    return TaskStore(settings.tasks_db_path)


@pytest.fixture()
def repository(store: TaskStore) -> TaskRepository:
    return TaskRepository(store)


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def state(settings: SimpleNamespace, repository: TaskRepository, clock: FakeClock) -> AppState:
    """
    AppState wired with a fake share target and a deterministic ID generator.

    NOTE: We keep the real SQLite store here because its correctness is part
    of what we want to test.
    """
    return AppState(
        settings=settings,
        repository=repository,
        share_target=FakeShareTarget(),
        id_generator=TaskIdGenerator(clock),
    )
