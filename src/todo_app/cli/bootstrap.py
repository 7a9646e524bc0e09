# src/todo_app/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires the storage backend, repository and share target into AppState.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..connectors.share import ConsoleShareTarget, FileShareTarget
from ..core.ports import ShareTarget, TaskRepo
from ..core.state import AppState
from ..tasks.memory_store import InMemoryTaskStore
from ..tasks.task_repository import TaskRepository
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.tasks_db_path.parent.mkdir(parents=True, exist_ok=True)


def build_store(settings) -> TaskRepo:
    backend = str(getattr(settings, "storage_backend", "sqlite"))
    if backend == "memory":
        logger.warning("Using in-memory task storage; tasks are lost on exit.")
        return InMemoryTaskStore()
    return TaskStore(settings.tasks_db_path)


def build_share_target(settings) -> ShareTarget:
    share_path = getattr(settings, "share_path", None)
    if share_path:
        return FileShareTarget(share_path)
    return ConsoleShareTarget()


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    return AppState(
        settings=settings,
        repository=TaskRepository(build_store(settings)),
        share_target=build_share_target(settings),
    )
