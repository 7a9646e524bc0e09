# src/todo_app/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The core depends on Protocols instead of concrete implementations.
This keeps storage backends and share targets swappable and makes testing easier.
"""

from typing import Awaitable, Protocol

from ..tasks.task_models import Task


class TaskRepo(Protocol):
    """
    Synchronous storage backend behind TaskRepository.

    Mutations return True when a row actually changed. insert_task raises
    DuplicateTaskError for a taken task_id.
    """

    def count_tasks(self) -> int: ...
    def list_tasks(self) -> list[Task]: ...
    def get_task(self, task_id: int) -> Task | None: ...
    def insert_task(self, task: Task) -> bool: ...
    def update_task(self, task: Task) -> bool: ...
    def delete_task(self, task_id: int) -> bool: ...
    def close(self) -> None: ...


class ShareTarget(Protocol):
    """Receives the plain-text rendering of the task list (one-way)."""

    def share_text(self, text: str) -> Awaitable[None]: ...
