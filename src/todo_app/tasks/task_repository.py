# src/todo_app/tasks/task_repository.py

from __future__ import annotations

"""
Reactive task repository.

Wraps a synchronous storage backend (TaskStore / InMemoryTaskStore):
- every storage call runs in a worker thread (asyncio.to_thread), so the
  event loop driving the presentation layer never blocks on SQLite,
- reads are exposed as live streams (async iterators) that yield the current
  value on subscription and a fresh value after each committed change.

Subscribers are tracked in a registry of one-slot queues. A write that
changed a row drops a signal into every queue; a full queue already holds a
pending signal, so bursts of writes collapse into one re-query per
subscriber instead of piling up.
"""

import asyncio
import contextlib
import logging
from collections.abc import AsyncGenerator, Callable
from typing import TypeVar

from ..core.ports import TaskRepo
from .task_models import Task

logger = logging.getLogger(__name__)

T = TypeVar("T")

_UNSET = object()


class TaskRepository:
    def __init__(self, store: TaskRepo) -> None:
        self._store = store
        self._subscribers: set[asyncio.Queue[None]] = set()

    @property
    def store(self) -> TaskRepo:
        return self._store

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    # ---- live streams ----

    def observe_tasks(self) -> AsyncGenerator[list[Task], None]:
        """
        Live view of the whole collection, ordered by task_id.

        Yields immediately, then after every committed change. Runs until the
        consumer stops iterating (close the iterator or cancel the task).
        """
        return self._watch(self._store.list_tasks)

    def observe_task(self, task_id: int) -> AsyncGenerator[Task | None, None]:
        """Live view of one task; yields None while it does not exist."""
        task_id = int(task_id)
        return self._watch(lambda: self._store.get_task(task_id))

    async def _watch(self, query: Callable[[], T]) -> AsyncGenerator[T, None]:
        signal: asyncio.Queue[None] = asyncio.Queue(maxsize=1)
        # Register before the first read so a write racing it still wakes us.
        self._subscribers.add(signal)
        logger.debug("Subscriber added total=%d", len(self._subscribers))
        try:
            last: object = _UNSET
            while True:
                value = await asyncio.to_thread(query)
                if value != last:
                    last = value
                    yield value
                await signal.get()
        finally:
            self._subscribers.discard(signal)
            logger.debug("Subscriber removed total=%d", len(self._subscribers))

    def _notify(self) -> None:
        for signal in list(self._subscribers):
            with contextlib.suppress(asyncio.QueueFull):
                signal.put_nowait(None)

    # ---- one-shot reads ----

    async def get_tasks(self) -> list[Task]:
        return await asyncio.to_thread(self._store.list_tasks)

    async def get_task(self, task_id: int) -> Task | None:
        return await asyncio.to_thread(self._store.get_task, int(task_id))

    # ---- mutations ----

    async def add_task(self, task: Task) -> None:
        """Persist a new task. Raises DuplicateTaskError if task_id is taken."""
        await asyncio.to_thread(self._store.insert_task, task)
        logger.info("Task added task_id=%s", task.task_id)
        self._notify()

    async def update_task(self, task: Task) -> None:
        """Replace the stored task with the same task_id; no-op if it does not exist."""
        changed = await asyncio.to_thread(self._store.update_task, task)
        if changed:
            logger.info("Task updated task_id=%s", task.task_id)
            self._notify()

    async def delete_task(self, task: Task | int) -> None:
        task_id = task.task_id if isinstance(task, Task) else int(task)
        changed = await asyncio.to_thread(self._store.delete_task, task_id)
        if changed:
            logger.info("Task deleted task_id=%s", task_id)
            self._notify()

    def close(self) -> None:
        self._store.close()
