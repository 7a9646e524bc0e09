# tasks/memory_store.py

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable

from .task_models import DuplicateTaskError, Task

logger = logging.getLogger(__name__)


class InMemoryTaskStore:
    """
    Process-scoped task list with the same interface as TaskStore.

    Nothing is persisted. Each instance owns its own list; share it only by
    passing the instance around explicitly.
    """

    def __init__(self, seed: Iterable[Task] | None = None) -> None:
        self._lock = threading.Lock()
        self._tasks: dict[int, Task] = {}
        for task in seed or ():
            self.insert_task(task)
        logger.info("InMemoryTaskStore ready total=%s", len(self._tasks))

    def close(self) -> None:
        return

    def count_tasks(self) -> int:
        with self._lock:
            return len(self._tasks)

    def list_tasks(self) -> list[Task]:
        with self._lock:
            return [self._tasks[k] for k in sorted(self._tasks)]

    def get_task(self, task_id: int) -> Task | None:
        with self._lock:
            return self._tasks.get(int(task_id))

    def insert_task(self, task: Task) -> bool:
        with self._lock:
            if task.task_id in self._tasks:
                raise DuplicateTaskError(task.task_id)
            self._tasks[task.task_id] = task
            return True

    def update_task(self, task: Task) -> bool:
        with self._lock:
            if task.task_id not in self._tasks:
                return False
            self._tasks[task.task_id] = task
            return True

    def delete_task(self, task_id: int) -> bool:
        with self._lock:
            return self._tasks.pop(int(task_id), None) is not None
