# tasks/task_models.py

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from dataclasses import dataclass, field


class TaskIdGenerator:
    """
    Millisecond-timestamp task IDs.

    IDs produced by one generator are strictly increasing: when the clock has
    not moved past the previous ID (two tasks in the same millisecond, or a
    clock step backwards) the previous ID + 1 is handed out instead.
    Uniqueness is only guaranteed per generator; the store still rejects
    duplicates coming from elsewhere.
    """

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._last = 0
        self._lock = threading.Lock()

    def __call__(self) -> int:
        with self._lock:
            candidate = int(self._clock() * 1000)
            if candidate <= self._last:
                candidate = self._last + 1
            self._last = candidate
            return candidate


# Process-scoped generator behind Task's default task_id.
default_task_id = TaskIdGenerator()


@dataclass(frozen=True, slots=True)
class Task:
    name: str
    description: str
    is_completed: bool = False
    is_important: bool = False
    task_id: int = field(default_factory=default_task_id)


class TaskStoreError(RuntimeError):
    """Storage-layer failure."""


class DuplicateTaskError(TaskStoreError):
    def __init__(self, task_id: int) -> None:
        super().__init__(f"Task with task_id={task_id} already exists")
        self.task_id = task_id


class TaskValidationError(ValueError):
    """Raised by the form layer; the store itself never validates field contents."""

    def __init__(self, errors: dict[str, str]) -> None:
        details = "; ".join(f"{k}: {v}" for k, v in errors.items())
        super().__init__(f"Invalid task: {details}")
        self.errors = dict(errors)
