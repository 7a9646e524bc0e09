# src/todo_app/core/state.py

from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from ..tasks.task_models import default_task_id
from ..tasks.task_repository import TaskRepository
from .ports import ShareTarget


@dataclass
class AppState:
    # Store Settings on the state for easy access in other modules later.
    settings: Any

    repository: TaskRepository
    share_target: ShareTarget

    id_generator: Callable[[], int] = default_task_id

    # Background subscription printing the list on every change (/watch on).
    watch_task: asyncio.Task[None] | None = field(default=None)
