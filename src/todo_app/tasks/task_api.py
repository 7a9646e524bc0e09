# src/todo_app/tasks/task_api.py

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import replace

from ..core.state import AppState
from .task_form import TaskForm
from .task_models import Task

logger = logging.getLogger(__name__)


def _yes_no(flag: bool) -> str:
    return "yes" if flag else "no"


def render_task(task: Task) -> str:
    return (
        f"Name: {task.name}\n"
        f"Description: {task.description}\n"
        f"Completed: {_yes_no(task.is_completed)}\n"
        f"Important: {_yes_no(task.is_important)}"
    )


def render_tasks_as_text(tasks: Iterable[Task]) -> str:
    """
    Human-readable dump of the task list for sharing.

    One block per task, blocks separated by a blank line. Not meant to be
    parsed back.
    """
    blocks = [render_task(t) for t in tasks]
    if not blocks:
        return "No tasks."
    return "\n\n".join(blocks)


async def create_task(state: AppState, form: TaskForm) -> Task:
    """Validate the form, assign a fresh task_id and persist the task."""
    task = form.to_new_task(state.id_generator)
    await state.repository.add_task(task)
    return task


async def edit_task(state: AppState, task_id: int, form: TaskForm) -> Task | None:
    task = await state.repository.get_task(task_id)
    if task is None:
        return None
    edited = form.apply_to(task)
    await state.repository.update_task(edited)
    return edited


async def set_completed(state: AppState, task_id: int, completed: bool | None = None) -> Task | None:
    """Set (or flip, when completed is None) the completion flag."""
    task = await state.repository.get_task(task_id)
    if task is None:
        return None
    value = (not task.is_completed) if completed is None else bool(completed)
    updated = replace(task, is_completed=value)
    await state.repository.update_task(updated)
    return updated


async def set_important(state: AppState, task_id: int, important: bool | None = None) -> Task | None:
    task = await state.repository.get_task(task_id)
    if task is None:
        return None
    value = (not task.is_important) if important is None else bool(important)
    updated = replace(task, is_important=value)
    await state.repository.update_task(updated)
    return updated


async def share_tasks(state: AppState) -> str:
    """Render the current list and hand it to the configured share target."""
    text = render_tasks_as_text(await state.repository.get_tasks())
    await state.share_target.share_text(text)
    logger.info("Shared task list (%d chars)", len(text))
    return text
