# tasks/task_form.py

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, replace

from .task_models import Task, TaskValidationError, default_task_id

MIN_FIELD_LENGTH = 3


def _field_error(value: str) -> str | None:
    text = (value or "").strip()
    if not text:
        return "must not be blank"
    if len(text) < MIN_FIELD_LENGTH:
        return f"must be at least {MIN_FIELD_LENGTH} characters"
    return None


@dataclass(slots=True)
class TaskForm:
    """
    Add/edit form input.

    Validation lives here, at the submission boundary. Stored tasks carry no
    such constraint: a Task with an empty name is perfectly storable.
    """

    name: str
    description: str
    is_important: bool = False

    @classmethod
    def from_task(cls, task: Task) -> TaskForm:
        return cls(name=task.name, description=task.description, is_important=task.is_important)

    def validate(self) -> dict[str, str]:
        errors: dict[str, str] = {}
        for field_name in ("name", "description"):
            err = _field_error(getattr(self, field_name))
            if err:
                errors[field_name] = err
        return errors

    def is_valid(self) -> bool:
        return not self.validate()

    def _check(self) -> None:
        errors = self.validate()
        if errors:
            raise TaskValidationError(errors)

    def to_new_task(self, id_generator: Callable[[], int] = default_task_id) -> Task:
        self._check()
        return Task(
            name=self.name.strip(),
            description=self.description.strip(),
            is_important=self.is_important,
            task_id=id_generator(),
        )

    def apply_to(self, task: Task) -> Task:
        """Edited copy of `task`; completion state and task_id are kept."""
        self._check()
        return replace(
            task,
            name=self.name.strip(),
            description=self.description.strip(),
            is_important=self.is_important,
        )
