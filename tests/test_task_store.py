# tests/test_task_store.py

from __future__ import annotations

import sqlite3
from dataclasses import replace
from pathlib import Path

import pytest

from todo_app.tasks.task_models import DuplicateTaskError, Task, TaskStoreError
from todo_app.tasks.task_store import TABLE_NAME, TaskStore


def test_insert_then_get_round_trip(store: TaskStore) -> None:
    task = Task(
        name="Buy milk",
        description="2% milk, 1 gallon",
        is_important=True,
        is_completed=False,
        task_id=1000,
    )
    assert store.insert_task(task) is True

    assert store.get_task(1000) == task
    assert store.list_tasks() == [task]
    assert store.count_tasks() == 1


def test_duplicate_task_id_is_rejected_and_first_row_kept(store: TaskStore) -> None:
    first = Task(name="First", description="kept", task_id=42)
    second = Task(name="Second", description="rejected", task_id=42)
    store.insert_task(first)

    with pytest.raises(DuplicateTaskError) as exc_info:
        store.insert_task(second)

    assert exc_info.value.task_id == 42
    assert store.list_tasks() == [first]


def test_other_constraint_failures_are_not_reported_as_duplicates(store: TaskStore) -> None:
    broken = Task(name=None, description="no name", task_id=1)  # type: ignore[arg-type]

    with pytest.raises(TaskStoreError) as exc_info:
        store.insert_task(broken)

    assert not isinstance(exc_info.value, DuplicateTaskError)
    assert "NOT NULL" in str(exc_info.value)
    assert store.count_tasks() == 0


def test_update_replaces_only_matching_row(store: TaskStore) -> None:
    a = Task(name="Alpha", description="aaa", task_id=1)
    b = Task(name="Beta", description="bbb", task_id=2)
    store.insert_task(a)
    store.insert_task(b)

    edited = replace(a, name="Alpha 2", description="changed", is_completed=True, is_important=True)
    assert store.update_task(edited) is True

    assert store.get_task(1) == edited
    assert store.get_task(2) == b


def test_update_missing_id_is_noop(store: TaskStore) -> None:
    a = Task(name="Alpha", description="aaa", task_id=1)
    store.insert_task(a)

    assert store.update_task(Task(name="Ghost", description="none", task_id=99)) is False
    assert store.list_tasks() == [a]


def test_delete_and_delete_missing(store: TaskStore) -> None:
    a = Task(name="Alpha", description="aaa", task_id=1)
    store.insert_task(a)

    assert store.delete_task(1) is True
    assert store.get_task(1) is None
    assert store.delete_task(1) is False
    assert store.list_tasks() == []


def test_list_is_ordered_by_task_id(store: TaskStore) -> None:
    for task_id in (30, 10, 20):
        store.insert_task(Task(name=f"t{task_id}", description="d", task_id=task_id))

    assert [t.task_id for t in store.list_tasks()] == [10, 20, 30]


def test_storage_layer_does_not_validate_fields(store: TaskStore) -> None:
    blank = Task(name="", description="", task_id=5)
    store.insert_task(blank)
    assert store.get_task(5) == blank


def test_data_survives_reopen(tmp_path: Path) -> None:
    db = tmp_path / "tasks.sqlite3"
    TaskStore(db).insert_task(Task(name="Persist", description="me", task_id=7))

    reopened = TaskStore(db)
    assert reopened.get_task(7) == Task(name="Persist", description="me", task_id=7)


def test_migration_adds_missing_flag_columns(tmp_path: Path) -> None:
    db = tmp_path / "old.sqlite3"
    conn = sqlite3.connect(str(db))
    conn.execute(
        f"CREATE TABLE {TABLE_NAME} (name TEXT NOT NULL, description TEXT NOT NULL, "
        "taskId INTEGER PRIMARY KEY NOT NULL)"
    )
    conn.execute(f"INSERT INTO {TABLE_NAME}(name, description, taskId) VALUES ('Old', 'row', 3)")
    conn.commit()
    conn.close()

    store = TaskStore(db)

    assert store.get_task(3) == Task(name="Old", description="row", task_id=3)
    store.update_task(Task(name="Old", description="row", is_important=True, task_id=3))
    assert store.get_task(3).is_important is True
