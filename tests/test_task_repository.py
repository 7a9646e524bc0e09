# tests/test_task_repository.py

from __future__ import annotations

import asyncio
from contextlib import aclosing
from dataclasses import replace

import pytest

from todo_app.tasks.memory_store import InMemoryTaskStore
from todo_app.tasks.task_models import DuplicateTaskError, Task
from todo_app.tasks.task_repository import TaskRepository

from .fakes import SlowTaskStore

TIMEOUT = 2.0


async def _next(stream):
    return await asyncio.wait_for(anext(stream), TIMEOUT)


@pytest.mark.asyncio
async def test_added_task_shows_up_in_list_stream(repository: TaskRepository) -> None:
    async with aclosing(repository.observe_tasks()) as stream:
        assert await _next(stream) == []

        task = Task(name="Buy milk", description="2% milk, 1 gallon", task_id=1000)
        await repository.add_task(task)

        assert await _next(stream) == [task]


@pytest.mark.asyncio
async def test_default_task_id_is_assigned_at_creation(repository: TaskRepository) -> None:
    task = Task(name="No explicit id", description="default id")
    await repository.add_task(task)

    stored = await repository.get_tasks()
    assert len(stored) == 1
    assert stored[0].task_id == task.task_id
    assert stored[0].task_id > 0


@pytest.mark.asyncio
async def test_duplicate_add_raises_and_keeps_first(repository: TaskRepository) -> None:
    first = Task(name="First", description="kept", task_id=5)
    await repository.add_task(first)

    with pytest.raises(DuplicateTaskError):
        await repository.add_task(Task(name="Second", description="lost", task_id=5))

    assert await repository.get_tasks() == [first]


@pytest.mark.asyncio
async def test_round_trip_by_id(repository: TaskRepository) -> None:
    task = Task(
        name="Buy milk",
        description="2% milk, 1 gallon",
        is_important=True,
        is_completed=False,
        task_id=1000,
    )
    await repository.add_task(task)

    async with aclosing(repository.observe_task(1000)) as stream:
        assert await _next(stream) == task


@pytest.mark.asyncio
async def test_toggle_completed_reaches_active_subscriber(repository: TaskRepository) -> None:
    a = Task(name="Alpha", description="aaa", task_id=1)
    b = Task(name="Beta", description="bbb", task_id=2)
    await repository.add_task(a)
    await repository.add_task(b)

    async with aclosing(repository.observe_tasks()) as stream:
        assert await _next(stream) == [a, b]

        await repository.update_task(replace(a, is_completed=True))

        assert await _next(stream) == [replace(a, is_completed=True), b]


@pytest.mark.asyncio
async def test_update_missing_id_leaves_collection_unchanged(repository: TaskRepository) -> None:
    a = Task(name="Alpha", description="aaa", task_id=1)
    await repository.add_task(a)

    await repository.update_task(Task(name="Ghost", description="none", task_id=404))

    assert await repository.get_tasks() == [a]


@pytest.mark.asyncio
async def test_delete_clears_both_streams(repository: TaskRepository) -> None:
    a = Task(name="Alpha", description="aaa", task_id=1)
    b = Task(name="Beta", description="bbb", task_id=2)
    await repository.add_task(a)
    await repository.add_task(b)

    async with aclosing(repository.observe_tasks()) as all_tasks, aclosing(
        repository.observe_task(1)
    ) as one:
        assert await _next(all_tasks) == [a, b]
        assert await _next(one) == a

        await repository.delete_task(a)

        assert await _next(all_tasks) == [b]
        assert await _next(one) is None

    # delete by key, and again on a missing id
    await repository.delete_task(2)
    await repository.delete_task(2)
    assert await repository.get_tasks() == []


@pytest.mark.asyncio
async def test_get_by_id_stream_ignores_unrelated_changes(repository: TaskRepository) -> None:
    a = Task(name="Alpha", description="aaa", task_id=1)
    await repository.add_task(a)

    async with aclosing(repository.observe_task(1)) as stream:
        assert await _next(stream) == a

        await repository.add_task(Task(name="Other", description="ooo", task_id=2))
        with pytest.raises(asyncio.TimeoutError):
            await asyncio.wait_for(anext(stream), 0.2)


@pytest.mark.asyncio
async def test_each_subscription_is_independent() -> None:
    repository = TaskRepository(InMemoryTaskStore())

    s1 = repository.observe_tasks()
    s2 = repository.observe_tasks()
    assert await _next(s1) == []
    assert await _next(s2) == []
    assert repository.subscriber_count == 2

    await s1.aclose()
    assert repository.subscriber_count == 1

    task = Task(name="Late", description="still delivered", task_id=3)
    await repository.add_task(task)
    assert await _next(s2) == [task]

    # a new subscriber starts from the current snapshot
    async with aclosing(repository.observe_tasks()) as s3:
        assert await _next(s3) == [task]

    await s2.aclose()
    assert repository.subscriber_count == 0


@pytest.mark.asyncio
async def test_burst_of_writes_collapses_to_latest_snapshot() -> None:
    repository = TaskRepository(InMemoryTaskStore())

    async with aclosing(repository.observe_tasks()) as stream:
        assert await _next(stream) == []

        for task_id in range(1, 6):
            await repository.add_task(Task(name=f"t{task_id}", description="d", task_id=task_id))

        latest = await _next(stream)
        while len(latest) < 5:
            latest = await _next(stream)
        assert [t.task_id for t in latest] == [1, 2, 3, 4, 5]


@pytest.mark.asyncio
async def test_slow_write_does_not_block_other_coroutines() -> None:
    repository = TaskRepository(SlowTaskStore(delay=0.3))
    ticks = 0
    stop = asyncio.Event()

    async def ticker() -> None:
        nonlocal ticks
        while not stop.is_set():
            ticks += 1
            await asyncio.sleep(0.01)

    ticking = asyncio.create_task(ticker())
    await repository.add_task(Task(name="Slow", description="write", task_id=1))
    stop.set()
    await ticking

    assert ticks >= 5
    assert await repository.get_task(1) == Task(name="Slow", description="write", task_id=1)
