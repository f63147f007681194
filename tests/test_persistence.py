# tests/test_persistence.py

from __future__ import annotations

import asyncio
import json

import pytest

from sister_sync.tasks.persistence import AsyncioTimer, PersistenceScheduler
from sister_sync.tasks.task_models import Priority, SaveStatus, Task

from .fakes import FailingStorage, ManualTimer, MemoryStorage

KEY = "sisterSyncTasks"


def _task(n: int, **kw) -> Task:
    return Task(id=f"t{n}", title=f"Task {n}", assignee="Anna", priority=Priority.LOW, created_at=n, **kw)


def _scheduler(storage, timer, statuses: list) -> PersistenceScheduler:
    return PersistenceScheduler(
        storage,
        key=KEY,
        timer=timer,
        debounce_seconds=0.5,
        saved_indicator_seconds=0.5,
        on_status=statuses.append,
    )


def test_burst_of_changes_writes_once_with_final_state() -> None:
    storage, timer, statuses = MemoryStorage(), ManualTimer(), []
    sched = _scheduler(storage, timer, statuses)

    for n in range(1, 6):
        sched.schedule([_task(i) for i in range(1, n + 1)])
        timer.advance(0.02)

    timer.advance(0.45)
    assert storage.writes == []
    assert sched.pending

    timer.advance(1.0)

    assert len(storage.writes) == 1
    key, value = storage.writes[0]
    assert key == KEY
    assert [t["id"] for t in json.loads(value)] == ["t1", "t2", "t3", "t4", "t5"]
    assert not sched.pending


def test_status_goes_saving_then_saved() -> None:
    storage, timer, statuses = MemoryStorage(), ManualTimer(), []
    sched = _scheduler(storage, timer, statuses)
    assert sched.status == SaveStatus.SAVED

    sched.schedule([_task(1)])
    timer.advance(0.5)
    assert statuses == [SaveStatus.SAVING]
    assert sched.status == SaveStatus.SAVING

    timer.advance(0.5)
    assert statuses == [SaveStatus.SAVING, SaveStatus.SAVED]


def test_write_errors_stick_until_a_later_success() -> None:
    storage, timer, statuses = FailingStorage(), ManualTimer(), []
    sched = _scheduler(storage, timer, statuses)

    sched.schedule([_task(1)])
    timer.advance(0.5)
    assert statuses == [SaveStatus.SAVING, SaveStatus.ERROR]

    # No automatic retry.
    timer.advance(60.0)
    assert storage.attempts == 1
    assert sched.status == SaveStatus.ERROR

    sched.schedule([_task(2)])
    timer.advance(5.0)
    assert storage.attempts == 2
    assert sched.status == SaveStatus.ERROR

    storage.fail = False
    sched.schedule([_task(3)])
    timer.advance(0.5)
    assert sched.status == SaveStatus.SAVING
    timer.advance(0.5)
    assert sched.status == SaveStatus.SAVED
    assert json.loads(storage.data[KEY])[0]["id"] == "t3"


def test_unserializable_tasks_report_error() -> None:
    storage, timer, statuses = MemoryStorage(), ManualTimer(), []
    sched = _scheduler(storage, timer, statuses)

    sched.schedule([_task(1, extra={"bad": object()})])
    timer.advance(0.5)

    assert sched.status == SaveStatus.ERROR
    assert storage.writes == []


def test_flush_writes_pending_snapshot_immediately() -> None:
    storage, timer, statuses = MemoryStorage(), ManualTimer(), []
    sched = _scheduler(storage, timer, statuses)

    sched.flush()
    assert storage.writes == []

    sched.schedule([_task(1)])
    sched.flush()
    assert len(storage.writes) == 1
    assert not sched.pending

    timer.advance(10.0)
    assert len(storage.writes) == 1


def test_listener_errors_do_not_break_saving() -> None:
    storage, timer = MemoryStorage(), ManualTimer()

    def _boom(status: SaveStatus) -> None:
        raise RuntimeError("listener bug")

    sched = PersistenceScheduler(storage, key=KEY, timer=timer, on_status=_boom)
    sched.schedule([_task(1)])
    timer.advance(1.0)

    assert len(storage.writes) == 1
    assert sched.status == SaveStatus.SAVED


def test_close_cancels_pending_write() -> None:
    storage, timer, statuses = MemoryStorage(), ManualTimer(), []
    sched = _scheduler(storage, timer, statuses)

    sched.schedule([_task(1)])
    sched.close()
    timer.advance(5.0)

    assert storage.writes == []


@pytest.mark.asyncio
async def test_asyncio_timer_debounces() -> None:
    storage = MemoryStorage()
    sched = PersistenceScheduler(
        storage,
        key=KEY,
        timer=AsyncioTimer(),
        debounce_seconds=0.02,
        saved_indicator_seconds=0.01,
    )

    for n in range(1, 4):
        sched.schedule([_task(n)])
        await asyncio.sleep(0.001)

    await asyncio.sleep(0.1)

    assert len(storage.writes) == 1
    assert json.loads(storage.writes[0][1])[0]["id"] == "t3"
    assert sched.status == SaveStatus.SAVED
