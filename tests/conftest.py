# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from sister_sync.core.state import AppState
from sister_sync.tasks.ids import IdGenerator
from sister_sync.tasks.persistence import PersistenceScheduler
from sister_sync.tasks.task_store import TaskStore

from .fakes import FakeMotivation, FakeParser, ManualTimer, MemoryStorage

PARTICIPANTS = ["Anna", "Bella", "Chloe"]
STORAGE_KEY = "sisterSyncTasks"


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="SisterSync",
        log_level="INFO",
        participants=list(PARTICIPANTS),
        data_dir=tmp_path,
        storage_db_path=tmp_path / "storage.sqlite3",
        storage_key=STORAGE_KEY,
        storage_quota_bytes=0,
        save_debounce_ms=500,
        saved_indicator_ms=500,
        openrouter_api_key=None,
        openrouter_base_url="https://openrouter.ai/api/v1",
        llm_models=["test/model"],
        extra_headers={},
        llm_connect_timeout_seconds=1.0,
        llm_read_timeout_seconds=1.0,
    )


@pytest.fixture()
def timer() -> ManualTimer:
    return ManualTimer()


@pytest.fixture()
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture()
def statuses() -> list:
    return []


@pytest.fixture()
def scheduler(storage: MemoryStorage, timer: ManualTimer, statuses: list) -> PersistenceScheduler:
    return PersistenceScheduler(
        storage,
        key=STORAGE_KEY,
        timer=timer,
        debounce_seconds=0.5,
        saved_indicator_seconds=0.5,
        on_status=statuses.append,
    )


@pytest.fixture()
def store(storage: MemoryStorage, scheduler: PersistenceScheduler) -> TaskStore:
    """
    TaskStore wired with in-memory storage and a manual timer.

    Clock is fixed so created_at values are predictable.
    """
    return TaskStore(
        storage,
        ids=IdGenerator(),
        participants=PARTICIPANTS,
        storage_key=STORAGE_KEY,
        scheduler=scheduler,
        clock_ms=lambda: 1_700_000_000_000,
    )


@pytest.fixture()
def state(settings: SimpleNamespace, store: TaskStore) -> AppState:
    """AppState wired with deterministic fakes."""
    return AppState(
        settings=settings,
        store=store,
        parser=FakeParser(),
        motivation=FakeMotivation(),
        llm_online=False,
    )
