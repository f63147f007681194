# src/sister_sync/tasks/task_store.py

from __future__ import annotations

import dataclasses
import logging
import time
from collections.abc import Callable, Iterable, Sequence
from typing import Any

from ..core.ports import KeyValueStorage
from .errors import NotACollection, StorageReadCorruption
from .ids import IdGenerator
from .migrate import normalize
from .persistence import PersistenceScheduler
from .stats import compute_stats
from .sync_codec import SyncCodec, loads_strict
from .task_models import ALL_ASSIGNEES, DashboardStats, ParsedTask, Priority, Task

logger = logging.getLogger(__name__)


def _now_ms() -> int:
    return int(time.time() * 1000)


class TaskStore:
    """
    In-memory task list shared by the participants.

    The collection is an immutable tuple; every mutation builds a new one and
    hands it to the PersistenceScheduler (when configured). Readers get the
    tuple itself, so nothing outside the store can change it.

    Ordering:
    - tasks created here (manual or parsed) are prepended, newest first
    - imported lists keep the sender's order
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        *,
        ids: IdGenerator | None = None,
        participants: Sequence[str] = ("Anna", "Bella", "Chloe"),
        storage_key: str = "sisterSyncTasks",
        scheduler: PersistenceScheduler | None = None,
        clock_ms: Callable[[], int] | None = None,
    ) -> None:
        self._storage = storage
        self._ids = ids or IdGenerator()
        self._participants = tuple(participants)
        self._storage_key = storage_key
        self._scheduler = scheduler
        self._clock_ms = clock_ms or _now_ms
        self._codec = SyncCodec(self._ids)
        self._tasks: tuple[Task, ...] = ()

    # ---- read side ----

    @property
    def tasks(self) -> tuple[Task, ...]:
        return self._tasks

    @property
    def participants(self) -> tuple[str, ...]:
        return self._participants

    @property
    def scheduler(self) -> PersistenceScheduler | None:
        return self._scheduler

    @property
    def pending_count(self) -> int:
        return sum(1 for t in self._tasks if not t.is_completed)

    @property
    def completed_count(self) -> int:
        return sum(1 for t in self._tasks if t.is_completed)

    def get(self, task_id: str) -> Task | None:
        for t in self._tasks:
            if t.id == task_id:
                return t
        return None

    def filter_by_assignee(self, name: str) -> tuple[Task, ...]:
        """Tasks assigned to `name`; "All" returns the whole list in order."""
        if name == ALL_ASSIGNEES:
            return self._tasks
        return tuple(t for t in self._tasks if t.assignee == name)

    def stats(self) -> list[DashboardStats]:
        return compute_stats(self._tasks, self._participants)

    # ---- startup ----

    def load(self) -> tuple[Task, ...]:
        """
        Read the persisted list.

        Missing value -> empty list. Unreadable or corrupt value -> logged and
        treated as empty; startup never fails because of storage contents.
        """
        try:
            raw = self._storage.get_item(self._storage_key)
            if raw is None:
                self._tasks = ()
                return self._tasks
            try:
                data: Any = loads_strict(raw)
            except ValueError as e:
                raise StorageReadCorruption(f"key={self._storage_key} holds invalid JSON") from e
            self._tasks = tuple(normalize(data, self._ids, now_ms=self._clock_ms()))
        except (StorageReadCorruption, NotACollection):
            logger.exception("Failed to load tasks from storage; starting empty")
            self._tasks = ()

        logger.info("Loaded %d task(s) from key=%s", len(self._tasks), self._storage_key)
        return self._tasks

    # ---- mutations ----

    def add_manual(
        self,
        title: str,
        assignee: str,
        priority: Priority | str,
        description: str | None = None,
    ) -> Task | None:
        """Create one task. Returns None (and changes nothing) for a blank title."""
        title = (title or "").strip()
        if not title:
            return None
        if assignee not in self._participants:
            raise ValueError(f"unknown assignee: {assignee!r}")
        prio = Priority.parse(priority)
        if prio is None:
            raise ValueError(f"unknown priority: {priority!r}")

        task = Task(
            id=self._ids.generate(),
            title=title,
            assignee=assignee,
            priority=prio,
            is_completed=False,
            created_at=self._clock_ms(),
            description=description,
        )
        self._commit((task, *self._tasks))
        logger.debug("Task added id=%s assignee=%s priority=%s", task.id, assignee, prio.value)
        return task

    def add_from_parsed_batch(self, parsed: Iterable[ParsedTask]) -> list[Task]:
        """Prepend one new task per parsed entry, keeping the batch's own order."""
        now = self._clock_ms()
        batch = [
            Task(
                id=self._ids.generate(),
                title=p.title,
                assignee=p.assignee,
                priority=p.priority,
                is_completed=False,
                created_at=now,
                description=p.description,
            )
            for p in parsed
        ]
        if not batch:
            return []

        self._commit((*batch, *self._tasks))
        logger.debug("Added %d parsed task(s)", len(batch))
        return batch

    def toggle(self, task_id: str) -> Task | None:
        """Flip is_completed on the matching task. Returns the new task, or None if absent."""
        updated: Task | None = None
        out: list[Task] = []
        for t in self._tasks:
            if updated is None and t.id == task_id:
                updated = dataclasses.replace(t, is_completed=not t.is_completed)
                out.append(updated)
            else:
                out.append(t)

        if updated is None:
            return None
        self._commit(tuple(out))
        return updated

    def delete(self, task_id: str) -> bool:
        remaining = tuple(t for t in self._tasks if t.id != task_id)
        if len(remaining) == len(self._tasks):
            return False
        self._commit(remaining)
        return True

    def replace_all(self, raw: Any) -> int:
        """
        Replace the whole list with `raw` after normalization.

        Raises NotACollection (store untouched) when raw is not a list.
        """
        tasks = normalize(raw, self._ids, now_ms=self._clock_ms())
        self._commit(tuple(tasks))
        logger.info("Task list replaced (%d task(s))", len(tasks))
        return len(tasks)

    # ---- sync ----

    def export_code(self) -> str:
        return self._codec.encode(self._tasks)

    def import_code(self, code: str) -> int:
        """
        Replace the list with the contents of a sync code.

        DecodeFailure / NotACollection propagate and the store is left as it was.
        """
        tasks = self._codec.decode(code)
        self._commit(tuple(tasks))
        logger.info("Imported %d task(s) from sync code", len(tasks))
        return len(tasks)

    # ---- internals ----

    def _commit(self, tasks: tuple[Task, ...]) -> None:
        self._tasks = tasks
        if self._scheduler is not None:
            self._scheduler.schedule(tasks)
