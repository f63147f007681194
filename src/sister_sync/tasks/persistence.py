# src/sister_sync/tasks/persistence.py

from __future__ import annotations

"""
Debounced persistence of the task list.

Every change calls schedule(); the actual write happens once the list has
been quiet for `debounce_seconds`. A newer change cancels the pending write,
so a burst of edits costs one write carrying the final state.

Status reporting:
- SAVING as soon as a write starts
- SAVED `saved_indicator_seconds` after a successful write
- ERROR when serialization or the storage write fails (no automatic retry;
  the next change schedules a fresh attempt)
"""

import asyncio
import json
import logging
from collections.abc import Callable, Sequence

from ..core.ports import KeyValueStorage, Timer, TimerHandle
from .task_models import SaveStatus, Task

logger = logging.getLogger(__name__)

StatusListener = Callable[[SaveStatus], None]


class AsyncioTimer:
    """Timer port backed by the running asyncio loop."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        loop = self._loop or asyncio.get_running_loop()
        return loop.call_later(max(0.0, float(delay)), callback)


def serialize_tasks(tasks: Sequence[Task]) -> str:
    return json.dumps([t.to_dict() for t in tasks], ensure_ascii=False, allow_nan=False)


class PersistenceScheduler:
    def __init__(
        self,
        storage: KeyValueStorage,
        *,
        key: str,
        timer: Timer,
        debounce_seconds: float = 0.5,
        saved_indicator_seconds: float = 0.5,
        on_status: StatusListener | None = None,
    ) -> None:
        self._storage = storage
        self._key = key
        self._timer = timer
        self._debounce_s = max(0.0, float(debounce_seconds))
        self._saved_indicator_s = max(0.0, float(saved_indicator_seconds))
        self._on_status = on_status

        self._status = SaveStatus.SAVED
        self._pending: TimerHandle | None = None
        self._pending_snapshot: tuple[Task, ...] | None = None
        self._indicator: TimerHandle | None = None

    @property
    def status(self) -> SaveStatus:
        return self._status

    @property
    def pending(self) -> bool:
        return self._pending is not None

    def schedule(self, tasks: Sequence[Task]) -> None:
        """Arm a deferred write of `tasks`, replacing any write not yet issued."""
        if self._pending is not None:
            self._pending.cancel()

        self._pending_snapshot = tuple(tasks)
        self._pending = self._timer.call_later(self._debounce_s, self._fire)

    def flush(self) -> None:
        """Write the pending snapshot now (shutdown path). No-op when nothing is pending."""
        if self._pending is None:
            return
        self._pending.cancel()
        self._fire()

    def close(self) -> None:
        for handle in (self._pending, self._indicator):
            if handle is not None:
                handle.cancel()
        self._pending = None
        self._pending_snapshot = None
        self._indicator = None

    # ---- internals ----

    def _fire(self) -> None:
        snapshot = self._pending_snapshot or ()
        self._pending = None
        self._pending_snapshot = None
        self._write(snapshot)

    def _write(self, snapshot: tuple[Task, ...]) -> None:
        if self._indicator is not None:
            self._indicator.cancel()
            self._indicator = None

        self._set_status(SaveStatus.SAVING)
        try:
            self._storage.set_item(self._key, serialize_tasks(snapshot))
        except Exception:
            logger.exception("Failed to save %d task(s) to key=%s", len(snapshot), self._key)
            self._set_status(SaveStatus.ERROR)
            return

        logger.debug("Saved %d task(s) to key=%s", len(snapshot), self._key)
        self._indicator = self._timer.call_later(self._saved_indicator_s, self._mark_saved)

    def _mark_saved(self) -> None:
        self._indicator = None
        self._set_status(SaveStatus.SAVED)

    def _set_status(self, status: SaveStatus) -> None:
        if status == self._status:
            return
        self._status = status
        if self._on_status is None:
            return
        try:
            self._on_status(status)
        except Exception:
            logger.exception("Save status listener failed (status=%s)", status.value)
