# src/sister_sync/tasks/migrate.py

"""
Normalization of task records of unknown shape.

Used for both directions data can arrive from:
- the persisted slot (records written by any earlier version of the app),
- decoded sync codes from another device.

Rules are deliberately minimal and idempotent:
- a missing/falsy id gets a fresh one,
- a missing createdAt gets "now",
- isCompleted is coerced to a strict bool,
- everything else is carried through unchanged (including unknown keys).
"""

from __future__ import annotations

import logging
import time
from collections.abc import Mapping
from typing import Any

from .errors import NotACollection
from .ids import IdGenerator
from .task_models import Task

logger = logging.getLogger(__name__)


def normalize(raw: Any, ids: IdGenerator, *, now_ms: int | None = None) -> list[Task]:
    """
    Turn a decoded payload into well-formed Tasks.

    Raises NotACollection when `raw` is not a list. Individual records never
    make the whole call fail; non-mapping entries are skipped.
    """
    if not isinstance(raw, (list, tuple)):
        raise NotACollection(f"expected a list of tasks, got {type(raw).__name__}")

    if now_ms is None:
        now_ms = int(time.time() * 1000)

    out: list[Task] = []
    skipped = 0
    for item in raw:
        if isinstance(item, Task):
            item = item.to_dict()
        if not isinstance(item, Mapping):
            skipped += 1
            continue

        record = dict(item)
        if not record.get("id"):
            record["id"] = ids.generate()
        if record.get("createdAt") is None:
            record["createdAt"] = now_ms
        record["isCompleted"] = bool(record.get("isCompleted"))

        out.append(Task.from_dict(record))

    if skipped:
        logger.warning("normalize: skipped %d non-object record(s)", skipped)
    return out
