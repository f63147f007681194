# src/sister_sync/tasks/stats.py

from __future__ import annotations

from collections.abc import Iterable, Sequence

from .task_models import DashboardStats, Task


def compute_stats(tasks: Iterable[Task], participants: Sequence[str]) -> list[DashboardStats]:
    """Per-participant done/to-do counts, in participant order. Unknown assignees are not counted."""
    completed = {name: 0 for name in participants}
    pending = {name: 0 for name in participants}

    for t in tasks:
        # assignee comes from imported data and may be any JSON value
        if not isinstance(t.assignee, str) or t.assignee not in completed:
            continue
        if t.is_completed:
            completed[t.assignee] += 1
        else:
            pending[t.assignee] += 1

    return [
        DashboardStats(
            name=name,
            completed=completed[name],
            pending=pending[name],
            total=completed[name] + pending[name],
        )
        for name in participants
    ]
