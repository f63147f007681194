# tests/test_migrate.py

from __future__ import annotations

import pytest

from sister_sync.tasks.errors import NotACollection
from sister_sync.tasks.ids import IdGenerator
from sister_sync.tasks.migrate import normalize
from sister_sync.tasks.task_models import Priority

NOW = 1_700_000_000_000


@pytest.mark.parametrize("raw", [{"tasks": []}, "[]", None, 42])
def test_rejects_non_collections(raw) -> None:
    with pytest.raises(NotACollection):
        normalize(raw, IdGenerator(), now_ms=NOW)


def test_backfills_missing_fields() -> None:
    raw = [
        {"title": "X", "assignee": "Chloe", "priority": "High"},
        {"id": "", "title": "Y", "assignee": "Anna", "priority": "Low", "createdAt": 5},
    ]

    tasks = normalize(raw, IdGenerator(), now_ms=NOW)

    assert len(tasks) == 2
    assert tasks[0].id and tasks[1].id and tasks[0].id != tasks[1].id
    assert tasks[0].is_completed is False
    assert tasks[0].created_at == NOW
    assert tasks[0].priority is Priority.HIGH
    assert tasks[1].created_at == 5


def test_keeps_existing_ids_and_coerces_completion() -> None:
    raw = [
        {"id": "a", "title": "A", "assignee": "Anna", "priority": "Low", "isCompleted": "yes", "createdAt": 1},
        {"id": "b", "title": "B", "assignee": "Anna", "priority": "Low", "isCompleted": 0, "createdAt": 2},
        {"id": "c", "title": "C", "assignee": "Anna", "priority": "Low", "isCompleted": None, "createdAt": 3},
    ]

    tasks = normalize(raw, IdGenerator(), now_ms=NOW)

    assert [t.id for t in tasks] == ["a", "b", "c"]
    assert [t.is_completed for t in tasks] == [True, False, False]


def test_passes_unknown_values_through() -> None:
    raw = [
        {
            "id": "x",
            "title": "Walk dog",
            "assignee": "Dora",
            "priority": "Urgent",
            "createdAt": 1,
            "color": "pink",
        }
    ]

    (task,) = normalize(raw, IdGenerator(), now_ms=NOW)

    assert task.assignee == "Dora"
    assert task.priority == "Urgent"
    assert task.extra == {"color": "pink"}
    assert task.to_dict()["color"] == "pink"


def test_skips_non_object_records() -> None:
    raw = ["junk", 3, {"id": "ok", "title": "Fine", "assignee": "Bella", "priority": "Medium", "createdAt": 1}]

    tasks = normalize(raw, IdGenerator(), now_ms=NOW)

    assert [t.id for t in tasks] == ["ok"]


def test_normalize_is_idempotent() -> None:
    ids = IdGenerator()
    raw = [
        {"title": "X", "assignee": "Chloe", "priority": "High", "note": 1},
        {"id": "k", "title": "Y", "assignee": "Anna", "priority": "Low", "isCompleted": 1, "description": "d"},
    ]

    once = normalize(raw, ids, now_ms=NOW)
    twice = normalize(once, ids, now_ms=NOW + 10_000)

    assert twice == once
    assert [t.extra for t in twice] == [t.extra for t in once]
    assert [t.to_dict() for t in twice] == [t.to_dict() for t in once]
