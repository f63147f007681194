# tests/test_sync_codec.py

from __future__ import annotations

import base64
import string

import pytest

from sister_sync.tasks.errors import DecodeFailure, NotACollection
from sister_sync.tasks.ids import IdGenerator
from sister_sync.tasks.sync_codec import EXPORT_ERROR_CODE, SyncCodec
from sister_sync.tasks.task_models import Priority, Task


def _code(escaped: str) -> str:
    return base64.b64encode(escaped.encode("ascii")).decode("ascii")


@pytest.fixture()
def codec() -> SyncCodec:
    return SyncCodec(IdGenerator())


def _sample() -> list[Task]:
    return [
        Task(
            id="t1",
            title="Mjölk & bröd 🥛",
            assignee="Anna",
            priority=Priority.MEDIUM,
            is_completed=True,
            created_at=1_700_000_000_001,
            description='Oat, not "regular"',
        ),
        Task(
            id="t2",
            title="Vacuum 100%",
            assignee="Bella",
            priority=Priority.HIGH,
            created_at=1_700_000_000_002,
            extra={"pinned": True},
        ),
    ]


def test_round_trip_preserves_everything(codec: SyncCodec) -> None:
    tasks = _sample()

    code = codec.encode(tasks)
    back = codec.decode(code)

    assert back == tasks
    assert back[0].description == 'Oat, not "regular"'
    assert back[1].description is None
    assert back[1].extra == {"pinned": True}


def test_code_is_plain_ascii(codec: SyncCodec) -> None:
    code = codec.encode(_sample())
    allowed = set(string.ascii_letters + string.digits + "+/=")
    assert set(code) <= allowed


def test_escaping_matches_encode_uri_component(codec: SyncCodec) -> None:
    # encodeURIComponent(JSON.stringify([...])) as produced by the browser app
    escaped = (
        "%5B%7B%22id%22%3A%22a%22%2C%22title%22%3A%22Caf%C3%A9%20(soon)!%22%2C"
        "%22assignee%22%3A%22Chloe%22%2C%22isCompleted%22%3Afalse%2C"
        "%22priority%22%3A%22Low%22%2C%22createdAt%22%3A1%7D%5D"
    )
    (task,) = codec.decode(_code(escaped))

    assert task.title == "Café (soon)!"
    assert codec.encode([task]) == _code(escaped)


def test_import_without_ids_gets_ids(codec: SyncCodec) -> None:
    escaped = "%5B%7B%22title%22%3A%22X%22%2C%22assignee%22%3A%22Chloe%22%2C%22priority%22%3A%22High%22%7D%5D"

    (task,) = codec.decode(_code(escaped))

    assert task.id
    assert task.is_completed is False
    assert task.title == "X"


def test_whitespace_and_missing_padding_tolerated(codec: SyncCodec) -> None:
    code = codec.encode(_sample()).rstrip("=")
    wrapped = "  " + code[:10] + "\n" + code[10:] + "\n"

    assert codec.decode(wrapped) == _sample()


@pytest.mark.parametrize(
    "code",
    [
        "not-valid-base64!!",
        "",
        _code("%E0%A4%A"),
        _code("%zz"),
        _code("%FF%FE"),
        _code("not%20json"),
        _code("NaN"),
        pytest.param(_code("[" * 100_000 + "]" * 100_000), id="deep-nesting"),
        pytest.param(
            _code('[{"id":"a","title":"x","assignee":"Anna","priority":"Low","createdAt":1e400}]'),
            id="float-overflow",
        ),
    ],
)
def test_corrupt_codes_fail(codec: SyncCodec, code: str) -> None:
    with pytest.raises(DecodeFailure):
        codec.decode(code)


def test_non_list_payload_rejected(codec: SyncCodec) -> None:
    with pytest.raises(NotACollection):
        codec.decode(_code("%7B%22tasks%22%3A%5B%5D%7D"))


def test_encode_failure_returns_sentinel(codec: SyncCodec) -> None:
    bad = Task(id="x", title="x", assignee="Anna", priority=Priority.LOW, extra={"obj": object()})
    assert codec.encode([bad]) == EXPORT_ERROR_CODE
