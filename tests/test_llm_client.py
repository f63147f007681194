# tests/test_llm_client.py

from __future__ import annotations

from types import SimpleNamespace

import pytest

from sister_sync.llm.client import OpenRouterLLMClient, collect_text
from sister_sync.tasks.errors import AIUnavailable


def _chunk(text: str) -> SimpleNamespace:
    return SimpleNamespace(choices=[SimpleNamespace(delta=SimpleNamespace(content=text))])


@pytest.fixture()
def client(settings) -> tuple[OpenRouterLLMClient, list[str]]:
    """Client over two models whose create() is replaced by scripted streams."""
    settings.openrouter_api_key = "test-key"
    settings.llm_models = ["first/model", "second/model"]
    llm = OpenRouterLLMClient(settings)
    calls: list[str] = []
    return llm, calls


def _script(monkeypatch, llm: OpenRouterLLMClient, calls: list[str], streams: dict) -> None:
    def create(*, model, **_kwargs):
        calls.append(model)
        return streams[model]()

    monkeypatch.setattr(llm._client.chat.completions, "create", create)


def test_falls_through_to_next_model_before_any_output(client, monkeypatch) -> None:
    llm, calls = client

    def broken():
        raise RuntimeError("upstream 500")
        yield  # pragma: no cover

    def working():
        yield _chunk("Hello ")
        yield _chunk("there")

    _script(monkeypatch, llm, calls, {"first/model": broken, "second/model": working})

    assert collect_text(llm, [], "system") == "Hello there"
    assert calls == ["first/model", "second/model"]


def test_stream_broken_mid_answer_is_not_retried(client, monkeypatch) -> None:
    llm, calls = client

    def partial():
        yield _chunk("Half an ans")
        raise RuntimeError("connection reset")

    def working():
        yield _chunk("A whole new answer")

    _script(monkeypatch, llm, calls, {"first/model": partial, "second/model": working})

    with pytest.raises(AIUnavailable):
        collect_text(llm, [], "system")
    assert calls == ["first/model"]


def test_missing_api_key_is_unavailable(settings) -> None:
    with pytest.raises(AIUnavailable):
        OpenRouterLLMClient(settings)
