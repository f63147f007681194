# src/sister_sync/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The core depends on Protocols instead of concrete implementations.
This keeps storage, timers and AI providers swappable and makes testing easier.
"""

from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from ..tasks.task_models import SmartTaskResponse

ChatMessage = dict[str, str]
# OpenAI-style chat messages: {"role": "...", "content": "..."}.


class LLMClient(Protocol):
    """Streaming chat completion client (OpenAI/OpenRouter-compatible)."""
    def stream_chat(self, messages: list[ChatMessage], system_prompt: str) -> Iterable[str]: ...


class KeyValueStorage(Protocol):
    """
    Durable string slots, shaped like the browser's localStorage.

    set_item raises StorageWriteError when the write is refused.
    """

    def get_item(self, key: str) -> str | None: ...
    def set_item(self, key: str, value: str) -> None: ...
    def remove_item(self, key: str) -> None: ...


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Timer(Protocol):
    """Deferred callbacks. asyncio's loop.call_later in production, a manual clock in tests."""
    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle: ...


class TaskParser(Protocol):
    """Natural-language -> tasks. Returns None when the input could not be understood."""
    async def parse(self, text: str) -> SmartTaskResponse | None: ...


class MotivationGenerator(Protocol):
    """Short cheer-up line. Never fails: falls back to a canned string."""
    async def generate(self, pending_count: int, completed_count: int) -> str: ...
