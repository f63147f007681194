# src/sister_sync/llm/offline.py

from __future__ import annotations

from collections.abc import Iterable

from ..core.ports import ChatMessage
from ..tasks.errors import AIUnavailable


class OfflineLLMClient:
    """
    Stand-in client used when no external API is configured.

    Every call fails with AIUnavailable, so the smart parser reports
    "couldn't understand" and the motivation line falls back to its canned text.
    """

    def stream_chat(self, messages: list[ChatMessage], system_prompt: str) -> Iterable[str]:
        raise AIUnavailable(
            "Offline mode: no LLM is configured. "
            "Set SISTERSYNC_OPENROUTER_API_KEY (and SISTERSYNC_LLM_MODELS) to enable /magic."
        )
