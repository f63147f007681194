# src/sister_sync/assistant/motivation.py

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence

from ..core.ports import LLMClient
from ..llm.client import collect_text

logger = logging.getLogger(__name__)

EMPTY_REPLY_FALLBACK = "Keep up the great work, sisters!"
ERROR_FALLBACK = "You're doing great together!"

_MAX_CHARS = 280

MOTIVATION_SYSTEM_PROMPT = """
You write one short, punchy, encouraging sentence for a small group sharing a todo list.
Be fun and warm. No emojis, no hashtags, no quotes around the sentence.
""".strip()


class LLMMotivationGenerator:
    def __init__(self, llm: LLMClient, participants: Sequence[str]) -> None:
        self._llm = llm
        self._participants = tuple(participants)

    async def generate(self, pending_count: int, completed_count: int) -> str:
        names = ", ".join(self._participants)
        messages = [
            {
                "role": "user",
                "content": (
                    f"{names} have completed {int(completed_count)} tasks "
                    f"and have {int(pending_count)} left."
                ),
            }
        ]
        try:
            text = await asyncio.to_thread(collect_text, self._llm, messages, MOTIVATION_SYSTEM_PROMPT)
        except Exception:
            logger.info("Motivation message unavailable; using fallback.", exc_info=True)
            return ERROR_FALLBACK

        text = " ".join(text.split()).strip().strip('"')
        if not text:
            return EMPTY_REPLY_FALLBACK
        if len(text) > _MAX_CHARS:
            text = text[:_MAX_CHARS] + "…"
        return text
