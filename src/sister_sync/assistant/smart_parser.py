# src/sister_sync/assistant/smart_parser.py

from __future__ import annotations

import asyncio
import json
import logging
import re
from collections.abc import Sequence
from typing import Any

from ..core.ports import LLMClient
from ..llm.client import collect_text
from ..tasks.task_models import ParsedTask, Priority, SmartTaskResponse

logger = logging.getLogger(__name__)

SMART_PARSE_SYSTEM_PROMPT = """
You turn a free-text request into tasks for a shared todo app.

Reply with JSON only, no prose, in exactly this shape:
{"tasks": [{"title": "...", "description": "...", "assignee": "...", "priority": "..."}]}

Rules:
- assignee must be one of: {participants}
- If no person is mentioned, assign to "{default_assignee}".
- priority must be one of: Low, Medium, High.
  Infer it from urgency words (ASAP, today -> High; eventually, someday -> Low).
- description is optional; omit it when there is nothing to add.
""".strip()

_FENCE_START = re.compile(r"^```(?:json)?\s*", re.IGNORECASE)
_FENCE_END = re.compile(r"\s*```$")


def _strip_fences(text: str) -> str:
    text = text.strip()
    text = _FENCE_START.sub("", text)
    return _FENCE_END.sub("", text)


def _extract_json(text: str) -> Any:
    """Parse the model output; falls back to the outermost {...} block."""
    text = _strip_fences(text)
    try:
        return json.loads(text)
    except ValueError:
        start, end = text.find("{"), text.rfind("}")
        if start == -1 or end <= start:
            raise
        return json.loads(text[start : end + 1])


class LLMTaskParser:
    """
    TaskParser backed by an LLMClient.

    Entries whose assignee or priority fall outside the fixed sets are
    dropped; the store trusts whatever this class returns.
    """

    def __init__(self, llm: LLMClient, participants: Sequence[str]) -> None:
        self._llm = llm
        self._participants = tuple(participants)

    def _system_prompt(self) -> str:
        return SMART_PARSE_SYSTEM_PROMPT.replace(
            "{participants}", ", ".join(self._participants)
        ).replace("{default_assignee}", self._participants[0])

    async def parse(self, text: str) -> SmartTaskResponse | None:
        text = (text or "").strip()
        if not text:
            return None

        messages = [{"role": "user", "content": text}]
        try:
            raw = await asyncio.to_thread(collect_text, self._llm, messages, self._system_prompt())
        except Exception:
            logger.exception("Smart parse failed (LLM call)")
            return None

        if not raw.strip():
            return None

        try:
            data = _extract_json(raw)
        except ValueError:
            logger.warning("Smart parse: model output is not JSON: %r", raw[:200])
            return None

        tasks = self._validate(data)
        if not tasks:
            return None
        return SmartTaskResponse(tasks=tasks)

    def _validate(self, data: Any) -> list[ParsedTask]:
        items = data.get("tasks") if isinstance(data, dict) else None
        if not isinstance(items, list):
            return []

        out: list[ParsedTask] = []
        for item in items:
            if not isinstance(item, dict):
                continue

            title = str(item.get("title") or "").strip()
            if not title:
                continue

            assignee = item.get("assignee") or self._participants[0]
            if assignee not in self._participants:
                logger.info("Smart parse: dropping task with unknown assignee=%r", assignee)
                continue

            priority = Priority.parse(item.get("priority"))
            if priority is None:
                logger.info("Smart parse: dropping task with unknown priority=%r", item.get("priority"))
                continue

            description = item.get("description")
            description = str(description).strip() if description else None

            out.append(
                ParsedTask(
                    title=title,
                    assignee=assignee,
                    priority=priority,
                    description=description or None,
                )
            )
        return out
