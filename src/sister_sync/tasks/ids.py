# src/sister_sync/tasks/ids.py

from __future__ import annotations

import logging
import random
import time
import uuid
from collections.abc import Callable

logger = logging.getLogger(__name__)

_COUNTER_WRAP = 10000
_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"

_counter = 0  # process-wide, wrapped at _COUNTER_WRAP


def _base36(n: int) -> str:
    if n <= 0:
        return "0"
    digits: list[str] = []
    while n:
        n, rem = divmod(n, 36)
        digits.append(_ALPHABET[rem])
    return "".join(reversed(digits))


def _now_ms() -> int:
    return int(time.time() * 1000)


class IdGenerator:
    """
    Collision-resistant task ids.

    uuid4 is used whenever the OS can supply randomness. Otherwise the id is
    "<time>-<random>-<counter>": the counter keeps ids distinct inside this
    process even when the clock does not move between calls.
    """

    def __init__(
        self,
        *,
        prefer_uuid: bool = True,
        clock_ms: Callable[[], int] | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._prefer_uuid = prefer_uuid
        self._clock_ms = clock_ms or _now_ms
        self._rng = rng or random.Random()

    def generate(self) -> str:
        if self._prefer_uuid:
            try:
                return str(uuid.uuid4())
            except (NotImplementedError, OSError):
                logger.debug("uuid4 unavailable; using fallback id scheme", exc_info=True)
        return self._fallback_id()

    def _fallback_id(self) -> str:
        global _counter
        _counter = (_counter + 1) % _COUNTER_WRAP

        try:
            timestamp = _base36(int(self._clock_ms()))
        except Exception:
            timestamp = "0"
        random_part = "".join(self._rng.choice(_ALPHABET) for _ in range(6))
        return f"{timestamp}-{random_part}-{_counter}"
