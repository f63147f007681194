# src/sister_sync/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures the local (gitignored) data directory exists,
- wires concrete implementations into AppState (storage/scheduler/store/LLM).
"""

from __future__ import annotations

import logging

from ..assistant.motivation import LLMMotivationGenerator
from ..assistant.smart_parser import LLMTaskParser
from ..config import get_settings
from ..core.ports import LLMClient, Timer
from ..core.state import AppState
from ..llm.client import OpenRouterLLMClient
from ..llm.offline import OfflineLLMClient
from ..storage.local_storage import SQLiteLocalStorage
from ..tasks.errors import AIUnavailable
from ..tasks.ids import IdGenerator
from ..tasks.persistence import AsyncioTimer, PersistenceScheduler, StatusListener
from ..tasks.task_models import SaveStatus
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.storage_db_path.parent.mkdir(parents=True, exist_ok=True)


def _log_status(status: SaveStatus) -> None:
    if status == SaveStatus.ERROR:
        logger.warning("Could not save tasks. Storage may be full or disabled.")
    else:
        logger.debug("Save status: %s", status.value)


def create_initial_state(
    *,
    settings=None,
    timer: Timer | None = None,
    on_status: StatusListener | None = None,
) -> AppState:
    """
    Create AppState from the provided settings and load the persisted tasks.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    storage = SQLiteLocalStorage(settings.storage_db_path, quota_bytes=settings.storage_quota_bytes)
    scheduler = PersistenceScheduler(
        storage,
        key=settings.storage_key,
        timer=timer or AsyncioTimer(),
        debounce_seconds=settings.save_debounce_ms / 1000.0,
        saved_indicator_seconds=settings.saved_indicator_ms / 1000.0,
        on_status=on_status or _log_status,
    )
    store = TaskStore(
        storage,
        ids=IdGenerator(),
        participants=settings.participants,
        storage_key=settings.storage_key,
        scheduler=scheduler,
    )
    store.load()

    llm_client: LLMClient
    llm_online = True
    try:
        llm_client = OpenRouterLLMClient(settings)
    except AIUnavailable as e:
        # Fallback for local runs without an API key: /magic reports it cannot help.
        logger.info("LLM disabled: %s", e)
        llm_client = OfflineLLMClient()
        llm_online = False

    return AppState(
        settings=settings,
        store=store,
        parser=LLMTaskParser(llm_client, settings.participants),
        motivation=LLMMotivationGenerator(llm_client, settings.participants),
        llm_online=llm_online,
    )
