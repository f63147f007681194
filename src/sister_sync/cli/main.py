# src/sister_sync/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState inside the event loop, runs the console
REPL, and flushes any pending save before exiting.
"""

from __future__ import annotations

import asyncio
import logging

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..core.state import AppState
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


def _shutdown(state: AppState) -> None:
    """Best-effort shutdown: write what the debounce window has not written yet."""
    scheduler = state.store.scheduler
    if scheduler is None:
        return
    try:
        scheduler.flush()
    except Exception:
        logger.exception("Final save failed.")
    finally:
        scheduler.close()


async def _run(settings) -> None:
    # The scheduler's timer needs the running loop, so build the state here.
    state = create_initial_state(settings=settings)
    try:
        await run_console_loop(state)
    finally:
        _shutdown(state)


def main() -> None:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)
    setup_logging(log_dir=settings.data_dir, console_level=console_level)

    logger.info("Starting %s...", settings.app_name)
    try:
        asyncio.run(_run(settings))
    except KeyboardInterrupt:
        logger.info("Interrupted.")
    logger.info("Bye.")


if __name__ == "__main__":
    main()
