# src/sister_sync/connectors/console_connector.py

from __future__ import annotations

import asyncio
import contextlib
import logging
import threading
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..core.state import AppState

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}", flush=True)


async def _read_line(prompt: str) -> str:
    """
    input() on a daemon thread.

    The event loop keeps firing persistence timers while the prompt waits, and
    a reader still blocked at exit does not keep the process alive.
    """
    loop = asyncio.get_running_loop()
    fut: asyncio.Future[str] = loop.create_future()

    def _deliver(line: str | None, exc: Exception | None) -> None:
        if fut.done():
            return
        if exc is not None:
            fut.set_exception(exc)
        else:
            fut.set_result(line or "")

    def _reader() -> None:
        try:
            line, exc = input(prompt), None
        except Exception as e:  # EOFError, closed stdin
            line, exc = None, e
        with contextlib.suppress(RuntimeError):  # loop already closed
            loop.call_soon_threadsafe(_deliver, line, exc)

    threading.Thread(target=_reader, name="console-input", daemon=True).start()
    return await fut


async def run_console_loop(state: AppState) -> None:
    """Interactive REPL: slash commands only, replies printed with a timestamp."""
    logger.info("Console connector started (tasks=%d).", len(state.store.tasks))
    app_name = str(getattr(state.settings, "app_name", "SisterSync"))

    quote = await state.motivation.generate(state.store.pending_count, state.store.completed_count)
    _print_ts(f'[{app_name}] "{quote}"')
    _print_ts("[CONSOLE] Use /help for commands, /list to see tasks, /exit to quit.\n")

    while True:
        try:
            user_input = (await _read_line(">>> ")).strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        if not user_input.startswith("/"):
            _print_ts("Commands start with '/'. Try /help, or /magic <text> to add tasks in plain words.")
            continue

        try:
            reply = await command_registry.handle(state, user_input, emit=_print_ts)
        except Exception:
            logger.exception("Command handler crashed.")
            reply = "Internal error while handling a command."

        if reply is not None:
            _print_ts(reply)

    logger.info("Console connector finished.")
