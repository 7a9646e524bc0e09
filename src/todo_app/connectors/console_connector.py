# src/todo_app/connectors/console_connector.py

from __future__ import annotations

import asyncio
import contextlib
import logging
import threading
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..cli.commands import stop_watch
from ..core.state import AppState

logger = logging.getLogger(__name__)

PROMPT = ">>> "


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}", flush=True)


def _deliver(fut: asyncio.Future[str], line: str | None, exc: BaseException | None) -> None:
    if fut.done():
        return
    if exc is not None:
        fut.set_exception(exc)
    else:
        fut.set_result(line or "")


def read_line(prompt: str = PROMPT) -> asyncio.Future[str]:
    """
    Read one console line without blocking the event loop.

    input() runs on a daemon thread, not the default executor: asyncio.run()
    waits for executor threads on shutdown, so a pending prompt would hold
    Ctrl+C until the user pressed Enter.
    """
    loop = asyncio.get_running_loop()
    fut: asyncio.Future[str] = loop.create_future()

    def worker() -> None:
        line: str | None = None
        exc: BaseException | None = None
        try:
            line = input(prompt)
        except (EOFError, OSError) as e:
            exc = e
        # The loop may already be closed if the app exited while we waited.
        with contextlib.suppress(RuntimeError):
            loop.call_soon_threadsafe(_deliver, fut, line, exc)

    threading.Thread(target=worker, name="console-input", daemon=True).start()
    return fut


async def run_console_loop(state: AppState) -> None:
    """
    Interactive REPL over the command registry.

    Background subscriptions (/watch) keep printing while the prompt waits.
    Cancelling the coroutine (Ctrl+C under asyncio.run) stops the loop and
    the watch task.
    """
    app_name = str(getattr(getattr(state, "settings", None), "app_name", "todo"))
    logger.info("Console connector started (%s).", app_name)
    _print_ts(f"[{app_name.upper()}] Type /help for commands. Use /exit to quit.\n")

    try:
        while True:
            try:
                user_input = (await read_line()).strip()
            except (EOFError, OSError):
                logger.info("Console input closed, exiting.")
                break

            if not user_input:
                continue

            if user_input.lower() in ("/exit", "/quit"):
                logger.info("Console exit command received.")
                break

            if not user_input.startswith("/"):
                _print_ts("Commands start with '/'. Try /help.")
                continue

            try:
                reply = await command_registry.handle(state, user_input, emit=_print_ts)
            except Exception:
                logger.exception("Command failed: %s", user_input)
                _print_ts("Command failed, see the log for details.")
                continue

            if reply:
                _print_ts(reply)
    finally:
        await stop_watch(state)
