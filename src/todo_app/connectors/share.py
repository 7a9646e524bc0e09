# src/todo_app/connectors/share.py

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import Callable
from pathlib import Path

logger = logging.getLogger(__name__)


class ConsoleShareTarget:
    """Prints the shared text (default target for the console front-end)."""

    def __init__(self, write: Callable[[str], None] = print) -> None:
        self._write = write

    async def share_text(self, text: str) -> None:
        self._write(text)


class FileShareTarget:
    """
    Writes the shared text to a file, replacing it atomically.

    The write runs in a worker thread to keep the event loop free.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def _write(self, text: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(text, "utf-8")
        os.replace(tmp, self.path)

    async def share_text(self, text: str) -> None:
        await asyncio.to_thread(self._write, text)
        logger.info("Task list shared to %s", self.path)
