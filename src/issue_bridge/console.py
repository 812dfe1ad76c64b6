"""Blocking operator confirmation that cooperates with the event loop."""

from __future__ import annotations

import asyncio
import logging
import sys
import threading
from typing import Awaitable, Callable, Optional, TextIO

logger = logging.getLogger(__name__)

ConfirmGate = Callable[[str], Awaitable[str]]


async def wait_for_enter(prompt: str, stream: Optional[TextIO] = None) -> str:
    """Log ``prompt`` and wait for one line (or EOF) without blocking the loop."""
    stream = stream or sys.stdin
    logger.info(prompt)
    loop = asyncio.get_running_loop()
    future: asyncio.Future[str] = loop.create_future()

    def _resolve(line: str) -> None:
        if not future.done():
            future.set_result(line)

    try:
        fd = stream.fileno()
        loop.add_reader(fd, lambda: _resolve(stream.readline()))
    except (NotImplementedError, PermissionError, ValueError, OSError):
        _start_reader_thread(loop, stream, _resolve)
        return await future

    try:
        return await future
    finally:
        loop.remove_reader(fd)


def _start_reader_thread(loop: asyncio.AbstractEventLoop, stream: TextIO, resolve: Callable[[str], None]) -> None:
    def _read() -> None:
        try:
            line = stream.readline()
        except (OSError, ValueError):
            line = ""
        try:
            loop.call_soon_threadsafe(resolve, line)
        except RuntimeError:
            pass  # loop already closed

    threading.Thread(target=_read, name="operator-input", daemon=True).start()
