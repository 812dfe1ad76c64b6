"""Process-wide SIGINT/SIGTERM hook that routes into the run's cleanup path."""

from __future__ import annotations

import asyncio
import logging
import signal
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

SHUTDOWN_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class ShutdownController:
    """Cancel the orchestrating task on the first interrupt, ignore the rest.

    The cancelled task owns the cleanup; this class never closes anything
    itself. Signals arriving after ``begin_cleanup`` are ignored so that
    closing the session is never interrupted halfway.
    """

    def __init__(self, task: "asyncio.Task[Any]") -> None:
        self._task = task
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._previous: Dict[int, Any] = {}
        self._loop_handlers = False
        self.received: Optional[int] = None
        self.cleaning_up = False

    @property
    def triggered(self) -> bool:
        return self.received is not None

    def install(self) -> None:
        self._loop = asyncio.get_running_loop()
        for sig in SHUTDOWN_SIGNALS:
            try:
                self._loop.add_signal_handler(sig, self.handle_signal, sig)
                self._loop_handlers = True
            except NotImplementedError:
                self._previous[sig] = signal.signal(sig, self._threadsafe_handler)

    def uninstall(self) -> None:
        if self._loop is None:
            return
        if self._loop_handlers:
            for sig in SHUTDOWN_SIGNALS:
                self._loop.remove_signal_handler(sig)
        for sig, previous in self._previous.items():
            signal.signal(sig, previous)
        self._previous.clear()
        self._loop_handlers = False
        self._loop = None

    def begin_cleanup(self) -> None:
        self.cleaning_up = True

    def handle_signal(self, signum: int) -> None:
        name = signal.Signals(signum).name
        if self.triggered or self.cleaning_up:
            logger.info("Received %s while shutting down; ignoring.", name)
            return
        self.received = signum
        logger.warning("Received %s; stopping automation.", name)
        self._task.cancel()

    def _threadsafe_handler(self, signum: int, frame: Any) -> None:
        if self._loop is not None:
            self._loop.call_soon_threadsafe(self.handle_signal, signum)
