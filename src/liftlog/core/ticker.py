"""
Recurring display-refresh tick.

The tick only tells a view to redraw. It is never a source of truth for
elapsed time: durations are always recomputed from stored timestamps, so a
late, skipped or suspended tick cannot make the clocks drift.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable

from .config import TICK_INTERVAL_SECONDS

logger = logging.getLogger(__name__)


class Ticker:
    """
    Calls ``callback`` every ``interval`` seconds on a daemon thread until
    cancelled. start() and cancel() are idempotent.
    """

    def __init__(
        self,
        callback: Callable[[], None],
        interval: float = TICK_INTERVAL_SECONDS,
    ):
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.callback = callback
        self.interval = interval
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None
        self.tick_count = 0

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.is_running:
            return
        self._stop = threading.Event()
        self._thread = threading.Thread(
            target=self._run, args=(self._stop,), name="liftlog-tick", daemon=True
        )
        self._thread.start()
        logger.debug("Tick started (every %.1fs)", self.interval)

    def cancel(self) -> None:
        if self._thread is None:
            return
        self._stop.set()
        if self._thread is not threading.current_thread():
            self._thread.join(timeout=self.interval * 2)
        self._thread = None
        logger.debug("Tick cancelled after %d ticks", self.tick_count)

    def _run(self, stop: threading.Event) -> None:
        while not stop.wait(self.interval):
            self.tick_count += 1
            try:
                self.callback()
            except Exception:
                logger.exception("Tick callback failed; cancelling tick")
                stop.set()
