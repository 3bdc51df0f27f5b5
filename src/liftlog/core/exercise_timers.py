"""
Per-exercise timers.

Each exercise in a session (by its position) can be timed independently of
the session clock. An exercise is either running (a start timestamp) or
paused (an accumulated number of seconds), never both. Elapsed time is
always derived from the stored timestamps and the clock.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Callable

from .reindex import shift_indices_after_removal

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


class ExerciseTimerTracker:
    """
    Running / paused timer entries keyed by exercise index.
    """

    def __init__(self, clock: Clock = datetime.now):
        self._clock = clock
        self._started_at: dict[int, datetime] = {}
        self._accumulated: dict[int, float] = {}

    def start_timer(self, index: int) -> bool:
        """
        Start or resume the timer for one exercise.

        Resuming back-dates the start by the accumulated seconds so that
        running_time() continues from where it was paused.
        """
        if index in self._started_at:
            return False
        now = self._clock()
        accumulated = self._accumulated.pop(index, None)
        if accumulated is not None:
            self._started_at[index] = now - timedelta(seconds=accumulated)
            logger.debug("Resumed exercise timer %d at %.1fs", index, accumulated)
        else:
            self._started_at[index] = now
            logger.debug("Started exercise timer %d", index)
        return True

    def pause_timer(self, index: int) -> bool:
        started = self._started_at.pop(index, None)
        if started is None:
            return False
        elapsed = max(0.0, (self._clock() - started).total_seconds())
        self._accumulated[index] = elapsed
        logger.debug("Paused exercise timer %d at %.1fs", index, elapsed)
        return True

    def stop_timer(self, index: int) -> None:
        self._started_at.pop(index, None)
        self._accumulated.pop(index, None)

    def pause_all(self) -> list[int]:
        """Pause every running timer; returns the indices that were paused."""
        running = sorted(self._started_at)
        for index in running:
            self.pause_timer(index)
        return running

    def running_time(self, index: int) -> float:
        started = self._started_at.get(index)
        if started is not None:
            return max(0.0, (self._clock() - started).total_seconds())
        return self._accumulated.get(index, 0.0)

    def is_running(self, index: int) -> bool:
        return index in self._started_at

    def is_paused(self, index: int) -> bool:
        return index in self._accumulated

    def running_indices(self) -> list[int]:
        return sorted(self._started_at)

    def tracked_indices(self) -> list[int]:
        return sorted(set(self._started_at) | set(self._accumulated))

    def shift_after_removal(self, removed_index: int) -> None:
        self._started_at = shift_indices_after_removal(self._started_at, removed_index)
        self._accumulated = shift_indices_after_removal(self._accumulated, removed_index)

    def clear(self) -> None:
        self._started_at.clear()
        self._accumulated.clear()
