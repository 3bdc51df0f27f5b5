"""
Fitness session orchestration.

SessionController is the single writer for a training session. It drives
the FitnessSession lifecycle, the per-exercise timers and the draft-set
input buffers, and answers the summary queries the UI polls.

Lifecycle:

    INACTIVE ──start──▶ ACTIVE ──pause──▶ PAUSED
        ▲                 │  ◀──resume──    │
        └──────stop───────┴──────stop───────┘
                          └──complete──▶ COMPLETED (persisted, archived)

Invalid transitions are silent no-ops returning False: the UI may send
redundant events (double taps) and nothing should surface for them.

Pausing the session pauses every running exercise timer before returning.
Resuming does not restart them; each exercise is resumed individually.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Protocol

from .exercise_timers import Clock, ExerciseTimerTracker
from .models import (
    CustomWorkout,
    ExerciseRef,
    ExerciseSession,
    FitnessSession,
    SessionState,
    SetRecord,
)
from .set_input import SetInput, SetInputBuffer
from .summary import ExerciseSummary, SessionSummary, summarize_exercise, summarize_session

logger = logging.getLogger(__name__)


class SessionPersistence(Protocol):
    """What the controller needs from a session store."""

    def save_session(self, session: FitnessSession) -> None: ...


class TickControl(Protocol):
    """A display-refresh tick the controller can start and cancel."""

    def start(self) -> None: ...

    def cancel(self) -> None: ...

    @property
    def is_running(self) -> bool: ...


class SessionController:
    """
    Owns the current FitnessSession plus its timers and input buffers.

    Args:
        store: Persistence collaborator; None keeps everything in memory
        clock: Source of "now", injectable for tests
        ticker: Display-refresh tick, kept running only while ACTIVE
        session: Session to resume control of (default: a fresh one)
    """

    def __init__(
        self,
        store: SessionPersistence | None = None,
        clock: Clock = datetime.now,
        ticker: TickControl | None = None,
        session: FitnessSession | None = None,
    ):
        self.store = store
        self.clock = clock
        self.ticker = ticker
        self.session = session or FitnessSession()
        self.timers = ExerciseTimerTracker(clock)
        self.inputs = SetInputBuffer()
        self.has_been_saved = False
        self.workout: CustomWorkout | None = None
        self._sync_tick()

    # ── State ────────────────────────────────────────────────────────────────

    @property
    def state(self) -> SessionState:
        return self.session.state

    @property
    def exercises(self) -> list[ExerciseSession]:
        return self.session.exercise_sessions

    def _valid_index(self, index: int) -> bool:
        return 0 <= index < len(self.session.exercise_sessions)

    # ── Tick ─────────────────────────────────────────────────────────────────

    def _sync_tick(self) -> None:
        """Run the tick exactly while the session is ACTIVE."""
        if self.ticker is None:
            return
        should_run = self.session.state is SessionState.ACTIVE
        # A tick whose callback failed has already stopped itself
        if should_run and not self.ticker.is_running:
            self.ticker.start()
        elif not should_run and self.ticker.is_running:
            self.ticker.cancel()

    def close(self) -> None:
        """Teardown: cancel the tick so no callback outlives the view."""
        if self.ticker is not None and self.ticker.is_running:
            self.ticker.cancel()

    # ── Session lifecycle ────────────────────────────────────────────────────

    def start(self) -> bool:
        if not self.session.start(self.clock()):
            logger.debug(
                "Ignoring start: state=%s, exercises=%d",
                self.session.state.value, len(self.session.exercise_sessions),
            )
            return False
        self.has_been_saved = False
        self._sync_tick()
        logger.info(
            "Session %s started with %d exercises",
            self.session.id, len(self.session.exercise_sessions),
        )
        return True

    def pause(self) -> bool:
        if self.session.state is not SessionState.ACTIVE:
            logger.debug("Ignoring pause: state=%s", self.session.state.value)
            return False
        paused = self.timers.pause_all()
        self.session.pause(self.clock())
        self._sync_tick()
        logger.info("Session %s paused (%d exercise timers paused)", self.session.id, len(paused))
        return True

    def resume(self) -> bool:
        if not self.session.resume(self.clock()):
            logger.debug("Ignoring resume: state=%s", self.session.state.value)
            return False
        self._sync_tick()
        logger.info("Session %s resumed", self.session.id)
        return True

    def stop(self) -> bool:
        """Abandon the session: back to INACTIVE, all exercise timers cleared."""
        if not self.session.stop(self.clock()):
            logger.debug("Ignoring stop: state=%s", self.session.state.value)
            return False
        self.timers.clear()
        self._sync_tick()
        logger.info("Session %s stopped", self.session.id)
        return True

    def save(self) -> bool:
        """
        Commit buffered draft rows and persist the session without closing it.

        Idempotent per session: committed rows are blanked in the buffer, so
        saving again never appends them twice while rows typed since the
        last save are still picked up. Inert (False) when the session has no
        exercises.
        """
        if not self.session.exercise_sessions:
            logger.debug("Ignoring save: session has no exercises")
            return False
        committed = self.commit_buffered_sets()
        logger.debug("Committed %d buffered sets on save", committed)
        self._persist()
        self.has_been_saved = True
        return True

    def complete(self) -> FitnessSession | None:
        """
        Finish the session: commit, mark COMPLETED, persist and archive.

        Returns the completed session, after which the controller holds a
        fresh INACTIVE session. Returns None when nothing is running.
        """
        if not self.session.is_running:
            logger.debug("Ignoring complete: state=%s", self.session.state.value)
            return None
        self.commit_buffered_sets()
        self.session.complete(self.clock())
        self.timers.clear()
        self.inputs.clear()
        self._sync_tick()
        self._persist()

        finished = self.session
        logger.info(
            "Session %s completed: %d exercises, %d sets, %.0fs",
            finished.id, finished.total_exercises, finished.total_sets,
            finished.duration(self.clock()),
        )
        self.session = FitnessSession()
        self.workout = None
        self.has_been_saved = False
        return finished

    def _persist(self) -> None:
        if self.store is None:
            return
        self.store.save_session(self.session)
        logger.debug("Session %s persisted", self.session.id)

    def new_session(self) -> bool:
        """Discard a non-running session and start over with an empty one."""
        if self.session.is_running:
            return False
        self.timers.clear()
        self.inputs.clear()
        self.session = FitnessSession()
        self.workout = None
        self.has_been_saved = False
        self._sync_tick()
        return True

    # ── Exercises ────────────────────────────────────────────────────────────

    def add_exercise(self, exercise: ExerciseRef) -> ExerciseSession | None:
        if self.session.state is SessionState.COMPLETED:
            return None
        exercise_session = ExerciseSession(exercise=exercise, start_time=self.clock())
        self.session.add_exercise_session(exercise_session)
        logger.debug("Added exercise %s at index %d", exercise.name, len(self.exercises) - 1)
        return exercise_session

    def remove_exercise(self, index: int) -> bool:
        """
        Remove an exercise and drop its timer and draft rows.

        Timers and input buffers are reindexed in the same step so no
        state of a later exercise is ever read against the wrong position.
        """
        removed = self.session.remove_exercise_session(index)
        if removed is None:
            return False
        self.timers.shift_after_removal(index)
        self.inputs.shift_after_removal(index)
        logger.debug("Removed exercise %s from index %d", removed.exercise.name, index)
        return True

    def load_workout(self, workout: CustomWorkout) -> bool:
        """
        Replace the (non-running) session with one built from a template
        and start it. Each exercise gets one blank draft row.
        """
        if self.session.is_running or not workout.exercises:
            return False
        now = self.clock()
        self.timers.clear()
        self.inputs.clear()
        self.session = FitnessSession(
            exercise_sessions=[
                ExerciseSession(exercise=slot.exercise, start_time=now)
                for slot in workout.exercises
            ]
        )
        for index in range(len(workout.exercises)):
            self.inputs.rows(index)
        workout.mark_used(now)
        self.workout = workout
        self.has_been_saved = False
        logger.info("Loaded workout %r (%d exercises)", workout.name, len(workout.exercises))
        return self.start()

    # ── Exercise timers ──────────────────────────────────────────────────────

    def start_exercise_timer(self, index: int) -> bool:
        """Start or resume one exercise's timer; only while the session is ACTIVE."""
        if self.session.state is not SessionState.ACTIVE or not self._valid_index(index):
            return False
        return self.timers.start_timer(index)

    def pause_exercise_timer(self, index: int) -> bool:
        return self.timers.pause_timer(index)

    def stop_exercise_timer(self, index: int) -> None:
        self.timers.stop_timer(index)

    def exercise_running_time(self, index: int) -> float:
        return self.timers.running_time(index)

    def is_exercise_running(self, index: int) -> bool:
        return self.timers.is_running(index)

    # ── Draft rows and sets ──────────────────────────────────────────────────

    def draft_rows(self, exercise_index: int) -> list[SetInput]:
        if not self._valid_index(exercise_index):
            return []
        return self.inputs.rows(exercise_index)

    def add_draft_row(self, exercise_index: int) -> SetInput | None:
        if not self._valid_index(exercise_index):
            return None
        return self.inputs.add_row(exercise_index)

    def update_draft_row(
        self,
        exercise_index: int,
        row_index: int,
        reps: str | None = None,
        weight: str | None = None,
        time: str | None = None,
        distance: str | None = None,
    ) -> bool:
        if not self._valid_index(exercise_index):
            return False
        self.inputs.rows(exercise_index)
        return self.inputs.update_row(
            exercise_index, row_index, reps=reps, weight=weight, time=time, distance=distance
        )

    def add_set_to_exercise(
        self,
        exercise_index: int,
        row_index: int,
        timestamp: datetime | None = None,
    ) -> SetRecord | None:
        """
        Commit one draft row to its exercise.

        The consumed row is blanked in place (its slot is kept for the next
        entry). Invalid or unparsable rows change nothing.
        """
        if not self._valid_index(exercise_index):
            return None
        row = self.inputs.get_row(exercise_index, row_index)
        if row is None:
            return None
        record = row.to_set_record(timestamp or self.clock())
        if record is None:
            return None
        self.session.exercise_sessions[exercise_index].add_set(record)
        self.inputs.reset_row(exercise_index, row_index)
        return record

    def add_set(self, exercise_index: int, record: SetRecord) -> bool:
        if not self._valid_index(exercise_index) or not record.is_valid:
            return False
        self.session.exercise_sessions[exercise_index].add_set(record)
        return True

    def remove_set(self, exercise_index: int, set_index: int) -> bool:
        if not self._valid_index(exercise_index):
            return False
        return self.session.exercise_sessions[exercise_index].remove_set(set_index) is not None

    def commit_buffered_sets(self) -> int:
        """
        Commit every valid draft row of every exercise; returns the count.

        Committed rows are blanked in place like a single add. Rows that do
        not parse stay in the buffer untouched.
        """
        now = self.clock()
        committed = 0
        for index, exercise in enumerate(self.session.exercise_sessions):
            for row_index, row in enumerate(self.inputs.peek(index)):
                record = row.to_set_record(now)
                if record is not None:
                    exercise.add_set(record)
                    self.inputs.reset_row(index, row_index)
                    committed += 1
        return committed

    def can_save(self) -> bool:
        return bool(self.session.exercise_sessions)

    # ── Queries ──────────────────────────────────────────────────────────────

    def current_duration(self) -> float:
        return self.session.duration(self.clock())

    def exercise_summary(self, index: int) -> ExerciseSummary | None:
        if not self._valid_index(index):
            return None
        return summarize_exercise(
            self.session.exercise_sessions[index], self.inputs.peek(index)
        )

    def summary_text(self, index: int) -> str:
        summary = self.exercise_summary(index)
        return summary.text() if summary is not None else ""

    def session_summary(self) -> SessionSummary:
        return summarize_session(self.session, self.current_duration())
