"""
Tests for exercise timers, the session clock and summary text.

A fake clock drives every elapsed-time computation; only the ticker tests
run a real thread.
"""

import threading
from datetime import datetime, timedelta

import pytest

from liftlog.core.config import NO_SETS_COMPLETED
from liftlog.core.exercise_timers import ExerciseTimerTracker
from liftlog.core.models import (
    ExerciseRef,
    ExerciseSession,
    FitnessSession,
    SessionState,
    SetRecord,
    format_duration,
    format_set_time,
)
from liftlog.core.set_input import SetInput
from liftlog.core.summary import ExerciseSummary, SessionSummary, summarize_exercise
from liftlog.core.ticker import Ticker

# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------


class FakeClock:
    """Manually advanced clock."""

    def __init__(self, start: datetime = datetime(2026, 3, 1, 9, 0, 0)):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


def _exercise(*sets: SetRecord) -> ExerciseSession:
    return ExerciseSession(exercise=ExerciseRef.of_builtin("Bench Press"), sets=list(sets))


# =============================================================================
# Exercise timers
# =============================================================================

class TestExerciseTimerTracker:
    """Running / paused entries per exercise index."""

    def test_running_time_follows_clock(self):
        clock = FakeClock()
        timers = ExerciseTimerTracker(clock)
        assert timers.start_timer(0)
        clock.advance(42)
        assert timers.running_time(0) == pytest.approx(42)
        assert timers.is_running(0)

    def test_start_twice_is_noop(self):
        timers = ExerciseTimerTracker(FakeClock())
        assert timers.start_timer(0)
        assert not timers.start_timer(0)

    def test_pause_freezes_time(self):
        clock = FakeClock()
        timers = ExerciseTimerTracker(clock)
        timers.start_timer(0)
        clock.advance(30)
        assert timers.pause_timer(0)
        clock.advance(100)
        assert timers.running_time(0) == pytest.approx(30)
        assert timers.is_paused(0)
        assert not timers.is_running(0)

    def test_resume_continues_from_accumulated(self):
        clock = FakeClock()
        timers = ExerciseTimerTracker(clock)
        timers.start_timer(0)
        clock.advance(30)
        timers.pause_timer(0)
        clock.advance(60)
        timers.start_timer(0)
        clock.advance(15)
        assert timers.running_time(0) == pytest.approx(45)
        assert not timers.is_paused(0)

    def test_pause_all(self):
        clock = FakeClock()
        timers = ExerciseTimerTracker(clock)
        timers.start_timer(2)
        timers.start_timer(0)
        clock.advance(10)
        assert timers.pause_all() == [0, 2]
        assert timers.running_indices() == []
        assert timers.tracked_indices() == [0, 2]

    def test_pause_unknown_index(self):
        assert not ExerciseTimerTracker(FakeClock()).pause_timer(5)

    def test_stop_timer_forgets_entry(self):
        timers = ExerciseTimerTracker(FakeClock())
        timers.start_timer(1)
        timers.stop_timer(1)
        assert timers.running_time(1) == 0.0
        assert timers.tracked_indices() == []

    def test_shift_after_removal(self):
        clock = FakeClock()
        timers = ExerciseTimerTracker(clock)
        timers.start_timer(0)
        timers.start_timer(1)
        clock.advance(10)
        timers.start_timer(2)
        clock.advance(5)
        timers.pause_timer(2)

        timers.shift_after_removal(1)

        assert timers.is_running(0)
        assert timers.is_paused(1)
        assert timers.running_time(1) == pytest.approx(5)
        assert timers.tracked_indices() == [0, 1]


# =============================================================================
# Session clock
# =============================================================================

class TestFitnessSessionClock:
    """duration = now - start - paused, frozen outside ACTIVE."""

    def _started(self, clock: FakeClock) -> FitnessSession:
        session = FitnessSession(exercise_sessions=[_exercise()])
        assert session.start(clock())
        return session

    def test_cannot_start_without_exercises(self):
        session = FitnessSession()
        assert not session.start(datetime(2026, 3, 1))
        assert session.state is SessionState.INACTIVE

    def test_active_duration(self):
        clock = FakeClock()
        session = self._started(clock)
        clock.advance(90)
        assert session.duration(clock()) == pytest.approx(90)

    def test_paused_duration_is_frozen(self):
        clock = FakeClock()
        session = self._started(clock)
        clock.advance(60)
        session.pause(clock())
        clock.advance(300)
        assert session.duration(clock()) == pytest.approx(60)

    def test_resume_excludes_paused_time(self):
        clock = FakeClock()
        session = self._started(clock)
        clock.advance(60)
        session.pause(clock())
        clock.advance(300)
        session.resume(clock())
        clock.advance(20)
        assert session.paused_accumulated == pytest.approx(300)
        assert session.duration(clock()) == pytest.approx(80)

    def test_completed_duration_is_frozen(self):
        clock = FakeClock()
        session = self._started(clock)
        clock.advance(120)
        assert session.complete(clock())
        clock.advance(1000)
        assert session.duration(clock()) == pytest.approx(120)
        assert all(e.is_completed for e in session.exercise_sessions)

    def test_complete_while_paused_freezes_at_pause(self):
        clock = FakeClock()
        session = self._started(clock)
        clock.advance(50)
        session.pause(clock())
        clock.advance(500)
        session.complete(clock())
        assert session.duration(clock()) == pytest.approx(50)

    def test_invalid_transitions(self):
        clock = FakeClock()
        session = FitnessSession(exercise_sessions=[_exercise()])
        assert not session.pause(clock())
        assert not session.resume(clock())
        assert not session.complete(clock())
        session.start(clock())
        assert not session.start(clock())
        assert not session.resume(clock())


# =============================================================================
# Summaries
# =============================================================================

class TestExerciseSummary:
    """Committed sets merged with draft rows that would commit."""

    def test_committed_plus_draft(self):
        """10×100 committed + draft 5×50: 2 sets, 15 reps, 1250 volume."""
        exercise = _exercise(SetRecord(reps=10, weight=100))
        drafts = [SetInput(reps="5", weight="50"), SetInput()]

        summary = summarize_exercise(exercise, drafts)

        assert summary.total_sets == 2
        assert summary.total_reps == 15
        assert summary.total_volume == pytest.approx(1250)
        assert summary.text() == "2 sets • 15 reps • 1250 lbs volume"

    def test_unparsable_draft_is_not_counted(self):
        summary = summarize_exercise(_exercise(), [SetInput(reps="x", weight="50")])
        assert summary.total_sets == 0
        assert summary.is_empty

    def test_half_typed_time_is_not_counted(self):
        summary = summarize_exercise(_exercise(SetRecord(time=60)), [SetInput(time="1:")])
        assert summary.text() == "1 sets • 1:00 time"

    def test_negative_draft_is_not_counted(self):
        exercise = _exercise(SetRecord(reps=10, weight=100))
        summary = summarize_exercise(exercise, [SetInput(reps="-5", weight="100")])
        assert summary.total_sets == 1
        assert summary.total_reps == 10
        assert summary.total_volume == pytest.approx(1000)

    def test_reps_without_weight_adds_no_volume(self):
        summary = summarize_exercise(_exercise(SetRecord(reps=12)), [SetInput(reps="8")])
        assert summary.total_reps == 20
        assert summary.total_volume == 0
        assert summary.text() == "2 sets • 20 reps"

    def test_time_component(self):
        summary = summarize_exercise(_exercise(SetRecord(time=60)), [SetInput(time="0:30")])
        assert summary.text() == "2 sets • 1:30 time"

    def test_short_time_in_seconds(self):
        assert ExerciseSummary(total_time=45).text() == "45s time"

    def test_volume_is_truncated(self):
        assert ExerciseSummary(total_volume=1250.9).text() == "1250 lbs volume"

    def test_empty_sentinel(self):
        summary = summarize_exercise(_exercise(), [SetInput()])
        assert summary.is_empty
        assert summary.text() == NO_SETS_COMPLETED


class TestExerciseSessionTotals:
    """Committed-only totals on an exercise."""

    def test_totals(self):
        exercise = _exercise(
            SetRecord(reps=5, weight=185),
            SetRecord(reps=3, weight=205),
            SetRecord(time=40),
        )
        assert exercise.total_reps == 8
        assert exercise.total_volume == pytest.approx(5 * 185 + 3 * 205)
        assert exercise.total_time == pytest.approx(40)
        assert exercise.max_weight == pytest.approx(205)

    def test_empty_exercise(self):
        exercise = _exercise()
        assert exercise.max_weight is None
        assert exercise.total_volume == 0

    def test_remove_set_out_of_range(self):
        exercise = _exercise(SetRecord(reps=5))
        assert exercise.remove_set(3) is None
        assert exercise.remove_set(0).reps == 5


class TestSessionSummary:
    def test_text(self):
        summary = SessionSummary(total_exercises=2, total_sets=5, total_reps=40, duration=754)
        assert summary.text() == "2 exercises • 5 sets • 40 reps • 12:34"

    def test_empty(self):
        assert SessionSummary(0, 0, 0, 0).text() == "No exercises"


class TestFormatting:
    @pytest.mark.parametrize(
        "seconds, expected",
        [(0, "0:00"), (59, "0:59"), (90, "1:30"), (3725, "62:05")],
    )
    def test_format_duration(self, seconds, expected):
        assert format_duration(seconds) == expected

    @pytest.mark.parametrize("seconds, expected", [(45, "45s"), (60, "1:00"), (555, "9:15")])
    def test_format_set_time(self, seconds, expected):
        assert format_set_time(seconds) == expected

    def test_set_record_display(self):
        record = SetRecord(reps=5, weight=185, time=30)
        assert record.display() == "5 reps • 185 lbs • 30s"


# =============================================================================
# Ticker
# =============================================================================

class TestTicker:
    """Display-refresh tick on a daemon thread."""

    def test_ticks_until_cancelled(self):
        fired = threading.Event()
        ticker = Ticker(callback=fired.set, interval=0.01)
        ticker.start()
        try:
            assert fired.wait(timeout=2.0)
            assert ticker.is_running
        finally:
            ticker.cancel()
        assert not ticker.is_running
        assert ticker.tick_count >= 1

    def test_start_and_cancel_are_idempotent(self):
        ticker = Ticker(callback=lambda: None, interval=0.01)
        ticker.cancel()
        ticker.start()
        ticker.start()
        ticker.cancel()
        ticker.cancel()
        assert not ticker.is_running

    def test_failing_callback_stops_tick(self):
        def boom():
            raise RuntimeError("redraw failed")

        ticker = Ticker(callback=boom, interval=0.01)
        ticker.start()
        ticker._thread.join(timeout=2.0)
        assert not ticker.is_running
        assert ticker.tick_count == 1
        ticker.cancel()

    def test_rejects_non_positive_interval(self):
        with pytest.raises(ValueError):
            Ticker(callback=lambda: None, interval=0)
