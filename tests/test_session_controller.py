"""
Tests for SessionController: lifecycle, timer cascade, reindexing,
commit flow and persistence.

A fake clock, an in-memory store and a counting ticker stand in for the
wall clock, the JSONL store and the refresh thread.
"""

from datetime import datetime, timedelta

import pytest

from liftlog.core.models import (
    CustomExercise,
    CustomWorkout,
    ExerciseRef,
    ExerciseSession,
    FitnessSession,
    SessionState,
    SetRecord,
    WorkoutExercise,
)
from liftlog.core.session_controller import SessionController

# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------


class FakeClock:
    def __init__(self, start: datetime = datetime(2026, 3, 1, 18, 0, 0)):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


class FakeStore:
    """Records every save_session call."""

    def __init__(self):
        self.saved: list[FitnessSession] = []

    def save_session(self, session: FitnessSession) -> None:
        self.saved.append(session)


class FakeTicker:
    def __init__(self):
        self.starts = 0
        self.cancels = 0
        self.running = False

    def start(self) -> None:
        self.starts += 1
        self.running = True

    def cancel(self) -> None:
        self.cancels += 1
        self.running = False

    @property
    def is_running(self) -> bool:
        return self.running

    def fail(self) -> None:
        """Stop on its own, as after a failing callback."""
        self.running = False


def _controller(*names: str, ticker: FakeTicker | None = None):
    clock = FakeClock()
    store = FakeStore()
    controller = SessionController(store=store, clock=clock, ticker=ticker)
    for name in names:
        controller.add_exercise(ExerciseRef.of_builtin(name))
    return controller, clock, store


def _started(*names: str, ticker: FakeTicker | None = None):
    controller, clock, store = _controller(*names, ticker=ticker)
    assert controller.start()
    return controller, clock, store


# =============================================================================
# Lifecycle
# =============================================================================

class TestLifecycle:
    """State machine driven through the controller."""

    def test_start_requires_exercises(self):
        controller, _, _ = _controller()
        assert not controller.start()
        assert controller.state is SessionState.INACTIVE

    def test_start_pause_resume(self):
        controller, clock, _ = _started("Bench Press")
        assert controller.state is SessionState.ACTIVE
        assert not controller.start()
        assert controller.pause()
        assert controller.state is SessionState.PAUSED
        assert not controller.pause()
        assert controller.resume()
        assert controller.state is SessionState.ACTIVE

    def test_invalid_transitions_are_ignored(self):
        controller, _, _ = _controller("Bench Press")
        assert not controller.pause()
        assert not controller.resume()
        assert not controller.stop()
        assert controller.complete() is None
        assert controller.state is SessionState.INACTIVE

    def test_duration_frozen_while_paused(self):
        controller, clock, _ = _started("Bench Press")
        clock.advance(120)
        controller.pause()
        clock.advance(600)
        assert controller.current_duration() == pytest.approx(120)
        controller.resume()
        clock.advance(30)
        assert controller.current_duration() == pytest.approx(150)

    def test_stop_returns_to_inactive_keeping_exercises(self):
        controller, clock, _ = _started("Bench Press", "Squat")
        controller.start_exercise_timer(0)
        clock.advance(10)
        assert controller.stop()
        assert controller.state is SessionState.INACTIVE
        assert len(controller.exercises) == 2
        assert controller.exercise_running_time(0) == 0.0
        assert controller.start()

    def test_new_session_only_when_not_running(self):
        controller, _, _ = _started("Bench Press")
        assert not controller.new_session()
        controller.stop()
        assert controller.new_session()
        assert controller.exercises == []


# =============================================================================
# Exercise timers
# =============================================================================

class TestExerciseTimerCascade:
    """Session pause cascades to exercise timers; resume does not."""

    def test_pause_pauses_running_timers(self):
        controller, clock, _ = _started("Bench Press", "Squat")
        assert controller.start_exercise_timer(0)
        assert controller.start_exercise_timer(1)
        clock.advance(45)

        controller.pause()

        for index in (0, 1):
            assert not controller.is_exercise_running(index)
            assert controller.timers.is_paused(index)
            assert controller.exercise_running_time(index) > 0

    def test_resume_does_not_restart_timers(self):
        controller, clock, _ = _started("Bench Press", "Squat")
        controller.start_exercise_timer(0)
        clock.advance(45)
        controller.pause()
        clock.advance(60)
        controller.resume()
        clock.advance(60)

        assert not controller.is_exercise_running(0)
        assert controller.exercise_running_time(0) == pytest.approx(45)

        assert controller.start_exercise_timer(0)
        clock.advance(15)
        assert controller.exercise_running_time(0) == pytest.approx(60)

    def test_timer_requires_active_session(self):
        controller, _, _ = _controller("Bench Press")
        assert not controller.start_exercise_timer(0)
        controller.start()
        controller.pause()
        assert not controller.start_exercise_timer(0)

    def test_stop_exercise_timer(self):
        controller, clock, _ = _started("Bench Press")
        controller.start_exercise_timer(0)
        clock.advance(20)
        controller.stop_exercise_timer(0)
        assert controller.exercise_running_time(0) == 0.0
        assert controller.start_exercise_timer(0)

    def test_timer_rejects_bad_index(self):
        controller, _, _ = _started("Bench Press")
        assert not controller.start_exercise_timer(3)


# =============================================================================
# Removing exercises
# =============================================================================

class TestRemoveExercise:
    """Timers and draft rows are remapped together."""

    def test_remove_middle_of_three(self):
        controller, clock, _ = _started("Bench Press", "Squat", "Deadlift")
        controller.start_exercise_timer(0)
        clock.advance(10)
        controller.start_exercise_timer(2)
        clock.advance(20)
        controller.update_draft_row(0, 0, reps="1")
        controller.update_draft_row(1, 0, reps="2")
        controller.update_draft_row(2, 0, reps="3")

        assert controller.remove_exercise(1)

        assert [e.exercise.name for e in controller.exercises] == ["Bench Press", "Deadlift"]
        assert controller.exercise_running_time(0) == pytest.approx(30)
        assert controller.exercise_running_time(1) == pytest.approx(20)
        assert controller.draft_rows(0)[0].reps == "1"
        assert controller.draft_rows(1)[0].reps == "3"
        assert controller.inputs.indices() == [0, 1]

    def test_remove_out_of_range(self):
        controller, _, _ = _started("Bench Press")
        assert not controller.remove_exercise(4)
        assert len(controller.exercises) == 1


# =============================================================================
# Sets and commit
# =============================================================================

class TestSets:
    """Single-row commit, bulk commit and summaries."""

    def test_add_set_resets_row_in_place(self):
        controller, _, _ = _started("Bench Press")
        controller.update_draft_row(0, 0, reps="5", weight="185")

        record = controller.add_set_to_exercise(0, 0)

        assert record is not None
        assert record.reps == 5
        assert len(controller.exercises[0].sets) == 1
        rows = controller.draft_rows(0)
        assert len(rows) == 1
        assert not rows[0].is_valid

    def test_invalid_row_adds_nothing(self):
        controller, _, _ = _started("Bench Press")
        controller.update_draft_row(0, 0, reps="lots")
        assert controller.add_set_to_exercise(0, 0) is None
        assert controller.add_set_to_exercise(0, 5) is None
        assert controller.exercises[0].sets == []
        assert controller.draft_rows(0)[0].reps == "lots"

    def test_commit_skips_invalid_rows(self):
        controller, _, _ = _started("Bench Press", "Squat")
        controller.update_draft_row(0, 0, reps="5", weight="100")
        controller.add_draft_row(0)
        controller.add_draft_row(0)
        controller.update_draft_row(0, 2, reps="x")
        controller.draft_rows(1)

        assert controller.commit_buffered_sets() == 1
        assert len(controller.exercises[0].sets) == 1
        assert controller.exercises[1].sets == []
        rows = controller.draft_rows(0)
        assert not rows[0].is_valid
        assert rows[2].reps == "x"

    def test_summary_merges_committed_and_draft(self):
        controller, _, _ = _started("Bench Press")
        controller.add_set(0, SetRecord(reps=10, weight=100))
        controller.update_draft_row(0, 0, reps="5", weight="50")

        summary = controller.exercise_summary(0)

        assert summary.total_sets == 2
        assert summary.total_reps == 15
        assert summary.total_volume == pytest.approx(1250)
        assert controller.summary_text(0) == "2 sets • 15 reps • 1250 lbs volume"

    def test_summary_text_for_bad_index(self):
        controller, _, _ = _started("Bench Press")
        assert controller.summary_text(7) == ""
        assert controller.summary_text(0) == "No sets completed"

    def test_remove_set(self):
        controller, _, _ = _started("Bench Press")
        controller.add_set(0, SetRecord(reps=5))
        assert controller.remove_set(0, 0)
        assert not controller.remove_set(0, 0)

    def test_add_set_rejects_empty_record(self):
        controller, _, _ = _started("Bench Press")
        assert not controller.add_set(0, SetRecord())

    def test_session_summary(self):
        controller, clock, _ = _started("Bench Press", "Squat")
        controller.add_set(0, SetRecord(reps=5, weight=185))
        controller.add_set(1, SetRecord(reps=8, weight=225))
        clock.advance(95)
        assert controller.session_summary().text() == "2 exercises • 2 sets • 13 reps • 1:35"


# =============================================================================
# Save and complete
# =============================================================================

class TestSaveAndComplete:
    """Persistence and idempotent commits."""

    def test_save_is_idempotent(self):
        controller, _, store = _started("Bench Press")
        controller.update_draft_row(0, 0, reps="5", weight="185")

        assert controller.save()
        assert controller.save()

        assert len(controller.exercises[0].sets) == 1
        assert len(store.saved) == 2
        assert controller.has_been_saved

    def test_save_without_exercises(self):
        controller, _, store = _controller()
        assert not controller.can_save()
        assert not controller.save()
        assert store.saved == []

    def test_complete_commits_and_persists(self):
        controller, clock, store = _started("Bench Press")
        controller.update_draft_row(0, 0, reps="5", weight="185")
        clock.advance(300)

        finished = controller.complete()

        assert finished is not None
        assert finished.state is SessionState.COMPLETED
        assert finished.total_sets == 1
        assert finished.duration(clock()) == pytest.approx(300)
        assert store.saved == [finished]
        assert controller.state is SessionState.INACTIVE
        assert controller.exercises == []
        assert controller.session is not finished

    def test_complete_after_save_does_not_duplicate(self):
        controller, _, store = _started("Bench Press")
        controller.update_draft_row(0, 0, reps="5", weight="185")
        controller.save()

        finished = controller.complete()

        assert finished.total_sets == 1
        assert len(store.saved) == 2
        assert store.saved[0] is store.saved[1]

    def test_summary_after_save_counts_row_once(self):
        controller, _, _ = _started("Bench Press")
        controller.update_draft_row(0, 0, reps="10", weight="100")
        controller.save()

        summary = controller.exercise_summary(0)

        assert summary.total_sets == 1
        assert summary.total_reps == 10
        assert summary.total_volume == pytest.approx(1000)
        assert not controller.draft_rows(0)[0].is_valid

    def test_rows_typed_after_save_are_committed_on_complete(self):
        controller, _, _ = _started("Bench Press")
        controller.update_draft_row(0, 0, reps="10", weight="100")
        controller.save()
        controller.add_draft_row(0)
        controller.update_draft_row(0, 1, reps="5", weight="50")

        finished = controller.complete()

        assert [(s.reps, s.weight) for s in finished.exercise_sessions[0].sets] == [
            (10, 100.0),
            (5, 50.0),
        ]

    def test_second_save_picks_up_new_rows(self):
        controller, _, _ = _started("Bench Press")
        controller.update_draft_row(0, 0, reps="10", weight="100")
        controller.save()
        controller.update_draft_row(0, 0, reps="8", weight="100")
        controller.save()
        controller.save()

        assert [s.reps for s in controller.exercises[0].sets] == [10, 8]

    def test_start_after_save_reopens_commit(self):
        controller, _, _ = _started("Bench Press")
        controller.save()
        controller.stop()
        controller.start()
        assert not controller.has_been_saved

    def test_works_without_store(self):
        controller = SessionController(clock=FakeClock())
        controller.add_exercise(ExerciseRef.of_builtin("Bench Press"))
        controller.start()
        assert controller.save()
        assert controller.complete() is not None


# =============================================================================
# Tick
# =============================================================================

class TestTick:
    """The refresh tick runs exactly while ACTIVE."""

    def test_tick_follows_state(self):
        ticker = FakeTicker()
        controller, _, _ = _controller("Bench Press", ticker=ticker)
        assert not ticker.running

        controller.start()
        assert ticker.running
        controller.pause()
        assert not ticker.running
        controller.resume()
        assert ticker.running
        controller.complete()
        assert not ticker.running
        assert ticker.starts == 2
        assert ticker.cancels == 2

    def test_redundant_events_do_not_restart_tick(self):
        ticker = FakeTicker()
        controller, _, _ = _started("Bench Press", ticker=ticker)
        controller.start()
        controller.resume()
        assert ticker.starts == 1

    def test_close_cancels_tick(self):
        ticker = FakeTicker()
        controller, _, _ = _started("Bench Press", ticker=ticker)
        controller.close()
        assert not ticker.running
        controller.close()
        assert ticker.cancels == 1

    def test_failed_tick_restarts_on_resume(self):
        ticker = FakeTicker()
        controller, _, _ = _started("Bench Press", ticker=ticker)
        ticker.fail()

        controller.pause()
        assert ticker.cancels == 0
        controller.resume()

        assert ticker.running
        assert ticker.starts == 2

    def test_resumed_active_session_starts_tick(self):
        clock = FakeClock()
        session = FitnessSession(
            exercise_sessions=[ExerciseSession(exercise=ExerciseRef.of_builtin("Squat"))]
        )
        session.start(clock())
        ticker = FakeTicker()
        SessionController(clock=clock, ticker=ticker, session=session)
        assert ticker.running


# =============================================================================
# Workouts and custom exercises
# =============================================================================

class TestLoadWorkout:
    """Templates seed exercises and draft rows, then start."""

    def _workout(self) -> CustomWorkout:
        return CustomWorkout(
            name="Push A",
            exercises=[
                WorkoutExercise(exercise=ExerciseRef.of_builtin("Bench Press"), sets=3, reps=5),
                WorkoutExercise(
                    exercise=ExerciseRef.of_custom(CustomExercise(name="Band Pull-Apart")),
                    sets=2,
                ),
            ],
        )

    def test_load_workout_starts_session(self):
        controller, clock, _ = _controller()
        workout = self._workout()

        assert controller.load_workout(workout)

        assert controller.state is SessionState.ACTIVE
        assert [e.exercise.name for e in controller.exercises] == ["Bench Press", "Band Pull-Apart"]
        assert controller.inputs.indices() == [0, 1]
        assert len(controller.draft_rows(1)) == 1
        assert workout.use_count == 1
        assert workout.last_used == clock()
        assert controller.workout is workout

    def test_refused_while_running(self):
        controller, _, _ = _started("Squat")
        assert not controller.load_workout(self._workout())
        assert [e.exercise.name for e in controller.exercises] == ["Squat"]

    def test_refused_for_empty_template(self):
        controller, _, _ = _controller()
        assert not controller.load_workout(CustomWorkout(name="Empty"))

    def test_complete_clears_workout(self):
        controller, _, _ = _controller()
        controller.load_workout(self._workout())
        controller.complete()
        assert controller.workout is None

    def test_add_exercise_refused_when_completed(self):
        controller = SessionController(
            clock=FakeClock(), session=FitnessSession(state=SessionState.COMPLETED)
        )
        assert controller.add_exercise(ExerciseRef.of_builtin("Squat")) is None
