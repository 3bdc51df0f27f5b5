"""
Live per-exercise summaries.

A summary merges two sources: sets already committed to the exercise and
draft rows that would commit but have not yet. Nothing is cached; callers
recompute on every keystroke, commit or tick.
"""

from dataclasses import dataclass

from .config import NO_SETS_COMPLETED, SUMMARY_SEPARATOR, WEIGHT_UNIT
from .models import ExerciseSession, FitnessSession, format_set_time
from .set_input import SetInput


@dataclass
class ExerciseSummary:
    """Merged totals for one exercise."""

    total_sets: int = 0
    total_reps: int = 0
    total_volume: float = 0.0
    total_time: float = 0.0  # seconds
    total_distance: float = 0.0

    @property
    def is_empty(self) -> bool:
        return not (
            self.total_sets or self.total_reps or self.total_volume or self.total_time
        )

    def text(self) -> str:
        """
        Render as "3 sets • 30 reps • 3000 lbs volume • 1:30 time".

        Zero-valued components are omitted; an all-zero summary renders as
        the fixed "No sets completed" sentinel.
        """
        parts: list[str] = []
        if self.total_sets > 0:
            parts.append(f"{self.total_sets} sets")
        if self.total_reps > 0:
            parts.append(f"{self.total_reps} reps")
        if self.total_volume > 0:
            parts.append(f"{int(self.total_volume)} {WEIGHT_UNIT} volume")
        if self.total_time > 0:
            parts.append(f"{format_set_time(self.total_time)} time")
        return SUMMARY_SEPARATOR.join(parts) if parts else NO_SETS_COMPLETED


def summarize_exercise(
    exercise: ExerciseSession,
    draft_rows: list[SetInput],
) -> ExerciseSummary:
    """
    Merge committed sets with pending draft rows into one summary.

    Only draft rows that would commit are counted, so empty rows, rows
    still being typed ("1:") and negative values contribute nothing.
    """
    summary = ExerciseSummary()
    records = (row.to_set_record() for row in draft_rows)
    pending = [r for r in records if r is not None]

    for s in exercise.sets + pending:
        summary.total_sets += 1
        if s.reps is not None:
            summary.total_reps += s.reps
        if s.volume is not None:
            summary.total_volume += s.volume
        if s.time is not None:
            summary.total_time += s.time
        if s.distance is not None:
            summary.total_distance += s.distance

    return summary


@dataclass
class SessionSummary:
    """Session-wide totals over committed sets only."""

    total_exercises: int
    total_sets: int
    total_reps: int
    duration: float

    def text(self) -> str:
        parts: list[str] = []
        if self.total_exercises > 0:
            parts.append(f"{self.total_exercises} exercises")
        if self.total_sets > 0:
            parts.append(f"{self.total_sets} sets")
        if self.total_reps > 0:
            parts.append(f"{self.total_reps} reps")
        if self.duration >= 1:
            parts.append(format_set_time(self.duration))
        return SUMMARY_SEPARATOR.join(parts) if parts else "No exercises"


def summarize_session(session: FitnessSession, duration: float) -> SessionSummary:
    return SessionSummary(
        total_exercises=session.total_exercises,
        total_sets=session.total_sets,
        total_reps=session.total_reps,
        duration=duration,
    )
