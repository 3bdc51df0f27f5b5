"""
Data models for liftlog.

Core dataclasses for sets, exercises, fitness sessions, personal records
and custom workout templates. Lifecycle rules for a fitness session live on
FitnessSession itself; orchestration of timers and input buffers around it
is handled by SessionController.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from uuid import uuid4

from .config import DISTANCE_UNIT, SUMMARY_SEPARATOR, WEIGHT_UNIT


def _new_id() -> str:
    return str(uuid4())


def format_duration(seconds: float) -> str:
    """Render seconds as M:SS (minutes are not wrapped into hours)."""
    total = int(seconds)
    return f"{total // 60}:{total % 60:02d}"


def format_set_time(seconds: float) -> str:
    """Render a set duration as M:SS from one minute up, otherwise as Ns."""
    total = int(seconds)
    if total >= 60:
        return format_duration(total)
    return f"{total}s"


@dataclass
class SetRecord:
    """
    A single committed set.

    Every measurement is optional; which ones apply depends on the exercise.
    A record is only meaningful when at least one of them is present.
    """

    reps: int | None = None
    weight: float | None = None
    time: float | None = None  # seconds
    distance: float | None = None
    timestamp: datetime = field(default_factory=datetime.now)
    id: str = field(default_factory=_new_id)

    def __post_init__(self) -> None:
        """Validate set data."""
        if self.reps is not None and self.reps < 0:
            raise ValueError("reps must be non-negative")
        if self.weight is not None and self.weight < 0:
            raise ValueError("weight must be non-negative")
        if self.time is not None and self.time < 0:
            raise ValueError("time must be non-negative")
        if self.distance is not None and self.distance < 0:
            raise ValueError("distance must be non-negative")

    @property
    def is_valid(self) -> bool:
        """True when at least one measurement is present."""
        return any(
            v is not None for v in (self.reps, self.weight, self.time, self.distance)
        )

    @property
    def volume(self) -> float | None:
        """reps × weight, or None unless both are recorded."""
        if self.reps is None or self.weight is None:
            return None
        return self.reps * self.weight

    def display(self) -> str:
        parts: list[str] = []
        if self.reps is not None:
            parts.append(f"{self.reps} reps")
        if self.weight is not None:
            parts.append(f"{self.weight:g} {WEIGHT_UNIT}")
        if self.time is not None:
            parts.append(format_set_time(self.time))
        if self.distance is not None:
            parts.append(f"{self.distance:g} {DISTANCE_UNIT}")
        return SUMMARY_SEPARATOR.join(parts)


@dataclass(frozen=True)
class CustomExercise:
    """
    A user-defined exercise.

    The supports_* flags decide which set input fields are relevant.
    """

    name: str
    category: str = "Custom"
    supports_reps: bool = True
    supports_weight: bool = True
    supports_time: bool = False
    supports_distance: bool = False
    id: str = field(default_factory=_new_id)

    def __post_init__(self) -> None:
        if not self.name.strip():
            raise ValueError("CustomExercise.name must be non-empty")


@dataclass(frozen=True)
class ExerciseRef:
    """
    Reference to either a built-in catalog exercise or a custom exercise.

    Exactly one of ``builtin`` (catalog name) and ``custom`` is set.
    """

    builtin: str | None = None
    custom: CustomExercise | None = None

    def __post_init__(self) -> None:
        if (self.builtin is None) == (self.custom is None):
            raise ValueError("ExerciseRef needs exactly one of builtin or custom")

    @classmethod
    def of_builtin(cls, name: str) -> "ExerciseRef":
        return cls(builtin=name)

    @classmethod
    def of_custom(cls, exercise: CustomExercise) -> "ExerciseRef":
        return cls(custom=exercise)

    @property
    def is_custom(self) -> bool:
        return self.custom is not None

    @property
    def name(self) -> str:
        if self.custom is not None:
            return self.custom.name
        return self.builtin  # type: ignore[return-value]


@dataclass
class ExerciseSession:
    """
    One exercise inside a fitness session, with its committed sets in order.
    """

    exercise: ExerciseRef
    sets: list[SetRecord] = field(default_factory=list)
    start_time: datetime = field(default_factory=datetime.now)
    end_time: datetime | None = None
    is_completed: bool = False
    id: str = field(default_factory=_new_id)

    def add_set(self, record: SetRecord) -> None:
        self.sets.append(record)

    def remove_set(self, index: int) -> SetRecord | None:
        """Remove and return the set at index; out-of-range is a no-op."""
        if 0 <= index < len(self.sets):
            return self.sets.pop(index)
        return None

    def complete(self, now: datetime) -> None:
        self.end_time = now
        self.is_completed = True

    @property
    def total_reps(self) -> int:
        return sum(s.reps for s in self.sets if s.reps is not None)

    @property
    def total_time(self) -> float:
        return sum(s.time for s in self.sets if s.time is not None)

    @property
    def total_volume(self) -> float:
        return sum(v for v in (s.volume for s in self.sets) if v is not None)

    @property
    def max_weight(self) -> float | None:
        weights = [s.weight for s in self.sets if s.weight is not None]
        return max(weights) if weights else None


class SessionState(str, Enum):
    """Lifecycle state of a fitness session."""

    INACTIVE = "inactive"
    ACTIVE = "active"
    PAUSED = "paused"
    COMPLETED = "completed"


@dataclass
class FitnessSession:
    """
    A training session: an ordered list of exercises plus the session clock.

    Elapsed training time is never accumulated by ticking; it is derived
    from ``start_time``, ``paused_accumulated`` and the moment the clock was
    frozen (``paused_at`` while paused, ``end_time`` once stopped).

    Transition methods return True when the transition happened and False
    when it was not allowed from the current state (no exception).
    """

    exercise_sessions: list[ExerciseSession] = field(default_factory=list)
    state: SessionState = SessionState.INACTIVE
    start_time: datetime | None = None
    paused_accumulated: float = 0.0  # seconds spent paused
    paused_at: datetime | None = None
    end_time: datetime | None = None
    notes: str | None = None
    id: str = field(default_factory=_new_id)

    # ── Lifecycle ────────────────────────────────────────────────────────────

    def start(self, now: datetime) -> bool:
        if self.state is not SessionState.INACTIVE or not self.exercise_sessions:
            return False
        self.start_time = now
        self.paused_accumulated = 0.0
        self.paused_at = None
        self.end_time = None
        self.state = SessionState.ACTIVE
        return True

    def pause(self, now: datetime) -> bool:
        if self.state is not SessionState.ACTIVE:
            return False
        self.paused_at = now
        self.state = SessionState.PAUSED
        return True

    def resume(self, now: datetime) -> bool:
        if self.state is not SessionState.PAUSED:
            return False
        if self.paused_at is not None:
            self.paused_accumulated += max(0.0, (now - self.paused_at).total_seconds())
        self.paused_at = None
        self.state = SessionState.ACTIVE
        return True

    def stop(self, now: datetime) -> bool:
        """Abandon the running session without completing it."""
        if self.state not in (SessionState.ACTIVE, SessionState.PAUSED):
            return False
        self._freeze(now)
        self.state = SessionState.INACTIVE
        return True

    def complete(self, now: datetime) -> bool:
        if self.state not in (SessionState.ACTIVE, SessionState.PAUSED):
            return False
        self._freeze(now)
        self.state = SessionState.COMPLETED
        for exercise in self.exercise_sessions:
            if not exercise.is_completed:
                exercise.complete(now)
        return True

    def _freeze(self, now: datetime) -> None:
        # A paused session freezes at the moment it was paused
        if self.state is SessionState.PAUSED and self.paused_at is not None:
            self.end_time = self.paused_at
        else:
            self.end_time = now
        self.paused_at = None

    # ── Clock ────────────────────────────────────────────────────────────────

    def duration(self, now: datetime) -> float:
        """Elapsed training seconds; only advances while ACTIVE."""
        if self.start_time is None:
            return 0.0
        if self.state is SessionState.ACTIVE:
            end = now
        elif self.state is SessionState.PAUSED:
            end = self.paused_at or now
        elif self.end_time is not None:
            end = self.end_time
        else:
            return 0.0
        elapsed = (end - self.start_time).total_seconds() - self.paused_accumulated
        return max(0.0, elapsed)

    # ── Exercises ────────────────────────────────────────────────────────────

    def add_exercise_session(self, exercise: ExerciseSession) -> None:
        self.exercise_sessions.append(exercise)

    def remove_exercise_session(self, index: int) -> ExerciseSession | None:
        if 0 <= index < len(self.exercise_sessions):
            return self.exercise_sessions.pop(index)
        return None

    @property
    def is_running(self) -> bool:
        return self.state in (SessionState.ACTIVE, SessionState.PAUSED)

    @property
    def total_exercises(self) -> int:
        return len(self.exercise_sessions)

    @property
    def total_sets(self) -> int:
        return sum(len(e.sets) for e in self.exercise_sessions)

    @property
    def total_reps(self) -> int:
        return sum(e.total_reps for e in self.exercise_sessions)


class RecordType(str, Enum):
    """Kind of personal record."""

    WEIGHT = "weight"
    TIME = "time"
    DISTANCE = "distance"
    REPS = "reps"
    VOLUME = "volume"

    @property
    def unit(self) -> str:
        if self is RecordType.TIME:
            return "sec"
        if self is RecordType.DISTANCE:
            return DISTANCE_UNIT
        if self is RecordType.REPS:
            return "reps"
        return WEIGHT_UNIT

    def format_value(self, value: float) -> str:
        if self is RecordType.TIME:
            return format_duration(value)
        if self is RecordType.REPS:
            return f"{int(value)} reps"
        return f"{value:.1f} {self.unit}"


@dataclass
class OneRepMaxRecord:
    """
    A personal-best entry for one lift.

    ``value`` is interpreted through ``record_type`` (weight in lbs, time in
    seconds, distance in miles, rep count, or volume in lbs).
    """

    lift_name: str
    value: float
    record_type: RecordType = RecordType.WEIGHT
    date: datetime = field(default_factory=datetime.now)
    notes: str | None = None
    is_custom: bool = False
    id: str = field(default_factory=_new_id)

    def __post_init__(self) -> None:
        """Validate record data."""
        if not self.lift_name.strip():
            raise ValueError("lift_name must be non-empty")
        if self.value <= 0:
            raise ValueError("value must be positive")

    @property
    def formatted_value(self) -> str:
        return self.record_type.format_value(self.value)


@dataclass
class WorkoutExercise:
    """One exercise slot in a custom workout template."""

    exercise: ExerciseRef
    sets: int = 3
    reps: int | None = None
    weight: float | None = None
    time: float | None = None  # seconds
    rest_time: float = 60.0  # seconds between sets

    def __post_init__(self) -> None:
        if self.sets < 1:
            raise ValueError("WorkoutExercise.sets must be at least 1")
        if self.rest_time < 0:
            raise ValueError("WorkoutExercise.rest_time must be non-negative")

    def display(self) -> str:
        parts = [f"{self.sets} sets"]
        if self.reps is not None:
            parts.append(f"{self.reps} reps")
        if self.weight is not None:
            parts.append(f"{int(self.weight)} {WEIGHT_UNIT}")
        if self.time is not None:
            parts.append(format_set_time(self.time))
        parts.append(f"{int(self.rest_time)}s rest")
        return SUMMARY_SEPARATOR.join(parts)


@dataclass
class CustomWorkout:
    """
    A reusable workout template built by the user.
    """

    name: str
    exercises: list[WorkoutExercise] = field(default_factory=list)
    description: str | None = None
    created_date: datetime = field(default_factory=datetime.now)
    last_used: datetime | None = None
    use_count: int = 0
    id: str = field(default_factory=_new_id)

    def __post_init__(self) -> None:
        if not self.name.strip():
            raise ValueError("CustomWorkout.name must be non-empty")

    @property
    def total_sets(self) -> int:
        return sum(e.sets for e in self.exercises)

    def mark_used(self, now: datetime) -> None:
        self.last_used = now
        self.use_count += 1
