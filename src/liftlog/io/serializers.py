"""
JSON serialization for liftlog data models.

Handles conversion between dataclasses and JSON-compatible dicts.
Timestamps are stored as ISO 8601 strings.
"""

import json
from datetime import datetime
from typing import Any

from ..core.models import (
    CustomExercise,
    CustomWorkout,
    ExerciseRef,
    ExerciseSession,
    FitnessSession,
    OneRepMaxRecord,
    RecordType,
    SessionState,
    SetRecord,
    WorkoutExercise,
)


class ValidationError(Exception):
    """Raised when data validation fails."""

    pass


def validate_timestamp(value: Any, name: str) -> datetime:
    """
    Parse an ISO 8601 timestamp.

    Raises:
        ValidationError: If value is not a valid ISO timestamp
    """
    if not isinstance(value, str):
        raise ValidationError(f"{name} must be an ISO timestamp string, got {value!r}")
    try:
        return datetime.fromisoformat(value)
    except ValueError as e:
        raise ValidationError(f"Invalid {name}: {value}") from e


def _optional_timestamp(value: Any, name: str) -> datetime | None:
    return None if value is None else validate_timestamp(value, name)


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def _optional_number(value: Any, name: str, cast: type) -> Any:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(f"{name} must be a number, got {value!r}")
    if value < 0:
        raise ValidationError(f"{name} must be non-negative, got {value}")
    return cast(value)


def _require(data: dict[str, Any], key: str) -> Any:
    if key not in data:
        raise ValidationError(f"Missing field: {key}")
    return data[key]


# ---------------------------------------------------------------------------
# Sets and exercises
# ---------------------------------------------------------------------------


def set_record_to_dict(record: SetRecord) -> dict[str, Any]:
    d: dict[str, Any] = {"id": record.id, "timestamp": record.timestamp.isoformat()}
    # Compact: only the measurements that were recorded
    for key in ("reps", "weight", "time", "distance"):
        value = getattr(record, key)
        if value is not None:
            d[key] = value
    return d


def dict_to_set_record(data: dict[str, Any]) -> SetRecord:
    """
    Convert dict to SetRecord.

    Raises:
        ValidationError: If a measurement is negative or the timestamp is invalid
    """
    record = SetRecord(
        reps=_optional_number(data.get("reps"), "reps", int),
        weight=_optional_number(data.get("weight"), "weight", float),
        time=_optional_number(data.get("time"), "time", float),
        distance=_optional_number(data.get("distance"), "distance", float),
        timestamp=validate_timestamp(_require(data, "timestamp"), "timestamp"),
    )
    if "id" in data:
        record.id = str(data["id"])
    return record


def custom_exercise_to_dict(exercise: CustomExercise) -> dict[str, Any]:
    return {
        "id": exercise.id,
        "name": exercise.name,
        "category": exercise.category,
        "supports_reps": exercise.supports_reps,
        "supports_weight": exercise.supports_weight,
        "supports_time": exercise.supports_time,
        "supports_distance": exercise.supports_distance,
    }


def dict_to_custom_exercise(data: dict[str, Any]) -> CustomExercise:
    try:
        kwargs: dict[str, Any] = {
            "name": str(_require(data, "name")),
            "category": str(data.get("category", "Custom")),
            "supports_reps": bool(data.get("supports_reps", True)),
            "supports_weight": bool(data.get("supports_weight", True)),
            "supports_time": bool(data.get("supports_time", False)),
            "supports_distance": bool(data.get("supports_distance", False)),
        }
        if "id" in data:
            kwargs["id"] = str(data["id"])
        return CustomExercise(**kwargs)
    except ValueError as e:
        raise ValidationError(str(e)) from e


def exercise_ref_to_dict(ref: ExerciseRef) -> dict[str, Any]:
    if ref.custom is not None:
        return {"custom": custom_exercise_to_dict(ref.custom)}
    return {"builtin": ref.builtin}


def dict_to_exercise_ref(data: dict[str, Any]) -> ExerciseRef:
    """
    Convert dict to ExerciseRef.

    Raises:
        ValidationError: Unless exactly one of "builtin" and "custom" is present
    """
    if ("builtin" in data) == ("custom" in data):
        raise ValidationError("Exercise must have exactly one of 'builtin' or 'custom'")
    if "custom" in data:
        return ExerciseRef.of_custom(dict_to_custom_exercise(data["custom"]))
    builtin = data["builtin"]
    if not isinstance(builtin, str) or not builtin.strip():
        raise ValidationError(f"Invalid builtin exercise name: {builtin!r}")
    return ExerciseRef.of_builtin(builtin)


def exercise_session_to_dict(exercise: ExerciseSession) -> dict[str, Any]:
    return {
        "id": exercise.id,
        "exercise": exercise_ref_to_dict(exercise.exercise),
        "sets": [set_record_to_dict(s) for s in exercise.sets],
        "start_time": exercise.start_time.isoformat(),
        "end_time": _iso(exercise.end_time),
        "is_completed": exercise.is_completed,
    }


def dict_to_exercise_session(data: dict[str, Any]) -> ExerciseSession:
    exercise = ExerciseSession(
        exercise=dict_to_exercise_ref(_require(data, "exercise")),
        sets=[dict_to_set_record(s) for s in data.get("sets", [])],
        start_time=validate_timestamp(_require(data, "start_time"), "start_time"),
        end_time=_optional_timestamp(data.get("end_time"), "end_time"),
        is_completed=bool(data.get("is_completed", False)),
    )
    if "id" in data:
        exercise.id = str(data["id"])
    return exercise


# ---------------------------------------------------------------------------
# Sessions
# ---------------------------------------------------------------------------


def fitness_session_to_dict(session: FitnessSession) -> dict[str, Any]:
    d: dict[str, Any] = {
        "id": session.id,
        "state": session.state.value,
        "start_time": _iso(session.start_time),
        "end_time": _iso(session.end_time),
        "paused_accumulated": session.paused_accumulated,
        "exercise_sessions": [exercise_session_to_dict(e) for e in session.exercise_sessions],
    }
    if session.paused_at is not None:
        d["paused_at"] = session.paused_at.isoformat()
    if session.notes:
        d["notes"] = session.notes
    return d


def dict_to_fitness_session(data: dict[str, Any]) -> FitnessSession:
    """
    Convert dict to FitnessSession.

    Raises:
        ValidationError: If data is invalid
    """
    try:
        state = SessionState(data.get("state", SessionState.COMPLETED.value))
    except ValueError as e:
        raise ValidationError(f"Invalid state: {data.get('state')}") from e

    paused_accumulated = _optional_number(
        data.get("paused_accumulated", 0.0), "paused_accumulated", float
    )
    session = FitnessSession(
        exercise_sessions=[dict_to_exercise_session(e) for e in data.get("exercise_sessions", [])],
        state=state,
        start_time=_optional_timestamp(data.get("start_time"), "start_time"),
        paused_accumulated=paused_accumulated or 0.0,
        paused_at=_optional_timestamp(data.get("paused_at"), "paused_at"),
        end_time=_optional_timestamp(data.get("end_time"), "end_time"),
        notes=data.get("notes"),
    )
    if "id" in data:
        session.id = str(data["id"])
    return session


def session_to_json_line(session: FitnessSession) -> str:
    """Serialize a session to a single JSON line (no trailing newline)."""
    return json.dumps(fitness_session_to_dict(session), separators=(",", ":"))


def json_line_to_session(line: str) -> FitnessSession:
    """
    Deserialize a JSON line to a FitnessSession.

    Raises:
        ValidationError: If the line is not valid JSON or not a valid session
    """
    try:
        data = json.loads(line)
    except json.JSONDecodeError as e:
        raise ValidationError(f"Invalid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ValidationError("Session line must be a JSON object")
    return dict_to_fitness_session(data)


# ---------------------------------------------------------------------------
# Workout templates
# ---------------------------------------------------------------------------


def workout_exercise_to_dict(slot: WorkoutExercise) -> dict[str, Any]:
    d: dict[str, Any] = {
        "exercise": exercise_ref_to_dict(slot.exercise),
        "sets": slot.sets,
        "rest_time": slot.rest_time,
    }
    for key in ("reps", "weight", "time"):
        value = getattr(slot, key)
        if value is not None:
            d[key] = value
    return d


def dict_to_workout_exercise(data: dict[str, Any]) -> WorkoutExercise:
    try:
        return WorkoutExercise(
            exercise=dict_to_exercise_ref(_require(data, "exercise")),
            sets=int(data.get("sets", 3)),
            reps=_optional_number(data.get("reps"), "reps", int),
            weight=_optional_number(data.get("weight"), "weight", float),
            time=_optional_number(data.get("time"), "time", float),
            rest_time=float(data.get("rest_time", 60.0)),
        )
    except ValueError as e:
        raise ValidationError(str(e)) from e


def custom_workout_to_dict(workout: CustomWorkout) -> dict[str, Any]:
    d: dict[str, Any] = {
        "id": workout.id,
        "name": workout.name,
        "exercises": [workout_exercise_to_dict(e) for e in workout.exercises],
        "created_date": workout.created_date.isoformat(),
        "last_used": _iso(workout.last_used),
        "use_count": workout.use_count,
    }
    if workout.description:
        d["description"] = workout.description
    return d


def dict_to_custom_workout(data: dict[str, Any]) -> CustomWorkout:
    try:
        workout = CustomWorkout(
            name=str(_require(data, "name")),
            exercises=[dict_to_workout_exercise(e) for e in data.get("exercises", [])],
            description=data.get("description"),
            created_date=validate_timestamp(_require(data, "created_date"), "created_date"),
            last_used=_optional_timestamp(data.get("last_used"), "last_used"),
            use_count=int(data.get("use_count", 0)),
        )
    except ValueError as e:
        raise ValidationError(str(e)) from e
    if "id" in data:
        workout.id = str(data["id"])
    return workout


# ---------------------------------------------------------------------------
# Personal records
# ---------------------------------------------------------------------------


def one_rep_max_record_to_dict(record: OneRepMaxRecord) -> dict[str, Any]:
    d: dict[str, Any] = {
        "id": record.id,
        "lift_name": record.lift_name,
        "value": record.value,
        "record_type": record.record_type.value,
        "date": record.date.isoformat(),
        "is_custom": record.is_custom,
    }
    if record.notes:
        d["notes"] = record.notes
    return d


def dict_to_one_rep_max_record(data: dict[str, Any]) -> OneRepMaxRecord:
    """
    Convert dict to OneRepMaxRecord.

    Raises:
        ValidationError: If the lift name, value, type or date is invalid
    """
    try:
        record = OneRepMaxRecord(
            lift_name=str(_require(data, "lift_name")),
            value=float(_require(data, "value")),
            record_type=RecordType(data.get("record_type", RecordType.WEIGHT.value)),
            date=validate_timestamp(_require(data, "date"), "date"),
            notes=data.get("notes"),
            is_custom=bool(data.get("is_custom", False)),
        )
    except (TypeError, ValueError) as e:
        raise ValidationError(str(e)) from e
    if "id" in data:
        record.id = str(data["id"])
    return record
