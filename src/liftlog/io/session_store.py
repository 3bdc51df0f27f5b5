"""
JSONL-based storage for fitness sessions and workout templates.

Handles reading, writing, and managing the session history file.
"""

import json
import logging
from datetime import datetime
from pathlib import Path

from ..core.engine.config_loader import get_data_dir
from ..core.models import CustomWorkout, FitnessSession
from .serializers import (
    ValidationError,
    custom_workout_to_dict,
    dict_to_custom_workout,
    json_line_to_session,
    session_to_json_line,
)

logger = logging.getLogger(__name__)


class SessionStore:
    """
    Manages fitness sessions stored in JSONL format.

    The history file contains one JSON object per line, one per session,
    sorted by start time. Sessions are keyed by id: saving a session that
    is already stored replaces it in place.

    Two sibling files live next to it:
    - current_session.json: snapshot of a saved, still-running session
    - workouts.json: custom workout templates
    """

    def __init__(self, history_path: str | Path):
        """
        Initialize the session store.

        Args:
            history_path: Path to the JSONL history file
        """
        self.history_path = Path(history_path)
        self.current_path = self.history_path.parent / "current_session.json"
        self.workouts_path = self.history_path.parent / "workouts.json"

    def exists(self) -> bool:
        """Check if the history file exists."""
        return self.history_path.exists()

    def init(self) -> None:
        """
        Initialize empty history file if it doesn't exist.

        Creates parent directories if needed.
        """
        self.history_path.parent.mkdir(parents=True, exist_ok=True)

        if not self.history_path.exists():
            self.history_path.touch()

    # ── Sessions ─────────────────────────────────────────────────────────────

    def load_sessions(self) -> list[FitnessSession]:
        """
        Load all sessions from the history file.

        Returns:
            List of FitnessSession, oldest first (empty if no history yet)

        Raises:
            ValidationError: If a line cannot be parsed
        """
        if not self.history_path.exists():
            return []

        sessions: list[FitnessSession] = []

        with open(self.history_path, "r") as f:
            for line_num, line in enumerate(f, 1):
                line = line.strip()
                if not line:
                    continue

                try:
                    sessions.append(json_line_to_session(line))
                except ValidationError as e:
                    raise ValidationError(
                        f"Error parsing line {line_num} in {self.history_path}: {e}"
                    ) from e

        sessions.sort(key=_session_sort_key)
        return sessions

    def save_session(self, session: FitnessSession) -> None:
        """
        Store a session, replacing any stored session with the same id.

        A session that is still running is also written to the
        current-session snapshot; a finished one clears it.

        Args:
            session: Session to save
        """
        self.init()
        sessions = self.load_sessions()

        for i, existing in enumerate(sessions):
            if existing.id == session.id:
                sessions[i] = session
                break
        else:
            sessions.append(session)

        sessions.sort(key=_session_sort_key)
        self._write_sessions(sessions)

        if session.is_running:
            self.current_path.write_text(session_to_json_line(session) + "\n")
        elif self.current_path.exists():
            self.current_path.unlink()

        logger.info("Saved session %s (%s) to %s", session.id, session.state.value, self.history_path)

    def _write_sessions(self, sessions: list[FitnessSession]) -> None:
        with open(self.history_path, "w") as f:
            for session in sessions:
                f.write(session_to_json_line(session) + "\n")

    def load_current_session(self) -> FitnessSession | None:
        """
        Load the snapshot of the saved, still-running session.

        Returns:
            FitnessSession or None if there is no valid snapshot
        """
        if not self.current_path.exists():
            return None
        try:
            return json_line_to_session(self.current_path.read_text().strip())
        except ValidationError as e:
            logger.warning("Ignoring unreadable session snapshot %s: %s", self.current_path, e)
            return None

    def delete_session_at(self, index: int) -> FitnessSession:
        """
        Delete the session at the given 0-based index in sorted history.

        Args:
            index: 0-based index

        Returns:
            The deleted session

        Raises:
            IndexError: If index is out of range
        """
        sessions = self.load_sessions()
        if index < 0 or index >= len(sessions):
            raise IndexError(f"Session index {index} out of range (0-{len(sessions) - 1})")
        removed = sessions.pop(index)
        self._write_sessions(sessions)
        logger.info("Deleted session %s", removed.id)
        return removed

    def get_latest_session(self) -> FitnessSession | None:
        sessions = self.load_sessions()
        return sessions[-1] if sessions else None

    def clear_history(self) -> None:
        """
        Clear all history (dangerous - use with caution).
        """
        if self.history_path.exists():
            self.history_path.write_text("")

    # ── Workout templates ────────────────────────────────────────────────────

    def load_custom_workouts(self) -> list[CustomWorkout]:
        """
        Load custom workout templates, most recently created first.

        Raises:
            ValidationError: If the file or an entry is invalid
        """
        if not self.workouts_path.exists():
            return []
        try:
            with open(self.workouts_path, "r") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValidationError(f"Error parsing {self.workouts_path}: {e}") from e
        if not isinstance(data, list):
            raise ValidationError(f"{self.workouts_path} must contain a JSON list")
        workouts = [dict_to_custom_workout(d) for d in data]
        workouts.sort(key=lambda w: w.created_date, reverse=True)
        return workouts

    def save_custom_workout(self, workout: CustomWorkout) -> None:
        """Store a workout template, replacing any template with the same id."""
        workouts = [w for w in self.load_custom_workouts() if w.id != workout.id]
        workouts.append(workout)
        self._write_workouts(workouts)
        logger.info("Saved workout %r", workout.name)

    def delete_custom_workout(self, workout_id: str) -> bool:
        workouts = self.load_custom_workouts()
        remaining = [w for w in workouts if w.id != workout_id]
        if len(remaining) == len(workouts):
            return False
        self._write_workouts(remaining)
        return True

    def _write_workouts(self, workouts: list[CustomWorkout]) -> None:
        self.workouts_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.workouts_path, "w") as f:
            json.dump([custom_workout_to_dict(w) for w in workouts], f, indent=2)


def _session_sort_key(session: FitnessSession) -> datetime:
    # Never-started sessions sort by their first exercise
    if session.start_time is not None:
        return session.start_time
    if session.exercise_sessions:
        return session.exercise_sessions[0].start_time
    return datetime.min


def get_default_history_path() -> Path:
    """
    Get the default history file path.

    Returns:
        <data dir>/sessions.jsonl ($LIFTLOG_HOME or ~/.liftlog)
    """
    return get_data_dir() / "sessions.jsonl"
