"""
Draft set entry and the per-exercise input buffer.

Draft rows hold raw strings because keystroke-by-keystroke input is
transiently invalid (e.g. "1:" while typing "1:30"). They become
SetRecords only on commit, after numeric parsing succeeds.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from datetime import datetime
from uuid import uuid4

from .models import SetRecord
from .reindex import shift_indices_after_removal

logger = logging.getLogger(__name__)


def parse_time_input(text: str) -> float | None:
    """
    Parse a set duration into seconds.

    Accepted forms, tried in order:
      "M:SS"  – minutes and seconds, both integers  ("9:15" → 555)
      "90"    – integer seconds
      "60.5"  – decimal seconds

    Returns None when the text matches none of them.
    """
    text = text.strip()
    if not text:
        return None

    if ":" in text:
        parts = text.split(":")
        if len(parts) == 2:
            minutes = _parse_int(parts[0])
            seconds = _parse_int(parts[1])
            if minutes is not None and seconds is not None:
                return float(minutes * 60 + seconds)

    seconds_int = _parse_int(text)
    if seconds_int is not None:
        return float(seconds_int)

    return _parse_float(text)


def _parse_int(text: str) -> int | None:
    try:
        return int(text.strip())
    except ValueError:
        return None


def _parse_float(text: str) -> float | None:
    try:
        value = float(text.strip())
    except ValueError:
        return None
    return value if math.isfinite(value) else None


@dataclass
class SetInput:
    """One draft row as typed by the user."""

    reps: str = ""
    weight: str = ""
    time: str = ""
    distance: str = ""
    id: str = field(default_factory=lambda: str(uuid4()))

    @property
    def is_valid(self) -> bool:
        """True when at least one field has been filled in."""
        return any(f.strip() for f in (self.reps, self.weight, self.time, self.distance))

    @property
    def parsed_reps(self) -> int | None:
        return _parse_int(self.reps) if self.reps.strip() else None

    @property
    def parsed_weight(self) -> float | None:
        return _parse_float(self.weight) if self.weight.strip() else None

    @property
    def parsed_time(self) -> float | None:
        return parse_time_input(self.time)

    @property
    def parsed_distance(self) -> float | None:
        return _parse_float(self.distance) if self.distance.strip() else None

    def to_set_record(self, timestamp: datetime | None = None) -> SetRecord | None:
        """
        Convert this row into a SetRecord.

        Returns None when the row is empty, when any filled-in field fails
        to parse, or when a value is negative. A row is never partially
        committed.
        """
        if not self.is_valid:
            return None

        parsed = {
            "reps": (self.reps, self.parsed_reps),
            "weight": (self.weight, self.parsed_weight),
            "time": (self.time, self.parsed_time),
            "distance": (self.distance, self.parsed_distance),
        }
        for name, (raw, value) in parsed.items():
            if raw.strip() and value is None:
                logger.debug("Rejecting draft row: %s=%r does not parse", name, raw)
                return None

        try:
            record = SetRecord(
                reps=self.parsed_reps,
                weight=self.parsed_weight,
                time=self.parsed_time,
                distance=self.parsed_distance,
                timestamp=timestamp or datetime.now(),
            )
        except ValueError as e:
            logger.debug("Rejecting draft row: %s", e)
            return None

        return record if record.is_valid else None


class SetInputBuffer:
    """
    Draft rows per exercise index.

    Buffers are ephemeral UI state: they exist until committed into
    SetRecords or discarded, and are never persisted.
    """

    def __init__(self) -> None:
        self._rows: dict[int, list[SetInput]] = {}

    def rows(self, exercise_index: int) -> list[SetInput]:
        """Rows for an exercise, seeding one empty row on first access."""
        if exercise_index not in self._rows:
            self._rows[exercise_index] = [SetInput()]
        return self._rows[exercise_index]

    def peek(self, exercise_index: int) -> list[SetInput]:
        """Rows for an exercise without seeding (empty list if none)."""
        return list(self._rows.get(exercise_index, []))

    def indices(self) -> list[int]:
        return sorted(self._rows)

    def add_row(self, exercise_index: int, row: SetInput | None = None) -> SetInput:
        """Append a row (a blank one by default) and return it."""
        new_row = row or SetInput()
        self._rows.setdefault(exercise_index, []).append(new_row)
        return new_row

    def get_row(self, exercise_index: int, row_index: int) -> SetInput | None:
        rows = self._rows.get(exercise_index)
        if rows is None or not 0 <= row_index < len(rows):
            return None
        return rows[row_index]

    def update_row(
        self,
        exercise_index: int,
        row_index: int,
        reps: str | None = None,
        weight: str | None = None,
        time: str | None = None,
        distance: str | None = None,
    ) -> bool:
        """Overwrite the given fields of one row; out-of-range is a no-op."""
        row = self.get_row(exercise_index, row_index)
        if row is None:
            return False
        if reps is not None:
            row.reps = reps
        if weight is not None:
            row.weight = weight
        if time is not None:
            row.time = time
        if distance is not None:
            row.distance = distance
        return True

    def reset_row(self, exercise_index: int, row_index: int) -> None:
        """Blank a row in place, keeping its slot."""
        rows = self._rows.get(exercise_index)
        if rows is not None and 0 <= row_index < len(rows):
            rows[row_index] = SetInput()

    def remove_row(self, exercise_index: int, row_index: int) -> None:
        rows = self._rows.get(exercise_index)
        if rows is not None and 0 <= row_index < len(rows):
            del rows[row_index]

    def valid_rows(self, exercise_index: int) -> list[SetInput]:
        return [r for r in self._rows.get(exercise_index, []) if r.is_valid]

    def has_valid_rows(self) -> bool:
        return any(r.is_valid for rows in self._rows.values() for r in rows)

    def discard(self, exercise_index: int) -> None:
        self._rows.pop(exercise_index, None)

    def shift_after_removal(self, removed_index: int) -> None:
        self._rows = shift_indices_after_removal(self._rows, removed_index)

    def clear(self) -> None:
        self._rows.clear()
