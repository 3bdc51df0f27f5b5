"""
Base types for the exercise catalog.

ExerciseInfo describes how an exercise is tracked: which set input fields
are relevant (reps, weight, time, distance) and which category it is
listed under.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ExerciseInfo:
    """Catalog entry for one exercise (built-in or custom)."""

    display_name: str  # e.g. "Bench Press"
    category: str  # e.g. "Upper Body"

    # Which set fields apply
    supports_reps: bool = True
    supports_weight: bool = True
    supports_time: bool = False
    supports_distance: bool = False

    def __post_init__(self) -> None:
        if not self.display_name.strip():
            raise ValueError("ExerciseInfo.display_name must be non-empty")

    @property
    def tracked_fields(self) -> list[str]:
        """Names of the set fields this exercise records, in input order."""
        flags = (
            ("reps", self.supports_reps),
            ("weight", self.supports_weight),
            ("time", self.supports_time),
            ("distance", self.supports_distance),
        )
        return [name for name, on in flags if on]
