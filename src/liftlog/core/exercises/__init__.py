"""
Exercise catalog for liftlog.

Each built-in exercise is described by an ExerciseInfo loaded from YAML;
custom exercises resolve to the same shape.
"""

from .base import ExerciseInfo
from .registry import (
    EXERCISE_REGISTRY,
    categories,
    exercises_in_category,
    find_exercise,
    get_exercise,
    resolve_exercise,
)

__all__ = [
    "ExerciseInfo",
    "EXERCISE_REGISTRY",
    "categories",
    "exercises_in_category",
    "find_exercise",
    "get_exercise",
    "resolve_exercise",
]
