"""
Exercise registry.

All built-in exercises are registered here. Use get_exercise() to look up
an ExerciseInfo by display name, or resolve_exercise() to turn any
ExerciseRef (built-in or custom) into one.

The catalog is loaded from the bundled ``src/liftlog/exercises.yaml`` at
import time. If nothing can be loaded a RuntimeError is raised: the
application cannot start without a catalog.
"""

from ..models import ExerciseRef
from .base import ExerciseInfo


def _build_registry() -> dict[str, ExerciseInfo]:
    from .loader import load_exercises_from_yaml

    loaded = load_exercises_from_yaml()
    if not loaded:
        raise RuntimeError(
            "liftlog: no exercises could be loaded from YAML. "
            "Check that src/liftlog/exercises.yaml is present and valid."
        )
    return loaded


EXERCISE_REGISTRY: dict[str, ExerciseInfo] = _build_registry()


def get_exercise(name: str) -> ExerciseInfo:
    """
    Return the ExerciseInfo for a built-in exercise.

    Args:
        name: Display name, e.g. "Bench Press"

    Returns:
        ExerciseInfo for the requested exercise

    Raises:
        ValueError: If name is not in the registry
    """
    if name not in EXERCISE_REGISTRY:
        raise ValueError(
            f"Unknown exercise '{name}'. See 'liftlog exercises' for valid names."
        )
    return EXERCISE_REGISTRY[name]


def resolve_exercise(ref: ExerciseRef) -> ExerciseInfo:
    """Catalog entry for a built-in ref; custom refs carry their own flags."""
    if ref.custom is not None:
        c = ref.custom
        return ExerciseInfo(
            display_name=c.name,
            category=c.category,
            supports_reps=c.supports_reps,
            supports_weight=c.supports_weight,
            supports_time=c.supports_time,
            supports_distance=c.supports_distance,
        )
    return get_exercise(ref.name)


def find_exercise(query: str) -> ExerciseInfo | None:
    """Case-insensitive exact match, then unique prefix match."""
    q = query.strip().lower()
    for name, info in EXERCISE_REGISTRY.items():
        if name.lower() == q:
            return info
    matches = [info for name, info in EXERCISE_REGISTRY.items() if name.lower().startswith(q)]
    return matches[0] if len(matches) == 1 else None


def categories() -> list[str]:
    """Catalog categories in first-seen order."""
    seen: dict[str, None] = {}
    for info in EXERCISE_REGISTRY.values():
        seen.setdefault(info.category, None)
    return list(seen)


def exercises_in_category(category: str) -> list[ExerciseInfo]:
    return [info for info in EXERCISE_REGISTRY.values() if info.category == category]
