"""
YAML → ExerciseInfo loader.

Loads the built-in catalog from the bundled ``src/liftlog/exercises.yaml``.
Each entry under ``exercises:`` is keyed by display name and may omit any
supports_* flag, falling back to the ``defaults:`` section.

User overrides: ``~/.liftlog/exercises.yaml`` is deep-merged over the
bundled file, so only changed keys need to be listed. Entries whose name is
not in the bundled catalog are added as new exercises.

Usage (internal, called by registry.py):
    from .loader import load_exercises_from_yaml
    exercises = load_exercises_from_yaml()
"""

from __future__ import annotations

import logging
from typing import Any

from ..engine.config_loader import deep_merge, get_bundled_path, get_user_yaml_path, load_yaml_file
from .base import ExerciseInfo

logger = logging.getLogger(__name__)

_FLAG_FIELDS: tuple[str, ...] = (
    "supports_reps",
    "supports_weight",
    "supports_time",
    "supports_distance",
)


def exercise_from_dict(name: str, d: dict[str, Any], defaults: dict[str, Any]) -> ExerciseInfo:
    """Convert a raw catalog entry to an ExerciseInfo.

    Raises ValueError if the entry has no category.
    """
    if "category" not in d:
        raise ValueError(f"exercise '{name}' has no category")
    flags = {
        f: bool(d[f] if f in d else defaults[f])
        for f in _FLAG_FIELDS
        if f in d or f in defaults
    }
    return ExerciseInfo(display_name=str(name), category=str(d["category"]), **flags)


def load_exercises_from_yaml() -> dict[str, ExerciseInfo]:
    """Return {display_name: ExerciseInfo} from the bundled and user catalogs.

    Malformed entries are logged and skipped.
    """
    raw = load_yaml_file(get_bundled_path("exercises.yaml"))
    user = get_user_yaml_path("exercises.yaml")
    if user is not None:
        user_raw = load_yaml_file(user)
        if user_raw:
            logger.debug("Merging user exercises from %s", user)
            raw = deep_merge(raw, user_raw)

    defaults = raw.get("defaults") or {}
    result: dict[str, ExerciseInfo] = {}
    for name, entry in (raw.get("exercises") or {}).items():
        try:
            result[str(name)] = exercise_from_dict(name, entry or {}, defaults)
        except ValueError as exc:
            logger.warning("Skipping exercise %r: %s", name, exc)
    return result
