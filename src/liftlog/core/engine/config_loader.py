"""
YAML → typed config loader.

Loads user-adjustable defaults from liftlog.yaml (bundled with the package)
and optionally merges user overrides from ~/.liftlog/config.yaml.

Usage:
    from liftlog.core.engine.config_loader import load_user_config
    cfg = load_user_config()
    formula = cfg.get("one_rep_max", {}).get("formula", "epley")

A user override file with parse errors is logged and ignored; the bundled
defaults still apply.
"""

from __future__ import annotations

import importlib.resources
import logging
import os
from pathlib import Path
from typing import Any

import yaml

from ..config import DATA_DIR_ENV, DATA_DIR_NAME, RECENT_RECORDS_LIMIT

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a single YAML mapping; return {} when unreadable or not a mapping."""
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError) as exc:
        logger.warning("Ignoring unreadable YAML file %s: %s", path, exc)
        return {}
    return data if isinstance(data, dict) else {}


def deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge *override* into *base* (non-destructive to base)."""
    result = dict(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(result.get(k), dict):
            result[k] = deep_merge(result[k], v)
        else:
            result[k] = v
    return result


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def get_data_dir() -> Path:
    """Return the liftlog data directory ($LIFTLOG_HOME or ~/.liftlog)."""
    override = os.environ.get(DATA_DIR_ENV)
    if override:
        return Path(override).expanduser()
    home = Path(os.environ.get("HOME", "~")).expanduser()
    return home / DATA_DIR_NAME


def get_bundled_path(filename: str) -> Path:
    """Return the path of a YAML file shipped inside the liftlog package."""
    return Path(str(importlib.resources.files("liftlog").joinpath(filename)))


def get_user_yaml_path(filename: str = "config.yaml") -> Path | None:
    """Return <data dir>/<filename> if it exists, else None."""
    p = get_data_dir() / filename
    return p if p.exists() else None


def load_user_config() -> dict[str, Any]:
    """
    Load and merge user-adjustable defaults from YAML sources.

    Load order (later overrides earlier):
    1. Bundled src/liftlog/liftlog.yaml
    2. User override at ~/.liftlog/config.yaml

    Returns:
        Merged dict of config sections.
    """
    config = load_yaml_file(get_bundled_path("liftlog.yaml"))

    user = get_user_yaml_path()
    if user is not None:
        user_cfg = load_yaml_file(user)
        if user_cfg:
            logger.debug("Merging user config from %s", user)
            config = deep_merge(config, user_cfg)

    return config


def default_formula_name(config: dict[str, Any] | None = None) -> str:
    """Configured default one-rep-max formula ("epley" or "brzycki")."""
    cfg = load_user_config() if config is None else config
    return str(cfg.get("one_rep_max", {}).get("formula", "epley")).lower()


def default_rep_tiers(config: dict[str, Any] | None = None) -> dict[int, bool]:
    """Configured default visibility of each rep-max tier."""
    cfg = load_user_config() if config is None else config
    raw = cfg.get("one_rep_max", {}).get("rep_tiers", {}) or {}
    return {int(k): bool(v) for k, v in raw.items()}


def recent_records_limit(config: dict[str, Any] | None = None) -> int:
    """How many records 'recent' views show."""
    cfg = load_user_config() if config is None else config
    return int(cfg.get("display", {}).get("recent_records", RECENT_RECORDS_LIMIT))
