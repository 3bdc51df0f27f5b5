"""
JSON storage for personal records, custom lifts and record display filters.
"""

import json
import logging
from pathlib import Path
from typing import Any

from ..core.engine.config_loader import default_formula_name, default_rep_tiers, get_data_dir
from ..core.max_filter import MaxFilterSettings
from ..core.models import OneRepMaxRecord
from ..core.one_rep_max import Formula
from .serializers import (
    ValidationError,
    dict_to_one_rep_max_record,
    one_rep_max_record_to_dict,
)

logger = logging.getLogger(__name__)


class RecordStore:
    """
    Manages the records.json file.

    Layout:
        {"records": [...], "custom_lifts": [...], "filter_settings": {...}}

    Each section is rewritten independently; the others are preserved.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def _read(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValidationError(f"Error parsing {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise ValidationError(f"{self.path} must contain a JSON object")
        return data

    def _write_section(self, key: str, value: Any) -> None:
        data = self._read()
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w") as f:
            json.dump(data, f, indent=2)
        logger.debug("Wrote %s to %s", key, self.path)

    # ── Records ──────────────────────────────────────────────────────────────

    def load_records(self) -> list[OneRepMaxRecord]:
        """
        Load all stored records.

        Raises:
            ValidationError: If a record entry is invalid (reported with its index)
        """
        records: list[OneRepMaxRecord] = []
        for i, raw in enumerate(self._read().get("records", [])):
            try:
                records.append(dict_to_one_rep_max_record(raw))
            except ValidationError as e:
                raise ValidationError(f"Error parsing record {i} in {self.path}: {e}") from e
        return records

    def save_records(self, records: list[OneRepMaxRecord]) -> None:
        self._write_section("records", [one_rep_max_record_to_dict(r) for r in records])

    # ── Custom lifts ─────────────────────────────────────────────────────────

    def load_custom_lifts(self) -> list[str]:
        return [str(name) for name in self._read().get("custom_lifts", [])]

    def save_custom_lifts(self, lifts: list[str]) -> None:
        self._write_section("custom_lifts", list(lifts))

    # ── Filter settings ──────────────────────────────────────────────────────

    def load_filter_settings(self) -> MaxFilterSettings:
        """
        Load display filters.

        Without stored settings the YAML-configured defaults apply
        (formula and rep tiers).
        """
        stored = self._read().get("filter_settings")
        if stored is not None:
            try:
                return MaxFilterSettings.from_dict(stored)
            except (TypeError, ValueError) as e:
                raise ValidationError(f"Invalid filter_settings in {self.path}: {e}") from e

        settings = MaxFilterSettings()
        settings.rep_tiers.update(default_rep_tiers())
        try:
            settings.formula = Formula(default_formula_name())
        except ValueError as e:
            raise ValidationError(f"Invalid one_rep_max.formula in config: {e}") from e
        return settings

    def save_filter_settings(self, settings: MaxFilterSettings) -> None:
        self._write_section("filter_settings", settings.to_dict())


def get_default_record_path() -> Path:
    """<data dir>/records.json ($LIFTLOG_HOME or ~/.liftlog)."""
    return get_data_dir() / "records.json"
