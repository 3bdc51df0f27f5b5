"""
Display preferences for personal records and rep-max estimations.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any

from .config import STANDARD_REP_TIERS
from .models import OneRepMaxRecord, RecordType
from .one_rep_max import Formula


class SortOption(str, Enum):
    DATE = "date"
    NAME = "name"
    VALUE = "value"
    TYPE = "type"


class SortOrder(str, Enum):
    ASCENDING = "asc"
    DESCENDING = "desc"


def _all_record_types() -> dict[str, bool]:
    return {t.value: True for t in RecordType}


def _all_rep_tiers() -> dict[int, bool]:
    return {reps: True for reps in STANDARD_REP_TIERS}


@dataclass
class MaxFilterSettings:
    """
    Which records and estimations to show, and in what order.

    ``record_types`` maps RecordType values to visibility; ``rep_tiers``
    maps each standard tier (2, 3, 5, 10) to its own toggle, gated by the
    ``show_rep_estimations`` master switch.
    """

    record_types: dict[str, bool] = field(default_factory=_all_record_types)
    show_major_lifts: bool = True
    show_custom_lifts: bool = True
    show_rep_estimations: bool = True
    rep_tiers: dict[int, bool] = field(default_factory=_all_rep_tiers)
    formula: Formula = Formula.EPLEY
    sort_by: SortOption = SortOption.DATE
    sort_order: SortOrder = SortOrder.DESCENDING

    # ── Filtering ────────────────────────────────────────────────────────────

    def shows_record_type(self, record_type: RecordType) -> bool:
        return self.record_types.get(record_type.value, True)

    def should_show_record(self, record: OneRepMaxRecord, is_custom: bool) -> bool:
        lift_ok = self.show_custom_lifts if is_custom else self.show_major_lifts
        return self.shows_record_type(record.record_type) and lift_ok

    def should_show_rep_estimation(self, reps: int) -> bool:
        if not self.show_rep_estimations:
            return False
        return self.rep_tiers.get(reps, False)

    def enabled_rep_tiers(self) -> list[int]:
        return [r for r in sorted(self.rep_tiers) if self.should_show_rep_estimation(r)]

    def toggle_rep_tier(self, reps: int) -> None:
        if reps not in STANDARD_REP_TIERS:
            raise ValueError(
                f"Unsupported rep tier {reps}. Valid tiers: {', '.join(map(str, STANDARD_REP_TIERS))}"
            )
        self.rep_tiers[reps] = not self.rep_tiers.get(reps, False)

    def filter_records(
        self,
        records: list[OneRepMaxRecord],
        custom_lifts: list[str],
    ) -> list[OneRepMaxRecord]:
        visible = [
            r for r in records
            if self.should_show_record(r, r.is_custom or r.lift_name in custom_lifts)
        ]
        return self.sort_records(visible)

    def filter_lifts(self, lifts: list[str], custom_lifts: list[str]) -> list[str]:
        return [
            lift for lift in lifts
            if (self.show_custom_lifts if lift in custom_lifts else self.show_major_lifts)
        ]

    def sort_records(self, records: list[OneRepMaxRecord]) -> list[OneRepMaxRecord]:
        keys = {
            SortOption.DATE: lambda r: r.date,
            SortOption.NAME: lambda r: r.lift_name,
            SortOption.VALUE: lambda r: r.value,
            SortOption.TYPE: lambda r: r.record_type.value,
        }
        return sorted(
            records,
            key=keys[self.sort_by],
            reverse=self.sort_order is SortOrder.DESCENDING,
        )

    # ── Reset ────────────────────────────────────────────────────────────────

    def reset_to_defaults(self) -> None:
        defaults = MaxFilterSettings()
        self.__dict__.update(defaults.__dict__)

    # ── Persistence ──────────────────────────────────────────────────────────

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        d["rep_tiers"] = {str(k): v for k, v in self.rep_tiers.items()}
        d["formula"] = self.formula.value
        d["sort_by"] = self.sort_by.value
        d["sort_order"] = self.sort_order.value
        return d

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MaxFilterSettings":
        """Build settings from a stored dict; missing keys keep their defaults."""
        settings = cls()
        settings.record_types.update(
            {str(k): bool(v) for k, v in data.get("record_types", {}).items()}
        )
        settings.show_major_lifts = bool(data.get("show_major_lifts", True))
        settings.show_custom_lifts = bool(data.get("show_custom_lifts", True))
        settings.show_rep_estimations = bool(data.get("show_rep_estimations", True))
        settings.rep_tiers.update(
            {int(k): bool(v) for k, v in data.get("rep_tiers", {}).items()}
        )
        settings.formula = Formula(data.get("formula", Formula.EPLEY.value))
        settings.sort_by = SortOption(data.get("sort_by", SortOption.DATE.value))
        settings.sort_order = SortOrder(data.get("sort_order", SortOrder.DESCENDING.value))
        return settings
