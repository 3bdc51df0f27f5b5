"""
Personal-record bookkeeping.

OneRepMaxManager keeps the user's personal bests per lift and the list of
custom lifts, and turns the best weight record of a lift into a rep-max
table through the one-rep-max calculator. Persistence is delegated to a
record store; without one, records live in memory only.
"""

from __future__ import annotations

import logging
from typing import Protocol

from .config import MAJOR_LIFTS, RECENT_RECORDS_LIMIT
from .max_filter import MaxFilterSettings
from .models import OneRepMaxRecord, RecordType
from .one_rep_max import rep_max_table

logger = logging.getLogger(__name__)


class RecordPersistence(Protocol):
    """CRUD surface the manager needs from a store."""

    def load_records(self) -> list[OneRepMaxRecord]: ...

    def save_records(self, records: list[OneRepMaxRecord]) -> None: ...

    def load_custom_lifts(self) -> list[str]: ...

    def save_custom_lifts(self, lifts: list[str]) -> None: ...


class OneRepMaxManager:
    """
    Manages personal records, newest first.
    """

    def __init__(self, store: RecordPersistence | None = None):
        self.store = store
        self.major_lifts: list[str] = list(MAJOR_LIFTS)
        self.records: list[OneRepMaxRecord] = []
        self.custom_lifts: list[str] = []
        if store is not None:
            self.records = store.load_records()
            self.custom_lifts = store.load_custom_lifts()
        self._sort()

    def _sort(self) -> None:
        self.records.sort(key=lambda r: r.date, reverse=True)

    def _save_records(self) -> None:
        if self.store is not None:
            self.store.save_records(self.records)

    def _save_custom_lifts(self) -> None:
        if self.store is not None:
            self.store.save_custom_lifts(self.custom_lifts)

    # ── CRUD ─────────────────────────────────────────────────────────────────

    def add_record(self, record: OneRepMaxRecord) -> None:
        """
        Add a record, dropping lighter records of the same lift and type.
        """
        before = len(self.records)
        self.records = [
            r for r in self.records
            if not (
                r.lift_name == record.lift_name
                and r.record_type is record.record_type
                and r.value < record.value
            )
        ]
        dropped = before - len(self.records)
        self.records.append(record)
        self._sort()
        self._save_records()
        logger.info(
            "Added %s record for %s (%s), replaced %d",
            record.record_type.value, record.lift_name, record.formatted_value, dropped,
        )

    def update_record(self, record: OneRepMaxRecord) -> bool:
        for i, existing in enumerate(self.records):
            if existing.id == record.id:
                self.records[i] = record
                self._sort()
                self._save_records()
                return True
        return False

    def delete_record(self, record_id: str) -> bool:
        before = len(self.records)
        self.records = [r for r in self.records if r.id != record_id]
        if len(self.records) == before:
            return False
        self._save_records()
        return True

    def find_record(self, record_id: str) -> OneRepMaxRecord | None:
        """Find by full id or by a unique id prefix."""
        matches = [r for r in self.records if r.id == record_id or r.id.startswith(record_id)]
        return matches[0] if len(matches) == 1 else None

    # ── Lifts ────────────────────────────────────────────────────────────────

    def get_all_lifts(self) -> list[str]:
        return self.major_lifts + self.custom_lifts

    def is_custom_lift(self, lift_name: str) -> bool:
        return lift_name in self.custom_lifts

    def add_custom_lift(self, lift_name: str) -> bool:
        if lift_name in self.custom_lifts or lift_name in self.major_lifts:
            return False
        self.custom_lifts.append(lift_name)
        self._save_custom_lifts()
        return True

    def remove_custom_lift(self, lift_name: str) -> None:
        """Remove a custom lift together with its custom records."""
        self.custom_lifts = [lift for lift in self.custom_lifts if lift != lift_name]
        self.records = [
            r for r in self.records if not (r.lift_name == lift_name and r.is_custom)
        ]
        self._save_custom_lifts()
        self._save_records()

    # ── Queries ──────────────────────────────────────────────────────────────

    def records_for_lift(self, lift_name: str) -> list[OneRepMaxRecord]:
        return [r for r in self.records if r.lift_name == lift_name]

    def get_personal_record(
        self,
        lift_name: str,
        record_type: RecordType = RecordType.WEIGHT,
    ) -> OneRepMaxRecord | None:
        """Best record for a lift: highest value, the newer one on ties."""
        candidates = [
            r for r in self.records
            if r.lift_name == lift_name and r.record_type is record_type
        ]
        if not candidates:
            return None
        return max(candidates, key=lambda r: (r.value, r.date))

    def recent_records(self, limit: int = RECENT_RECORDS_LIMIT) -> list[OneRepMaxRecord]:
        return self.records[:limit]

    def filtered_records(self, settings: MaxFilterSettings) -> list[OneRepMaxRecord]:
        return settings.filter_records(self.records, self.custom_lifts)

    def rep_max_estimates(
        self,
        lift_name: str,
        settings: MaxFilterSettings,
    ) -> dict[int, float]:
        """Rep-max table for a lift's best weight, limited to the enabled tiers."""
        best = self.get_personal_record(lift_name, RecordType.WEIGHT)
        if best is None:
            return {}
        tiers = settings.enabled_rep_tiers()
        if not tiers:
            return {}
        return rep_max_table(best.value, tiers, settings.formula)

    # ── Statistics ───────────────────────────────────────────────────────────

    @property
    def total_records(self) -> int:
        return len(self.records)

    def heaviest_record(self) -> OneRepMaxRecord | None:
        weights = [r for r in self.records if r.record_type is RecordType.WEIGHT]
        return max(weights, key=lambda r: r.value) if weights else None

    def most_recent_record(self) -> OneRepMaxRecord | None:
        return self.records[0] if self.records else None
