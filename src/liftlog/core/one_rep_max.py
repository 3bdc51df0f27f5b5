"""
One-rep-max estimation.

Two standard strength-training formulas relate a single heavy set to the
one-rep max (1RM):

  Epley (1985):
    1RM = w × (1 + r / 30)
    w   = 1RM / (1 + r / 30)

  Brzycki (1993):
    1RM = w × 36 / (37 − r)
    w   = 1RM × (37 − r) / 36

A single rep is the identity case for both: the weight lifted once *is* the
one-rep max. Brzycki has a singularity at r = 37; at or beyond it the
formula has no meaningful answer and UnsupportedRepCountError is raised.
Rep counts below 1 are rejected with None.
"""

from __future__ import annotations

from enum import Enum
from typing import Iterable

from .config import (
    BRZYCKI_NUMERATOR,
    BRZYCKI_SINGULARITY,
    EPLEY_DIVISOR,
    STANDARD_REP_TIERS,
)


class Formula(str, Enum):
    """Selectable 1RM formula."""

    EPLEY = "epley"
    BRZYCKI = "brzycki"

    @property
    def label(self) -> str:
        return self.value.capitalize()


class UnsupportedRepCountError(ValueError):
    """Raised when a rep count lies outside the formula's domain."""

    def __init__(self, reps: int, formula: Formula):
        self.reps = reps
        self.formula = formula
        super().__init__(
            f"{formula.label} formula is undefined for {reps} reps "
            f"(must be below {BRZYCKI_SINGULARITY})"
        )


# ---------------------------------------------------------------------------
# Formula kernels
# ---------------------------------------------------------------------------

def _epley_weight(one_rep_max: float, reps: int) -> float:
    return one_rep_max / (1.0 + reps / EPLEY_DIVISOR)


def _epley_one_rep_max(weight: float, reps: int) -> float:
    return weight * (1.0 + reps / EPLEY_DIVISOR)


def _brzycki_weight(one_rep_max: float, reps: int) -> float:
    return one_rep_max * (BRZYCKI_SINGULARITY - reps) / BRZYCKI_NUMERATOR


def _brzycki_one_rep_max(weight: float, reps: int) -> float:
    return weight * BRZYCKI_NUMERATOR / (BRZYCKI_SINGULARITY - reps)


def _check_domain(reps: int, formula: Formula) -> None:
    if formula is Formula.BRZYCKI and reps >= BRZYCKI_SINGULARITY:
        raise UnsupportedRepCountError(reps, formula)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def estimate_weight(
    one_rep_max: float,
    target_reps: int,
    formula: Formula = Formula.EPLEY,
) -> float | None:
    """
    Weight that should be liftable for ``target_reps`` given a 1RM.

    Args:
        one_rep_max: Known or estimated one-rep max
        target_reps: Rep count to project to
        formula: Formula to apply

    Returns:
        Projected weight; the 1RM itself for a single rep; None for
        target_reps < 1.

    Raises:
        UnsupportedRepCountError: Brzycki with target_reps >= 37
    """
    if target_reps < 1:
        return None
    if target_reps == 1:
        return one_rep_max
    _check_domain(target_reps, formula)
    if formula is Formula.BRZYCKI:
        return _brzycki_weight(one_rep_max, target_reps)
    return _epley_weight(one_rep_max, target_reps)


def estimate_one_rep_max(
    weight: float,
    reps: int,
    formula: Formula = Formula.EPLEY,
) -> float | None:
    """
    Implied 1RM from a set of ``reps`` at ``weight``.

    Returns the weight itself for a single rep and None for reps < 1.

    Raises:
        UnsupportedRepCountError: Brzycki with reps >= 37
    """
    if reps < 1:
        return None
    if reps == 1:
        return weight
    _check_domain(reps, formula)
    if formula is Formula.BRZYCKI:
        return _brzycki_one_rep_max(weight, reps)
    return _epley_one_rep_max(weight, reps)


def estimate(formula: Formula, one_rep_max: float, reps: int) -> float | None:
    """Formula-first alias of estimate_weight()."""
    return estimate_weight(one_rep_max, reps, formula)


def percentage_of_one_rep_max(weight: float, one_rep_max: float) -> float | None:
    """weight as a percentage of 1RM; None when the 1RM is not positive."""
    if one_rep_max <= 0:
        return None
    return weight / one_rep_max * 100.0


def rep_max_table(
    one_rep_max: float,
    rep_tiers: Iterable[int] = STANDARD_REP_TIERS,
    formula: Formula = Formula.EPLEY,
) -> dict[int, float]:
    """
    Projected weights for each rep tier, in ascending rep order.

    Tiers the formula cannot handle (below 1, or past the Brzycki
    singularity) are left out of the table.
    """
    table: dict[int, float] = {}
    for reps in sorted(set(rep_tiers)):
        try:
            weight = estimate_weight(one_rep_max, reps, formula)
        except UnsupportedRepCountError:
            continue
        if weight is not None:
            table[reps] = weight
    return table
