"""
Configuration constants for liftlog.

All fixed parameters for the session engine, summaries and one-rep-max
estimation live here. User-adjustable defaults (formula, rep
tiers) can be overridden through YAML, see engine/config_loader.py.
"""

from typing import Final

# =============================================================================
# SESSION CLOCK
# =============================================================================

TICK_INTERVAL_SECONDS: Final[float] = 1.0  # Display refresh period for live views

# =============================================================================
# SUMMARY FORMATTING
# =============================================================================

NO_SETS_COMPLETED: Final[str] = "No sets completed"
SUMMARY_SEPARATOR: Final[str] = " • "
WEIGHT_UNIT: Final[str] = "lbs"
DISTANCE_UNIT: Final[str] = "mi"

# =============================================================================
# ONE-REP-MAX FORMULAS
# =============================================================================

EPLEY_DIVISOR: Final[float] = 30.0  # 1RM = w * (1 + r / 30)
BRZYCKI_NUMERATOR: Final[float] = 36.0  # 1RM = w * 36 / (37 - r)
BRZYCKI_SINGULARITY: Final[int] = 37  # Denominator hits zero at r = 37

# Rep tiers shown in the rep-max estimation table
STANDARD_REP_TIERS: Final[tuple[int, ...]] = (2, 3, 5, 10)

# =============================================================================
# PERSONAL RECORDS
# =============================================================================

MAJOR_LIFTS: Final[tuple[str, ...]] = (
    "Bench Press",
    "Deadlift",
    "Back Squat",
    "Front Squat",
    "Overhead Press",
    "Barbell Row",
    "Power Clean",
    "Snatch",
    "Clean & Jerk",
    "Incline Bench Press",
    "Sumo Deadlift",
    "Romanian Deadlift",
)

RECENT_RECORDS_LIMIT: Final[int] = 5

# =============================================================================
# STORAGE
# =============================================================================

DATA_DIR_NAME: Final[str] = ".liftlog"
DATA_DIR_ENV: Final[str] = "LIFTLOG_HOME"
LOG_LEVEL_ENV: Final[str] = "LIFTLOG_LOG_LEVEL"
