# naturalization_rules/policy.py

from __future__ import annotations

from typing import Optional


# Continuous residence: a single trip of this many days (inclusive) or more breaks it
LONG_TRIP_DAYS = 183

# Largest allowed hole between consecutive residences
MAX_RESIDENCE_GAP_DAYS = 30

# Days in the current state before filing
STATE_RESIDENCY_DAYS = 90

# Months in the same state before filing (residence history rule)
SAME_STATE_MONTHS = 3

# Physical presence (half of the statutory period)
REQUIRED_PRESENCE_DAYS = {3: 548, 5: 913}

THREE_YEAR_FACTORS = {"DM", "SC"}


def is_three_year(factor: Optional[str]) -> bool:
    """DM / SC applicants file on the 3-year (marriage) track."""
    return factor in THREE_YEAR_FACTORS


def lookback_years_for(factor: Optional[str]) -> int:
    return 3 if is_three_year(factor) else 5


def required_presence_days(lookback_years: int) -> int:
    if lookback_years not in REQUIRED_PRESENCE_DAYS:
        raise ValueError(f"lookback_years must be 3 or 5, got {lookback_years!r}")
    return REQUIRED_PRESENCE_DAYS[lookback_years]
