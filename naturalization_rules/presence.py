# naturalization_rules/presence.py

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional, Tuple

from .dates import (
    add_days,
    add_months,
    add_years,
    days_between_inclusive,
    days_in_window,
    intervals_overlap,
    subtract_months,
)
from .models import TripInterval
from .normalize import format_date
from .policy import LONG_TRIP_DAYS, lookback_years_for, required_presence_days
from .validate import Issue

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PresenceAssessment:
    lookback_start: date
    lookback_end: date
    lookback_years: int
    required_presence_days: int
    days_abroad: int
    window_days: int
    days_present: int
    meets_requirement: bool
    long_trips: List[TripInterval]
    overlaps: List[Tuple[TripInterval, TripInterval]]
    delayed_filing_date: Optional[date] = None
    days_short: int = 0
    presence_delay_date: Optional[date] = None
    long_trip_rows: List[int] = field(default_factory=list)  # 1-based rows as entered
    overlap_rows: List[Tuple[int, int]] = field(default_factory=list)
    issues: List[Issue] = field(default_factory=list)


def _row(trip: TripInterval, idx: int) -> int:
    """Row the applicant entered the trip at; list position when intake did not set it."""
    return trip.row if trip.row is not None else idx + 1


def _label(trip: TripInterval, idx: int) -> str:
    return trip.label or f"Row {_row(trip, idx)}"


def trip_days_in_period(start: date, end: date, period_start: date, period_end: date) -> int:
    """Inclusive days of [start, end] that fall inside [period_start, period_end]; 0 if none."""
    clamped_start = max(start, period_start)
    clamped_end = min(end, period_end)
    if clamped_end < clamped_start:
        return 0
    return days_between_inclusive(clamped_start, clamped_end)


def is_long_trip(trip: TripInterval) -> bool:
    return days_between_inclusive(trip.start, trip.end) >= LONG_TRIP_DAYS


def is_more_than_six_months(start: date, end: date) -> bool:
    """Return date is at least one day past the same calendar day six months later."""
    return end >= add_days(add_months(start, 6), 1)


def filing_date_after_long_trip(return_date: date, lookback_years: int) -> date:
    """(day after return + lookback years) - 3 months."""
    return subtract_months(add_years(add_days(return_date, 1), lookback_years), 3)


def evaluate_intervals(
    intervals: List[TripInterval],
    lookback_years: int,
    today: date,
) -> PresenceAssessment:
    """
    Physical presence + continuous residence over the lookback window.

    Counting:
      - days_abroad: each trip clamped to [lookback_start, today], counted INCLUSIVE
      - window_days: today - lookback_start, NOT inclusive
      - days_present = max(0, window_days - days_abroad)

    Flags (in input order):
      - trips of LONG_TRIP_DAYS or more (inclusive)   => HIGH, delays filing
      - every overlapping pair (i < j)                => HIGH
      - departure after return                        => MEDIUM, raw dates still used
      - days_present below the requirement            => HIGH, with the wait date
    """
    required = required_presence_days(lookback_years)
    lookback_start = add_years(today, -lookback_years)

    issues: List[Issue] = []
    days_abroad = 0
    long_trips: List[TripInterval] = []
    long_trip_rows: List[int] = []

    for idx, trip in enumerate(intervals):
        if trip.start > trip.end:
            issues.append(
                Issue(
                    severity="medium",
                    category="time_outside",
                    message=(
                        f"{_label(trip, idx)}: departure {format_date(trip.start)} is after "
                        f"return {format_date(trip.end)}."
                    ),
                    suggested_question="Please confirm the departure and return dates for this trip.",
                    ref_id=trip.ref_id,
                )
            )

        days_abroad += trip_days_in_period(trip.start, trip.end, lookback_start, today)

        if is_long_trip(trip):
            long_trips.append(trip)
            long_trip_rows.append(_row(trip, idx))

    window_days = days_in_window(lookback_start, today)
    days_present = max(0, window_days - days_abroad)
    meets_requirement = days_present >= required

    overlaps: List[Tuple[TripInterval, TripInterval]] = []
    overlap_rows: List[Tuple[int, int]] = []
    for i in range(len(intervals)):
        for j in range(i + 1, len(intervals)):
            a, b = intervals[i], intervals[j]
            if intervals_overlap(a.start, a.end, b.start, b.end):
                overlaps.append((a, b))
                overlap_rows.append((_row(a, i), _row(b, j)))
                issues.append(
                    Issue(
                        severity="high",
                        category="time_outside",
                        message=f"{_label(a, i)} overlaps with {_label(b, j)}.",
                        suggested_question="Please correct the trip dates so trips do not overlap.",
                        ref_id=a.ref_id,
                    )
                )

    delayed_filing_date: Optional[date] = None
    if long_trips:
        most_recent = long_trips[0]
        for trip in long_trips[1:]:
            if trip.end > most_recent.end:
                most_recent = trip
        delayed_filing_date = filing_date_after_long_trip(most_recent.end, lookback_years)
        issues.append(
            Issue(
                severity="high",
                category="time_outside",
                message=(
                    f"Trip(s) of {LONG_TRIP_DAYS} days or more break continuous residence; "
                    f"earliest filing date is {format_date(delayed_filing_date)}."
                ),
                suggested_question="Please confirm the dates of any trip that lasted six months or more.",
                ref_id=most_recent.ref_id,
            )
        )

    days_short = 0
    presence_delay_date: Optional[date] = None
    if not meets_requirement:
        days_short = required - days_present
        presence_delay_date = add_days(today, days_short)
        issues.append(
            Issue(
                severity="high",
                category="time_outside",
                message=(
                    f"Physical presence is {days_present} day(s); {required} required in the last "
                    f"{lookback_years} years ({days_short} short)."
                ),
                suggested_question="Please confirm all trips outside the U.S. during the lookback period.",
            )
        )

    logger.debug(
        "Presence: required=%s window=%s abroad=%s present=%s long=%s overlaps=%s",
        required, window_days, days_abroad, days_present, len(long_trips), len(overlaps),
    )

    return PresenceAssessment(
        lookback_start=lookback_start,
        lookback_end=today,
        lookback_years=lookback_years,
        required_presence_days=required,
        days_abroad=days_abroad,
        window_days=window_days,
        days_present=days_present,
        meets_requirement=meets_requirement,
        long_trips=long_trips,
        overlaps=overlaps,
        delayed_filing_date=delayed_filing_date,
        days_short=days_short,
        presence_delay_date=presence_delay_date,
        long_trip_rows=long_trip_rows,
        overlap_rows=overlap_rows,
        issues=issues,
    )


def evaluate_trips_for_factor(
    intervals: List[TripInterval],
    controlling_factor: Optional[str],
    today: date,
) -> PresenceAssessment:
    """3-year lookback for DM/SC, 5-year for everything else."""
    return evaluate_intervals(intervals, lookback_years_for(controlling_factor), today)


# ======================================================
# Trip entry boundaries (trips are entered latest first)
# ======================================================

def check_trip_boundaries(
    intervals: List[TripInterval],
    *,
    lookback_start: date,
) -> List[Issue]:
    """
    For trip i (latest first):
      - departure/return no later than trip i-1's departure - 1 day
      - departure/return no earlier than trip i+1's return + 1 day
      - return on or after lookback_start
    """
    issues: List[Issue] = []

    for idx, trip in enumerate(intervals):
        label = _label(trip, idx)

        if idx > 0:
            latest_allowed = add_days(intervals[idx - 1].start, -1)
            if trip.start > latest_allowed or trip.end > latest_allowed:
                issues.append(
                    Issue(
                        severity="high",
                        category="time_outside",
                        message=(
                            f"{label} must end on or before {format_date(latest_allowed)}, "
                            f"the day before {_label(intervals[idx - 1], idx - 1)} departs."
                        ),
                        suggested_question="Please list trips from most recent to earliest without overlapping dates.",
                        ref_id=trip.ref_id,
                    )
                )

        if idx + 1 < len(intervals):
            earliest_allowed = add_days(intervals[idx + 1].end, 1)
            if trip.start < earliest_allowed or trip.end < earliest_allowed:
                issues.append(
                    Issue(
                        severity="high",
                        category="time_outside",
                        message=(
                            f"{label} must start on or after {format_date(earliest_allowed)}, "
                            f"the day after {_label(intervals[idx + 1], idx + 1)} returns."
                        ),
                        suggested_question="Please list trips from most recent to earliest without overlapping dates.",
                        ref_id=trip.ref_id,
                    )
                )

        if trip.end < lookback_start:
            issues.append(
                Issue(
                    severity="high",
                    category="time_outside",
                    message=(
                        f"{label} returned {format_date(trip.end)}, before the lookback period "
                        f"starting {format_date(lookback_start)}."
                    ),
                    suggested_question="Only trips that end on or after the lookback start date are needed.",
                    ref_id=trip.ref_id,
                )
            )

    return issues
