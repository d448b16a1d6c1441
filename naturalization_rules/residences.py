# naturalization_rules/residences.py

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional, Tuple

from .dates import add_days, add_months, add_years, days_between_inclusive, days_in_window, subtract_months
from .models import ResidenceEntry
from .normalize import format_date
from .policy import MAX_RESIDENCE_GAP_DAYS, SAME_STATE_MONTHS, STATE_RESIDENCY_DAYS, lookback_years_for
from .validate import Issue, detect_residence_gaps, detect_residence_overlaps

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResidenceAssessment:
    lookback_start: date
    application_date: date
    required_days: int
    total_duration_days: int
    gap_days: int
    residence_days: int  # total_duration_days + gap_days
    covers_lookback: bool
    gaps: List[Tuple[ResidenceEntry, ResidenceEntry, int]] = field(default_factory=list)  # (later, earlier, days)
    overlaps: List[Tuple[ResidenceEntry, ResidenceEntry]] = field(default_factory=list)  # (later, earlier)
    same_state_filing_date: Optional[date] = None
    current_state_since: Optional[date] = None
    state_residency_date: Optional[date] = None
    issues: List[Issue] = field(default_factory=list)


# -------------------------
# Single-entry helpers
# -------------------------

def calculate_residence_duration(from_date: date, to_date: date) -> int:
    return days_between_inclusive(from_date, to_date)


def calculate_residence_gap(previous_to: date, current_from: date) -> int:
    """Days between one residence ending and the next starting (never negative)."""
    return max(0, days_between_inclusive(previous_to, current_from) - 1)


def calculate_state_residency_date(moved_to_state: date) -> date:
    """First day the 90-day state residency requirement is met."""
    return add_days(moved_to_state, STATE_RESIDENCY_DAYS)


def meets_state_residency_requirement(moved_to_state: date, as_of: date) -> bool:
    return as_of >= calculate_state_residency_date(moved_to_state)


# -------------------------
# History-level rules (entries listed most recent first)
# -------------------------

def residence_gaps(
    residences: List[ResidenceEntry],
    today: date,
) -> List[Tuple[ResidenceEntry, ResidenceEntry, int]]:
    """Positive gaps between consecutive residences as (later, earlier, days)."""
    gaps = []
    for later, earlier in zip(residences, residences[1:]):
        days = (later.from_date - (earlier.to_date or today)).days
        if days > 0:
            gaps.append((later, earlier, days))
    return gaps


def residence_overlaps(
    residences: List[ResidenceEntry],
    today: date,
) -> List[Tuple[ResidenceEntry, ResidenceEntry]]:
    """Consecutive pairs where the later residence starts on or before the earlier one ends."""
    return [
        (later, earlier)
        for later, earlier in zip(residences, residences[1:])
        if later.from_date <= (earlier.to_date or today)
    ]


def current_state_since(residences: List[ResidenceEntry]) -> Optional[date]:
    """Earliest from_date of the unbroken run of residences in the current state."""
    if not residences or not residences[0].state:
        return None
    state = residences[0].state
    since = residences[0].from_date
    for entry in residences[1:]:
        if entry.state != state:
            break
        since = entry.from_date
    return since


def same_state_filing_date(residences: List[ResidenceEntry], today: date) -> Optional[date]:
    """
    Same-state rule: the applicant must have lived in the current state for
    SAME_STATE_MONTHS months.

    Walk from the most recent residence while the state is unchanged and the gap
    between entries is at most MAX_RESIDENCE_GAP_DAYS, stopping at the first entry
    that starts on or before (today - 3 months). If the run is broken, or never
    reaches that threshold, the applicant must wait until lowest from_date + 3 months.
    Returns None when the rule is already met.
    """
    if not residences:
        return None

    threshold = subtract_months(today, SAME_STATE_MONTHS)
    state = residences[0].state
    lowest_from = residences[0].from_date
    valid_sequence = True

    for idx, entry in enumerate(residences):
        if idx > 0:
            if entry.state != state:
                break
            if (lowest_from - (entry.to_date or today)).days > MAX_RESIDENCE_GAP_DAYS:
                valid_sequence = False
                break
            lowest_from = entry.from_date
        if entry.from_date <= threshold:
            break

    if not valid_sequence or lowest_from > threshold:
        return add_months(lowest_from, SAME_STATE_MONTHS)
    return None


def evaluate_residence_history(
    residences: List[ResidenceEntry],
    controlling_factor: Optional[str],
    application_date: date,
    *,
    today: Optional[date] = None,
) -> ResidenceAssessment:
    """
    Does the residence history reach back over the whole lookback period?

      lookback_start = application_date - (3 or 5) years
      required_days  = application_date - lookback_start
      covered        = sum(inclusive durations) + sum(positive gaps) >= required_days
                       AND the oldest residence started on or before lookback_start

    Also runs the gap/overlap checks, the same-state rule and the 90-day state
    residency rule. `today` (default: application_date) is the date those last
    two rules are measured against.
    """
    as_of = today or application_date
    years = lookback_years_for(controlling_factor)
    lookback_start = add_years(application_date, -years)
    required_days = days_in_window(lookback_start, application_date)

    issues: List[Issue] = []
    issues.extend(detect_residence_gaps(residences, today=as_of))
    issues.extend(detect_residence_overlaps(residences, today=as_of))

    total_duration = sum(
        calculate_residence_duration(r.from_date, r.to_date or as_of) for r in residences
    )
    gaps = residence_gaps(residences, as_of)
    gap_days = sum(days for _, _, days in gaps)
    residence_days = total_duration + gap_days

    covers = bool(residences) and residence_days >= required_days and residences[-1].from_date <= lookback_start
    if residences and not covers:
        issues.append(
            Issue(
                severity="high",
                category="residences",
                message=(
                    f"Residence history does not reach back {years} years "
                    f"(to {format_date(lookback_start)})."
                ),
                suggested_question="Please continue to enter additional residences.",
            )
        )

    filing_date = same_state_filing_date(residences, as_of)
    if filing_date is not None:
        issues.append(
            Issue(
                severity="high",
                category="residences",
                message=(
                    f"Less than {SAME_STATE_MONTHS} months in the current state; "
                    f"you must wait until {format_date(filing_date)} to file."
                ),
                suggested_question=(
                    "Please enter additional residences within your current state reaching back "
                    f"{SAME_STATE_MONTHS} months or more."
                ),
            )
        )

    state_since = current_state_since(residences)
    state_date = calculate_state_residency_date(state_since) if state_since else None
    if state_since is not None and not meets_state_residency_requirement(state_since, as_of):
        issues.append(
            Issue(
                severity="medium",
                category="residences",
                message=(
                    f"You must live in the same State for {STATE_RESIDENCY_DAYS} consecutive days "
                    f"before applying (met on {format_date(state_date)})."
                ),
                suggested_question="When did you move to your current state?",
            )
        )

    logger.debug(
        "Residences: required=%s duration=%s gaps=%s covers=%s",
        required_days, total_duration, gap_days, covers,
    )

    return ResidenceAssessment(
        lookback_start=lookback_start,
        application_date=application_date,
        required_days=required_days,
        total_duration_days=total_duration,
        gap_days=gap_days,
        residence_days=residence_days,
        covers_lookback=covers,
        gaps=gaps,
        overlaps=residence_overlaps(residences, as_of),
        same_state_filing_date=filing_date,
        current_state_since=state_since,
        state_residency_date=state_date,
        issues=issues,
    )
