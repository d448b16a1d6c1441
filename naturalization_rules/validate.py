# naturalization_rules/validate.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import List, Optional, Literal

from .models import ResidenceEntry
from .normalize import format_date
from .policy import MAX_RESIDENCE_GAP_DAYS


Severity = Literal["high", "medium", "low"]


@dataclass(frozen=True)
class Issue:
    severity: Severity
    category: str
    message: str
    suggested_question: Optional[str] = None
    ref_id: Optional[str] = None


def _row_label(entry: ResidenceEntry, idx: int) -> str:
    return entry.label or f"Row {idx + 1}"


def _effective_to(entry: ResidenceEntry, today: date) -> date:
    return entry.to_date or today


def detect_residence_gaps(
    residences: List[ResidenceEntry],
    *,
    today: date,
) -> List[Issue]:
    """
    Gaps between consecutive residences (listed most recent first).

    For each pair (later, earlier):
      gap = later.from_date - earlier.to_date  (in days)
    A gap larger than MAX_RESIDENCE_GAP_DAYS is HIGH: the history must be continuous.
    """
    if not residences:
        return [
            Issue(
                severity="high",
                category="residences",
                message="No residences provided for the required period.",
                suggested_question="Please provide every address where you have lived during the required period.",
            )
        ]

    issues: List[Issue] = []
    for idx in range(len(residences) - 1):
        later = residences[idx]
        earlier = residences[idx + 1]
        gap_days = (later.from_date - _effective_to(earlier, today)).days
        if gap_days > MAX_RESIDENCE_GAP_DAYS:
            issues.append(
                Issue(
                    severity="high",
                    category="residences",
                    message=(
                        f"Gap of {gap_days} day(s) between {_row_label(earlier, idx + 1)} "
                        f"(to {format_date(earlier.to_date)}) and {_row_label(later, idx)} "
                        f"(from {format_date(later.from_date)}) is greater than {MAX_RESIDENCE_GAP_DAYS} days."
                    ),
                    suggested_question="Where did you live between these two residences?",
                )
            )
    return issues


def detect_residence_overlaps(
    residences: List[ResidenceEntry],
    *,
    today: date,
) -> List[Issue]:
    """
    A residence may not start on or before the day the previous one ended.
    Consecutive entries only (listed most recent first).
    """
    issues: List[Issue] = []
    for idx in range(len(residences) - 1):
        later = residences[idx]
        earlier = residences[idx + 1]
        earlier_to = _effective_to(earlier, today)
        if later.from_date <= earlier_to:
            issues.append(
                Issue(
                    severity="high",
                    category="residences",
                    message=(
                        f"{_row_label(later, idx)} starts {format_date(later.from_date)}, which overlaps "
                        f"{_row_label(earlier, idx + 1)} ending {format_date(earlier_to)}."
                    ),
                    suggested_question="Please correct the residence dates so they do not overlap.",
                )
            )

    for idx, entry in enumerate(residences):
        if entry.to_date is not None and entry.to_date < entry.from_date:
            issues.append(
                Issue(
                    severity="medium",
                    category="residences",
                    message=f"{_row_label(entry, idx)} ends before it starts.",
                    suggested_question="Please confirm the From and To dates for this residence.",
                )
            )
    return issues
