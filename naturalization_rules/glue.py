# naturalization_rules/glue.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, List, Optional, Tuple, Literal

from .issues import tag_issues
from .models import MaritalStatus, ResidenceEntry, SourceDates, TripInterval
from .normalize import parse_date
from .validate import Issue


# ======================================================
# Raw snapshot (what the applicant actually typed)
# ======================================================

@dataclass(frozen=True)
class RawSnapshot:
    id: str  # e.g., "case", "trip_0", "res_2"
    section: Literal["case", "trip", "residence"]
    raw: Dict[str, Any]
    notes: Optional[str] = None


_ALLOWED_FORMATS = "MM/DD/YYYY, YYYY-MM-DD, or MM-DD-YYYY"

_MARITAL_ANSWERS: Dict[str, MaritalStatus] = {
    "married": "Married",
    "yes": "Married",
    "notmarried": "NotMarried",
    "not married": "NotMarried",
    "no": "NotMarried",
}

_PRESENT_WORDS = {"present", "current", "now"}


# ======================================================
# Field helpers
# ======================================================

def require_date(
    *,
    field_label: str,
    raw_value: Any,
    required: bool = True,
    issues_category: str = "date",
) -> Tuple[Optional[date], List[Issue]]:
    """
    Parse one date answer. Never raises.

      - blank + required     -> None, HIGH issue
      - blank + not required -> None, no issue
      - unparseable          -> None, HIGH issue (treated as absent downstream)
    """
    issues: List[Issue] = []
    blank = raw_value is None or (isinstance(raw_value, str) and not raw_value.strip())

    if blank:
        if required:
            issues.append(
                Issue(
                    severity="high",
                    category=issues_category,
                    message=f"Missing {field_label}.",
                    suggested_question=f"Please provide {field_label} ({_ALLOWED_FORMATS}).",
                )
            )
        return None, issues

    value = parse_date(raw_value)
    if value is None:
        issues.append(
            Issue(
                severity="high",
                category=issues_category,
                message=f"Invalid or unrecognized date for {field_label}: {raw_value!r}.",
                suggested_question=f"Please provide a valid date for {field_label} in one of: {_ALLOWED_FORMATS}.",
            )
        )
    return value, issues


def parse_marital_status(raw_value: Any) -> Tuple[Optional[MaritalStatus], List[Issue]]:
    """Accepts Married/NotMarried as well as the form's Yes/No radio values."""
    if raw_value is None or (isinstance(raw_value, str) and not raw_value.strip()):
        return None, [
            Issue(
                severity="medium",
                category="marital_status",
                message="Marital status was not answered.",
                suggested_question="Are you currently married?",
            )
        ]

    key = str(raw_value).strip().lower()
    if key in _MARITAL_ANSWERS:
        return _MARITAL_ANSWERS[key], []

    return None, [
        Issue(
            severity="medium",
            category="marital_status",
            message=f"Unknown marital status {raw_value!r}.",
            suggested_question="Are you currently married? (Yes / No)",
        )
    ]


# ======================================================
# Source answers
# ======================================================

def parse_source_dates(
    raw: Dict[str, Any],
    *,
    today: Optional[date] = None,
) -> Tuple[SourceDates, List[Issue], RawSnapshot]:
    snapshot = RawSnapshot(id="case", section="case", raw=raw)
    issues: List[Issue] = []

    raw_today = raw.get("today")
    parsed_today: Optional[date] = today
    if parsed_today is None and raw_today:
        parsed_today, iss = require_date(field_label="evaluation date (today)", raw_value=raw_today, required=False)
        issues.extend(iss)

    lpr, iss = require_date(
        field_label="date you became a permanent resident",
        raw_value=raw.get("lpr_date"),
        issues_category="lpr",
    )
    issues.extend(iss)

    marital_status, iss = parse_marital_status(raw.get("marital_status"))
    issues.extend(iss)

    married = marital_status == "Married"
    marriage, iss = require_date(
        field_label="date of marriage",
        raw_value=raw.get("marriage_date"),
        required=married,
        issues_category="marriage",
    )
    issues.extend(iss)

    spouse, iss = require_date(
        field_label="date your spouse became a U.S. citizen",
        raw_value=raw.get("spouse_citizenship_date"),
        required=married,
        issues_category="marriage",
    )
    issues.extend(iss)

    if (marriage is None) != (spouse is None):
        issues.append(
            Issue(
                severity="high",
                category="marriage",
                message="Only one of date of marriage / spouse citizenship date was provided; no eligibility date can be determined.",
                suggested_question="Please provide both your date of marriage and the date your spouse became a citizen.",
            )
        )

    source = SourceDates(
        today=parsed_today,
        lpr_date=lpr,
        marriage_date=marriage,
        spouse_citizenship_date=spouse,
        marital_status=marital_status,
    )
    return source, tag_issues(issues, snapshot.id), snapshot


# ======================================================
# Trips
# ======================================================

def parse_trip_entry(
    raw: Dict[str, Any],
    *,
    ref_id: str,
    row: Optional[int] = None,
) -> Tuple[Optional[TripInterval], List[Issue], RawSnapshot]:
    issues: List[Issue] = []
    snapshot = RawSnapshot(id=ref_id, section="trip", raw=raw)

    start, iss = require_date(
        field_label="trip departure date",
        raw_value=raw.get("departure", raw.get("start")),
        issues_category="time_outside",
    )
    issues.extend(iss)

    end, iss = require_date(
        field_label="trip return date",
        raw_value=raw.get("return", raw.get("end")),
        issues_category="time_outside",
    )
    issues.extend(iss)

    # Core requirements missing: no interval, but keep issues + snapshot
    if start is None or end is None:
        return None, tag_issues(issues, ref_id), snapshot

    trip = TripInterval(
        start=start,
        end=end,
        label=str(raw.get("label") or ""),
        row=row,
        ref_id=ref_id,
    )
    return trip, tag_issues(issues, ref_id), snapshot


def parse_trip_list(
    raw_list: List[Dict[str, Any]],
    *,
    id_prefix: str = "trip",
) -> Tuple[List[TripInterval], List[Issue], List[RawSnapshot]]:
    """
    Parse raw trips into TripIntervals, keeping input order. Each trip keeps the
    row it was entered at, so row numbers and ref_ids do not shift past a dropped entry.
    Invalid entries yield issues + snapshots with IDs rather than silently vanishing.
    """
    entries: List[TripInterval] = []
    issues: List[Issue] = []
    snapshots: List[RawSnapshot] = []

    for idx, raw in enumerate(raw_list):
        trip, trip_issues, snap = parse_trip_entry(raw, ref_id=f"{id_prefix}_{idx}", row=idx + 1)
        snapshots.append(snap)
        issues.extend(trip_issues)
        if trip is not None:
            entries.append(trip)

    return entries, issues, snapshots


# ======================================================
# Residences
# ======================================================

def parse_residence_entry(
    raw: Dict[str, Any],
    *,
    ref_id: str,
) -> Tuple[Optional[ResidenceEntry], List[Issue], RawSnapshot]:
    issues: List[Issue] = []
    snapshot = RawSnapshot(id=ref_id, section="residence", raw=raw)

    from_date, iss = require_date(
        field_label="residence start date (from)",
        raw_value=raw.get("from"),
        issues_category="residences",
    )
    issues.extend(iss)

    raw_to = raw.get("to")
    to_date: Optional[date] = None
    if not (isinstance(raw_to, str) and raw_to.strip().lower() in _PRESENT_WORDS):
        # Blank "to" means the applicant still lives here
        to_date, iss = require_date(
            field_label="residence end date (to)",
            raw_value=raw_to,
            required=False,
            issues_category="residences",
        )
        issues.extend(iss)

    state = raw.get("state")
    if not state:
        issues.append(
            Issue(
                severity="low",
                category="residences",
                message="Residence has no state; state residency rules cannot be checked for it.",
                suggested_question="Which state was this residence in?",
            )
        )

    if from_date is None:
        return None, tag_issues(issues, ref_id), snapshot

    entry = ResidenceEntry(
        from_date=from_date,
        to_date=to_date,
        state=state or None,
        label=str(raw.get("label") or ""),
    )
    return entry, tag_issues(issues, ref_id), snapshot


def parse_residence_list(
    raw_list: List[Dict[str, Any]],
    *,
    id_prefix: str = "res",
) -> Tuple[List[ResidenceEntry], List[Issue], List[RawSnapshot]]:
    entries: List[ResidenceEntry] = []
    issues: List[Issue] = []
    snapshots: List[RawSnapshot] = []

    for idx, raw in enumerate(raw_list):
        entry, entry_issues, snap = parse_residence_entry(raw, ref_id=f"{id_prefix}_{idx}")
        snapshots.append(snap)
        issues.extend(entry_issues)
        if entry is not None:
            entries.append(entry)

    return entries, issues, snapshots
