# naturalization_rules/pipeline.py

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, List, Optional

from .classifier import ControllingFactorResult, evaluate_eligibility
from .config import get_today
from .derived import DerivedDates
from .glue import RawSnapshot, parse_residence_list, parse_source_dates, parse_trip_list
from .messages import presence_summary_message, render_application_message
from .models import MaritalStatus, ResidenceEntry, SourceDates, TripInterval
from .presence import PresenceAssessment, check_trip_boundaries, evaluate_trips_for_factor
from .residences import ResidenceAssessment, evaluate_residence_history
from .validate import Issue

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EligibilityReport:
    source: SourceDates
    derived: DerivedDates
    result: ControllingFactorResult
    evaluated_marital_status: Optional[MaritalStatus]
    application_message: str
    trips: List[TripInterval]
    presence: PresenceAssessment
    presence_message: str
    residence_entries: List[ResidenceEntry]
    residences: Optional[ResidenceAssessment]
    issues: List[Issue]
    snapshots: List[RawSnapshot]

    @property
    def today(self) -> date:
        return self.derived.today


def evaluate_case_from_json(
    raw: Dict[str, Any],
    *,
    today: Optional[date] = None,
    templates: Optional[Dict[str, str]] = None,
    apply_lpr_override: bool = False,
) -> EligibilityReport:
    """
    Raw intake dict -> EligibilityReport.

    Expected keys (all optional; problems become Issues, never exceptions):
      today, lpr_date, marital_status, marriage_date, spouse_citizenship_date,
      trips: [{departure, return, label}],
      residences: [{from, to, state, label}]   (most recent first)

    Evaluation date: `today` argument -> raw["today"] -> config.get_today().
    """
    issues: List[Issue] = []
    snapshots: List[RawSnapshot] = []

    source, src_issues, src_snap = parse_source_dates(raw, today=today)
    issues.extend(src_issues)
    snapshots.append(src_snap)

    eval_today = source.today or get_today()
    evaluation = evaluate_eligibility(source, today=eval_today, apply_lpr_override=apply_lpr_override)
    result = evaluation.result

    raw_trips = raw.get("trips", []) or []
    trips, trip_issues, trip_snaps = parse_trip_list(raw_trips)
    issues.extend(trip_issues)
    snapshots.extend(trip_snaps)

    presence = evaluate_trips_for_factor(trips, result.controlling_factor, eval_today)
    issues.extend(presence.issues)
    issues.extend(check_trip_boundaries(trips, lookback_start=presence.lookback_start))

    residence_entries: List[ResidenceEntry] = []
    residence_assessment: Optional[ResidenceAssessment] = None
    if "residences" in raw:
        residence_entries, res_issues, res_snaps = parse_residence_list(raw.get("residences") or [])
        issues.extend(res_issues)
        snapshots.extend(res_snaps)
        residence_assessment = evaluate_residence_history(
            residence_entries, result.controlling_factor, eval_today
        )
        issues.extend(residence_assessment.issues)

    logger.info(
        "Evaluated case: factor=%r desc=%r status=%r issues=%d",
        result.controlling_factor, result.controlling_desc, result.status, len(issues),
    )

    return EligibilityReport(
        source=source,
        derived=evaluation.derived,
        result=result,
        evaluated_marital_status=evaluation.marital_status,
        application_message=render_application_message(result, templates),
        trips=trips,
        presence=presence,
        presence_message=presence_summary_message(presence),
        residence_entries=residence_entries,
        residences=residence_assessment,
        issues=issues,
        snapshots=snapshots,
    )
