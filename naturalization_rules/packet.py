# naturalization_rules/packet.py

from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, List, Literal, Optional

from .derived import DerivedDates
from .glue import RawSnapshot
from .normalize import format_date
from .pipeline import EligibilityReport
from .presence import PresenceAssessment
from .residences import ResidenceAssessment
from .validate import Issue


Severity = Literal["high", "medium", "low"]


def _snapshot_index(snapshots: List[RawSnapshot]) -> Dict[str, RawSnapshot]:
    return {s.id: s for s in snapshots}


def _issue_to_dict(issue: Issue, snapshot_by_id: Dict[str, RawSnapshot]) -> Dict[str, Any]:
    ref_id = issue.ref_id
    snap = snapshot_by_id.get(ref_id) if ref_id else None

    return {
        "severity": issue.severity,
        "category": issue.category,
        "ref_id": ref_id,
        "message": issue.message,
        "suggested_question": issue.suggested_question,
        "raw_snapshot": asdict(snap) if snap else None,
    }


def _format_derived(d: DerivedDates) -> Dict[str, str]:
    return {
        "Today": format_date(d.today),
        "LPR": format_date(d.lpr),
        "LPR2": format_date(d.lpr2),
        "LPR3": format_date(d.lpr3),
        "LPR4": format_date(d.lpr4),
        "LPRC": format_date(d.lprc),
        "LPR36": format_date(d.lpr36),
        "LPRC6": format_date(d.lprc6),
        "DM": format_date(d.marriage),
        "DM2": format_date(d.dm2),
        "DMC": format_date(d.dmc),
        "DMC6": format_date(d.dmc6),
        "SC": format_date(d.spouse_citizenship),
        "SC2": format_date(d.sc2),
        "SCC": format_date(d.scc),
        "SCC6": format_date(d.scc6),
    }


def _format_presence(p: PresenceAssessment) -> Dict[str, Any]:
    return {
        "lookback_start": format_date(p.lookback_start),
        "lookback_end": format_date(p.lookback_end),
        "lookback_years": p.lookback_years,
        "required_presence_days": p.required_presence_days,
        "days_abroad": p.days_abroad,
        "window_days": p.window_days,
        "days_present": p.days_present,
        "meets_requirement": p.meets_requirement,
        "long_trip_rows": list(p.long_trip_rows),
        "overlap_rows": [list(pair) for pair in p.overlap_rows],
        "delayed_filing_date": format_date(p.delayed_filing_date),
        "days_short": p.days_short,
        "presence_delay_date": format_date(p.presence_delay_date),
    }


def _format_residences(r: Optional[ResidenceAssessment]) -> Optional[Dict[str, Any]]:
    if r is None:
        return None
    return {
        "lookback_start": format_date(r.lookback_start),
        "required_days": r.required_days,
        "total_duration_days": r.total_duration_days,
        "gap_days": r.gap_days,
        "residence_days": r.residence_days,
        "covers_lookback": r.covers_lookback,
        "gaps": [
            {"earlier_to": format_date(earlier.to_date), "later_from": format_date(later.from_date), "days": days}
            for later, earlier, days in r.gaps
        ],
        "overlap_count": len(r.overlaps),
        "same_state_filing_date": format_date(r.same_state_filing_date),
        "state_residency_date": format_date(r.state_residency_date),
    }


def _group_issues(issues: List[Issue]) -> Dict[Severity, List[Issue]]:
    grouped: Dict[Severity, List[Issue]] = {"high": [], "medium": [], "low": []}
    for i in issues:
        grouped[i.severity].append(i)
    return grouped


def _group_issues_by_category(issues: List[Issue]) -> Dict[str, List[Issue]]:
    by_cat: Dict[str, List[Issue]] = {}
    for i in issues:
        by_cat.setdefault(i.category, []).append(i)
    return by_cat


def _top_issues(issues: List[Issue], n: int = 3) -> List[Issue]:
    # high > medium > low, original order within a severity
    priority = {"high": 0, "medium": 1, "low": 2}
    return sorted(issues, key=lambda x: priority.get(x.severity, 9))[:n]


def build_eligibility_report(report: EligibilityReport) -> Dict[str, Any]:
    """
    JSON-ready view of an EligibilityReport.

    Dates are MM/DD/YYYY strings ("" when unset); status and controlling_desc
    are passed through verbatim. No evaluation happens here.
    """
    snap_by_id = _snapshot_index(report.snapshots)
    grouped_by_sev = _group_issues(report.issues)
    result = report.result

    return {
        "meta": {
            "today": format_date(report.today),
            "evaluated_marital_status": report.evaluated_marital_status or "",
        },
        "eligibility": {
            "controlling_factor": result.controlling_factor,
            "controlling_date": format_date(result.controlling_date),
            "controlling_desc": result.controlling_desc,
            "status": result.status,
            "full_access_date": format_date(result.full_access_date),
            "application_message": report.application_message,
        },
        "derived_dates": _format_derived(report.derived),
        "time_outside": {
            "trips": [
                {"row": t.row, "label": t.label, "departure": format_date(t.start), "return": format_date(t.end)}
                for t in report.trips
            ],
            "presence": _format_presence(report.presence),
            "message": report.presence_message,
        },
        "residences": _format_residences(report.residences),
        "issues": {
            "counts": {
                "high": len(grouped_by_sev["high"]),
                "medium": len(grouped_by_sev["medium"]),
                "low": len(grouped_by_sev["low"]),
                "total": len(report.issues),
            },
            "top_items": [_issue_to_dict(i, snap_by_id) for i in _top_issues(report.issues)],
            "by_severity": {
                sev: [_issue_to_dict(i, snap_by_id) for i in items]
                for sev, items in grouped_by_sev.items()
            },
            "by_category": {
                cat: [_issue_to_dict(i, snap_by_id) for i in cat_issues]
                for cat, cat_issues in _group_issues_by_category(report.issues).items()
            },
        },
        "raw_snapshots": [asdict(s) for s in report.snapshots],
    }
