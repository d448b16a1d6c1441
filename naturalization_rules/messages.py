# naturalization_rules/messages.py

from __future__ import annotations

from datetime import date
from typing import Dict, List, Optional

from .classifier import ControllingFactorResult
from .derived import PreliminaryDates
from .normalize import format_date
from .presence import PresenceAssessment


CONTROLLING_DATE = "[Controlling Date]"
FULL_ACCESS_DATE = "[Full Access Date]"
CONTROLLING_FACTOR = "[Controlling Factor]"
STATUS = "[Status]"


# ======================================================
# Built-in application messages, keyed by branch code (text after " - ")
# ======================================================

_NOT_YET = (
    "As of today, you are not currently eligible to file for Naturalization – you can file, "
    "however, on or after [Controlling Date]."
)
_DENIAL_NOTE = "Note: filing earlier than this date will result in a denial of your case without a refund."
_CHECK_DATES = (
    "If you believe that this is in error, please go back and check whether you correctly entered "
    "your date of marriage and date of spouse's citizenship (if applicable)."
)
_NO_BENEFIT = (
    "Please note that based upon your date of Legal Permanent Residency, it has been determined that "
    "you ought to file without relying upon the marriage to your U.S. citizen spouse because you can "
    "thereby file sooner."
)


def _limited_access(site: str) -> str:
    return (
        "you have sought to apply more than one (1) year early and, therefore, pursuant to the terms of use "
        f"you will have limited access to {site}. Full access will be restored on [Full Access Date], which "
        "is 6 months prior to [Controlling Date] which is the date on or after which you are eligible to file. "
        "In the meantime, you will have access to \"Documents\" if you wish to gather the documents which will "
        "be used in support of your application."
    )


_ELIGIBLE_MARRIED = (
    "Based upon the information you entered you are eligible now to file for Naturalization – please "
    "confirm that your date of marriage and date of spouse's citizenship (if applicable) are correct "
    "before proceeding."
)
_WAIT_MARRIED = f"{_NOT_YET} {_DENIAL_NOTE} {_CHECK_DATES}"
_EARLY_MARRIED = (
    f"{_NOT_YET} {_CHECK_DATES} If you have correctly entered these date(s), then "
    + _limited_access("the site")
)
_EARLY_MARRIED_TRACK = (
    f"{_NOT_YET} {_CHECK_DATES} If you have correctly entered these dates, then "
    + _limited_access("the site")
)

DEFAULT_APPLICATION_MESSAGES: Dict[str, str] = {
    "1A": "",
    "1B": f"{_NOT_YET} {_DENIAL_NOTE}",
    "1C": f"{_NOT_YET} Moreover, " + _limited_access("this site"),
    "Married No Benefit PF": (
        f"{_NOT_YET} {_DENIAL_NOTE} {_NO_BENEFIT} {_CHECK_DATES} If you have correctly entered these "
        "date(s), then you may rely upon the above referenced date. Please select \"Next\" to continue."
    ),
    "Married No Benefit EA": (
        f"{_NOT_YET} {_NO_BENEFIT} {_CHECK_DATES} If you have correctly entered these date(s), then "
        + _limited_access("the site")
    ),
    "2A": _ELIGIBLE_MARRIED,
    "2B": _WAIT_MARRIED,
    "2D": _WAIT_MARRIED,
    "2E": _WAIT_MARRIED,
    "2F": _WAIT_MARRIED,
    "2G": _EARLY_MARRIED,
    "2H": _EARLY_MARRIED_TRACK,
    "2I": _EARLY_MARRIED,
}
DEFAULT_APPLICATION_MESSAGES["Spouse No Benefit PF"] = DEFAULT_APPLICATION_MESSAGES["Married No Benefit PF"]
DEFAULT_APPLICATION_MESSAGES["Spouse No Benefit EA"] = DEFAULT_APPLICATION_MESSAGES["Married No Benefit EA"]


# -------------------------
# Templating
# -------------------------

def replace_placeholders(text: str, values: Dict[str, str]) -> str:
    """Literal token replacement, one key at a time."""
    for token, value in values.items():
        text = text.replace(token, value)
    return text


def branch_code(controlling_desc: str) -> str:
    """'DMC - 2E' -> '2E'; 'LPRC - Married No Benefit PF' -> 'Married No Benefit PF'."""
    _, sep, code = controlling_desc.partition(" - ")
    return code if sep else ""


def application_placeholders(result: ControllingFactorResult) -> Dict[str, str]:
    return {
        CONTROLLING_DATE: format_date(result.controlling_date),
        FULL_ACCESS_DATE: format_date(result.full_access_date),
        CONTROLLING_FACTOR: result.controlling_factor,
        STATUS: result.status,
    }


def render_application_message(
    result: ControllingFactorResult,
    templates: Optional[Dict[str, str]] = None,
) -> str:
    """
    Text shown under the eligibility result.

    templates (optional) are keyed by status; without them the built-in
    per-branch messages are used. Every date comes from `result` as-is.
    """
    if not result.is_determined:
        return ""
    if templates is not None:
        template = templates.get(result.status, "")
    else:
        template = DEFAULT_APPLICATION_MESSAGES.get(branch_code(result.controlling_desc), "")
    return replace_placeholders(template, application_placeholders(result))


# ======================================================
# Preliminary eligibility placeholders
# ======================================================

def preliminary_placeholders(prelim: PreliminaryDates) -> Dict[str, str]:
    today = format_date(prelim.today)
    usc = format_date(prelim.usc_calculated)
    five_year = format_date(prelim.five_year)
    earliest = format_date(prelim.earliest_filing)
    return {
        "[Today]": today,
        "[Current Date]": today,
        "[USC_CALCULATED_DATE]": usc,
        "[USC Calculated Date]": usc,
        "[LPR Date]": format_date(prelim.lpr),
        "[USC Date]": five_year,
        "[Eligibility Date]": five_year,
        "[5 Year Date]": five_year,
        "[LPR4]": earliest,
        "[Earliest Filing Date]": earliest,
        "[Filing Date]": earliest,
        "[LPR2]": format_date(prelim.marriage_track_filing),
        "[Marriage Track Filing Date]": format_date(prelim.marriage_track_filing),
        "[3 Year Date]": format_date(prelim.three_year),
    }


# ======================================================
# Time outside the U.S.
# ======================================================

def format_long_date(d: Optional[date]) -> str:
    """'October 3, 2025'."""
    if d is None:
        return ""
    return f"{d.strftime('%B')} {d.day}, {d.year}"


def _plural(n: int, unit: str) -> str:
    return f"{n} {unit}" + ("" if n == 1 else "s")


def format_days_as_ymd(days: int) -> str:
    """Approximate: 365-day years, 30-day months."""
    years = days // 365
    months = (days % 365) // 30
    rest = (days % 365) % 30
    parts: List[str] = []
    if years:
        parts.append(_plural(years, "year"))
    if months:
        parts.append(_plural(months, "month"))
    if rest:
        parts.append(_plural(rest, "day"))
    return ", ".join(parts) or "0 days"


def presence_summary_message(assessment: PresenceAssessment) -> str:
    lines: List[str] = []

    if assessment.long_trip_rows:
        rows = ", Row ".join(str(r) for r in assessment.long_trip_rows)
        lines.append(f"Warning: The following trips exceed 6 months: Row {rows}")
        if assessment.delayed_filing_date is not None:
            lines.append(
                "Because you have a trip that exceeds 6 months, continuous residence has been disrupted. "
                f"You will need to wait until {format_long_date(assessment.delayed_filing_date)} "
                "to file your application."
            )

    if assessment.overlap_rows:
        lines.append("Warning: Overlapping trips detected:")
        for a, b in assessment.overlap_rows:
            lines.append(f"Row {a} overlaps with Row {b}")

    if not assessment.meets_requirement:
        lines.append(
            "You have not been physically present in the US for the required time in the last "
            f"{assessment.lookback_years} years. You are short by {assessment.days_short} days "
            f"({format_days_as_ymd(assessment.days_short)}). You will have to wait to file until "
            f"{format_long_date(assessment.presence_delay_date)}."
        )

    if not lines:
        return "You may proceed with your application."
    return "\n".join(lines)
