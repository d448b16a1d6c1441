# naturalization_rules/classifier.py

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import date
from typing import Optional

from .dates import on_or_after, strictly_after
from .derived import DerivedDates, compute_derived_dates
from .models import (
    ELIGIBILITY_ASSESSMENT,
    ELIGIBLE_NOW,
    PREPARE_FILE_LATER,
    ControllingFactor,
    EligibilityStatus,
    MaritalStatus,
    SourceDates,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ControllingFactorResult:
    """
    Which pathway governs filing, and when.

    controlling_desc is the branch tag (e.g. "DMC - 2E"); hosts key duplicate
    notification suppression off it, so the strings are fixed.
    full_access_date is the "6 months prior" date quoted by the branch's
    message (LPRC6 / LPR36 / DMC6 / SCC6), or None when the message has none.
    """
    controlling_factor: ControllingFactor = ""
    controlling_date: Optional[date] = None
    controlling_desc: str = ""
    status: EligibilityStatus = ""
    full_access_date: Optional[date] = None

    @property
    def is_determined(self) -> bool:
        return bool(self.controlling_desc)


EMPTY_RESULT = ControllingFactorResult()


# -------------------------
# Step 2: initial factor
# -------------------------

def initial_controlling_factor(derived: DerivedDates, marital_status: Optional[str]) -> ControllingFactor:
    """
    NotMarried -> LPR.
    Married    -> follow whichever of DMC/SCC is later (ties go to DMC); keep the
                  marriage/spouse track unless the LPR route files earlier.
    Anything else -> "".
    """
    if marital_status == "NotMarried":
        return "LPR"
    if marital_status != "Married":
        return ""

    if not strictly_after(derived.scc, derived.dmc):
        if on_or_after(derived.lprc, derived.dmc) or on_or_after(derived.lpr2, derived.dmc):
            return "DM"
        return "LPRM"

    if on_or_after(derived.lprc, derived.scc) or on_or_after(derived.lpr2, derived.scc):
        return "SC"
    return "LPRS"


# -------------------------
# Step 3: LPR (5-year) track
# -------------------------

def _lpr_branch(d: DerivedDates) -> ControllingFactorResult:
    if on_or_after(d.today, d.lprc):
        return ControllingFactorResult("LPR", d.lprc, "LPRC - 1A", ELIGIBLE_NOW)
    if on_or_after(d.today, d.lpr4):
        return ControllingFactorResult("LPR", d.lprc, "LPRC - 1B", PREPARE_FILE_LATER)
    return ControllingFactorResult("LPR", d.lprc, "LPRC - 1C", ELIGIBILITY_ASSESSMENT, d.lprc6)


# -------------------------
# Step 5: married, but the LPR route is sooner
# -------------------------

def _no_benefit_branch(d: DerivedDates, factor: ControllingFactor) -> ControllingFactorResult:
    who = "Married" if factor == "LPRM" else "Spouse"
    if on_or_after(d.today, d.lpr4):
        return ControllingFactorResult(factor, d.lprc, f"LPRC - {who} No Benefit PF", PREPARE_FILE_LATER)
    return ControllingFactorResult(factor, d.lprc, f"LPRC - {who} No Benefit EA", ELIGIBILITY_ASSESSMENT, d.lprc6)


# -------------------------
# Steps 6/7: 3-year marriage tracks (DM and SC share one table)
# -------------------------

def _three_year_branch(
    d: DerivedDates,
    factor: ControllingFactor,
    *,
    two_year: Optional[date],
    three_year: Optional[date],
    three_year_six_months: Optional[date],
    tag: str,
) -> ControllingFactorResult:
    """
    tag is "DMC" or "SCC"; LPR3-controlled rows always read "LPR3 - ...".

      today >= 3yr and >= LPR3          -> 2A  eligible now
      today >= 3yr                      -> 2B  wait for LPR3
      today >= 2yr: 2yr >= LPR3         -> 2D
                    2yr >= LPR2         -> 2E
                    today >= LPR2       -> 2F
                    else                -> 2G  (assessment)
      today <  2yr: 2yr >= LPR2         -> 2H  (assessment)
                    else                -> 2I  (assessment)
    """
    today = d.today

    if on_or_after(today, three_year) and on_or_after(today, d.lpr3):
        return ControllingFactorResult(factor, three_year, f"{tag} - 2A", ELIGIBLE_NOW)
    if on_or_after(today, three_year):
        return ControllingFactorResult(factor, d.lpr3, "LPR3 - 2B", PREPARE_FILE_LATER)

    if on_or_after(today, two_year):
        if on_or_after(two_year, d.lpr3):
            return ControllingFactorResult(factor, three_year, f"{tag} - 2D", PREPARE_FILE_LATER)
        if on_or_after(two_year, d.lpr2):
            return ControllingFactorResult(factor, three_year, f"{tag} - 2E", PREPARE_FILE_LATER)
        if on_or_after(today, d.lpr2):
            return ControllingFactorResult(factor, d.lpr3, "LPR3 - 2F", PREPARE_FILE_LATER)
        return ControllingFactorResult(factor, d.lpr3, "LPR3 - 2G", ELIGIBILITY_ASSESSMENT, d.lpr36)

    if on_or_after(two_year, d.lpr2):
        return ControllingFactorResult(
            factor, three_year, f"{tag} - 2H", ELIGIBILITY_ASSESSMENT, three_year_six_months
        )
    return ControllingFactorResult(factor, d.lpr3, "LPR3 - 2I", ELIGIBILITY_ASSESSMENT, d.lpr36)


def clear_outcome(result: ControllingFactorResult) -> ControllingFactorResult:
    """Same factor, no date/desc/status."""
    return replace(result, controlling_date=None, controlling_desc="", status="", full_access_date=None)


# ======================================================
# Entry point
# ======================================================

def classify_controlling_factor(
    derived: DerivedDates,
    marital_status: Optional[str],
) -> ControllingFactorResult:
    """
    Pick the controlling factor and walk its decision table.

    Order matters and is kept as-is:
      1. no LPR date                        -> empty result
      2. initial factor from marital status (runs even with missing dates)
      3. LPR track outcome
      4. exactly one of marriage / spouse citizenship date -> clear outcome, keep factor
      5-7. LPRM/LPRS, DM, SC tables (only when both dates are present)
    """
    if derived.lpr is None:
        logger.debug("No LPR date; returning empty result")
        return EMPTY_RESULT

    factor = initial_controlling_factor(derived, marital_status)
    logger.debug("Initial controlling factor %r for marital status %r", factor, marital_status)

    result = ControllingFactorResult(controlling_factor=factor)
    if factor == "LPR":
        result = _lpr_branch(derived)

    has_marriage = derived.marriage is not None
    has_spouse = derived.spouse_citizenship is not None

    if has_marriage != has_spouse:
        logger.debug("Only one of marriage/spouse citizenship dates present; clearing outcome")
        return clear_outcome(result)

    if not (has_marriage and has_spouse):
        return result

    if factor in ("LPRM", "LPRS"):
        result = _no_benefit_branch(derived, factor)
    elif factor == "DM":
        result = _three_year_branch(
            derived,
            factor,
            two_year=derived.dm2,
            three_year=derived.dmc,
            three_year_six_months=derived.dmc6,
            tag="DMC",
        )
    elif factor == "SC":
        result = _three_year_branch(
            derived,
            factor,
            two_year=derived.sc2,
            three_year=derived.scc,
            three_year_six_months=derived.scc6,
            tag="SCC",
        )

    logger.debug("Classified %r -> %r (%r)", factor, result.controlling_desc, result.status)
    return result


def effective_marital_status(
    derived: DerivedDates,
    marital_status: Optional[MaritalStatus],
) -> Optional[MaritalStatus]:
    """
    Once the 5-year LPR date has arrived the marriage no longer helps, so the
    answer is evaluated as NotMarried. The stored answer is left alone.
    """
    if derived.lprc is not None and on_or_after(derived.today, derived.lprc):
        return "NotMarried"
    return marital_status


@dataclass(frozen=True)
class EligibilityEvaluation:
    derived: DerivedDates
    result: ControllingFactorResult
    marital_status: Optional[MaritalStatus]  # the value actually classified


def evaluate_eligibility(
    source: SourceDates,
    *,
    today: Optional[date] = None,
    apply_lpr_override: bool = False,
) -> EligibilityEvaluation:
    """
    Derived dates -> controlling factor in one call.

    apply_lpr_override=True applies effective_marital_status() first, which is
    what stored-record recalculation does.
    """
    derived = compute_derived_dates(source, today=today)
    marital_status = source.marital_status
    if apply_lpr_override:
        marital_status = effective_marital_status(derived, marital_status)
    result = classify_controlling_factor(derived, marital_status)
    return EligibilityEvaluation(derived=derived, result=result, marital_status=marital_status)
