# naturalization_rules/derived.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from .config import get_today
from .dates import add_days, add_years, subtract_months
from .models import SourceDates


@dataclass(frozen=True)
class DerivedDates:
    """
    Every date the eligibility rules compare against.

    LPR2/LPR3/LPR4/LPRC: LPR date + 2/3/4/5 years - 90 days (early filing windows)
    LPR36/LPRC6:         6 months before LPR3/LPRC (limited-access cutoffs)
    DM2/DMC, SC2/SCC:    marriage / spouse citizenship + 2/3 years
    DMC6/SCC6:           6 months before DMC/SCC

    A derived date is None whenever its source date is None.
    """
    today: date
    lpr: Optional[date] = None
    marriage: Optional[date] = None
    spouse_citizenship: Optional[date] = None

    lpr2: Optional[date] = None
    lpr3: Optional[date] = None
    lpr4: Optional[date] = None
    lprc: Optional[date] = None
    lpr36: Optional[date] = None
    lprc6: Optional[date] = None

    dm2: Optional[date] = None
    dmc: Optional[date] = None
    dmc6: Optional[date] = None

    sc2: Optional[date] = None
    scc: Optional[date] = None
    scc6: Optional[date] = None


def compute_derived_dates(source: SourceDates, *, today: Optional[date] = None) -> DerivedDates:
    """Derive the filing-window dates from the applicant's answers. Never raises."""
    eval_today = today or source.today or get_today()
    lpr = source.lpr_date
    marriage = source.marriage_date
    spouse = source.spouse_citizenship_date

    lpr3 = add_years(lpr, 3, -90)
    lprc = add_years(lpr, 5, -90)
    dmc = add_years(marriage, 3)
    scc = add_years(spouse, 3)

    return DerivedDates(
        today=eval_today,
        lpr=lpr,
        marriage=marriage,
        spouse_citizenship=spouse,
        lpr2=add_years(lpr, 2, -90),
        lpr3=lpr3,
        lpr4=add_years(lpr, 4, -90),
        lprc=lprc,
        lpr36=subtract_months(lpr3, 6),
        lprc6=subtract_months(lprc, 6),
        dm2=add_years(marriage, 2),
        dmc=dmc,
        dmc6=subtract_months(dmc, 6),
        sc2=add_years(spouse, 2),
        scc=scc,
        scc6=subtract_months(scc, 6),
    )


# ======================================================
# Preliminary eligibility (landing-page dates)
# ======================================================

@dataclass(frozen=True)
class PreliminaryDates:
    today: date
    usc_calculated: date  # one year and a day from today
    lpr: Optional[date] = None
    five_year: Optional[date] = None
    earliest_filing: Optional[date] = None
    marriage_track_filing: Optional[date] = None
    three_year: Optional[date] = None


def compute_preliminary_dates(today: date, lpr: Optional[date] = None) -> PreliminaryDates:
    return PreliminaryDates(
        today=today,
        usc_calculated=add_days(add_years(today, 1), 1),
        lpr=lpr,
        five_year=add_years(lpr, 5),
        earliest_filing=add_years(lpr, 4, -90),
        marriage_track_filing=add_years(lpr, 2, -90),
        three_year=add_years(lpr, 3),
    )
