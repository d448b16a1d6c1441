# naturalization_rules/models.py

from __future__ import annotations

from datetime import date
from typing import Optional, Literal

from pydantic import BaseModel


# ======================================================
# Controlled sets
# ======================================================

MaritalStatus = Literal["Married", "NotMarried"]

# "" means no determination was possible
ControllingFactor = Literal["LPR", "DM", "SC", "LPRM", "LPRS", ""]

EligibilityStatus = Literal[
    "Eligible Now",
    "Prepare, but file later",
    "Eligibility Assessment",
    "",
]

ELIGIBLE_NOW: EligibilityStatus = "Eligible Now"
PREPARE_FILE_LATER: EligibilityStatus = "Prepare, but file later"
ELIGIBILITY_ASSESSMENT: EligibilityStatus = "Eligibility Assessment"


# ======================================================
# Source answers (what the applicant told us)
# ======================================================

class SourceDates(BaseModel):
    """
    The applicant's raw answers that drive every derived date.

    today=None means "use the configured now provider".
    spouse_citizenship_date is the spouse's birth date when the spouse
    was a citizen at birth (resolved by the caller).
    """
    today: Optional[date] = None
    lpr_date: Optional[date] = None
    marriage_date: Optional[date] = None
    spouse_citizenship_date: Optional[date] = None
    marital_status: Optional[MaritalStatus] = None


# ======================================================
# Time outside the U.S.
# ======================================================

class TripInterval(BaseModel):
    """
    One trip outside the U.S. (departure -> return).
    start > end is accepted as-is and reported downstream, never corrected.

    row is the 1-based position the applicant entered the trip at and ref_id
    the intake snapshot id; both survive rows dropped during intake.
    """
    start: date
    end: date
    label: str = ""
    row: Optional[int] = None
    ref_id: Optional[str] = None


# ======================================================
# Residence history
# ======================================================

class ResidenceEntry(BaseModel):
    """
    Residential history entry. Entries are listed most recent first.
    to_date=None means "Present".
    """
    from_date: date
    to_date: Optional[date] = None
    state: Optional[str] = None
    label: str = ""
