# naturalization_rules/normalize.py

from __future__ import annotations

import re
from datetime import date, datetime
from typing import Optional, Union


DateInput = Union[str, date, datetime, None]


def _safe_date(y: int, m: int, d: int) -> Optional[date]:
    """Return None instead of raising ValueError for invalid dates (e.g., 02/31/2023)."""
    try:
        return date(y, m, d)
    except ValueError:
        return None


def parse_date(value: DateInput) -> Optional[date]:
    """
    Parse a stored or typed date into a plain calendar date.

    Supported inputs:
      - "MM/DD/YYYY"            (form display/storage format, 1-2 digit month/day)
      - "YYYY-MM-DD"
      - "MM-DD-YYYY"
      - "YYYY-MM-DD HH:MM:SS"   (stored timestamps; time-of-day is dropped)
      - date / datetime instances (datetime is truncated to its date)

    Never raises: blank, unrecognized and impossible dates all return None.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None

    s = value.strip()
    if not s:
        return None

    # MM/DD/YYYY
    m = re.fullmatch(r"(\d{1,2})/(\d{1,2})/(\d{4})", s)
    if m:
        mo, d, y = map(int, m.groups())
        return _safe_date(y, mo, d)

    # YYYY-MM-DD, optionally followed by a time
    m = re.fullmatch(r"(\d{4})-(\d{2})-(\d{2})(?: (\d{2}):(\d{2}):(\d{2}))?", s)
    if m:
        y, mo, d = map(int, m.groups()[:3])
        return _safe_date(y, mo, d)

    # MM-DD-YYYY
    m = re.fullmatch(r"(\d{1,2})-(\d{1,2})-(\d{4})", s)
    if m:
        mo, d, y = map(int, m.groups())
        return _safe_date(y, mo, d)

    return None


def format_date(d: Optional[date]) -> str:
    """MM/DD/YYYY, zero-padded. None -> ""."""
    if d is None:
        return ""
    return f"{d.month:02d}/{d.day:02d}/{d.year:04d}"


def format_iso(d: Optional[date]) -> Optional[str]:
    return d.isoformat() if d else None
