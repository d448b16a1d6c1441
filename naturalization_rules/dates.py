# naturalization_rules/dates.py

from __future__ import annotations

from datetime import date, timedelta
from typing import Optional

from dateutil.relativedelta import relativedelta


# -------------------------
# Calendar shifts
# -------------------------

def _shift_months(d: date, months: int) -> date:
    """
    Move d by whole months, keeping the day-of-month field.

    A day that does not exist in the target month rolls forward into the
    next month (Feb 29 + 12 months -> Mar 1, Mar 31 - 1 month -> Mar 3),
    instead of being clipped to the month end.
    """
    anchor = date(d.year, d.month, 1) + relativedelta(months=months)
    return anchor + timedelta(days=d.day - 1)


def add_years(d: Optional[date], years: int, day_offset: int = 0) -> Optional[date]:
    """Set the year field forward by `years`, then add `day_offset` days (may be negative)."""
    if d is None:
        return None
    return _shift_months(d, years * 12) + timedelta(days=day_offset)


def subtract_months(d: Optional[date], months: int, day_offset: int = 0) -> Optional[date]:
    """Set the month field back by `months`, then add `day_offset` days."""
    if d is None:
        return None
    return _shift_months(d, -months) + timedelta(days=day_offset)


def add_months(d: Optional[date], months: int, day_offset: int = 0) -> Optional[date]:
    return subtract_months(d, -months, day_offset)


def add_days(d: Optional[date], days: int) -> Optional[date]:
    if d is None:
        return None
    return d + timedelta(days=days)


# -------------------------
# Day counts
# -------------------------

def days_between_inclusive(a: date, b: date) -> int:
    """Calendar days from a to b counting both ends; order does not matter."""
    return abs((b - a).days) + 1


def days_in_window(start: date, end: date) -> int:
    """Whole days from start to end, NOT counting both ends (end - start)."""
    return (end - start).days


def intervals_overlap(a_start: date, a_end: date, b_start: date, b_end: date) -> bool:
    return a_start <= b_end and a_end >= b_start


# -------------------------
# Null-safe comparisons (a missing date loses every comparison)
# -------------------------

def on_or_after(a: Optional[date], b: Optional[date]) -> bool:
    """a >= b. A missing `a` never wins; a missing `b` always loses."""
    if a is None:
        return False
    if b is None:
        return True
    return a >= b


def strictly_after(a: Optional[date], b: Optional[date]) -> bool:
    """a > b with the same missing-date rules as on_or_after()."""
    if a is None:
        return False
    if b is None:
        return True
    return a > b
