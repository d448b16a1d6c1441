from datetime import date

from naturalization_rules.dates import (
    add_months,
    add_years,
    days_between_inclusive,
    days_in_window,
    intervals_overlap,
    on_or_after,
    strictly_after,
    subtract_months,
)


def test_add_years_with_day_offset():
    # 06/01/2025 minus 90 days
    assert add_years(date(2020, 6, 1), 5, -90) == date(2025, 3, 3)
    assert add_years(date(2019, 1, 1), 5, -90) == date(2023, 10, 3)


def test_add_years_from_leap_day_rolls_forward():
    assert add_years(date(2020, 2, 29), 1) == date(2021, 3, 1)
    assert add_years(date(2020, 2, 29), 4) == date(2024, 2, 29)


def test_negative_years():
    assert add_years(date(2024, 1, 1), -3) == date(2021, 1, 1)


def test_subtract_months_rolls_forward_past_short_month():
    assert subtract_months(date(2023, 3, 31), 1) == date(2023, 3, 3)
    assert subtract_months(date(2023, 10, 3), 6) == date(2023, 4, 3)
    assert subtract_months(date(2024, 1, 15), 3) == date(2023, 10, 15)


def test_add_months_and_offset():
    assert add_months(date(2023, 11, 15), 3) == date(2024, 2, 15)
    assert subtract_months(date(2023, 10, 3), 6, 1) == date(2023, 4, 4)


def test_none_propagates():
    assert add_years(None, 2) is None
    assert add_years(None, 2, -90) is None
    assert subtract_months(None, 6) is None
    assert add_months(None, 3) is None


def test_days_between_inclusive_counts_both_ends_and_ignores_order():
    assert days_between_inclusive(date(2023, 1, 1), date(2023, 1, 1)) == 1
    assert days_between_inclusive(date(2023, 1, 1), date(2023, 1, 31)) == 31
    assert days_between_inclusive(date(2023, 1, 31), date(2023, 1, 1)) == 31


def test_days_in_window_is_exclusive():
    assert days_in_window(date(2021, 1, 1), date(2024, 1, 1)) == 1095
    assert days_in_window(date(2023, 1, 1), date(2023, 1, 1)) == 0


def test_intervals_overlap_touching_ends_count():
    assert intervals_overlap(date(2023, 1, 1), date(2023, 1, 10), date(2023, 1, 10), date(2023, 1, 20))
    assert not intervals_overlap(date(2023, 1, 1), date(2023, 1, 9), date(2023, 1, 10), date(2023, 1, 20))


def test_missing_date_loses_comparisons():
    d = date(2023, 1, 1)
    assert on_or_after(d, d)
    assert not on_or_after(None, d)
    assert on_or_after(d, None)
    assert not on_or_after(None, None)
    assert not strictly_after(d, d)
    assert strictly_after(d, None)
    assert not strictly_after(None, None)
