from datetime import date

from naturalization_rules.classifier import EMPTY_RESULT, ControllingFactorResult, evaluate_eligibility
from naturalization_rules.derived import compute_preliminary_dates
from naturalization_rules.messages import (
    branch_code,
    format_days_as_ymd,
    format_long_date,
    preliminary_placeholders,
    presence_summary_message,
    render_application_message,
    replace_placeholders,
)
from naturalization_rules.models import SourceDates, TripInterval
from naturalization_rules.presence import evaluate_intervals


def _unmarried(today, lpr=date(2020, 1, 1)):
    return evaluate_eligibility(
        SourceDates(today=today, lpr_date=lpr, marital_status="NotMarried")
    ).result


def test_replace_placeholders_is_literal():
    text = replace_placeholders("File on [Date]; [Date] again. [Other]", {"[Date]": "01/02/2024"})
    assert text == "File on 01/02/2024; 01/02/2024 again. [Other]"


def test_branch_code():
    assert branch_code("DMC - 2E") == "2E"
    assert branch_code("LPRC - Married No Benefit PF") == "Married No Benefit PF"
    assert branch_code("") == ""


def test_eligible_now_has_no_message():
    assert render_application_message(_unmarried(date(2024, 10, 3))) == ""


def test_prepare_message_quotes_controlling_date():
    msg = render_application_message(_unmarried(date(2024, 10, 2)))
    assert "on or after 10/03/2024" in msg
    assert "denial of your case without a refund" in msg
    assert "[" not in msg


def test_early_message_quotes_full_access_date():
    msg = render_application_message(_unmarried(date(2023, 10, 2)))
    assert "Full access will be restored on 04/03/2024" in msg
    assert "6 months prior to 10/03/2024" in msg


def test_marriage_track_message_uses_result_dates():
    result = ControllingFactorResult(
        controlling_factor="SC",
        controlling_date=date(2023, 1, 1),
        controlling_desc="SCC - 2H",
        status="Eligibility Assessment",
        full_access_date=date(2022, 7, 1),
    )
    msg = render_application_message(result)
    assert "on or after [" not in msg
    assert "07/01/2022" in msg and "01/01/2023" in msg


def test_status_keyed_templates():
    templates = {"Eligible Now": "Eligible since [Controlling Date] ([Controlling Factor])"}
    result = _unmarried(date(2024, 1, 1), lpr=date(2019, 1, 1))
    assert render_application_message(result, templates) == "Eligible since 10/03/2023 (LPR)"
    assert render_application_message(_unmarried(date(2024, 10, 2)), templates) == ""


def test_empty_result_renders_nothing():
    assert render_application_message(EMPTY_RESULT) == ""
    assert render_application_message(ControllingFactorResult(controlling_factor="DM")) == ""


def test_preliminary_placeholders():
    values = preliminary_placeholders(compute_preliminary_dates(date(2024, 1, 15), date(2020, 6, 1)))
    assert values["[Today]"] == "01/15/2024"
    assert values["[Current Date]"] == "01/15/2024"
    assert values["[USC_CALCULATED_DATE]"] == "01/16/2025"
    assert values["[LPR Date]"] == "06/01/2020"
    assert values["[5 Year Date]"] == "06/01/2025"
    assert values["[Earliest Filing Date]"] == "03/03/2024"
    assert values["[Marriage Track Filing Date]"] == "03/03/2022"
    assert values["[3 Year Date]"] == "06/01/2023"
    assert replace_placeholders("Eligible on [USC Date]", values) == "Eligible on 06/01/2025"


def test_format_days_as_ymd():
    assert format_days_as_ymd(0) == "0 days"
    assert format_days_as_ymd(1) == "1 day"
    assert format_days_as_ymd(364) == "12 months, 4 days"
    assert format_days_as_ymd(365) == "1 year"
    assert format_days_as_ymd(396) == "1 year, 1 month, 1 day"


def test_format_long_date():
    assert format_long_date(date(2025, 10, 3)) == "October 3, 2025"
    assert format_long_date(None) == ""


def test_presence_summary_clean():
    res = evaluate_intervals([], 5, date(2024, 1, 1))
    assert presence_summary_message(res) == "You may proceed with your application."


def test_presence_summary_lists_problems():
    res = evaluate_intervals(
        [
            TripInterval(start=date(2023, 1, 1), end=date(2023, 7, 2)),
            TripInterval(start=date(2023, 1, 15), end=date(2023, 3, 1)),
        ],
        5,
        date(2024, 1, 1),
    )
    msg = presence_summary_message(res)
    assert "The following trips exceed 6 months: Row 1" in msg
    assert "wait until April 3, 2028" in msg
    assert "Row 1 overlaps with Row 2" in msg


def test_presence_summary_shortfall():
    res = evaluate_intervals([TripInterval(start=date(2021, 1, 1), end=date(2023, 6, 30))], 3, date(2024, 1, 1))
    msg = presence_summary_message(res)
    assert "You are short by 364 days (12 months, 4 days)" in msg
    assert "December 30, 2024" in msg


def test_early_filing_wording_per_branch():
    assert "limited access to this site" in render_application_message(_unmarried(date(2023, 10, 2)))

    two_h = ControllingFactorResult(
        controlling_factor="DM",
        controlling_date=date(2024, 1, 1),
        controlling_desc="DMC - 2H",
        status="Eligibility Assessment",
        full_access_date=date(2023, 7, 1),
    )
    msg = render_application_message(two_h)
    assert "If you have correctly entered these dates, then" in msg
    assert "limited access to the site" in msg

    two_i = ControllingFactorResult(
        controlling_factor="DM",
        controlling_date=date(2024, 1, 1),
        controlling_desc="LPR3 - 2I",
        status="Eligibility Assessment",
        full_access_date=date(2023, 7, 1),
    )
    assert "If you have correctly entered these date(s), then" in render_application_message(two_i)
