from datetime import date

from naturalization_rules.glue import (
    parse_marital_status,
    parse_residence_list,
    parse_source_dates,
    parse_trip_list,
)


def test_case_answers_parse():
    raw = {
        "today": "2024-01-01",
        "lpr_date": "01/01/2019",
        "marital_status": "Yes",
        "marriage_date": "1/1/2022",
        "spouse_citizenship_date": "01-01-2015",
    }
    source, issues, snap = parse_source_dates(raw)
    assert issues == []
    assert snap.id == "case"
    assert source.today == date(2024, 1, 1)
    assert source.lpr_date == date(2019, 1, 1)
    assert source.marriage_date == date(2022, 1, 1)
    assert source.spouse_citizenship_date == date(2015, 1, 1)
    assert source.marital_status == "Married"


def test_explicit_today_beats_raw_today():
    source, _, _ = parse_source_dates({"today": "2024-01-01", "lpr_date": "01/01/2019"}, today=date(2023, 5, 5))
    assert source.today == date(2023, 5, 5)


def test_invalid_lpr_is_high_and_absent():
    source, issues, _ = parse_source_dates({"lpr_date": "2022-02-31", "marital_status": "No"})
    assert source.lpr_date is None
    assert any(i.severity == "high" and i.category == "lpr" and i.ref_id == "case" for i in issues)


def test_married_with_only_one_date():
    source, issues, _ = parse_source_dates(
        {"lpr_date": "01/01/2019", "marital_status": "Married", "marriage_date": "01/01/2022"}
    )
    assert source.spouse_citizenship_date is None
    assert any("Missing date your spouse became a U.S. citizen" in i.message for i in issues)
    assert any("Only one of" in i.message for i in issues)


def test_unmarried_does_not_need_marriage_dates():
    _, issues, _ = parse_source_dates({"lpr_date": "01/01/2019", "marital_status": "No"})
    assert issues == []


def test_marital_answers():
    assert parse_marital_status("No") == ("NotMarried", [])
    assert parse_marital_status("not married") == ("NotMarried", [])
    assert parse_marital_status("NotMarried") == ("NotMarried", [])
    assert parse_marital_status(" married ") == ("Married", [])

    status, issues = parse_marital_status("divorced")
    assert status is None
    assert issues[0].severity == "medium"

    status, issues = parse_marital_status("")
    assert status is None
    assert len(issues) == 1


def test_trip_list_keeps_order_and_ids():
    raw = [
        {"departure": "06/01/2023", "return": "06/10/2023", "label": "Lisbon"},
        {"departure": "03/01/2023", "return": "Present"},
        {"start": "2022-12-20", "end": "2023-01-03"},
    ]
    trips, issues, snaps = parse_trip_list(raw)
    assert [t.start for t in trips] == [date(2023, 6, 1), date(2022, 12, 20)]
    assert trips[0].label == "Lisbon"
    assert [s.id for s in snaps] == ["trip_0", "trip_1", "trip_2"]
    assert len(issues) == 1
    assert issues[0].ref_id == "trip_1"
    assert issues[0].category == "time_outside"


def test_residence_list():
    raw = [
        {"from": "11/15/2023", "to": "Present", "state": "NC"},
        {"from": "01/01/2020", "to": "11/14/2023", "state": "VA", "label": "Arlington"},
        {"from": "", "to": "12/31/2019"},
    ]
    entries, issues, snaps = parse_residence_list(raw)
    assert len(entries) == 2
    assert entries[0].to_date is None
    assert entries[1].to_date == date(2023, 11, 14)
    assert entries[1].state == "VA"
    assert [s.section for s in snaps] == ["residence"] * 3
    assert {i.ref_id for i in issues} == {"res_2"}
    assert any(i.severity == "high" for i in issues)
    assert any(i.severity == "low" and "no state" in i.message for i in issues)
