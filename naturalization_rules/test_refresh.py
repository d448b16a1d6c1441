from datetime import date

from naturalization_rules.refresh import (
    StorageFields,
    mirror_updates,
    needs_refresh,
    recalculate_record,
    refresh_if_stale,
    source_dates_from_record,
)


def test_needs_refresh_compares_stored_today():
    record = {"23": "01/01/2019", "12": "No", "24": "12/31/2023"}
    assert needs_refresh(record, date(2024, 1, 1)) is True
    assert needs_refresh({**record, "24": "01/01/2024"}, date(2024, 1, 1)) is False
    assert needs_refresh({"23": "01/01/2019"}, date(2024, 1, 1)) is True


def test_refresh_if_stale_skips_current_record():
    record = {"23": "01/01/2019", "12": "No", "24": "01/01/2024"}
    assert refresh_if_stale(record, date(2024, 1, 1)) is None
    assert refresh_if_stale(record, date(2024, 1, 2)) is not None


def test_recalculate_unmarried_record():
    record = {"23": "01/01/2019", "12": "No", "24": "12/31/2023"}
    updates = recalculate_record(record, date(2024, 1, 1)).updates
    assert updates["24"] == "01/01/2024"
    assert updates["26"] == "10/03/2023"
    assert updates["34"] == "LPR"
    assert updates["35"] == "10/03/2023"
    assert updates["36"] == "LPRC - 1A"
    assert updates["37"] == "Eligible Now"
    assert updates["31"] == ""
    assert updates["29"] == ""


def test_married_record_is_evaluated_as_unmarried_once_lprc_arrives():
    record = {
        "23": "01/01/2019",
        "18": "01/01/2022",
        "17": "01/01/2015",
        "12": "Yes",
    }
    refreshed = recalculate_record(record, date(2024, 1, 1))
    assert refreshed.evaluation.marital_status == "NotMarried"
    assert refreshed.updates["34"] == "LPR"
    assert refreshed.updates["36"] == "LPRC - 1A"
    # marriage dates are still derived and stored; the stored answer is untouched
    assert refreshed.updates["31"] == "01/01/2025"
    assert record["12"] == "Yes"


def test_married_record_before_lprc_keeps_marriage_track():
    record = {
        "23": "01/01/2021",
        "18": "01/01/2021",
        "17": "01/01/2015",
        "12": "Yes",
    }
    updates = recalculate_record(record, date(2023, 6, 1)).updates
    assert updates["34"] == "DM"
    assert updates["36"] == "DMC - 2E"
    assert updates["35"] == "01/01/2024"


def test_stored_timestamps_are_accepted():
    source = source_dates_from_record({"23": "2019-01-01 00:00:00", "12": "No"}, today=date(2024, 1, 1))
    assert source.lpr_date == date(2019, 1, 1)
    assert source.marital_status == "NotMarried"


def test_missing_lpr_clears_fields():
    refreshed = recalculate_record({"12": "No"}, date(2024, 1, 1))
    assert refreshed.updates["34"] == ""
    assert refreshed.updates["35"] == ""
    assert refreshed.updates["37"] == ""
    assert any(i.category == "lpr" for i in refreshed.issues)


def test_custom_field_ids():
    fields = StorageFields(lpr="lpr", married="married", today="today", controlling_desc="desc")
    updates = recalculate_record({"lpr": "01/01/2019", "married": "No"}, date(2024, 1, 1), fields=fields).updates
    assert updates["desc"] == "LPRC - 1A"
    assert updates["today"] == "01/01/2024"


def test_mirror_updates_rekeys_and_drops_unmapped():
    mirrored = mirror_updates({"34": "LPR", "36": "LPRC - 1A", "24": "01/01/2024", "99": "x"})
    assert mirrored == {"894": "LPR", "896": "LPRC - 1A", "32": "01/01/2024"}


def test_needs_refresh_reads_any_stored_date_format():
    today = date(2024, 1, 1)
    assert needs_refresh({"24": "2024-01-01"}, today) is False
    assert needs_refresh({"24": "2024-01-01 00:00:00"}, today) is False
    assert needs_refresh({"24": "1/1/2024"}, today) is False
    assert needs_refresh({"24": "not a date"}, today) is True
