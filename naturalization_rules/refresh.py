# naturalization_rules/refresh.py

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Mapping, Optional

from .classifier import EligibilityEvaluation, evaluate_eligibility
from .glue import parse_marital_status
from .models import SourceDates
from .normalize import format_date, parse_date
from .validate import Issue

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StorageFields:
    """
    Where each value lives in a stored record. Ids are opaque to this package;
    the defaults match the primary intake form.
    """
    lpr: str = "23"
    marriage: str = "18"
    spouse_citizenship: str = "17"
    married: str = "12"  # "Yes" / "No"
    today: str = "24"

    lpr2: str = "25"
    lpr3: str = "28"
    lpr4: str = "27"
    lprc: str = "26"
    dm2: str = "32"
    dmc: str = "31"
    sc2: str = "30"
    scc: str = "29"

    controlling_factor: str = "34"
    controlling_date: str = "35"
    controlling_desc: str = "36"
    status: str = "37"


DEFAULT_FIELDS = StorageFields()

# Primary form field -> summary form field
SUMMARY_FORM_FIELD_MAP: Dict[str, str] = {
    "25": "898",
    "28": "900",
    "27": "899",
    "26": "901",
    "32": "904",
    "31": "903",
    "30": "905",
    "29": "902",
    "34": "894",
    "35": "895",
    "36": "896",
    "37": "897",
    "24": "32",
}


@dataclass(frozen=True)
class RefreshResult:
    updates: Dict[str, str]
    evaluation: EligibilityEvaluation
    issues: List[Issue] = field(default_factory=list)


def source_dates_from_record(
    record: Mapping[str, Optional[str]],
    *,
    today: Optional[date] = None,
    fields: StorageFields = DEFAULT_FIELDS,
) -> SourceDates:
    marital_status, _ = parse_marital_status(record.get(fields.married))
    return SourceDates(
        today=today,
        lpr_date=parse_date(record.get(fields.lpr)),
        marriage_date=parse_date(record.get(fields.marriage)),
        spouse_citizenship_date=parse_date(record.get(fields.spouse_citizenship)),
        marital_status=marital_status,
    )


def needs_refresh(
    record: Mapping[str, Optional[str]],
    today: date,
    *,
    fields: StorageFields = DEFAULT_FIELDS,
) -> bool:
    """False when the record was already evaluated as of `today`, in any stored date format."""
    return parse_date(record.get(fields.today)) != today


def storage_updates(
    evaluation: EligibilityEvaluation,
    *,
    fields: StorageFields = DEFAULT_FIELDS,
) -> Dict[str, str]:
    """Every value a recalculation writes back, as MM/DD/YYYY / literal strings."""
    d = evaluation.derived
    r = evaluation.result
    return {
        fields.today: format_date(d.today),
        fields.lpr2: format_date(d.lpr2),
        fields.lpr3: format_date(d.lpr3),
        fields.lpr4: format_date(d.lpr4),
        fields.lprc: format_date(d.lprc),
        fields.dm2: format_date(d.dm2),
        fields.dmc: format_date(d.dmc),
        fields.sc2: format_date(d.sc2),
        fields.scc: format_date(d.scc),
        fields.controlling_factor: r.controlling_factor,
        fields.controlling_date: format_date(r.controlling_date),
        fields.controlling_desc: r.controlling_desc,
        fields.status: r.status,
    }


def recalculate_record(
    record: Mapping[str, Optional[str]],
    today: date,
    *,
    fields: StorageFields = DEFAULT_FIELDS,
) -> RefreshResult:
    """
    Re-run the eligibility rules for a stored record as of `today`.

    Once today reaches LPRC the record is evaluated as NotMarried; the stored
    marital answer and marriage dates are not touched. The caller persists
    `updates` (field id -> value).
    """
    issues: List[Issue] = []
    if parse_date(record.get(fields.lpr)) is None:
        issues.append(
            Issue(
                severity="high",
                category="lpr",
                message="Stored record has no usable LPR date; eligibility fields will be cleared.",
                ref_id=fields.lpr,
            )
        )

    source = source_dates_from_record(record, today=today, fields=fields)
    evaluation = evaluate_eligibility(source, today=today, apply_lpr_override=True)
    if evaluation.marital_status != source.marital_status:
        logger.info("LPRC reached; evaluating record as NotMarried")

    return RefreshResult(updates=storage_updates(evaluation, fields=fields), evaluation=evaluation, issues=issues)


def refresh_if_stale(
    record: Mapping[str, Optional[str]],
    today: date,
    *,
    fields: StorageFields = DEFAULT_FIELDS,
) -> Optional[RefreshResult]:
    """Recalculate only when the stored Today is not `today`."""
    if not needs_refresh(record, today, fields=fields):
        logger.debug("Record already current as of %s", format_date(today))
        return None
    return recalculate_record(record, today, fields=fields)


def mirror_updates(
    updates: Mapping[str, str],
    field_map: Mapping[str, str] = SUMMARY_FORM_FIELD_MAP,
) -> Dict[str, str]:
    """Re-key updates for a mirrored form; ids without a mapping are dropped."""
    return {field_map[k]: v for k, v in updates.items() if k in field_map}
