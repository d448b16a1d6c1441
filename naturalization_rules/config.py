# naturalization_rules/config.py

from __future__ import annotations

import logging
import os
from datetime import date
from typing import Optional

from dotenv import load_dotenv

from .normalize import DateInput, parse_date

load_dotenv()

# Fixed "now" for batch re-evaluation and reproducible runs (any parse_date format)
NME_TODAY = os.getenv("NME_TODAY")
NME_LOG_LEVEL = os.getenv("NME_LOG_LEVEL", "WARNING")
NME_LOG_FORMAT = os.getenv("NME_LOG_FORMAT", "%(asctime)s %(levelname)s %(name)s: %(message)s")

logger = logging.getLogger(__name__)


def get_today(override: DateInput = None) -> date:
    """
    Resolve the evaluation date.

    Order: explicit override -> NME_TODAY -> the system clock.
    An unparseable override is logged and skipped rather than raised.
    """
    for source, raw in (("override", override), ("NME_TODAY", NME_TODAY)):
        if raw is None or raw == "":
            continue
        parsed = parse_date(raw)
        if parsed is not None:
            return parsed
        logger.warning("Ignoring unparseable %s date %r", source, raw)
    return date.today()


def configure_logging(level: Optional[str] = None) -> None:
    """basicConfig for scripts and hosts; the library itself never calls this on import."""
    logging.basicConfig(level=(level or NME_LOG_LEVEL).upper(), format=NME_LOG_FORMAT)
