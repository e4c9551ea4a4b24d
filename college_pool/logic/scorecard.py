"""
College Scorecard Lookup

Statistics client for the U.S. Department of Education College Scorecard API.
Returns the overall admit rate and combined (reading + math) SAT 25th/75th
percentiles. Every failure is reported as None; nothing is raised.
"""

import os
import logging
from typing import Any, Dict, List, Optional

import requests
from dotenv import load_dotenv

from .constants import LOOKUP_TIMEOUT_SECONDS
from .contracts import InstitutionStats
from .normalizer import search_variants

load_dotenv()

logger = logging.getLogger(__name__)

SCORECARD_URL = "https://api.data.gov/ed/collegescorecard/v1/schools.json"

NAME_FIELD = "school.name"
ADMIT_RATE_FIELD = "latest.admissions.admission_rate.overall"
SAT_25_READING = "latest.admissions.sat_scores.25th_percentile.critical_reading"
SAT_75_READING = "latest.admissions.sat_scores.75th_percentile.critical_reading"
SAT_25_MATH = "latest.admissions.sat_scores.25th_percentile.math"
SAT_75_MATH = "latest.admissions.sat_scores.75th_percentile.math"

SCORECARD_FIELDS = ",".join([
    NAME_FIELD,
    ADMIT_RATE_FIELD,
    SAT_25_READING,
    SAT_75_READING,
    SAT_25_MATH,
    SAT_75_MATH,
])


def _combined(reading: Any, math: Any) -> Optional[int]:
    if isinstance(reading, (int, float)) and isinstance(math, (int, float)):
        return int(reading + math)
    return None


def stats_from_record(record: Dict[str, Any]) -> Optional[InstitutionStats]:
    """Convert one Scorecard result into InstitutionStats."""
    admit_rate = record.get(ADMIT_RATE_FIELD)
    if not isinstance(admit_rate, (int, float)) or not 0 <= admit_rate <= 1:
        admit_rate = None

    sat_25th = _combined(record.get(SAT_25_READING), record.get(SAT_25_MATH))
    sat_75th = _combined(record.get(SAT_75_READING), record.get(SAT_75_MATH))

    if admit_rate is None and sat_25th is None and sat_75th is None:
        return None
    return InstitutionStats(admit_rate=admit_rate, sat_25th=sat_25th, sat_75th=sat_75th)


def best_match(results: List[Dict[str, Any]], variant: str) -> Optional[Dict[str, Any]]:
    """Prefer an exact (case-insensitive) name match, else the API's first result."""
    if not results:
        return None
    for record in results:
        name = record.get(NAME_FIELD)
        if isinstance(name, str) and name.lower() == variant.lower():
            return record
    return results[0]


class ScorecardLookup:
    """
    StatisticsLookup backed by the College Scorecard REST API.

    Tries each search variant of the name in turn until one returns results.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        timeout: float = LOOKUP_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None,
        per_page: int = 5
    ):
        self.api_key = api_key or os.getenv("COLLEGE_SCORECARD_API_KEY")
        self.timeout = timeout
        # None: one requests.get per call, no Session shared between threads
        self.session = session
        self.per_page = per_page

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    def _search(self, variant: str) -> Optional[Dict[str, Any]]:
        params = {
            NAME_FIELD: variant,
            "fields": SCORECARD_FIELDS,
            "api_key": self.api_key,
            "per_page": self.per_page,
        }
        try:
            get = self.session.get if self.session is not None else requests.get
            resp = get(SCORECARD_URL, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            logger.warning(f"[Scorecard] Request failed for {variant!r}: {e}")
            return None

        if resp.status_code != 200:
            logger.warning(f"[Scorecard] HTTP {resp.status_code} for {variant!r}")
            return None

        try:
            data = resp.json()
        except ValueError:
            logger.warning(f"[Scorecard] Invalid JSON for {variant!r}")
            return None

        results = data.get("results") if isinstance(data, dict) else None
        return best_match(results or [], variant)

    def lookup(self, identity: str) -> Optional[InstitutionStats]:
        if not self.enabled:
            return None

        for variant in search_variants(identity):
            record = self._search(variant)
            if record is not None:
                stats = stats_from_record(record)
                logger.debug(f"[Scorecard] {identity}: matched {record.get(NAME_FIELD)!r} -> {stats}")
                return stats

        logger.info(f"[Scorecard] {identity}: not found")
        return None
