"""
Enrichment

Attaches authoritative statistics to candidates and scores them:
1. Reference dataset match (admit rate)
2. External statistics lookup (admit rate + SAT bands), fanned out on a
   bounded thread pool with a per-lookup timeout and an overall wall-clock
   budget
3. Probability + classification for every candidate not yet scored

Lookups that fail, time out or find nothing leave the candidate with the
reference statistics, or with the source's values when there are none.
"""

import logging
import time
from concurrent.futures import FIRST_COMPLETED, ThreadPoolExecutor, wait
from typing import Dict, List, Optional, Tuple

from .classifier import classify_candidate
from .contracts import (
    Candidate,
    EngineConfig,
    InstitutionStats,
    ReferenceInstitution,
    StatisticsLookup,
    StudentProfile,
)
from .normalizer import normalize_identity
from .probability import compute_probability

logger = logging.getLogger(__name__)


# =============================================================================
# STATISTICS FAN-OUT
# =============================================================================

def safe_lookup(lookup: StatisticsLookup, identity: str) -> Optional[InstitutionStats]:
    try:
        return lookup.lookup(identity)
    except Exception as e:
        logger.warning(f"[Enrichment] Lookup failed for {identity}: {e}")
        return None


def _timed_lookup(
    lookup: StatisticsLookup,
    identity: str,
    key: str,
    started: Dict[str, float]
) -> Tuple[Optional[InstitutionStats], float]:
    started_at = time.monotonic()
    started[key] = started_at
    stats = safe_lookup(lookup, identity)
    return stats, time.monotonic() - started_at


def fetch_statistics(
    identities: Dict[str, str],
    lookup: StatisticsLookup,
    config: EngineConfig
) -> Dict[str, InstitutionStats]:
    """
    Look up statistics concurrently.

    Each lookup gets `lookup_timeout_s` from the moment it starts running;
    the whole batch gets `enrichment_budget_s`. A lookup over either limit
    is treated as not found, even if it finishes later.

    Args:
        identities: Normalized key -> display name to look up
        lookup: Statistics service
        config: Worker count, per-lookup timeout and overall budget

    Returns:
        Normalized key -> statistics, for lookups that finished in time
    """
    if not identities:
        return {}

    results: Dict[str, InstitutionStats] = {}
    started: Dict[str, float] = {}
    timed_out = 0
    per_lookup = config.lookup_timeout_s
    deadline = time.monotonic() + config.enrichment_budget_s

    workers = max(1, min(config.max_lookup_workers, len(identities)))
    executor = ThreadPoolExecutor(max_workers=workers)
    try:
        future_to_key = {
            executor.submit(_timed_lookup, lookup, identity, key, started): key
            for key, identity in identities.items()
        }
        pending = set(future_to_key)

        while pending:
            now = time.monotonic()

            # Running lookups past their own timeout are abandoned
            for future in list(pending):
                started_at = started.get(future_to_key[future])
                if started_at is not None and now - started_at > per_lookup and not future.done():
                    pending.discard(future)
                    timed_out += 1
            if not pending or now >= deadline:
                break

            next_expiry = min(
                [started[future_to_key[f]] + per_lookup for f in pending if future_to_key[f] in started]
                + [now + per_lookup, deadline]
            )
            done, _ = wait(pending, timeout=max(0.0, next_expiry - now), return_when=FIRST_COMPLETED)

            for future in done:
                pending.discard(future)
                stats, elapsed = future.result()
                if elapsed > per_lookup:
                    timed_out += 1
                elif stats is not None:
                    results[future_to_key[future]] = stats

        if timed_out:
            logger.warning(f"[Enrichment] {timed_out} lookups exceeded {per_lookup}s and were dropped")
        if pending:
            logger.warning(
                f"[Enrichment] Budget of {config.enrichment_budget_s}s exceeded, "
                f"{len(pending)} lookups abandoned"
            )
    finally:
        # Unfinished lookups are abandoned, never awaited
        executor.shutdown(wait=False, cancel_futures=True)

    logger.info(f"[Enrichment] {len(results)}/{len(identities)} lookups returned statistics")
    return results


# =============================================================================
# MERGE + SCORE
# =============================================================================

def merge_statistics(
    reference: Optional[ReferenceInstitution],
    looked_up: Optional[InstitutionStats]
) -> Optional[InstitutionStats]:
    """Combine reference and lookup statistics; the lookup wins field by field."""
    if reference is None and looked_up is None:
        return None

    admit_rate = reference.admit_rate if reference is not None else None
    sat_25th = sat_75th = None
    if looked_up is not None:
        if looked_up.admit_rate is not None:
            admit_rate = looked_up.admit_rate
        sat_25th, sat_75th = looked_up.sat_25th, looked_up.sat_75th

    return InstitutionStats(admit_rate=admit_rate, sat_25th=sat_25th, sat_75th=sat_75th)


def score_candidate(
    candidate: Candidate,
    stats: Optional[InstitutionStats],
    profile: StudentProfile,
    config: EngineConfig
) -> Candidate:
    """
    Attach statistics, compute the probability and classify.
    Without an admit rate the candidate keeps the source's tier and number.
    """
    if stats is None or stats.admit_rate is None:
        return candidate

    probability = compute_probability(stats, profile)
    scored = candidate.model_copy(update={
        "admit_rate": stats.admit_rate,
        "sat_25th": stats.sat_25th,
        "sat_75th": stats.sat_75th,
        "admission_probability": probability,
        "is_scored": True,
    })
    return classify_candidate(scored, profile.gpa_weighted, config)


def enrich_and_score(
    candidates: List[Candidate],
    profile: StudentProfile,
    config: EngineConfig,
    reference_index: Optional[Dict[str, ReferenceInstitution]] = None,
    lookup: Optional[StatisticsLookup] = None
) -> List[Candidate]:
    """
    Score every candidate that has not been scored yet, preserving order.

    Args:
        candidates: Corrected, deduplicated candidates
        profile: Student profile
        config: Engine configuration
        reference_index: Reference institutions keyed by normalized name
        lookup: Optional external statistics service

    Returns:
        Candidates with probability and tier recomputed where data exists
    """
    reference_index = reference_index or {}
    aliases = config.name_aliases

    pending: Dict[str, str] = {}
    for candidate in candidates:
        if not candidate.is_scored:
            pending.setdefault(normalize_identity(candidate.identity, aliases), candidate.identity)

    looked_up: Dict[str, InstitutionStats] = {}
    if lookup is not None and pending:
        looked_up = fetch_statistics(pending, lookup, config)

    enriched = []
    for candidate in candidates:
        if candidate.is_scored:
            enriched.append(candidate)
            continue
        key = normalize_identity(candidate.identity, aliases)
        stats = merge_statistics(reference_index.get(key), looked_up.get(key))
        enriched.append(score_candidate(candidate, stats, profile, config))

    return enriched
