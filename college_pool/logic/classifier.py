"""
Classifier

Assigns the final admission tier with ordered override rules:
- Reach (stretch schools)
- Match (realistic targets)
- Safety (high confidence)

Authoritative data takes precedence over the generative source's suggested
tier and over the raw probability number.
"""

from typing import Dict, List, Optional

from .contracts import Candidate, EngineConfig
from .constants import (
    Tier,
    TIER_ORDER,
    DEFAULT_GPA,
    SAFETY_PROBABILITY,
    MATCH_PROBABILITY,
    SELECTIVE_REACH_GPA,
    FORCED_REACH_ADMIT_RATE,
    SAFETY_MIN_ADMIT_RATE,
    SAFETY_MIN_GPA,
)
from .normalizer import matches_any


def tier_for_probability(probability: int) -> Tier:
    """Provisional tier from the probability alone."""
    if probability >= SAFETY_PROBABILITY:
        return Tier.SAFETY
    if probability >= MATCH_PROBABILITY:
        return Tier.MATCH
    return Tier.REACH


def classify(
    probability: int,
    admit_rate: float,
    gpa: Optional[float],
    identity: str,
    config: EngineConfig
) -> Tier:
    """
    Classify one institution for one student.

    Args:
        probability: Personalized probability (1-95)
        admit_rate: Population admit rate (0-1)
        gpa: Student weighted GPA (defaults to 3.0)
        identity: Institution name, matched against the curated lists
        config: Engine configuration holding the curated lists

    Returns:
        Tier enum value
    """
    gpa = DEFAULT_GPA if gpa is None else gpa
    aliases = config.name_aliases
    most_selective = matches_any(identity, config.most_selective, aliases)

    # Terminal reach rules
    if most_selective and gpa <= SELECTIVE_REACH_GPA:
        return Tier.REACH
    if admit_rate < FORCED_REACH_ADMIT_RATE:
        return Tier.REACH

    tier = tier_for_probability(probability)

    # Safety downgrades
    if tier == Tier.SAFETY and admit_rate <= SAFETY_MIN_ADMIT_RATE:
        tier = Tier.MATCH
    if tier == Tier.SAFETY and admit_rate > SAFETY_MIN_ADMIT_RATE and gpa <= SAFETY_MIN_GPA:
        tier = Tier.MATCH
    if tier == Tier.SAFETY and most_selective:
        tier = Tier.MATCH
    if tier == Tier.SAFETY and matches_any(identity, config.match_capped_flagships, aliases):
        tier = Tier.MATCH

    # Final consistency check
    if probability < MATCH_PROBABILITY:
        tier = Tier.REACH

    return tier


def classify_candidate(candidate: Candidate, gpa: Optional[float], config: EngineConfig) -> Candidate:
    """
    Classify a scored candidate, returning an updated copy.
    Candidates without an admit rate or probability pass through unchanged.
    """
    if candidate.admit_rate is None or candidate.admission_probability is None:
        return candidate
    tier = classify(
        candidate.admission_probability,
        candidate.admit_rate,
        gpa,
        candidate.identity,
        config,
    )
    return candidate.model_copy(update={"tier": tier.value})


def classify_all(
    candidates: List[Candidate],
    gpa: Optional[float],
    config: EngineConfig
) -> List[Candidate]:
    """Classify all candidates, preserving order."""
    return [classify_candidate(c, gpa, config) for c in candidates]


def filter_by_tier(candidates: List[Candidate], tier: Tier) -> List[Candidate]:
    """Candidates currently assigned to `tier`."""
    return [c for c in candidates if c.tier == tier]


def get_tier_counts(candidates: List[Candidate]) -> Dict[str, int]:
    """
    Count candidates in each tier.
    """
    counts = {tier.value: 0 for tier in TIER_ORDER}
    for candidate in candidates:
        counts[Tier(candidate.tier).value] += 1
    return counts
