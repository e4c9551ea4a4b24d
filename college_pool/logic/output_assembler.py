"""
Output Assembler

Deterministic final selection of exactly K candidates per tier.
Takes the best-ordered candidates of each tier, then backfills short tiers by
reassigning the unused candidate whose probability is closest to the tier's
midpoint.
"""

import logging
from typing import Dict, List, Optional, Set

from .constants import Tier, TIER_ORDER, TIER_MIDPOINTS
from .contracts import Candidate
from .normalizer import normalize_identity

logger = logging.getLogger(__name__)


def effective_probability(candidate: Candidate) -> int:
    """Probability used for ordering; unscored candidates sit at their tier midpoint."""
    if candidate.admission_probability is not None:
        return candidate.admission_probability
    return TIER_MIDPOINTS[Tier(candidate.tier).value]


def sort_tier(candidates: List[Candidate], tier: Tier) -> List[Candidate]:
    """
    Order one tier's candidates for selection.
    Reach and match ascend by probability, safety descends. Stable.
    """
    return sorted(
        candidates,
        key=effective_probability,
        reverse=(tier == Tier.SAFETY),
    )


def assemble_pool(
    candidates: List[Candidate],
    per_tier_target: int,
    aliases: Optional[Dict[str, str]] = None
) -> List[Candidate]:
    """
    Assemble the final balanced pool.

    Args:
        candidates: Corrected, classified, filtered, deduplicated candidates
        per_tier_target: K, the number wanted per tier
        aliases: Alias table for key tracking

    Returns:
        Up to 3 x K candidates ordered reach, match, safety
    """
    used: Set[str] = set()
    selected: Dict[str, List[Candidate]] = {tier.value: [] for tier in TIER_ORDER}

    for tier in TIER_ORDER:
        members = [c for c in candidates if c.tier == tier]
        for candidate in sort_tier(members, tier):
            if len(selected[tier.value]) >= per_tier_target:
                break
            key = normalize_identity(candidate.identity, aliases)
            if key in used:
                continue
            used.add(key)
            selected[tier.value].append(candidate)

    leftovers = [
        c for c in candidates
        if normalize_identity(c.identity, aliases) not in used
    ]

    # Backfill short tiers
    for tier in TIER_ORDER:
        midpoint = TIER_MIDPOINTS[tier.value]
        while len(selected[tier.value]) < per_tier_target and leftovers:
            closest = min(
                leftovers,
                key=lambda c: abs(effective_probability(c) - midpoint),
            )
            leftovers.remove(closest)
            logger.info(
                f"[Backfill] {closest.identity}: {closest.tier} -> {tier.value} "
                f"(probability={closest.admission_probability})"
            )
            selected[tier.value].append(
                closest.model_copy(update={"tier": tier.value, "backfilled": True})
            )

    pool: List[Candidate] = []
    for tier in TIER_ORDER:
        pool.extend(selected[tier.value])
    return pool
