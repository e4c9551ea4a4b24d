"""
Hard Filter Gate

Removes candidates that fail the user's hard constraints (size, region,
testing policy). Runs strictly after metadata correction so every check uses
corrected values, never what the generative source reported.
"""

import logging
from typing import List

from .constants import TestingPolicy
from .contracts import Candidate, Constraints

logger = logging.getLogger(__name__)


def effective_policy(candidate: Candidate) -> str:
    """Testing policy used for filtering; unknown counts as optional."""
    if candidate.testing_policy is None:
        return TestingPolicy.OPTIONAL.value
    return TestingPolicy(candidate.testing_policy).value


def passes_constraints(candidate: Candidate, constraints: Constraints) -> bool:
    """
    True if the candidate satisfies every non-empty constraint dimension.
    An unknown size or region never satisfies a constrained dimension.
    """
    if constraints.sizes and candidate.size_category not in constraints.sizes:
        return False
    if constraints.regions and candidate.region not in constraints.regions:
        return False
    if constraints.policies and effective_policy(candidate) not in constraints.policies:
        return False
    return True


def apply_hard_filters(
    candidates: List[Candidate],
    constraints: Constraints
) -> List[Candidate]:
    """
    Keep only candidates that satisfy the constraints, preserving order.

    Args:
        candidates: Corrected candidates
        constraints: User constraints (empty dimensions are open)

    Returns:
        Surviving candidates
    """
    if constraints.is_open:
        return list(candidates)

    passed = []
    for candidate in candidates:
        if passes_constraints(candidate, constraints):
            passed.append(candidate)
        else:
            logger.info(
                f"[FilterGate] DISCARDED {candidate.identity}: size={candidate.size_category} "
                f"region={candidate.region} policy={effective_policy(candidate)}"
            )

    logger.info(f"[FilterGate] {len(passed)}/{len(candidates)} candidates passed hard constraints")
    return passed
