"""
Metadata Corrector

Replaces untrusted candidate fields (size category, region, testing policy)
with values derived from enrollment, curated tables and the reference dataset.
The generative source is never trusted for these fields.
"""

import logging
import re
from typing import Dict, List, Optional

from .constants import (
    Region,
    SizeCategory,
    TestingPolicy,
    MICRO_UPPER_EXCLUSIVE,
    SIZE_BANDS,
    STATE_TO_REGION,
    STATE_NAMES,
)
from .contracts import Candidate, EngineConfig, ReferenceInstitution
from .normalizer import normalize_identity, matches_any

logger = logging.getLogger(__name__)

# Longest state names first so "west virginia" wins over "virginia"
_STATE_NAMES_BY_LENGTH = sorted(STATE_NAMES, key=len, reverse=True)
_STATE_PATTERNS = [
    (re.compile(rf"\b{re.escape(name)}\b"), STATE_NAMES[name])
    for name in _STATE_NAMES_BY_LENGTH
]


def size_category_for(enrollment: int) -> Optional[SizeCategory]:
    """
    Band an enrollment figure into a size category.

    Returns None for an enrollment of zero or less (unknown).
    """
    if enrollment is None or enrollment <= 0:
        return None
    if enrollment < MICRO_UPPER_EXCLUSIVE:
        return SizeCategory.MICRO
    for upper, category in SIZE_BANDS:
        if enrollment <= upper:
            return category
    return SizeCategory.MEGA


def _state_from_prefix(text: str) -> Optional[str]:
    for name in _STATE_NAMES_BY_LENGTH:
        if text == name or text.startswith(name + " "):
            return STATE_NAMES[name]
    return None


def infer_state(
    identity: str,
    config: EngineConfig,
    reference: Optional[ReferenceInstitution] = None
) -> Optional[str]:
    """
    Infer the two-letter state of an institution from its name.

    Order: reference dataset entry, curated institution table (whole key),
    "University of <State>" / "<State> State University" patterns, then a
    whole-word state-name match anywhere in the name.
    """
    if reference is not None:
        return reference.state

    key = normalize_identity(identity, config.name_aliases)

    if key in config.institution_states:
        return config.institution_states[key]

    uni_of = re.match(r"^university of (.+)$", key)
    if uni_of:
        state = _state_from_prefix(uni_of.group(1))
        if state:
            return state

    state_uni = re.match(r"^(.+?) state university", key)
    if state_uni:
        state = _state_from_prefix(state_uni.group(1))
        if state:
            return state

    for pattern, state in _STATE_PATTERNS:
        if pattern.search(key):
            return state

    return None


def region_for_state(state: Optional[str]) -> Optional[Region]:
    if not state:
        return None
    return STATE_TO_REGION.get(state.upper())


def correct_candidate(
    candidate: Candidate,
    config: EngineConfig,
    reference_index: Optional[Dict[str, ReferenceInstitution]] = None
) -> Candidate:
    """
    Return a corrected copy of a candidate.

    Pure and idempotent: every correction is a function of the identity,
    the enrollment and the static tables.

    Args:
        candidate: Raw candidate (fields advisory)
        config: Engine configuration holding the curated tables
        reference_index: Reference institutions keyed by normalized name

    Returns:
        Corrected Candidate
    """
    updates = {}
    key = normalize_identity(candidate.identity, config.name_aliases)
    reference = (reference_index or {}).get(key)

    # Trusted enrollment from the reference dataset
    enrollment = candidate.enrollment
    if reference is not None and reference.enrollment > 0 and reference.enrollment != enrollment:
        logger.debug(f"[MetaCorrect] {candidate.identity}: enrollment {enrollment} -> {reference.enrollment}")
        enrollment = reference.enrollment
        updates["enrollment"] = enrollment

    # Size category is always re-derived from enrollment
    size = size_category_for(enrollment)
    if size is not None and size != candidate.size_category:
        logger.debug(f"[MetaCorrect] {candidate.identity}: size {candidate.size_category} -> {size.value}")
        updates["size_category"] = size.value

    # Region from the inferred state; unchanged when nothing matches
    region = region_for_state(infer_state(candidate.identity, config, reference))
    if region is not None and region != candidate.region:
        logger.debug(f"[MetaCorrect] {candidate.identity}: region {candidate.region} -> {region.value}")
        updates["region"] = region.value

    # Testing policy: curated test-required list beats everything
    policy = candidate.testing_policy
    if reference is not None:
        policy = reference.testing_policy
    if matches_any(candidate.identity, config.test_required, config.name_aliases):
        policy = TestingPolicy.REQUIRED.value
    if policy != candidate.testing_policy:
        logger.debug(f"[MetaCorrect] {candidate.identity}: testing policy {candidate.testing_policy} -> {policy}")
        updates["testing_policy"] = TestingPolicy(policy).value

    if reference is not None and not candidate.reference_url:
        updates["reference_url"] = reference.url

    if not updates:
        return candidate
    return candidate.model_copy(update=updates)


def correct_all(
    candidates: List[Candidate],
    config: EngineConfig,
    reference_index: Optional[Dict[str, ReferenceInstitution]] = None
) -> List[Candidate]:
    """Correct every candidate, preserving order."""
    return [correct_candidate(c, config, reference_index) for c in candidates]
