"""
Engine Runner

Orchestrates one pool request with the real collaborators:
1. Accepts StudentProfile + Constraints
2. Loads the reference dataset (database when populated, bundled otherwise)
3. Optionally asks the generative source for the initial seed
4. Runs the recommendation engine
5. Returns the PoolResult

This is a pure orchestration layer - NO scoring, NO business logic.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..ai.generator import OpenAICandidateSource
from ..ai.prompt_builder import build_initial_request, build_student_summary
from .adapter import fetch_reference_institutions
from .constants import DEFAULT_PER_TIER_TARGET, TIER_ORDER, CandidateOrigin
from .contracts import (
    Candidate,
    CandidateSource,
    Constraints,
    EngineConfig,
    PoolResult,
    ReferenceInstitution,
    StatisticsLookup,
    StudentProfile,
)
from .engine import RecommendationEngine
from .reference_data import load_reference_dataset
from .scorecard import ScorecardLookup

logger = logging.getLogger(__name__)


def load_reference(db: Optional[Session]) -> List[ReferenceInstitution]:
    """Reference institutions from the database, or the bundled table when it is empty."""
    if db is not None:
        try:
            institutions = fetch_reference_institutions(db)
        except SQLAlchemyError as e:
            logger.warning(f"⚠️ Reference table unavailable, using bundled dataset: {e}")
            institutions = []
        if institutions:
            return institutions
    return list(load_reference_dataset())


def generate_seed(
    source: CandidateSource,
    profile: StudentProfile,
    constraints: Constraints,
    per_tier_target: int,
    config: EngineConfig
) -> List[Candidate]:
    """Ask the generative source for the initial K per tier."""
    instructions = build_initial_request(constraints, per_tier_target, config.test_required)
    seed = source.request_candidates(
        instructions,
        build_student_summary(profile),
        per_tier_target * len(TIER_ORDER),
    )
    return [c.model_copy(update={"origin": CandidateOrigin.GENERATED.value}) for c in seed]


def run_pool(
    profile: StudentProfile,
    constraints: Optional[Constraints] = None,
    per_tier_target: int = DEFAULT_PER_TIER_TARGET,
    seed: Optional[List[Candidate]] = None,
    generate: bool = False,
    db: Optional[Session] = None,
    source: Optional[CandidateSource] = None,
    lookup: Optional[StatisticsLookup] = None,
    config: Optional[EngineConfig] = None,
    request_id: Optional[str] = None
) -> PoolResult:
    """
    Main entry point: run the full pool pipeline.

    Args:
        profile: Student profile
        constraints: Hard user filters
        per_tier_target: K, the number wanted per tier
        seed: Caller-provided candidates
        generate: Ask the generative source for the seed when none is given
        db: Optional database session for the reference table
        source: Candidate source; defaults to OpenAI
        lookup: Statistics lookup; defaults to College Scorecard
        config: Engine configuration
        request_id: Correlation id

    Returns:
        PoolResult
    """
    config = config or EngineConfig()
    constraints = constraints or Constraints()
    source = source or OpenAICandidateSource()
    lookup = lookup or ScorecardLookup(timeout=config.lookup_timeout_s)

    logger.info(f"🚀 Starting pool pipeline for student: {profile.student_id or 'anonymous'}")
    logger.info(f"🎯 Per-tier target: {per_tier_target}")
    logger.info(f"🌍 Constraints: sizes={constraints.sizes} regions={constraints.regions} policies={constraints.policies}")

    reference = load_reference(db)
    logger.info(f"📚 Reference institutions: {len(reference)}")

    seed = list(seed or [])
    if not seed and generate:
        logger.info("🎲 Generating initial seed...")
        seed = generate_seed(source, profile, constraints, per_tier_target, config)
    logger.info(f"📦 Seed candidates: {len(seed)}")

    engine = RecommendationEngine(config=config, source=source, lookup=lookup, reference=reference)
    result = engine.build_pool(seed, profile, constraints, per_tier_target, request_id=request_id)

    if result.warnings:
        for warning in result.warnings:
            logger.warning(f"⚠️ {warning}")

    logger.info(
        f"✨ Pool pipeline complete: {len(result.candidates)} candidates "
        f"{result.counts_by_tier} in {result.rounds_used} fill rounds ({result.processing_time_ms:.2f}ms)"
    )
    return result


def run_pool_from_dict(payload: Dict[str, Any], db: Optional[Session] = None, **kwargs) -> PoolResult:
    """
    Convenience wrapper accepting dicts instead of contracts.
    Expects keys "profile" and optionally "constraints", "candidates",
    "per_tier_target".
    """
    profile = StudentProfile(**payload.get("profile", {}))
    constraints = Constraints(**payload.get("constraints", {}))
    seed = [Candidate(**c) for c in payload.get("candidates", [])]
    return run_pool(
        profile,
        constraints,
        per_tier_target=payload.get("per_tier_target", DEFAULT_PER_TIER_TARGET),
        seed=seed,
        db=db,
        **kwargs,
    )
