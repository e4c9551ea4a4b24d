"""
Recommendation Engine

Facade over the pool balancer. This is the primary entry point for building
a balanced reach / match / safety pool for one student.
"""

import uuid
from typing import Any, Dict, Iterable, List, Optional

from .balancer import PoolBalancer
from .classifier import classify
from .constants import DEFAULT_PER_TIER_TARGET, ENGINE_VERSION
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
from .enrichment import merge_statistics, safe_lookup
from .normalizer import normalize_identity
from .probability import compute_probability


class RecommendationEngine:
    """
    Main engine that wires the balancer to its collaborators.

    Pipeline flow:
    1. Correction - Trusted size, region and testing policy
    2. Deduplication - One candidate per normalized name
    3. Enrichment - Authoritative statistics, probability, tier
    4. Hard filters - User constraints on corrected values
    5. Fill rounds - Bounded requests to the candidate source
    6. Assembly - Exactly K per tier with deterministic backfill
    7. Display - Tier-consistent displayed probability
    """

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        source: Optional[CandidateSource] = None,
        lookup: Optional[StatisticsLookup] = None,
        reference: Optional[Iterable[ReferenceInstitution]] = None
    ):
        """
        Initialize the engine.

        Args:
            config: Engine configuration; defaults to the built-in tables
            source: Generative candidate source used for fill rounds
            lookup: External statistics service
            reference: Reference institutions; defaults to the bundled dataset
        """
        self.config = config or EngineConfig()
        self.balancer = PoolBalancer(self.config, reference, source, lookup)
        self.version = ENGINE_VERSION

    def build_pool(
        self,
        candidates_seed: List[Candidate],
        student_profile: StudentProfile,
        constraints: Optional[Constraints] = None,
        per_tier_target: int = DEFAULT_PER_TIER_TARGET,
        request_id: Optional[str] = None
    ) -> PoolResult:
        """
        Build a balanced pool with diagnostics.

        Args:
            candidates_seed: Raw candidates; fields other than identity are advisory
            student_profile: Student's academic profile
            constraints: Hard user filters (None = unconstrained)
            per_tier_target: K, the number wanted per tier
            request_id: Caller correlation id; generated when absent

        Returns:
            PoolResult
        """
        if per_tier_target < 1:
            raise ValueError(f"per_tier_target must be at least 1, got {per_tier_target}")

        result = self.balancer.run(
            list(candidates_seed),
            student_profile,
            constraints or Constraints(),
            per_tier_target,
        )
        return result.model_copy(update={
            "request_id": request_id or str(uuid.uuid4()),
            "engine_version": self.version,
        })

    def build_pool_from_dict(self, payload: Dict[str, Any], **kwargs) -> PoolResult:
        """
        Build a pool from plain dicts.

        Convenience method for API integration. Expects keys "candidates",
        "profile" and optionally "constraints".
        """
        seed = [Candidate(**c) for c in payload.get("candidates", [])]
        profile = StudentProfile(**payload.get("profile", {}))
        constraints = Constraints(**payload.get("constraints", {}))
        return self.build_pool(seed, profile, constraints, **kwargs)

    def score_single_institution(self, identity: str, student_profile: StudentProfile) -> Dict[str, Any]:
        """
        Score one institution for a student.

        Useful for checking a specific school the student is interested in.
        Uses the reference dataset and the statistics lookup when configured.
        """
        balancer = self.balancer
        key = normalize_identity(identity, self.config.name_aliases)
        looked_up = safe_lookup(balancer.lookup, identity) if balancer.lookup is not None else None
        stats = merge_statistics(balancer.reference_index.get(key), looked_up)

        probability = compute_probability(stats, student_profile)
        if probability is None:
            return {"identity": identity, "key": key, "available": False}

        tier = classify(probability, stats.admit_rate, student_profile.gpa_weighted, identity, self.config)
        return {
            "identity": identity,
            "key": key,
            "available": True,
            "admit_rate": stats.admit_rate,
            "sat_25th": stats.sat_25th,
            "sat_75th": stats.sat_75th,
            "admission_probability": probability,
            "tier": tier.value,
        }


def build_recommendation_pool(
    candidates_seed: List[Candidate],
    student_profile: StudentProfile,
    constraints: Optional[Constraints] = None,
    per_tier_target: int = DEFAULT_PER_TIER_TARGET,
    source: Optional[CandidateSource] = None,
    lookup: Optional[StatisticsLookup] = None,
    config: Optional[EngineConfig] = None,
    reference: Optional[Iterable[ReferenceInstitution]] = None
) -> List[Candidate]:
    """
    Single entry point: return the balanced OutputPool.

    Returns:
        Reach block, then match block, then safety block; 3 x K candidates
        whenever enough distinct eligible candidates exist.
    """
    engine = RecommendationEngine(config=config, source=source, lookup=lookup, reference=reference)
    return engine.build_pool(candidates_seed, student_profile, constraints, per_tier_target).candidates
