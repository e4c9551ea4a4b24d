"""
Pool Balancer

State machine that turns a raw candidate seed into a balanced pool:

    INITIAL_POOL -> ENRICHED -> FILTERED -> GAP_CHECK
        -> REQUEST_MORE -> MERGE -> GAP_CHECK ...
        -> ASSEMBLE -> DONE

Fill rounds are sequential and bounded. A round that yields no new usable
candidate ends the loop early; final assembly always runs.
"""

import logging
import time
from enum import Enum
from typing import Dict, Iterable, List, Optional, Sequence, Set

from ..ai.prompt_builder import build_fill_request, build_student_summary
from .classifier import get_tier_counts
from .constants import TIER_ORDER, TIER_MIDPOINTS, CandidateOrigin
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
from .corrector import correct_all
from .deduplicator import deduplicate, exclude_known
from .display import normalize_display
from .enrichment import enrich_and_score
from .filter_gate import apply_hard_filters
from .normalizer import normalize_identity
from .output_assembler import assemble_pool, effective_probability
from .reference_data import load_reference_dataset, build_reference_index

logger = logging.getLogger(__name__)


class BalancerState(str, Enum):
    INITIAL_POOL = "INITIAL_POOL"
    ENRICHED = "ENRICHED"
    FILTERED = "FILTERED"
    GAP_CHECK = "GAP_CHECK"
    REQUEST_MORE = "REQUEST_MORE"
    MERGE = "MERGE"
    ASSEMBLE = "ASSEMBLE"
    DONE = "DONE"


class PoolBalancer:
    """
    Runs one balancing pass per call to `run`.

    Collaborators are injected; without a source no fill rounds happen and
    without a lookup only reference statistics are used.
    """

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        reference: Optional[Iterable[ReferenceInstitution]] = None,
        source: Optional[CandidateSource] = None,
        lookup: Optional[StatisticsLookup] = None
    ):
        self.config = config or EngineConfig()
        self.reference = tuple(reference) if reference is not None else load_reference_dataset()
        self.reference_index = build_reference_index(self.reference, self.config.name_aliases)
        self.source = source
        self.lookup = lookup

    # =========================================================================
    # HELPERS
    # =========================================================================

    def _key(self, candidate: Candidate) -> str:
        return normalize_identity(candidate.identity, self.config.name_aliases)

    def _transition(self, state: BalancerState, pool: Sequence[Candidate]) -> None:
        logger.info(f"[Balancer] {state.value}: {len(pool)} candidates {get_tier_counts(pool)}")

    def _prepare(
        self,
        candidates: List[Candidate],
        profile: StudentProfile,
        constraints: Constraints
    ) -> List[Candidate]:
        """Correct, deduplicate, enrich and filter a batch."""
        corrected = deduplicate(
            correct_all(candidates, self.config, self.reference_index),
            self.config.name_aliases,
        )
        enriched = enrich_and_score(
            corrected, profile, self.config, self.reference_index, self.lookup
        )
        return apply_hard_filters(enriched, constraints)

    def deficits(self, pool: Sequence[Candidate], per_tier_target: int) -> Dict[str, int]:
        """How many more to ask for per deficient tier: (K - count) + padding."""
        counts = get_tier_counts(pool)
        return {
            tier: (per_tier_target - count) + self.config.fill_padding
            for tier, count in counts.items()
            if count < per_tier_target
        }

    # =========================================================================
    # REFERENCE FILL
    # =========================================================================

    def reference_candidates(
        self,
        known: Set[str],
        profile: StudentProfile,
        constraints: Constraints,
        per_tier_target: int
    ) -> List[Candidate]:
        """
        Reference institutions to add to a thin eligible pool.

        Entries whose key is already known or that fail the constraints are
        skipped. The rest are scored for this student and up to K per tier
        are kept, closest to the tier midpoint first.
        """
        raw = [
            Candidate(
                identity=institution.name,
                reference_url=institution.url,
                enrollment=institution.enrollment,
                testing_policy=institution.testing_policy,
                origin=CandidateOrigin.REFERENCE.value,
            )
            for institution in self.reference
        ]
        fresh = exclude_known(raw, known, self.config.name_aliases)
        corrected = deduplicate(
            correct_all(fresh, self.config, self.reference_index),
            self.config.name_aliases,
        )
        eligible = apply_hard_filters(corrected, constraints)
        scored = [
            c for c in enrich_and_score(eligible, profile, self.config, self.reference_index)
            if c.is_scored
        ]

        selected: List[Candidate] = []
        for tier in TIER_ORDER:
            midpoint = TIER_MIDPOINTS[tier.value]
            members = [c for c in scored if c.tier == tier]
            members.sort(key=lambda c: abs(effective_probability(c) - midpoint))
            selected.extend(members[:per_tier_target])
        return selected

    # =========================================================================
    # STATE MACHINE
    # =========================================================================

    def run(
        self,
        seed: List[Candidate],
        profile: StudentProfile,
        constraints: Constraints,
        per_tier_target: int
    ) -> PoolResult:
        """
        Build the balanced pool.

        Args:
            seed: Raw candidates (generative source output or caller-provided)
            profile: Student profile
            constraints: Hard user filters
            per_tier_target: K

        Returns:
            PoolResult with 3 x K candidates when enough eligible ones exist
        """
        start_time = time.perf_counter()
        aliases = self.config.name_aliases
        warnings: List[str] = []
        seen_names: List[str] = []
        seen_keys = set()

        def remember(candidates: Iterable[Candidate]) -> None:
            for candidate in candidates:
                key = self._key(candidate)
                if key and key not in seen_keys:
                    seen_keys.add(key)
                    seen_names.append(candidate.identity)

        # INITIAL_POOL
        remember(seed)
        pool = deduplicate(correct_all(seed, self.config, self.reference_index), aliases)
        self._transition(BalancerState.INITIAL_POOL, pool)

        # ENRICHED
        pool = enrich_and_score(pool, profile, self.config, self.reference_index, self.lookup)
        self._transition(BalancerState.ENRICHED, pool)

        # FILTERED
        pool = apply_hard_filters(pool, constraints)

        # Thin eligible pool: top up from the reference dataset
        threshold = self.config.reference_fill_threshold
        if threshold is None:
            threshold = per_tier_target * len(TIER_ORDER)
        if len(pool) < threshold:
            added = self.reference_candidates(seen_keys, profile, constraints, per_tier_target)
            logger.info(f"[Balancer] Thin pool ({len(pool)} < {threshold}), added {len(added)} reference candidates")
            remember(added)
            pool = pool + added
        self._transition(BalancerState.FILTERED, pool)

        rounds_used = 0
        student_summary = build_student_summary(profile)

        while True:
            # GAP_CHECK
            deficits = self.deficits(pool, per_tier_target)
            if not deficits:
                break
            if self.source is None or rounds_used >= self.config.max_fill_rounds:
                break

            # REQUEST_MORE
            rounds_used += 1
            instructions = build_fill_request(deficits, seen_names, constraints, self.config.test_required)
            logger.info(f"[Balancer] {BalancerState.REQUEST_MORE.value} round {rounds_used}: {deficits}")
            try:
                batch = self.source.request_candidates(
                    instructions, student_summary, sum(deficits.values())
                )
            except Exception as e:
                logger.warning(f"[Balancer] Candidate source failed in round {rounds_used}: {e}")
                batch = []

            batch = [c.model_copy(update={"origin": CandidateOrigin.GENERATED.value}) for c in batch]
            fresh = exclude_known(batch, {self._key(c) for c in pool}, aliases)
            remember(batch)
            usable = self._prepare(fresh, profile, constraints)

            if not usable:
                logger.info(f"[Balancer] Round {rounds_used} yielded no usable candidates, stopping")
                break

            # MERGE
            pool = deduplicate(correct_all(pool + usable, self.config, self.reference_index), aliases)
            self._transition(BalancerState.MERGE, pool)

        # ASSEMBLE
        assembled = assemble_pool(pool, per_tier_target, aliases)
        final = normalize_display(assembled, aliases)
        self._transition(BalancerState.DONE, final)

        expected = per_tier_target * len(TIER_ORDER)
        if len(final) < expected:
            warnings.append(
                f"Only {len(final)} of {expected} recommendations could be filled "
                f"from {len(pool)} eligible candidates."
            )
        counts = get_tier_counts(final)
        for tier in TIER_ORDER:
            if counts[tier.value] < per_tier_target:
                warnings.append(f"Tier '{tier.value}' has {counts[tier.value]} of {per_tier_target} candidates.")

        return PoolResult(
            student_id=profile.student_id,
            candidates=final,
            per_tier_target=per_tier_target,
            counts_by_tier=counts,
            total_candidates_seen=len(seen_names),
            rounds_used=rounds_used,
            backfilled_count=sum(1 for c in final if c.backfilled),
            processing_time_ms=round((time.perf_counter() - start_time) * 1000, 2),
            warnings=warnings,
        )
