"""
Data Contracts for the Pool Balancing Engine

Defines Pydantic models for the engine inputs (StudentProfile, Constraints,
candidate seeds), the per-request Candidate record, authoritative statistics,
the reference dataset entries, the injected EngineConfig and the PoolResult
output. These contracts are the API boundary for the engine.
"""

from typing import List, Optional, Dict, Protocol
from pydantic import BaseModel, Field

from .constants import (
    Tier,
    Region,
    SizeCategory,
    TestingPolicy,
    CandidateOrigin,
    NAME_ALIASES,
    INSTITUTION_STATES,
    TEST_REQUIRED_INSTITUTIONS,
    MOST_SELECTIVE_INSTITUTIONS,
    MATCH_CAPPED_FLAGSHIPS,
    DEFAULT_PER_TIER_TARGET,
    MAX_FILL_ROUNDS,
    FILL_PADDING,
    MAX_LOOKUP_WORKERS,
    LOOKUP_TIMEOUT_SECONDS,
    ENRICHMENT_BUDGET_SECONDS,
    ENGINE_VERSION,
)


# =============================================================================
# INPUT CONTRACTS
# =============================================================================

class StudentProfile(BaseModel):
    """
    Read-only academic profile of the student being advised.
    Every field is optional; the probability engine falls back to defaults.
    """
    student_id: Optional[str] = None

    gpa_weighted: Optional[float] = Field(default=None, ge=0.0, le=5.0)
    rigor_score: Optional[float] = Field(default=None, ge=0.0, le=100.0)

    # Standardized tests
    sat_total: Optional[int] = Field(default=None, ge=400, le=1600)
    sat_reading: Optional[int] = Field(default=None, ge=200, le=800)
    sat_math: Optional[int] = Field(default=None, ge=200, le=800)
    act_composite: Optional[int] = Field(default=None, ge=1, le=36)

    # Free-text context forwarded to the generative source
    school_context: str = ""
    academic_summary: str = ""

    @property
    def effective_sat_total(self) -> Optional[int]:
        """SAT total, derived from section scores when only those were given."""
        if self.sat_total:
            return self.sat_total
        if self.sat_reading and self.sat_math:
            return self.sat_reading + self.sat_math
        return None


class Constraints(BaseModel):
    """
    Hard user filters. An empty list leaves that dimension open.
    """
    sizes: List[SizeCategory] = Field(default_factory=list)
    regions: List[Region] = Field(default_factory=list)
    policies: List[TestingPolicy] = Field(default_factory=list)

    class Config:
        use_enum_values = True

    @property
    def is_open(self) -> bool:
        return not (self.sizes or self.regions or self.policies)


# =============================================================================
# CANDIDATE RECORDS
# =============================================================================

class Candidate(BaseModel):
    """
    A proposed institution recommendation.

    Created per request, corrected and scored stage by stage, discarded after
    the response. Fields reported by the generative source are advisory until
    the corrector and classifier have run.
    """
    identity: str
    reference_url: str = ""
    tier: Tier = Tier.MATCH
    region: Optional[Region] = None
    size_category: Optional[SizeCategory] = None
    enrollment: int = Field(default=0, ge=0)
    testing_policy: Optional[TestingPolicy] = None
    admission_probability: Optional[int] = Field(default=None, ge=1, le=95)
    display_probability: Optional[int] = None
    rationale: str = ""

    # Authoritative statistics attached during enrichment
    admit_rate: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    sat_25th: Optional[int] = None
    sat_75th: Optional[int] = None

    # Bookkeeping
    origin: CandidateOrigin = CandidateOrigin.SEED
    is_scored: bool = False
    backfilled: bool = False

    class Config:
        use_enum_values = True


class InstitutionStats(BaseModel):
    """Authoritative admissions statistics for one institution."""
    admit_rate: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    sat_25th: Optional[int] = None   # reading + math, 25th percentile
    sat_75th: Optional[int] = None   # reading + math, 75th percentile

    @property
    def has_sat_bands(self) -> bool:
        return bool(self.sat_25th and self.sat_75th)


class ReferenceInstitution(BaseModel):
    """Entry of the curated reference dataset (trusted attributes)."""
    name: str
    url: str = ""
    state: str
    enrollment: int = Field(ge=0)
    admit_rate: float = Field(ge=0.0, le=1.0)
    testing_policy: TestingPolicy = TestingPolicy.OPTIONAL

    class Config:
        use_enum_values = True


# =============================================================================
# ENGINE CONFIGURATION
# =============================================================================

class EngineConfig(BaseModel):
    """
    Immutable engine configuration: curated tables plus tuning knobs.
    Injected into every stage instead of reading module globals.
    """
    name_aliases: Dict[str, str] = Field(default_factory=lambda: dict(NAME_ALIASES))
    institution_states: Dict[str, str] = Field(default_factory=lambda: dict(INSTITUTION_STATES))
    test_required: List[str] = Field(default_factory=lambda: list(TEST_REQUIRED_INSTITUTIONS))
    most_selective: List[str] = Field(default_factory=lambda: list(MOST_SELECTIVE_INSTITUTIONS))
    match_capped_flagships: List[str] = Field(default_factory=lambda: list(MATCH_CAPPED_FLAGSHIPS))

    max_fill_rounds: int = Field(default=MAX_FILL_ROUNDS, ge=0)
    fill_padding: int = Field(default=FILL_PADDING, ge=0)
    reference_fill_threshold: Optional[int] = None  # defaults to 3 x K

    max_lookup_workers: int = Field(default=MAX_LOOKUP_WORKERS, ge=1)
    lookup_timeout_s: float = Field(default=LOOKUP_TIMEOUT_SECONDS, gt=0)
    enrichment_budget_s: float = Field(default=ENRICHMENT_BUDGET_SECONDS, gt=0)

    class Config:
        frozen = True


# =============================================================================
# COLLABORATOR INTERFACES
# =============================================================================

class CandidateSource(Protocol):
    """Generative source of candidate institutions (untrusted)."""

    def request_candidates(
        self,
        instructions: str,
        student_summary: str,
        count: int
    ) -> List[Candidate]:
        """Return up to `count` candidates; an empty list on any failure."""
        ...


class StatisticsLookup(Protocol):
    """Authoritative statistics service."""

    def lookup(self, identity: str) -> Optional[InstitutionStats]:
        """Return statistics for an institution, or None when unavailable."""
        ...


# =============================================================================
# OUTPUT CONTRACTS
# =============================================================================

class PoolResult(BaseModel):
    """
    Output of one balancing run.
    `candidates` is the OutputPool; the rest is diagnostics.
    """
    request_id: Optional[str] = None
    student_id: Optional[str] = None

    candidates: List[Candidate] = Field(default_factory=list)
    per_tier_target: int = DEFAULT_PER_TIER_TARGET
    counts_by_tier: Dict[str, int] = Field(default_factory=dict)

    total_candidates_seen: int = 0
    rounds_used: int = 0
    backfilled_count: int = 0

    processing_time_ms: Optional[float] = None
    engine_version: str = ENGINE_VERSION

    warnings: List[str] = Field(default_factory=list)
