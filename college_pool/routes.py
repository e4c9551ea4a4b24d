"""
Pool API Routes

Exposes the pool balancing engine via REST API.
Endpoints: POST /recommendations/pool, GET /recommendations/school,
GET /recommendations/health
"""

from typing import List, Dict, Any, Optional
from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from db import get_db
from .ai.generator import OpenAICandidateSource
from .logic.constants import DEFAULT_PER_TIER_TARGET, ENGINE_VERSION
from .logic.contracts import Candidate, Constraints, StudentProfile
from .logic.engine import RecommendationEngine
from .logic.runner import load_reference, run_pool
from .logic.scorecard import ScorecardLookup


router = APIRouter(prefix="/recommendations", tags=["recommendations"])


# =============================================================================
# COLLABORATORS
# =============================================================================

def get_candidate_source():
    return OpenAICandidateSource()


def get_statistics_lookup():
    return ScorecardLookup()


# =============================================================================
# REQUEST/RESPONSE SCHEMAS
# =============================================================================

class PoolRequest(BaseModel):
    """Request body for the pool endpoint."""
    student_profile: StudentProfile = Field(
        default_factory=StudentProfile,
        description="Student's academic profile"
    )
    constraints: Constraints = Field(
        default_factory=Constraints,
        description="Hard filters on size, region and testing policy"
    )
    candidates: List[Candidate] = Field(
        default_factory=list,
        description="Seed candidates; fields other than identity are advisory"
    )
    per_tier_target: int = Field(
        default=DEFAULT_PER_TIER_TARGET,
        ge=1,
        le=10,
        description="Number of schools wanted per tier"
    )
    generate_seed: bool = Field(
        default=False,
        description="Ask the generative source for the seed when no candidates are sent"
    )


# =============================================================================
# ENDPOINTS
# =============================================================================

@router.post("/pool", summary="Build a balanced reach/match/safety pool")
def build_pool(
    request: PoolRequest,
    db_session=Depends(get_db),
    source=Depends(get_candidate_source),
    lookup=Depends(get_statistics_lookup)
):
    """
    Build a balanced college list for one student.

    **Request Body:**
    - `student_profile`: GPA, rigor, test scores and free-text context
    - `constraints`: Allowed sizes, regions and testing policies
    - `candidates`: Optional seed candidates
    - `per_tier_target`: Schools per tier (default: 3)
    - `generate_seed`: Generate the seed when none is sent

    **Response:**
    - Reach, match and safety blocks of `per_tier_target` schools each
    - Corrected metadata and a tier-consistent displayed probability
    - Warnings when fewer schools could be found
    """
    try:
        with db_session as db:
            result = run_pool(
                request.student_profile,
                request.constraints,
                per_tier_target=request.per_tier_target,
                seed=request.candidates,
                generate=request.generate_seed,
                db=db,
                source=source,
                lookup=lookup,
            )

        return {
            "request_id": result.request_id,
            "student_id": result.student_id,
            "summary": {
                "per_tier_target": result.per_tier_target,
                "counts_by_tier": result.counts_by_tier,
                "total_candidates_seen": result.total_candidates_seen,
                "rounds_used": result.rounds_used,
                "backfilled_count": result.backfilled_count,
                "processing_time_ms": result.processing_time_ms,
            },
            "schools": [_serialize_candidate(c) for c in result.candidates],
            "warnings": result.warnings,
            "engine_version": result.engine_version,
        }

    except Exception as e:
        import traceback
        return JSONResponse(
            status_code=500,
            content={"error": str(e), "trace": traceback.format_exc()}
        )


@router.get("/school", summary="Score one school for a student")
def score_school(
    q: str = Query(..., min_length=2, description="School name or common short form"),
    gpa_weighted: Optional[float] = Query(None, ge=0.0, le=5.0),
    rigor_score: Optional[float] = Query(None, ge=0.0, le=100.0),
    sat_total: Optional[int] = Query(None, ge=400, le=1600),
    db_session=Depends(get_db),
    lookup=Depends(get_statistics_lookup)
):
    """
    Probability and tier of a single named school.

    `available` is false when no admit rate is known for the school.
    """
    try:
        with db_session as db:
            reference = load_reference(db)

        profile = StudentProfile(gpa_weighted=gpa_weighted, rigor_score=rigor_score, sat_total=sat_total)
        engine = RecommendationEngine(reference=reference, lookup=lookup)
        return engine.score_single_institution(q, profile)

    except Exception as e:
        import traceback
        return JSONResponse(
            status_code=500,
            content={"error": str(e), "trace": traceback.format_exc()}
        )


def _serialize_candidate(candidate: Candidate) -> Dict[str, Any]:
    """Convert a Candidate to the public JSON shape."""
    return {
        "name": candidate.identity,
        "url": candidate.reference_url,
        "tier": candidate.tier,
        "region": candidate.region,
        "size_category": candidate.size_category,
        "enrollment": candidate.enrollment,
        "testing_policy": candidate.testing_policy,
        "admission_probability": candidate.display_probability,
        "computed_probability": candidate.admission_probability,
        "admit_rate": candidate.admit_rate,
        "rationale": candidate.rationale,
        "origin": candidate.origin,
        "backfilled": candidate.backfilled,
    }


# =============================================================================
# HEALTH CHECK
# =============================================================================

@router.get("/health", summary="Pool engine health check")
def health_check():
    """Check if the pool engine is operational."""
    return {"status": "ok", "engine": "college_pool", "version": ENGINE_VERSION}
