"""
Pool Balancing Logic Module

Provides the deterministic correction, scoring, classification and balancing
engine for reach / match / safety college pools.

Import the engine from `college_pool.logic.engine` (it depends on the
prompt builder, which imports this package).
"""

from .contracts import (
    StudentProfile,
    Constraints,
    Candidate,
    InstitutionStats,
    ReferenceInstitution,
    EngineConfig,
    PoolResult,
    CandidateSource,
    StatisticsLookup,
)
from .constants import Tier, Region, SizeCategory, TestingPolicy, CandidateOrigin

__all__ = [
    # Contracts
    "StudentProfile",
    "Constraints",
    "Candidate",
    "InstitutionStats",
    "ReferenceInstitution",
    "EngineConfig",
    "PoolResult",

    # Collaborator interfaces
    "CandidateSource",
    "StatisticsLookup",

    # Enums
    "Tier",
    "Region",
    "SizeCategory",
    "TestingPolicy",
    "CandidateOrigin",
]
