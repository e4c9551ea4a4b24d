"""
Probability Engine

Turns a population admit rate into a personalized admission percentage for
one student. Layers: base rate, GPA versus the admitted population's central
GPA, course rigor, SAT position inside the institution's middle-50% band,
a hard cap for highly selective institutions, then clamping.
All logic is deterministic; missing inputs fall back to defaults.
"""

from typing import Optional

from .constants import (
    DEFAULT_GPA,
    DEFAULT_RIGOR,
    CENTRAL_GPA_BANDS,
    CENTRAL_GPA_FLOOR,
    GPA_BOOST_PER_POINT,
    GPA_PENALTY_PER_POINT,
    GPA_PENALTY_FLOOR,
    RIGOR_WEIGHT,
    SAT_FLOOR,
    SAT_MULTIPLIER_FLOOR,
    SAT_MULTIPLIER_AT_25TH,
    SAT_MULTIPLIER_AT_MID,
    SAT_MULTIPLIER_AT_75TH,
    SAT_MULTIPLIER_CEILING,
    SAT_OVERSHOOT_FOR_CEILING,
    HIGHLY_SELECTIVE_ADMIT_RATE,
    HIGHLY_SELECTIVE_PROBABILITY_CAP,
    MIN_PROBABILITY,
    MAX_PROBABILITY,
)
from .contracts import InstitutionStats, StudentProfile


def central_gpa_for(admit_rate: float) -> float:
    """Estimate the central weighted GPA of the admitted population."""
    for upper, gpa in CENTRAL_GPA_BANDS:
        if admit_rate < upper:
            return gpa
    return CENTRAL_GPA_FLOOR


def gpa_multiplier(student_gpa: Optional[float], admit_rate: float) -> float:
    gpa = DEFAULT_GPA if student_gpa is None else student_gpa
    delta = gpa - central_gpa_for(admit_rate)
    if delta >= 0:
        return 1 + delta * GPA_BOOST_PER_POINT
    return max(GPA_PENALTY_FLOOR, 1 + delta * GPA_PENALTY_PER_POINT)


def rigor_multiplier(rigor_score: Optional[float]) -> float:
    rigor = DEFAULT_RIGOR if rigor_score is None else max(0.0, min(100.0, rigor_score))
    return 1 + ((rigor - 50) / 100) * RIGOR_WEIGHT


def _lerp(low: float, high: float, ratio: float) -> float:
    ratio = max(0.0, min(1.0, ratio))
    return low + (high - low) * ratio


def sat_multiplier(student_sat: int, sat_25th: int, sat_75th: int) -> float:
    """
    Piecewise-linear SAT multiplier, monotone in the student's score.

    400 -> 0.3, 25th -> 0.7, midpoint -> 1.0, 75th -> 1.5,
    75th + 200 and above -> 2.5.
    """
    if sat_75th < sat_25th:
        sat_25th, sat_75th = sat_75th, sat_25th
    midpoint = (sat_25th + sat_75th) / 2

    if student_sat < sat_25th:
        span = sat_25th - SAT_FLOOR
        ratio = (student_sat - SAT_FLOOR) / span if span > 0 else 0.0
        return _lerp(SAT_MULTIPLIER_FLOOR, SAT_MULTIPLIER_AT_25TH, ratio)

    if student_sat <= midpoint:
        span = midpoint - sat_25th
        ratio = (student_sat - sat_25th) / span if span > 0 else 1.0
        return _lerp(SAT_MULTIPLIER_AT_25TH, SAT_MULTIPLIER_AT_MID, ratio)

    if student_sat <= sat_75th:
        span = sat_75th - midpoint
        ratio = (student_sat - midpoint) / span if span > 0 else 1.0
        return _lerp(SAT_MULTIPLIER_AT_MID, SAT_MULTIPLIER_AT_75TH, ratio)

    ratio = (student_sat - sat_75th) / SAT_OVERSHOOT_FOR_CEILING
    return _lerp(SAT_MULTIPLIER_AT_75TH, SAT_MULTIPLIER_CEILING, ratio)


def compute_probability(
    stats: Optional[InstitutionStats],
    profile: StudentProfile
) -> Optional[int]:
    """
    Compute the personalized admission probability.

    Args:
        stats: Authoritative statistics (admit rate required)
        profile: Student profile

    Returns:
        Integer percentage in [1, 95], or None when the admit rate is unknown
    """
    if stats is None or stats.admit_rate is None:
        return None

    admit_rate = stats.admit_rate
    odds = admit_rate * 100

    odds *= gpa_multiplier(profile.gpa_weighted, admit_rate)
    odds *= rigor_multiplier(profile.rigor_score)

    student_sat = profile.effective_sat_total
    if student_sat and stats.has_sat_bands:
        odds *= sat_multiplier(student_sat, stats.sat_25th, stats.sat_75th)

    if admit_rate < HIGHLY_SELECTIVE_ADMIT_RATE:
        odds = min(odds, HIGHLY_SELECTIVE_PROBABILITY_CAP)

    odds = max(MIN_PROBABILITY, min(MAX_PROBABILITY, odds))
    # Round half up
    return int(odds + 0.5)
