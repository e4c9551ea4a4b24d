import pytest

from college_pool.logic.constants import Tier
from college_pool.logic.classifier import (
    tier_for_probability,
    classify,
    classify_candidate,
    classify_all,
    filter_by_tier,
    get_tier_counts,
)


@pytest.mark.parametrize("probability,tier", [
    (95, Tier.SAFETY),
    (80, Tier.SAFETY),
    (79, Tier.MATCH),
    (30, Tier.MATCH),
    (29, Tier.REACH),
    (1, Tier.REACH),
])
def test_provisional_tier(probability, tier):
    assert tier_for_probability(probability) == tier


def test_most_selective_with_modest_gpa_is_reach(config):
    assert classify(85, 0.04, 3.5, "Stanford University", config) == Tier.REACH
    assert classify(85, 0.04, 3.7, "Harvard", config) == Tier.REACH


def test_selective_gpa_cutoff_is_3_7(config):
    # admit rate above the forced-reach line isolates the GPA rule
    assert classify(85, 0.30, 3.7, "Stanford University", config) == Tier.REACH
    assert classify(85, 0.30, 3.8, "Stanford University", config) == Tier.MATCH


def test_low_admit_rate_is_reach(config):
    assert classify(85, 0.20, 4.2, "Some College", config) == Tier.REACH


def test_safety_needs_high_admit_rate(config):
    assert classify(85, 0.45, 4.0, "Some College", config) == Tier.MATCH
    assert classify(85, 0.50, 4.0, "Some College", config) == Tier.MATCH


def test_safety_needs_strong_gpa(config):
    assert classify(85, 0.70, 3.4, "Some College", config) == Tier.MATCH
    assert classify(85, 0.70, 3.9, "Some College", config) == Tier.SAFETY


def test_missing_gpa_uses_default(config):
    assert classify(85, 0.70, None, "Some College", config) == Tier.MATCH


def test_most_selective_never_safety(config):
    assert classify(90, 0.90, 4.2, "Princeton", config) == Tier.MATCH


def test_flagships_capped_at_match(config):
    assert classify(90, 0.60, 4.2, "University of Florida", config) == Tier.MATCH
    assert classify(90, 0.60, 4.2, "UT Austin", config) == Tier.MATCH
    assert classify(90, 0.60, 4.2, "University of Utah", config) == Tier.SAFETY


def test_low_probability_is_reach(config):
    assert classify(25, 0.80, 3.0, "Some College", config) == Tier.REACH
    assert classify(50, 0.80, 3.0, "Some College", config) == Tier.MATCH


def test_unscored_candidate_passes_through(make_candidate, config):
    candidate = make_candidate("Some College", tier="safety", probability=90)
    assert classify_candidate(candidate, 3.9, config) is candidate


def test_scored_candidate_gets_tier(make_candidate, config):
    candidate = make_candidate("Some College", tier="safety", probability=90, admit_rate=0.2)
    assert classify_candidate(candidate, 3.9, config).tier == "reach"


def test_counts_and_filtering(make_candidate, config):
    pool = classify_all([
        make_candidate("A College", tier="reach"),
        make_candidate("B College", tier="match"),
        make_candidate("C College", tier="match"),
    ], 3.5, config)
    assert get_tier_counts(pool) == {"reach": 1, "match": 2, "safety": 0}
    assert [c.identity for c in filter_by_tier(pool, Tier.MATCH)] == ["B College", "C College"]
