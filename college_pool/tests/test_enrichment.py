"""
Enrichment: reference statistics, concurrent lookups, failure handling.
"""

import time

import requests

from college_pool.logic.contracts import EngineConfig, InstitutionStats, ReferenceInstitution
from college_pool.logic.enrichment import (
    enrich_and_score,
    fetch_statistics,
    merge_statistics,
)
from college_pool.logic.reference_data import build_reference_index


def _reference(name, admit_rate):
    return ReferenceInstitution(name=name, state="OH", enrollment=3000, admit_rate=admit_rate)


def test_merge_prefers_lookup_fields():
    merged = merge_statistics(
        _reference("A College", 0.6),
        InstitutionStats(admit_rate=0.55, sat_25th=1100, sat_75th=1300),
    )
    assert merged == InstitutionStats(admit_rate=0.55, sat_25th=1100, sat_75th=1300)

    partial = merge_statistics(_reference("A College", 0.6), InstitutionStats(sat_25th=1100, sat_75th=1300))
    assert partial.admit_rate == 0.6
    assert merge_statistics(None, None) is None


def test_lookup_statistics_score_candidate(make_candidate, profile, config, fake_lookup):
    lookup = fake_lookup({"Denison University": InstitutionStats(admit_rate=0.17, sat_25th=1300, sat_75th=1450)})
    candidate = make_candidate("Denison University", tier="safety", probability=90)

    [scored] = enrich_and_score([candidate], profile, config, lookup=lookup)

    assert scored.is_scored
    assert scored.admit_rate == 0.17
    assert scored.sat_25th == 1300
    assert scored.tier == "reach"
    # 17 x 0.94 (GPA) x 1.1 (rigor) x 1.167 (SAT) = 20.5
    assert scored.admission_probability == 21


def test_reference_used_when_lookup_fails(make_candidate, profile, config, fake_lookup):
    index = build_reference_index([_reference("Kenyon College", 0.7)])
    lookup = fake_lookup(error=requests.ConnectionError("boom"))

    [scored] = enrich_and_score([make_candidate("Kenyon College")], profile, config, index, lookup)

    assert scored.is_scored
    assert scored.admit_rate == 0.7
    assert scored.sat_25th is None


def test_no_statistics_keeps_source_values(make_candidate, profile, config, fake_lookup):
    candidate = make_candidate("Unknown College", tier="reach", probability=12)
    [kept] = enrich_and_score([candidate], profile, config, lookup=fake_lookup())
    assert kept == candidate


def test_scored_candidates_are_not_looked_up_again(make_candidate, profile, config, fake_lookup):
    lookup = fake_lookup()
    scored = make_candidate("A College", probability=40, admit_rate=0.5, is_scored=True)
    enrich_and_score([scored, make_candidate("B College")], profile, config, lookup=lookup)
    assert lookup.calls == ["B College"]


def test_duplicate_keys_are_looked_up_once(make_candidate, profile, config, fake_lookup):
    lookup = fake_lookup()
    enrich_and_score([make_candidate("MIT"), make_candidate("mit")], profile, config, lookup=lookup)
    assert lookup.calls == ["MIT"]


def test_budget_abandons_slow_lookups(fake_lookup):
    config = EngineConfig(enrichment_budget_s=0.05)
    lookup = fake_lookup({"Slow College": InstitutionStats(admit_rate=0.5)}, delay=0.5)

    results = fetch_statistics({"slow college": "Slow College"}, lookup, config)

    assert results == {}


class SlowForOne:
    """Answers every name at once except `slow_name`, which takes `delay` seconds."""

    def __init__(self, slow_name, delay):
        self.slow_name = slow_name
        self.delay = delay

    def lookup(self, identity):
        if identity == self.slow_name:
            time.sleep(self.delay)
        return InstitutionStats(admit_rate=0.5)


def test_lookup_over_its_timeout_is_dropped(fake_lookup):
    config = EngineConfig(lookup_timeout_s=0.1, enrichment_budget_s=10)
    lookup = fake_lookup({"Slow College": InstitutionStats(admit_rate=0.5)}, delay=1.0)

    started = time.monotonic()
    results = fetch_statistics({"slow college": "Slow College"}, lookup, config)

    assert results == {}
    assert time.monotonic() - started < 0.9


def test_timeout_applies_per_lookup():
    config = EngineConfig(lookup_timeout_s=0.2, enrichment_budget_s=10)
    lookup = SlowForOne("Slow College", delay=1.0)

    results = fetch_statistics(
        {"fast college": "Fast College", "slow college": "Slow College"}, lookup, config
    )

    assert list(results) == ["fast college"]


def test_timed_out_lookup_falls_back_to_reference(make_candidate, profile, fake_lookup):
    config = EngineConfig(lookup_timeout_s=0.1, enrichment_budget_s=10)
    index = build_reference_index([_reference("Kenyon College", 0.7)])
    lookup = fake_lookup({"Kenyon College": InstitutionStats(admit_rate=0.2, sat_25th=1300, sat_75th=1450)}, delay=1.0)

    [scored] = enrich_and_score([make_candidate("Kenyon College")], profile, config, index, lookup)

    assert scored.admit_rate == 0.7
    assert scored.sat_25th is None
