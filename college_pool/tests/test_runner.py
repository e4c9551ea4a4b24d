"""
Request-level orchestration with injected collaborators.
"""

from college_pool.logic.contracts import EngineConfig, StudentProfile
from college_pool.logic.runner import run_pool, run_pool_from_dict


def test_run_pool_from_dict(fake_source, fake_lookup):
    source = fake_source()
    result = run_pool_from_dict(
        {
            "profile": {"student_id": "s-9", "gpa_weighted": 3.6},
            "constraints": {"regions": ["West"]},
            "candidates": [{"identity": "Reed College", "tier": "match"}],
            "per_tier_target": 1,
        },
        source=source,
        lookup=fake_lookup(),
        config=EngineConfig(reference_fill_threshold=0),
    )

    assert result.student_id == "s-9"
    assert result.per_tier_target == 1
    assert [c.identity for c in result.candidates] == ["Reed College"]
    assert len(source.calls) == 1


def test_run_pool_generates_seed(make_candidate, fake_source, fake_lookup):
    source = fake_source(respond=lambda call: [make_candidate("Reed College")] if call == 1 else [])

    result = run_pool(
        StudentProfile(gpa_weighted=3.6),
        per_tier_target=1,
        generate=True,
        source=source,
        lookup=fake_lookup(),
        config=EngineConfig(reference_fill_threshold=0),
    )

    assert source.calls[0]["count"] == 3
    assert "Return EXACTLY 3 colleges" in source.calls[0]["instructions"]
    assert [c.identity for c in result.candidates] == ["Reed College"]
    assert result.candidates[0].origin == "generated"
