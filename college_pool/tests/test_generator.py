"""
Generative candidate source: payload parsing and failure handling.
"""

import json
from types import SimpleNamespace

import openai

from college_pool.ai.generator import (
    OpenAICandidateSource,
    parse_school,
    parse_schools_payload,
    parse_testing_policy,
)


def _fake_client(content=None, error=None):
    calls = []

    def create(**kwargs):
        calls.append(kwargs)
        if error is not None:
            raise error
        message = SimpleNamespace(content=content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])

    client = SimpleNamespace(chat=SimpleNamespace(completions=SimpleNamespace(create=create)))
    return client, calls


def test_testing_policy_text():
    assert parse_testing_policy("Test Optional") == "optional"
    assert parse_testing_policy("test-blind") == "blind"
    assert parse_testing_policy("Required") == "required"
    assert parse_testing_policy("Test Flexible") == "optional"
    assert parse_testing_policy("unknown") is None
    assert parse_testing_policy(None) is None


def test_parse_school_fields():
    candidate = parse_school({
        "name": " Whitman College ",
        "url": "whitman.edu",
        "type": "Safety",
        "region": "west",
        "campusSize": "Micro",
        "enrollment": "1,500",
        "testPolicy": "Test Optional",
        "acceptanceProbability": "88%",
        "matchReasoning": "Strong fit.",
    })

    assert candidate.identity == "Whitman College"
    assert candidate.tier == "safety"
    assert candidate.region == "West"
    assert candidate.size_category == "Micro"
    assert candidate.enrollment == 1500
    assert candidate.testing_policy == "optional"
    assert candidate.admission_probability == 88
    assert candidate.origin == "generated"


def test_parse_school_clamps_and_defaults():
    candidate = parse_school({"name": "Odd College", "type": "dream", "acceptanceProbability": 120, "enrollment": -5})
    assert candidate.tier == "match"
    assert candidate.admission_probability == 95
    assert candidate.enrollment == 0
    assert candidate.region is None

    assert parse_school({"name": "Low College", "acceptanceProbability": 0}).admission_probability == 1


def test_malformed_entries_are_skipped():
    content = json.dumps({"schools": [{"name": "Reed College"}, {"url": "nameless.edu"}, "junk", {"name": "  "}]})
    assert [c.identity for c in parse_schools_payload(content)] == ["Reed College"]
    assert parse_schools_payload(json.dumps({"colleges": []})) == []


def test_request_candidates_truncates_to_count():
    content = json.dumps({"schools": [{"name": f"College {i}"} for i in range(5)]})
    client, calls = _fake_client(content)
    source = OpenAICandidateSource(client=client, model="test-model")

    candidates = source.request_candidates("Return 3 colleges", "Student: GPA 3.8", 3)

    assert [c.identity for c in candidates] == ["College 0", "College 1", "College 2"]
    assert calls[0]["model"] == "test-model"
    assert calls[0]["response_format"] == {"type": "json_object"}
    assert "Student: GPA 3.8" in calls[0]["messages"][1]["content"]


def test_invalid_json_returns_empty():
    client, _ = _fake_client("not json")
    assert OpenAICandidateSource(client=client).request_candidates("x", "y", 3) == []


def test_api_error_returns_empty():
    client, _ = _fake_client(error=openai.OpenAIError("rate limited"))
    assert OpenAICandidateSource(client=client).request_candidates("x", "y", 3) == []


def test_missing_api_key_returns_empty(monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    source = OpenAICandidateSource()
    assert source.client is None
    assert source.request_candidates("x", "y", 3) == []


def test_zero_count_skips_the_call():
    client, calls = _fake_client(json.dumps({"schools": []}))
    assert OpenAICandidateSource(client=client).request_candidates("x", "y", 0) == []
    assert calls == []
