"""
College Scorecard lookup against a fake HTTP session.
"""

import requests

from college_pool.logic.scorecard import (
    ADMIT_RATE_FIELD,
    NAME_FIELD,
    SAT_25_MATH,
    SAT_25_READING,
    SAT_75_MATH,
    SAT_75_READING,
    SCORECARD_URL,
    ScorecardLookup,
    best_match,
    stats_from_record,
)


class FakeResponse:
    def __init__(self, status_code=200, payload=None):
        self.status_code = status_code
        self.payload = payload

    def json(self):
        if self.payload is None:
            raise ValueError("no body")
        return self.payload


class FakeSession:
    """Answers by the searched name; unknown names get an empty result list."""

    def __init__(self, by_name=None, response=None, error=None):
        self.by_name = by_name or {}
        self.response = response
        self.error = error
        self.requests = []

    def get(self, url, params=None, timeout=None):
        self.requests.append(params)
        if self.error is not None:
            raise self.error
        if self.response is not None:
            return self.response
        return FakeResponse(payload={"results": self.by_name.get(params[NAME_FIELD], [])})


def _record(name, admit_rate=0.4):
    return {
        NAME_FIELD: name,
        ADMIT_RATE_FIELD: admit_rate,
        SAT_25_READING: 600,
        SAT_25_MATH: 620,
        SAT_75_READING: 700,
        SAT_75_MATH: 740,
    }


def test_stats_from_record_combines_sections():
    stats = stats_from_record(_record("Reed College"))
    assert stats.admit_rate == 0.4
    assert stats.sat_25th == 1220
    assert stats.sat_75th == 1440


def test_stats_from_record_rejects_bad_values():
    stats = stats_from_record({ADMIT_RATE_FIELD: 1.7, SAT_25_READING: 600, SAT_25_MATH: 600})
    assert stats.admit_rate is None
    assert stats.sat_25th == 1200
    assert stats.sat_75th is None
    assert stats_from_record({NAME_FIELD: "Empty College"}) is None


def test_best_match_prefers_exact_name():
    results = [_record("Reed College Online"), _record("reed college", 0.35)]
    assert best_match(results, "Reed College")[ADMIT_RATE_FIELD] == 0.35
    assert best_match(results, "Reed")[NAME_FIELD] == "Reed College Online"
    assert best_match([], "Reed") is None


def test_lookup_tries_variants():
    session = FakeSession({"Oregon University": [_record("Oregon University", 0.83)]})
    lookup = ScorecardLookup(api_key="key", session=session)

    stats = lookup.lookup("University of Oregon")

    assert stats.admit_rate == 0.83
    assert [p[NAME_FIELD] for p in session.requests] == ["University of Oregon", "Oregon University"]
    assert session.requests[0]["api_key"] == "key"


def test_lookup_without_key_is_disabled(monkeypatch):
    monkeypatch.delenv("COLLEGE_SCORECARD_API_KEY", raising=False)
    session = FakeSession()
    lookup = ScorecardLookup(session=session)

    assert not lookup.enabled
    assert lookup.lookup("Reed College") is None
    assert session.requests == []


def test_network_error_returns_none():
    lookup = ScorecardLookup(api_key="key", session=FakeSession(error=requests.Timeout("slow")))
    assert lookup.lookup("Reed College") is None


def test_http_error_returns_none():
    lookup = ScorecardLookup(api_key="key", session=FakeSession(response=FakeResponse(status_code=429)))
    assert lookup.lookup("Reed College") is None


def test_invalid_body_returns_none():
    lookup = ScorecardLookup(api_key="key", session=FakeSession(response=FakeResponse(payload=None)))
    assert lookup.lookup("Reed College") is None


def test_default_lookup_uses_a_request_per_call(monkeypatch):
    calls = []

    def fake_get(url, params=None, timeout=None):
        calls.append((url, params[NAME_FIELD], timeout))
        return FakeResponse(payload={"results": [_record("Reed College", 0.36)]})

    monkeypatch.setattr(requests, "get", fake_get)
    lookup = ScorecardLookup(api_key="key", timeout=2.5)

    assert lookup.session is None
    assert lookup.lookup("Reed College").admit_rate == 0.36
    assert calls == [(SCORECARD_URL, "Reed College", 2.5)]
