"""
Shared fixtures: candidate factory, student profiles and fake collaborators.
"""

import time

import pytest

from college_pool.logic.contracts import (
    Candidate,
    EngineConfig,
    InstitutionStats,
    StudentProfile,
)


class FakeSource:
    """CandidateSource double; `respond(call_number)` builds each batch."""

    def __init__(self, respond=None, error=None):
        self.respond = respond
        self.error = error
        self.calls = []

    def request_candidates(self, instructions, student_summary, count):
        self.calls.append({"instructions": instructions, "summary": student_summary, "count": count})
        if self.error is not None:
            raise self.error
        if self.respond is None:
            return []
        return self.respond(len(self.calls))


class FakeLookup:
    """StatisticsLookup double keyed by exact identity."""

    def __init__(self, stats=None, delay=0.0, error=None):
        self.stats = stats or {}
        self.delay = delay
        self.error = error
        self.calls = []

    def lookup(self, identity):
        self.calls.append(identity)
        if self.delay:
            time.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.stats.get(identity)


def _make_candidate(identity, tier="match", probability=None, **kwargs):
    return Candidate(identity=identity, tier=tier, admission_probability=probability, **kwargs)


@pytest.fixture
def make_candidate():
    return _make_candidate


@pytest.fixture
def config():
    return EngineConfig()


@pytest.fixture
def profile():
    return StudentProfile(
        student_id="test_student_001",
        gpa_weighted=3.8,
        rigor_score=70,
        sat_total=1400,
    )


@pytest.fixture
def fake_source():
    return FakeSource


@pytest.fixture
def fake_lookup():
    return FakeLookup


@pytest.fixture
def stats():
    return InstitutionStats
