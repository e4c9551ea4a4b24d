"""
HTTP surface of the pool engine, with the database and external services overridden.
"""

from contextlib import nullcontext

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from db import get_db
from college_pool import routes
from college_pool.logic.constants import ENGINE_VERSION


@pytest.fixture
def client(fake_source, fake_lookup):
    app = FastAPI()
    app.include_router(routes.router)
    app.dependency_overrides[get_db] = lambda: nullcontext()
    app.dependency_overrides[routes.get_candidate_source] = lambda: fake_source()
    app.dependency_overrides[routes.get_statistics_lookup] = lambda: fake_lookup()
    return TestClient(app)


def test_pool_respects_region_constraint(client):
    response = client.post("/recommendations/pool", json={
        "student_profile": {"student_id": "s-1", "gpa_weighted": 3.7, "sat_total": 1350},
        "constraints": {"regions": ["West"]},
        "candidates": [{"identity": "Reed College"}, {"identity": "Boston College", "region": "West"}],
        "per_tier_target": 2,
    })

    assert response.status_code == 200
    body = response.json()
    names = [s["name"] for s in body["schools"]]

    assert body["student_id"] == "s-1"
    assert body["engine_version"] == ENGINE_VERSION
    assert body["summary"]["per_tier_target"] == 2
    assert "Boston College" not in names
    assert all(s["region"] == "West" for s in body["schools"])
    assert all(s["admission_probability"] is not None for s in body["schools"])


def test_invalid_target_is_rejected(client):
    response = client.post("/recommendations/pool", json={"per_tier_target": 0})
    assert response.status_code == 422


def test_engine_failure_returns_error_envelope(client, monkeypatch):
    def explode(*args, **kwargs):
        raise RuntimeError("engine down")

    monkeypatch.setattr(routes, "run_pool", explode)
    response = client.post("/recommendations/pool", json={})

    assert response.status_code == 500
    assert response.json()["error"] == "engine down"
    assert "trace" in response.json()


def test_health(client):
    response = client.get("/recommendations/health")
    assert response.json() == {"status": "ok", "engine": "college_pool", "version": ENGINE_VERSION}


def test_score_school(client):
    response = client.get("/recommendations/school", params={"q": "Harvard", "gpa_weighted": 4.0})

    assert response.status_code == 200
    body = response.json()
    assert body["available"] is True
    assert body["key"] == "harvard university"
    assert body["tier"] == "reach"


def test_score_unknown_school(client):
    body = client.get("/recommendations/school", params={"q": "Nowhere College"}).json()
    assert body == {"identity": "Nowhere College", "key": "nowhere college", "available": False}


def test_score_school_requires_a_name(client):
    assert client.get("/recommendations/school").status_code == 422
