"""Tests for the FastAPI service mode."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from hackeval.pipeline import EvaluationPipeline
from hackeval.scoring import CRITERION_KEYS, Jitter
from hackeval.service import create_app
from tests._fixtures.github import FakeGitHub, spread_commits

PROJECT = {
    "project_name": "CareLink",
    "domain": "HealthTech",
    "description": (
        "CareLink is a telemedicine platform that helps rural patients reach doctors. "
        "We built health monitoring with wearable sensors."
    ),
    "github_url": "https://github.com/acme/carelink",
    "team_name": "Acme",
    "members": ["Alice", "Bob"],
    "presentation": {
        "file_name": "carelink.pdf",
        "file_type": "application/pdf",
        "size_bytes": 90000,
    },
}


@pytest.fixture
def client(fake_github: FakeGitHub) -> TestClient:
    fake_github.add_repository(
        "acme",
        "carelink",
        commits=spread_commits(20, days=5),
        files=["README.md", "src/app.py", "src/models.py", "tests/test_app.py"],
        dirs=["src", "tests"],
        languages={"Python": 5000},
    )
    pipeline = EvaluationPipeline(client=fake_github.client(), jitter=Jitter.disabled())
    return TestClient(create_app(lambda: pipeline))


def test_health(client: TestClient) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_analyze_endpoint(client: TestClient) -> None:
    response = client.post("/analyze", json={"github_url": "https://github.com/acme/carelink"})

    assert response.status_code == 200
    body = response.json()
    assert body["fetched"] is True
    assert body["total_commits"] == 20
    assert body["primary_language"] == "Python"


def test_analyze_endpoint_reports_missing_repository(client: TestClient) -> None:
    response = client.post("/analyze", json={"github_url": "https://github.com/acme/ghost"})

    assert response.status_code == 200
    assert response.json()["error"] == "Repository not found (404) - private or doesn't exist"


def test_evaluate_endpoint_runs_full_pipeline(client: TestClient) -> None:
    response = client.post("/evaluate", json=PROJECT)

    assert response.status_code == 200
    body = response.json()
    assert body["analysis"]["fetched"] is True
    assert 5 <= body["plagiarism"]["overall_score"] <= 100
    assert set(body["evaluation"]["scores"]) == set(CRITERION_KEYS)
    assert body["members"] == ["Alice", "Bob"]


def test_evaluate_rejects_unknown_domain(client: TestClient) -> None:
    response = client.post("/evaluate", json={**PROJECT, "domain": "Space"})

    assert response.status_code == 422
    assert "Unknown domain" in response.json()["detail"]


def test_evaluate_requires_project_name(client: TestClient) -> None:
    response = client.post("/evaluate", json={"domain": "HealthTech"})

    assert response.status_code == 422


def test_plagiarism_endpoint(client: TestClient) -> None:
    response = client.post("/plagiarism", json={**PROJECT, "github_url": ""})

    assert response.status_code == 200
    body = response.json()
    assert body["commit_history_score"] == 55
    assert "No GitHub URL provided - cannot verify code authenticity" in body["flags"]


def test_questions_endpoint_includes_followups(client: TestClient) -> None:
    evaluated = client.post("/evaluate", json=PROJECT).json()
    evaluated["evaluation"]["scores"]["innovation"] = 2

    response = client.post("/questions", json=evaluated)

    assert response.status_code == 200
    body = response.json()
    assert 1 <= len(body["questions"]) <= 7
    assert any("existing solutions" in followup for followup in body["followups"])


def test_verify_and_mentorship_endpoints(client: TestClient) -> None:
    evaluated = client.post("/evaluate", json=PROJECT).json()

    verification = client.post("/verify", json=evaluated).json()
    mentorship = client.post("/mentorship", json=evaluated).json()

    assert verification["passed"] is True
    assert len(verification["checks"]) == 6
    assert mentorship["source"] == "rules"
    assert mentorship["verification"]["summary"] == verification["summary"]


def test_mentorship_blocked_for_sparse_project(client: TestClient) -> None:
    response = client.post(
        "/mentorship",
        json={"project_name": "Tiny", "description": "A tiny app.", "github_url": "x"},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["source"] == "verification"
    assert body["improvements"] == []


def test_evaluate_accepts_null_optional_fields(client: TestClient) -> None:
    response = client.post(
        "/evaluate", json={**PROJECT, "github_url": None, "team_name": None}
    )

    assert response.status_code == 200
    body = response.json()
    assert body["github_url"] == ""
    assert body["analysis"] is None
