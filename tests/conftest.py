from __future__ import annotations

import pytest

from hackeval.models import Project
from tests._fixtures.github import FakeGitHub


@pytest.fixture
def fake_github() -> FakeGitHub:
    """Provide an empty in-memory GitHub API."""
    return FakeGitHub()


@pytest.fixture(autouse=True)
def _isolate_llm_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in ("HACKEVAL_LLM_API_KEY", "XAI_API_KEY", "HACKEVAL_LLM_MODEL", "HACKEVAL_LLM_BASE_URL"):
        monkeypatch.delenv(key, raising=False)
    for key in ("HACKEVAL_GITHUB_TOKEN", "GITHUB_TOKEN"):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def sample_project() -> Project:
    return Project(
        project_name="CareLink",
        domain="HealthTech",
        description=(
            "CareLink is a novel telemedicine platform that helps rural patients reach doctors. "
            "We built health monitoring with wearable sensors, and our dashboard alerts "
            "clinicians in real-time. It aims to improve access for users in underserved "
            "communities."
        ),
        github_url="https://github.com/acme/carelink",
        team_name="Acme",
        members=("Alice", "Bob", "Chen"),
    )
