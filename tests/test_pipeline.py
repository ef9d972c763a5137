from __future__ import annotations

import json
from dataclasses import replace
from pathlib import Path

import pytest

import hackeval
from hackeval.config import HackEvalConfig
from hackeval.llm.runner import LLMRunner
from hackeval.models import InvalidProjectError, Project
from hackeval.pipeline import EvaluationPipeline, set_default_pipeline
from hackeval.scoring import CRITERION_KEYS, Jitter
from hackeval.scoring.backends import FALLBACK_MARKER, NOTE_MARKER
from tests._fixtures.github import FakeGitHub, spread_commits


@pytest.fixture
def carelink_github(fake_github: FakeGitHub) -> FakeGitHub:
    fake_github.add_repository(
        "acme",
        "carelink",
        commits=spread_commits(30, days=6, authors=("alice", "bob", "chen")),
        files=[
            "README.md",
            "LICENSE",
            ".env.example",
            "package.json",
            "src/api/routes.ts",
            "src/api/auth.ts",
            "src/ui/App.tsx",
            "src/ui/Dashboard.tsx",
            "tests/routes.test.ts",
        ],
        dirs=["src", "src/api", "src/ui", "tests"],
        languages={"TypeScript": 12000, "CSS": 800},
        description="Telemedicine triage",
    )
    return fake_github


@pytest.fixture
def pipeline(carelink_github: FakeGitHub) -> EvaluationPipeline:
    return EvaluationPipeline(client=carelink_github.client(), jitter=Jitter.disabled())


@pytest.fixture(autouse=True)
def _reset_default_pipeline():
    yield
    set_default_pipeline(None)


def test_run_attaches_all_results(pipeline: EvaluationPipeline, sample_project: Project) -> None:
    evaluated = pipeline.run(sample_project)

    assert evaluated.analysis is not None and evaluated.analysis.fetched
    assert evaluated.analysis.total_commits == 30
    assert evaluated.plagiarism is not None
    assert 5 <= evaluated.plagiarism.overall_score <= 100
    assert evaluated.evaluation is not None
    assert set(evaluated.evaluation.scores) == set(CRITERION_KEYS)
    assert evaluated.evaluation.backend == "heuristic"
    assert NOTE_MARKER not in evaluated.evaluation.explanations
    assert sample_project.evaluation is None


def test_run_is_deterministic_without_jitter(
    carelink_github: FakeGitHub, sample_project: Project
) -> None:
    first = EvaluationPipeline(client=carelink_github.client(), jitter=Jitter.disabled())
    second = EvaluationPipeline(client=carelink_github.client(), jitter=Jitter.disabled())

    assert first.run(sample_project).evaluation.scores == second.run(sample_project).evaluation.scores


def test_run_rejects_unknown_domain(pipeline: EvaluationPipeline, sample_project: Project) -> None:
    with pytest.raises(InvalidProjectError, match="Unknown domain"):
        pipeline.run(replace(sample_project, domain="Space"))


def test_run_rejects_blank_name(pipeline: EvaluationPipeline, sample_project: Project) -> None:
    with pytest.raises(InvalidProjectError):
        pipeline.evaluate_project(replace(sample_project, project_name="  "))


def test_unreachable_repository_still_scores(
    pipeline: EvaluationPipeline, sample_project: Project
) -> None:
    project = replace(sample_project, github_url="https://github.com/acme/ghost")

    evaluated = pipeline.run(project)

    assert evaluated.analysis.fetched is False
    assert evaluated.plagiarism.commit_history_score == 50
    assert all(1 <= score <= 10 for score in evaluated.evaluation.scores.values())


def test_project_without_url_skips_network(
    carelink_github: FakeGitHub, pipeline: EvaluationPipeline, sample_project: Project
) -> None:
    evaluated = pipeline.run(replace(sample_project, github_url=""))

    assert evaluated.analysis is None
    assert carelink_github.requests == []


def test_enabled_llm_without_key_notes_rule_based_scoring(
    carelink_github: FakeGitHub, tmp_path: Path, sample_project: Project
) -> None:
    config = HackEvalConfig(root=tmp_path)
    config.llm.enabled = True
    pipeline = EvaluationPipeline(
        config, client=carelink_github.client(), jitter=Jitter.disabled()
    )

    evaluated = pipeline.run(sample_project)

    assert evaluated.evaluation.explanations[NOTE_MARKER] == (
        "Rule-based scoring (no API key configured)"
    )


def test_llm_failure_falls_back(carelink_github: FakeGitHub, sample_project: Project) -> None:
    def broken(request):
        raise RuntimeError("connection reset")

    pipeline = EvaluationPipeline(
        client=carelink_github.client(),
        runner=LLMRunner(runner=broken),
        jitter=Jitter.disabled(),
    )

    evaluated = pipeline.run(sample_project)

    assert evaluated.evaluation.backend == "heuristic"
    assert FALLBACK_MARKER in evaluated.evaluation.explanations


def test_llm_scores_are_used(carelink_github: FakeGitHub, sample_project: Project) -> None:
    reply = json.dumps({key: 8 for key in CRITERION_KEYS})
    pipeline = EvaluationPipeline(
        client=carelink_github.client(), runner=LLMRunner(runner=lambda request: reply)
    )

    evaluated = pipeline.run(sample_project)

    assert evaluated.evaluation.backend == "llm"
    assert evaluated.evaluation.weighted_total == 8.0
    assert evaluated.evaluation.overall_verdict == "Outstanding"


def test_mentorship_after_run(pipeline: EvaluationPipeline, sample_project: Project) -> None:
    evaluated = pipeline.run(sample_project)

    mentorship = pipeline.generate_mentorship(evaluated)

    assert mentorship.verification.passed is True
    assert mentorship.source == "rules"
    assert mentorship.action_plan


def test_module_level_functions_use_default_pipeline(
    pipeline: EvaluationPipeline, sample_project: Project
) -> None:
    set_default_pipeline(pipeline)

    analysis = hackeval.analyze_repository(sample_project.github_url)
    plagiarism = hackeval.assess_plagiarism(sample_project, analysis)
    evaluation = hackeval.evaluate_project(sample_project, analysis, plagiarism)
    questions = hackeval.generate_questions(sample_project, analysis, evaluation, plagiarism)
    verification = hackeval.verify_project_data(sample_project)

    assert analysis.full_name == "acme/carelink"
    assert evaluation.scores
    assert 1 <= len(questions) <= 7
    assert verification.passed is False


def test_seeded_pipeline_is_reproducible_across_calls(
    carelink_github: FakeGitHub, tmp_path: Path, sample_project: Project
) -> None:
    config = HackEvalConfig(root=tmp_path)
    config.scoring.seed = 42
    pipeline = EvaluationPipeline(config, client=carelink_github.client())
    analysis = pipeline.analyze_repository(sample_project.github_url)

    results = [pipeline.evaluate_project(sample_project, analysis).scores for _ in range(6)]

    assert config.scoring.jitter is True
    assert all(scores == results[0] for scores in results)


def test_run_accepts_project_with_null_url(pipeline: EvaluationPipeline) -> None:
    project = Project.from_dict(
        {
            "project_name": "CareLink",
            "domain": "HealthTech",
            "github_url": None,
            "description": None,
        }
    )

    evaluated = pipeline.run(project)

    assert project.github_url == ""
    assert project.description == ""
    assert evaluated.analysis is None
    assert evaluated.plagiarism.commit_history_score == 55


def test_run_rejects_non_text_project_name(pipeline: EvaluationPipeline) -> None:
    with pytest.raises(InvalidProjectError, match="must be text"):
        pipeline.run(Project.from_dict({"project_name": 2048, "domain": "HealthTech"}))


def test_close_releases_built_client(tmp_path: Path) -> None:
    with EvaluationPipeline(HackEvalConfig(root=tmp_path)) as pipeline:
        client = pipeline.analyzer.client
        assert client._client.is_closed is False

    assert client._client.is_closed is True


def test_close_leaves_injected_client_open(carelink_github: FakeGitHub) -> None:
    client = carelink_github.client()
    pipeline = EvaluationPipeline(client=client)

    pipeline.close()

    assert client._client.is_closed is False
