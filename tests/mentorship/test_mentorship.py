from __future__ import annotations

import json

from hackeval.llm.runner import LLMError, LLMRequest, LLMRunner
from hackeval.mentorship import (
    MentorshipAdvisor,
    domain_tech_suggestions,
    rule_based_mentorship,
    verify_project_data,
)
from hackeval.mentorship.advisor import BLOCKED_ACTION
from hackeval.models import EvaluationResult, PlagiarismAssessment, Project, RepositoryAnalysis
from hackeval.scoring import CRITERION_KEYS


class _Runner:
    def __init__(self, reply: str = "", error: Exception | None = None) -> None:
        self.reply = reply
        self.error = error
        self.calls: list[LLMRequest] = []

    def __call__(self, request: LLMRequest) -> str:
        self.calls.append(request)
        if self.error is not None:
            raise self.error
        return self.reply


def _evaluation(**scores: int) -> EvaluationResult:
    values = {key: 7 for key in CRITERION_KEYS}
    values.update(scores)
    return EvaluationResult(
        scores=values,
        weighted_total=5.6,
        explanations={key: f"{key} notes" for key in CRITERION_KEYS},
        overall_verdict="Promising",
        verdict_detail="",
        timestamp="2024-03-01T12:00:00Z",
    )


def _project(**overrides) -> Project:
    fields = dict(
        project_name="CareLink",
        domain="HealthTech",
        description="Telemedicine triage for rural clinics, built on FHIR and a nurse dashboard.",
        github_url="https://github.com/acme/carelink",
        members=("Ana", "Ben"),
        analysis=RepositoryAnalysis(
            fetched=True,
            total_commits=24,
            total_files=30,
            languages={"TypeScript": 10, "Python": 4},
            commit_authors=("ana",),
            single_author_percent=100,
            has_readme=False,
            cleanliness_score=4,
        ),
        plagiarism=PlagiarismAssessment(70, 0, 20, 0, 85, 40, flags=("Repository is a FORK",)),
        evaluation=_evaluation(innovation=3, presentation=4),
    )
    fields.update(overrides)
    return Project(**fields)


def test_blocked_when_two_checks_fail() -> None:
    runner = _Runner(reply="{}")
    advisor = MentorshipAdvisor(LLMRunner(runner=runner))
    project = Project(
        project_name="Tiny",
        domain="Other",
        description="A tiny app.",
        github_url="https://github.com/acme/tiny",
    )

    result = advisor.advise(project)

    assert result.source == "verification"
    assert result.verification.passed is False
    assert result.action_plan == (BLOCKED_ACTION,)
    assert result.improvements == ()
    assert runner.calls == []


def test_rule_based_mentor_covers_weak_areas() -> None:
    project = _project()

    result = rule_based_mentorship(project, verify_project_data(project), "2024-03-01T12:00:00Z")

    areas = [item.area for item in result.improvements]
    assert areas[:2] == ["Innovation", "Presentation"]
    assert {"Testing", "Documentation", "Team Collaboration", "Code Originality"} <= set(areas)
    assert result.source == "rules"
    assert result.action_plan[0] == "Add a tests/ folder with basic unit tests for your core logic"
    assert any("weakest area is innovation at 3/10" in step for step in result.action_plan)
    assert any(step.startswith("Create a 6-8 slide deck") for step in result.action_plan)
    assert 1 <= len(result.tech_suggestions) <= 5
    assert any(suggestion.startswith("Chart.js") for suggestion in result.tech_suggestions)
    assert all(suggestion.endswith('(for "CareLink")') for suggestion in result.tech_suggestions[-2:])
    assert result.overall_advice.startswith('"CareLink" (HealthTech) scored 5.6/10')


def test_advisor_without_llm_uses_rules() -> None:
    result = MentorshipAdvisor().advise(_project())

    assert result.source == "rules"
    assert result.verification.passed is True


def test_llm_mentor_parses_reply() -> None:
    reply = json.dumps(
        {
            "improvements": [
                {
                    "area": "Testing",
                    "currentState": "0 test files in 30",
                    "recommendation": "Add pytest cases for triage rules",
                    "priority": "HIGH",
                    "effort": "weekend",
                },
                "not an object",
            ],
            "action_plan": ["Write tests", ""],
            "tech_suggestions": ["FHIR sandbox"],
            "overall_advice": "CareLink is close.",
        }
    )
    runner = _Runner(reply=reply)

    result = MentorshipAdvisor(LLMRunner(runner=runner)).advise(_project())

    assert result.source == "llm"
    assert len(result.improvements) == 1
    advice = result.improvements[0]
    assert advice.current_state == "0 test files in 30"
    assert advice.priority == "high"
    assert advice.effort == "moderate"
    assert result.action_plan == ("Write tests",)
    assert runner.calls[0].json_mode is True
    assert "VERIFICATION: Project fully verified" in runner.calls[0].prompt


def test_llm_failure_falls_back_to_rules() -> None:
    runner = _Runner(error=LLMError("rate limited"))

    result = MentorshipAdvisor(LLMRunner(runner=runner)).advise(_project())

    assert len(runner.calls) == 1
    assert result.source == "rules"


def test_reply_without_improvements_falls_back() -> None:
    runner = _Runner(reply=json.dumps({"overall_advice": "ok"}))

    result = MentorshipAdvisor(LLMRunner(runner=runner)).advise(_project())

    assert result.source == "rules"


def test_domain_tech_suggestions_follow_languages() -> None:
    assert domain_tech_suggestions("AI/ML", ["Python"])[0].startswith("Hugging Face")
    assert domain_tech_suggestions("AI/ML", ["Go"])[0].startswith("TensorFlow.js")
    assert domain_tech_suggestions("FinTech", ["TypeScript"])[0].startswith("Stripe.js")
    assert domain_tech_suggestions("Other", ["Go"])[0].startswith("Railway.app")
    assert domain_tech_suggestions("Other", ["JavaScript"])[0].startswith("Vercel")
