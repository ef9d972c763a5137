from __future__ import annotations

import json

import pytest

from hackeval.llm.runner import LLMError, LLMRequest, LLMRunner
from hackeval.models import Project
from hackeval.scoring import (
    CRITERION_KEYS,
    FallbackScoringBackend,
    HeuristicScoringEngine,
    Jitter,
    LLMScoringBackend,
)
from hackeval.scoring.backends import (
    FALLBACK_MARKER,
    FALLBACK_MESSAGE,
    NOT_CONFIGURED_MESSAGE,
    NOTE_MARKER,
)


class _RecordingRunner:
    def __init__(self, reply: str = "", error: Exception | None = None) -> None:
        self.reply = reply
        self.error = error
        self.requests: list[LLMRequest] = []

    def __call__(self, request: LLMRequest) -> str:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return self.reply


def _llm_reply(**overrides) -> str:
    payload = {key: 7 for key in CRITERION_KEYS}
    payload.update({f"{key}_explanation": f"{key} looks fine" for key in CRITERION_KEYS})
    payload.update(overrides)
    return json.dumps(payload)


def _project() -> Project:
    return Project(
        project_name="CareLink",
        domain="HealthTech",
        description="Triage assistant for rural clinics.",
        members=("Ana", "Ben"),
    )


def _heuristic() -> HeuristicScoringEngine:
    return HeuristicScoringEngine(Jitter.disabled())


def test_llm_backend_parses_and_clamps_scores() -> None:
    scores = _llm_reply(innovation=14, impact=-3, presentation="6.5", originality="n/a")
    reply = "```json\n" + scores + "\n```"
    runner = _RecordingRunner(reply)
    backend = LLMScoringBackend(LLMRunner(runner=runner))
    project = _project()

    result = backend.evaluate(project, None, _heuristic().assess(project))

    assert result.backend == "llm"
    assert result.scores["innovation"] == 10
    assert result.scores["impact"] == 1
    assert result.scores["presentation"] == 7
    assert result.scores["originality"] == 5
    assert result.scores["code_quality"] == 7
    assert result.explanations["impact"] == "impact looks fine"
    assert runner.requests[0].json_mode is True
    assert "CareLink" in runner.requests[0].prompt


def test_llm_backend_requires_plagiarism() -> None:
    backend = LLMScoringBackend(LLMRunner(runner=_RecordingRunner(_llm_reply())))

    with pytest.raises(LLMError):
        backend.evaluate(_project())


def test_llm_backend_rejects_non_json_reply() -> None:
    backend = LLMScoringBackend(LLMRunner(runner=_RecordingRunner("I cannot score this")))
    project = _project()

    with pytest.raises(LLMError):
        backend.evaluate(project, None, _heuristic().assess(project))


def test_fallback_uses_llm_when_it_succeeds() -> None:
    primary = LLMScoringBackend(LLMRunner(runner=_RecordingRunner(_llm_reply())))
    backend = FallbackScoringBackend(primary, _heuristic())

    result = backend.evaluate(_project())

    assert backend.name == "llm"
    assert result.backend == "llm"
    assert FALLBACK_MARKER not in result.explanations


def test_fallback_marks_heuristic_result_when_llm_fails() -> None:
    runner = _RecordingRunner(error=LLMError("upstream timeout"))
    backend = FallbackScoringBackend(LLMScoringBackend(LLMRunner(runner=runner)), _heuristic())

    result = backend.evaluate(_project())

    assert len(runner.requests) == 1
    assert result.backend == "heuristic"
    assert result.explanations[FALLBACK_MARKER] == FALLBACK_MESSAGE
    assert set(result.scores) == set(CRITERION_KEYS)


def test_unconfigured_llm_adds_note() -> None:
    primary = LLMScoringBackend(LLMRunner(api_key=None))
    backend = FallbackScoringBackend(primary, _heuristic(), llm_requested=True)

    result = backend.evaluate(_project())

    assert backend.name == "heuristic"
    assert result.explanations[NOTE_MARKER] == NOT_CONFIGURED_MESSAGE
    assert FALLBACK_MARKER not in result.explanations


def test_heuristic_only_has_no_markers() -> None:
    backend = FallbackScoringBackend(None, _heuristic())

    result = backend.evaluate(_project())

    assert NOTE_MARKER not in result.explanations
    assert FALLBACK_MARKER not in result.explanations


def test_fallback_and_llm_share_the_plagiarism_assessment() -> None:
    project = _project()
    runner = _RecordingRunner(error=LLMError("boom"))
    backend = FallbackScoringBackend(LLMScoringBackend(LLMRunner(runner=runner)), _heuristic())
    expected = _heuristic().assess(project)

    backend.evaluate(project)

    assert f"Plagiarism risk: {expected.overall_score}%" in runner.requests[0].prompt
