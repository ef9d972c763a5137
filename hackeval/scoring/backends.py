"""Scoring backends: the heuristic engine, the LLM judge and the fallback chain."""

from __future__ import annotations

from dataclasses import replace
from typing import Dict, Optional, Protocol

from ..llm.runner import LLMError, LLMRunner, extract_json_object
from ..logging import get_logger
from ..models import EvaluationResult, PlagiarismAssessment, Project, RepositoryAnalysis
from ..prompting.builder import PromptBuilder
from ..utils import clamp_score
from .constants import CRITERIA
from .engine import HeuristicScoringEngine, build_result

FALLBACK_MARKER = "_fallback"
NOTE_MARKER = "_note"
FALLBACK_MESSAGE = "AI unavailable, used rule-based scoring"
NOT_CONFIGURED_MESSAGE = "Rule-based scoring (no API key configured)"


class ScoringBackend(Protocol):
    """Anything that can turn a project into an evaluation result."""

    name: str

    def evaluate(
        self,
        project: Project,
        analysis: Optional[RepositoryAnalysis] = None,
        plagiarism: Optional[PlagiarismAssessment] = None,
    ) -> EvaluationResult:
        ...


class LLMScoringBackend:
    """Asks a chat model for the eight criterion scores as a JSON object."""

    name = "llm"

    def __init__(self, runner: LLMRunner, builder: PromptBuilder | None = None) -> None:
        self.runner = runner
        self.builder = builder or PromptBuilder()
        self.logger = get_logger("scoring.llm")

    @property
    def configured(self) -> bool:
        return self.runner.configured

    def evaluate(
        self,
        project: Project,
        analysis: Optional[RepositoryAnalysis] = None,
        plagiarism: Optional[PlagiarismAssessment] = None,
    ) -> EvaluationResult:
        if not self.configured:
            raise LLMError("LLM scoring backend is not configured")
        analysis = analysis if analysis is not None else project.analysis
        plagiarism = plagiarism if plagiarism is not None else project.plagiarism
        if plagiarism is None:
            raise LLMError("LLM scoring needs a plagiarism assessment")

        request = self.builder.build_scoring_prompt(project, analysis, plagiarism, CRITERIA)
        reply = self.runner.run(request.user, system=request.system, json_mode=True)
        parsed = extract_json_object(reply)

        scores: Dict[str, int] = {}
        explanations: Dict[str, str] = {}
        for criterion in CRITERIA:
            scores[criterion.key] = clamp_score(_as_number(parsed.get(criterion.key)))
            explanations[criterion.key] = str(parsed.get(f"{criterion.key}_explanation") or "")
        self.logger.debug("LLM scored %r with model %s", project.project_name, self.runner.model)
        return build_result(scores, explanations, backend=self.name)


class FallbackScoringBackend:
    """Try the primary backend and fall back to the heuristic engine on failure.

    ``primary`` may be ``None`` when no LLM is wanted at all. When
    ``llm_requested`` is set but the primary is missing or unconfigured the
    heuristic result carries a ``_note`` marker; when the primary raises it
    carries a ``_fallback`` marker instead.
    """

    def __init__(
        self,
        primary: Optional[LLMScoringBackend],
        fallback: HeuristicScoringEngine | None = None,
        *,
        llm_requested: bool = False,
    ) -> None:
        self.primary = primary
        self.fallback = fallback or HeuristicScoringEngine()
        self.llm_requested = llm_requested or primary is not None
        self.logger = get_logger("scoring.fallback")

    @property
    def name(self) -> str:
        if self.primary is not None and self.primary.configured:
            return self.primary.name
        return self.fallback.name

    def evaluate(
        self,
        project: Project,
        analysis: Optional[RepositoryAnalysis] = None,
        plagiarism: Optional[PlagiarismAssessment] = None,
    ) -> EvaluationResult:
        if self.primary is None or not self.primary.configured:
            result = self.fallback.evaluate(project, analysis, plagiarism)
            if self.llm_requested:
                return _with_marker(result, NOTE_MARKER, NOT_CONFIGURED_MESSAGE)
            return result

        if plagiarism is None and project.plagiarism is None:
            # Both backends must judge the same originality risk.
            plagiarism = self.fallback.assess(project, analysis)
        try:
            return self.primary.evaluate(project, analysis, plagiarism)
        except Exception as exc:
            self.logger.warning(
                "LLM scoring failed for %r, using heuristic engine: %s",
                project.project_name,
                exc,
            )
        result = self.fallback.evaluate(project, analysis, plagiarism)
        return _with_marker(result, FALLBACK_MARKER, FALLBACK_MESSAGE)


def _with_marker(result: EvaluationResult, key: str, message: str) -> EvaluationResult:
    explanations = dict(result.explanations)
    explanations[key] = message
    return replace(result, explanations=explanations)


def _as_number(value: object) -> float:
    if isinstance(value, bool):
        return 5.0
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            return 5.0
    return 5.0


__all__ = [
    "FALLBACK_MARKER",
    "FallbackScoringBackend",
    "LLMScoringBackend",
    "NOTE_MARKER",
    "ScoringBackend",
]
