"""Heuristic scoring engine producing the eight-criterion score card."""

from __future__ import annotations

import math
from typing import Dict, Mapping, Optional, Tuple

from ..logging import get_logger
from ..models import (
    EvaluationResult,
    PlagiarismAssessment,
    Project,
    RepositoryAnalysis,
    repository_evidence,
)
from ..plagiarism import assess_plagiarism
from ..utils import clamp_score, utc_now_iso
from .constants import CRITERIA, CRITERION_KEYS, FALLBACK_VERDICT, VERDICTS
from .criteria import ScoringContext, score_criterion
from .jitter import Jitter
from .signals import analyze_description, analyze_presentation, analyze_team, analyze_url


def plagiarism_penalty(score: int) -> int:
    """Uniform deduction applied to every criterion for originality risk."""
    if score > 60:
        return -2
    if score > 30:
        return -1
    return 0


def weighted_total(scores: Mapping[str, int]) -> float:
    total = math.fsum(scores.get(criterion.key, 0) * criterion.weight for criterion in CRITERIA)
    return round(total, 2)


def verdict_for(total: float) -> Tuple[str, str]:
    """Return ``(label, detail)`` for a weighted total."""
    for threshold, label, detail in VERDICTS:
        if total >= threshold:
            return label, detail
    return FALLBACK_VERDICT


def build_result(
    scores: Dict[str, int],
    explanations: Dict[str, str],
    *,
    backend: str,
) -> EvaluationResult:
    total = weighted_total(scores)
    label, detail = verdict_for(total)
    return EvaluationResult(
        scores=scores,
        weighted_total=total,
        explanations=explanations,
        overall_verdict=label,
        verdict_detail=detail,
        timestamp=utc_now_iso(),
        backend=backend,
    )


class HeuristicScoringEngine:
    """Scores a project from its metadata, repository analysis and plagiarism risk."""

    name = "heuristic"

    def __init__(self, jitter: Jitter | None = None) -> None:
        self.jitter = jitter if jitter is not None else Jitter()
        self.logger = get_logger("scoring.heuristic")

    def assess(
        self, project: Project, analysis: Optional[RepositoryAnalysis] = None
    ) -> PlagiarismAssessment:
        """Compute the plagiarism assessment the scores are penalised by."""
        return assess_plagiarism(
            project.github_url,
            project.description,
            project.project_name,
            analysis if analysis is not None else project.analysis,
            team_size=len(project.active_members) or None,
        )

    def evaluate(
        self,
        project: Project,
        analysis: Optional[RepositoryAnalysis] = None,
        plagiarism: Optional[PlagiarismAssessment] = None,
    ) -> EvaluationResult:
        analysis = analysis if analysis is not None else project.analysis
        if plagiarism is None:
            plagiarism = project.plagiarism or self.assess(project, analysis)

        evidence = repository_evidence(analysis, project.github_url)
        context = ScoringContext(
            project=project,
            plagiarism=plagiarism,
            description=analyze_description(project.description, project.domain),
            url=analyze_url(project.github_url),
            presentation=analyze_presentation(project.presentation, project.project_name),
            team=analyze_team(project.members),
            jitter=self.jitter.for_project(project.project_name),
        )
        penalty = plagiarism_penalty(plagiarism.overall_score)

        scores: Dict[str, int] = {}
        explanations: Dict[str, str] = {}
        for key in CRITERION_KEYS:
            result = score_criterion(key, context, evidence)
            scores[key] = clamp_score(result.raw + penalty)
            explanations[key] = result.explanation

        evaluation = build_result(scores, explanations, backend=self.name)
        self.logger.debug(
            "Scored %r: total=%.2f verdict=%s penalty=%d evidence=%s",
            project.project_name,
            evaluation.weighted_total,
            evaluation.overall_verdict,
            penalty,
            type(evidence).__name__,
        )
        return evaluation


__all__ = [
    "HeuristicScoringEngine",
    "build_result",
    "plagiarism_penalty",
    "verdict_for",
    "weighted_total",
]
