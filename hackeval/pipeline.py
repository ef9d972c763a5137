"""End-to-end evaluation pipeline wiring the analyzer, detector, scorer and mentor."""

from __future__ import annotations

import threading
from pathlib import Path
from typing import List, Optional

from .analyzers.repository import RepositoryAnalyzer
from .config import HackEvalConfig, load_config
from .github.client import GitHubClient
from .llm.runner import LLMRunner
from .logging import get_logger
from .mentorship.advisor import MentorshipAdvisor
from .mentorship.verification import verify_project_data as _verify_project_data
from .models import (
    EvaluationResult,
    MentorshipResult,
    PlagiarismAssessment,
    Project,
    RepositoryAnalysis,
    VerificationResult,
    validate_project,
)
from .plagiarism import assess_plagiarism as _assess_plagiarism
from .prompting.builder import PromptBuilder
from .questions import generate_questions as _generate_questions
from .scoring.backends import FallbackScoringBackend, LLMScoringBackend, ScoringBackend
from .scoring.engine import HeuristicScoringEngine
from .scoring.jitter import Jitter
from .stores.analysis_cache import AnalysisCache


class EvaluationPipeline:
    """Runs repository analysis, plagiarism assessment, scoring and mentorship.

    Every collaborator is injectable; anything left out is built from
    ``config``. The scoring backend is fixed at construction time, so callers
    choose between heuristic and LLM scoring by configuration rather than by
    environment at call time.
    """

    def __init__(
        self,
        config: Optional[HackEvalConfig] = None,
        *,
        client: Optional[GitHubClient] = None,
        analyzer: Optional[RepositoryAnalyzer] = None,
        backend: Optional[ScoringBackend] = None,
        advisor: Optional[MentorshipAdvisor] = None,
        runner: Optional[LLMRunner] = None,
        jitter: Optional[Jitter] = None,
    ) -> None:
        self.config = config or HackEvalConfig(root=Path.cwd())
        self.logger = get_logger("pipeline")
        runner = runner if runner is not None else self._build_runner(self.config)
        builder = PromptBuilder()

        self._owned_client: Optional[GitHubClient] = None
        if analyzer is None and client is None:
            client = self._owned_client = self._build_client(self.config)
        self.analyzer = analyzer or RepositoryAnalyzer(
            client, cache=self._build_cache(self.config)
        )
        self.engine = HeuristicScoringEngine(
            jitter if jitter is not None else self._build_jitter(self.config)
        )
        self.backend: ScoringBackend = backend or FallbackScoringBackend(
            LLMScoringBackend(runner, builder) if runner is not None else None,
            self.engine,
            llm_requested=self.config.llm.enabled,
        )
        self.advisor = advisor or MentorshipAdvisor(runner, builder)

    def close(self) -> None:
        """Release the GitHub client the pipeline built for itself."""
        if self._owned_client is not None:
            self._owned_client.close()
            self._owned_client = None

    def __enter__(self) -> "EvaluationPipeline":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @classmethod
    def from_config(cls, path: Path | str | None = None, **overrides) -> "EvaluationPipeline":
        """Build a pipeline from ``.hackeval.yml`` found at ``path`` (default: cwd)."""
        config = load_config(Path(path) if path is not None else Path.cwd())
        return cls(config, **overrides)

    def analyze_repository(self, github_url: str | None) -> RepositoryAnalysis:
        return self.analyzer.analyze(github_url)

    def assess_plagiarism(
        self,
        project: Project,
        analysis: Optional[RepositoryAnalysis] = None,
    ) -> PlagiarismAssessment:
        analysis = analysis if analysis is not None else project.analysis
        return _assess_plagiarism(
            project.github_url,
            project.description,
            project.project_name,
            analysis,
            team_size=len(project.active_members) or None,
        )

    def evaluate_project(
        self,
        project: Project,
        analysis: Optional[RepositoryAnalysis] = None,
        plagiarism: Optional[PlagiarismAssessment] = None,
    ) -> EvaluationResult:
        """Score ``project``; raises ``InvalidProjectError`` for unusable records."""
        validate_project(project)
        analysis = analysis if analysis is not None else project.analysis
        if plagiarism is None:
            plagiarism = project.plagiarism or self.assess_plagiarism(project, analysis)
        return self.backend.evaluate(project, analysis, plagiarism)

    def generate_questions(
        self,
        project: Project,
        analysis: Optional[RepositoryAnalysis] = None,
        evaluation: Optional[EvaluationResult] = None,
        plagiarism: Optional[PlagiarismAssessment] = None,
    ) -> List[str]:
        return _generate_questions(project, analysis, evaluation, plagiarism)

    def verify_project_data(self, project: Project) -> VerificationResult:
        return _verify_project_data(project)

    def generate_mentorship(self, project: Project) -> MentorshipResult:
        return self.advisor.advise(project)

    def run(self, project: Project) -> Project:
        """Analyse, assess and score ``project``; return a copy carrying the results."""
        validate_project(project)
        self.logger.info("Evaluating %r", project.project_name)
        analysis = project.analysis
        if analysis is None and project.github_url.strip():
            analysis = self.analyze_repository(project.github_url)
        plagiarism = self.assess_plagiarism(project, analysis)
        evaluation = self.evaluate_project(project, analysis, plagiarism)
        self.logger.info(
            "Evaluated %r: %.2f (%s), plagiarism %d%%",
            project.project_name,
            evaluation.weighted_total,
            evaluation.overall_verdict,
            plagiarism.overall_score,
        )
        return project.with_results(
            analysis=analysis, plagiarism=plagiarism, evaluation=evaluation
        )

    @staticmethod
    def _build_client(config: HackEvalConfig) -> GitHubClient:
        return GitHubClient(
            base_url=config.github.api_base_url,
            token=config.github.token,
            request_timeout=config.github.request_timeout,
            commit_window=config.github.commit_window,
        )

    @staticmethod
    def _build_cache(config: HackEvalConfig) -> Optional[AnalysisCache]:
        if not config.cache.enabled:
            return None
        path = config.cache.path or config.root / ".hackeval" / "analysis_cache.json"
        return AnalysisCache(path, ttl_seconds=config.cache.ttl_seconds)

    @staticmethod
    def _build_jitter(config: HackEvalConfig) -> Jitter:
        return Jitter(config.scoring.seed, enabled=config.scoring.jitter)

    @staticmethod
    def _build_runner(config: HackEvalConfig) -> Optional[LLMRunner]:
        llm = config.llm
        if not llm.enabled:
            return None
        kwargs = {}
        if llm.api_key:
            kwargs["api_key"] = llm.api_key
        if llm.temperature is not None:
            kwargs["temperature"] = llm.temperature
        if llm.request_timeout is not None:
            kwargs["request_timeout"] = llm.request_timeout
        return LLMRunner(
            llm.model,
            base_url=llm.base_url,
            max_tokens=llm.max_tokens,
            **kwargs,
        )


_default_pipeline: Optional[EvaluationPipeline] = None
_default_lock = threading.Lock()


def default_pipeline() -> EvaluationPipeline:
    """Return the shared pipeline built from the working directory's configuration."""
    global _default_pipeline
    with _default_lock:
        if _default_pipeline is None:
            _default_pipeline = EvaluationPipeline.from_config()
        return _default_pipeline


def set_default_pipeline(pipeline: Optional[EvaluationPipeline]) -> None:
    """Replace (or with ``None`` reset) the pipeline used by the module-level functions."""
    global _default_pipeline
    with _default_lock:
        _default_pipeline = pipeline


def analyze_repository(github_url: str | None) -> RepositoryAnalysis:
    return default_pipeline().analyze_repository(github_url)


def assess_plagiarism(
    project: Project, analysis: Optional[RepositoryAnalysis] = None
) -> PlagiarismAssessment:
    return default_pipeline().assess_plagiarism(project, analysis)


def evaluate_project(
    project: Project,
    analysis: Optional[RepositoryAnalysis] = None,
    plagiarism: Optional[PlagiarismAssessment] = None,
) -> EvaluationResult:
    return default_pipeline().evaluate_project(project, analysis, plagiarism)


def generate_questions(
    project: Project,
    analysis: Optional[RepositoryAnalysis] = None,
    evaluation: Optional[EvaluationResult] = None,
    plagiarism: Optional[PlagiarismAssessment] = None,
) -> List[str]:
    return default_pipeline().generate_questions(project, analysis, evaluation, plagiarism)


def verify_project_data(project: Project) -> VerificationResult:
    return default_pipeline().verify_project_data(project)


def generate_mentorship(project: Project) -> MentorshipResult:
    return default_pipeline().generate_mentorship(project)


__all__ = [
    "EvaluationPipeline",
    "analyze_repository",
    "assess_plagiarism",
    "default_pipeline",
    "evaluate_project",
    "generate_mentorship",
    "generate_questions",
    "set_default_pipeline",
    "verify_project_data",
]
