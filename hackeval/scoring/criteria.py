"""Per-criterion formulas.

Every criterion has two pure functions: one that reads fetched repository
evidence and a text-only one used when the repository could not be analysed.
Both return the rounded raw score before the plagiarism penalty and clamping,
which the engine applies uniformly.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, List, Tuple

from ..models import Available, PlagiarismAssessment, Project, RepositoryEvidence
from ..utils import round_half_up
from .constants import HIGH_IMPACT_DOMAINS, JITTER_AMPLITUDE
from .jitter import Jitter
from .signals import DescriptionSignals, Note


@dataclass(frozen=True)
class ScoringContext:
    """Everything a criterion formula may read, computed once per evaluation."""

    project: Project
    plagiarism: PlagiarismAssessment
    description: DescriptionSignals
    url: Note
    presentation: Note
    team: Note
    jitter: Jitter

    def noise(self, criterion: str) -> float:
        return self.jitter(JITTER_AMPLITUDE.get(criterion, 0.0))

    @property
    def member_count(self) -> int:
        return len(self.project.active_members)

    @property
    def has_presentation(self) -> bool:
        return self.project.presentation is not None


@dataclass(frozen=True)
class CriterionScore:
    raw: int
    explanation: str


WithRepository = Callable[[ScoringContext, Available], CriterionScore]
TextOnly = Callable[[ScoringContext], CriterionScore]


def _keyword_credit(ctx: ScoringContext) -> int:
    count = len(ctx.description.keywords)
    if count >= 3:
        return 2
    return 1 if count >= 1 else 0


# Innovation


def _innovation_text(ctx: ScoringContext) -> str:
    signals = ctx.description
    if signals.innovation >= 6:
        return "Strong innovation signals. Keywords: " + ", ".join(signals.keywords[:3])
    if signals.innovation >= 4:
        return "Moderate innovation. Consider highlighting unique differentiators."
    return "Limited innovation indicators. Project seems conventional."


def _innovation_raw(ctx: ScoringContext) -> float:
    return (
        ctx.description.innovation * 0.5
        + _keyword_credit(ctx)
        + (1 if ctx.project.domain != "Other" else 0)
        + ctx.noise("innovation")
    )


def innovation_with_repository(ctx: ScoringContext, evidence: Available) -> CriterionScore:
    raw = round_half_up(_innovation_raw(ctx))
    prefix = ""
    if evidence.analysis.is_forked:
        raw -= 2
        prefix = "Forked repo - innovation impact reduced. "
    return CriterionScore(raw, prefix + _innovation_text(ctx))


def innovation_text_only(ctx: ScoringContext) -> CriterionScore:
    return CriterionScore(round_half_up(_innovation_raw(ctx)), _innovation_text(ctx))


# Technical feasibility


def technical_with_repository(ctx: ScoringContext, evidence: Available) -> CriterionScore:
    analysis = evidence.analysis
    language_count = len(analysis.languages)
    language_bonus = 2 if language_count >= 3 else 1 if language_count >= 2 else 0
    raw = round_half_up(
        ctx.description.technical_depth * 0.3
        + analysis.modularity_score * 0.3
        + language_bonus
        + (1 if analysis.has_package_manifest else 0)
        + (1 if analysis.has_ci_config else 0)
        + (0.5 if analysis.has_container_file else 0)
        + ctx.noise("technical_feasibility")
    )
    languages = ", ".join(analysis.languages) or "no detected languages"
    parts = [f"GitHub repo uses {languages}.", f"Modularity: {analysis.modularity_score}/10."]
    if analysis.has_ci_config:
        parts.append("Has CI/CD.")
    if analysis.has_container_file:
        parts.append("Dockerized.")
    parts.append(
        "Advanced stack detected."
        if ctx.description.technical_depth >= 7
        else "Standard implementation."
    )
    return CriterionScore(raw, " ".join(parts))


def technical_text_only(ctx: ScoringContext) -> CriterionScore:
    depth = ctx.description.technical_depth
    raw = round_half_up(
        depth * 0.4
        + ctx.url.score * 0.3
        + len(ctx.description.keywords) * 0.4
        + ctx.noise("technical_feasibility")
    )
    if depth >= 7:
        summary = "Advanced technical stack detected."
    elif depth >= 5:
        summary = "Standard technical implementation."
    else:
        summary = "Limited technical depth in description."
    return CriterionScore(raw, f"{ctx.url.text}. {summary}")


# Impact


def impact_text_only(ctx: ScoringContext) -> CriterionScore:
    signals = ctx.description
    raw = round_half_up(
        signals.impact * 0.5
        + (2 if ctx.project.domain in HIGH_IMPACT_DOMAINS else 1)
        + ctx.team.score * 0.2
        + ctx.noise("impact")
    )
    if signals.impact >= 6:
        text = "Strong real-world impact potential. Clear problem-solution fit."
    elif signals.impact >= 4:
        text = "Moderate impact. Domain has potential for scalability."
    else:
        text = "Impact not clearly articulated. Needs stronger problem statement."
    return CriterionScore(raw, text)


def impact_with_repository(ctx: ScoringContext, evidence: Available) -> CriterionScore:
    return impact_text_only(ctx)


# MVP completeness


def mvp_with_repository(ctx: ScoringContext, evidence: Available) -> CriterionScore:
    analysis = evidence.analysis
    file_credit = 3 if analysis.total_files >= 10 else 2 if analysis.total_files >= 5 else 1
    raw = round_half_up(
        file_credit
        + (2 if ctx.has_presentation else 0)
        + (1 if analysis.has_tests else 0)
        + ctx.description.clarity * 0.2
        + (1 if ctx.member_count > 0 else 0)
        + ctx.noise("mvp_completeness")
    )
    parts = [
        f"GitHub repo: {analysis.total_files} files in {analysis.total_dirs} dirs",
        "Presentation uploaded" if ctx.has_presentation else "No presentation",
        "Tests found" if analysis.has_tests else "No tests",
        f"{ctx.member_count} team member(s)",
    ]
    return CriterionScore(raw, " | ".join(parts))


def mvp_text_only(ctx: ScoringContext) -> CriterionScore:
    has_url = bool(ctx.project.github_url and ctx.project.github_url.strip())
    raw = round_half_up(
        (2 if has_url else 0)
        + (2 if ctx.has_presentation else 0)
        + ctx.description.clarity * 0.3
        + (1 if ctx.member_count > 0 else 0)
        + (1 if len(ctx.description.keywords) >= 2 else 0)
        + ctx.noise("mvp_completeness")
    )
    parts = [
        "GitHub repo linked" if has_url else "No GitHub repo",
        "Presentation uploaded" if ctx.has_presentation else "No presentation",
        f"{ctx.member_count} team member(s)",
    ]
    return CriterionScore(raw, " | ".join(parts))


# Presentation


def presentation_text_only(ctx: ScoringContext) -> CriterionScore:
    clarity = ctx.description.clarity
    if clarity >= 7:
        text = "Description is well-written and clear."
    elif clarity >= 5:
        text = "Description could be more detailed."
    else:
        text = "Description is too brief for thorough evaluation."
    return CriterionScore(ctx.presentation.score, f"{ctx.presentation.text}. {text}")


def presentation_with_repository(ctx: ScoringContext, evidence: Available) -> CriterionScore:
    return presentation_text_only(ctx)


# Code quality


def code_quality_with_repository(ctx: ScoringContext, evidence: Available) -> CriterionScore:
    analysis = evidence.analysis
    raw = round_half_up(
        analysis.cleanliness_score * 0.4
        + analysis.modularity_score * 0.3
        + analysis.commit_genuineness * 0.1
        + ctx.noise("code_quality")
    )
    notes = [
        f"Cleanliness: {analysis.cleanliness_score}/10",
        f"Modularity: {analysis.modularity_score}/10",
    ]
    if analysis.burst_commit_score >= 70:
        notes.append("Suspicious commit pattern")
    if analysis.has_tests:
        notes.append("Has tests")
    if ctx.plagiarism.overall_score > 30:
        notes.append(f"Plagiarism: {ctx.plagiarism.overall_score}%")
    return CriterionScore(raw, ". ".join(notes))


def code_quality_text_only(ctx: ScoringContext) -> CriterionScore:
    raw = round_half_up(
        ctx.url.score * 0.6
        + ctx.description.technical_depth * 0.3
        + ctx.noise("code_quality")
    )
    text = ctx.url.text
    if ctx.plagiarism.overall_score > 30:
        text += f". Plagiarism flag: {ctx.plagiarism.overall_score}% concern."
    return CriterionScore(raw, text)


# Team collaboration


def team_text_only(ctx: ScoringContext) -> CriterionScore:
    return CriterionScore(ctx.team.score, ctx.team.text)


def team_with_repository(ctx: ScoringContext, evidence: Available) -> CriterionScore:
    authors = evidence.analysis.commit_authors
    if not authors:
        return team_text_only(ctx)
    multi_author = len(authors) >= 2
    balanced = evidence.analysis.single_author_percent < 80
    raw = ctx.team.score + (1 if multi_author else -1) + (1 if balanced else 0)
    parts = [ctx.team.text]
    if multi_author:
        parts.append(f"{len(authors)} contributors in repo")
    else:
        parts.append(
            f"Only 1 author in commit history despite team of {ctx.member_count}"
        )
    if balanced:
        parts.append("Balanced contributions")
    return CriterionScore(raw, ". ".join(parts))


# Originality


def originality_with_repository(ctx: ScoringContext, evidence: Available) -> CriterionScore:
    analysis = evidence.analysis
    raw = round_half_up(
        analysis.commit_genuineness * 0.4
        + (1 if analysis.is_forked else 4)
        + (0 if analysis.is_mirror else 1)
        + ctx.description.innovation * 0.2
        + ctx.noise("originality")
    )
    parts: List[str] = []
    if analysis.is_forked:
        parts.append("Forked repository.")
    if analysis.is_mirror:
        parts.append("Mirror repository.")
    parts.append(
        "Commit history looks genuine."
        if analysis.commit_genuineness >= 7
        else "Suspicious commit patterns."
    )
    parts.append(f"Plagiarism: {ctx.plagiarism.overall_score}%.")
    return CriterionScore(raw, " ".join(parts))


def originality_text_only(ctx: ScoringContext) -> CriterionScore:
    # Boilerplate risk stands in for copying here; the overall risk is
    # already charged through the uniform penalty.
    raw = round_half_up(
        (10 - ctx.plagiarism.boilerplate_score / 10) * 0.5
        + ctx.description.innovation * 0.3
        + (2 if len(ctx.description.keywords) >= 3 else 1)
        + ctx.noise("originality")
    )
    score = ctx.plagiarism.overall_score
    if score > 60:
        text = f"High plagiarism concern ({score}%). Originality questionable."
    elif score > 30:
        text = f"Moderate plagiarism indicators ({score}%). Some concerns."
    else:
        text = f"Low plagiarism risk ({score}%). Project appears original."
    return CriterionScore(raw, text)


CRITERION_FORMULAS: Dict[str, Tuple[WithRepository, TextOnly]] = {
    "innovation": (innovation_with_repository, innovation_text_only),
    "technical_feasibility": (technical_with_repository, technical_text_only),
    "impact": (impact_with_repository, impact_text_only),
    "mvp_completeness": (mvp_with_repository, mvp_text_only),
    "presentation": (presentation_with_repository, presentation_text_only),
    "code_quality": (code_quality_with_repository, code_quality_text_only),
    "team_collaboration": (team_with_repository, team_text_only),
    "originality": (originality_with_repository, originality_text_only),
}


def score_criterion(key: str, ctx: ScoringContext, evidence: RepositoryEvidence) -> CriterionScore:
    """Select the formula for ``key`` by the kind of repository evidence."""
    with_repository, text_only = CRITERION_FORMULAS[key]
    if isinstance(evidence, Available):
        return with_repository(ctx, evidence)
    return text_only(ctx)


__all__ = [
    "CRITERION_FORMULAS",
    "CriterionScore",
    "ScoringContext",
    "score_criterion",
]
