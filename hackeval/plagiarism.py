"""Originality risk assessment from description text and repository signals."""

from __future__ import annotations

from collections import Counter
from typing import List, Optional, Sequence, Tuple

from .logging import get_logger
from .models import PlagiarismAssessment, RepositoryAnalysis
from .utils import dedupe, round_half_up

logger = get_logger("plagiarism")

AI_PATTERNS: Tuple[str, ...] = (
    "comprehensive",
    "robust",
    "scalable",
    "maintainable",
    "best practices",
    "industry standard",
    "enterprise-grade",
    "production-ready",
    "well-documented",
    "thoroughly tested",
    "handles edge cases",
    "implements interface",
    "follows solid principles",
    "design pattern",
    "clean architecture",
    "state-of-the-art",
    "cutting-edge",
    "seamless integration",
    "holistic approach",
)

BOILERPLATE_PATTERNS: Tuple[str, ...] = (
    "create-react-app",
    "npx create-next-app",
    "vite create",
    "todo app",
    "todo list",
    "calculator app",
    "weather app",
    "chat application",
    "e-commerce",
    "blog platform",
    "social media clone",
    "portfolio website",
    "landing page template",
    "crud application",
    "login registration",
    "authentication boilerplate",
)

COMMON_REPO_KEYWORDS: Tuple[str, ...] = (
    "tutorial",
    "example",
    "demo",
    "template",
    "starter",
    "boilerplate",
    "scaffold",
    "seed project",
    "clone",
    "copy",
    "fork",
    "sample",
)

# Sub-score weights of the overall risk blend.
_COMMIT_WEIGHT = 0.40
_AI_WEIGHT = 0.20
_MODULARITY_WEIGHT = 0.15
_BOILERPLATE_WEIGHT = 0.15
_DENSITY_WEIGHT = 0.10

MIN_OVERALL_SCORE = 5


def count_matches(text: str, patterns: Sequence[str]) -> int:
    """Number of patterns that occur in ``text`` as case-insensitive substrings."""
    lowered = (text or "").lower()
    return sum(1 for pattern in patterns if pattern in lowered)


def ai_pattern_score(description: str) -> Tuple[int, int]:
    """Return ``(score, hits)`` for marketing phrases typical of generated prose."""
    hits = count_matches(description, AI_PATTERNS)
    return min(round_half_up(hits / 5 * 100), 100), hits


def keyword_density(description: str) -> int:
    words = (description or "").lower().split()
    counts = Counter(word for word in words if len(word) > 3)
    repeated = sum(1 for count in counts.values() if count > 2)
    return min(round_half_up(repeated / max(len(words), 1) * 200), 100)


def boilerplate_score(description: str, project_name: str) -> int:
    hits = (
        count_matches(description, BOILERPLATE_PATTERNS)
        + count_matches(project_name, BOILERPLATE_PATTERNS)
        + count_matches(project_name, COMMON_REPO_KEYWORDS)
    )
    return min(hits * 20, 100)


def plagiarism_level(score: int) -> str:
    """Bucket an overall score into the label shown to judges."""
    if score >= 70:
        return "High Risk"
    if score >= 40:
        return "Medium Risk"
    return "Low Risk"


def assess_plagiarism(
    github_url: str,
    description: str,
    project_name: str,
    analysis: Optional[RepositoryAnalysis] = None,
    team_size: Optional[int] = None,
) -> PlagiarismAssessment:
    """Score originality risk between 5 and 100 for one submission.

    Repository evidence dominates the blend when it was fetched. Without it the
    commit and modularity risks take fixed mid-range values, slightly higher when
    no repository URL was given at all. ``team_size`` of None is treated as a
    claimed team, so a single committing author still raises the risk.
    """
    description = description or ""
    project_name = project_name or ""
    flags: List[str] = []
    positives: List[str] = []

    word_count = len(description.split())
    ai_score, ai_hits = ai_pattern_score(description)
    if ai_hits >= 4:
        flags.append(f"Description uses {ai_hits} AI-generated phrases - likely GPT-written")
    elif ai_hits >= 2:
        flags.append(f"Description has {ai_hits} AI-pattern words")
    elif ai_hits == 0 and word_count > 20:
        positives.append("Description appears human-written")

    density = keyword_density(description)

    boilerplate = boilerplate_score(description, project_name)
    if boilerplate > 30:
        flags.append("Project matches common boilerplate/tutorial patterns")

    if analysis is not None and analysis.fetched:
        commit_risk, modularity_risk = _repository_risks(analysis, team_size, flags, positives)
    elif not github_url or not github_url.strip():
        commit_risk, modularity_risk = 55, 60
        flags.append("No GitHub URL provided - cannot verify code authenticity")
    else:
        commit_risk, modularity_risk = 50, 55
        flags.append("GitHub repo could not be accessed - may be private or invalid")
        if analysis is not None and analysis.error:
            flags.append(f"Details: {analysis.error}")

    raw = round_half_up(
        commit_risk * _COMMIT_WEIGHT
        + ai_score * _AI_WEIGHT
        + modularity_risk * _MODULARITY_WEIGHT
        + boilerplate * _BOILERPLATE_WEIGHT
        + density * _DENSITY_WEIGHT
    )
    overall = max(MIN_OVERALL_SCORE, min(raw, 100))
    logger.debug(
        "Plagiarism risk for %r: overall=%s commit=%s ai=%s modularity=%s boilerplate=%s density=%s",
        project_name,
        overall,
        commit_risk,
        ai_score,
        modularity_risk,
        boilerplate,
        density,
    )

    return PlagiarismAssessment(
        overall_score=overall,
        keyword_density=density,
        ai_pattern_score=ai_score,
        boilerplate_score=boilerplate,
        commit_history_score=commit_risk,
        code_modularity_score=modularity_risk,
        flags=tuple(dedupe(flags)),
        positives=tuple(dedupe(positives)),
    )


def _repository_risks(
    analysis: RepositoryAnalysis,
    team_size: Optional[int],
    flags: List[str],
    positives: List[str],
) -> Tuple[int, int]:
    commit_risk = analysis.burst_commit_score
    if analysis.is_forked:
        flags.append("Repository is a FORK - code is copied from another repo")
        commit_risk = 85
    if analysis.is_mirror:
        flags.append("Repository is a MIRROR - not original")
        commit_risk = 90

    flags.extend(analysis.flags)
    positives.extend(analysis.positives)

    # Floors only ever raise the risk; they run in this fixed order.
    claimed_team = team_size is None or team_size > 1
    if analysis.single_author_percent == 100 and analysis.total_commits > 2 and claimed_team:
        flags.append(
            "Only 1 commit author despite claimed team - others may not have contributed code"
        )
        commit_risk = max(commit_risk, 55)
    if analysis.total_commits <= 5:
        commit_risk = max(commit_risk, 60)
        if not any("minimal" in flag for flag in flags):
            flags.append(
                f"Only {analysis.total_commits} commits - suspiciously low development activity"
            )
    if analysis.burst_commit_score >= 50 and analysis.total_commits > 3:
        commit_risk = max(commit_risk, 50)

    modularity_risk = round_half_up((10 - analysis.modularity_score) * 10)
    if analysis.modularity_score >= 7:
        positives.append(
            f"Good code structure ({analysis.total_files} files, {analysis.total_dirs} dirs)"
        )
    if analysis.modularity_score <= 3:
        flags.append("Poor code organization - minimal file structure")
    if analysis.has_tests:
        positives.append("Project includes test files")
    elif analysis.total_files > 10:
        flags.append("No tests found despite substantial codebase")
        modularity_risk = max(modularity_risk, 40)
    if not analysis.has_readme:
        flags.append("No README.md - lacks documentation")
        modularity_risk = max(modularity_risk, 35)
    if not analysis.has_ci_config and analysis.total_files > 15:
        modularity_risk = max(modularity_risk, 30)

    return commit_risk, modularity_risk


__all__ = [
    "AI_PATTERNS",
    "BOILERPLATE_PATTERNS",
    "COMMON_REPO_KEYWORDS",
    "MIN_OVERALL_SCORE",
    "assess_plagiarism",
    "plagiarism_level",
]
