"""Verification gate run before any mentorship is generated."""

from __future__ import annotations

from typing import List

from ..models import Project, VerificationCheck, VerificationResult

PASS = "pass"
WARN = "warn"
FAIL = "fail"

MIN_DESCRIPTION_CHARS = 50
MIN_USABLE_DESCRIPTION_CHARS = 15
HIGH_PLAGIARISM_SCORE = 60


def _check_description(project: Project) -> VerificationCheck:
    length = len(project.description.strip()) if project.description else 0
    if length >= MIN_DESCRIPTION_CHARS:
        return VerificationCheck("Description", PASS, f"{length} chars, sufficient for analysis")
    if length >= MIN_USABLE_DESCRIPTION_CHARS:
        return VerificationCheck(
            "Description", WARN, f"Only {length} chars, limited context for mentorship"
        )
    return VerificationCheck("Description", FAIL, "No meaningful description provided")


def _check_repository(project: Project) -> VerificationCheck:
    analysis = project.analysis
    if analysis is not None and analysis.fetched and analysis.total_commits > 0:
        languages = list(analysis.languages)
        return VerificationCheck(
            "GitHub Repo",
            PASS,
            f"Verified: {analysis.total_commits} commits, {analysis.total_files} files, "
            f"{len(languages)} languages ({', '.join(languages)})",
        )
    if project.github_url and project.github_url.strip():
        if analysis is None or not analysis.fetched:
            return VerificationCheck(
                "GitHub Repo", WARN, "URL provided but repo data not fetched yet, run scoring first"
            )
        return VerificationCheck("GitHub Repo", WARN, "Repo accessible but limited data")
    return VerificationCheck(
        "GitHub Repo", FAIL, "No GitHub URL provided, cannot assess code quality"
    )


def _check_scoring(project: Project) -> VerificationCheck:
    evaluation = project.evaluation
    if evaluation is not None and evaluation.weighted_total > 0:
        return VerificationCheck(
            "AI Scoring",
            PASS,
            f"Scored {evaluation.weighted_total:.1f}/10 across {len(evaluation.scores)} criteria",
        )
    return VerificationCheck(
        "AI Scoring", FAIL, "Project has not been scored yet, score it first"
    )


def _check_plagiarism(project: Project) -> VerificationCheck:
    if project.plagiarism is None:
        return VerificationCheck("Plagiarism", WARN, "Plagiarism check not run yet")
    score = project.plagiarism.overall_score
    if score > HIGH_PLAGIARISM_SCORE:
        return VerificationCheck(
            "Plagiarism",
            WARN,
            f"High plagiarism concern ({score}%), mentorship may not be useful "
            "if code is not original",
        )
    return VerificationCheck("Plagiarism", PASS, f"Plagiarism risk: {score}%, acceptable")


def _check_team(project: Project) -> VerificationCheck:
    count = len(project.active_members)
    if count >= 2:
        return VerificationCheck("Team", PASS, f"{count} members listed")
    if count == 1:
        return VerificationCheck("Team", PASS, "Solo developer")
    return VerificationCheck("Team", WARN, "No team members listed")


def _check_domain(project: Project) -> VerificationCheck:
    if project.domain and project.domain != "Other":
        return VerificationCheck("Domain", PASS, f"Domain: {project.domain}")
    return VerificationCheck(
        "Domain", WARN, "Generic or unspecified domain, mentorship will be less targeted"
    )


CHECKS = (
    _check_description,
    _check_repository,
    _check_scoring,
    _check_plagiarism,
    _check_team,
    _check_domain,
)


def _summarize(fail_count: int, warn_count: int) -> str:
    if fail_count >= 2:
        return (
            "Project verification FAILED: critical data is missing. Please ensure the project "
            "has a description, scores, and ideally a GitHub repo before requesting mentorship."
        )
    if fail_count == 1:
        return (
            "Partial verification: one critical check failed. Mentorship will proceed "
            "but may be limited."
        )
    if warn_count >= 3:
        return (
            "Verified with warnings: several data points are incomplete. "
            "Mentorship quality may vary."
        )
    return "Project fully verified: all key data points available for comprehensive mentorship."


def verify_project_data(project: Project) -> VerificationResult:
    """Run the six named checks and summarise them by fail and warn counts."""
    checks: List[VerificationCheck] = [check(project) for check in CHECKS]
    fail_count = sum(1 for check in checks if check.status == FAIL)
    warn_count = sum(1 for check in checks if check.status == WARN)
    return VerificationResult(
        passed=fail_count == 0,
        checks=tuple(checks),
        summary=_summarize(fail_count, warn_count),
    )


__all__ = ["FAIL", "PASS", "WARN", "verify_project_data"]
