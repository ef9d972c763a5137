"""Core data models shared across hackeval components."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, replace
from typing import Any, Dict, Mapping, Optional, Tuple, Union

DOMAINS: Tuple[str, ...] = (
    "HealthTech",
    "SmartCities",
    "EdTech",
    "FinTech",
    "AgriTech",
    "Sustainability",
    "AI/ML",
    "Blockchain",
    "IoT",
    "Cybersecurity",
    "Gaming",
    "SocialImpact",
    "Other",
)


class InvalidProjectError(ValueError):
    """Raised when a project record is structurally unusable."""


@dataclass(frozen=True)
class Presentation:
    """Metadata for an uploaded slide deck."""

    file_name: str
    file_type: str = ""
    size_bytes: int = 0


@dataclass(frozen=True)
class CommitDay:
    """Number of commits authored on a single calendar day (UTC)."""

    date: str
    count: int


@dataclass(frozen=True)
class RepositoryAnalysis:
    """Fixed-shape reduction of a hosted repository's metadata."""

    fetched: bool
    error: Optional[str] = None

    name: str = ""
    full_name: str = ""
    description: Optional[str] = None
    visibility: str = "unknown"
    default_branch: str = ""
    size: int = 0
    stars: int = 0
    forks: int = 0
    open_issues: int = 0
    created_at: str = ""
    updated_at: str = ""
    pushed_at: str = ""

    is_forked: bool = False
    is_mirror: bool = False
    has_readme: bool = False
    has_license: bool = False

    languages: Dict[str, int] = field(default_factory=dict)
    primary_language: str = "Unknown"

    total_commits: int = 0
    commit_authors: Tuple[str, ...] = ()
    commit_timeline: Tuple[CommitDay, ...] = ()
    first_commit_date: Optional[str] = None
    last_commit_date: Optional[str] = None
    avg_time_between_commits: float = 0.0
    burst_commit_score: int = 50
    single_author_percent: int = 100

    total_files: int = 0
    total_dirs: int = 0
    file_extensions: Dict[str, int] = field(default_factory=dict)
    has_package_manifest: bool = False
    has_dependency_file: bool = False
    has_container_file: bool = False
    has_ci_config: bool = False
    has_tests: bool = False
    has_env_example: bool = False
    structure_depth: int = 0
    top_level_items: Tuple[str, ...] = ()

    modularity_score: int = 3
    cleanliness_score: int = 3
    commit_genuineness: int = 3
    overall_repo_score: int = 3

    flags: Tuple[str, ...] = ()
    positives: Tuple[str, ...] = ()

    @classmethod
    def empty(cls, error: str) -> "RepositoryAnalysis":
        """Return the conservative record used whenever a fetch is impossible."""
        return cls(fetched=False, error=error, flags=(error,))

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RepositoryAnalysis":
        payload = dict(data)
        payload["commit_timeline"] = tuple(
            CommitDay(date=str(item["date"]), count=int(item["count"]))
            for item in payload.get("commit_timeline") or ()
        )
        for key in ("commit_authors", "top_level_items", "flags", "positives"):
            payload[key] = tuple(payload.get(key) or ())
        known = set(cls.__dataclass_fields__)
        return cls(**{key: value for key, value in payload.items() if key in known})


@dataclass(frozen=True)
class PlagiarismAssessment:
    """Originality risk for a project, 5-100 with five named sub-scores."""

    overall_score: int
    keyword_density: int
    ai_pattern_score: int
    boilerplate_score: int
    commit_history_score: int
    code_modularity_score: int
    flags: Tuple[str, ...] = ()
    positives: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PlagiarismAssessment":
        payload = dict(data)
        payload["flags"] = tuple(payload.get("flags") or ())
        payload["positives"] = tuple(payload.get("positives") or ())
        known = set(cls.__dataclass_fields__)
        return cls(**{key: value for key, value in payload.items() if key in known})


@dataclass(frozen=True)
class EvaluationResult:
    """Eight-criterion score card for a project."""

    scores: Dict[str, int]
    weighted_total: float
    explanations: Dict[str, str]
    overall_verdict: str
    verdict_detail: str
    timestamp: str
    backend: str = "heuristic"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "EvaluationResult":
        known = set(cls.__dataclass_fields__)
        return cls(**{key: value for key, value in dict(data).items() if key in known})


_OPTIONAL_TEXT_FIELDS = (
    "description",
    "github_url",
    "team_name",
    "id",
    "submitted_by",
    "submission_time",
)


@dataclass(frozen=True)
class Project:
    """Submitted hackathon project as supplied by the submission flow."""

    project_name: str
    domain: str = "Other"
    description: str = ""
    github_url: str = ""
    team_name: str = ""
    members: Tuple[str, ...] = ()
    presentation: Optional[Presentation] = None
    id: str = ""
    submitted_by: str = ""
    submission_time: str = ""
    analysis: Optional[RepositoryAnalysis] = None
    plagiarism: Optional[PlagiarismAssessment] = None
    evaluation: Optional[EvaluationResult] = None

    @property
    def active_members(self) -> Tuple[str, ...]:
        return tuple(member for member in self.members if member and member.strip())

    @property
    def plagiarism_score(self) -> int:
        return self.plagiarism.overall_score if self.plagiarism is not None else 0

    def with_results(
        self,
        *,
        analysis: Optional[RepositoryAnalysis] = None,
        plagiarism: Optional[PlagiarismAssessment] = None,
        evaluation: Optional[EvaluationResult] = None,
    ) -> "Project":
        """Return a copy carrying any supplied derived records."""
        changes: Dict[str, Any] = {}
        if analysis is not None:
            changes["analysis"] = analysis
        if plagiarism is not None:
            changes["plagiarism"] = plagiarism
        if evaluation is not None:
            changes["evaluation"] = evaluation
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Project":
        payload = dict(data)
        for key in _OPTIONAL_TEXT_FIELDS:
            if key in payload:
                payload[key] = "" if payload[key] is None else str(payload[key])
        presentation = payload.get("presentation")
        if isinstance(presentation, Mapping):
            payload["presentation"] = Presentation(
                file_name=str(presentation.get("file_name", "")),
                file_type=str(presentation.get("file_type", "")),
                size_bytes=int(presentation.get("size_bytes", 0) or 0),
            )
        payload["members"] = tuple(str(member) for member in payload.get("members") or ())
        if isinstance(payload.get("analysis"), Mapping):
            payload["analysis"] = RepositoryAnalysis.from_dict(payload["analysis"])
        if isinstance(payload.get("plagiarism"), Mapping):
            payload["plagiarism"] = PlagiarismAssessment.from_dict(payload["plagiarism"])
        if isinstance(payload.get("evaluation"), Mapping):
            payload["evaluation"] = EvaluationResult.from_dict(payload["evaluation"])
        known = set(cls.__dataclass_fields__)
        return cls(**{key: value for key, value in payload.items() if key in known})


def validate_project(project: Project) -> None:
    """Reject projects the core cannot score without fabricating data."""
    if not isinstance(project, Project):
        raise InvalidProjectError(f"Expected a Project, got {type(project).__name__}")
    if not isinstance(project.project_name, str):
        raise InvalidProjectError(
            f"Project name must be text, got {type(project.project_name).__name__}"
        )
    if not project.project_name or not project.project_name.strip():
        raise InvalidProjectError("Project name is required")
    if project.domain not in DOMAINS:
        allowed = ", ".join(DOMAINS)
        raise InvalidProjectError(f"Unknown domain '{project.domain}'. Expected one of: {allowed}")


@dataclass(frozen=True)
class Available:
    """Repository data was fetched and can back criterion formulas."""

    analysis: RepositoryAnalysis


@dataclass(frozen=True)
class Unavailable:
    """No usable repository data; formulas fall back to text signals."""

    reason: str


RepositoryEvidence = Union[Available, Unavailable]


def repository_evidence(
    analysis: Optional[RepositoryAnalysis], github_url: str = ""
) -> RepositoryEvidence:
    """Classify optional analysis output into the evidence variant."""
    if analysis is not None and analysis.fetched:
        return Available(analysis)
    if analysis is not None and analysis.error:
        return Unavailable(analysis.error)
    if github_url and github_url.strip():
        return Unavailable("Repository not analyzed")
    return Unavailable("No GitHub URL provided")


@dataclass(frozen=True)
class VerificationCheck:
    """Outcome of a single named verification check."""

    name: str
    status: str
    detail: str


@dataclass(frozen=True)
class VerificationResult:
    """Aggregated verification gate result for mentorship."""

    passed: bool
    checks: Tuple[VerificationCheck, ...]
    summary: str

    @property
    def fail_count(self) -> int:
        return sum(1 for check in self.checks if check.status == "fail")

    @property
    def warn_count(self) -> int:
        return sum(1 for check in self.checks if check.status == "warn")

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class MentorshipAdvice:
    """One improvement area with priority and effort estimates."""

    area: str
    current_state: str
    recommendation: str
    priority: str
    effort: str


@dataclass(frozen=True)
class MentorshipResult:
    """Structured mentorship response."""

    verification: VerificationResult
    improvements: Tuple[MentorshipAdvice, ...]
    action_plan: Tuple[str, ...]
    tech_suggestions: Tuple[str, ...]
    overall_advice: str
    timestamp: str
    source: str = "rules"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


__all__ = [
    "Available",
    "CommitDay",
    "DOMAINS",
    "EvaluationResult",
    "InvalidProjectError",
    "MentorshipAdvice",
    "MentorshipResult",
    "PlagiarismAssessment",
    "Presentation",
    "Project",
    "RepositoryAnalysis",
    "RepositoryEvidence",
    "Unavailable",
    "VerificationCheck",
    "VerificationResult",
    "repository_evidence",
    "validate_project",
]
