"""Repository analyzer: fetches GitHub data and reduces it to a RepositoryAnalysis."""

from __future__ import annotations

import re
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import Any, Dict, Iterable, List, Optional, Tuple, TypeVar

from .base import Analyzer, Findings, RepositorySnapshot
from .commits import CommitHistoryAnalyzer
from .tree import FileTreeAnalyzer
from ..github.client import GitHubClient, RepositoryFetchError
from ..logging import get_logger
from ..models import RepositoryAnalysis
from ..stores.analysis_cache import AnalysisCache
from ..utils import clamp_score, dedupe

_GITHUB_URL = re.compile(r"github\.com/([^/\s]+)/([^/\s?#]+)", re.IGNORECASE)

INVALID_URL_ERROR = "Invalid or missing GitHub URL"

T = TypeVar("T")


def parse_repository_url(url: str | None) -> Optional[Tuple[str, str]]:
    """Extract ``(owner, repo)`` from a GitHub URL, or None when malformed."""
    if not url or not url.strip():
        return None
    match = _GITHUB_URL.search(url.strip())
    if not match:
        return None
    owner, repo = match.group(1), match.group(2)
    if repo.lower().endswith(".git"):
        repo = repo[:-4]
    if not owner or not repo:
        return None
    return owner, repo


def describe_fetch_error(exc: Exception) -> str:
    """Map a metadata fetch failure onto the user-facing error taxonomy."""
    status = getattr(exc, "status_code", None)
    if status == 404:
        return "Repository not found (404) - private or doesn't exist"
    if status == 403:
        return "GitHub API rate limit reached - try again later"
    return f"Failed to fetch: {exc}"


def cleanliness_score(
    *,
    has_readme: bool,
    has_license: bool,
    language_count: int,
    has_env_example: bool,
    has_tests: bool,
    has_description: bool,
    total_files: int,
) -> int:
    score = 4.0
    if has_readme:
        score += 1.5
    if has_license:
        score += 0.5
    if language_count >= 2:
        score += 0.5
    if has_env_example:
        score += 0.5
    if has_tests:
        score += 1
    if has_description:
        score += 0.5
    if total_files <= 3:
        score -= 2
    return clamp_score(score)


def overall_repo_score(
    *,
    modularity: int,
    cleanliness: int,
    genuineness: int,
    is_forked: bool,
    is_mirror: bool,
    has_tests: bool,
    has_ci_config: bool,
) -> int:
    score = modularity * 0.30 + cleanliness * 0.25 + genuineness * 0.35
    if is_forked:
        score -= 2
    if is_mirror:
        score -= 2
    if has_tests:
        score += 0.5
    if has_ci_config:
        score += 0.5
    return clamp_score(score)


class RepositoryAnalyzer:
    """Produces a RepositoryAnalysis for a repository URL; never raises."""

    def __init__(
        self,
        client: GitHubClient | None = None,
        *,
        analyzers: Optional[Iterable[Analyzer]] = None,
        cache: AnalysisCache | None = None,
        max_workers: int = 4,
    ) -> None:
        self.client = client or GitHubClient()
        self.analyzers: List[Analyzer] = (
            list(analyzers)
            if analyzers is not None
            else [CommitHistoryAnalyzer(), FileTreeAnalyzer()]
        )
        self.cache = cache
        self.max_workers = max_workers
        self.logger = get_logger("analyzer")

    def analyze(self, url: str | None) -> RepositoryAnalysis:
        """Fetch and reduce the repository behind ``url``."""
        parsed = parse_repository_url(url)
        if parsed is None:
            self.logger.debug("Skipping repository analysis for malformed URL %r", url)
            return RepositoryAnalysis.empty(INVALID_URL_ERROR)
        owner, repo = parsed
        cache_key = f"{owner}/{repo}".lower()

        if self.cache is not None:
            cached = self.cache.get(cache_key)
            if cached is not None:
                self.logger.debug("Using cached analysis for %s", cache_key)
                return cached

        try:
            snapshot = self._fetch_snapshot(owner, repo)
        except RepositoryFetchError as exc:
            self.logger.warning("Repository fetch failed for %s/%s: %s", owner, repo, exc)
            return RepositoryAnalysis.empty(describe_fetch_error(exc))
        except Exception as exc:  # pragma: no cover - unexpected client failure
            self.logger.exception("Unexpected failure fetching %s/%s", owner, repo)
            return RepositoryAnalysis.empty(describe_fetch_error(exc))

        analysis = self.reduce(snapshot)
        if self.cache is not None:
            self.cache.store(cache_key, analysis)
            self.cache.persist()
        return analysis

    def reduce(self, snapshot: RepositorySnapshot) -> RepositoryAnalysis:
        """Combine analyzer findings with repository-level scores."""
        fields: Dict[str, Any] = {}
        flags: List[str] = []
        positives: List[str] = []
        for analyzer in self.analyzers:
            findings: Findings = analyzer.analyze(snapshot)
            fields.update(findings.fields)
            flags.extend(findings.flags)
            positives.extend(findings.positives)

        meta = snapshot.metadata
        is_forked = bool(meta.get("fork"))
        is_mirror = bool(meta.get("mirror_url"))
        languages = dict(snapshot.languages)
        ranked = sorted(languages.items(), key=lambda item: item[1], reverse=True)
        primary_language = ranked[0][0] if ranked else "Unknown"
        has_readme = bool(fields.get("has_readme"))
        has_license = bool(fields.get("has_license"))

        if is_forked:
            flags.append("Repository is a FORK - not original code")
        if is_mirror:
            flags.append("Repository is a MIRROR - copied from elsewhere")
        if has_readme:
            positives.append("README.md present")
        else:
            flags.append("No README.md - poor documentation")
        if has_license:
            positives.append("License file present")
        if len(ranked) >= 3:
            names = ", ".join(name for name, _ in ranked[:4])
            positives.append(f"Multi-language project: {names}")

        cleanliness = cleanliness_score(
            has_readme=has_readme,
            has_license=has_license,
            language_count=len(ranked),
            has_env_example=bool(fields.get("has_env_example")),
            has_tests=bool(fields.get("has_tests")),
            has_description=bool(meta.get("description")),
            total_files=int(fields.get("total_files", 0)),
        )
        genuineness = int(fields.get("commit_genuineness", 1))
        modularity = int(fields.get("modularity_score", 3))
        overall = overall_repo_score(
            modularity=modularity,
            cleanliness=cleanliness,
            genuineness=genuineness,
            is_forked=is_forked,
            is_mirror=is_mirror,
            has_tests=bool(fields.get("has_tests")),
            has_ci_config=bool(fields.get("has_ci_config")),
        )

        default_branch = meta.get("default_branch") or "main"
        fields.update(
            {
                "name": str(meta.get("name") or snapshot.repo),
                "full_name": str(meta.get("full_name") or f"{snapshot.owner}/{snapshot.repo}"),
                "description": meta.get("description"),
                "visibility": str(meta.get("visibility") or "public"),
                "default_branch": str(default_branch),
                "size": int(meta.get("size") or 0),
                "stars": int(meta.get("stargazers_count") or 0),
                "forks": int(meta.get("forks_count") or 0),
                "open_issues": int(meta.get("open_issues_count") or 0),
                "created_at": str(meta.get("created_at") or ""),
                "updated_at": str(meta.get("updated_at") or ""),
                "pushed_at": str(meta.get("pushed_at") or ""),
                "is_forked": is_forked,
                "is_mirror": is_mirror,
                "languages": languages,
                "primary_language": primary_language,
                "cleanliness_score": cleanliness,
                "commit_genuineness": genuineness,
                "overall_repo_score": overall,
                "flags": tuple(dedupe(flags)),
                "positives": tuple(dedupe(positives)),
            }
        )
        return RepositoryAnalysis(fetched=True, error=None, **fields)

    def _fetch_snapshot(self, owner: str, repo: str) -> RepositorySnapshot:
        client = self.client
        timeout = client.request_timeout * 2
        with ThreadPoolExecutor(
            max_workers=self.max_workers, thread_name_prefix="hackeval-fetch"
        ) as pool:
            metadata_future = pool.submit(client.get_repository, owner, repo)
            commits_future = pool.submit(client.list_commits, owner, repo)
            languages_future = pool.submit(client.get_languages, owner, repo)

            try:
                metadata = metadata_future.result(timeout=timeout)
            except FutureTimeoutError as exc:
                raise RepositoryFetchError(
                    f"repository metadata did not arrive within {timeout:g}s"
                ) from exc
            branch = str(metadata.get("default_branch") or "main")
            tree_future = pool.submit(client.get_tree, owner, repo, branch)

            commits = self._result_or(commits_future, [], "commits", timeout)
            languages = self._result_or(languages_future, {}, "languages", timeout)
            tree = self._result_or(tree_future, [], "tree", timeout)

        return RepositorySnapshot(
            owner=owner,
            repo=repo,
            metadata=metadata,
            commits=commits,
            tree=tree,
            languages=languages,
        )

    def _result_or(self, future: "Future[T]", default: T, label: str, timeout: float) -> T:
        try:
            return future.result(timeout=timeout)
        except (RepositoryFetchError, FutureTimeoutError) as exc:
            self.logger.debug("Falling back to empty %s: %s", label, exc or "timed out")
            return default


__all__ = [
    "INVALID_URL_ERROR",
    "RepositoryAnalyzer",
    "cleanliness_score",
    "describe_fetch_error",
    "overall_repo_score",
    "parse_repository_url",
]
