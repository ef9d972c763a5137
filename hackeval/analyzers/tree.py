"""File-tree analyzer: layout signals and the modularity heuristic."""

from __future__ import annotations

from collections import Counter
from typing import Dict, Iterable, List

from .base import Analyzer, Findings, RepositorySnapshot
from ..utils import clamp_score

_DEPENDENCY_MARKERS = ("requirements.txt", "pyproject.toml", "pipfile")
_CONTAINER_MARKERS = ("dockerfile", "docker-compose")
_CI_MARKERS = (".github/workflows", ".gitlab-ci", "jenkinsfile", ".circleci")
_TEST_MARKERS = ("test", "spec", "__tests__")
_ENV_EXAMPLE_MARKERS = (".env.example", ".env.sample")
_TOP_LEVEL_LIMIT = 20


def _any_contains(paths: Iterable[str], markers: Iterable[str]) -> bool:
    markers = tuple(markers)
    return any(marker in path for path in paths for marker in markers)


def extension_of(path: str) -> str:
    """Return the lowercase extension of the final path segment, or ``(none)``."""
    basename = path.rsplit("/", 1)[-1]
    if "." not in basename:
        return "(none)"
    return "." + basename.rsplit(".", 1)[-1].lower()


def modularity_score(
    *,
    total_files: int,
    total_dirs: int,
    structure_depth: int,
    has_container_file: bool,
    has_ci_config: bool,
    has_tests: bool,
    has_env_example: bool,
) -> tuple[int, List[str], List[str]]:
    """Estimate code organisation from counts; returns ``(score, flags, positives)``."""
    flags: List[str] = []
    positives: List[str] = []
    score = 3.0

    if total_dirs >= 3:
        score += 1
        positives.append(f"{total_dirs} directories - organized structure")
    if total_dirs >= 6:
        score += 1
        positives.append("Deep directory hierarchy - good separation of concerns")
    if structure_depth >= 3:
        score += 0.5
    if structure_depth >= 5:
        score += 0.5

    if total_files >= 10:
        score += 0.5
    if total_files >= 25:
        score += 0.5
    if total_files >= 50:
        score += 1
        positives.append(f"{total_files} files - substantial codebase")

    if has_container_file:
        score += 0.5
        positives.append("Docker configuration found")
    if has_ci_config:
        score += 1
        positives.append("CI/CD pipeline configured")
    if has_tests:
        score += 1
        positives.append("Test files found")
    if has_env_example:
        score += 0.5
        positives.append(".env.example present - good security practice")

    if total_files <= 3:
        score -= 2
        flags.append("Very few files - possibly incomplete or single-file dump")
    if total_dirs == 0:
        score -= 1
        flags.append("No subdirectories - all code in root folder")
    if total_files > 10 and total_dirs <= 1:
        score -= 1
        flags.append("Many files but flat structure - lacks proper code organization")

    return clamp_score(score), flags, positives


class FileTreeAnalyzer(Analyzer):
    """Summarises the recursive tree of the default branch."""

    name = "tree"

    def analyze(self, snapshot: RepositorySnapshot) -> Findings:
        items = [item for item in snapshot.tree if isinstance(item.get("path"), str)]
        files = [item["path"] for item in items if item.get("type") == "blob"]
        dirs = [item["path"] for item in items if item.get("type") == "tree"]

        extensions: Dict[str, int] = dict(Counter(extension_of(path) for path in files))
        lowered = [item["path"].lower() for item in items]

        has_package_manifest = any(
            path == "package.json" or path.endswith("/package.json") for path in lowered
        )
        has_dependency_file = _any_contains(lowered, _DEPENDENCY_MARKERS)
        has_container_file = _any_contains(lowered, _CONTAINER_MARKERS)
        has_ci_config = _any_contains(lowered, _CI_MARKERS)
        has_tests = _any_contains(lowered, _TEST_MARKERS)
        has_env_example = _any_contains(lowered, _ENV_EXAMPLE_MARKERS)

        structure_depth = max([len(item["path"].split("/")) for item in items] + [1])
        top_level = tuple(
            item["path"] for item in items if "/" not in item["path"]
        )[:_TOP_LEVEL_LIMIT]

        score, flags, positives = modularity_score(
            total_files=len(files),
            total_dirs=len(dirs),
            structure_depth=structure_depth,
            has_container_file=has_container_file,
            has_ci_config=has_ci_config,
            has_tests=has_tests,
            has_env_example=has_env_example,
        )

        has_readme = any(path.startswith("readme") for path in lowered)
        has_license = any(path.startswith("license") for path in lowered)

        return Findings(
            fields={
                "total_files": len(files),
                "total_dirs": len(dirs),
                "file_extensions": extensions,
                "has_package_manifest": has_package_manifest,
                "has_dependency_file": has_dependency_file,
                "has_container_file": has_container_file,
                "has_ci_config": has_ci_config,
                "has_tests": has_tests,
                "has_env_example": has_env_example,
                "structure_depth": structure_depth,
                "top_level_items": top_level,
                "modularity_score": score,
                "has_readme": has_readme,
                "has_license": has_license,
            },
            flags=flags,
            positives=positives,
        )


__all__ = ["FileTreeAnalyzer", "extension_of", "modularity_score"]
