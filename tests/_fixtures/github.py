"""In-memory GitHub REST API for analyzer and pipeline tests."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

import httpx

from hackeval.github.client import GitHubClient


def commit(author: str, when: datetime, message: str = "Add feature") -> Dict[str, Any]:
    """Build a commit payload shaped like the commits endpoint returns."""
    return {
        "sha": f"{author}-{when.timestamp():.0f}",
        "commit": {
            "author": {"name": author, "date": when.strftime("%Y-%m-%dT%H:%M:%SZ")},
            "committer": {"name": author, "date": when.strftime("%Y-%m-%dT%H:%M:%SZ")},
            "message": message,
        },
        "author": {"login": author.lower()},
    }


def spread_commits(
    count: int,
    *,
    days: int,
    authors: Sequence[str] = ("alice", "bob"),
    start: datetime | None = None,
    message: str = "Implement feature",
) -> List[Dict[str, Any]]:
    """``count`` commits spread evenly over ``days`` days, newest first."""
    start = start or datetime(2024, 3, 1, 8, 0, tzinfo=UTC)
    per_day = max(1, -(-count // days))
    items = []
    for index in range(count):
        day, slot = divmod(index, per_day)
        when = start + timedelta(days=day, hours=3 * slot)
        items.append(commit(authors[index % len(authors)], when, f"{message} {index}"))
    return list(reversed(items))


def tree(files: Iterable[str], dirs: Iterable[str] = ()) -> List[Dict[str, Any]]:
    entries = [{"path": path, "type": "tree"} for path in dirs]
    entries.extend({"path": path, "type": "blob", "size": 120} for path in files)
    return entries


def metadata(owner: str, repo: str, **overrides: Any) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "name": repo,
        "full_name": f"{owner}/{repo}",
        "description": None,
        "visibility": "public",
        "default_branch": "main",
        "size": 42,
        "stargazers_count": 3,
        "forks_count": 1,
        "open_issues_count": 0,
        "created_at": "2024-03-01T08:00:00Z",
        "updated_at": "2024-03-10T08:00:00Z",
        "pushed_at": "2024-03-10T08:00:00Z",
        "fork": False,
        "mirror_url": None,
    }
    payload.update(overrides)
    return payload


class FakeGitHub:
    """Serves registered repositories through ``httpx.MockTransport``."""

    def __init__(self) -> None:
        self._routes: Dict[str, Tuple[int, Any]] = {}
        self.requests: List[str] = []

    def add_repository(
        self,
        owner: str,
        repo: str,
        *,
        commits: Sequence[Mapping[str, Any]] = (),
        files: Iterable[str] = (),
        dirs: Iterable[str] = (),
        languages: Optional[Mapping[str, int]] = None,
        **meta: Any,
    ) -> None:
        info = metadata(owner, repo, **meta)
        base = f"/repos/{owner}/{repo}"
        self._routes[base] = (200, info)
        self._routes[f"{base}/commits"] = (200, list(commits))
        self._routes[f"{base}/git/trees/{info['default_branch']}"] = (
            200,
            {"sha": "abc", "tree": tree(files, dirs), "truncated": False},
        )
        self._routes[f"{base}/languages"] = (200, dict(languages or {}))

    def fail(self, path: str, status: int) -> None:
        self._routes[path] = (status, {"message": "error"})

    def handler(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        self.requests.append(path)
        status, payload = self._routes.get(path, (404, {"message": "Not Found"}))
        return httpx.Response(status, json=payload)

    def client(self, **kwargs: Any) -> GitHubClient:
        return GitHubClient(transport=httpx.MockTransport(self.handler), **kwargs)


__all__ = ["FakeGitHub", "commit", "metadata", "spread_commits", "tree"]
