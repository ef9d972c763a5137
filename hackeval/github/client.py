"""Thin client for the GitHub REST API endpoints the analyzer needs."""

from __future__ import annotations

from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx

from ..logging import get_logger

_ACCEPT = "application/vnd.github.v3+json"
_USER_AGENT = "hackeval-repository-analyzer"


class RepositoryFetchError(RuntimeError):
    """Raised when a repository endpoint cannot be read."""

    def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class GitHubClient:
    """Reads repository metadata, commits, trees and languages.

    A single ``httpx.Client`` is shared by every request; it is safe to call
    the fetch methods from several threads at once. Every request is bounded
    by ``request_timeout`` and no request is retried.
    """

    DEFAULT_BASE_URL = "https://api.github.com"

    def __init__(
        self,
        *,
        base_url: str = DEFAULT_BASE_URL,
        token: Optional[str] = None,
        request_timeout: float = 8.0,
        commit_window: int = 100,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.request_timeout = request_timeout
        self.commit_window = commit_window
        headers = {"Accept": _ACCEPT, "User-Agent": _USER_AGENT}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._client = httpx.Client(
            base_url=self.base_url,
            headers=headers,
            timeout=httpx.Timeout(request_timeout),
            transport=transport,
        )
        self.logger = get_logger("github")

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "GitHubClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def get_repository(self, owner: str, repo: str) -> Dict[str, Any]:
        payload = self._get_json(f"/repos/{owner}/{repo}")
        if not isinstance(payload, dict):
            raise RepositoryFetchError("GitHub API returned an unexpected repository payload")
        return payload

    def list_commits(self, owner: str, repo: str) -> List[Dict[str, Any]]:
        payload = self._get_json(
            f"/repos/{owner}/{repo}/commits", params={"per_page": self.commit_window}
        )
        return [item for item in payload if isinstance(item, dict)] if isinstance(payload, list) else []

    def get_tree(self, owner: str, repo: str, branch: str) -> List[Dict[str, Any]]:
        payload = self._get_json(
            f"/repos/{owner}/{repo}/git/trees/{quote(branch, safe='')}",
            params={"recursive": 1},
        )
        tree = payload.get("tree") if isinstance(payload, dict) else None
        return [item for item in tree if isinstance(item, dict)] if isinstance(tree, list) else []

    def get_languages(self, owner: str, repo: str) -> Dict[str, int]:
        payload = self._get_json(f"/repos/{owner}/{repo}/languages")
        if not isinstance(payload, dict):
            return {}
        return {
            str(name): int(count)
            for name, count in payload.items()
            if isinstance(count, (int, float)) and not isinstance(count, bool)
        }

    def _get_json(self, path: str, params: Dict[str, Any] | None = None) -> Any:
        try:
            response = self._client.get(path, params=params)
        except httpx.TimeoutException as exc:
            raise RepositoryFetchError(
                f"GitHub API request timed out after {self.request_timeout:g}s"
            ) from exc
        except httpx.HTTPError as exc:
            raise RepositoryFetchError(f"GitHub API request failed: {exc}") from exc

        if response.status_code >= 400:
            reason = response.reason_phrase or "error"
            raise RepositoryFetchError(
                f"GitHub API {response.status_code}: {reason}",
                status_code=response.status_code,
            )
        try:
            return response.json()
        except ValueError as exc:
            raise RepositoryFetchError("GitHub API returned invalid JSON") from exc


__all__ = ["GitHubClient", "RepositoryFetchError"]
