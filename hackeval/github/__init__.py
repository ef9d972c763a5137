"""Repository-hosting API access."""

from .client import GitHubClient, RepositoryFetchError

__all__ = ["GitHubClient", "RepositoryFetchError"]
