"""Repository analyzers."""

from .base import Analyzer, Findings, RepositorySnapshot
from .commits import CommitHistoryAnalyzer
from .repository import RepositoryAnalyzer, parse_repository_url
from .tree import FileTreeAnalyzer

__all__ = [
    "Analyzer",
    "CommitHistoryAnalyzer",
    "FileTreeAnalyzer",
    "Findings",
    "RepositoryAnalyzer",
    "RepositorySnapshot",
    "parse_repository_url",
]
