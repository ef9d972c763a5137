"""Base classes for repository analyzers."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass
class RepositorySnapshot:
    """Raw API payloads for one repository, as fetched."""

    owner: str
    repo: str
    metadata: Dict[str, Any]
    commits: List[Dict[str, Any]] = field(default_factory=list)
    tree: List[Dict[str, Any]] = field(default_factory=list)
    languages: Dict[str, int] = field(default_factory=dict)


@dataclass
class Findings:
    """Fields and evidence an analyzer contributes to a RepositoryAnalysis."""

    fields: Dict[str, Any] = field(default_factory=dict)
    flags: List[str] = field(default_factory=list)
    positives: List[str] = field(default_factory=list)


class Analyzer(ABC):
    """Contract for analyzers that reduce a snapshot into analysis fields."""

    name: str = "analyzer"

    @abstractmethod
    def analyze(self, snapshot: RepositorySnapshot) -> Findings:
        """Reduce the snapshot into analysis fields plus flags and positives."""
