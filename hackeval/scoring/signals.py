"""Text, link, presentation and team signals extracted from a project record."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

from ..models import Presentation
from ..utils import clamp_score, dedupe
from .constants import (
    COMPLEXITY_WEIGHTS,
    DOMAIN_TECH,
    GENERIC_WORDS,
    IMPACT_WORDS,
    INNOVATION_WORDS,
    TECH_COMPLEXITY_HIGH,
    TECH_COMPLEXITY_MEDIUM,
    TIER_WEIGHTS,
)

_SENTENCE_SPLIT = re.compile(r"[.!?]+")
_FIRST_PERSON = re.compile(r"\b(we|our|team)\b", re.IGNORECASE)
_GITHUB_REPO = re.compile(r"github\.com/([^/]+)/([^/\s?#]+)")
_PLACEHOLDER_REPO = re.compile(r"^(test|demo|sample|example|untitled|my-app|app|project)")
_PLACEHOLDER_DECK = re.compile(r"^(untitled|presentation|document|new)")

# Deck sizes (bytes) that suggest substantial and very detailed content.
SUBSTANTIAL_DECK_BYTES = 75_000
DETAILED_DECK_BYTES = 375_000


@dataclass(frozen=True)
class DescriptionSignals:
    """Sub-scores (1-10) read from free-text description."""

    technical_depth: int
    innovation: int
    impact: int
    clarity: int
    keywords: Tuple[str, ...]
    word_count: int
    sentence_count: int


@dataclass(frozen=True)
class Note:
    """A sub-score with the human-readable notes that explain it."""

    score: int
    notes: Tuple[str, ...]

    @property
    def text(self) -> str:
        return ". ".join(self.notes)


def analyze_description(description: str, domain: str) -> DescriptionSignals:
    description = description or ""
    lowered = description.lower()
    words = lowered.split()
    sentences = [part for part in _SENTENCE_SPLIT.split(description) if part.strip()]
    found: List[str] = []

    tech = 3.0
    tiers = DOMAIN_TECH.get(domain) or DOMAIN_TECH["Other"]
    for tier in ("high", "medium", "low"):
        for keyword in tiers[tier]:
            if keyword in lowered:
                tech += TIER_WEIGHTS[tier]
                found.append(keyword)
    high_weight, medium_weight = COMPLEXITY_WEIGHTS
    for keyword in TECH_COMPLEXITY_HIGH:
        if keyword in lowered:
            tech += high_weight
            found.append(keyword)
    for keyword in TECH_COMPLEXITY_MEDIUM:
        if keyword in lowered:
            tech += medium_weight
            found.append(keyword)

    innovation = 3.0
    innovation += sum(1 for word in INNOVATION_WORDS if word in lowered)
    innovation -= sum(1 for word in GENERIC_WORDS if word in lowered)

    impact = 3.0 + 0.7 * sum(1 for word in IMPACT_WORDS if word in lowered)

    clarity = 4.0
    if len(words) >= 30:
        clarity += 1
    if len(words) >= 60:
        clarity += 1
    if len(words) >= 100:
        clarity += 0.5
    if len(sentences) >= 3:
        clarity += 1
    if len(sentences) >= 5:
        clarity += 0.5
    if "," in description:
        clarity += 0.3
    if _FIRST_PERSON.search(description):
        clarity += 0.3

    return DescriptionSignals(
        technical_depth=clamp_score(tech),
        innovation=clamp_score(innovation),
        impact=clamp_score(impact),
        clarity=clamp_score(clarity),
        keywords=tuple(dedupe(found)),
        word_count=len(words),
        sentence_count=len(sentences),
    )


def analyze_url(url: str) -> Note:
    """Judge a repository link by its shape alone."""
    if not url or not url.strip():
        return Note(2, ("No GitHub URL provided - cannot assess code quality",))

    notes: List[str] = []
    score = 5.0
    lowered = url.strip().lower()
    if "github.com/" in lowered:
        score += 1
        notes.append("Valid GitHub repository link provided")
        match = _GITHUB_REPO.search(lowered)
        if match:
            owner, repo = match.group(1), match.group(2)
            if len(repo) > 3 and not _PLACEHOLDER_REPO.match(repo):
                score += 1
                notes.append(f"Meaningful repo name: {repo}")
            if owner != repo:
                score += 0.5
    elif "gitlab.com" in lowered or "bitbucket.org" in lowered:
        score += 0.5
        notes.append("Alternative Git hosting platform")
    else:
        score -= 1
        notes.append("URL doesn't appear to be a recognized Git platform")
    return Note(clamp_score(score), tuple(notes))


def analyze_presentation(presentation: Optional[Presentation], project_name: str) -> Note:
    if presentation is None:
        return Note(3, ("No presentation uploaded - presentation score limited",))

    score = 6.0
    if "pdf" in (presentation.file_type or "").lower():
        score += 1
    name = (presentation.file_name or "").lower()
    if name:
        first_word = (project_name or "").lower().split(" ")[0]
        if first_word in name:
            score += 1
        if not _PLACEHOLDER_DECK.match(name):
            score += 0.5
    if presentation.size_bytes > SUBSTANTIAL_DECK_BYTES:
        score += 0.5
    if presentation.size_bytes > DETAILED_DECK_BYTES:
        score += 0.5
    return Note(clamp_score(score), (f"Presentation uploaded ({presentation.file_name})",))


def analyze_team(members: Tuple[str, ...]) -> Note:
    count = len([member for member in members if member and member.strip()])
    if count == 0:
        return Note(4, ("No team members listed",))
    if count == 1:
        return Note(5, ("Solo developer",))
    if count == 2:
        return Note(6, ("Small team (2 members)",))
    if count <= 4:
        return Note(8, (f"Well-sized team ({count} members)",))
    return Note(7, (f"Large team ({count} members)",))


__all__ = [
    "DETAILED_DECK_BYTES",
    "DescriptionSignals",
    "Note",
    "SUBSTANTIAL_DECK_BYTES",
    "analyze_description",
    "analyze_presentation",
    "analyze_team",
    "analyze_url",
]
