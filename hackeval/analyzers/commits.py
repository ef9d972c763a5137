"""Commit-history analyzer and the burst-commit heuristic."""

from __future__ import annotations

from collections import Counter
from datetime import datetime
from typing import Any, Dict, List, Sequence, Tuple

from .base import Analyzer, Findings, RepositorySnapshot
from ..models import CommitDay
from ..utils import clamp_score, isoformat_utc, parse_timestamp

GENERIC_COMMIT_MESSAGES: Tuple[str, ...] = (
    "initial commit",
    "add files",
    "update",
    "first commit",
    "auto",
    "generated",
)

# Share of generic messages above which the burst score is raised.
_GENERIC_MESSAGE_RATIO = 0.6
_GENERIC_MESSAGE_PENALTY = 20


def burst_score(dates: Sequence[datetime], commit_count: int) -> Tuple[int, str | None, str | None]:
    """Score how much a commit history looks like a single-session dump.

    ``dates`` must be sorted ascending and may be empty when no commit carries
    a parsable timestamp. Returns ``(score, flag, positive)``;
    the rules are evaluated top to bottom and the first match wins.
    """
    days = {date.date() for date in dates}
    total_days = len(days)
    span_hours = (dates[-1] - dates[0]).total_seconds() / 3600 if len(dates) >= 2 else 0.0
    avg_gap = average_gap_hours(dates)

    if commit_count <= 2:
        return (
            70,
            f"Only {commit_count} commit(s) - very minimal development history",
            None,
        )
    if total_days == 1:
        return 90, "All commits pushed in a SINGLE DAY - likely AI-generated code dump", None
    if span_hours < 4:
        return 85, "All commits within a few hours - suspicious bulk push pattern", None
    if total_days <= 2 and commit_count > 5:
        return 65, "Most commits concentrated in 1-2 days - limited iterative development", None
    if avg_gap < 0.5 and commit_count > 3:
        return 60, "Rapid-fire commits (avg < 30 min apart) - possible automated generation", None
    if total_days >= 3 and avg_gap >= 2:
        return (
            15,
            None,
            f"Healthy commit pattern: {total_days} active days, avg {avg_gap}h between commits",
        )
    return 30, None, None


def average_gap_hours(dates: Sequence[datetime]) -> float:
    """Mean gap between consecutive sorted timestamps, in hours to one decimal."""
    if len(dates) < 2:
        return 0.0
    total = sum(
        (later - earlier).total_seconds() / 3600 for earlier, later in zip(dates, dates[1:])
    )
    return round(total / (len(dates) - 1), 1)


def is_generic_message(message: str) -> bool:
    lowered = message.strip().lower()
    return any(
        lowered == pattern or lowered.startswith(pattern) for pattern in GENERIC_COMMIT_MESSAGES
    )


class CommitHistoryAnalyzer(Analyzer):
    """Reduces the commit list into authorship and timing signals."""

    name = "commits"

    def analyze(self, snapshot: RepositorySnapshot) -> Findings:
        commits = snapshot.commits
        if not commits:
            return Findings(
                fields={
                    "total_commits": 0,
                    "commit_authors": (),
                    "commit_timeline": (),
                    "first_commit_date": None,
                    "last_commit_date": None,
                    "avg_time_between_commits": 0.0,
                    "burst_commit_score": 100,
                    "single_author_percent": 100,
                    "commit_genuineness": 1,
                },
                flags=["No commits found"],
            )

        findings = Findings()
        authors = Counter(self._author_of(commit) for commit in commits)
        single_author_percent = round(max(authors.values()) / len(commits) * 100)

        dates = sorted(
            date
            for date in (self._date_of(commit) for commit in commits)
            if date is not None
        )
        per_day = Counter(date.date().isoformat() for date in dates)
        timeline = tuple(CommitDay(date=day, count=count) for day, count in sorted(per_day.items()))

        score, flag, positive = burst_score(dates, len(commits))
        if flag:
            findings.flags.append(flag)
        if positive:
            findings.positives.append(positive)

        messages = [self._message_of(commit) for commit in commits]
        generic = sum(1 for message in messages if is_generic_message(message))
        if generic > len(commits) * _GENERIC_MESSAGE_RATIO:
            score = min(score + _GENERIC_MESSAGE_PENALTY, 100)
            findings.flags.append(
                "Most commit messages are generic ('initial commit', 'update') - "
                "lacks meaningful descriptions"
            )

        author_names = tuple(authors)
        if len(author_names) >= 2:
            findings.positives.append(
                f"{len(author_names)} contributors found: {', '.join(author_names)}"
            )
        if single_author_percent == 100 and len(commits) > 3:
            findings.flags.append(
                "Single author for all commits - no evidence of team collaboration in code"
            )

        findings.fields.update(
            {
                "total_commits": len(commits),
                "commit_authors": author_names,
                "commit_timeline": timeline,
                "first_commit_date": isoformat_utc(dates[0]) if dates else None,
                "last_commit_date": isoformat_utc(dates[-1]) if dates else None,
                "avg_time_between_commits": average_gap_hours(dates),
                "burst_commit_score": score,
                "single_author_percent": single_author_percent,
                "commit_genuineness": clamp_score(10 - score / 10),
            }
        )
        return findings

    @staticmethod
    def _commit_block(commit: Dict[str, Any]) -> Dict[str, Any]:
        block = commit.get("commit")
        return block if isinstance(block, dict) else {}

    def _author_of(self, commit: Dict[str, Any]) -> str:
        author = self._commit_block(commit).get("author")
        if isinstance(author, dict) and author.get("name"):
            return str(author["name"])
        account = commit.get("author")
        if isinstance(account, dict) and account.get("login"):
            return str(account["login"])
        return "unknown"

    def _date_of(self, commit: Dict[str, Any]) -> datetime | None:
        block = self._commit_block(commit)
        for role in ("author", "committer"):
            person = block.get(role)
            if isinstance(person, dict):
                parsed = parse_timestamp(person.get("date"))
                if parsed is not None:
                    return parsed
        return None

    def _message_of(self, commit: Dict[str, Any]) -> str:
        message = self._commit_block(commit).get("message")
        return message if isinstance(message, str) else ""


__all__ = [
    "CommitHistoryAnalyzer",
    "GENERIC_COMMIT_MESSAGES",
    "average_gap_hours",
    "burst_score",
    "is_generic_message",
]
