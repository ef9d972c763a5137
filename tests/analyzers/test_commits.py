from __future__ import annotations

from datetime import UTC, datetime, timedelta

from hackeval.analyzers.base import RepositorySnapshot
from hackeval.analyzers.commits import (
    CommitHistoryAnalyzer,
    average_gap_hours,
    burst_score,
    is_generic_message,
)
from tests._fixtures.github import commit, spread_commits

START = datetime(2024, 3, 1, 9, 0, tzinfo=UTC)


def _snapshot(commits) -> RepositorySnapshot:
    return RepositorySnapshot(owner="acme", repo="demo", metadata={}, commits=list(commits))


def test_single_commit_is_minimal_history() -> None:
    findings = CommitHistoryAnalyzer().analyze(_snapshot([commit("alice", START)]))

    assert findings.fields["burst_commit_score"] == 70
    assert findings.fields["total_commits"] == 1
    assert any("very minimal development history" in flag for flag in findings.flags)


def test_commits_on_one_day_score_as_dump() -> None:
    commits = [commit("alice", START + timedelta(hours=hour)) for hour in range(5)]

    findings = CommitHistoryAnalyzer().analyze(_snapshot(commits))

    assert findings.fields["burst_commit_score"] == 90
    assert len(findings.fields["commit_timeline"]) == 1


def test_commits_within_a_few_hours_across_midnight() -> None:
    late = datetime(2024, 3, 1, 23, 0, tzinfo=UTC)
    dates = [late + timedelta(minutes=40 * step) for step in range(4)]

    score, flag, _ = burst_score(dates, len(dates))

    assert score == 85
    assert flag is not None and "few hours" in flag


def test_healthy_history_is_rewarded() -> None:
    findings = CommitHistoryAnalyzer().analyze(_snapshot(spread_commits(20, days=5)))

    assert findings.fields["burst_commit_score"] == 15
    assert findings.fields["commit_genuineness"] == 9
    assert any(positive.startswith("Healthy commit pattern") for positive in findings.positives)
    assert any("2 contributors found" in positive for positive in findings.positives)


def test_generic_messages_raise_burst_score() -> None:
    commits = spread_commits(10, days=5, message="update")

    findings = CommitHistoryAnalyzer().analyze(_snapshot(commits))

    assert findings.fields["burst_commit_score"] == 35
    assert any("generic" in flag for flag in findings.flags)


def test_single_author_flagged_for_larger_histories() -> None:
    commits = spread_commits(6, days=3, authors=("alice",))

    findings = CommitHistoryAnalyzer().analyze(_snapshot(commits))

    assert findings.fields["single_author_percent"] == 100
    assert findings.fields["commit_authors"] == ("alice",)
    assert any("Single author" in flag for flag in findings.flags)


def test_empty_history_defaults() -> None:
    findings = CommitHistoryAnalyzer().analyze(_snapshot([]))

    assert findings.fields["burst_commit_score"] == 100
    assert findings.fields["commit_genuineness"] == 1
    assert findings.flags == ["No commits found"]


def _undated(author: str, when: datetime) -> dict:
    payload = commit(author, when)
    for role in ("author", "committer"):
        payload["commit"][role]["date"] = "not a date"
    return payload


def test_undated_history_follows_the_ordered_rules() -> None:
    few = [_undated("alice", START), _undated("bob", START)]
    many = [_undated(name, START) for name in ("alice", "bob", "chen", "dana")]

    few_findings = CommitHistoryAnalyzer().analyze(_snapshot(few))
    many_findings = CommitHistoryAnalyzer().analyze(_snapshot(many))

    assert few_findings.fields["burst_commit_score"] == 70
    assert many_findings.fields["burst_commit_score"] == 85
    assert many_findings.fields["first_commit_date"] is None
    assert many_findings.fields["commit_timeline"] == ()
    assert any("within a few hours" in flag for flag in many_findings.flags)


def test_average_gap_hours() -> None:
    dates = [START, START + timedelta(hours=2), START + timedelta(hours=6)]

    assert average_gap_hours(dates) == 3.0
    assert average_gap_hours(dates[:1]) == 0.0


def test_generic_message_detection() -> None:
    assert is_generic_message("Initial commit")
    assert is_generic_message("update README")
    assert not is_generic_message("Add patient intake form validation")
