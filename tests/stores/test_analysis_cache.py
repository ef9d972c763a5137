"""Tests for the repository analysis cache."""

from __future__ import annotations

import json
from datetime import UTC, datetime, timedelta
from pathlib import Path

from hackeval.models import CommitDay, RepositoryAnalysis
from hackeval.stores.analysis_cache import AnalysisCache


class _Clock:
    def __init__(self) -> None:
        self.now = datetime(2024, 3, 1, 12, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now


def _analysis(**overrides) -> RepositoryAnalysis:
    fields = dict(
        fetched=True,
        name="carelink",
        full_name="acme/carelink",
        languages={"Python": 100},
        commit_authors=("alice", "bob"),
        commit_timeline=(CommitDay(date="2024-03-01", count=3),),
        total_commits=3,
        flags=("No README.md - poor documentation",),
    )
    fields.update(overrides)
    return RepositoryAnalysis(**fields)


def test_cache_round_trip_through_disk(tmp_path: Path) -> None:
    cache_path = tmp_path / ".hackeval" / "analysis_cache.json"
    cache = AnalysisCache(cache_path)
    cache.store("acme/carelink", _analysis())
    cache.persist()

    data = json.loads(cache_path.read_text(encoding="utf-8"))
    assert data["version"] == 1
    assert "acme/carelink" in data["entries"]

    reloaded = AnalysisCache(cache_path)
    assert reloaded.get("acme/carelink") == _analysis()


def test_cache_entries_expire_after_ttl() -> None:
    clock = _Clock()
    cache = AnalysisCache(None, ttl_seconds=60, clock=clock)
    cache.store("acme/carelink", _analysis())

    clock.now += timedelta(seconds=30)
    assert cache.get("acme/carelink") is not None

    clock.now += timedelta(seconds=31)
    assert cache.get("acme/carelink") is None


def test_cache_ignores_unfetched_analyses() -> None:
    cache = AnalysisCache(None)
    cache.store("acme/ghost", RepositoryAnalysis.empty("Repository not found (404)"))

    assert len(cache) == 0
    assert cache.get("acme/ghost") is None


def test_cache_prune_removes_unlisted_and_expired_entries() -> None:
    clock = _Clock()
    cache = AnalysisCache(None, ttl_seconds=60, clock=clock)
    cache.store("acme/old", _analysis())
    clock.now += timedelta(seconds=120)
    cache.store("acme/keep", _analysis())
    cache.store("acme/drop", _analysis())

    cache.prune(["acme/keep", "acme/old"])

    assert cache.get("acme/keep") is not None
    assert cache.get("acme/drop") is None
    assert len(cache) == 1


def test_cache_tolerates_corrupt_file(tmp_path: Path) -> None:
    cache_path = tmp_path / "analysis_cache.json"
    cache_path.write_text("{not json", encoding="utf-8")

    cache = AnalysisCache(cache_path)

    assert len(cache) == 0
    assert cache.get("acme/carelink") is None
