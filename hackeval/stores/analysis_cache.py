"""Persistent cache for repository analyses."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
import json
from pathlib import Path
import threading
from typing import Dict, Iterable, Optional

from ..logging import get_logger
from ..models import RepositoryAnalysis
from ..utils import isoformat_utc, parse_timestamp

_CACHE_VERSION = 1


class AnalysisCache:
    """Stores fetched analyses keyed by ``owner/repo`` with an expiry window."""

    def __init__(
        self,
        path: Path | None,
        *,
        ttl_seconds: int = 3600,
        clock=None,
    ) -> None:
        self._path = path
        self._ttl = timedelta(seconds=max(0, ttl_seconds))
        self._clock = clock or (lambda: datetime.now(UTC))
        self._entries: Dict[str, Dict[str, object]] = {}
        self._dirty = False
        self._lock = threading.Lock()
        self.logger = get_logger("cache")
        if self._path is not None:
            self._load(self._path)

    def get(self, key: str) -> Optional[RepositoryAnalysis]:
        with self._lock:
            entry = self._entries.get(key)
        if not entry:
            return None
        stored_at = parse_timestamp(entry.get("updated_at"))
        if stored_at is None or self._clock() - stored_at > self._ttl:
            return None
        payload = entry.get("analysis")
        if not isinstance(payload, dict):
            return None
        try:
            return RepositoryAnalysis.from_dict(payload)
        except (KeyError, TypeError, ValueError):
            self.logger.debug("Discarding unreadable cache entry for %s", key)
            return None

    def store(self, key: str, analysis: RepositoryAnalysis) -> None:
        if not analysis.fetched:
            return
        with self._lock:
            self._entries[key] = {
                "analysis": analysis.to_dict(),
                "updated_at": isoformat_utc(self._clock()),
            }
            self._dirty = True

    def prune(self, keys_to_keep: Iterable[str] | None = None) -> None:
        """Drop expired entries, and any not listed in ``keys_to_keep``."""
        keep = set(keys_to_keep) if keys_to_keep is not None else None
        now = self._clock()
        with self._lock:
            removed = []
            for key, entry in self._entries.items():
                stored_at = parse_timestamp(entry.get("updated_at"))
                if keep is not None and key not in keep:
                    removed.append(key)
                elif stored_at is None or now - stored_at > self._ttl:
                    removed.append(key)
            for key in removed:
                self._entries.pop(key, None)
            if removed:
                self._dirty = True

    def persist(self) -> None:
        with self._lock:
            if not self._dirty or self._path is None:
                return
            payload = {
                "version": _CACHE_VERSION,
                "entries": self._entries,
            }
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(
                json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8"
            )
            self._dirty = False

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._dirty = True

    def __len__(self) -> int:
        return len(self._entries)

    def _load(self, path: Path) -> None:
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return
        except (OSError, json.JSONDecodeError) as exc:
            self.logger.warning("Ignoring unreadable analysis cache %s: %s", path, exc)
            return
        if not isinstance(data, dict) or data.get("version") != _CACHE_VERSION:
            return
        entries = data.get("entries")
        if not isinstance(entries, dict):
            return
        self._entries = {
            key: raw
            for key, raw in entries.items()
            if isinstance(key, str)
            and isinstance(raw, dict)
            and "analysis" in raw
            and "updated_at" in raw
        }
        self._dirty = False


__all__ = ["AnalysisCache"]
