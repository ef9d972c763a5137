"""Numeric and collection helpers shared by analyzers and scorers."""

from __future__ import annotations

import math
from datetime import UTC, datetime
from typing import Iterable, List, Optional


def round_half_up(value: float) -> int:
    """Round halves away from zero for positive inputs (2.5 -> 3, 3.5 -> 4)."""
    return int(math.floor(value + 0.5))


def clamp_score(value: float, low: int = 1, high: int = 10) -> int:
    """Round ``value`` and clamp it into ``[low, high]``."""
    return min(high, max(low, round_half_up(value)))


def dedupe(items: Iterable[str]) -> List[str]:
    """Drop repeated strings while keeping first-seen order."""
    seen: set[str] = set()
    ordered: List[str] = []
    for item in items:
        if item in seen:
            continue
        seen.add(item)
        ordered.append(item)
    return ordered


def parse_timestamp(value: object) -> Optional[datetime]:
    """Parse an ISO-8601 API timestamp into an aware UTC datetime."""
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)


def isoformat_utc(value: datetime) -> str:
    return value.astimezone(UTC).isoformat().replace("+00:00", "Z")


def utc_now_iso() -> str:
    return isoformat_utc(datetime.now(UTC))


__all__ = [
    "clamp_score",
    "dedupe",
    "isoformat_utc",
    "parse_timestamp",
    "round_half_up",
    "utc_now_iso",
]
