"""Bounded tie-breaking noise for the heuristic scorer."""

from __future__ import annotations

import random
from typing import Optional


class Jitter:
    """Adds a small uniform offset in ``[0, amplitude)`` to criterion formulas.

    Two projects with near-identical metadata would otherwise land on the same
    integer score for every criterion; the offset nudges such ties apart. It is
    never larger than the amplitude configured per criterion (at most 0.8).
    Pass ``seed`` for reproducible runs, or use :meth:`disabled` to pin it to zero.
    A seeded jitter hands each evaluation its own stream through :meth:`for_project`,
    so scoring the same project twice yields the same offsets.
    """

    def __init__(
        self, seed: Optional[int] = None, *, enabled: bool = True, key: str = ""
    ) -> None:
        self.seed = seed
        self.enabled = enabled
        self._random = random.Random(f"{seed}:{key}" if seed is not None else None)

    @classmethod
    def disabled(cls) -> "Jitter":
        return cls(enabled=False)

    def for_project(self, project_name: str) -> "Jitter":
        """Return the offset stream for one evaluation of ``project_name``."""
        if self.seed is None or not self.enabled:
            return self
        return Jitter(self.seed, enabled=True, key=project_name)

    def __call__(self, amplitude: float) -> float:
        if not self.enabled or amplitude <= 0:
            return 0.0
        return self._random.random() * amplitude

    def __repr__(self) -> str:
        state = "enabled" if self.enabled else "disabled"
        return f"Jitter(seed={self.seed!r}, {state})"


__all__ = ["Jitter"]
