"""Scoring engine and backends."""

from .backends import FallbackScoringBackend, LLMScoringBackend, ScoringBackend
from .constants import CRITERIA, CRITERION_KEYS, CRITERION_WEIGHTS, Criterion
from .engine import HeuristicScoringEngine, plagiarism_penalty, verdict_for, weighted_total
from .jitter import Jitter

__all__ = [
    "CRITERIA",
    "CRITERION_KEYS",
    "CRITERION_WEIGHTS",
    "Criterion",
    "FallbackScoringBackend",
    "HeuristicScoringEngine",
    "Jitter",
    "LLMScoringBackend",
    "ScoringBackend",
    "plagiarism_penalty",
    "verdict_for",
    "weighted_total",
]
