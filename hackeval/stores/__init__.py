"""Persistence helpers."""

from .analysis_cache import AnalysisCache

__all__ = ["AnalysisCache"]
