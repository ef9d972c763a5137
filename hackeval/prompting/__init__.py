"""Prompt construction for LLM-backed scoring and mentorship."""

from .builder import PromptBuilder, PromptMessage, PromptRequest

__all__ = ["PromptBuilder", "PromptMessage", "PromptRequest"]
