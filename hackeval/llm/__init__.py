"""Chat-completions runner used by the LLM scorer and mentor."""

from .runner import LLMError, LLMRunner, extract_json_object

__all__ = ["LLMError", "LLMRunner", "extract_json_object"]
