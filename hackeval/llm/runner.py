"""Adapter around OpenAI-compatible chat-completions endpoints (xAI by default)."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

import httpx

from ..logging import get_logger

_AUTO_API_KEY = object()


class LLMError(RuntimeError):
    """Raised when the model endpoint cannot produce a usable answer."""


@dataclass
class LLMRequest:
    """Represents one chat-completion request."""

    prompt: str
    system: Optional[str]
    model: str
    temperature: Optional[float]
    max_tokens: Optional[int]
    base_url: str
    api_key: Optional[str]
    request_timeout: Optional[float]
    json_mode: bool = False


class LLMRunner:
    """Executes prompts against the configured chat-completions endpoint."""

    DEFAULT_MODEL = "grok-3-mini-fast"
    DEFAULT_BASE_URL = "https://api.x.ai/v1"
    ENV_MODEL_KEYS = ("HACKEVAL_LLM_MODEL",)
    ENV_BASE_URL_KEYS = ("HACKEVAL_LLM_BASE_URL",)
    ENV_API_KEY_KEYS = ("HACKEVAL_LLM_API_KEY", "XAI_API_KEY")

    def __init__(
        self,
        model: str | None = None,
        *,
        base_url: str | None = None,
        temperature: Optional[float] = 0.2,
        max_tokens: Optional[int] = None,
        api_key: str | None | object = _AUTO_API_KEY,
        request_timeout: Optional[float] = 60.0,
        runner: Callable[[LLMRequest], str] | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.model = model or self._first_env_value(self.ENV_MODEL_KEYS) or self.DEFAULT_MODEL
        self.base_url = (
            base_url or self._first_env_value(self.ENV_BASE_URL_KEYS) or self.DEFAULT_BASE_URL
        ).rstrip("/")
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.api_key = self._resolve_api_key(api_key)
        self.request_timeout = request_timeout
        self._transport = transport
        self._custom_runner = runner is not None
        self._runner = runner if runner is not None else self._http_runner
        self.logger = get_logger("llm")

    @property
    def configured(self) -> bool:
        """True when a custom runner is installed or an API key is available."""
        return self._custom_runner or bool(self.api_key)

    def run(self, prompt: str, *, system: str | None = None, json_mode: bool = False) -> str:
        """Send the prompt to the configured model and return the response text."""
        request = LLMRequest(
            prompt=prompt,
            system=system,
            model=self.model,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
            base_url=self.base_url,
            api_key=self.api_key,
            request_timeout=self.request_timeout,
            json_mode=json_mode,
        )
        return self._runner(request)

    def _http_runner(self, request: LLMRequest) -> str:
        if not request.api_key:
            raise LLMError("No API key configured for the LLM endpoint.")
        payload: dict[str, object] = {
            "model": request.model,
            "messages": self._build_messages(request.system, request.prompt),
        }
        if request.temperature is not None:
            payload["temperature"] = request.temperature
        if request.max_tokens is not None:
            payload["max_tokens"] = request.max_tokens
        if request.json_mode:
            payload["response_format"] = {"type": "json_object"}

        headers = {"Authorization": f"Bearer {request.api_key}"}
        timeout = request.request_timeout or 60.0
        try:
            with httpx.Client(timeout=timeout, transport=self._transport) as client:
                response = client.post(
                    f"{request.base_url}/chat/completions", json=payload, headers=headers
                )
        except httpx.HTTPError as exc:
            raise LLMError(f"LLM HTTP runner failed: {exc}") from exc

        if response.status_code >= 400:
            detail = response.text.strip()[:200] or response.reason_phrase
            raise LLMError(
                f"LLM HTTP runner failed with status {response.status_code}: {detail}"
            )
        try:
            response_payload = response.json()
        except json.JSONDecodeError as exc:
            raise LLMError("LLM HTTP runner returned invalid JSON") from exc

        content = self._extract_content(response_payload)
        if not content:
            raise LLMError("LLM HTTP runner returned an empty response")
        return content.strip()

    @staticmethod
    def _build_messages(system: str | None, prompt: str) -> list[dict[str, str]]:
        messages: list[dict[str, str]] = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})
        return messages

    @staticmethod
    def _extract_content(payload: object) -> str:
        if not isinstance(payload, dict):
            return ""
        choices = payload.get("choices")
        if not isinstance(choices, list) or not choices:
            return ""
        first = choices[0]
        if not isinstance(first, dict):
            return ""
        message = first.get("message")
        if isinstance(message, dict):
            content = message.get("content")
            if isinstance(content, str):
                return content
        text = first.get("text")
        if isinstance(text, str):
            return text
        return ""

    def _resolve_api_key(self, api_key: str | None | object) -> str | None:
        if api_key is _AUTO_API_KEY:
            return self._first_env_value(self.ENV_API_KEY_KEYS)
        return api_key  # type: ignore[return-value]

    @staticmethod
    def _first_env_value(keys: Sequence[str]) -> str | None:
        for key in keys:
            value = os.getenv(key)
            if value:
                return value
        return None


def extract_json_object(text: str) -> dict:
    """Parse the first JSON object in a model reply, tolerating code fences."""
    cleaned = text.strip()
    if cleaned.startswith("```"):
        cleaned = cleaned.strip("`")
        if cleaned.lower().startswith("json"):
            cleaned = cleaned[4:]
    start = cleaned.find("{")
    end = cleaned.rfind("}")
    if start == -1 or end <= start:
        raise LLMError("Model reply did not contain a JSON object")
    try:
        parsed = json.loads(cleaned[start : end + 1])
    except json.JSONDecodeError as exc:
        raise LLMError(f"Model reply was not valid JSON: {exc}") from exc
    if not isinstance(parsed, dict):
        raise LLMError("Model reply JSON was not an object")
    return parsed


__all__ = ["LLMError", "LLMRequest", "LLMRunner", "extract_json_object"]
