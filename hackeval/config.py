"""Configuration loading for hackeval (.hackeval.yml)."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

CONFIG_FILENAME = ".hackeval.yml"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class GitHubConfig:
    """Repository-hosting API settings."""

    api_base_url: str = "https://api.github.com"
    token: Optional[str] = None
    request_timeout: float = 8.0
    commit_window: int = 100


@dataclass
class LLMConfig:
    """Optional LLM scorer / mentor settings."""

    enabled: bool = False
    model: Optional[str] = None
    base_url: Optional[str] = None
    api_key: Optional[str] = None
    request_timeout: Optional[float] = None
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None


@dataclass
class ScoringConfig:
    """Heuristic engine tuning."""

    jitter: bool = True
    seed: Optional[int] = None


@dataclass
class CacheConfig:
    """On-disk repository analysis cache."""

    enabled: bool = False
    path: Optional[Path] = None
    ttl_seconds: int = 3600


@dataclass
class ServiceConfig:
    """HTTP service binding."""

    host: str = "0.0.0.0"
    port: int = 8000
    allowed_origins: List[str] = field(default_factory=list)


@dataclass
class HackEvalConfig:
    """Represents the settings defined in .hackeval.yml."""

    root: Path
    github: GitHubConfig = field(default_factory=GitHubConfig)
    llm: LLMConfig = field(default_factory=LLMConfig)
    scoring: ScoringConfig = field(default_factory=ScoringConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)
    service: ServiceConfig = field(default_factory=ServiceConfig)
    log_level: Optional[str] = None


_GITHUB_TOKEN_ENV = ("HACKEVAL_GITHUB_TOKEN", "GITHUB_TOKEN")


def load_config(config_path: Path) -> HackEvalConfig:
    """Load configuration from disk, returning defaults when the file is absent."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        config = HackEvalConfig(root=root)
        config.github.token = _first_env_value(_GITHUB_TOKEN_ENV)
        return config

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    github_data = _as_dict(data.get("github"))
    github = GitHubConfig()
    if github_data:
        github.api_base_url = (
            _as_str(github_data.get("api_base_url")) or github.api_base_url
        ).rstrip("/")
        github.token = _as_str(github_data.get("token"))
        timeout = _as_float(github_data.get("request_timeout"))
        if timeout is not None:
            if timeout <= 0:
                raise ConfigError("github.request_timeout must be positive")
            github.request_timeout = timeout
        window = _as_int(github_data.get("commit_window"))
        if window is not None:
            # The commits endpoint caps per_page at 100.
            github.commit_window = max(1, min(window, 100))
    if not github.token:
        github.token = _first_env_value(_GITHUB_TOKEN_ENV)

    llm_data = _as_dict(data.get("llm"))
    llm = LLMConfig()
    if llm_data:
        llm.model = _as_str(llm_data.get("model"))
        llm.base_url = _as_str(llm_data.get("base_url"))
        llm.api_key = _as_str(llm_data.get("api_key"))
        llm.request_timeout = _as_float(llm_data.get("request_timeout"))
        llm.temperature = _as_float(llm_data.get("temperature"))
        llm.max_tokens = _as_int(llm_data.get("max_tokens"))
        enabled = _as_bool(llm_data.get("enabled"))
        llm.enabled = enabled if enabled is not None else True

    scoring_data = _as_dict(data.get("scoring"))
    scoring = ScoringConfig()
    if scoring_data:
        jitter = _as_bool(scoring_data.get("jitter"))
        if jitter is not None:
            scoring.jitter = jitter
        scoring.seed = _as_int(scoring_data.get("seed"))

    cache_data = _as_dict(data.get("cache"))
    cache = CacheConfig()
    if cache_data:
        cache.enabled = _as_bool(cache_data.get("enabled")) or False
        path_str = _as_str(cache_data.get("path"))
        cache.path = root / path_str if path_str else root / ".hackeval" / "analysis_cache.json"
        ttl = _as_int(cache_data.get("ttl_seconds"))
        if ttl is not None:
            cache.ttl_seconds = max(0, ttl)

    service_data = _as_dict(data.get("service"))
    service = ServiceConfig()
    if service_data:
        service.host = _as_str(service_data.get("host")) or service.host
        service.port = _as_int(service_data.get("port")) or service.port
        service.allowed_origins = _as_str_list(service_data.get("allowed_origins"))

    return HackEvalConfig(
        root=root,
        github=github,
        llm=llm,
        scoring=scoring,
        cache=cache,
        service=service,
        log_level=_as_str(data.get("log_level")),
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


def _first_env_value(keys: Sequence[str]) -> Optional[str]:
    for key in keys:
        value = os.getenv(key)
        if value:
            return value
    return None


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1", "on"}:
            return True
        if lowered in {"false", "no", "0", "off"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []


__all__ = [
    "CONFIG_FILENAME",
    "CacheConfig",
    "ConfigError",
    "GitHubConfig",
    "HackEvalConfig",
    "LLMConfig",
    "ScoringConfig",
    "ServiceConfig",
    "load_config",
]
