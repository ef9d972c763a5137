"""Tests for hackeval.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from hackeval.config import ConfigError, HackEvalConfig, load_config


def test_load_config_returns_defaults_when_missing(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert isinstance(config, HackEvalConfig)
    assert config.root == tmp_path.resolve()
    assert config.github.api_base_url == "https://api.github.com"
    assert config.github.token is None
    assert config.github.commit_window == 100
    assert config.llm.enabled is False
    assert config.scoring.jitter is True
    assert config.scoring.seed is None
    assert config.cache.enabled is False
    assert config.service.port == 8000
    assert config.log_level is None


def test_load_config_parses_expected_fields(tmp_path: Path) -> None:
    config_file = tmp_path / ".hackeval.yml"
    config_file.write_text(
        """
github:
  api_base_url: "https://ghe.example.com/api/v3/"
  token: "ghp-test"
  request_timeout: 5
  commit_window: 250
llm:
  model: "grok-3-mini-fast"
  base_url: "https://api.x.ai/v1"
  api_key: "xai-test"
  temperature: 0.1
  max_tokens: 900
  request_timeout: 30
scoring:
  jitter: false
  seed: 42
cache:
  enabled: true
  ttl_seconds: 600
service:
  host: "127.0.0.1"
  port: 9000
  allowed_origins:
    - "http://localhost:5173"
log_level: DEBUG
""",
        encoding="utf-8",
    )

    config = load_config(config_file)

    assert config.github.api_base_url == "https://ghe.example.com/api/v3"
    assert config.github.token == "ghp-test"
    assert config.github.request_timeout == 5.0
    assert config.github.commit_window == 100
    assert config.llm.enabled is True
    assert config.llm.model == "grok-3-mini-fast"
    assert config.llm.api_key == "xai-test"
    assert config.llm.temperature == 0.1
    assert config.llm.max_tokens == 900
    assert config.scoring.jitter is False
    assert config.scoring.seed == 42
    assert config.cache.enabled is True
    assert config.cache.path == tmp_path.resolve() / ".hackeval" / "analysis_cache.json"
    assert config.cache.ttl_seconds == 600
    assert config.service.host == "127.0.0.1"
    assert config.service.port == 9000
    assert config.service.allowed_origins == ["http://localhost:5173"]
    assert config.log_level == "DEBUG"


def test_llm_section_can_be_disabled(tmp_path: Path) -> None:
    (tmp_path / ".hackeval.yml").write_text("llm:\n  enabled: false\n  model: x\n")

    config = load_config(tmp_path)

    assert config.llm.enabled is False
    assert config.llm.model == "x"


def test_load_config_rejects_non_mapping_root(tmp_path: Path) -> None:
    (tmp_path / ".hackeval.yml").write_text("- just\n- a list\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_load_config_rejects_invalid_yaml(tmp_path: Path) -> None:
    (tmp_path / ".hackeval.yml").write_text("github: [unclosed\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_load_config_rejects_non_positive_timeout(tmp_path: Path) -> None:
    (tmp_path / ".hackeval.yml").write_text("github:\n  request_timeout: 0\n")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_github_token_falls_back_to_environment(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("GITHUB_TOKEN", "env-token")

    assert load_config(tmp_path).github.token == "env-token"

    (tmp_path / ".hackeval.yml").write_text("scoring:\n  seed: 1\n")
    assert load_config(tmp_path).github.token == "env-token"
