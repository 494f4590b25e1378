"""Tests for settings and LLM configuration loading."""

from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from docwright.cli.config import (
    DEFAULT_CONFIG_YAML,
    ensure_default_config,
    load_cli_config,
    load_llm_configuration,
    save_llm_configuration,
)
from docwright.core.config import LLMConfiguration, Settings
from docwright.llm.errors import ConfigurationError

ENV_VARS = (
    "LLM_PROVIDER",
    "LLM_MODEL",
    "LLM_FALLBACK_PROVIDER",
    "LLM_FALLBACK_MODEL",
    "ANTHROPIC_API_KEY",
    "OPENAI_API_KEY",
    "PARALLELISM",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def _settings(**kwargs) -> Settings:
    return Settings(_env_file=None, **kwargs)


def _write_config(path: Path, llm: dict) -> Path:
    path.write_text(yaml.safe_dump({"llm": llm}))
    return path


class TestSettings:
    """Tests for environment-backed settings."""

    def test_defaults(self) -> None:
        settings = _settings()

        assert settings.llm_provider == "anthropic"
        assert settings.llm_model is None
        assert settings.parallelism == 3
        assert settings.cache_dir.name == "cache"

    def test_env_values(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LLM_PROVIDER", "openai")
        monkeypatch.setenv("PARALLELISM", "8")

        settings = _settings()

        assert settings.llm_provider == "openai"
        assert settings.parallelism == 8

    def test_parallelism_bounds(self) -> None:
        with pytest.raises(ValidationError):
            _settings(parallelism=11)

    def test_llm_configuration_uses_provider_default_model(self) -> None:
        config = _settings(llm_provider="openai").llm_configuration()

        assert config.primary_provider == "openai"
        assert config.primary_model == "gpt-5-nano"


class TestLLMConfiguration:
    """Tests for LLMConfiguration validation."""

    def test_valid(self) -> None:
        config = LLMConfiguration(primary_provider="anthropic", primary_model="claude-sonnet-4-5")

        assert config.fallback_provider is None
        assert config.fallback_model is None

    def test_fallback_model_defaulted(self) -> None:
        """Test that a fallback provider alone gets its default model."""
        config = LLMConfiguration(
            primary_provider="anthropic",
            primary_model="claude-sonnet-4-5",
            fallback_provider="openai",
        )

        assert config.fallback_model == "gpt-5-nano"

    @pytest.mark.parametrize(
        "values",
        [
            {"primary_provider": "", "primary_model": "m"},
            {"primary_provider": "anthropic", "primary_model": "  "},
            {"primary_provider": "Anthropic", "primary_model": "m"},
            {"primary_provider": "mistral", "primary_model": "m"},
            {"primary_provider": "anthropic", "primary_model": "m", "fallback_provider": "azure"},
        ],
    )
    def test_invalid(self, values: dict) -> None:
        with pytest.raises(ValidationError):
            LLMConfiguration(**values)


class TestLoadLLMConfiguration:
    """Tests for layered configuration loading."""

    def test_creates_default_file(self, tmp_path: Path) -> None:
        """A missing file is created with commented defaults."""
        path = tmp_path / "config.yaml"

        config = load_llm_configuration(_settings(), path)

        assert path.read_text() == DEFAULT_CONFIG_YAML
        assert config.primary_provider == "anthropic"
        assert config.primary_model == "claude-sonnet-4-5"
        assert config.fallback_provider is None

    def test_file_values(self, tmp_path: Path) -> None:
        path = _write_config(
            tmp_path / "config.yaml",
            {
                "primary_provider": "openai",
                "primary_model": "gpt-5",
                "fallback_provider": "anthropic",
            },
        )

        config = load_llm_configuration(_settings(), path)

        assert config.primary_provider == "openai"
        assert config.primary_model == "gpt-5"
        assert config.fallback_provider == "anthropic"
        assert config.fallback_model == "claude-sonnet-4-5"

    def test_environment_overrides_file(self, tmp_path: Path) -> None:
        """Test that explicitly set environment values win."""
        path = _write_config(
            tmp_path / "config.yaml",
            {"primary_provider": "anthropic", "primary_model": "claude-opus-4-1"},
        )

        config = load_llm_configuration(_settings(llm_model="claude-haiku-4-5"), path)

        assert config.primary_provider == "anthropic"
        assert config.primary_model == "claude-haiku-4-5"

    def test_environment_provider_switch_resets_model(self, tmp_path: Path) -> None:
        """A model meant for another provider is not carried over."""
        path = _write_config(
            tmp_path / "config.yaml",
            {"primary_provider": "anthropic", "primary_model": "claude-opus-4-1"},
        )

        config = load_llm_configuration(_settings(llm_provider="openai"), path)

        assert config.primary_provider == "openai"
        assert config.primary_model == "gpt-5-nano"

    def test_environment_fallback(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LLM_FALLBACK_PROVIDER", "openai")

        config = load_llm_configuration(_settings(), tmp_path / "config.yaml")

        assert config.fallback_provider == "openai"
        assert config.fallback_model == "gpt-5-nano"

    def test_invalid_file_provider(self, tmp_path: Path) -> None:
        path = _write_config(tmp_path / "config.yaml", {"primary_provider": "mistral", "primary_model": "m"})

        with pytest.raises(ConfigurationError, match="Invalid configuration"):
            load_llm_configuration(_settings(), path)

    def test_llm_section_must_be_mapping(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("llm: [anthropic]\n")

        with pytest.raises(ConfigurationError, match="must be a mapping"):
            load_llm_configuration(_settings(), path)

    def test_unparsable_file_falls_back_to_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("llm: [unclosed\n")

        config = load_llm_configuration(_settings(), path)

        assert config.primary_provider == "anthropic"


class TestSaveLLMConfiguration:
    def test_save_then_load(self, tmp_path: Path) -> None:
        """Saved configuration round-trips and keeps other keys."""
        path = tmp_path / "config.yaml"
        path.write_text(yaml.safe_dump({"other": {"keep": True}}))
        config = LLMConfiguration(
            primary_provider="openai",
            primary_model="gpt-5-nano",
            fallback_provider="anthropic",
        )

        save_llm_configuration(config, path)

        assert load_cli_config(path)["other"] == {"keep": True}
        assert load_llm_configuration(_settings(), path) == config

    def test_ensure_default_config_keeps_existing(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("llm: {}\n")

        ensure_default_config(path)

        assert path.read_text() == "llm: {}\n"
