"""User-level configuration for the docwright CLI.

Provider selection lives in ~/.docwright/config.yaml under an `llm:`
section. Environment variables override the file and the file overrides
built-in defaults. API keys are never written to this file.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import logfire
import yaml
from pydantic import ValidationError

from docwright.core.config import DEFAULT_MODELS, LLMConfiguration, Settings, get_settings
from docwright.llm.errors import ConfigurationError

# Default config locations
CONFIG_DIR = Path.home() / ".docwright"
CONFIG_FILE = CONFIG_DIR / "config.yaml"

DEFAULT_CONFIG_YAML = f"""\
# docwright LLM configuration

llm:
  # Primary LLM provider (required). Supported: anthropic, openai
  primary_provider: "anthropic"

  # Primary model name (required)
  primary_model: "{DEFAULT_MODELS["anthropic"]}"

  # Optional fallback, offered after 5 consecutive primary failures
  # fallback_provider: "openai"
  # fallback_model: "{DEFAULT_MODELS["openai"]}"

# Environment variable overrides (higher priority):
# - LLM_PROVIDER
# - LLM_MODEL
# - LLM_FALLBACK_PROVIDER
# - LLM_FALLBACK_MODEL

# API keys are not stored here. Set DOCWRIGHT_API_KEY_ANTHROPIC or
# DOCWRIGHT_API_KEY_OPENAI instead.
"""

# Settings field -> key in the `llm:` section
_ENV_OVERRIDES = {
    "llm_provider": "primary_provider",
    "llm_model": "primary_model",
    "llm_fallback_provider": "fallback_provider",
    "llm_fallback_model": "fallback_model",
}


def load_cli_config(config_file: Path | None = None) -> dict[str, Any]:
    """Load CLI configuration from file.

    Returns:
        Configuration dictionary, empty if the file does not exist
    """
    path = config_file or CONFIG_FILE
    if not path.exists():
        return {}

    with open(path, encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def save_cli_config(config: dict[str, Any], config_file: Path | None = None) -> None:
    """Save CLI configuration to file, replacing it atomically."""
    path = config_file or CONFIG_FILE
    path.parent.mkdir(parents=True, exist_ok=True)

    tmp_path = path.with_name(path.name + ".tmp")
    with open(tmp_path, "w", encoding="utf-8") as f:
        yaml.safe_dump(config, f, default_flow_style=False, sort_keys=False)
    os.replace(tmp_path, path)


def ensure_default_config(config_file: Path | None = None) -> Path:
    """Write the commented default configuration if none exists."""
    path = config_file or CONFIG_FILE
    if not path.exists():
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(DEFAULT_CONFIG_YAML, encoding="utf-8")
        logfire.info("Created default configuration", path=str(path))
    return path


def load_llm_configuration(
    settings: Settings | None = None,
    config_file: Path | None = None,
) -> LLMConfiguration:
    """Resolve the provider selection from environment, file and defaults.

    Raises:
        ConfigurationError: If the result is incomplete or invalid.
    """
    settings = settings or get_settings()
    path = ensure_default_config(config_file)

    try:
        file_config = load_cli_config(path)
    except (OSError, yaml.YAMLError) as e:
        logfire.warn(
            "Failed to read configuration, using environment and defaults",
            path=str(path),
            error=str(e),
        )
        file_config = {}

    llm_section = file_config.get("llm") or {}
    if not isinstance(llm_section, dict):
        raise ConfigurationError(f"Invalid configuration in {path}: 'llm' must be a mapping")

    values: dict[str, Any] = {
        "primary_provider": "anthropic",
        "primary_model": None,
        "fallback_provider": None,
        "fallback_model": None,
    }
    values.update({k: v for k, v in llm_section.items() if k in values and v is not None})

    overridden = settings.model_fields_set
    for field_name, key in _ENV_OVERRIDES.items():
        if field_name in overridden:
            value = getattr(settings, field_name)
            if value is not None:
                values[key] = value

    # A provider switched by environment keeps no model from another provider
    provider_switched = (
        "llm_provider" in overridden
        and "llm_model" not in overridden
        and llm_section.get("primary_provider") != settings.llm_provider
    )
    if provider_switched or not values["primary_model"]:
        values["primary_model"] = DEFAULT_MODELS.get(str(values["primary_provider"]))

    try:
        config = LLMConfiguration(**values)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e

    logfire.debug(
        "Loaded LLM configuration",
        primary_provider=config.primary_provider,
        primary_model=config.primary_model,
        fallback_provider=config.fallback_provider or "none",
    )
    return config


def save_llm_configuration(config: LLMConfiguration, config_file: Path | None = None) -> None:
    """Store the provider selection, keeping any other top-level keys."""
    path = config_file or CONFIG_FILE
    data = load_cli_config(path)
    data["llm"] = config.model_dump()
    save_cli_config(data, path)
    logfire.info("Saved configuration", path=str(path))


__all__ = [
    "CONFIG_DIR",
    "CONFIG_FILE",
    "ensure_default_config",
    "load_cli_config",
    "load_llm_configuration",
    "save_cli_config",
    "save_llm_configuration",
]
