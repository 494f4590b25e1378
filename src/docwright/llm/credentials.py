"""API key lookup for LLM providers.

Storing credentials at rest is somebody else's job; providers only need
to ask for a key by provider name.
"""

import os
from collections.abc import Mapping
from typing import Protocol, runtime_checkable

from docwright.core.config import Settings, get_settings

CREDENTIAL_ENV_PREFIX = "DOCWRIGHT_API_KEY_"


@runtime_checkable
class CredentialStore(Protocol):
    def get_credential(self, provider: str) -> str | None: ...


def mask_api_key(api_key: str | None) -> str:
    """Show only the last four characters of a key."""
    if not api_key:
        return "(not set)"
    if len(api_key) <= 4:
        return "****"
    return f"****{api_key[-4:]}"


class EnvironmentCredentialStore:
    """Reads keys from DOCWRIGHT_API_KEY_<PROVIDER>, then from settings."""

    def __init__(
        self,
        settings: Settings | None = None,
        environ: Mapping[str, str] | None = None,
    ):
        self.settings = settings or get_settings()
        self.environ = os.environ if environ is None else environ

    def get_credential(self, provider: str) -> str | None:
        value = self.environ.get(f"{CREDENTIAL_ENV_PREFIX}{provider.upper()}")
        if value and value.strip():
            return value.strip()

        match provider:
            case "anthropic":
                value = self.settings.anthropic_api_key
            case "openai":
                value = self.settings.openai_api_key
            case _:
                value = None
        return value.strip() if value and value.strip() else None


class StaticCredentialStore:
    """Fixed provider-to-key mapping."""

    def __init__(self, keys: Mapping[str, str]):
        self.keys = dict(keys)

    def get_credential(self, provider: str) -> str | None:
        return self.keys.get(provider)
