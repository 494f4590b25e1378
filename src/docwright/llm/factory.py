"""Provider construction with failure tracking and fallback switching."""

from collections.abc import Callable, Mapping

import logfire

from docwright.core.config import SUPPORTED_PROVIDERS, LLMConfiguration
from docwright.llm.credentials import CredentialStore
from docwright.llm.errors import (
    ConfigurationError,
    CredentialMissingError,
    ProviderUnavailableError,
)
from docwright.llm.provider import ClaudeProvider, GptProvider, LLMProvider

MAX_CONSECUTIVE_FAILURES = 5

ProviderBuilder = Callable[[CredentialStore, str | None], LLMProvider]
# Asked (primary, fallback) before switching providers
FallbackConfirmation = Callable[[str, str], bool]

DEFAULT_BUILDERS: dict[str, ProviderBuilder] = {
    "anthropic": ClaudeProvider,
    "openai": GptProvider,
}


class ProviderFactory:
    """Hands out the active provider for a configuration.

    The factory counts consecutive failures per provider. Once the primary
    provider reaches MAX_CONSECUTIVE_FAILURES, the next `get_provider` call
    offers the configured fallback through `confirm_fallback` and switches
    only if the answer is yes.
    """

    def __init__(
        self,
        credentials: CredentialStore,
        confirm_fallback: FallbackConfirmation | None = None,
        builders: Mapping[str, ProviderBuilder] | None = None,
    ):
        self.credentials = credentials
        self.confirm_fallback = confirm_fallback
        self.builders = dict(builders or DEFAULT_BUILDERS)
        self._failures: dict[str, int] = {}
        self._config: LLMConfiguration | None = None
        self._provider: LLMProvider | None = None

    def get_provider(self, config: LLMConfiguration) -> LLMProvider:
        """Return the provider to use for `config`.

        Raises:
            ConfigurationError: The configuration names an unknown provider.
            ProviderUnavailableError: The primary provider failed too often
                and no fallback was configured or the switch was declined.
            CredentialMissingError: The active provider has no credential.
        """
        if self._config is None or self._config != config:
            self._provider = self._build(config.primary_provider, config.primary_model)
            self._config = config.model_copy()
            self._failures.clear()

        primary = config.primary_provider
        failures = self._failures.get(primary, 0)
        if failures >= MAX_CONSECUTIVE_FAILURES:
            logfire.warn(
                "Primary provider failing, checking fallback",
                provider=primary,
                failures=failures,
            )
            fallback = config.fallback_provider
            if not fallback:
                raise ProviderUnavailableError(
                    primary,
                    f"Primary provider '{primary}' unavailable after "
                    f"{MAX_CONSECUTIVE_FAILURES} consecutive failures and no fallback configured. "
                    "Run: docwright config set-provider --fallback <provider>",
                )

            if self.confirm_fallback is None or not self.confirm_fallback(primary, fallback):
                raise ProviderUnavailableError(
                    primary,
                    f"User declined to switch to fallback provider '{fallback}'. "
                    f"Cannot continue with unavailable primary provider '{primary}'.",
                )

            logfire.info("Switching to fallback provider", primary=primary, fallback=fallback)
            self._provider = self._build(fallback, config.fallback_model)
            self._failures.clear()

        assert self._provider is not None
        if not self._provider.is_available():
            raise CredentialMissingError(self._provider.name)
        return self._provider

    def record_success(self, provider_name: str) -> None:
        if self._failures.get(provider_name):
            logfire.debug("Resetting failure counter", provider=provider_name)
            self._failures[provider_name] = 0

    def record_failure(self, provider_name: str) -> None:
        self._failures[provider_name] = self._failures.get(provider_name, 0) + 1
        logfire.warn(
            "Recorded provider failure",
            provider=provider_name,
            consecutive_failures=self._failures[provider_name],
        )

    def failure_count(self, provider_name: str) -> int:
        return self._failures.get(provider_name, 0)

    async def close(self) -> None:
        """Close the active provider's client."""
        if self._provider is not None:
            await self._provider.close()

    def _build(self, provider_name: str, model: str | None) -> LLMProvider:
        builder = self.builders.get(provider_name)
        if builder is None:
            raise ConfigurationError(
                f"Unknown provider '{provider_name}'. Supported: {', '.join(SUPPORTED_PROVIDERS)}"
            )
        return builder(self.credentials, model)
