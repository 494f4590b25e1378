"""Exception types raised by LLM providers and the provider factory.

AuthenticationError does not derive from ProviderError, so handlers for
generic provider failures never catch a rejected or missing credential.
"""

import re
from typing import Final

# Credential-shaped substrings that must never reach a user or a log line
_SECRET_PATTERNS: Final[list[tuple[re.Pattern[str], str]]] = [
    (re.compile(r"\bsk-(?:ant-)?[A-Za-z0-9_-]{8,}"), "[redacted]"),
    (re.compile(r"(?i)\bbearer\s+[A-Za-z0-9._~+/=-]{8,}"), "Bearer [redacted]"),
    (
        re.compile(r"(api[_-]?key|token|secret|password|credential)([=:]\s*)\S+", re.IGNORECASE),
        r"\1\2[redacted]",
    ),
]


def redact_secrets(message: str) -> str:
    """Mask API-key-shaped substrings in a message."""
    for pattern, replacement in _SECRET_PATTERNS:
        message = pattern.sub(replacement, message)
    return message


class LLMError(Exception):
    """Base class for documentation generation errors."""


class ConfigurationError(LLMError):
    """Invalid provider configuration (unknown provider, missing model)."""


class ProviderError(LLMError):
    """A provider failed to produce a response."""

    def __init__(self, provider_name: str, message: str):
        self.provider_name = provider_name
        super().__init__(redact_secrets(message))


class TransientProviderError(ProviderError):
    """A failure worth retrying (rate limit, overload, dropped connection)."""


class ProviderUnavailableError(ProviderError):
    """The provider is unusable and no fallback was accepted."""


class AuthenticationError(LLMError):
    """The provider's credential is missing or was rejected."""

    def __init__(self, provider_name: str, message: str | None = None):
        self.provider_name = provider_name
        super().__init__(
            redact_secrets(message or f"Authentication failed for provider {provider_name}")
        )


class CredentialMissingError(AuthenticationError):
    """No credential is configured for the provider."""

    def __init__(self, provider_name: str):
        super().__init__(
            provider_name,
            f"No API key configured for {provider_name}. "
            f"Set DOCWRIGHT_API_KEY_{provider_name.upper()} or "
            f"{provider_name.upper()}_API_KEY.",
        )


class DocumentationValidationError(LLMError):
    """A generated draft failed structural validation."""

    def __init__(self, api_symbol_id: str, issues: list[str]):
        self.api_symbol_id = api_symbol_id
        self.issues = list(issues)
        super().__init__(f"Invalid documentation for {api_symbol_id}: {'; '.join(self.issues)}")
