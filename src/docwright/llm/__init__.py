"""LLM providers for documentation generation."""

from docwright.llm.credentials import (
    CredentialStore,
    EnvironmentCredentialStore,
    StaticCredentialStore,
    mask_api_key,
)
from docwright.llm.errors import (
    AuthenticationError,
    ConfigurationError,
    CredentialMissingError,
    DocumentationValidationError,
    LLMError,
    ProviderError,
    ProviderUnavailableError,
    TransientProviderError,
    redact_secrets,
)
from docwright.llm.factory import MAX_CONSECUTIVE_FAILURES, ProviderFactory
from docwright.llm.provider import (
    ClaudeProvider,
    DocumentationDraft,
    GptProvider,
    LLMProvider,
    LLMResponse,
)
from docwright.llm.retry import is_transient_error, retry_with_backoff

__all__ = [
    "AuthenticationError",
    "ClaudeProvider",
    "ConfigurationError",
    "CredentialMissingError",
    "CredentialStore",
    "DocumentationDraft",
    "DocumentationValidationError",
    "EnvironmentCredentialStore",
    "GptProvider",
    "LLMError",
    "LLMProvider",
    "LLMResponse",
    "MAX_CONSECUTIVE_FAILURES",
    "ProviderError",
    "ProviderFactory",
    "ProviderUnavailableError",
    "StaticCredentialStore",
    "TransientProviderError",
    "is_transient_error",
    "mask_api_key",
    "redact_secrets",
    "retry_with_backoff",
]
