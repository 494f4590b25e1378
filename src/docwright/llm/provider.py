"""LLM provider abstraction for documentation generation."""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, ClassVar

import anthropic
import logfire
import openai

from docwright.core.models import ApiContext
from docwright.generator.prompts import build_documentation_prompt, get_system_prompt
from docwright.llm.credentials import CredentialStore
from docwright.llm.errors import (
    AuthenticationError,
    CredentialMissingError,
    LLMError,
    ProviderError,
)
from docwright.llm.retry import retry_with_backoff

# Assumed completion size when estimating cost before a call
ESTIMATED_OUTPUT_TOKENS = 500

_PER_MILLION = Decimal(1_000_000)

_AUTH_SDK_ERRORS = (
    anthropic.AuthenticationError,
    anthropic.PermissionDeniedError,
    openai.AuthenticationError,
    openai.PermissionDeniedError,
)


# --- Response ---


@dataclass
class LLMResponse:
    """Raw completion from an LLM backend."""

    content: str
    model: str
    input_tokens: int | None = None
    output_tokens: int | None = None
    stop_reason: str | None = None


@dataclass(frozen=True)
class DocumentationDraft:
    """Documentation proposed by a provider for one API, not yet validated."""

    api_symbol_id: str
    text: str
    provider: str
    model: str
    input_tokens: int
    output_tokens: int
    estimated_cost: Decimal

    @property
    def tokens_used(self) -> int:
        return self.input_tokens + self.output_tokens


# --- Provider abstraction ---


class LLMProvider(ABC):
    """Abstract base class for LLM providers.

    Subclasses only shape requests and responses for their backend;
    credential lookup, retries, error classification and cost accounting
    live here.
    """

    name: ClassVar[str]
    default_model: ClassVar[str]
    input_price_per_million: ClassVar[Decimal]
    output_price_per_million: ClassVar[Decimal]

    max_attempts: ClassVar[int] = 3
    initial_delay: ClassVar[float] = 1.0
    backoff_multiplier: ClassVar[float] = 2.0

    def __init__(self, credentials: CredentialStore, model: str | None = None) -> None:
        self.credentials = credentials
        self.model = model or self.default_model
        self._client: Any = None
        self._client_key: str | None = None

    def is_available(self) -> bool:
        """Whether a credential is configured for this provider."""
        return self._api_key() is not None

    def estimate_cost(self, context: ApiContext) -> Decimal:
        """Cost of documenting `context`, assuming an average-sized answer."""
        return self._cost(context.token_estimate, ESTIMATED_OUTPUT_TOKENS)

    async def generate(self, context: ApiContext) -> DocumentationDraft:
        """Generate XML documentation for one API.

        Raises:
            CredentialMissingError: No API key is configured.
            AuthenticationError: The backend rejected the API key.
            ProviderError: The request failed after all retries.
        """
        api_key = self._api_key()
        if api_key is None:
            raise CredentialMissingError(self.name)

        prompt = build_documentation_prompt(context)
        logfire.debug(
            "Built documentation prompt",
            provider=self.name,
            api=context.api_symbol_id,
            prompt_chars=len(prompt),
        )

        client = self._get_client(api_key)
        try:
            response = await retry_with_backoff(
                lambda: self._complete(client, prompt),
                max_attempts=self.max_attempts,
                initial_delay=self.initial_delay,
                backoff_multiplier=self.backoff_multiplier,
            )
        except LLMError:
            raise
        except _AUTH_SDK_ERRORS as e:
            raise AuthenticationError(
                self.name,
                f"Invalid API key for {self.name}. Check DOCWRIGHT_API_KEY_{self.name.upper()}.",
            ) from e
        except Exception as e:
            logfire.error(
                "Provider request failed after retries",
                provider=self.name,
                api=context.api_symbol_id,
                error_type=type(e).__name__,
            )
            raise ProviderError(self.name, f"{self.name} request failed: {e}") from e

        input_tokens = (
            response.input_tokens if response.input_tokens is not None else context.token_estimate
        )
        output_tokens = (
            response.output_tokens
            if response.output_tokens is not None
            else ESTIMATED_OUTPUT_TOKENS
        )
        cost = self._cost(input_tokens, output_tokens)

        logfire.info(
            "Generated documentation",
            provider=self.name,
            model=response.model,
            api=context.api_symbol_id,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            estimated_cost=str(cost),
        )

        return DocumentationDraft(
            api_symbol_id=context.api_symbol_id,
            text=response.content,
            provider=self.name,
            model=self.model,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            estimated_cost=cost,
        )

    async def close(self) -> None:
        """Close the backend client, if one was opened."""
        if self._client is not None:
            await self._client.close()
            self._client = None
            self._client_key = None

    @abstractmethod
    def _create_client(self, api_key: str) -> Any:
        """Create the SDK client for `api_key`."""

    @abstractmethod
    async def _complete(self, client: Any, prompt: str) -> LLMResponse:
        """Send one request. SDK errors propagate unchanged."""

    def _api_key(self) -> str | None:
        key = self.credentials.get_credential(self.name)
        return key.strip() if key and key.strip() else None

    def _get_client(self, api_key: str) -> Any:
        if self._client is None or self._client_key != api_key:
            self._client = self._create_client(api_key)
            self._client_key = api_key
        return self._client

    def _cost(self, input_tokens: int, output_tokens: int) -> Decimal:
        return (
            Decimal(input_tokens) * self.input_price_per_million
            + Decimal(output_tokens) * self.output_price_per_million
        ) / _PER_MILLION


class ClaudeProvider(LLMProvider):
    """Anthropic Claude provider."""

    name = "anthropic"
    default_model = "claude-sonnet-4-5"
    input_price_per_million = Decimal("3")
    output_price_per_million = Decimal("15")
    max_attempts = 3

    max_tokens: ClassVar[int] = 1000

    def _create_client(self, api_key: str) -> anthropic.AsyncAnthropic:
        return anthropic.AsyncAnthropic(api_key=api_key)

    async def _complete(self, client: anthropic.AsyncAnthropic, prompt: str) -> LLMResponse:
        logfire.debug("Calling Claude API", model=self.model, max_tokens=self.max_tokens)

        response = await client.messages.create(
            model=self.model,
            max_tokens=self.max_tokens,
            system=get_system_prompt(),
            messages=[{"role": "user", "content": prompt}],
        )

        content = ""
        for block in response.content:
            if block.type == "text":
                content += block.text

        usage = response.usage
        return LLMResponse(
            content=content,
            model=response.model,
            input_tokens=usage.input_tokens if usage else None,
            output_tokens=usage.output_tokens if usage else None,
            stop_reason=response.stop_reason,
        )


# Strict structured-output schema: the answer is a single XML string
XML_DOCUMENTATION_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "xmlDocumentation": {
            "type": "string",
            "description": "The XML documentation tags for the API",
        },
    },
    "required": ["xmlDocumentation"],
    "additionalProperties": False,
}


class GptProvider(LLMProvider):
    """OpenAI GPT provider using strict JSON-schema output."""

    name = "openai"
    default_model = "gpt-5-nano"
    input_price_per_million = Decimal("0.05")
    output_price_per_million = Decimal("0.40")
    max_attempts = 5

    max_tokens: ClassVar[int] = 4000

    def _create_client(self, api_key: str) -> openai.AsyncOpenAI:
        return openai.AsyncOpenAI(api_key=api_key)

    async def _complete(self, client: openai.AsyncOpenAI, prompt: str) -> LLMResponse:
        logfire.debug("Calling OpenAI API", model=self.model, max_tokens=self.max_tokens)

        response = await client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": get_system_prompt()},
                {"role": "user", "content": prompt},
            ],
            max_completion_tokens=self.max_tokens,
            response_format={
                "type": "json_schema",
                "json_schema": {
                    "name": "xml_documentation",
                    "strict": True,
                    "schema": XML_DOCUMENTATION_SCHEMA,
                },
            },
        )

        if not response.choices:
            raise ProviderError(self.name, "OpenAI returned no choices")
        choice = response.choices[0]
        message = choice.message

        if message.refusal:
            raise ProviderError(self.name, f"OpenAI refused the request: {message.refusal}")
        if not message.content or not message.content.strip():
            raise ProviderError(self.name, "OpenAI returned empty response text")

        try:
            payload = json.loads(message.content)
            xml = payload["xmlDocumentation"]
        except (ValueError, KeyError, TypeError) as e:
            raise ProviderError(self.name, f"OpenAI returned malformed structured output: {e}") from e
        if not isinstance(xml, str):
            raise ProviderError(self.name, "OpenAI returned malformed structured output")

        usage = response.usage
        return LLMResponse(
            content=xml,
            model=response.model,
            input_tokens=usage.prompt_tokens if usage else None,
            output_tokens=usage.completion_tokens if usage else None,
            stop_reason=choice.finish_reason,
        )
