"""Bounded-concurrency documentation generation across many APIs."""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

import logfire

from docwright.cache.dry_run import DryRunCache, DryRunCacheEntry, DryRunCacheManager, find_entry
from docwright.context.collector import ContextCollector
from docwright.core.models import ApiSymbol, GeneratedDocumentation
from docwright.generator.validation import validate_documentation
from docwright.llm.errors import AuthenticationError, DocumentationValidationError, ProviderError
from docwright.llm.factory import ProviderFactory
from docwright.llm.provider import LLMProvider

MIN_PARALLELISM = 1
MAX_PARALLELISM = 10

# Called with (api, completed, total) whenever an API finishes, accepted or not
ProgressCallback = Callable[[ApiSymbol, int, int], None]


class GenerationCancelled(Exception):
    """Raised inside a task when the run has been cancelled."""


@dataclass
class GenerationContext:
    """State shared by all tasks of one run.

    Every task runs on the same event loop and none of the mutations below
    awaits, so they need no lock.
    """

    cache: DryRunCache | None = None
    documents: list[GeneratedDocumentation] = field(default_factory=list)
    cache_hits: int = 0
    cache_misses: int = 0
    completed: int = 0
    auth_failure_message: str | None = None

    @property
    def auth_failed(self) -> bool:
        return self.auth_failure_message is not None

    def claim_auth_failure(self, message: str) -> bool:
        """Record the first authentication failure. Returns True for the winner."""
        if self.auth_failure_message is not None:
            return False
        self.auth_failure_message = message
        return True


@dataclass
class GenerationOutcome:
    """Accepted documentation plus cache statistics for a run."""

    documents: list[GeneratedDocumentation]
    cache_hits: int
    cache_misses: int
    total: int

    @property
    def failed(self) -> int:
        return self.total - len(self.documents)


class ParallelDocumentationGenerator:
    """Runs context collection, generation and validation per API.

    At most `parallelism` APIs are in flight at once. A failure on one API
    never stops the others, except an authentication failure, which cancels
    the run when `cancel_on_auth_failure` is set.
    """

    def __init__(
        self,
        collector: ContextCollector,
        cache: DryRunCacheManager,
        provider_factory: ProviderFactory | None = None,
        cancel_on_auth_failure: bool = True,
    ):
        self.collector = collector
        self.cache = cache
        self.provider_factory = provider_factory
        self.cancel_on_auth_failure = cancel_on_auth_failure

    async def generate(
        self,
        project_id: str,
        symbols: Sequence[ApiSymbol],
        provider: LLMProvider,
        parallelism: int = 3,
        dry_run: bool = False,
        cancel_event: asyncio.Event | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> GenerationOutcome:
        """Generate documentation for `symbols`.

        Raises:
            ValueError: If `parallelism` is outside 1..10.
            AuthenticationError: If any API failed authentication. Results
                of the other APIs are discarded in that case.
        """
        if not MIN_PARALLELISM <= parallelism <= MAX_PARALLELISM:
            raise ValueError(
                f"parallelism must be between {MIN_PARALLELISM} and {MAX_PARALLELISM}, "
                f"got {parallelism}"
            )

        context = GenerationContext(cache=self.cache.load(project_id))
        cancel_event = cancel_event or asyncio.Event()
        semaphore = asyncio.Semaphore(parallelism)

        logfire.info(
            "Starting documentation generation",
            project=project_id,
            apis=len(symbols),
            provider=provider.name,
            parallelism=parallelism,
            dry_run=dry_run,
        )

        tasks = [
            self._process(
                project_id,
                symbol,
                provider,
                dry_run,
                context,
                semaphore,
                cancel_event,
                len(symbols),
                on_progress,
            )
            for symbol in symbols
        ]
        # Task errors are handled per API; gather only waits for all to settle
        await asyncio.gather(*tasks, return_exceptions=True)

        if context.auth_failed:
            raise AuthenticationError(
                provider.name, f"Authentication failed: {context.auth_failure_message}"
            )

        if context.cache_hits or context.cache_misses:
            logfire.info(
                "Cache statistics",
                project=project_id,
                cache_hits=context.cache_hits,
                cache_misses=context.cache_misses,
            )

        return GenerationOutcome(
            documents=list(context.documents),
            cache_hits=context.cache_hits,
            cache_misses=context.cache_misses,
            total=len(symbols),
        )

    async def _process(
        self,
        project_id: str,
        symbol: ApiSymbol,
        provider: LLMProvider,
        dry_run: bool,
        context: GenerationContext,
        semaphore: asyncio.Semaphore,
        cancel_event: asyncio.Event,
        total: int,
        on_progress: ProgressCallback | None,
    ) -> None:
        async with semaphore:
            try:
                text = await self._get_or_generate(
                    project_id, symbol, provider, dry_run, context, cancel_event, total
                )
                context.documents.append(
                    GeneratedDocumentation(
                        api_symbol=symbol,
                        documentation=text,
                        file_path=symbol.file_path,
                    )
                )
            except GenerationCancelled:
                return
            except AuthenticationError as e:
                if context.claim_auth_failure(str(e)):
                    logfire.error(
                        "Authentication failed, cancelling remaining work",
                        provider=e.provider_name,
                        api=symbol.fully_qualified_name,
                    )
                if self.cancel_on_auth_failure:
                    cancel_event.set()
                return
            except Exception as e:
                if not context.auth_failed:
                    logfire.error(
                        "Failed to generate documentation for {api}",
                        api=symbol.fully_qualified_name,
                        error_type=type(e).__name__,
                        error=str(e),
                    )

            context.completed += 1
            if on_progress is not None:
                on_progress(symbol, context.completed, total)

    async def _get_or_generate(
        self,
        project_id: str,
        symbol: ApiSymbol,
        provider: LLMProvider,
        dry_run: bool,
        context: GenerationContext,
        cancel_event: asyncio.Event,
        total: int,
    ) -> str:
        if cancel_event.is_set():
            raise GenerationCancelled()

        cached = find_entry(context.cache, symbol.id)
        if cached is not None:
            context.cache_hits += 1
            logfire.info(
                "[Progress: {current}/{total}] Using cached documentation for {api}",
                current=context.completed + 1,
                total=total,
                api=symbol.fully_qualified_name,
            )
            return cached.generated_text

        context.cache_misses += 1
        logfire.info(
            "[Progress: {current}/{total}] Generating documentation for {api}",
            current=context.completed + 1,
            total=total,
            api=symbol.fully_qualified_name,
        )

        api_context = self.collector.collect(symbol)

        if cancel_event.is_set():
            raise GenerationCancelled()
        try:
            draft = await provider.generate(api_context)
        except ProviderError:
            self._record_failure(provider.name)
            raise
        self._record_success(provider.name)
        if cancel_event.is_set():
            raise GenerationCancelled()

        result = validate_documentation(draft.text, api_context)
        if not result.is_valid:
            raise DocumentationValidationError(symbol.id, result.issues)
        text = result.cleaned_text if result.cleaned_text is not None else draft.text

        if dry_run:
            self.cache.save(
                project_id,
                DryRunCacheEntry(
                    api_symbol_id=symbol.id,
                    generated_text=text,
                    provider=draft.provider,
                    model=draft.model,
                ),
            )
        return text

    def _record_failure(self, provider_name: str) -> None:
        if self.provider_factory is not None:
            self.provider_factory.record_failure(provider_name)

    def _record_success(self, provider_name: str) -> None:
        if self.provider_factory is not None:
            self.provider_factory.record_success(provider_name)
