"""Context collection: gathers the evidence the LLM needs for one API."""

from __future__ import annotations

import logfire

from docwright.analysis.protocol import SemanticAnalyzer, StalenessDetector, SymbolHandle
from docwright.context.call_sites import CallSiteSampler
from docwright.core.models import ApiContext, ApiSymbol, CalledMethodDoc, CallSiteInfo

# Implementation bodies above this many estimated tokens get truncated
MAX_IMPLEMENTATION_TOKENS = 500
TRUNCATED_IMPLEMENTATION_CHARS = 2000
TRUNCATION_MARKER = "\n... (truncated)"

CHARS_PER_TOKEN = 4


class SymbolNotFoundError(LookupError):
    """The analyzer could not resolve a symbol."""

    def __init__(self, fully_qualified_name: str):
        self.fully_qualified_name = fully_qualified_name
        super().__init__(f"Could not resolve symbol {fully_qualified_name}")


def _related_types(
    parameters: list[str],
    return_type: str | None,
    type_arguments: list[str],
) -> list[str]:
    related: dict[str, None] = {}
    for entry in parameters:
        if entry.startswith("Type parameter:"):
            continue
        type_name = entry.rsplit(" ", 1)[0].strip()
        if type_name:
            related[type_name] = None
    if return_type and return_type.strip():
        related[return_type.strip()] = None
    for argument in type_arguments:
        if argument.strip():
            related[argument.strip()] = None
    return list(related)


def _truncate_implementation(body: str | None) -> tuple[str | None, bool]:
    if body is None:
        return None, False
    if len(body) / CHARS_PER_TOKEN > MAX_IMPLEMENTATION_TOKENS:
        return body[:TRUNCATED_IMPLEMENTATION_CHARS] + TRUNCATION_MARKER, True
    return body, False


def _estimate_tokens(
    signature: str,
    parameters: list[str],
    return_type: str | None,
    hierarchy: list[str],
    related_types: list[str],
    inherited_documentation: str | None,
    call_sites: list[CallSiteInfo],
    implementation: str | None,
    called_docs: list[CalledMethodDoc],
) -> int:
    chars = len(signature)
    chars += sum(len(p) for p in parameters)
    chars += len(return_type or "")
    chars += sum(len(h) for h in hierarchy)
    chars += sum(len(t) for t in related_types)
    chars += len(inherited_documentation or "")
    for site in call_sites:
        chars += len(site.call_expression)
        chars += sum(len(line) for line in site.context_before)
        chars += sum(len(line) for line in site.context_after)
    chars += len(implementation or "")
    chars += sum(len(d.method_name) + len(d.documentation) for d in called_docs)
    return chars // CHARS_PER_TOKEN


class ContextCollector:
    """Builds an ApiContext for a symbol.

    Collection is synchronous and deterministic: the same analyzer state
    always yields the same context. The symbol itself is never modified.
    """

    def __init__(
        self,
        analyzer: SemanticAnalyzer,
        sampler: CallSiteSampler | None = None,
        staleness_detector: StalenessDetector | None = None,
        max_call_sites: int = 5,
        context_lines: int = 3,
    ):
        self.analyzer = analyzer
        self.sampler = sampler or CallSiteSampler(analyzer)
        self.staleness_detector = staleness_detector
        self.max_call_sites = max_call_sites
        self.context_lines = context_lines

    def collect(self, symbol: ApiSymbol) -> ApiContext:
        """Collect the full context for `symbol`.

        Raises:
            SymbolNotFoundError: If the analyzer cannot resolve the symbol.
        """
        handle = self.analyzer.resolve_symbol(symbol.fully_qualified_name)
        if handle is None:
            raise SymbolNotFoundError(symbol.fully_qualified_name)

        parts = self.analyzer.get_signature_parts(handle)
        parameters = list(parts.parameters)
        related = _related_types(parameters, parts.return_type, parts.type_arguments)

        call_sites = self.sampler.sample(
            symbol,
            max_examples=self.max_call_sites,
            context_lines=self.context_lines,
        )

        implementation, truncated = _truncate_implementation(
            self.analyzer.get_implementation_text(handle)
        )
        if truncated:
            logfire.debug("Implementation truncated", symbol=symbol.fully_qualified_name)

        called_docs = self._called_methods_documentation(handle)

        token_estimate = _estimate_tokens(
            symbol.signature,
            parameters,
            parts.return_type,
            parts.hierarchy,
            related,
            parts.inherited_documentation,
            call_sites,
            implementation,
            called_docs,
        )

        logfire.debug(
            "Collected context",
            symbol=symbol.fully_qualified_name,
            call_sites=len(call_sites),
            called_methods=len(called_docs),
            token_estimate=token_estimate,
        )

        return ApiContext(
            api_symbol_id=symbol.id,
            signature=symbol.signature,
            parameter_types=parameters,
            return_type=parts.return_type,
            inheritance_hierarchy=list(parts.hierarchy),
            related_types=related,
            inherited_documentation=parts.inherited_documentation,
            call_sites=call_sites,
            implementation_body=implementation,
            is_implementation_truncated=truncated,
            called_methods_documentation=called_docs,
            token_estimate=token_estimate,
        )

    def _called_methods_documentation(self, handle: SymbolHandle) -> list[CalledMethodDoc]:
        if self.staleness_detector is None:
            logfire.debug(
                "No staleness detector configured, treating called-method docs as fresh",
                symbol=handle.fully_qualified_name,
            )

        docs = []
        seen: set[str] = set()
        for callee in self.analyzer.get_called_symbols(handle):
            if callee.fully_qualified_name in seen:
                continue
            seen.add(callee.fully_qualified_name)

            text = self.analyzer.get_documentation_text(callee)
            if not text or not text.strip():
                continue

            if self._is_stale(callee):
                logfire.debug(
                    "Skipping stale called-method documentation",
                    callee=callee.fully_qualified_name,
                )
                continue

            docs.append(
                CalledMethodDoc(
                    method_name=callee.fully_qualified_name,
                    documentation=text.strip(),
                    is_fresh=True,
                )
            )
        return docs

    def _is_stale(self, callee: SymbolHandle) -> bool:
        if self.staleness_detector is None:
            return False
        try:
            return self.staleness_detector.is_stale(callee).is_stale
        except Exception as e:
            logfire.warn(
                "Staleness check failed, treating documentation as fresh",
                callee=callee.fully_qualified_name,
                error=str(e),
            )
            return False
