"""Usage-example sampling for an API symbol."""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence

import logfire

from docwright.analysis.protocol import ReferenceLocation, SemanticAnalyzer
from docwright.core.models import ApiSymbol, CallSiteInfo

# Diversity scoring weights. Fewer references in the same file scores higher,
# later lines break ties in favor of spread-out examples.
FILE_SPREAD_WEIGHT = 100.0
LINE_SPREAD_WEIGHT = 0.01


def select_diverse_locations(
    locations: Sequence[ReferenceLocation],
    max_examples: int,
) -> list[ReferenceLocation]:
    """Pick up to `max_examples` references, preferring distinct files.

    The sort is stable, so equal scores keep discovery order.
    """
    if len(locations) <= max_examples:
        return list(locations)

    per_file = Counter(loc.file_path for loc in locations)

    def score(loc: ReferenceLocation) -> float:
        return (
            FILE_SPREAD_WEIGHT / per_file[loc.file_path]
            + (loc.line_number - 1) * LINE_SPREAD_WEIGHT
        )

    return sorted(locations, key=score, reverse=True)[:max_examples]


class CallSiteSampler:
    """Collects a small, diverse set of usage examples for a symbol."""

    def __init__(self, analyzer: SemanticAnalyzer):
        self.analyzer = analyzer

    def sample(
        self,
        symbol: ApiSymbol,
        max_examples: int = 5,
        context_lines: int = 3,
    ) -> list[CallSiteInfo]:
        handle = self.analyzer.resolve_symbol(symbol.fully_qualified_name)
        if handle is None:
            logfire.debug(
                "Symbol not resolvable, skipping call sites",
                symbol=symbol.fully_qualified_name,
            )
            return []

        locations = self.analyzer.find_references(handle)
        if not locations:
            logfire.debug("No call sites found", symbol=symbol.fully_qualified_name)
            return []

        selected = select_diverse_locations(locations, max_examples)
        if len(selected) < len(locations):
            logfire.debug(
                "Selected diverse usage examples",
                symbol=symbol.fully_qualified_name,
                selected=len(selected),
                found=len(locations),
            )

        call_sites = []
        for location in selected:
            info = self._extract(location, context_lines)
            if info is not None:
                call_sites.append(info)
        return call_sites

    def _extract(self, location: ReferenceLocation, context_lines: int) -> CallSiteInfo | None:
        lines = self.analyzer.read_source_lines(location.file_path)
        index = location.line_number - 1
        if index < 0 or index >= len(lines):
            logfire.debug(
                "Reference outside source file, skipping",
                file_path=location.file_path,
                line_number=location.line_number,
            )
            return None

        start = max(0, index - context_lines)
        end = min(len(lines) - 1, index + context_lines)

        return CallSiteInfo(
            file_path=location.file_path,
            line_number=location.line_number,
            call_expression=lines[index],
            context_before=lines[start:index],
            context_after=lines[index + 1 : end + 1],
        )
