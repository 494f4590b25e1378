"""Context collection for documentation generation."""

from docwright.context.call_sites import CallSiteSampler, select_diverse_locations
from docwright.context.collector import ContextCollector, SymbolNotFoundError

__all__ = [
    "CallSiteSampler",
    "ContextCollector",
    "SymbolNotFoundError",
    "select_diverse_locations",
]
