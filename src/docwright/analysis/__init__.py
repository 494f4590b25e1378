"""Source analysis interfaces and the JSON symbol index."""

from docwright.analysis.index import (
    IndexedReference,
    IndexedSymbol,
    SymbolIndex,
    load_symbol_index,
)
from docwright.analysis.protocol import (
    ReferenceLocation,
    SemanticAnalyzer,
    SignatureParts,
    StalenessDetector,
    StalenessResult,
    StalenessSeverity,
    SymbolHandle,
)

__all__ = [
    "IndexedReference",
    "IndexedSymbol",
    "ReferenceLocation",
    "SemanticAnalyzer",
    "SignatureParts",
    "StalenessDetector",
    "StalenessResult",
    "StalenessSeverity",
    "SymbolHandle",
    "SymbolIndex",
    "load_symbol_index",
]
