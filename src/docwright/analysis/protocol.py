"""Interfaces the generation pipeline needs from source analysis.

The pipeline never talks to a compiler directly. Anything that can resolve a
fully-qualified name to a signature, its references and its documentation
can drive it, which keeps context collection testable against in-memory
fakes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class SymbolHandle:
    """Engine-neutral reference to a resolved declaration."""

    fully_qualified_name: str
    name: str
    file_path: str = ""
    line_number: int = 0


@dataclass(frozen=True)
class SignatureParts:
    """Signature details of a resolved declaration."""

    parameters: list[str] = field(default_factory=list)  # "<type> <name>"
    return_type: str | None = None  # None for void
    hierarchy: list[str] = field(default_factory=list)
    type_arguments: list[str] = field(default_factory=list)
    inherited_documentation: str | None = None


@dataclass(frozen=True)
class ReferenceLocation:
    """A place in source where a symbol is referenced."""

    file_path: str
    line_number: int  # 1-based


class StalenessSeverity(StrEnum):
    WARNING = "warning"
    CRITICAL = "critical"


@dataclass(frozen=True)
class StalenessResult:
    is_stale: bool
    severity: StalenessSeverity | None = None


@runtime_checkable
class SemanticAnalyzer(Protocol):
    """Symbol resolution and lookup over one compilation."""

    def resolve_symbol(self, fully_qualified_name: str) -> SymbolHandle | None: ...

    def get_signature_parts(self, handle: SymbolHandle) -> SignatureParts: ...

    def find_references(self, handle: SymbolHandle) -> list[ReferenceLocation]: ...

    def get_documentation_text(self, handle: SymbolHandle) -> str | None: ...

    def get_implementation_text(self, handle: SymbolHandle) -> str | None: ...

    def get_called_symbols(self, handle: SymbolHandle) -> list[SymbolHandle]:
        """Symbols invoked from the handle's body, limited to the same compilation."""
        ...

    def read_source_lines(self, file_path: str) -> list[str]: ...


@runtime_checkable
class StalenessDetector(Protocol):
    """Judges whether existing documentation still matches its code."""

    def is_stale(self, handle: SymbolHandle) -> StalenessResult: ...
