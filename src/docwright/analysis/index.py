"""In-memory symbol index loaded from an analyzer's JSON export.

The index format lets an external analyzer (a compiler plugin, a language
server bridge, a script) hand its findings to docwright in one file:

    {
      "root": "/path/to/project",
      "symbols": [{"fully_qualified_name": "Lib.Calculator.Add", ...}],
      "references": [{"symbol": "Lib.Calculator.Add", "file_path": "Usage.cs", "line_number": 12}],
      "sources": {"Usage.cs": "..."}
    }

`sources` is optional; without it source lines are read from disk relative
to `root`.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import logfire
from pydantic import BaseModel, Field, PrivateAttr

from docwright.analysis.protocol import (
    ReferenceLocation,
    SignatureParts,
    SymbolHandle,
)
from docwright.core.models import ApiSymbol, DocumentationStatus, SymbolKind

# Access levels that make a declaration part of the public API surface
PUBLIC_ACCESS = frozenset({"public", "protected"})


class IndexedSymbol(BaseModel):
    """One declaration as exported by the analyzer."""

    fully_qualified_name: str
    id: str | None = Field(default=None, description="Stable id; defaults to the FQN")
    kind: SymbolKind = SymbolKind.METHOD
    file_path: str = ""
    line_number: int = 1
    signature: str = ""
    access_modifier: str = "public"
    is_static: bool = False
    documentation_status: DocumentationStatus = DocumentationStatus.UNDOCUMENTED

    parameters: list[str] = Field(default_factory=list)
    return_type: str | None = None
    hierarchy: list[str] = Field(default_factory=list)
    type_arguments: list[str] = Field(default_factory=list)
    documentation: str | None = None
    inherited_documentation: str | None = None
    implementation: str | None = None
    calls: list[str] = Field(
        default_factory=list,
        description="Fully-qualified names invoked from the implementation",
    )

    @property
    def symbol_id(self) -> str:
        return self.id or self.fully_qualified_name

    @property
    def name(self) -> str:
        return self.fully_qualified_name.rsplit(".", 1)[-1]


class IndexedReference(BaseModel):
    """A reference from source code to an indexed symbol."""

    symbol: str
    file_path: str
    line_number: int


class SymbolIndex(BaseModel):
    """Semantic analyzer backed by an exported symbol index."""

    root: Path | None = None
    symbols: list[IndexedSymbol] = Field(default_factory=list)
    references: list[IndexedReference] = Field(default_factory=list)
    sources: dict[str, str] = Field(default_factory=dict)

    _by_name: dict[str, IndexedSymbol] = PrivateAttr(default_factory=dict)
    _lines: dict[str, list[str]] = PrivateAttr(default_factory=dict)

    def model_post_init(self, __context: Any) -> None:
        self._by_name = {s.fully_qualified_name: s for s in self.symbols}

    # --- SemanticAnalyzer ---

    def resolve_symbol(self, fully_qualified_name: str) -> SymbolHandle | None:
        symbol = self._by_name.get(fully_qualified_name)
        if symbol is None:
            return None
        return SymbolHandle(
            fully_qualified_name=symbol.fully_qualified_name,
            name=symbol.name,
            file_path=symbol.file_path,
            line_number=symbol.line_number,
        )

    def get_signature_parts(self, handle: SymbolHandle) -> SignatureParts:
        symbol = self._require(handle)
        return SignatureParts(
            parameters=list(symbol.parameters),
            return_type=symbol.return_type,
            hierarchy=list(symbol.hierarchy),
            type_arguments=list(symbol.type_arguments),
            inherited_documentation=symbol.inherited_documentation,
        )

    def find_references(self, handle: SymbolHandle) -> list[ReferenceLocation]:
        return [
            ReferenceLocation(file_path=ref.file_path, line_number=ref.line_number)
            for ref in self.references
            if ref.symbol == handle.fully_qualified_name
        ]

    def get_documentation_text(self, handle: SymbolHandle) -> str | None:
        return self._require(handle).documentation

    def get_implementation_text(self, handle: SymbolHandle) -> str | None:
        return self._require(handle).implementation

    def get_called_symbols(self, handle: SymbolHandle) -> list[SymbolHandle]:
        called = []
        for name in self._require(handle).calls:
            target = self.resolve_symbol(name)
            # Calls into code outside the index are third-party
            if target is not None:
                called.append(target)
        return called

    def read_source_lines(self, file_path: str) -> list[str]:
        if file_path in self._lines:
            return self._lines[file_path]

        if file_path in self.sources:
            lines = self.sources[file_path].splitlines()
        else:
            path = Path(file_path)
            if self.root is not None and not path.is_absolute():
                path = self.root / path
            try:
                lines = path.read_text(encoding="utf-8", errors="replace").splitlines()
            except OSError as e:
                logfire.warn("Could not read source file", file_path=file_path, error=str(e))
                lines = []

        self._lines[file_path] = lines
        return lines

    # --- Candidate APIs ---

    def api_symbols(self) -> list[ApiSymbol]:
        """Public API declarations, in index order."""
        return [
            ApiSymbol(
                id=symbol.symbol_id,
                kind=symbol.kind,
                fully_qualified_name=symbol.fully_qualified_name,
                file_path=symbol.file_path,
                line_number=symbol.line_number,
                signature=symbol.signature or symbol.fully_qualified_name,
                access_modifier=symbol.access_modifier,
                is_static=symbol.is_static,
                documentation_status=symbol.documentation_status,
            )
            for symbol in self.symbols
            if symbol.access_modifier.lower() in PUBLIC_ACCESS
        ]

    def _require(self, handle: SymbolHandle) -> IndexedSymbol:
        symbol = self._by_name.get(handle.fully_qualified_name)
        if symbol is None:
            raise KeyError(handle.fully_qualified_name)
        return symbol


def load_symbol_index(path: Path) -> SymbolIndex:
    """Load a symbol index from a JSON file.

    A relative or missing `root` is resolved against the index file's
    directory.
    """
    index = SymbolIndex.model_validate_json(path.read_text(encoding="utf-8"))
    base = path.resolve().parent
    if index.root is None:
        index.root = base
    elif not index.root.is_absolute():
        index.root = base / index.root

    logfire.info(
        "Loaded symbol index",
        path=str(path),
        symbols=len(index.symbols),
        references=len(index.references),
    )
    return index
