"""Data model shared by the generation pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum


class SymbolKind(StrEnum):
    """Kinds of documentable declarations."""

    CLASS = "class"
    INTERFACE = "interface"
    STRUCT = "struct"
    ENUM = "enum"
    METHOD = "method"
    FUNCTION = "function"
    PROPERTY = "property"
    INDEXER = "indexer"
    EVENT = "event"
    DELEGATE = "delegate"


class DocumentationStatus(StrEnum):
    """Documentation state of a symbol as reported by the analyzer."""

    UNDOCUMENTED = "undocumented"
    PARTIALLY_DOCUMENTED = "partially_documented"
    DOCUMENTED = "documented"
    STALE = "stale"


@dataclass(frozen=True)
class ApiSymbol:
    """A public API discovered by the analysis collaborator."""

    id: str
    kind: SymbolKind
    fully_qualified_name: str
    file_path: str
    line_number: int
    signature: str
    access_modifier: str = "public"
    is_static: bool = False
    documentation_status: DocumentationStatus = DocumentationStatus.UNDOCUMENTED

    @property
    def simple_name(self) -> str:
        """Last dotted component of the fully-qualified name."""
        return self.fully_qualified_name.rsplit(".", 1)[-1]


@dataclass(frozen=True)
class CallSiteInfo:
    """One usage example with surrounding source lines."""

    file_path: str
    line_number: int  # 1-based
    call_expression: str
    context_before: list[str] = field(default_factory=list)
    context_after: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class CalledMethodDoc:
    """Existing documentation of a method invoked by the API being documented."""

    method_name: str
    documentation: str
    is_fresh: bool = True


@dataclass(frozen=True)
class ApiContext:
    """Evidence bundle sent to the LLM for one API."""

    api_symbol_id: str
    signature: str
    parameter_types: list[str] = field(default_factory=list)  # "<type> <name>"
    return_type: str | None = None
    inheritance_hierarchy: list[str] = field(default_factory=list)
    related_types: list[str] = field(default_factory=list)
    inherited_documentation: str | None = None
    call_sites: list[CallSiteInfo] = field(default_factory=list)
    implementation_body: str | None = None
    is_implementation_truncated: bool = False
    called_methods_documentation: list[CalledMethodDoc] = field(default_factory=list)
    token_estimate: int = 0

    @property
    def parameter_names(self) -> list[str]:
        """Names of the documentable parameters, in declaration order.

        Generic constraint entries ("Type parameter: T where T : class")
        are not parameters and are skipped.
        """
        names = []
        for entry in self.parameter_types:
            if entry.startswith("Type parameter:"):
                continue
            parts = entry.split()
            if parts:
                names.append(parts[-1])
        return names

    @property
    def returns_value(self) -> bool:
        """Whether the API produces a value that needs a returns tag."""
        return bool(self.return_type) and self.return_type.strip() != "void"


@dataclass(frozen=True)
class GeneratedDocumentation:
    """An accepted draft ready for the writer collaborator."""

    api_symbol: ApiSymbol
    documentation: str
    file_path: str
