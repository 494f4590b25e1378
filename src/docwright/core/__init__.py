"""Core docwright configuration and data model."""

from docwright.core.config import LLMConfiguration, Settings, get_settings
from docwright.core.models import (
    ApiContext,
    ApiSymbol,
    CalledMethodDoc,
    CallSiteInfo,
    DocumentationStatus,
    GeneratedDocumentation,
    SymbolKind,
)

__all__ = [
    "ApiContext",
    "ApiSymbol",
    "CallSiteInfo",
    "CalledMethodDoc",
    "DocumentationStatus",
    "GeneratedDocumentation",
    "LLMConfiguration",
    "Settings",
    "SymbolKind",
    "get_settings",
]
