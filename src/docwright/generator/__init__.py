"""Documentation generator.

Orchestration lives in docwright.generator.orchestrator and
docwright.generator.service.
"""

from docwright.generator.preview import build_preview
from docwright.generator.prompts import build_documentation_prompt, get_system_prompt
from docwright.generator.validation import (
    OutputValidator,
    ValidationResult,
    validate_documentation,
)

__all__ = [
    "OutputValidator",
    "ValidationResult",
    "build_documentation_prompt",
    "build_preview",
    "get_system_prompt",
    "validate_documentation",
]
