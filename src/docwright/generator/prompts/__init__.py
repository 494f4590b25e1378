"""Prompt templates for documentation generation.

This module provides Jinja2 templates for LLM prompts. Rendering is pure:
no network or file access beyond loading the templates themselves.
"""

from pathlib import Path

from jinja2 import Environment, FileSystemLoader

from docwright.core.models import ApiContext

# Template directory
TEMPLATE_DIR = Path(__file__).parent

# Only the first few usage examples are rendered, however many were collected
MAX_PROMPT_EXAMPLES = 3
# Larger related-type sets are noise and are left out
MAX_RELATED_TYPES = 10

# Prompts are plain text; XML in the output contract must not be escaped
_env = Environment(
    loader=FileSystemLoader(TEMPLATE_DIR),
    autoescape=False,
    trim_blocks=True,
    lstrip_blocks=True,
    keep_trailing_newline=True,
)


def render_template(template_name: str, **kwargs: object) -> str:
    """Render a prompt template with the given context.

    Args:
        template_name: Name of the template file (e.g., "system_prompt.j2")
        **kwargs: Variables to pass to the template

    Returns:
        Rendered template string
    """
    template = _env.get_template(template_name)
    return template.render(**kwargs)


def get_system_prompt() -> str:
    """Get the system prompt for documentation generation."""
    return render_template("system_prompt.j2").strip()


def build_documentation_prompt(context: ApiContext) -> str:
    """Build the user prompt asking for one API's XML documentation.

    Args:
        context: Collected evidence for the API

    Returns:
        Formatted prompt string
    """
    return render_template(
        "documentation_prompt.j2",
        context=context,
        examples=context.call_sites[:MAX_PROMPT_EXAMPLES],
        max_related_types=MAX_RELATED_TYPES,
    )


__all__ = [
    "MAX_PROMPT_EXAMPLES",
    "MAX_RELATED_TYPES",
    "build_documentation_prompt",
    "get_system_prompt",
    "render_template",
]
