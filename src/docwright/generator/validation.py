"""Structural validation of generated XML documentation."""

import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field

import logfire

from docwright.core.models import ApiContext

EMPTY_RESPONSE = "LLM returned empty response"
MISSING_SUMMARY = "Missing required <summary> tag"
EMPTY_SUMMARY = "Empty <summary> tag"
MISSING_RETURNS = "Missing required <returns> tag"

_FENCE_RE = re.compile(r"^\s*```[\w-]*[ \t]*\n(?P<body>.*?)\n?[ \t]*```\s*$", re.DOTALL)
_OPEN_TAG_RE = re.compile(r"<(?P<name>[A-Za-z_][\w.-]*)(?:\s[^<>]*)?>")
_CLOSE_TAG_RE = re.compile(r"</[A-Za-z_][\w.-]*\s*>")


@dataclass
class ValidationResult:
    """Outcome of validating one LLM response."""

    is_valid: bool
    issues: list[str] = field(default_factory=list)
    # Set when the accepted text differs from the raw response
    cleaned_text: str | None = None


def _strip_code_fences(text: str) -> str:
    match = _FENCE_RE.match(text)
    return match.group("body").strip() if match else text


def _parse_fragment(text: str) -> ET.Element:
    """Parse documentation tags under a synthetic root element."""
    return ET.fromstring(f"<doc>{text}</doc>")


def _extract_fragment(text: str) -> str | None:
    """Find the tagged fragment inside surrounding prose.

    The fragment starts at the first open tag that has a matching close tag
    and ends after the last close tag in the text.
    """
    closes = list(_CLOSE_TAG_RE.finditer(text))
    if not closes:
        return None
    end = closes[-1].end()

    for match in _OPEN_TAG_RE.finditer(text):
        if match.start() >= end:
            break
        closing = f"</{match.group('name')}"
        if text.find(closing, match.end()) != -1:
            return text[match.start() : end].strip()
    return None


def _has_surrounding_prose(root: ET.Element) -> bool:
    if len(root) == 0:
        return False
    if root.text and root.text.strip():
        return True
    return bool(root[-1].tail and root[-1].tail.strip())


def _element_text(element: ET.Element) -> str:
    return "".join(element.itertext()).strip()


def validate_documentation(raw_text: str | None, context: ApiContext) -> ValidationResult:
    """Validate an LLM response against the API it documents.

    Args:
        raw_text: Response text as returned by the provider
        context: Context the response was generated from

    Returns:
        ValidationResult; `cleaned_text` is set when fences or prose were
        removed and holds the text that should be accepted.
    """
    if raw_text is None or not raw_text.strip():
        return ValidationResult(is_valid=False, issues=[EMPTY_RESPONSE])

    text = raw_text.strip()
    unfenced = _strip_code_fences(text)
    cleaned: str | None = unfenced if unfenced != text else None
    text = unfenced

    try:
        root = _parse_fragment(text)
    except ET.ParseError as e:
        fragment = _extract_fragment(text)
        if fragment is None:
            return ValidationResult(is_valid=False, issues=[f"Invalid XML syntax: {e}"])
        try:
            root = _parse_fragment(fragment)
        except ET.ParseError as inner:
            return ValidationResult(is_valid=False, issues=[f"Invalid XML syntax: {inner}"])
        logfire.debug("Recovered documentation embedded in malformed response")
        cleaned = fragment
    else:
        if _has_surrounding_prose(root):
            fragment = _extract_fragment(text)
            if fragment is not None:
                try:
                    root = _parse_fragment(fragment)
                    cleaned = fragment
                except ET.ParseError:
                    # Keep the full parse; the prose is harmless to validation
                    pass

    issues = _check_required_tags(root, context)
    return ValidationResult(is_valid=not issues, issues=issues, cleaned_text=cleaned)


def _check_required_tags(root: ET.Element, context: ApiContext) -> list[str]:
    issues = []

    summaries = root.findall("summary")
    if not summaries:
        issues.append(MISSING_SUMMARY)
    elif not any(_element_text(s) for s in summaries):
        issues.append(EMPTY_SUMMARY)

    params = root.findall("param")
    for name in context.parameter_names:
        count = sum(1 for p in params if p.get("name") == name)
        if count == 0:
            issues.append(f'Missing required <param name="{name}"> tag')
        elif count > 1:
            issues.append(f'Duplicate <param name="{name}"> tag')

    if context.returns_value and root.find("returns") is None:
        issues.append(MISSING_RETURNS)

    return issues


class OutputValidator:
    """Callable wrapper around validate_documentation for injection."""

    def validate(self, raw_text: str | None, context: ApiContext) -> ValidationResult:
        result = validate_documentation(raw_text, context)
        for issue in result.issues:
            logfire.debug("Validation issue", api=context.api_symbol_id, issue=issue)
        return result
