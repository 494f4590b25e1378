"""Text preview of a dry run."""

from collections.abc import Sequence

from docwright.core.models import GeneratedDocumentation

SEPARATOR = "-" * 80


def group_by_file(
    documents: Sequence[GeneratedDocumentation],
) -> dict[str, list[GeneratedDocumentation]]:
    """Group documents by target file, keeping first-seen file order."""
    groups: dict[str, list[GeneratedDocumentation]] = {}
    for doc in documents:
        groups.setdefault(doc.file_path, []).append(doc)
    return groups


def build_preview(documents: Sequence[GeneratedDocumentation]) -> str:
    """Render the documentation a write run would insert, grouped by file."""
    groups = group_by_file(documents)
    lines = ["", "=== Dry-Run Preview ===", ""]

    for file_path, docs in groups.items():
        lines.append(f"File: {file_path}")
        lines.append(SEPARATOR)
        for doc in docs:
            lines.append("")
            lines.append(f"+ API: {doc.api_symbol.fully_qualified_name}")
            lines.append("+ Documentation:")
            for doc_line in doc.documentation.splitlines():
                lines.append(f"+   /// {doc_line.lstrip()}")
        lines.append("")

    lines.append("")
    lines.append(
        f"Dry-run complete. {len(documents)} documentation entries would be added "
        f"to {len(groups)} files."
    )
    lines.append("Run without --dry-run to apply changes.")
    return "\n".join(lines) + "\n"
