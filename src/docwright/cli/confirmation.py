"""Interactive confirmations used by the generation workflow."""

from rich.prompt import Confirm


def confirm_fallback(primary: str, fallback: str) -> bool:
    return Confirm.ask(
        f"Primary provider '{primary}' unavailable. Switch to fallback provider '{fallback}'?",
        default=True,
    )


def confirm_write(entry_count: int, file_count: int) -> bool:
    return Confirm.ask(
        f"Write {entry_count} documentation entries to {file_count} files?",
        default=False,
    )
