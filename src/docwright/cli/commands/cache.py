"""Cache commands for docwright CLI."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console

from docwright.cache.dry_run import DryRunCacheManager, is_expired
from docwright.core.config import get_settings

app = typer.Typer()
console = Console()

PROJECT_OPTION = typer.Option(
    ".",
    "--project",
    "-p",
    help="Project identity (usually the project root directory).",
)


def _manager() -> DryRunCacheManager:
    return DryRunCacheManager(get_settings().cache_dir)


@app.command()
def path(project: str = PROJECT_OPTION) -> None:
    """Show where a project's dry-run cache lives."""
    manager = _manager()
    cache_path = manager.path_for(project)
    console.print(str(cache_path), markup=False, highlight=False, soft_wrap=True)

    cache = manager.load(project) if cache_path.exists() else None
    if cache is None:
        console.print("[dim]No cache for this project.[/dim]")
        return

    live = sum(1 for entry in cache.entries if not is_expired(entry.cached_at))
    console.print(f"[dim]{len(cache.entries)} entries, {live} not expired.[/dim]")


@app.command()
def clear(project: str = PROJECT_OPTION) -> None:
    """Delete a project's dry-run cache."""
    if _manager().clear(project):
        console.print(f"[green]Cleared dry-run cache for[/green] {Path(project).resolve()}")
    else:
        console.print("[dim]No cache to clear.[/dim]")
