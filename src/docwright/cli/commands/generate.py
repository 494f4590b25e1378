"""Generate command for docwright CLI."""

from __future__ import annotations

import asyncio
from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.panel import Panel
from rich.progress import BarColumn, MofNCompleteColumn, Progress, SpinnerColumn, TextColumn

from docwright.analysis.index import load_symbol_index
from docwright.cache.dry_run import DryRunCacheManager
from docwright.cli.config import load_llm_configuration
from docwright.cli.confirmation import confirm_fallback, confirm_write
from docwright.context.collector import ContextCollector
from docwright.core.config import get_settings
from docwright.core.models import ApiSymbol
from docwright.generator.orchestrator import ParallelDocumentationGenerator
from docwright.generator.service import (
    DocumentationService,
    GenerationResult,
    GenerationStatus,
    JsonDocumentationWriter,
)
from docwright.llm.credentials import EnvironmentCredentialStore
from docwright.llm.errors import AuthenticationError, LLMError
from docwright.llm.factory import ProviderFactory

console = Console()

DEFAULT_OUTPUT_NAME = "docwright-documentation.json"


def generate(
    index_file: Path = typer.Argument(
        ...,
        exists=True,
        dir_okay=False,
        readable=True,
        help="Symbol index exported by the source analyzer (JSON).",
    ),
    project: str | None = typer.Option(
        None,
        "--project",
        "-p",
        help="Project identity used for the dry-run cache. Defaults to the index root.",
    ),
    intensity: str = typer.Option(
        "undocumented",
        "--intensity",
        "-i",
        help="Which APIs to document: undocumented, partially_documented or all.",
    ),
    parallelism: int | None = typer.Option(
        None,
        "--parallelism",
        "-j",
        min=1,
        max=10,
        help="Concurrent LLM requests (1-10). Defaults to PARALLELISM or 3.",
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        help="Preview and cache the documentation without writing anything.",
    ),
    output: Path | None = typer.Option(
        None,
        "--output",
        "-o",
        help=f"Hand-off file for accepted documentation. Defaults to {DEFAULT_OUTPUT_NAME} next to the index.",
    ),
    yes: bool = typer.Option(
        False,
        "--yes",
        "-y",
        help="Write without asking for confirmation.",
    ),
) -> None:
    """Generate XML documentation for the public APIs in a symbol index.

    Examples:

        docwright generate symbols.json --dry-run

        docwright generate symbols.json --intensity all --parallelism 5 --yes
    """
    settings = get_settings()

    try:
        index = load_symbol_index(index_file)
    except (OSError, ValidationError) as e:
        console.print(f"[red]Error:[/red] Could not load symbol index: {e}")
        raise typer.Exit(1) from e

    try:
        llm_config = load_llm_configuration(settings)
    except LLMError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e

    project_id = project or str(index.root)
    factory = ProviderFactory(
        EnvironmentCredentialStore(settings),
        confirm_fallback=confirm_fallback,
    )
    generator = ParallelDocumentationGenerator(
        ContextCollector(
            index,
            max_call_sites=settings.max_call_site_examples,
            context_lines=settings.call_site_context_lines,
        ),
        DryRunCacheManager(settings.cache_dir),
        provider_factory=factory,
    )
    service = DocumentationService(
        generator,
        factory,
        writer=JsonDocumentationWriter(output or index_file.with_name(DEFAULT_OUTPUT_NAME)),
        confirm_write=None if yes else confirm_write,
    )

    console.print(
        Panel(
            f"Index: [blue]{index_file}[/blue]\n"
            f"Provider: [blue]{llm_config.primary_provider}[/blue] ({llm_config.primary_model})\n"
            f"Intensity: [blue]{intensity}[/blue]\n"
            f"Mode: [blue]{'dry run' if dry_run else 'write'}[/blue]",
            title="Documentation Generation",
        )
    )

    async def run() -> GenerationResult:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            MofNCompleteColumn(),
            console=console,
            transient=True,
        ) as progress:
            task = progress.add_task("Generating documentation...", total=None)

            def on_progress(api: ApiSymbol, completed: int, total: int) -> None:
                progress.update(
                    task, completed=completed, total=total, description=api.simple_name
                )

            try:
                return await service.run(
                    project_id,
                    index.api_symbols(),
                    llm_config,
                    intensity=intensity,
                    parallelism=parallelism or settings.parallelism,
                    dry_run=dry_run,
                    on_progress=on_progress,
                )
            finally:
                await factory.close()

    try:
        result = asyncio.run(run())
    except AuthenticationError as e:
        console.print(f"[red]Authentication failed:[/red] {e}")
        console.print(
            f"[dim]Set DOCWRIGHT_API_KEY_{e.provider_name.upper()} to a valid key, "
            "or switch providers with [blue]docwright config set-provider[/blue].[/dim]"
        )
        raise typer.Exit(1) from e
    except (LLMError, ValueError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e

    _print_result(result, dry_run)
    if result.status not in (GenerationStatus.SUCCESS, GenerationStatus.NO_APIS_FOUND):
        raise typer.Exit(1)


def _print_result(result: GenerationResult, dry_run: bool) -> None:
    if result.status == GenerationStatus.NO_APIS_FOUND:
        console.print("[yellow]No APIs match the filter. Nothing to generate.[/yellow]")
        return

    if result.status == GenerationStatus.GENERATION_FAILED:
        console.print(
            f"[red]Generation failed:[/red] no documentation was accepted for "
            f"{result.api_count} APIs. Run with --verbose for details."
        )
        return

    if dry_run and result.preview is not None:
        console.print(result.preview, markup=False, highlight=False)
        console.print(f"[dim]Cached responses in:[/dim] {result.cache_file_path}")
        return

    color = "green" if result.succeeded else "red"
    console.print(
        Panel(
            f"Status: [{color}]{result.status.value}[/{color}]\n"
            f"{result.message}\n"
            f"Accepted: {result.success_count}/{result.api_count} APIs\n"
            f"Files written: {result.file_count}",
            title="Generation Complete",
        )
    )
