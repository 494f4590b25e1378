"""Config commands for docwright CLI."""

from __future__ import annotations

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from docwright.cli import config as cli_config
from docwright.core.config import (
    DEFAULT_MODELS,
    SUPPORTED_PROVIDERS,
    LLMConfiguration,
    get_settings,
)
from docwright.llm.credentials import EnvironmentCredentialStore, mask_api_key
from docwright.llm.errors import LLMError

app = typer.Typer()
console = Console()


@app.command()
def show() -> None:
    """Show the effective provider configuration."""
    settings = get_settings()
    try:
        config = cli_config.load_llm_configuration(settings)
    except LLMError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e

    credentials = EnvironmentCredentialStore(settings)

    table = Table(title="LLM Configuration")
    table.add_column("Setting")
    table.add_column("Value")
    table.add_row("Primary provider", config.primary_provider)
    table.add_row("Primary model", config.primary_model)
    table.add_row("Fallback provider", config.fallback_provider or "-")
    table.add_row("Fallback model", config.fallback_model or "-")
    for provider in SUPPORTED_PROVIDERS:
        table.add_row(
            f"API key ({provider})", mask_api_key(credentials.get_credential(provider))
        )
    table.add_row("Config file", str(cli_config.CONFIG_FILE))
    table.add_row("Cache directory", str(settings.cache_dir))
    console.print(table)


@app.command("set-provider")
def set_provider(
    provider: str = typer.Argument(..., help="Primary provider: anthropic or openai."),
    model: str | None = typer.Option(
        None, "--model", "-m", help="Primary model. Defaults to the provider's default."
    ),
    fallback: str | None = typer.Option(
        None, "--fallback", help="Fallback provider offered after repeated failures."
    ),
    fallback_model: str | None = typer.Option(
        None, "--fallback-model", help="Fallback model. Defaults to the provider's default."
    ),
) -> None:
    """Set the primary (and optionally fallback) provider."""
    try:
        config = LLMConfiguration(
            primary_provider=provider,
            primary_model=model or DEFAULT_MODELS.get(provider, ""),
            fallback_provider=fallback,
            fallback_model=fallback_model,
        )
    except ValidationError as e:
        console.print(f"[red]Error:[/red] Invalid configuration: {e}")
        raise typer.Exit(1) from e

    cli_config.save_llm_configuration(config)
    console.print(
        f"[green]Primary provider set to[/green] {config.primary_provider} ({config.primary_model})"
    )
    if config.fallback_provider:
        console.print(
            f"[green]Fallback provider set to[/green] {config.fallback_provider} "
            f"({config.fallback_model})"
        )
