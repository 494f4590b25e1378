"""docwright CLI for documentation generation."""

from __future__ import annotations

import logfire
import typer
from rich.console import Console

from docwright import __version__
from docwright.cli.commands import cache as cache_commands
from docwright.cli.commands import config as config_commands
from docwright.cli.commands import generate as generate_commands
from docwright.core.config import get_settings

app = typer.Typer(
    name="docwright",
    help="LLM-powered API documentation generator",
    no_args_is_help=True,
)
console = Console()

# Add commands and command groups
app.command(name="generate", help="Generate documentation")(generate_commands.generate)
app.add_typer(cache_commands.app, name="cache", help="Inspect or clear the dry-run cache")
app.add_typer(config_commands.app, name="config", help="Show or change provider configuration")


@app.callback()
def setup(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logs."),
) -> None:
    """Configure logging before any command runs."""
    settings = get_settings()
    level = "debug" if verbose or settings.debug else settings.log_level.lower()
    logfire.configure(
        service_name="docwright",
        environment=settings.environment,
        send_to_logfire="if-token-present",
        console=logfire.ConsoleOptions(min_log_level=level),
    )


@app.command()
def version() -> None:
    """Show the CLI version."""
    console.print(f"docwright version {__version__}")


def main() -> None:
    """Main entry point for the CLI."""
    app()


__all__ = ["app", "main"]
