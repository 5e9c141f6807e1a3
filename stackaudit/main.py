"""
CLI interface for stackaudit.

Usage:
    stackaudit check                       # Run all checks from stackAudit.config.json
    stackaudit check --verbose             # Show messages of passing checks too
    stackaudit check --json                # JSON output (implies --ci)
    stackaudit check --trust-commands      # Allow non-allowlisted commands
    stackaudit init --detect               # Generate a config from the local environment

Exit codes: 0 - all checks passed, 1 - at least one check failed,
2 - configuration could not be loaded.
"""

import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape

from . import __version__
from .checkers import PipelineOptions
from .config import load_config
from .core.exceptions import ConfigError
from .orchestrator import run_audit
from .reports.generator import ReportGenerator
from .scaffold import build_config, resolve_cwd, write_config
from .settings import get_settings

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_CONFIG_ERROR = 2

app = typer.Typer(
    name="stackaudit",
    help="Audit your development environment against a declarative configuration file.",
    no_args_is_help=True,
)
console = Console()
err_console = Console(stderr=True)

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    """Настроить логирование (в stderr, чтобы не ломать --json)."""
    level = logging.DEBUG if verbose else get_settings().log_level.upper()
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        stream=sys.stderr,
    )


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"stackaudit {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None, "--version", callback=_version_callback, is_eager=True, help="Show version and exit."
    ),
):
    """stackaudit - environment audit for development projects."""


@app.command()
def check(
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to config file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show detailed output for all checks"),
    ci: bool = typer.Option(False, "--ci", help="CI mode - no spinners, plain output"),
    json_output: bool = typer.Option(False, "--json", help="Output results as JSON (implies --ci)"),
    trust_commands: bool = typer.Option(
        False, "--trust-commands", help="Allow execution of custom commands not on the safe allowlist"
    ),
    sequential: bool = typer.Option(False, "--sequential", help="Run checkers one at a time"),
    output_file: Optional[Path] = typer.Option(None, "--output-file", "-o", help="Also write the JSON report to a file"),
):
    """✅ Run all environment checks defined in the config file."""
    setup_logging(verbose and not json_output)
    settings = get_settings()
    silent = ci or json_output

    try:
        audit_config = load_config(config or settings.config_file)
    except ConfigError as e:
        err_console.print(f"[bold red]Error:[/] {escape(str(e))}", highlight=False)
        raise typer.Exit(EXIT_CONFIG_ERROR)

    if not silent:
        console.print(f"[green]✔[/] Loaded config for [bold]{escape(audit_config.project_name)}[/]", highlight=False)

    options = PipelineOptions(
        trust_commands=trust_commands,
        port_timeout_ms=settings.port_timeout_ms,
        command_timeout_ms=settings.command_timeout_ms,
        checker_timeout_seconds=settings.checker_timeout_seconds,
    )

    if silent:
        report = asyncio.run(run_audit(audit_config, options, parallel=not sequential))
    else:
        with console.status("[bold blue]Running checks...[/]"):
            report = asyncio.run(run_audit(audit_config, options, parallel=not sequential))

    generator = ReportGenerator(console=console)
    if json_output:
        typer.echo(generator.to_json(report))
    else:
        generator.render(report, verbose=verbose)

    if output_file:
        generator.write(report, output_file, fmt="json")
        logger.info(f"Report written to {output_file}")

    raise typer.Exit(EXIT_OK if report.passed else EXIT_FAILED)


@app.command()
def init(
    detect: bool = typer.Option(False, "--detect", "-d", help="Auto-detect installed tools and populate config"),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing config file"),
):
    """🛠 Generate a starter stackAudit.config.json in the current directory."""
    setup_logging()
    cwd = resolve_cwd()

    if detect:
        console.print("[blue]ℹ[/] Scanning environment...\n")

    try:
        config = asyncio.run(
            build_config(cwd, detect=detect, report=lambda message: console.print(f"[green]✔[/] {message}"))
        )
        path = write_config(config, cwd, force=force)
    except ConfigError as e:
        err_console.print(f"[bold red]Error:[/] {escape(str(e))}", highlight=False)
        raise typer.Exit(EXIT_FAILED)

    console.print(f"[green]✔[/] Created {path.name}. Customize it for your project.")


if __name__ == "__main__":
    app()
