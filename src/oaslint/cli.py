"""CLI interface for oaslint using Typer framework."""

import json as jsonlib
import logging
from pathlib import Path
from typing import Annotated, List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from oaslint import __description__, __version__
from oaslint.config import LogLevel, OaslintConfig, OutputFormat, load_config
from oaslint.diagnostics import RunResult, Severity, offset_to_line_col
from oaslint.errors import RulesFileError
from oaslint.linter import LintEngine, create_default_registry, load_rules, select_rules
from oaslint.utils import fetch_spec_from_portal

app = typer.Typer(
    name="oaslint",
    help=__description__,
    add_completion=False,
    rich_markup_mode="rich"
)

console = Console()
err_console = Console(stderr=True)

_LOG_LEVELS = {
    LogLevel.ERROR.value: logging.ERROR,
    LogLevel.WARN.value: logging.WARNING,
    LogLevel.INFO.value: logging.INFO,
    LogLevel.DEBUG.value: logging.DEBUG,
}

_SEVERITY_STYLES = {
    Severity.ERROR: "red",
    Severity.WARNING: "yellow",
    Severity.INFO: "blue",
}


def version_callback(value: bool) -> None:
    """Show version information and exit."""
    if value:
        console.print(f"oaslint version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option("--version", "-v", callback=version_callback, help="Show version and exit")
    ] = False,
) -> None:
    """oaslint - Pluggable rule engine for OpenAPI documents."""


def _load_config_or_exit(config_path: Optional[Path]) -> OaslintConfig:
    try:
        config = load_config(config_path)
    except ValueError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    _configure_logging(config.logging.level)
    return config


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=_LOG_LEVELS.get(level, logging.WARNING),
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _print_table(result: RunResult, text: str, spec_file: Path) -> None:
    title = result.title or spec_file.name
    console.print(f"[green]Linted:[/green] {escape(title)}")

    if not result.diagnostics:
        console.print("[green]No issues found[/green]")
        return

    table = Table()
    table.add_column("Location", style="cyan", no_wrap=True)
    table.add_column("Severity")
    table.add_column("Source", style="magenta")
    table.add_column("Message", style="white")

    for diagnostic in result.diagnostics:
        line, column = offset_to_line_col(text, diagnostic.start)
        style = _SEVERITY_STYLES[diagnostic.severity]
        table.add_row(
            f"{line}:{column}",
            f"[{style}]{diagnostic.severity.value}[/{style}]",
            escape(diagnostic.source),
            escape(diagnostic.message),
        )

    console.print(table)
    counts = result.counts_by_severity()
    console.print(
        f"{counts['error']} error(s), {counts['warning']} warning(s), {counts['info']} info"
    )


@app.command()
def lint(
    spec_file: Annotated[
        Path,
        typer.Argument(help="OpenAPI document to lint (YAML or JSON)")
    ],
    rules_file: Annotated[
        Path,
        typer.Option("--rules", "-r", help="Rule-set file (YAML or JSON)")
    ],
    rule_ids: Annotated[
        Optional[List[str]],
        typer.Option("--rule", help="Only run rules with this id or function name (repeatable)")
    ] = None,
    format: Annotated[
        Optional[str],
        typer.Option("--format", "-f", help="Output format: table, json (default: from config)")
    ] = None,
    config: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Configuration file path (default: search for .oaslint.json)")
    ] = None,
) -> None:
    """Lint an OpenAPI document with a rule set."""
    oaslint_config = _load_config_or_exit(config)
    output_format = format or oaslint_config.output.format
    valid_formats = [f.value for f in OutputFormat]

    if output_format not in valid_formats:
        console.print(f"[red]Error:[/red] Invalid format '{escape(output_format)}'. Must be one of: {', '.join(valid_formats)}")
        raise typer.Exit(1)

    try:
        text = spec_file.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        console.print(f"[red]Error:[/red] Cannot read {escape(str(spec_file))}: {escape(str(e))}")
        raise typer.Exit(1)

    try:
        rules = load_rules(rules_file)
    except RulesFileError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    if rule_ids:
        rules = select_rules(rules, rule_ids)

    engine = LintEngine(config=oaslint_config.engine)
    result = engine.run_sync(text, rules)

    if output_format == OutputFormat.JSON.value:
        typer.echo(jsonlib.dumps(result.to_dict(), indent=2))
    else:
        _print_table(result, text, spec_file)

    raise typer.Exit(result.exit_code)


@app.command("rules")
def list_rules() -> None:
    """List the rule functions available to rule sets."""
    registry = create_default_registry()

    table = Table(title="Rule functions")
    table.add_column("Function", style="cyan")
    table.add_column("Description", style="white")

    for identifier in registry.identifiers():
        check = registry.resolve(identifier)
        doc = (check.__doc__ or "").strip().split("\n")[0]
        table.add_row(identifier, escape(doc))

    console.print(table)


@app.command()
def fetch(
    repo: Annotated[str, typer.Argument(help="Repository name on the documents portal")],
    path: Annotated[str, typer.Argument(help="Document path inside the repository")],
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="Write the document to this file instead of stdout")
    ] = None,
    config: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Configuration file path (default: search for .oaslint.json)")
    ] = None,
) -> None:
    """Fetch a document from the documents portal."""
    oaslint_config = _load_config_or_exit(config)

    document = fetch_spec_from_portal(repo, path, oaslint_config.portal)
    if document is None:
        console.print(f"[red]Error:[/red] Could not fetch {escape(path)} from {escape(repo)}")
        raise typer.Exit(1)

    text = document if isinstance(document, str) else jsonlib.dumps(document, indent=2)
    if output:
        output.write_text(text, encoding="utf-8")
        console.print(f"[green]Saved:[/green] {escape(str(output))}")
    else:
        typer.echo(text)


if __name__ == "__main__":
    app()
