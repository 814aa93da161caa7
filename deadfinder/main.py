"""Dead Finder CLI - find unused components, functions, variables, imports and files."""
import json
from pathlib import Path
from typing import List, Optional

import click
import typer
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from deadfinder.analyzer.discovery import discover_files
from deadfinder.analyzer.engine import AnalysisResult, STRATEGIES, analyze, normalize_strategy
from deadfinder.config import __version__, create_sample_config, get_settings, resolve_config
from deadfinder.errors import DiscoveryFailure
from deadfinder.utils.logger import setup_logging
from deadfinder.utils.safe_console import SafeConsole

app = typer.Typer(
    name="deadfinder",
    help="Find dead code in React / Next.js projects",
    add_completion=False
)
# Use SafeConsole for Windows Unicode compatibility
console = SafeConsole()

DEFAULT_LIMIT = 50
# Rough share of unused source that would otherwise reach the bundle
BUNDLE_RATIO = 0.1


def _display_path(file_path: str, src_dir: Path) -> str:
    try:
        return Path(file_path).relative_to(src_dir).as_posix()
    except ValueError:
        return file_path


def _print_definitions(title: str, definitions, src_dir: Path, limit: int):
    """Print one category of unused definitions, capped at ``limit`` rows."""
    if not definitions:
        return

    table = Table(title=f"{title} ({len(definitions)})")
    table.add_column("Name", style="cyan")
    table.add_column("File", style="magenta", no_wrap=False)
    table.add_column("Line", style="green", justify="right")
    table.add_column("Exported", style="yellow")

    for definition in definitions[:limit]:
        table.add_row(
            escape(definition.name),
            escape(_display_path(definition.file_path, src_dir)),
            str(definition.line),
            "yes" if definition.exported else "",
        )

    console.print(table)
    if len(definitions) > limit:
        console.print(f"   ... and {len(definitions) - limit} more")
    console.print()


def _print_files(result: AnalysisResult, limit: int):
    if not result.unused_files:
        return

    files = sorted(result.unused_files, key=lambda f: f.size, reverse=True)
    table = Table(title=f"Unused Files ({len(files)})")
    table.add_column("File", style="cyan", no_wrap=False)
    table.add_column("Size", style="yellow", justify="right")

    for unused_file in files[:limit]:
        table.add_row(escape(unused_file.display_path), f"{unused_file.size_kb:.1f}KB")

    console.print(table)
    if len(files) > limit:
        console.print(f"   ... and {len(files) - limit} more")
    console.print()


def print_report(result: AnalysisResult, src_dir: Path, limit: int = DEFAULT_LIMIT):
    """Render an AnalysisResult as rich tables."""
    totals = result.totals
    total_issues = sum(totals.values())

    summary = Table(title="Summary", show_header=False)
    summary.add_column("Category", style="bold")
    summary.add_column("Count", justify="right")
    summary.add_row("Files analyzed", str(result.files_analyzed))
    summary.add_row("Total issues", str(total_issues))
    summary.add_row("Unused components", str(totals['components']))
    summary.add_row("Unused functions", str(totals['functions']))
    summary.add_row("Unused variables", str(totals['variables']))
    summary.add_row("Unused imports", str(totals['imports']))
    summary.add_row("Unused files", str(totals['files']))
    console.print(summary)
    console.print()

    _print_definitions("Unused Components", result.unused_components, src_dir, limit)
    _print_definitions("Unused Functions", result.unused_functions, src_dir, limit)
    _print_definitions("Unused Variables", result.unused_variables, src_dir, limit)
    _print_definitions("Unused Imports", result.unused_imports, src_dir, limit)
    _print_files(result, limit)

    total_kb = result.total_unused_bytes / 1024
    if total_kb > 0:
        console.print("[bold yellow]Potential Savings:[/bold yellow]")
        console.print(f"  File size reduction: {total_kb:.1f}KB")
        console.print(f"  Bundle size reduction: ~{total_kb * BUNDLE_RATIO:.1f}KB (estimated)")
        console.print()

    if result.warnings:
        console.print(f"[bold yellow]⚠ Warnings ({len(result.warnings)}):[/bold yellow] results may be partial")
        for warning in result.warnings:
            console.print(f"  • {escape(warning)}")
        console.print()

    if total_issues == 0:
        console.print("[bold green]✓ No dead code found![/bold green]")
    else:
        console.print("[dim]Review each finding before deleting: dynamic usages are not detected[/dim]")


@app.command()
def scan(
    src: Optional[str] = typer.Option(None, "--src", "-s", help="Source directory to scan (default: src)"),
    ignore: Optional[List[str]] = typer.Option(None, "--ignore", "-i", help="Glob pattern to ignore (repeatable)"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to a config file"),
    mode: Optional[str] = typer.Option(None, "--mode", "-m", help="Analysis strategy: structural (ast) or lexical (regex)"),
    limit: int = typer.Option(DEFAULT_LIMIT, "--limit", help="Maximum rows shown per category", min=1),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """Scan a source tree for unused definitions and files."""
    setup_logging("DEBUG" if verbose else get_settings().log_level)

    settings = resolve_config(src_dir=src, ignore_patterns=ignore, strategy=mode, config_path=config)

    try:
        strategy = normalize_strategy(settings.strategy)
    except ValueError as e:
        console.print(f"[bold red]✗ Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(1)

    src_dir = Path(settings.src_dir)
    try:
        files = discover_files(src_dir, settings.ignore_patterns)
    except DiscoveryFailure as e:
        console.print(f"[bold red]✗ Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(1)

    if not as_json:
        console.print(Panel(
            f"[bold blue]Scanning:[/bold blue] {escape(str(src_dir))}\n"
            f"[cyan]{len(files)}[/cyan] files, {strategy} analysis",
            title=f"deadfinder {__version__}",
            expand=False,
        ))

    result = analyze(files, strategy=strategy, src_dir=src_dir)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
    else:
        print_report(result, src_dir, limit)


@app.command()
def init(
    output: str = typer.Option("deadcoderc.json", "--output", "-o", help="Where to write the sample config"),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing file"),
):
    """Write a sample configuration file."""
    try:
        path = create_sample_config(output, force=force)
    except FileExistsError as e:
        console.print(f"[bold red]✗ Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(1)
    except OSError as e:
        console.print(f"[bold red]✗ Error:[/bold red] Could not write {escape(output)}: {escape(str(e))}")
        raise typer.Exit(1)

    console.print(f"[bold green]✓ Created sample config:[/bold green] {escape(str(path))}")
    console.print(f"[dim]Strategies: {', '.join(sorted(STRATEGIES))}[/dim]")


@app.command()
def version():
    """Print the version."""
    console.print(f"deadfinder {__version__}")


if __name__ == "__main__":
    app()
