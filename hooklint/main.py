"""hooklint CLI - find React effects that couple a child's state to its parent."""
import json
from pathlib import Path
from typing import Iterable, List, Optional

import typer
from rich.table import Table
from rich.markup import escape

from hooklint.utils.safe_console import SafeConsole
from hooklint.analyzer.cache import ResultCache
from hooklint.analyzer.parser import LanguageParser
from hooklint.analyzer.rules import RULES, Diagnostic, RuleRunner, lint_file
from hooklint.config import __version__, get_config

app = typer.Typer(
    name="hooklint",
    help="Find React effects that couple a child component's state to its parent",
    add_completion=False
)
console = SafeConsole(force_terminal=True)

# Cache management sub-command
cache_app = typer.Typer(name="cache", help="Manage the hooklint result cache")

# Never linted
ALWAYS_EXCLUDED = {'.git', '.hg', '.svn', '__pycache__'}

# Skipped unless --include-vendored
VENDORED_DIRS = {
    'node_modules', 'bower_components', 'vendor', 'third_party', 'extern',
    'dist', 'build', 'out', 'coverage', '.next', '.nuxt',
}


def is_excluded(path: Path, root: Path, excluded: Iterable[str]) -> bool:
    """True if any directory between ``root`` and ``path`` is excluded."""
    try:
        parts = path.relative_to(root).parts[:-1]
    except ValueError:
        parts = path.parts[:-1]
    excluded = {name.lower() for name in excluded}
    return any(part.lower() in excluded for part in parts)


def discover_files(paths: List[Path], include_vendored: bool = False,
                   cache_dir: str = ".hooklint_cache") -> List[Path]:
    """Expand files and directories into the lintable files beneath them.

    Files named explicitly are always kept when their extension is supported.
    """
    excluded = ALWAYS_EXCLUDED | {Path(cache_dir).name}
    if not include_vendored:
        excluded |= VENDORED_DIRS

    found = {}
    for path in paths:
        if path.is_file():
            if path.suffix.lower() in LanguageParser.SUPPORTED_LANGUAGES:
                found[path] = None
            continue
        for file_path in path.rglob('*'):
            if not file_path.is_file():
                continue
            if file_path.suffix.lower() not in LanguageParser.SUPPORTED_LANGUAGES:
                continue
            if is_excluded(file_path, path, excluded):
                continue
            found[file_path] = None
    return sorted(found)


def _display_path(file_path: str) -> str:
    try:
        return str(Path(file_path).relative_to(Path.cwd()))
    except ValueError:
        return file_path


def _print_table(diagnostics: List[Diagnostic]):
    table = Table(title="Effect Diagnostics")
    table.add_column("File", style="cyan", no_wrap=False)
    table.add_column("Line", style="green", justify="right")
    table.add_column("Col", style="green", justify="right")
    table.add_column("Rule", style="yellow")
    table.add_column("Message", style="white", no_wrap=False)

    for diagnostic in diagnostics:
        table.add_row(
            escape(_display_path(diagnostic.file_path)),
            str(diagnostic.line),
            str(diagnostic.column + 1),
            diagnostic.rule,
            escape(diagnostic.message),
        )

    console.print(table)


@app.command()
def check(
    paths: Optional[List[str]] = typer.Argument(None, help="Files or directories to lint (default: .)"),
    as_json: bool = typer.Option(False, "--json", help="Print diagnostics as a JSON array"),
    no_cache: bool = typer.Option(False, "--no-cache", help="Ignore and do not update the result cache"),
    include_vendored: bool = typer.Option(False, "--include-vendored", help="Also lint node_modules, build output and vendored code"),
    disable: Optional[List[str]] = typer.Option(None, "--disable", "-d", help="Rule to suppress (repeatable)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Print every file as it is linted"),
):
    """Lint JavaScript and TypeScript sources for parent/child coupled effects."""
    try:
        config = get_config()
        runner = RuleRunner(set(config.disabled_rules) | set(disable or []))
    except ValueError as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(2)

    targets = [Path(p).resolve() for p in (paths or ["."])]
    for target in targets:
        if not target.exists():
            console.print(f"[bold red]Error:[/bold red] Path does not exist: {escape(str(target))}")
            raise typer.Exit(2)

    files = discover_files(targets, include_vendored=include_vendored, cache_dir=config.cache_dir)
    hooks = config.hook_names()
    global_names = config.global_names

    cache = None if no_cache else ResultCache(Path.cwd(), config.fingerprint(), config.cache_dir)
    diagnostics: List[Diagnostic] = []
    try:
        for file_path in files:
            found = cache.get_file_diagnostics(file_path) if cache else None
            if found is not None:
                if verbose:
                    console.print(f"[dim]↻ {escape(_display_path(str(file_path)))}[/dim]")
            else:
                if verbose:
                    console.print(f"[dim]→ {escape(_display_path(str(file_path)))}[/dim]")
                found = lint_file(file_path, hooks=hooks, global_names=global_names)
                if found is None:
                    continue
                if cache:
                    cache.set_file_diagnostics(file_path, found)
            diagnostics.extend(runner.select(found))
    finally:
        if cache:
            cache.close()

    if as_json:
        typer.echo(json.dumps([d.to_dict() for d in diagnostics], indent=2))
    elif diagnostics:
        _print_table(diagnostics)
        affected = len({d.file_path for d in diagnostics})
        console.print(f"\n[bold red]✗ {len(diagnostics)} problem(s) in {affected} file(s)[/bold red]")
    else:
        console.print(f"[bold green]✓ No problems found in {len(files)} file(s)[/bold green]")

    if diagnostics:
        raise typer.Exit(1)


@app.command()
def rules():
    """List the available rules."""
    table = Table(title="Rules")
    table.add_column("Rule", style="cyan")
    table.add_column("Message ID", style="yellow")
    table.add_column("Description", style="white", no_wrap=False)

    for rule in RULES:
        table.add_row(rule.name, rule.message_id, rule.description)

    console.print(table)


@app.command()
def version():
    """Print the hooklint version."""
    console.print(f"hooklint {__version__}")


# =========================================================================
# CACHE MANAGEMENT COMMANDS
# =========================================================================

def _open_cache(project_path: str) -> ResultCache:
    project_path = Path(project_path).resolve()

    if not project_path.exists():
        console.print(f"[bold red]Error:[/bold red] Project path does not exist: {escape(str(project_path))}")
        raise typer.Exit(2)

    try:
        config = get_config()
    except ValueError as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(2)

    return ResultCache(project_path, config.fingerprint(), config.cache_dir)


@cache_app.command("clear")
def cache_clear(
    project_path: str = typer.Argument(".", help="Project root path"),
):
    """Clear the result cache for a project.

    The next check re-lints every file.
    """
    with _open_cache(project_path) as cache:
        cache.clear_cache()

    console.print(f"[green]✓ Cache cleared for {escape(str(Path(project_path).resolve()))}[/green]")


@cache_app.command("stats")
def cache_stats(
    project_path: str = typer.Argument(".", help="Project root path"),
):
    """Display cache statistics for a project."""
    with _open_cache(project_path) as cache:
        stats = cache.get_cache_stats()

    table = Table(title=f"Cache Statistics: {escape(str(Path(project_path).resolve()))}", show_header=True, header_style="bold cyan")
    table.add_column("Metric", style="cyan")
    table.add_column("Count", justify="right", style="green")

    table.add_row("Total Files Cached", str(stats['total_files']))
    table.add_row("Files With Diagnostics", str(stats['files_with_diagnostics']))
    table.add_row("Diagnostics Cached", str(stats['diagnostics_cached']))

    console.print(table)


# Register cache sub-command
app.add_typer(cache_app)


@app.callback()
def main():
    """hooklint - find effects that couple a child component to its parent."""
    pass


if __name__ == "__main__":
    app()
