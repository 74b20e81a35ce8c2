"""Typer-based CLI for javadeps."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict
from pathlib import Path
from typing import List, NoReturn, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from . import __version__, config
from .changes import ChangedFileProvider, GitDiffProvider, StaticChangedFileProvider
from .config_manager import Settings, load_settings, reset_config, save_setting, settings_as_dict
from .errors import ConfigurationError
from .orchestrator import DependencyFinder
from .report import DependencyReport, matches_table

console = Console()
err_console = Console(stderr=True)

app = typer.Typer(
    help="🔗 javadeps: find the Java files a class transitively depends on.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

config_app = typer.Typer(
    help="⚙️  Configuration: defaults stored in the javadeps config file.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)
app.add_typer(config_app, name="config")


def version_callback(value: bool):
    """Print version and exit."""
    if value:
        typer.echo(f"javadeps v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    )
):
    """javadeps: heuristic dependency discovery for Java source trees."""
    pass


def setup_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_time=False, show_path=False)],
        force=True,
    )


def _fail(message: str) -> NoReturn:
    err_console.print(f"[red]✗[/red] {message}")
    raise typer.Exit(1)


def _settings(
    src_root: Optional[str] = None,
    segments: Optional[int] = None,
    collision: Optional[str] = None,
) -> Settings:
    """Config file values with command-line overrides applied."""
    settings = load_settings()
    if src_root is not None:
        settings.src_root = src_root
    if segments is not None:
        settings.base_package_segments = segments
    if collision is not None:
        settings.collision_strategy = collision.lower()
    return settings.validate()


def _check_format(fmt: str) -> str:
    fmt = fmt.lower()
    if fmt not in {"text", "json"}:
        raise typer.BadParameter("Format must be one of: text, json")
    return fmt


_SRC_ROOT_HELP = f"Source root, relative to the project root (default: {config.DEFAULT_SRC_ROOT})."


@app.command("find")
def find(
    entry_file: str = typer.Argument(..., help="Java file to start from, relative to the project root or the current directory."),
    src_root: Optional[str] = typer.Option(None, "--src-root", "-s", help=_SRC_ROOT_HELP),
    project_root: Path = typer.Option(Path("."), "--project-root", "-p", help="Project (and git) root."),
    base_package: Optional[str] = typer.Option(
        None, "--base-package", "-b", help="Only follow imports under this package (auto-detected if omitted)."
    ),
    segments: Optional[int] = typer.Option(
        None, "--segments", min=1, help="Package segments used when auto-detecting the base package."
    ),
    max_depth: Optional[int] = typer.Option(None, "--max-depth", "-d", min=1, help="Maximum traversal depth."),
    collision: Optional[str] = typer.Option(
        None, "--collision", help="Duplicate type names: last, first, error or all."
    ),
    show_changes: bool = typer.Option(
        True, "--changes/--no-changes", help="Also list dependencies changed in git."
    ),
    diff_ref: Optional[str] = typer.Option(None, "--diff-ref", help="Compare against this git ref."),
    changed: Optional[List[str]] = typer.Option(
        None, "--changed", help="Treat these files as changed instead of asking git (repeatable)."
    ),
    fmt: str = typer.Option("text", "--format", "-f", help="Output format: text or json."),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging."),
):
    """Find every project file ENTRY_FILE depends on, transitively.

    Example:
      javadeps find src/main/java/com/example/web/UserController.java
      javadeps find UserController.java -b com.example --no-changes -f json
    """
    setup_logging(verbose)
    fmt = _check_format(fmt)

    try:
        settings = _settings(src_root, segments, collision)
        finder = DependencyFinder(settings, project_root=project_root)
        entry = finder.entry_path(entry_file)
        base = base_package or finder.base_package_for(entry)
        result = finder.find(entry, base_package=base, max_depth=max_depth)
    except ConfigurationError as exc:
        _fail(str(exc))

    changed_deps = None
    if show_changes:
        provider: ChangedFileProvider
        if changed:
            provider = StaticChangedFileProvider(changed, project_root=project_root)
        else:
            provider = GitDiffProvider(
                project_root,
                command=settings.diff_command,
                ref=diff_ref,
                extension=settings.source_extension,
            )
        changed_deps = finder.changed(result, provider)

    report = DependencyReport.build(result, base, changed_deps)
    if fmt == "json":
        typer.echo(json.dumps(report.to_dict(), indent=2))
    else:
        report.render_text(console)


@app.command("explain")
def explain(
    file_path: str = typer.Argument(..., help="Java file whose rule matches should be shown."),
    src_root: Optional[str] = typer.Option(None, "--src-root", "-s", help=_SRC_ROOT_HELP),
    project_root: Path = typer.Option(Path("."), "--project-root", "-p", help="Project root."),
    base_package: Optional[str] = typer.Option(None, "--base-package", "-b", help="Base package for imports."),
    segments: Optional[int] = typer.Option(None, "--segments", min=1, help="Base package auto-detection segments."),
    fmt: str = typer.Option("text", "--format", "-f", help="Output format: text or json."),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging."),
):
    """Show which extraction rule matched what in a single file."""
    setup_logging(verbose)
    fmt = _check_format(fmt)

    try:
        finder = DependencyFinder(_settings(src_root, segments), project_root=project_root)
        entry = finder.entry_path(file_path)
        matches = finder.explain(entry, base_package=base_package)
    except ConfigurationError as exc:
        _fail(str(exc))

    if fmt == "json":
        typer.echo(json.dumps([asdict(m) for m in matches], indent=2))
        return
    if not matches:
        console.print(f"No rule matched in {entry}.")
        return
    console.print(matches_table(entry, matches))


@app.command("index")
def index(
    src_root: Optional[str] = typer.Option(None, "--src-root", "-s", help=_SRC_ROOT_HELP),
    project_root: Path = typer.Option(Path("."), "--project-root", "-p", help="Project root."),
    show_collisions: bool = typer.Option(False, "--collisions", help="List type names defined more than once."),
):
    """Build the type-name index and report its size."""
    setup_logging()
    try:
        # "all" keeps every duplicate so they can be listed; it never raises.
        finder = DependencyFinder(_settings(src_root, collision="all"), project_root=project_root)
        name_index = finder.name_index
    except ConfigurationError as exc:
        _fail(str(exc))

    console.print(f"Indexed {len(name_index)} type name(s) under {finder.src_root}")
    console.print(f"Names defined more than once: {len(name_index.collisions)}")
    if show_collisions:
        for name in sorted(name_index.collisions):
            typer.echo(name)
            for path in name_index.collisions[name]:
                typer.echo(f"  {path}")


@config_app.command("show")
def config_show():
    """Print the effective settings."""
    try:
        settings = load_settings()
    except ConfigurationError as exc:
        _fail(str(exc))
    typer.echo(f"# {config.CONFIG_FILE}")
    for key, value in settings_as_dict(settings).items():
        if isinstance(value, list):
            value = " ".join(value)
        typer.echo(f"{key} = {value}")


@config_app.command("set")
def config_set(
    key: str = typer.Argument(..., help="Setting name, e.g. max_depth."),
    value: str = typer.Argument(..., help="New value."),
):
    """Persist a default setting."""
    try:
        save_setting(key, value)
    except ConfigurationError as exc:
        _fail(str(exc))
    console.print(f"[green]✓[/green] {key} = {value}")


@config_app.command("reset")
def config_reset():
    """Drop all saved settings and return to the built-in defaults."""
    try:
        removed = reset_config()
    except ConfigurationError as exc:
        _fail(str(exc))
    typer.echo("Settings reset to defaults." if removed else "No saved settings.")


if __name__ == "__main__":
    app()
