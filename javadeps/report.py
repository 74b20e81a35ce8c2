"""Rendering of discovery results for the terminal and for JSON consumers."""

from __future__ import annotations

import shlex
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

import typer
from rich.console import Console
from rich.table import Table

from .models import ClosureResult, RuleMatch


def staging_command(paths: Iterable[str]) -> str:
    """``git add`` command line for *paths*, sorted and shell-quoted."""
    return "git add " + " ".join(shlex.quote(p) for p in sorted(paths))


@dataclass
class DependencyReport:
    result: ClosureResult
    base_package: str
    changed: Optional[List[str]] = None

    @classmethod
    def build(cls, result: ClosureResult, base_package: str, changed: Optional[Iterable[str]] = None) -> "DependencyReport":
        return cls(
            result=result,
            base_package=base_package,
            changed=sorted(changed) if changed is not None else None,
        )

    @property
    def dependencies(self) -> List[str]:
        return self.result.sorted()

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "entry_file": self.result.entry_file,
            "base_package": self.base_package,
            "max_depth": self.result.max_depth,
            "depth": self.result.depth,
            "truncated": self.result.truncated,
            "dependencies": self.dependencies,
            "staging_command": staging_command(self.dependencies),
        }
        if self.changed is not None:
            data["changed"] = self.changed
            data["changed_staging_command"] = staging_command(self.changed) if self.changed else None
        return data

    def render_text(self, console: Console) -> None:
        deps = self.dependencies
        console.print(f"[bold green]✓[/bold green] Found {len(deps)} file(s) for [cyan]{self.result.entry_file}[/cyan]")
        console.print(f"[dim]  Base package: {self.base_package}  Depth: {self.result.depth}/{self.result.max_depth}[/dim]")
        if self.result.truncated:
            console.print(f"[yellow]⚠[/yellow] Maximum depth ({self.result.max_depth}) reached; the list may be incomplete.")
        console.print()

        # Paths and commands are meant to be copied; echo them unstyled.
        for dep in deps:
            typer.echo(dep)

        console.print("\n[bold]To stage these files:[/bold]")
        typer.echo(staging_command(deps))

        if self.changed is None:
            return

        console.print("\n[bold]Changed dependencies:[/bold]")
        if not self.changed:
            typer.echo("  (none)")
            return
        for path in self.changed:
            typer.echo(f"  {path}")
        console.print("\n[bold]To stage only the changed files:[/bold]")
        typer.echo(staging_command(self.changed))


def matches_table(file_path: str, matches: List[RuleMatch]) -> Table:
    table = Table(title=f"Rule matches in {file_path}")
    table.add_column("Rule", style="cyan")
    table.add_column("Token")
    table.add_column("Resolves to")
    for match in matches:
        table.add_row(match.rule, match.token, match.path or "[dim]unresolved[/dim]")
    return table
