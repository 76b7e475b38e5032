"""Rendering helpers for artifacts, change summaries and live streaming."""

from typing import List, Optional, Sequence

from rich.console import Console
from rich.markup import escape

from .models import FileChangeStats, PrData

RULE = "─" * 60


def print_rule(console: Console) -> None:
    console.print(f"[dim]{RULE}[/dim]")


class StreamPrinter:
    """Writes streamed text fragments straight to the console."""

    def __init__(self, console: Console, style: str = "cyan"):
        self.console = console
        self.style = style
        self.written = False

    def __call__(self, fragment: str) -> None:
        self.written = True
        self.console.print(fragment, end="", style=self.style,
                           markup=False, highlight=False, soft_wrap=True)

    def finish(self) -> None:
        if self.written:
            self.console.print()
        self.written = False


def display_commit_message(console: Console, message: str) -> None:
    console.print("\n[blue]Commit message:[/blue]")
    print_rule(console)
    console.print(message, style="cyan", markup=False, highlight=False)
    print_rule(console)


def display_pr(console: Console, data: PrData) -> None:
    console.print("\n[blue]Generated PR:[/blue]")
    print_rule(console)
    console.print(f"[bold white]Title:[/bold white] {escape(data.title)}")
    print_rule(console)
    if data.labels:
        labels = ", ".join(f'[cyan]"{escape(label)}"[/cyan]' for label in data.labels)
    else:
        labels = "[dim]none[/dim]"
    console.print(f"[bold white]Labels:[/bold white] {labels}")
    print_rule(console)
    console.print("[bold white]Description:[/bold white]")
    console.print(data.body, style="dim", markup=False, highlight=False)
    print_rule(console)


def print_stats_summary(console: Console, branch: str,
                        stats: Sequence[FileChangeStats],
                        base_branch: Optional[str] = None,
                        commits: Sequence[str] = ()) -> None:
    """Print the pre-analysis overview of what is about to be described."""
    console.print("\n[blue]Summary:[/blue]")
    if base_branch:
        console.print(f"[dim]   Branch: [/dim]{escape(branch)} → {escape(base_branch)}")
    else:
        console.print(f"[dim]   Branch: [/dim]{escape(branch)}")
    console.print(f"[dim]   Files: [/dim]{len(stats)}[dim] file(s) changed[/dim]")

    for line in _truncate([s.format_line() for s in stats], limit=10, keep=5):
        console.print(f"[dim]   • {escape(line)}[/dim]")

    if base_branch:
        console.print(f"[dim]   Commits: [/dim]{len(commits)}[dim] commit(s)[/dim]")
        for line in _truncate(list(commits), limit=5, keep=3):
            console.print(f"[dim]   • {escape(line)}[/dim]")


def _truncate(lines: List[str], limit: int, keep: int) -> List[str]:
    if len(lines) <= limit:
        return lines
    return lines[:keep] + [f"... and {len(lines) - keep} more"]
