"""Console utilities for rich output."""

import os
from typing import Any, Dict, Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from ..errors import SprigError

# Global console instance
_console: Optional[Console] = None


def get_console() -> Console:
    """Get or create the global console instance."""
    global _console
    if _console is None:
        quiet = os.environ.get("SPRIG_CLI_QUIET", "0") == "1"
        _console = Console(quiet=quiet)
    return _console


def print_error(message: str, title: str = "Error"):
    """Print an error message."""
    console = get_console()
    console.print(Panel(
        f"[bold red]{message}[/bold red]",
        title=f"[bold red]{title}[/bold red]",
        border_style="red"
    ))


def print_container_error(error: SprigError):
    """Print a container error with its cause chain and suggestions."""
    lines = [f"[bold red]{escape(error.message)}[/bold red]"]
    cause = error.__cause__
    while cause is not None:
        lines.append(escape(f"Caused by: {type(cause).__name__}: {cause}"))
        cause = cause.__cause__
    for suggestion in error.context.suggestions:
        lines.append(f"[yellow]Hint:[/yellow] {escape(suggestion)}")

    get_console().print(Panel(
        "\n".join(lines),
        title=f"[bold red]{type(error).__name__}[/bold red] [dim]({error.error_code})[/dim]",
        border_style="red"
    ))


def print_success(message: str, title: str = "Success"):
    """Print a success message."""
    console = get_console()
    console.print(Panel(
        f"[bold green]{message}[/bold green]",
        title=f"[bold green]{title}[/bold green]",
        border_style="green"
    ))


def create_bean_table(title: str, beans: Dict[str, Dict[str, Any]]) -> Table:
    """Build a table from the ``beans`` section of ``ApplicationContext.describe()``.

    Rows are sorted by bean name. Prototypes never show an instance.
    """
    table = Table(title=title, show_header=True, header_style="bold magenta")
    for column in ("Name", "Class", "Scope", "Lazy", "Instantiated"):
        table.add_column(column)

    for name in sorted(beans):
        bean = beans[name]
        if bean["scope"] == "prototype":
            instantiated = "[dim]per lookup[/dim]"
        elif bean["materialized"]:
            instantiated = "[green]yes[/green]"
        else:
            instantiated = "[dim]no[/dim]"
        table.add_row(name, bean["class"], bean["scope"], "yes" if bean["lazy"] else "no", instantiated)
    return table
