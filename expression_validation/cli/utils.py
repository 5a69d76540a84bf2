"""
CLI utility functions for expr-validate.

Contains:
- Shared rich console
- Error display (print_error)
"""

from rich.console import Console
from rich.panel import Panel
from rich.text import Text


# Global Console
console = Console()


def print_error(title: str, message: str) -> None:
    """Print an error panel."""
    console.print(Panel(
        Text(message),
        title=f"[bold red]{title}[/]",
        border_style="red",
    ))
