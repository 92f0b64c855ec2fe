"""Shared CLI utilities for SQL Quest."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.markup import escape

# Single console instance reused across CLI modules
console = Console()


def print_exception(message: str, error: Exception, verbose: bool = False) -> None:
    """Render a formatted exception message.

    Args:
        message: Friendly context message to display before the exception.
        error: Original exception instance.
        verbose: When True, render the full traceback for debugging.
    """
    console.print(f"[red]{escape(message)}: {escape(str(error))}[/red]")
    if verbose:
        import traceback

        console.print(f"[dim]{''.join(traceback.format_exception(type(error), error, error.__traceback__))}[/dim]")


def setup_logging(level: str = "INFO", verbose: bool = False) -> None:
    """Configure root logging for CLI runs."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else getattr(logging, level.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
