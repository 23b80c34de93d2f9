#!/usr/bin/env python3

"""Shared rich consoles and logging setup for Kommit."""

import logging

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

console = Console()
err_console = Console(stderr=True)


def configure_logging(level: str = "WARNING") -> None:
    """Route stdlib logging through rich on stderr."""
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[
            RichHandler(console=err_console, show_path=False, markup=False)
        ],
        force=True,
    )


def print_error(message: str) -> None:
    """Print an error message to stderr."""
    err_console.print(f"[bold red]Error:[/bold red] {escape(message)}")
