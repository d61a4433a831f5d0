"""Shared console and logging helpers for the Grablin CLI.

Every user-facing line goes through the shared Rich ``console`` so output
styling stays consistent across commands. Library modules never print; they
log through :mod:`logging`, and :func:`configure_logging` routes those records
to the same console via ``RichHandler``.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from rich.console import Console
from rich.logging import RichHandler
from rich.status import Status

console = Console()

LOGGER_NAME = "grablin"

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------


def configure_logging(verbose: bool = False) -> logging.Logger:
    """Attach a Rich handler to the ``grablin`` logger.

    Calling this more than once replaces the previous handler instead of
    stacking duplicates.

    Args:
        verbose: Emit DEBUG records when ``True``; WARNING and above otherwise.

    Returns:
        The configured package logger.
    """
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)

    handler = RichHandler(console=console, show_time=False, show_path=False, markup=False)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    logger.propagate = False
    return logger


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]✓[/bold green] {message}", highlight=False)


def print_error(message: str) -> None:
    """Print a red error message."""
    console.print(f"[bold red]✗[/bold red] {message}", highlight=False)


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]⚠[/bold yellow] {message}", highlight=False)


def print_info(message: str) -> None:
    """Print a blue informational message."""
    console.print(f"[bold blue]ℹ[/bold blue] {message}", highlight=False)


def print_dim(message: str) -> None:
    console.print(f"[dim]{message}[/dim]", highlight=False)


def print_section(title: str) -> None:
    """Print a bold section title followed by a dim rule."""
    console.print()
    console.print(f"[bold]{title}[/bold]")
    console.print(f"[dim]{'─' * 40}[/dim]")


def print_kv(key: str, value: str) -> None:
    """Print an indented ``key: value`` line."""
    console.print(f"  [dim]{key}:[/dim] {value}", highlight=False)


def print_list(items: list[str]) -> None:
    """Print a bulleted list."""
    for item in items:
        console.print(f"  [dim]•[/dim] {item}", highlight=False)


def print_json(data: Any) -> None:
    """Print *data* as pretty JSON, unwrapped and without Rich markup."""
    console.print(
        json.dumps(data, indent=2, ensure_ascii=False, default=str),
        markup=False,
        highlight=False,
        soft_wrap=True,
    )


def create_status(message: str) -> Status:
    """Create a Rich spinner for a long-running step.

    Returns:
        A ``Status`` instance suitable for use as a context manager.
    """
    return console.status(message, spinner="dots")
